"""Bounded regeneration loop around the generation backend.

The orchestrator is an explicit state machine:

    ATTEMPT(n) -> SUCCESS              candidate validates and is not rejected
    ATTEMPT(n) -> ATTEMPT(n + 1)       failure and n < max_attempts
    ATTEMPT(n) -> FALLBACK             failure and n == max_attempts,
                                       no generator, or deadline passed

Generator exceptions never leave the loop: they count as a failed attempt.
One orchestrator instance owns the state of one request.
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional, Union

from .categories import (
    ContractType,
    FailurePattern,
    GenerationAttempt,
    GenerationResult,
    OrchestratorState,
    RejectionResult,
    ValidationResult,
)
from .config import EngineConfig
from .failure_analyzer import analyze
from .fallback_templates import load_fallback
from .profile_selector import classify, infer_user_experience
from .prompt_builder import enhance
from .repair import clean_generated_code
from .validator import CadenceValidator

GenerateFn = Callable[[str, str, float], str]


def _resolve_generate(generator) -> Optional[GenerateFn]:
    if generator is None:
        return None
    generate = getattr(generator, "generate", None)
    if callable(generate):
        return generate
    if callable(generator):
        return generator
    raise TypeError("generator must be callable or expose a generate() method")


class RegenerationOrchestrator:
    """Drives attempts until one passes validation or the fallback is used."""

    def __init__(
        self,
        generator: Union[GenerateFn, object, None] = None,
        config: Optional[EngineConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        debug: Optional[bool] = None,
    ):
        self.config = config or EngineConfig()
        self.debug = self.config.debug if debug is None else debug
        self._generate = _resolve_generate(generator)
        self._clock = clock
        self.validator = CadenceValidator(config=self.config.validator, debug=self.debug)

        self.state = OrchestratorState.ATTEMPT
        self.failure_history: List[FailurePattern] = []
        self.attempts: List[GenerationAttempt] = []

    def _log(self, message: str):
        if self.debug:
            print(f"[Orchestrator] {message}")

    def _deadline_passed(self, deadline: Optional[float]) -> bool:
        return deadline is not None and self._clock() >= deadline

    def run(self, prompt: str, context: Optional[str] = None, temperature: Optional[float] = None) -> GenerationResult:
        if self.state != OrchestratorState.ATTEMPT:
            raise RuntimeError("RegenerationOrchestrator instances handle a single request")

        retry = self.config.retry
        contract_type = classify(prompt)
        user_experience = infer_user_experience(prompt, context or "")
        base_temperature = self.config.enhancer.base_temperature if temperature is None else temperature
        deadline = self._clock() + retry.deadline_seconds if retry.deadline_seconds is not None else None

        self._log(f"Contract type: {contract_type.category.value} ({contract_type.complexity.value})")

        if self._generate is None:
            self._log("No generator available, using fallback")
            self.state = OrchestratorState.FALLBACK

        attempt_number = 1
        while self.state == OrchestratorState.ATTEMPT:
            if self._deadline_passed(deadline):
                self._log(f"Deadline passed before attempt {attempt_number}, using fallback")
                self.state = OrchestratorState.FALLBACK
                break

            record = self._attempt(
                attempt_number,
                prompt,
                contract_type,
                context or "",
                user_experience,
                base_temperature,
            )
            self.attempts.append(record)

            if record.succeeded:
                self._log(f"Attempt {attempt_number} passed validation")
                self.state = OrchestratorState.SUCCESS
                break

            self.failure_history.extend(analyze(record.validation, record.rejection))

            if attempt_number >= retry.max_attempts:
                self._log(f"All {retry.max_attempts} attempts failed, using fallback")
                self.state = OrchestratorState.FALLBACK
            else:
                attempt_number += 1

        if self.state == OrchestratorState.SUCCESS:
            final = self.attempts[-1]
            return GenerationResult(
                code=final.result_text,
                validation=final.validation,
                rejected=False,
                contract_type=contract_type,
                attempts=len(self.attempts),
                used_fallback=False,
                failure_history=list(self.failure_history),
                attempt_log=list(self.attempts),
            )

        return self._fallback(contract_type)

    def _attempt(
        self,
        attempt_number: int,
        prompt: str,
        contract_type: ContractType,
        context: str,
        user_experience,
        base_temperature: float,
    ) -> GenerationAttempt:
        strict_mode = attempt_number >= self.config.retry.strict_from_attempt
        enhanced = enhance(
            prompt,
            contract_type,
            attempt_number,
            failure_history=self.failure_history,
            strict_mode=strict_mode,
            base_temperature=base_temperature,
            context=context,
            user_experience=user_experience,
            config=self.config.enhancer,
            max_attempts=self.config.retry.max_attempts,
            debug=self.debug,
        )

        self._log(
            f"Attempt {attempt_number}/{self.config.retry.max_attempts} "
            f"level={enhanced.enhancement_level.value} temperature={enhanced.temperature} strict={strict_mode}"
        )

        record = GenerationAttempt(
            index=attempt_number,
            temperature=enhanced.temperature,
            strict_mode=strict_mode,
            enhancement_level=enhanced.enhancement_level,
        )

        try:
            raw = self._generate(enhanced.system_prompt, enhanced.user_prompt, enhanced.temperature)
        except Exception as e:
            self._log(f"Generator failed on attempt {attempt_number}: {e}")
            record.error = str(e)
            record.validation = _generation_failure(f"Generation failed: {e}")
            record.rejection = RejectionResult(should_reject=False)
            return record

        if raw is not None and not isinstance(raw, str):
            self._log(f"Generator returned {type(raw).__name__} on attempt {attempt_number}")
            record.error = f"non-text output ({type(raw).__name__})"
            record.validation = _generation_failure("Generation returned non-text output")
            record.rejection = RejectionResult(should_reject=False)
            return record

        code = clean_generated_code(raw or "")
        if not code:
            record.error = "empty output"
            record.validation = _generation_failure("Generation returned empty output")
            record.rejection = RejectionResult(should_reject=False)
            return record

        record.result_text = code
        record.validation = self.validator.validate(code)
        record.rejection = self.validator.should_reject_code(code)

        if not record.succeeded:
            self._log(f"Attempt {attempt_number} failed: {record.validation.errors[:3]} {record.rejection.reason}")
        return record

    def _fallback(self, contract_type: ContractType) -> GenerationResult:
        self.state = OrchestratorState.FALLBACK
        code = load_fallback(contract_type.category)
        last_reason = next(
            (a.rejection.reason for a in reversed(self.attempts) if a.rejection and a.rejection.should_reject),
            None,
        )
        return GenerationResult(
            code=code,
            validation=self.validator.validate(code),
            rejected=False,
            contract_type=contract_type,
            attempts=len(self.attempts),
            used_fallback=True,
            rejection_reason=last_reason,
            failure_history=list(self.failure_history),
            attempt_log=list(self.attempts),
        )


def _generation_failure(message: str) -> ValidationResult:
    """Synthetic result for a generation call that produced no candidate."""
    return ValidationResult(
        is_valid=False,
        errors=[f"{message} (no candidate produced, output incomplete)"],
        score=0,
        compilation_success=False,
        critical_count=1,
    )
