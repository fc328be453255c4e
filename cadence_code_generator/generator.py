"""High-level entry points of the Cadence generation engine.

This is the module the rest of the application should call:

    from cadence_code_generator import generate_with_validation, validate

Every call to generate_with_validation builds its own
RegenerationOrchestrator, so concurrent requests never share state. The
function always returns usable Cadence code: when the model keeps failing
(or no model is configured) a pre-validated fallback contract is returned.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .categories import ComplianceReport, ContractType, GenerationResult, RejectionResult, ValidationResult
from .code_generator import RegenerationOrchestrator
from .config import EngineConfig, load_engine_config
from .coverage_mapper import check_compliance as _check_compliance
from .llm_utils import OpenAIGenerator
from .profile_selector import classify as _classify
from .validator import CadenceValidator


def default_generator(config: EngineConfig) -> Optional[OpenAIGenerator]:
    """OpenAI backend when an API key is configured, otherwise None."""
    if not config.generator.api_key:
        return None
    return OpenAIGenerator(config=config.generator, debug=config.debug)


def generate_with_validation(
    prompt: str,
    context: Optional[str] = None,
    temperature: Optional[float] = None,
    generator=None,
    config: Optional[EngineConfig] = None,
) -> GenerationResult:
    """Generate a Cadence contract for prompt, retrying with stricter prompts.

    Args:
        prompt: Natural language description of the contract.
        context: Optional extra context appended to the request.
        temperature: Base sampling temperature (defaults to the config value).
        generator: generate(system_prompt, user_prompt, temperature) callable
            or an object with a generate() method. Defaults to the OpenAI
            backend when an API key is configured.
        config: Engine configuration (defaults to load_engine_config()).

    Returns:
        GenerationResult with the code, its validation and attempt metadata.

    Raises:
        TypeError: generator is neither callable nor has a generate() method.
    """
    config = config or load_engine_config()
    if generator is None:
        generator = default_generator(config)

    orchestrator = RegenerationOrchestrator(generator=generator, config=config)
    return orchestrator.run(prompt, context=context, temperature=temperature)


def validate(code: str, allow_warnings: bool = False) -> ValidationResult:
    return CadenceValidator().validate(code, allow_warnings=allow_warnings)


def should_reject(code: str) -> RejectionResult:
    return CadenceValidator().should_reject_code(code)


def classify(text: str) -> ContractType:
    return _classify(text)


def check_compliance(code: str, contract_type: ContractType) -> ComplianceReport:
    return _check_compliance(code, contract_type)


def get_fix_suggestions(code: str) -> List[str]:
    return CadenceValidator().generate_fix_suggestions(code)


def generate_validation_report(
    code: str,
    allow_warnings: bool = False,
    contract_type: Optional[ContractType] = None,
) -> Dict:
    """Full report; the contract type is classified from the code when not given."""
    return CadenceValidator().generate_validation_report(
        code, allow_warnings=allow_warnings, contract_type=contract_type
    )
