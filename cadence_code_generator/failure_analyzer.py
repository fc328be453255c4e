"""Failure analysis for the regeneration loop.

Turns a failed validation (and/or a hard rejection) into canonical
FailurePattern records. The orchestrator appends them to the request's
failure history, which the prompt builder uses to brief the next attempt.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from .categories import FailurePattern, FailureType, RejectionResult, ValidationResult


# Keyword triggers, matched case-insensitively as plain substrings.
_TRIGGERS: Tuple[Tuple[FailureType, Tuple[str, ...]], ...] = (
    (FailureType.UNDEFINED_VALUES, ("undefined",)),
    (FailureType.LEGACY_SYNTAX, ("pub", "legacy")),
    (FailureType.INCOMPLETE_LOGIC, ("incomplete", "empty", "missing", "placeholder", "expected")),
    (FailureType.SYNTAX_ERRORS, ("bracket", "brace", "parenthes")),
    (FailureType.TYPE_ERRORS, ("type", "interface")),
)

_CAUSES_AND_FIXES: Dict[FailureType, Tuple[List[str], List[str]]] = {
    FailureType.UNDEFINED_VALUES: (
        [
            "Incomplete variable initialization",
            "Missing default values",
            "Placeholder undefined literals",
            "Uninitialized optional types",
        ],
        [
            'Use concrete default values (String: "", UInt64: 0, Bool: false)',
            "Complete all variable declarations with meaningful values",
            "Replace undefined with appropriate type defaults",
            "Initialize all contract state in init() function",
        ],
    ),
    FailureType.LEGACY_SYNTAX: (
        [
            "Using deprecated Cadence syntax",
            "Old access modifier patterns",
            "Legacy storage API usage",
            "Outdated account access patterns",
        ],
        [
            "Use access(all) instead of pub",
            "Use modern storage API (account.storage.save)",
            "Use capabilities instead of account.link",
            "Update to Cadence 1.0 patterns",
        ],
    ),
    FailureType.INCOMPLETE_LOGIC: (
        [
            "Empty function bodies",
            "Missing return statements",
            "Missing init() function or required methods",
            "Placeholder comments instead of code",
        ],
        [
            "Implement all function bodies completely",
            "Add proper return values for all functions",
            "Complete all required interface methods and the init() function",
            "Replace TODO comments with actual implementations",
        ],
    ),
    FailureType.SYNTAX_ERRORS: (
        [
            "Unmatched brackets or parentheses",
            "Missing closing braces",
            "Incorrect nesting of brackets",
            "Malformed function signatures",
        ],
        [
            "Carefully match all opening and closing brackets",
            "Use proper indentation to track bracket nesting",
            "Validate function signature syntax",
            "Check all string literals are properly quoted",
        ],
    ),
    FailureType.TYPE_ERRORS: (
        [
            "Incorrect type annotations",
            "Missing interface implementations",
            "Type mismatches in assignments",
            "Invalid resource type usage",
        ],
        [
            "Use correct type annotations",
            "Implement all required interface methods",
            "Ensure type compatibility in assignments",
            "Follow proper resource type patterns",
        ],
    ),
}


def failure_pattern(failure_type: FailureType, frequency: int = 1) -> FailurePattern:
    causes, fixes = _CAUSES_AND_FIXES[failure_type]
    return FailurePattern(
        type=failure_type,
        frequency=frequency,
        common_causes=list(causes),
        suggested_solutions=list(fixes),
    )


def _failure_texts(validation: ValidationResult, rejection: RejectionResult) -> List[str]:
    texts = []
    if rejection.should_reject and rejection.reason:
        texts.append(rejection.reason)
    if not validation.is_valid:
        texts.extend(validation.errors)
        # warnings only block when there are no errors and they were not allowed
        if not validation.errors:
            texts.extend(validation.warnings)
    return texts


def analyze(validation: ValidationResult, rejection: RejectionResult) -> List[FailurePattern]:
    """Map a failed attempt to canonical failure patterns.

    At most one entry per failure type, in canonical order; frequency counts
    how many messages triggered it. A failure that triggers nothing is
    reported as incomplete logic so the briefing history always grows.
    """
    failed = rejection.should_reject or not validation.is_valid
    if not failed:
        return []

    counts: Dict[FailureType, int] = {}
    for text in _failure_texts(validation, rejection):
        lowered = text.lower()
        for failure_type, keywords in _TRIGGERS:
            if any(k in lowered for k in keywords):
                counts[failure_type] = counts.get(failure_type, 0) + 1

    if not counts:
        counts[FailureType.INCOMPLETE_LOGIC] = 1

    return [failure_pattern(ft, counts[ft]) for ft, _ in _TRIGGERS if ft in counts]


def distinct_types(history: List[FailurePattern]) -> List[FailureType]:
    """Distinct failure types in first-seen order."""
    seen: List[FailureType] = []
    for pattern in history:
        if pattern.type not in seen:
            seen.append(pattern.type)
    return seen
