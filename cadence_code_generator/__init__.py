"""Cadence code generation package.

This package exposes a small high-level API:

    from cadence_code_generator import generate_with_validation

which takes a natural language prompt and returns a GenerationResult whose
code is guaranteed to pass validation (falling back to a pre-validated
template when the model cannot produce one), plus the validate / classify /
compliance helpers used along the way.
"""

from .generator import (
    generate_with_validation,
    validate,
    should_reject,
    classify,
    check_compliance,
    get_fix_suggestions,
    generate_validation_report,
)
from .categories import (
    ContractCategory,
    ContractType,
    Complexity,
    ComplianceReport,
    FailurePattern,
    FailureType,
    GenerationResult,
    RejectionResult,
    Severity,
    ValidationResult,
)
from .code_generator import RegenerationOrchestrator
from .config import EngineConfig, load_engine_config

__all__ = [
    "generate_with_validation",
    "validate",
    "should_reject",
    "classify",
    "check_compliance",
    "get_fix_suggestions",
    "generate_validation_report",
    "ContractCategory",
    "ContractType",
    "Complexity",
    "ComplianceReport",
    "FailurePattern",
    "FailureType",
    "GenerationResult",
    "RejectionResult",
    "Severity",
    "ValidationResult",
    "RegenerationOrchestrator",
    "EngineConfig",
    "load_engine_config",
]
