# cadence_code_generator/categories.py
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional


class Severity(Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class PatternCategory(Enum):
    SYNTAX = "syntax"
    STORAGE_API = "storage-api"
    COMPLETENESS = "completeness"
    SECURITY = "security"


class ContractCategory(Enum):
    NFT = "nft"
    FUNGIBLE_TOKEN = "fungible-token"
    DAO = "dao"
    MARKETPLACE = "marketplace"
    GENERIC = "generic"


class Complexity(Enum):
    SIMPLE = "simple"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class UserExperience(Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class FeatureCategory(Enum):
    INTERFACE = "interface"
    FUNCTION = "function"
    EVENT = "event"
    RESOURCE = "resource"
    STRUCTURE = "structure"


class ComplianceLevel(Enum):
    REQUIRED = "required"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"


class EnhancementLevel(Enum):
    BASIC = "basic"
    MODERATE = "moderate"
    STRICT = "strict"
    MAXIMUM = "maximum"


class FailureType(Enum):
    UNDEFINED_VALUES = "undefined-values"
    LEGACY_SYNTAX = "legacy-syntax"
    INCOMPLETE_LOGIC = "incomplete-logic"
    SYNTAX_ERRORS = "syntax-errors"
    TYPE_ERRORS = "type-errors"


class OrchestratorState(Enum):
    ATTEMPT = "attempt"
    SUCCESS = "success"
    FALLBACK = "fallback"


# ---------------------------------------------------------------------------
# Pattern catalog / detection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Pattern:
    id: str
    regex: re.Pattern
    severity: Severity
    category: PatternCategory
    message: str
    fix_text: str
    effort: str = "easy"


@dataclass(frozen=True)
class CodeLocation:
    line: int
    column: int
    start_index: int
    end_index: int

    def to_dict(self):
        return {
            "line": self.line,
            "column": self.column,
            "start_index": self.start_index,
            "end_index": self.end_index,
        }


@dataclass(frozen=True)
class PatternMatch:
    pattern_id: str
    location: CodeLocation
    message: str
    severity: Severity
    category: PatternCategory
    matched_text: str
    fix_text: str

    def format(self) -> str:
        return f"Line {self.location.line}:{self.location.column} - {self.message} ({self.fix_text})"

    def to_dict(self):
        return {
            "pattern_id": self.pattern_id,
            "location": self.location.to_dict(),
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
            "matched_text": self.matched_text,
            "fix_text": self.fix_text,
        }


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ContractType:
    category: ContractCategory
    complexity: Complexity
    requested_features: FrozenSet[str] = frozenset()

    def describe(self):
        feat_str = ", ".join(sorted(self.requested_features)) if self.requested_features else "None"
        return (
            f"Category: {self.category.value}\n"
            f"Complexity: {self.complexity.value}\n"
            f"Requested Features: {feat_str}\n"
        )

    def to_dict(self):
        return {
            "category": self.category.value,
            "complexity": self.complexity.value,
            "requested_features": sorted(self.requested_features),
        }


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    infos: List[str] = field(default_factory=list)
    score: int = 100
    compilation_success: bool = False
    critical_count: int = 0
    warning_count: int = 0
    matches: List[PatternMatch] = field(default_factory=list)

    def to_dict(self):
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "infos": self.infos,
            "score": self.score,
            "compilation_success": self.compilation_success,
            "critical_count": self.critical_count,
            "warning_count": self.warning_count,
        }


@dataclass(frozen=True)
class RejectionResult:
    should_reject: bool
    reason: str = ""

    def to_dict(self):
        return {"should_reject": self.should_reject, "reason": self.reason}


# ---------------------------------------------------------------------------
# Feature compliance
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RequiredFeature:
    name: str
    description: str
    regex: re.Pattern
    category: FeatureCategory
    compliance_level: ComplianceLevel


@dataclass(frozen=True)
class FeatureCheck:
    feature: RequiredFeature
    present: bool

    def to_dict(self):
        return {
            "name": self.feature.name,
            "description": self.feature.description,
            "category": self.feature.category.value,
            "compliance_level": self.feature.compliance_level.value,
            "present": self.present,
        }


@dataclass
class ComplianceIssue:
    issue_type: str
    severity: Severity
    message: str
    suggested_fix: str
    feature_category: Optional[FeatureCategory] = None
    compliance_level: ComplianceLevel = ComplianceLevel.REQUIRED

    def to_dict(self):
        return {
            "type": self.issue_type,
            "severity": self.severity.value,
            "message": self.message,
            "suggested_fix": self.suggested_fix,
            "feature_category": self.feature_category.value if self.feature_category else None,
            "compliance_level": self.compliance_level.value,
        }


@dataclass
class ComplianceReport:
    contract_type: ContractType
    is_valid: bool
    compliance_score: int
    features: List[FeatureCheck] = field(default_factory=list)
    missing_features: List[str] = field(default_factory=list)
    issues: List[ComplianceIssue] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "contract_type": self.contract_type.to_dict(),
            "is_valid": self.is_valid,
            "compliance_score": self.compliance_score,
            "features": [f.to_dict() for f in self.features],
            "missing_features": self.missing_features,
            "issues": [i.to_dict() for i in self.issues],
            "recommendations": self.recommendations,
        }


# ---------------------------------------------------------------------------
# Regeneration
# ---------------------------------------------------------------------------


@dataclass
class FailurePattern:
    type: FailureType
    frequency: int
    common_causes: List[str]
    suggested_solutions: List[str]

    def to_dict(self):
        return {
            "type": self.type.value,
            "frequency": self.frequency,
            "common_causes": self.common_causes,
            "suggested_solutions": self.suggested_solutions,
        }


@dataclass(frozen=True)
class EnhancedPrompt:
    system_prompt: str
    user_prompt: str
    temperature: float
    enhancement_level: EnhancementLevel


@dataclass
class GenerationAttempt:
    index: int
    temperature: float
    strict_mode: bool
    enhancement_level: EnhancementLevel
    result_text: str = ""
    validation: Optional[ValidationResult] = None
    rejection: Optional[RejectionResult] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return (
            self.validation is not None
            and self.validation.is_valid
            and self.rejection is not None
            and not self.rejection.should_reject
        )

    def to_dict(self):
        return {
            "index": self.index,
            "temperature": self.temperature,
            "strict_mode": self.strict_mode,
            "enhancement_level": self.enhancement_level.value,
            "validation": self.validation.to_dict() if self.validation else None,
            "rejection": self.rejection.to_dict() if self.rejection else None,
            "error": self.error,
        }


@dataclass
class GenerationResult:
    code: str
    validation: ValidationResult
    rejected: bool
    contract_type: ContractType
    attempts: int
    used_fallback: bool
    rejection_reason: Optional[str] = None
    failure_history: List[FailurePattern] = field(default_factory=list)
    attempt_log: List[GenerationAttempt] = field(default_factory=list)

    def to_metadata_dict(self) -> Dict:
        return {
            "contract_type": self.contract_type.to_dict(),
            "attempts": self.attempts,
            "used_fallback": self.used_fallback,
            "rejected": self.rejected,
            "rejection_reason": self.rejection_reason,
            "validation": self.validation.to_dict(),
            "failure_history": [f.to_dict() for f in self.failure_history],
            "attempt_log": [a.to_dict() for a in self.attempt_log],
        }
