# cadence_code_generator/validator.py
"""
Post-generation validation to catch legacy syntax and incomplete code
before a candidate is handed to the user
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .categories import ContractType, PatternCategory, RejectionResult, Severity, ValidationResult
from .config import ValidatorConfig
from .coverage_mapper import check_compliance
from .pattern_catalog import PATTERNS_BY_ID, REJECTION_RULES
from .pattern_detector import detect, filter_by_severity
from .profile_selector import classify


class CadenceValidator:
    """Validates generated Cadence code for common issues"""

    def __init__(self, config: Optional[ValidatorConfig] = None, debug: bool = False):
        self.config = config or ValidatorConfig()
        self.debug = debug

    def validate(self, code: str, allow_warnings: Optional[bool] = None) -> ValidationResult:
        """
        Validate Cadence code
        Critical matches always invalidate, warnings only when not allowed,
        info matches never block.
        """
        if allow_warnings is None:
            allow_warnings = self.config.allow_warnings
        code = code or ""

        matches = detect(code)
        errors = [m.format() for m in filter_by_severity(matches, Severity.CRITICAL)]
        warnings = [m.format() for m in filter_by_severity(matches, Severity.WARNING)]
        infos = [m.format() for m in filter_by_severity(matches, Severity.INFO)]

        # Structural checks are always critical
        errors.extend(self._check_delimiters(code))
        errors.extend(self._check_initializer(code))

        critical_count = len(errors)
        warning_count = len(warnings)
        is_valid = critical_count == 0 and (allow_warnings or warning_count == 0)

        score = 100 - self.config.critical_penalty * critical_count - self.config.warning_penalty * warning_count
        score = max(0, min(100, score))

        if self.debug:
            print(f"[Validator] Valid: {is_valid}, Errors: {critical_count}, Warnings: {warning_count}, Score: {score}")

        return ValidationResult(
            is_valid=is_valid,
            errors=errors,
            warnings=warnings,
            infos=infos,
            score=score,
            compilation_success=is_valid,
            critical_count=critical_count,
            warning_count=warning_count,
            matches=matches,
        )

    def _check_delimiters(self, code: str) -> List[str]:
        """Counts only; delimiters inside strings and comments are included"""
        errors = []

        opening, closing = code.count("{"), code.count("}")
        if opening != closing:
            errors.append(
                f"Line 1:1 - Unbalanced braces: {opening} '{{' vs {closing} '}}' "
                "(Match every opening brace with a closing brace)"
            )

        opening, closing = code.count("("), code.count(")")
        if opening != closing:
            errors.append(
                f"Line 1:1 - Unbalanced parentheses: {opening} '(' vs {closing} ')' "
                "(Match every opening parenthesis with a closing parenthesis)"
            )

        return errors

    def _check_initializer(self, code: str) -> List[str]:
        if "init(" in code:
            return []
        return [
            "Line 1:1 - Missing initializer: no init() function found, the contract is incomplete "
            "(Add an init() function that initializes all contract fields)"
        ]

    def should_reject_code(self, code: str) -> RejectionResult:
        """Hard-reject predicate; the first matching rule wins"""
        code = code or ""
        for pattern_id, reason in REJECTION_RULES:
            if PATTERNS_BY_ID[pattern_id].regex.search(code):
                if self.debug:
                    print(f"[Validator] Rejected: {reason}")
                return RejectionResult(should_reject=True, reason=reason)
        return RejectionResult(should_reject=False, reason="")

    def analyze_legacy_patterns(self, code: str) -> Dict:
        matches = detect(code or "")
        legacy = [m for m in matches if m.category in (PatternCategory.SYNTAX, PatternCategory.STORAGE_API)]
        return {
            "has_legacy_patterns": len(legacy) > 0,
            "critical_issues": len(filter_by_severity(legacy, Severity.CRITICAL)),
            "warnings": len(filter_by_severity(legacy, Severity.WARNING)),
            "patterns": [m.to_dict() for m in legacy],
        }

    def generate_fix_suggestions(self, code: str) -> List[str]:
        code = code or ""
        suggestions = []
        validation = self.validate(code)

        if validation.errors:
            suggestions.append("Critical issues found that must be fixed:")
            suggestions.extend(f"  • {error}" for error in validation.errors)

        if validation.warnings:
            suggestions.append("Potential improvements:")
            suggestions.extend(f"  • {warning}" for warning in validation.warnings)

        if PATTERNS_BY_ID["legacy-pub"].regex.search(code):
            suggestions.append('Replace all "pub" keywords with appropriate access modifiers like "access(all)"')

        if any(m.category == PatternCategory.STORAGE_API for m in validation.matches):
            suggestions.append("Update to modern storage and capability APIs")

        return suggestions

    def generate_validation_report(
        self,
        code: str,
        allow_warnings: Optional[bool] = None,
        contract_type: Optional[ContractType] = None,
    ) -> Dict:
        code = code or ""
        validation = self.validate(code, allow_warnings=allow_warnings)
        analysis = self.analyze_legacy_patterns(code)
        rejection = self.should_reject_code(code)
        suggestions = self.generate_fix_suggestions(code)
        contract_report = check_compliance(code, contract_type or classify(code))

        lines = code.split("\n")
        non_empty = sum(1 for line in lines if line.strip())

        compliant = validation.is_valid and not rejection.should_reject
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "code_metrics": {
                "total_lines": len(lines),
                "non_empty_lines": non_empty,
                "has_content": non_empty > 0,
            },
            "validation": validation.to_dict(),
            "analysis": analysis,
            "rejection": rejection.to_dict(),
            "suggestions": suggestions,
            "compliance": {
                "is_cadence10_compliant": compliant,
                "compliance_score": validation.score,
                "ready_for_production": compliant and not validation.warnings and contract_report.is_valid,
                "contract": contract_report.to_dict(),
            },
            "recommendations": _report_recommendations(validation, analysis, rejection)
            + contract_report.recommendations,
        }


def _report_recommendations(validation: ValidationResult, analysis: Dict, rejection: RejectionResult) -> List[str]:
    recommendations = []
    if rejection.should_reject:
        recommendations.append(f"CRITICAL: {rejection.reason} - Code must be fixed before deployment")
    if validation.errors:
        recommendations.append(f"Fix {len(validation.errors)} critical error(s) to ensure Cadence 1.0 compatibility")
    if validation.warnings:
        recommendations.append(f"Address {len(validation.warnings)} warning(s) to improve code quality")
    if analysis["has_legacy_patterns"]:
        recommendations.append("Modernize legacy patterns to follow current Cadence best practices")
    if validation.is_valid and not rejection.should_reject and not validation.warnings:
        recommendations.append("Code is fully compliant with Cadence 1.0 and ready for production")
    return recommendations


def validate_generated_code(code: str, allow_warnings: bool = False, debug: bool = False) -> Dict:
    """
    Validate generated Cadence code
    Returns dict with validation results
    """
    validator = CadenceValidator(debug=debug)
    result = validator.validate(code, allow_warnings=allow_warnings)
    rejection = validator.should_reject_code(code)

    return {
        "is_valid": result.is_valid and not rejection.should_reject,
        "errors": result.errors,
        "warnings": result.warnings,
        "error_count": result.critical_count,
        "warning_count": result.warning_count,
        "score": result.score,
        "rejection_reason": rejection.reason or None,
    }
