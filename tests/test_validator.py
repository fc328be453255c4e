from __future__ import annotations

import pytest

from cadence_code_generator.categories import FailureType
from cadence_code_generator.config import ValidatorConfig
from cadence_code_generator.failure_analyzer import analyze
from cadence_code_generator.validator import CadenceValidator, validate_generated_code


@pytest.fixture
def validator() -> CadenceValidator:
    return CadenceValidator()


def test_should_reject_given_legacy_pub_keyword_when_checked_then_reason_names_the_keyword(
    validator: CadenceValidator,
    legacy_contract: str,
) -> None:
    # When
    rejection = validator.should_reject_code(legacy_contract)
    validation = validator.validate(legacy_contract)

    # Then
    assert rejection.should_reject is True
    assert '"pub"' in rejection.reason
    assert validation.is_valid is False
    assert validation.critical_count >= 1


def test_should_reject_given_clean_contract_when_checked_then_nothing_is_rejected(
    validator: CadenceValidator,
    simple_valid_contract: str,
) -> None:
    rejection = validator.should_reject_code(simple_valid_contract)

    assert rejection.should_reject is False
    assert rejection.reason == ""


@pytest.mark.parametrize(
    "snippet",
    [
        "pub fun f() {}",
        "pub(set) var x: Int",
        "fun f(acct: AuthAccount) {}",
        "self.account.save(<-r, to: /storage/r)",
        "self.account.link<&R>(/public/r, target: /storage/r)",
        "self.account.borrow<&R>(from: /storage/r)",
    ],
)
def test_should_reject_given_hard_reject_snippet_when_validated_then_candidate_is_invalid(
    validator: CadenceValidator,
    snippet: str,
) -> None:
    assert validator.should_reject_code(snippet).should_reject is True
    assert validator.validate(snippet).is_valid is False


def test_validate_given_clean_contract_when_validated_then_it_scores_full_marks(
    validator: CadenceValidator,
    simple_valid_contract: str,
) -> None:
    # When
    result = validator.validate(simple_valid_contract)

    # Then
    assert result.is_valid is True
    assert result.errors == []
    assert result.warnings == []
    assert result.score == 100


def test_validate_given_undefined_literal_when_validated_then_score_drops_by_one_critical(
    validator: CadenceValidator,
    undefined_contract: str,
) -> None:
    # When
    result = validator.validate(undefined_contract)

    # Then
    assert result.is_valid is False
    assert result.critical_count == 1
    assert result.score == 85
    assert result.errors[0].startswith("Line 6:21 - Undefined value found")


def test_validate_given_many_critical_issues_when_scored_then_score_is_clamped_at_zero(
    validator: CadenceValidator,
) -> None:
    code = "\n".join(f"pub let v{i}: Int" for i in range(20))

    result = validator.validate(code)

    assert result.score == 0


def test_validate_given_warning_only_when_warnings_allowed_then_candidate_is_valid(
    validator: CadenceValidator,
    simple_valid_contract: str,
) -> None:
    # Given
    code = simple_valid_contract + "\n// TODO: add decrement\n"

    # When
    strict = validator.validate(code)
    relaxed = validator.validate(code, allow_warnings=True)

    # Then
    assert strict.is_valid is False
    assert relaxed.is_valid is True
    assert relaxed.score == 95
    assert relaxed.warning_count == 1


def test_validate_given_unbalanced_braces_when_validated_then_structural_error_is_critical(
    validator: CadenceValidator,
) -> None:
    result = validator.validate("access(all) contract Broken {\n    init() {\n    }\n")

    assert result.is_valid is False
    assert any("Unbalanced braces" in e for e in result.errors)


def test_validate_given_unbalanced_parentheses_when_validated_then_structural_error_is_critical(
    validator: CadenceValidator,
) -> None:
    # Given
    code = "access(all) contract Broken {\n    init() {\n        log((1)\n    }\n}\n"

    # When
    result = validator.validate(code)
    patterns = analyze(result, validator.should_reject_code(code))

    # Then
    assert result.is_valid is False
    assert any("Unbalanced parentheses" in e for e in result.errors)
    assert not any("Unbalanced braces" in e for e in result.errors)
    assert [p.type for p in patterns] == [FailureType.SYNTAX_ERRORS]


def test_validate_given_missing_initializer_when_validated_then_contract_is_incomplete(
    validator: CadenceValidator,
) -> None:
    result = validator.validate("access(all) contract Empty {\n}\n")

    assert result.is_valid is False
    assert any("Missing initializer" in e for e in result.errors)


def test_validate_given_info_match_when_validated_then_it_never_blocks(
    validator: CadenceValidator,
    simple_valid_contract: str,
) -> None:
    code = simple_valid_contract.replace("self.count = self.count + 1", 'if self.count > 9 { panic("no") }')

    result = validator.validate(code)

    assert result.is_valid is True
    assert len(result.infos) == 1


def test_validate_given_custom_penalties_when_scored_then_config_weights_are_used() -> None:
    validator = CadenceValidator(config=ValidatorConfig(critical_penalty=40))

    result = validator.validate("pub contract A { init() {} }")

    assert result.score == 60


def test_generate_validation_report_given_nft_template_when_reported_then_it_is_production_ready(
    validator: CadenceValidator,
    nft_template: str,
) -> None:
    # When
    report = validator.generate_validation_report(nft_template)

    # Then
    assert report["compliance"]["is_cadence10_compliant"] is True
    assert report["compliance"]["ready_for_production"] is True
    assert report["compliance"]["contract"]["contract_type"]["category"] == "nft"
    assert report["code_metrics"]["has_content"] is True
    assert "Code is fully compliant with Cadence 1.0 and ready for production" in report["recommendations"]


def test_generate_fix_suggestions_given_legacy_contract_when_suggested_then_storage_hint_is_included(
    validator: CadenceValidator,
    legacy_contract: str,
) -> None:
    suggestions = validator.generate_fix_suggestions(legacy_contract)

    assert suggestions[0] == "Critical issues found that must be fixed:"
    assert "Update to modern storage and capability APIs" in suggestions


def test_validate_generated_code_given_legacy_contract_when_summarised_then_rejection_reason_is_set(
    legacy_contract: str,
) -> None:
    summary = validate_generated_code(legacy_contract)

    assert summary["is_valid"] is False
    assert summary["rejection_reason"] == 'Contains legacy "pub" keyword'
    assert summary["error_count"] == 3
