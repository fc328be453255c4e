from __future__ import annotations

import pytest

from cadence_code_generator.categories import Complexity, ContractCategory, ContractType
from cadence_code_generator.coverage_mapper import check_compliance
from cadence_code_generator.fallback_templates import load_fallback
from cadence_code_generator.validator import CadenceValidator


@pytest.mark.parametrize("category", list(ContractCategory))
def test_load_fallback_given_each_archetype_when_validated_then_template_passes_without_warnings(
    category: ContractCategory,
) -> None:
    # Given
    code = load_fallback(category)
    validator = CadenceValidator()

    # When
    result = validator.validate(code)

    # Then
    assert result.is_valid is True
    assert result.warnings == []
    assert validator.should_reject_code(code).should_reject is False


@pytest.mark.parametrize("category", list(ContractCategory))
def test_load_fallback_given_each_archetype_when_checked_then_no_required_feature_is_missing(
    category: ContractCategory,
) -> None:
    # Given
    contract_type = ContractType(category=category, complexity=Complexity.INTERMEDIATE)

    # When
    report = check_compliance(load_fallback(category), contract_type)

    # Then
    assert report.is_valid is True
    assert report.missing_features == []
    assert report.compliance_score == 100


def test_load_fallback_given_generic_category_when_loaded_then_contract_declaration_is_present() -> None:
    assert "access(all) contract GeneratedContract" in load_fallback(ContractCategory.GENERIC)
