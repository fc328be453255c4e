from __future__ import annotations

from cadence_code_generator.categories import (
    ComplianceLevel,
    Complexity,
    ContractCategory,
    ContractType,
    Severity,
)
from cadence_code_generator.coverage_mapper import FEATURE_CATALOG, check_compliance, compliance_score, features_for


NFT_TYPE = ContractType(category=ContractCategory.NFT, complexity=Complexity.INTERMEDIATE)
DAO_TYPE = ContractType(category=ContractCategory.DAO, complexity=Complexity.ADVANCED)
GENERIC_TYPE = ContractType(category=ContractCategory.GENERIC, complexity=Complexity.SIMPLE)


def test_check_compliance_given_nft_without_minting_function_when_checked_then_minting_is_reported_missing(
    nft_template: str,
) -> None:
    # Given
    code = nft_template.replace("fun mintNFT(", "fun createNFT(")

    # When
    report = check_compliance(code, NFT_TYPE)

    # Then
    assert report.is_valid is False
    assert "Minting Function" in report.missing_features
    assert any("Minting Function" in rec for rec in report.recommendations)
    missing_issue = next(i for i in report.issues if i.issue_type == "missing-required-feature")
    assert missing_issue.severity == Severity.CRITICAL


def test_check_compliance_given_complete_nft_when_checked_then_report_is_valid(nft_template: str) -> None:
    report = check_compliance(nft_template, NFT_TYPE)

    assert report.is_valid is True
    assert report.missing_features == []
    assert report.compliance_score == 100


def test_check_compliance_given_missing_recommended_feature_when_checked_then_only_a_warning_is_raised(
    nft_template: str,
) -> None:
    # Given
    code = nft_template.replace("resolveView(", "lookupView(").replace("getViews(", "listViews(")

    # When
    report = check_compliance(code, NFT_TYPE)

    # Then
    assert report.missing_features == ["View Resolver"]
    assert report.is_valid is True
    assert report.issues[0].severity == Severity.WARNING
    assert report.issues[0].compliance_level == ComplianceLevel.RECOMMENDED
    assert report.compliance_score < 100


def test_check_compliance_given_dao_without_vote_counting_when_checked_then_critical_issue_invalidates() -> None:
    # Given
    code = """
access(all) contract Gov {
    access(all) resource Proposal {
        access(all) var status: UInt8
        access(all) let endTime: UFix64
        access(all) let voters: {Address: Bool}
        init() { self.status = 0; self.endTime = 0.0; self.voters = {} }
    }
    access(all) fun createProposal() {}
    access(all) fun vote() {}
    access(all) fun execute() {}
    init() {}
}
"""

    # When
    report = check_compliance(code, DAO_TYPE)

    # Then
    issue_types = [i.issue_type for i in report.issues]
    assert "missing-vote-counting" in issue_types
    assert "missing-double-vote-prevention" not in issue_types
    assert report.is_valid is False
    assert "Add proper vote counting and tallying" in report.recommendations


def test_check_compliance_given_legacy_pattern_when_checked_then_report_is_invalid(nft_template: str) -> None:
    report = check_compliance(nft_template + "\npub let legacy: Int\n", NFT_TYPE)

    assert report.missing_features == []
    assert report.is_valid is False


def test_check_compliance_given_empty_generic_code_when_checked_then_score_counts_only_recommended_share() -> None:
    # When
    report = check_compliance("", GENERIC_TYPE)

    # Then
    assert report.missing_features == ["Contract Declaration", "Init Function"]
    assert report.compliance_score == 20
    assert "Add init() function for contract initialization" in report.recommendations


def test_features_for_given_generic_category_when_looked_up_then_generic_table_is_used() -> None:
    assert ContractCategory.GENERIC not in FEATURE_CATALOG
    assert [f.name for f in features_for(ContractCategory.GENERIC)] == ["Contract Declaration", "Init Function"]


def test_compliance_score_given_no_features_and_many_issues_when_scored_then_penalty_is_capped() -> None:
    # Given
    report = check_compliance("", GENERIC_TYPE)
    issues = report.issues * 5

    # When
    score = compliance_score([], issues)

    # Then
    assert score == 90
