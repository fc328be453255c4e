from __future__ import annotations

from cadence_code_generator.categories import PatternCategory, Severity
from cadence_code_generator.pattern_catalog import PATTERN_CATALOG, PATTERNS_BY_ID, REJECTION_RULES
from cadence_code_generator.pattern_detector import (
    categorize_matches,
    detect,
    filter_by_severity,
    generate_fix_plan,
    prioritize_fixes,
)


def test_detect_given_empty_source_when_scanned_then_no_matches_are_returned() -> None:
    assert detect("") == []


def test_detect_given_legacy_pub_when_scanned_then_location_is_one_based() -> None:
    # Given
    source = "pub contract X {\n  access(all) fun noop() {}\n}"

    # When
    matches = detect(source)

    # Then
    ids = [m.pattern_id for m in matches]
    assert ids == ["legacy-pub", "empty-function-body"]
    assert (matches[0].location.line, matches[0].location.column) == (1, 1)
    assert (matches[1].location.line, matches[1].location.column) == (2, 15)
    assert matches[0].severity == Severity.CRITICAL
    assert matches[1].severity == Severity.WARNING


def test_detect_given_same_source_twice_when_scanned_then_results_are_identical(legacy_contract: str) -> None:
    assert detect(legacy_contract) == detect(legacy_contract)


def test_detect_given_modern_storage_api_when_scanned_then_legacy_storage_is_not_reported() -> None:
    # Given
    source = "self.account.storage.save(<-vault, to: /storage/vault)\nself.account.capabilities.publish(cap, at: path)"

    # When
    matches = detect(source)

    # Then
    assert filter_by_severity(matches, Severity.CRITICAL) == []


def test_detect_given_keyword_inside_comment_when_scanned_then_it_is_still_reported() -> None:
    matches = detect("// pub was removed in Cadence 1.0\n")

    assert [m.pattern_id for m in matches] == ["legacy-pub"]


def test_detect_given_comma_separated_conformance_when_scanned_then_warning_suggests_ampersand() -> None:
    # Given
    source = "access(all) resource Collection: NonFungibleToken.Provider, NonFungibleToken.Receiver {\n}"

    # When
    matches = detect(source)

    # Then
    conformance = [m for m in matches if m.pattern_id == "legacy-interface-conformance"]
    assert len(conformance) == 1
    assert '"&"' in conformance[0].fix_text


def test_detect_given_hardcoded_import_and_todo_when_scanned_then_both_warnings_are_reported() -> None:
    source = "import NonFungibleToken from 0x1d7e57aa55817448\n// TODO: mint\n"

    ids = {m.pattern_id for m in detect(source)}

    assert {"hardcoded-import-address", "placeholder-comment"} <= ids


def test_catalog_given_rejection_rules_when_inspected_then_every_rule_is_a_critical_pattern() -> None:
    for pattern_id, _reason in REJECTION_RULES:
        assert PATTERNS_BY_ID[pattern_id].severity == Severity.CRITICAL


def test_catalog_given_pattern_ids_when_inspected_then_they_are_unique() -> None:
    assert len(PATTERNS_BY_ID) == len(PATTERN_CATALOG)


def test_categorize_matches_given_legacy_contract_when_grouped_then_syntax_outranks_storage(legacy_contract: str) -> None:
    # When
    groups = categorize_matches(detect(legacy_contract))

    # Then
    assert [g.category for g in groups] == [PatternCategory.SYNTAX, PatternCategory.STORAGE_API]
    assert groups[0].priority == 20
    assert groups[1].priority == 10


def test_prioritize_fixes_given_mixed_severities_when_ordered_then_high_impact_comes_first() -> None:
    # Given
    source = 'access(all) fun noop() {}\npanic("no")\npub let x: Int\n'

    # When
    fixes = prioritize_fixes(detect(source))

    # Then
    assert [f.impact for f in fixes] == ["high", "medium", "low"]
    assert fixes[0].match.pattern_id == "legacy-pub"


def test_generate_fix_plan_given_legacy_contract_when_planned_then_minutes_follow_effort(legacy_contract: str) -> None:
    # When
    plan = generate_fix_plan(legacy_contract)

    # Then
    assert len(plan.matches) == 3
    assert plan.estimated_minutes == 6
    assert plan.risk_level == "low"
    assert plan.to_dict()["total_matches"] == 3
