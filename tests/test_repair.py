from __future__ import annotations

from cadence_code_generator.repair import clean_generated_code, strip_markdown_fences


def test_strip_markdown_fences_given_cadence_fence_when_stripped_then_only_code_remains() -> None:
    raw = "```cadence\naccess(all) contract A {\n    init() {}\n}\n```"

    assert strip_markdown_fences(raw) == "access(all) contract A {\n    init() {}\n}"


def test_strip_markdown_fences_given_plain_code_when_stripped_then_it_is_unchanged() -> None:
    assert strip_markdown_fences("  access(all) contract A {}  ") == "access(all) contract A {}"


def test_clean_generated_code_given_windows_line_endings_when_cleaned_then_they_are_normalised() -> None:
    raw = "```\r\naccess(all) contract A {\r\n}\r\n```\r\n"

    assert clean_generated_code(raw) == "access(all) contract A {\n}"


def test_clean_generated_code_given_empty_output_when_cleaned_then_empty_string_is_returned() -> None:
    assert clean_generated_code("") == ""
    assert clean_generated_code("```cadence\n```") == ""
