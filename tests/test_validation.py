# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the steering document validator."""

from __future__ import annotations

import time

import pytest

from steerdocs.catalog import FrameworkCatalog
from steerdocs.filesystem import LocalFileAccess
from steerdocs.templates import load_template
from steerdocs.validation import IssueCode, Severity, SteeringValidator, validate
from steerdocs.validation.validator import scan_document

CLEAN_DOCUMENT = """# Service Guidelines

## Purpose

Keep request handlers small and predictable across the service.

## Key Concepts

- Handlers translate HTTP into domain calls.
- Domain code never imports the web framework.

## Best Practices

```python
def handler(request):
    return service.run(request.payload)
```

## Summary

Small handlers and a clean domain layer keep the service easy to change.
"""


def _codes(issues) -> list[IssueCode]:
    return [issue.code for issue in issues]


def test_empty_document_reports_every_missing_section() -> None:
    result = validate("")

    assert result.is_valid is False
    missing = [issue for issue in result.issues if issue.code is IssueCode.MISSING_SECTION]
    assert len(missing) >= 4
    assert all(issue.severity is Severity.ERROR for issue in missing)
    assert all(issue.range.start.line == 0 and issue.range.start.character == 0 for issue in missing)


def test_clean_document_has_no_errors_or_warnings() -> None:
    result = validate(CLEAN_DOCUMENT)

    assert result.is_valid is True
    assert result.issues == ()
    assert result.warnings == ()


def test_bundled_frameworks_and_template_validate_cleanly() -> None:
    catalog = FrameworkCatalog()
    documents = [catalog.read_content(entry) for entry in catalog.list_available()]
    documents.append(load_template(LocalFileAccess()))

    for document in documents:
        result = validate(document)
        assert result.all_issues == (), [issue.message for issue in result.all_issues]


def test_sections_match_case_insensitively_by_prefix() -> None:
    text = CLEAN_DOCUMENT.replace("## Purpose", "## purpose of this guide").replace(
        "## Best Practices",
        "### BEST PRACTICES for handlers",
    )

    issues = SteeringValidator().validate_structure(text)

    assert issues == []


def test_missing_section_quick_fix_inserts_stub_heading() -> None:
    text = CLEAN_DOCUMENT.replace("## Summary", "## Wrap-up")
    validator = SteeringValidator()

    [issue] = validator.validate_structure(text)

    assert "Summary" in issue.message
    assert issue.fix is not None
    assert validator.validate_structure(issue.fix.apply(text)) == []


def test_headings_inside_code_blocks_do_not_count() -> None:
    text = "```\n# Purpose\n## Key Concepts\n## Best Practices\n## Summary\n```\n"

    issues = SteeringValidator().validate_structure(text)

    assert len(issues) == 4


def test_custom_required_sections() -> None:
    validator = SteeringValidator(required_sections=("Overview",))

    assert _codes(validator.validate_structure("# Overview\n")) == []
    assert _codes(validator.validate_structure("# Purpose\n")) == [IssueCode.MISSING_SECTION]


def test_missing_guidance_and_examples_are_warnings() -> None:
    text = "# Notes\n\nThe team talked about things for a while and then went home afterwards.\n"

    codes = _codes(SteeringValidator(min_content_length=0).validate_content(text))

    assert codes == [IssueCode.NO_ACTIONABLE_GUIDANCE, IssueCode.NO_EXAMPLES]


@pytest.mark.parametrize(
    "line",
    [
        "Use short functions.",
        "The build is slow. Avoid network calls in tests.",
        "1. Configure the linter",
        "* bullet",
    ],
)
def test_actionable_guidance_signals(line: str) -> None:
    codes = _codes(SteeringValidator(min_content_length=0).validate_content(f"# Notes\n\n{line}\n"))

    assert IssueCode.NO_ACTIONABLE_GUIDANCE not in codes


def test_verbs_mid_sentence_are_not_guidance() -> None:
    text = "# Notes\n\nWe often use tabs here.\n"

    codes = _codes(SteeringValidator(min_content_length=0).validate_content(text))

    assert IssueCode.NO_ACTIONABLE_GUIDANCE in codes


@pytest.mark.parametrize(
    "snippet",
    ["For example, keep it short.", "Example: a queue", "## Examples\n\ntext", "~~~\ncode\n~~~"],
)
def test_example_signals(snippet: str) -> None:
    codes = _codes(SteeringValidator(min_content_length=0).validate_content(f"# Notes\n\n{snippet}\n"))

    assert IssueCode.NO_EXAMPLES not in codes


def test_short_documents_warn_against_configured_minimum() -> None:
    strict = SteeringValidator(min_content_length=10_000).validate(CLEAN_DOCUMENT)
    lenient = SteeringValidator(min_content_length=10).validate(CLEAN_DOCUMENT)

    assert _codes(strict.warnings) == [IssueCode.CONTENT_TOO_SHORT]
    assert strict.is_valid is True
    assert lenient.warnings == ()


def test_heading_level_skip_is_a_warning() -> None:
    [issue] = SteeringValidator().validate_formatting("# Title\n\n### Deep\n")

    assert issue.code is IssueCode.HEADING_HIERARCHY
    assert issue.severity is Severity.WARNING
    assert issue.range.start.line == 2


@pytest.mark.parametrize("heading", ["##", "##   ", "## ##"])
def test_empty_heading_is_an_error(heading: str) -> None:
    issues = SteeringValidator().validate_formatting(f"# Title\n{heading}\n")

    assert _codes(issues) == [IssueCode.EMPTY_HEADING]
    assert issues[0].severity is Severity.ERROR


def test_hash_without_space_is_not_a_heading() -> None:
    assert SteeringValidator().validate_formatting("#hashtag\n") == []


def test_unclosed_code_block_is_an_error_with_fix() -> None:
    text = "# Title\n\n```python\nprint('hi')\n"
    validator = SteeringValidator()

    [issue] = validator.validate_formatting(text)

    assert issue.code is IssueCode.UNCLOSED_CODE_BLOCK
    assert issue.range.start.line == 2
    assert issue.fix is not None
    assert validator.validate_formatting(issue.fix.apply(text)) == []


def test_tilde_fence_is_not_closed_by_backticks() -> None:
    issues = SteeringValidator().validate_formatting("~~~\ncode\n```\n")

    assert _codes(issues) == [IssueCode.UNCLOSED_CODE_BLOCK]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("See [](https://example.com).", [IssueCode.EMPTY_LINK_TEXT]),
        ("See [the docs]().", [IssueCode.EMPTY_LINK_URL]),
        ("See [ ]( ).", [IssueCode.EMPTY_LINK_TEXT, IssueCode.EMPTY_LINK_URL]),
        ("See [the docs](https://example.com).", []),
        ("![](diagram.png)", []),
        ("```\n[](nowhere)\n```", []),
    ],
)
def test_link_checks(text: str, expected: list[IssueCode]) -> None:
    issues = SteeringValidator().validate_formatting(text)

    assert _codes(issues) == expected
    assert all(issue.severity is Severity.ERROR for issue in issues)


def test_crlf_documents_are_scanned_like_lf() -> None:
    result = validate(CLEAN_DOCUMENT.replace("\n", "\r\n"))

    assert result.all_issues == ()


def test_large_documents_validate_in_linear_time() -> None:
    paragraph = "- Use clear names for every [link](https://example.com) you add.\n" * 20
    text = CLEAN_DOCUMENT + ("## Details\n\n" + paragraph) * 1_000
    assert len(text) > 1_000_000

    started = time.perf_counter()
    result = validate(text)
    elapsed = time.perf_counter() - started

    assert result.is_valid is True
    assert elapsed < 2.0


@pytest.mark.parametrize(
    "line",
    [
        "[" * 200_000 + "](",
        "[a" * 200_000 + "](",
        "[](" * 200_000,
        "## Title" + " " * 200_000 + "#x",
        "." + " " * 200_000 + "z",
    ],
    ids=["open-brackets", "bracketed-text", "empty-links", "heading-trailing-hash", "sentence-gap"],
)
def test_pathological_lines_validate_in_linear_time(line: str) -> None:
    text = CLEAN_DOCUMENT + "\n" + line + "\n"

    started = time.perf_counter()
    validate(text)
    elapsed = time.perf_counter() - started

    assert elapsed < 1.0


def test_nested_brackets_still_find_the_inner_link() -> None:
    issues = SteeringValidator().validate_formatting("See [[the docs]()].")

    assert _codes(issues) == [IssueCode.EMPTY_LINK_URL]


@pytest.mark.parametrize(
    "text",
    [
        "# Purpose\n## Key Concepts\n## Best Practices\n- item\n```\ncode\n```\n## Summary\n",
        "# Purpose\n# Key Concepts\n# Best Practices\n# Summary\n- a\n```\n```",
    ],
    ids=["short", "shortest"],
)
def test_minimal_complete_document_has_no_findings(text: str) -> None:
    result = validate(text)

    assert result.all_issues == ()


def test_closing_hashes_are_dropped_from_heading_titles() -> None:
    scan = scan_document("# Summary ##\n## C#\n")

    assert [heading.text for heading in scan.headings] == ["Summary", "C#"]
