# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Structure, content, and formatting checks for steering documents.

Every pass works from a single line-by-line scan of the document so that
validation time grows linearly with the document size.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Final

from .models import (
    IssueCode,
    Position,
    QuickFix,
    Severity,
    TextRange,
    ValidationIssue,
    ValidationResult,
)

DEFAULT_REQUIRED_SECTIONS: Final[tuple[str, ...]] = (
    "Purpose",
    "Key Concepts",
    "Best Practices",
    "Summary",
)
# The shortest document holding every default section, a list item and a fence is 63 characters.
DEFAULT_MIN_CONTENT_LENGTH: Final[int] = 60

IMPERATIVE_VERBS: Final[tuple[str, ...]] = (
    "use",
    "implement",
    "create",
    "define",
    "ensure",
    "verify",
    "check",
    "validate",
    "configure",
    "set up",
    "install",
    "deploy",
    "avoid",
    "prefer",
    "keep",
    "write",
    "run",
    "add",
    "document",
    "review",
)

_HEADING_RE: Final[re.Pattern[str]] = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*))?$")
_FENCE_RE: Final[re.Pattern[str]] = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_LIST_MARKER_RE: Final[re.Pattern[str]] = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+\S")
_IMPERATIVE_RE: Final[re.Pattern[str]] = re.compile(
    r"(?:^|[.!?]\s+)(?:" + "|".join(verb.replace(" ", r"\s+") for verb in IMPERATIVE_VERBS) + r")\b",
    re.IGNORECASE,
)
_LINE_PREFIX_RE: Final[re.Pattern[str]] = re.compile(r"^\s*(?:>\s*)*(?:[-*+]\s+|\d+[.)]\s+)?(?:\*\*|__)?")
_EXAMPLE_PHRASE_RE: Final[re.Pattern[str]] = re.compile(r"\bfor example\b|\bexample:", re.IGNORECASE)
_LINK_RE: Final[re.Pattern[str]] = re.compile(r"\[([^\[\]\n]*+)\]\(([^()\n]*+)\)")


@dataclass(slots=True)
class _Heading:
    line: int
    level: int
    text: str
    length: int


@dataclass(slots=True)
class _Link:
    line: int
    start: int
    end: int
    text: str
    url: str


@dataclass(slots=True)
class _DocumentScan:
    """Facts gathered in one pass over a document."""

    lines: list[str]
    stripped_length: int
    headings: list[_Heading] = field(default_factory=list)
    links: list[_Link] = field(default_factory=list)
    has_list: bool = False
    has_imperative: bool = False
    has_code_block: bool = False
    has_example_phrase: bool = False
    unclosed_fence_line: int | None = None


def scan_document(text: str) -> _DocumentScan:
    """Collect headings, fences, links, and guidance signals from ``text``."""

    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    scan = _DocumentScan(lines=lines, stripped_length=len(text.strip()))
    fence: str | None = None
    fence_line = -1
    for index, line in enumerate(lines):
        fence_match = _FENCE_RE.match(line)
        if fence is not None:
            if fence_match and fence_match.group(1)[0] == fence[0] and len(fence_match.group(1)) >= len(fence):
                if not line.strip().lstrip(fence[0]):
                    fence = None
                    scan.has_code_block = True
            continue
        if fence_match:
            marker = fence_match.group(1)
            if marker[0] == "~" or "`" not in line[fence_match.end() :]:
                fence = marker
                fence_line = index
                continue
        _scan_line(scan, index, line)
    if fence is not None:
        scan.unclosed_fence_line = fence_line
    return scan


def _scan_line(scan: _DocumentScan, index: int, line: str) -> None:
    heading = _HEADING_RE.match(line)
    if heading:
        raw = (heading.group(2) or "").strip()
        title = _strip_closing_hashes(raw)
        scan.headings.append(_Heading(line=index, level=len(heading.group(1)), text=title, length=len(line)))
        if title.lower().startswith("example"):
            scan.has_example_phrase = True
        return
    if not scan.has_list and _LIST_MARKER_RE.match(line):
        scan.has_list = True
    if not scan.has_imperative:
        body = _LINE_PREFIX_RE.sub("", line, count=1)
        if _IMPERATIVE_RE.search(body):
            scan.has_imperative = True
    if not scan.has_example_phrase and _EXAMPLE_PHRASE_RE.search(line):
        scan.has_example_phrase = True
    if "](" in line:
        for match in _LINK_RE.finditer(line):
            if match.start() > 0 and line[match.start() - 1] == "!":
                continue
            scan.links.append(
                _Link(
                    line=index,
                    start=match.start(),
                    end=match.end(),
                    text=match.group(1),
                    url=match.group(2),
                ),
            )


def _strip_closing_hashes(raw: str) -> str:
    trimmed = raw.rstrip("#")
    if trimmed == raw:
        return raw
    if not trimmed or trimmed[-1] in " \t":
        return trimmed.strip()
    return raw


class SteeringValidator:
    """Validate steering documents against structure and quality rules."""

    def __init__(
        self,
        *,
        required_sections: Sequence[str] = DEFAULT_REQUIRED_SECTIONS,
        min_content_length: int = DEFAULT_MIN_CONTENT_LENGTH,
    ) -> None:
        self._required_sections = tuple(required_sections)
        self._min_content_length = min_content_length

    @property
    def required_sections(self) -> tuple[str, ...]:
        return self._required_sections

    def validate(self, text: str) -> ValidationResult:
        """Run every pass over ``text`` and split the findings into errors and warnings."""

        scan = scan_document(text)
        found = [
            *self._structure(scan),
            *self._content(scan),
            *self._formatting(scan),
        ]
        return ValidationResult.from_issues(found)

    def validate_structure(self, text: str) -> list[ValidationIssue]:
        return self._structure(scan_document(text))

    def validate_content(self, text: str) -> list[ValidationIssue]:
        return self._content(scan_document(text))

    def validate_formatting(self, text: str) -> list[ValidationIssue]:
        return self._formatting(scan_document(text))

    def _structure(self, scan: _DocumentScan) -> list[ValidationIssue]:
        titles = [heading.text.lower() for heading in scan.headings]
        issues: list[ValidationIssue] = []
        for section in self._required_sections:
            wanted = section.lower()
            if any(title.startswith(wanted) for title in titles):
                continue
            issues.append(
                ValidationIssue(
                    severity=Severity.ERROR,
                    message=f'Missing required section: "{section}"',
                    range=TextRange.document_start(),
                    code=IssueCode.MISSING_SECTION,
                    fix=QuickFix(
                        title=f'Add "{section}" section',
                        position=Position(line=0, character=0),
                        text=f"## {section}\n\n",
                    ),
                ),
            )
        return issues

    def _content(self, scan: _DocumentScan) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        if not (scan.has_list or scan.has_imperative):
            issues.append(
                _warning(
                    IssueCode.NO_ACTIONABLE_GUIDANCE,
                    "Document should include actionable guidance (use bullet points, numbered lists, or imperative verbs)",
                ),
            )
        if not (scan.has_code_block or scan.has_example_phrase):
            issues.append(
                _warning(IssueCode.NO_EXAMPLES, "Document should include examples to illustrate key concepts"),
            )
        if scan.stripped_length < self._min_content_length:
            issues.append(
                _warning(
                    IssueCode.CONTENT_TOO_SHORT,
                    "Document appears too short. Consider adding more detailed guidance and examples.",
                ),
            )
        return issues

    def _formatting(self, scan: _DocumentScan) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        previous_level = 0
        for heading in scan.headings:
            span = TextRange.span(heading.line, 0, heading.length)
            if not heading.text:
                issues.append(
                    ValidationIssue(
                        severity=Severity.ERROR,
                        message="Heading cannot be empty",
                        range=span,
                        code=IssueCode.EMPTY_HEADING,
                    ),
                )
            if previous_level and heading.level > previous_level + 1:
                issues.append(
                    ValidationIssue(
                        severity=Severity.WARNING,
                        message=(
                            f"Heading level skipped (from {previous_level} to {heading.level}). "
                            "Use proper hierarchy."
                        ),
                        range=span,
                        code=IssueCode.HEADING_HIERARCHY,
                    ),
                )
            previous_level = heading.level

        if scan.unclosed_fence_line is not None:
            opening = scan.lines[scan.unclosed_fence_line]
            last_line = len(scan.lines) - 1
            marker = _FENCE_RE.match(opening)
            closing = marker.group(1) if marker else "```"
            issues.append(
                ValidationIssue(
                    severity=Severity.ERROR,
                    message=f"Code block is not closed (missing closing {closing})",
                    range=TextRange.span(scan.unclosed_fence_line, 0, len(opening)),
                    code=IssueCode.UNCLOSED_CODE_BLOCK,
                    fix=QuickFix(
                        title="Close code block",
                        position=Position(line=last_line, character=len(scan.lines[last_line])),
                        text=f"\n{closing}",
                    ),
                ),
            )

        for link in scan.links:
            span = TextRange.span(link.line, link.start, link.end)
            if not link.text.strip():
                issues.append(
                    ValidationIssue(
                        severity=Severity.ERROR,
                        message="Link has empty text",
                        range=span,
                        code=IssueCode.EMPTY_LINK_TEXT,
                    ),
                )
            if not link.url.strip():
                issues.append(
                    ValidationIssue(
                        severity=Severity.ERROR,
                        message="Link has empty URL",
                        range=span,
                        code=IssueCode.EMPTY_LINK_URL,
                    ),
                )
        return issues


def _warning(code: IssueCode, message: str) -> ValidationIssue:
    return ValidationIssue(
        severity=Severity.WARNING,
        message=message,
        range=TextRange.document_start(),
        code=code,
    )


def validate(text: str) -> ValidationResult:
    """Validate ``text`` with the default rules."""

    return SteeringValidator().validate(text)


__all__ = [
    "DEFAULT_MIN_CONTENT_LENGTH",
    "DEFAULT_REQUIRED_SECTIONS",
    "IMPERATIVE_VERBS",
    "SteeringValidator",
    "scan_document",
    "validate",
]
