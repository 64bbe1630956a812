# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Issue and result models produced by the steering document validator."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """Severity levels attached to validation issues."""

    ERROR = "error"
    WARNING = "warning"


class IssueCode(str, Enum):
    """Machine-readable identifiers for every check the validator performs."""

    MISSING_SECTION = "missing-section"
    NO_ACTIONABLE_GUIDANCE = "no-actionable-guidance"
    NO_EXAMPLES = "no-examples"
    CONTENT_TOO_SHORT = "content-too-short"
    HEADING_HIERARCHY = "heading-hierarchy"
    EMPTY_HEADING = "empty-heading"
    UNCLOSED_CODE_BLOCK = "unclosed-code-block"
    EMPTY_LINK_TEXT = "empty-link-text"
    EMPTY_LINK_URL = "empty-link-url"


class Position(BaseModel):
    """Zero-based line and character offset."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    character: int = Field(ge=0)


class TextRange(BaseModel):
    """Span of text an issue refers to."""

    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position

    @classmethod
    def span(cls, line: int, start: int, end: int) -> TextRange:
        return cls(start=Position(line=line, character=start), end=Position(line=line, character=end))

    @classmethod
    def document_start(cls) -> TextRange:
        return cls.span(0, 0, 0)


class QuickFix(BaseModel):
    """Text insertion that resolves an issue."""

    model_config = ConfigDict(frozen=True)

    title: str
    position: Position
    text: str

    def apply(self, document: str) -> str:
        """Return ``document`` with :attr:`text` inserted at :attr:`position`."""

        lines = document.split("\n")
        line = min(self.position.line, len(lines) - 1)
        current = lines[line]
        column = min(self.position.character, len(current))
        lines[line] = current[:column] + self.text + current[column:]
        return "\n".join(lines)


class ValidationIssue(BaseModel):
    """A single finding reported by the validator."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    message: str
    range: TextRange
    code: IssueCode | None = None
    fix: QuickFix | None = None


class ValidationResult(BaseModel):
    """Errors and warnings for one document; a document is valid when it has no errors."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    issues: tuple[ValidationIssue, ...] = Field(default_factory=tuple)
    warnings: tuple[ValidationIssue, ...] = Field(default_factory=tuple)

    @classmethod
    def from_issues(cls, found: Iterable[ValidationIssue]) -> ValidationResult:
        collected = tuple(found)
        errors = tuple(issue for issue in collected if issue.severity is Severity.ERROR)
        warnings = tuple(issue for issue in collected if issue.severity is Severity.WARNING)
        return cls(is_valid=not errors, issues=errors, warnings=warnings)

    @property
    def all_issues(self) -> tuple[ValidationIssue, ...]:
        return self.issues + self.warnings


__all__ = [
    "IssueCode",
    "Position",
    "QuickFix",
    "Severity",
    "TextRange",
    "ValidationIssue",
    "ValidationResult",
]
