# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Steering document validation."""

from __future__ import annotations

from .models import (
    IssueCode,
    Position,
    QuickFix,
    Severity,
    TextRange,
    ValidationIssue,
    ValidationResult,
)
from .validator import (
    DEFAULT_MIN_CONTENT_LENGTH,
    DEFAULT_REQUIRED_SECTIONS,
    SteeringValidator,
    validate,
)

__all__ = [
    "DEFAULT_MIN_CONTENT_LENGTH",
    "DEFAULT_REQUIRED_SECTIONS",
    "IssueCode",
    "Position",
    "QuickFix",
    "Severity",
    "SteeringValidator",
    "TextRange",
    "ValidationIssue",
    "ValidationResult",
    "validate",
]
