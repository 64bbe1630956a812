# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Well-known locations for bundled resources and workspace state."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Final

KIRO_DIR_NAME: Final[str] = ".kiro"
STEERING_DIR: Final[Path] = Path(KIRO_DIR_NAME) / "steering"
METADATA_DIR: Final[Path] = Path(KIRO_DIR_NAME) / ".metadata"
INSTALLED_METADATA_FILE: Final[str] = "installed-frameworks.json"
MANIFEST_FILE: Final[str] = "manifest.json"


@lru_cache(maxsize=1)
def get_package_root() -> Path:
    """Return the directory containing the installed ``steerdocs`` package."""

    return Path(__file__).resolve().parent


def bundled_resources_root() -> Path:
    """Return the directory holding bundled frameworks, schemas, and templates."""

    return get_package_root() / "resources"


def bundled_frameworks_root() -> Path:
    """Return the directory containing the bundled manifest and framework bodies."""

    return bundled_resources_root() / "frameworks"


def bundled_schema_root() -> Path:
    """Return the directory containing bundled JSON schemas."""

    return bundled_resources_root() / "schema"


def bundled_templates_root() -> Path:
    """Return the directory containing bundled steering document templates."""

    return bundled_resources_root() / "templates"


__all__ = [
    "INSTALLED_METADATA_FILE",
    "KIRO_DIR_NAME",
    "MANIFEST_FILE",
    "METADATA_DIR",
    "STEERING_DIR",
    "bundled_frameworks_root",
    "bundled_resources_root",
    "bundled_schema_root",
    "bundled_templates_root",
    "get_package_root",
]
