# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Models describing the bundled framework manifest."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FrameworkCategory(str, Enum):
    """Enumerate the categories a framework may belong to."""

    ARCHITECTURE = "architecture"
    TESTING = "testing"
    SECURITY = "security"
    DEVOPS = "devops"
    CLOUD = "cloud"
    INFRASTRUCTURE = "infrastructure"
    WORK_MANAGEMENT = "work-management"

    @property
    def label(self) -> str:
        """Return a human readable label for the category."""

        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS: dict[FrameworkCategory, str] = {
    FrameworkCategory.ARCHITECTURE: "Architecture",
    FrameworkCategory.TESTING: "Testing",
    FrameworkCategory.SECURITY: "Security",
    FrameworkCategory.DEVOPS: "DevOps",
    FrameworkCategory.CLOUD: "Cloud",
    FrameworkCategory.INFRASTRUCTURE: "Infrastructure",
    FrameworkCategory.WORK_MANAGEMENT: "Work Management",
}


class CatalogEntry(BaseModel):
    """Installable framework described by the manifest."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    name: str
    description: str
    category: FrameworkCategory
    version: str
    file_name: str = Field(alias="fileName")
    dependencies: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("dependencies", mode="before")
    @classmethod
    def _coerce_dependencies(cls, value: object) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, (list, tuple)):
            return tuple(str(entry) for entry in value)
        raise ValueError("CatalogEntry.dependencies must be a list of framework ids")

    def matches(self, needle: str) -> bool:
        """Return ``True`` when the lower-cased ``needle`` occurs in name, description, or category."""

        return (
            needle in self.name.lower()
            or needle in self.description.lower()
            or needle in self.category.value.lower()
        )


class Manifest(BaseModel):
    """Parsed manifest document."""

    model_config = ConfigDict(frozen=True)

    version: str
    frameworks: tuple[CatalogEntry, ...] = Field(default_factory=tuple)

    def index(self) -> dict[str, CatalogEntry]:
        """Return entries keyed by framework id."""

        return {entry.id: entry for entry in self.frameworks}


__all__ = ["CatalogEntry", "FrameworkCategory", "Manifest"]
