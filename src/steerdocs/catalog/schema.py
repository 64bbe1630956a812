# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Schema loading utilities for validating the framework manifest."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from ..errors import ManifestSchemaError
from ..paths import bundled_schema_root

MANIFEST_SCHEMA_NAME = "manifest.schema.json"


@dataclass(slots=True)
class SchemaRepository:
    """Hold the JSON schema validator applied to manifest documents."""

    schema_path: Path
    manifest_validator: Draft202012Validator

    @classmethod
    def load(cls, schema_root: Path | None = None) -> SchemaRepository:
        """Load the manifest schema from ``schema_root`` or the bundled resources.

        Args:
            schema_root: Optional override for the schema directory.

        Returns:
            SchemaRepository: Repository configured with the manifest validator.
        """

        path = (schema_root or bundled_schema_root()) / MANIFEST_SCHEMA_NAME
        with path.open("r", encoding="utf-8") as stream:
            schema = json.load(stream)
        Draft202012Validator.check_schema(schema)
        return cls(schema_path=path, manifest_validator=Draft202012Validator(schema))

    def validate_manifest(self, document: Mapping[str, Any] | Any, *, source: Path) -> None:
        """Validate ``document`` and report every violation at once.

        Args:
            document: Parsed manifest payload.
            source: Manifest path used in error messages.

        Raises:
            ManifestSchemaError: When the document violates the schema.
        """

        errors = list(self.manifest_validator.iter_errors(document))
        if not errors:
            return
        details = "; ".join(_describe(error) for error in errors)
        raise ManifestSchemaError(f"{source}: {details}")


def _describe(error: ValidationError) -> str:
    location = "/".join(str(part) for part in error.absolute_path) or "<root>"
    return f"{location}: {error.message}"


__all__ = ["MANIFEST_SCHEMA_NAME", "SchemaRepository"]
