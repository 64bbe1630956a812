# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Loader that parses, validates, and materialises the framework manifest."""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import ManifestIntegrityError, ManifestParseError, ManifestSchemaError
from ..filesystem import FileAccess, LocalFileAccess
from ..paths import MANIFEST_FILE, bundled_frameworks_root
from .models import CatalogEntry, Manifest
from .schema import SchemaRepository

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ManifestLoader:
    """Read the manifest from ``frameworks_root`` and turn it into a :class:`Manifest`."""

    frameworks_root: Path = field(default_factory=bundled_frameworks_root)
    schema_root: Path | None = None
    files: FileAccess = field(default_factory=LocalFileAccess)
    _schemas: SchemaRepository = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._schemas = SchemaRepository.load(self.schema_root)

    @property
    def manifest_path(self) -> Path:
        """Return the path of the manifest document."""

        return self.frameworks_root / MANIFEST_FILE

    def source_path(self, entry: CatalogEntry) -> Path:
        """Return the bundled source document for ``entry``."""

        return self.frameworks_root / entry.file_name

    def load(self) -> Manifest:
        """Load and validate the manifest.

        Returns:
            Manifest: Validated manifest with entries in document order.

        Raises:
            ManifestParseError: If the document is not valid JSON.
            ManifestSchemaError: If any entry misses required fields.
            ManifestIntegrityError: If two entries share an id.
        """

        path = self.manifest_path
        document = _parse_json(self.files.read(path), source=path)
        self._schemas.validate_manifest(document, source=path)
        try:
            manifest = Manifest.model_validate(document)
        except ValidationError as exc:
            raise ManifestSchemaError(f"{path}: {exc}") from exc
        _check_integrity(manifest, source=path)
        LOGGER.debug("loaded %d frameworks from %s", len(manifest.frameworks), path)
        return manifest


def _parse_json(text: str, *, source: Path) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(
            f"{source}: failed to parse manifest JSON (line {exc.lineno}, column {exc.colno}: {exc.msg})"
        ) from exc


def _check_integrity(manifest: Manifest, *, source: Path) -> None:
    """Reject duplicate ids and log dependencies on unknown frameworks."""

    counts = Counter(entry.id for entry in manifest.frameworks)
    duplicates = sorted(framework_id for framework_id, count in counts.items() if count > 1)
    if duplicates:
        raise ManifestIntegrityError(f"{source}: duplicate framework ids: {', '.join(duplicates)}")
    for entry in manifest.frameworks:
        unknown = [dependency for dependency in entry.dependencies if dependency not in counts]
        if unknown:
            LOGGER.warning(
                "framework %s depends on unknown framework(s): %s",
                entry.id,
                ", ".join(unknown),
            )


__all__ = ["ManifestLoader"]
