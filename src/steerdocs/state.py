# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Installed-state metadata persisted next to the steering directory."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from threading import RLock
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MetadataCorruptError
from .filesystem import FileAccess

LOGGER = logging.getLogger(__name__)

FRAMEWORKS_KEY = "frameworks"


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(timezone.utc)


class InstalledRecord(BaseModel):
    """Bookkeeping for one installed framework."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: str = Field(min_length=1)
    version: str
    installed_at: datetime = Field(alias="installedAt")
    customized: bool = False
    customized_at: datetime | None = Field(default=None, alias="customizedAt")
    content_hash: str | None = Field(default=None, alias="contentHash")
    file_name: str | None = Field(default=None, alias="fileName")

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class InstalledState:
    """Ordered collection of :class:`InstalledRecord` keyed by framework id."""

    def __init__(self, records: list[InstalledRecord] | None = None) -> None:
        self._records: dict[str, InstalledRecord] = {}
        for record in records or ():
            self.upsert(record)

    def __iter__(self) -> Iterator[InstalledRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, framework_id: object) -> bool:
        return framework_id in self._records

    def get(self, framework_id: str) -> InstalledRecord | None:
        return self._records.get(framework_id)

    def upsert(self, record: InstalledRecord) -> None:
        """Insert ``record`` or replace the existing record in place."""

        self._records[record.id] = record

    def remove(self, framework_id: str) -> InstalledRecord | None:
        return self._records.pop(framework_id, None)

    def to_document(self) -> dict[str, Any]:
        return {FRAMEWORKS_KEY: [record.to_json() for record in self._records.values()]}

    @classmethod
    def from_document(cls, document: Any, *, source: Path) -> InstalledState:
        """Build state from a parsed metadata document.

        Raises:
            MetadataCorruptError: When the document shape is not understood or
                lists the same framework twice.
        """

        if not isinstance(document, dict) or not isinstance(document.get(FRAMEWORKS_KEY), list):
            raise MetadataCorruptError(source, f"expected an object with a '{FRAMEWORKS_KEY}' array")
        records: list[InstalledRecord] = []
        seen: set[str] = set()
        for position, raw in enumerate(document[FRAMEWORKS_KEY]):
            try:
                record = InstalledRecord.model_validate(raw)
            except ValidationError as exc:
                raise MetadataCorruptError(source, f"entry {position}: {exc.errors()[0]['msg']}") from exc
            if record.id in seen:
                raise MetadataCorruptError(source, f"framework '{record.id}' is listed more than once")
            seen.add(record.id)
            records.append(record)
        return cls(records)


class MetadataStore:
    """Load and persist :class:`InstalledState` through a :class:`FileAccess`."""

    def __init__(self, path: Path, files: FileAccess) -> None:
        self._path = path
        self._files = files
        self._lock = RLock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> InstalledState:
        """Return the persisted state; a missing document means nothing is installed.

        Raises:
            MetadataCorruptError: When the document exists but cannot be parsed.
        """

        if not self._files.exists(self._path):
            return InstalledState()
        text = self._files.read(self._path)
        if not text.strip():
            return InstalledState()
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MetadataCorruptError(self._path, f"invalid JSON at line {exc.lineno}") from exc
        return InstalledState.from_document(document, source=self._path)

    def save(self, state: InstalledState) -> None:
        payload = json.dumps(state.to_document(), indent=2) + "\n"
        self._files.write(self._path, payload)
        LOGGER.debug("saved %d installed records to %s", len(state), self._path)

    def get(self, framework_id: str) -> InstalledRecord | None:
        return self.load().get(framework_id)

    @contextmanager
    def mutate(self) -> Iterator[InstalledState]:
        """Yield the current state and persist it when the block exits cleanly.

        The read-modify-write cycle runs under the store lock so two callers in
        the same process never interleave their updates.
        """

        with self._lock:
            state = self.load()
            yield state
            self.save(state)


__all__ = [
    "InstalledRecord",
    "InstalledState",
    "MetadataStore",
    "utc_now",
]
