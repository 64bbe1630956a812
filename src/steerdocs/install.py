# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Install frameworks from the catalog into the steering directory."""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, model_validator

from .backup import create_backup
from .catalog import CatalogEntry, FrameworkCatalog
from .errors import ConcurrentModificationError, FrameworkNotInstalledError
from .filesystem import FileAccess
from .hashing import compute_content_hash
from .state import InstalledRecord, MetadataStore, utc_now

LOGGER = logging.getLogger(__name__)

MERGE_BEGIN_MARKER: Final[str] = "<!-- ========== MERGE CONFLICT: New Framework Content Below ========== -->"
MERGE_HINT_MARKER: Final[str] = "<!-- Review and integrate the content below, then remove conflict markers -->"
MERGE_END_MARKER: Final[str] = "<!-- ========== END MERGE CONFLICT ========== -->"


class InstallOptions(BaseModel):
    """Conflict resolution policy applied when the target already exists."""

    model_config = ConfigDict(frozen=True)

    overwrite: bool = False
    merge: bool = False
    create_backup: bool = False

    @model_validator(mode="after")
    def _exclusive_policies(self) -> InstallOptions:
        if self.overwrite and self.merge:
            raise ValueError("overwrite and merge are mutually exclusive")
        return self


class InstallStatus(str, Enum):
    """Outcome of an install request."""

    INSTALLED = "installed"
    OVERWRITTEN = "overwritten"
    MERGED = "merged"
    CONFLICT = "conflict"


class ConflictInfo(BaseModel):
    """Describe an existing target that blocked an install."""

    model_config = ConfigDict(frozen=True)

    path: Path
    size: int
    modified_at: datetime


class InstallResult(BaseModel):
    """Result returned by :meth:`InstallationEngine.install`."""

    model_config = ConfigDict(frozen=True)

    framework_id: str
    status: InstallStatus
    path: Path
    version: str
    backup_path: Path | None = None
    conflict: ConflictInfo | None = None

    @property
    def ok(self) -> bool:
        return self.status is not InstallStatus.CONFLICT


def merge_content(existing: str, incoming: str) -> str:
    """Append ``incoming`` to ``existing`` between explicit conflict markers.

    This is a naive concatenation; reconciling the two halves is left to the user.
    """

    return (
        f"{existing}\n\n"
        f"{MERGE_BEGIN_MARKER}\n"
        f"{MERGE_HINT_MARKER}\n\n"
        f"{incoming}\n\n"
        f"{MERGE_END_MARKER}\n"
    )


class InstallationEngine:
    """Copy catalog frameworks into the steering directory and record them."""

    def __init__(
        self,
        *,
        catalog: FrameworkCatalog,
        store: MetadataStore,
        files: FileAccess,
        steering_dir: Path,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._files = files
        self._steering_dir = steering_dir

    @property
    def steering_dir(self) -> Path:
        return self._steering_dir

    def target_path(self, entry: CatalogEntry) -> Path:
        return self._steering_dir / entry.file_name

    def record_path(self, record: InstalledRecord) -> Path:
        """Return the installed document for ``record``, tolerating retired catalog entries.

        Raises:
            FrameworkNotFoundError: When the record predates file name tracking and
                its framework is no longer in the catalog.
        """

        if record.file_name:
            return self._steering_dir / record.file_name
        return self.target_path(self._catalog.require(record.id))

    def install(self, framework_id: str, options: InstallOptions | None = None) -> InstallResult:
        """Install ``framework_id`` into the steering directory.

        Args:
            framework_id: Catalog id of the framework to install.
            options: Conflict policy applied when the target already exists.

        Returns:
            InstallResult: ``CONFLICT`` when the target exists and no policy was
            chosen (nothing is written), otherwise the applied status.

        Raises:
            FrameworkNotFoundError: If ``framework_id`` is not in the catalog.
            FileAccessError: If reading or writing fails; the previous target
                and metadata are left untouched.
        """

        entry = self._catalog.require(framework_id)
        options = options or InstallOptions()
        path = self.target_path(entry)
        content = self._catalog.read_content(entry)
        self._files.ensure_directory(path.parent)

        observed = self._observe(path)
        if observed is not None and not (options.overwrite or options.merge):
            return self._conflict(entry, path)

        backup_path: Path | None = None
        if observed is not None and options.create_backup:
            backup_path = create_backup(self._files, path)

        if observed is None:
            status, payload = InstallStatus.INSTALLED, content
        elif options.merge:
            status, payload = InstallStatus.MERGED, merge_content(observed, content)
        else:
            status, payload = InstallStatus.OVERWRITTEN, content

        try:
            self.write_and_record(entry, payload, observed=observed)
        except ConcurrentModificationError:
            if observed is not None:
                raise
            return self._conflict(entry, path)

        LOGGER.info("%s %s %s -> %s", status.value, entry.id, entry.version, path)
        return InstallResult(
            framework_id=entry.id,
            status=status,
            path=path,
            version=entry.version,
            backup_path=backup_path,
        )

    def write_and_record(
        self,
        entry: CatalogEntry,
        content: str,
        *,
        observed: str | None,
        source: Path | None = None,
    ) -> InstalledRecord:
        """Write ``content`` for ``entry`` and upsert its installed record.

        The document the caller read (``source``, defaulting to the catalog
        target) is re-read immediately before the write and compared with
        ``observed``. When ``source`` differs from the target the target must
        not exist yet, and ``source`` is removed once the new text is written.
        When the metadata cannot be saved the previous state is restored.

        Args:
            entry: Catalog entry being written.
            content: Exact text written to the target.
            observed: Content of ``source`` seen by the caller, ``None`` when absent.
            source: Currently installed document when it lives under another name.

        Returns:
            InstalledRecord: Record stored for ``entry``.

        Raises:
            ConcurrentModificationError: If ``source`` changed since ``observed``
                or a renamed target already exists.
        """

        path = self.target_path(entry)
        source = source or path
        moved = source != path
        record = InstalledRecord(
            id=entry.id,
            version=entry.version,
            installed_at=utc_now(),
            customized=False,
            content_hash=compute_content_hash(content),
            file_name=entry.file_name,
        )
        written = False
        try:
            with self._store.mutate() as state:
                self._verify_unchanged(source, observed)
                if moved:
                    self._verify_unchanged(path, None)
                self._files.write(path, content)
                written = True
                if moved:
                    self._files.delete(source)
                state.upsert(record)
        except Exception:
            if written:
                LOGGER.warning("restoring %s after failed metadata update", source)
                if moved:
                    self._files.delete(path)
                self._restore(source, observed)
            raise
        if moved:
            LOGGER.info("%s moved from %s to %s", entry.id, source.name, path.name)
        return record

    def is_installed(self, framework_id: str) -> bool:
        return self._store.get(framework_id) is not None

    def installed_record(self, framework_id: str) -> InstalledRecord | None:
        return self._store.get(framework_id)

    def installed_records(self) -> list[InstalledRecord]:
        return list(self._store.load())

    def list_installed(self) -> list[CatalogEntry]:
        """Return catalog entries for installed frameworks, skipping retired ids."""

        entries: list[CatalogEntry] = []
        for record in self._store.load():
            entry = self._catalog.get_by_id(record.id)
            if entry is not None:
                entries.append(entry)
        return entries

    def uninstall(self, framework_id: str, *, create_backup_copy: bool = False) -> Path:
        """Delete the installed document and forget its record.

        Returns:
            Path: Location of the removed document.

        Raises:
            FrameworkNotInstalledError: If no record exists for ``framework_id``.
        """

        with self._store.mutate() as state:
            record = state.get(framework_id)
            if record is None:
                raise FrameworkNotInstalledError(framework_id)
            path = self.record_path(record)
            if create_backup_copy and self._files.exists(path):
                create_backup(self._files, path)
            self._files.delete(path)
            state.remove(framework_id)
        LOGGER.info("uninstalled %s (%s)", framework_id, path)
        return path

    def mark_customized(self, framework_id: str) -> InstalledRecord:
        """Flag ``framework_id`` as customised by the user."""

        with self._store.mutate() as state:
            record = state.get(framework_id)
            if record is None:
                raise FrameworkNotInstalledError(framework_id)
            updated = record.model_copy(update={"customized": True, "customized_at": utc_now()})
            state.upsert(updated)
        return updated

    def _observe(self, path: Path) -> str | None:
        if not self._files.exists(path):
            return None
        return self._files.read(path)

    def _verify_unchanged(self, path: Path, observed: str | None) -> None:
        current = self._observe(path)
        if current != observed:
            raise ConcurrentModificationError(path)

    def _restore(self, path: Path, observed: str | None) -> None:
        if observed is None:
            self._files.delete(path)
        else:
            self._files.write(path, observed)

    def _conflict(self, entry: CatalogEntry, path: Path) -> InstallResult:
        stat = self._files.stat(path)
        LOGGER.info("install of %s skipped: %s already exists", entry.id, path)
        return InstallResult(
            framework_id=entry.id,
            status=InstallStatus.CONFLICT,
            path=path,
            version=entry.version,
            conflict=ConflictInfo(path=path, size=stat.size, modified_at=stat.modified_at),
        )


__all__ = [
    "ConflictInfo",
    "InstallOptions",
    "InstallResult",
    "InstallStatus",
    "InstallationEngine",
    "MERGE_BEGIN_MARKER",
    "MERGE_END_MARKER",
    "merge_content",
]
