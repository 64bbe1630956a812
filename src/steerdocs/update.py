# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Update detection, customisation detection, and backup-guarded updates."""

from __future__ import annotations

import difflib
import logging
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from .backup import create_backup
from .catalog import CatalogEntry, FrameworkCatalog
from .errors import (
    FileAccessError,
    FrameworkNotInstalledError,
    InstalledFileMissingError,
    SteerdocsError,
)
from .filesystem import FileAccess
from .hashing import compute_content_hash
from .install import InstallationEngine
from .state import InstalledRecord, MetadataStore

LOGGER = logging.getLogger(__name__)


class UpdateMode(str, Enum):
    """How :meth:`UpdateEngine.update` treats customised documents.

    ``SAFE`` asks the confirmation callback before touching a customised
    document, ``BACKUP`` means the caller already agreed to a backup-guarded
    overwrite, and ``PREVIEW`` never writes.
    """

    SAFE = "safe"
    BACKUP = "backup"
    PREVIEW = "preview"


class UpdateStatus(str, Enum):
    UPDATED = "updated"
    CANCELLED = "cancelled"
    PREVIEW = "preview"


class CancellationToken(Protocol):
    """Anything exposing ``is_set()``, e.g. :class:`threading.Event`."""

    def is_set(self) -> bool: ...


class UpdateCandidate(BaseModel):
    """An installed framework whose catalog version differs from the installed one."""

    model_config = ConfigDict(frozen=True)

    framework_id: str
    current_version: str
    latest_version: str
    changes: tuple[str, ...] = Field(default_factory=tuple)


class UpdatePreview(BaseModel):
    """Both texts of a pending update so the caller can show a diff."""

    model_config = ConfigDict(frozen=True)

    framework_id: str
    path: Path
    target_path: Path
    current_version: str
    latest_version: str
    customized: bool
    current_text: str
    new_text: str

    def diff(self, *, context: int = 3) -> str:
        """Return a unified diff from the installed text to the catalog text."""

        lines = difflib.unified_diff(
            self.current_text.splitlines(keepends=True),
            self.new_text.splitlines(keepends=True),
            fromfile=f"{self.path.name} (installed {self.current_version})",
            tofile=f"{self.target_path.name} (catalog {self.latest_version})",
            n=context,
        )
        return "".join(lines)


class UpdateResult(BaseModel):
    """Outcome of a single framework update."""

    model_config = ConfigDict(frozen=True)

    framework_id: str
    status: UpdateStatus
    previous_version: str
    version: str
    customized: bool
    backup_path: Path | None = None
    preview: UpdatePreview | None = None


class CustomizationStatus(BaseModel):
    """Per-framework result of :meth:`UpdateEngine.scan_customizations`."""

    model_config = ConfigDict(frozen=True)

    framework_id: str
    path: Path | None
    customized: bool = False
    missing: bool = False
    error: str | None = None


class UpdateSummary(BaseModel):
    """Aggregated results of :meth:`UpdateEngine.update_all`."""

    model_config = ConfigDict(validate_assignment=True)

    results: list[UpdateResult] = Field(default_factory=list)
    failures: list[tuple[str, str]] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    cancelled: bool = False

    def register_result(self, result: UpdateResult) -> None:
        self.results = [*self.results, result]

    def register_failure(self, framework_id: str, message: str) -> None:
        self.failures = [*self.failures, (framework_id, message)]

    def register_skip(self, framework_id: str) -> None:
        self.skipped = [*self.skipped, framework_id]

    @property
    def updated(self) -> list[str]:
        return [result.framework_id for result in self.results if result.status is UpdateStatus.UPDATED]

    def exit_code(self) -> int:
        return 1 if self.failures else 0


ConfirmCallback = Callable[[UpdatePreview], bool]


class UpdateEngine:
    """Detect and apply catalog updates to installed frameworks."""

    def __init__(
        self,
        *,
        catalog: FrameworkCatalog,
        store: MetadataStore,
        files: FileAccess,
        installer: InstallationEngine,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._files = files
        self._installer = installer

    def check_for_updates(self) -> list[UpdateCandidate]:
        """Return candidates for installed frameworks whose catalog version changed.

        Frameworks that left the catalog are skipped silently.
        """

        candidates: list[UpdateCandidate] = []
        for record in self._store.load():
            entry = self._catalog.get_by_id(record.id)
            if entry is None:
                LOGGER.debug("skipping %s: no longer in the catalog", record.id)
                continue
            if entry.version != record.version:
                candidates.append(
                    UpdateCandidate(
                        framework_id=record.id,
                        current_version=record.version,
                        latest_version=entry.version,
                        changes=(f"Updated to version {entry.version}",),
                    ),
                )
        return candidates

    def is_customized(self, framework_id: str) -> bool:
        """Return ``True`` when the installed document differs from what was last written.

        Raises:
            FrameworkNotInstalledError: If ``framework_id`` has no installed record.
            InstalledFileMissingError: If the installed document was deleted.
        """

        record = self._require_record(framework_id)
        path = self._installer.record_path(record)
        return _is_customized(record, self._read_installed(record.id, path))

    def scan_customizations(self) -> list[CustomizationStatus]:
        """Check every installed framework, reporting per-item problems instead of raising."""

        statuses: list[CustomizationStatus] = []
        for record in self._store.load():
            try:
                path = self._installer.record_path(record)
                text = self._read_installed(record.id, path)
            except InstalledFileMissingError as exc:
                statuses.append(CustomizationStatus(framework_id=record.id, path=exc.path, missing=True))
                continue
            except SteerdocsError as exc:
                statuses.append(CustomizationStatus(framework_id=record.id, path=None, error=str(exc)))
                continue
            statuses.append(
                CustomizationStatus(
                    framework_id=record.id,
                    path=path,
                    customized=_is_customized(record, text),
                ),
            )
        return statuses

    def preview(self, framework_id: str) -> UpdatePreview:
        """Return both texts of the pending update without writing anything."""

        _, _, preview = self._prepare(framework_id)
        return preview

    def update(
        self,
        framework_id: str,
        mode: UpdateMode = UpdateMode.SAFE,
        *,
        confirm: ConfirmCallback | None = None,
    ) -> UpdateResult:
        """Replace the installed document with the current catalog version.

        When the catalog release renamed the document, the new file is written
        and the previously installed one is removed.

        Args:
            framework_id: Framework to update.
            mode: Policy for customised documents, see :class:`UpdateMode`.
            confirm: Called with the preview before overwriting a customised
                document in ``SAFE`` mode; returning ``False`` cancels.

        Returns:
            UpdateResult: ``UPDATED``, ``CANCELLED`` (nothing written), or
            ``PREVIEW`` (nothing written).

        Raises:
            FrameworkNotFoundError: If the framework is not in the catalog.
            FrameworkNotInstalledError: If the framework has no installed record.
            InstalledFileMissingError: If the installed document was deleted.
            ConcurrentModificationError: If the document changed during the update.
        """

        entry, record, preview = self._prepare(framework_id)

        def _result(status: UpdateStatus, backup_path: Path | None = None) -> UpdateResult:
            return UpdateResult(
                framework_id=framework_id,
                status=status,
                previous_version=record.version,
                version=entry.version,
                customized=preview.customized,
                backup_path=backup_path,
                preview=preview,
            )

        if mode is UpdateMode.PREVIEW:
            return _result(UpdateStatus.PREVIEW)
        if preview.customized and mode is UpdateMode.SAFE and (confirm is None or not confirm(preview)):
            LOGGER.info("update of customised framework %s cancelled", framework_id)
            return _result(UpdateStatus.CANCELLED)

        backup_path = create_backup(self._files, preview.path) if preview.customized else None
        self._installer.write_and_record(
            entry,
            preview.new_text,
            observed=preview.current_text,
            source=preview.path,
        )
        LOGGER.info("updated %s from %s to %s", framework_id, record.version, entry.version)
        return _result(UpdateStatus.UPDATED, backup_path)

    def update_all(
        self,
        mode: UpdateMode = UpdateMode.SAFE,
        *,
        confirm: ConfirmCallback | None = None,
        cancel: CancellationToken | None = None,
    ) -> UpdateSummary:
        """Update every outdated framework, isolating per-framework failures.

        Args:
            mode: Policy applied to each update.
            confirm: Confirmation callback forwarded to :meth:`update`.
            cancel: Checked before each framework; once set the remaining
                frameworks are reported as skipped.

        Returns:
            UpdateSummary: Results, failures, and skipped frameworks.
        """

        summary = UpdateSummary()
        candidates = self.check_for_updates()
        for position, candidate in enumerate(candidates):
            if cancel is not None and cancel.is_set():
                summary.cancelled = True
                for remaining in candidates[position:]:
                    summary.register_skip(remaining.framework_id)
                LOGGER.info("update-all cancelled with %d framework(s) left", len(candidates) - position)
                break
            try:
                result = self.update(candidate.framework_id, mode, confirm=confirm)
            except (SteerdocsError, OSError) as exc:
                LOGGER.warning("update of %s failed: %s", candidate.framework_id, exc)
                summary.register_failure(candidate.framework_id, str(exc))
                continue
            summary.register_result(result)
        return summary

    def _prepare(self, framework_id: str) -> tuple[CatalogEntry, InstalledRecord, UpdatePreview]:
        # Catalog lookup first: unknown ids fail before any file access.
        entry = self._catalog.require(framework_id)
        record = self._require_record(framework_id)
        path = self._installer.record_path(record)
        observed = self._read_installed(framework_id, path)
        preview = UpdatePreview(
            framework_id=framework_id,
            path=path,
            target_path=self._installer.target_path(entry),
            current_version=record.version,
            latest_version=entry.version,
            customized=_is_customized(record, observed),
            current_text=observed,
            new_text=self._catalog.read_content(entry),
        )
        return entry, record, preview

    def _require_record(self, framework_id: str) -> InstalledRecord:
        record = self._store.get(framework_id)
        if record is None:
            raise FrameworkNotInstalledError(framework_id)
        return record

    def _read_installed(self, framework_id: str, path: Path) -> str:
        if not self._files.exists(path):
            raise InstalledFileMissingError(framework_id, path)
        try:
            return self._files.read(path)
        except FileAccessError as exc:
            if not self._files.exists(path):
                raise InstalledFileMissingError(framework_id, path) from exc
            raise


def _is_customized(record: InstalledRecord, text: str) -> bool:
    if record.content_hash is None:
        return record.customized
    return compute_content_hash(text) != record.content_hash


__all__ = [
    "CancellationToken",
    "ConfirmCallback",
    "CustomizationStatus",
    "UpdateCandidate",
    "UpdateEngine",
    "UpdateMode",
    "UpdatePreview",
    "UpdateResult",
    "UpdateStatus",
    "UpdateSummary",
]
