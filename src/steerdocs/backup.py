# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Timestamped backups taken before destructive overwrites."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Final

from .filesystem import FileAccess

LOGGER = logging.getLogger(__name__)

BACKUP_MARKER: Final[str] = ".backup-"
BACKUP_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<name>.+)\.backup-(?P<stamp>\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}-\d{3}Z)(?:-(?P<counter>\d+))?$"
)


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as ISO 8601 UTC with ``:`` and ``.`` replaced by ``-``.

    Example: ``2025-03-01T09:15:42.120Z`` becomes ``2025-03-01T09-15-42-120Z``.
    """

    moment = moment.astimezone(timezone.utc)
    iso = f"{moment.strftime('%Y-%m-%dT%H:%M:%S')}.{moment.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def backup_name(path: Path, moment: datetime) -> Path:
    """Return the backup path for ``path`` taken at ``moment``."""

    return path.with_name(f"{path.name}{BACKUP_MARKER}{format_timestamp(moment)}")


def create_backup(files: FileAccess, path: Path, *, moment: datetime | None = None) -> Path:
    """Copy ``path`` to a fresh backup file alongside it.

    A numeric ``-N`` suffix is appended when a backup with the same timestamp
    already exists, so an earlier backup is never overwritten.

    Args:
        files: File access layer used for existence checks and the copy.
        path: File to back up.
        moment: Timestamp for the backup name; defaults to now.

    Returns:
        Path: Location of the created backup.
    """

    candidate = backup_name(path, moment or datetime.now(timezone.utc))
    base = candidate
    counter = 0
    while files.exists(candidate):
        counter += 1
        candidate = base.with_name(f"{base.name}-{counter}")
    files.copy(path, candidate)
    LOGGER.info("backed up %s to %s", path, candidate.name)
    return candidate


def list_backups(files: FileAccess, path: Path) -> list[Path]:
    """Return existing backups of ``path`` sorted by name."""

    candidates = files.list_files(path.parent, f"{path.name}{BACKUP_MARKER}*")
    return sorted(
        candidate
        for candidate in candidates
        if (match := BACKUP_PATTERN.match(candidate.name)) and match.group("name") == path.name
    )


__all__ = [
    "BACKUP_MARKER",
    "BACKUP_PATTERN",
    "backup_name",
    "create_backup",
    "format_timestamp",
    "list_backups",
]
