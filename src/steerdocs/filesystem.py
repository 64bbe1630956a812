# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""File access layer shared by the catalog, installation, and update engines."""

from __future__ import annotations

import errno
import os
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from fnmatch import fnmatch
from pathlib import Path
from typing import Protocol, runtime_checkable

from .errors import FileAccessError, PermissionDeniedError

TEXT_ENCODING = "utf-8"


@dataclass(frozen=True, slots=True)
class FileStat:
    """Size and modification time of an existing file."""

    size: int
    modified_at: datetime


@runtime_checkable
class FileAccess(Protocol):
    """Protocol describing the storage operations consumed by the engines."""

    def exists(self, path: Path) -> bool:
        """Return ``True`` when ``path`` is an existing regular file."""

    def read(self, path: Path) -> str:
        """Return the text stored at ``path`` without newline translation."""

    def write(self, path: Path, content: str) -> None:
        """Atomically replace ``path`` with ``content``."""

    def copy(self, source: Path, destination: Path) -> None:
        """Copy ``source`` to ``destination`` byte-for-byte."""

    def delete(self, path: Path) -> None:
        """Remove ``path``; a missing file counts as deleted."""

    def ensure_directory(self, path: Path) -> None:
        """Create ``path`` and its parents when missing."""

    def stat(self, path: Path) -> FileStat:
        """Return size and modification time for ``path``."""

    def list_files(self, directory: Path, pattern: str = "*") -> list[Path]:
        """Return regular files inside ``directory`` whose names match ``pattern``."""


class LocalFileAccess:
    """:class:`FileAccess` implementation backed by the local filesystem."""

    def exists(self, path: Path) -> bool:
        try:
            return path.is_file()
        except PermissionError as exc:
            raise PermissionDeniedError(path, "inspect") from exc

    def read(self, path: Path) -> str:
        with _translate_os_errors(path, "read"):
            return path.read_bytes().decode(TEXT_ENCODING)

    def write(self, path: Path, content: str) -> None:
        """Write ``content`` through a sibling temporary file and an atomic rename.

        Args:
            path: Destination file.
            content: Text persisted as UTF-8 without newline translation.

        Raises:
            PermissionDeniedError: When the directory or file is not writable.
            FileAccessError: For any other operating system failure. The
                previous file content is left untouched in both cases.
        """

        self.ensure_directory(path.parent)
        with _translate_os_errors(path, "write"):
            fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(content.encode(TEXT_ENCODING))
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(temp_name, path)
            except BaseException:
                _discard(Path(temp_name))
                raise

    def copy(self, source: Path, destination: Path) -> None:
        self.ensure_directory(destination.parent)
        with _translate_os_errors(source, "copy"):
            shutil.copyfile(source, destination)

    def delete(self, path: Path) -> None:
        with _translate_os_errors(path, "delete"):
            try:
                path.unlink()
            except FileNotFoundError:
                return

    def ensure_directory(self, path: Path) -> None:
        with _translate_os_errors(path, "create directory"):
            path.mkdir(parents=True, exist_ok=True)

    def stat(self, path: Path) -> FileStat:
        with _translate_os_errors(path, "stat"):
            result = path.stat()
        return FileStat(
            size=result.st_size,
            modified_at=datetime.fromtimestamp(result.st_mtime, tz=timezone.utc),
        )

    def list_files(self, directory: Path, pattern: str = "*") -> list[Path]:
        if not directory.is_dir():
            return []
        with _translate_os_errors(directory, "list"):
            entries = sorted(directory.iterdir())
        return [entry for entry in entries if entry.is_file() and fnmatch(entry.name, pattern)]


@contextmanager
def _translate_os_errors(path: Path, operation: str) -> Iterator[None]:
    """Re-raise :class:`OSError` as package errors carrying ``path`` and ``operation``."""

    try:
        yield
    except PermissionError as exc:
        raise PermissionDeniedError(path, operation) from exc
    except FileNotFoundError as exc:
        raise FileAccessError(path, operation, "no such file or directory") from exc
    except OSError as exc:
        if exc.errno in {errno.EACCES, errno.EPERM}:
            raise PermissionDeniedError(path, operation) from exc
        raise FileAccessError(path, operation, exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise FileAccessError(path, operation, f"not valid {TEXT_ENCODING} text") from exc


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass


__all__ = [
    "FileAccess",
    "FileStat",
    "LocalFileAccess",
    "TEXT_ENCODING",
]
