# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exception hierarchy raised by steering framework operations."""

from __future__ import annotations

from pathlib import Path


class SteerdocsError(RuntimeError):
    """Base class for every error raised by the package."""


class FrameworkNotFoundError(SteerdocsError):
    """Raised when a framework id is absent from the current catalog."""

    def __init__(self, framework_id: str) -> None:
        super().__init__(f"Framework not found: {framework_id}")
        self.framework_id = framework_id


class FrameworkNotInstalledError(SteerdocsError):
    """Raised when an operation requires an installed framework."""

    def __init__(self, framework_id: str) -> None:
        super().__init__(f"Framework not installed: {framework_id}")
        self.framework_id = framework_id


class ManifestError(SteerdocsError):
    """Base class for failures while loading the framework manifest."""


class ManifestParseError(ManifestError):
    """Raised when the manifest is not valid JSON."""


class ManifestSchemaError(ManifestError):
    """Raised when a manifest entry misses required fields or has the wrong shape."""


class ManifestIntegrityError(ManifestError):
    """Raised when manifest entries violate semantic invariants such as unique ids."""


class MetadataCorruptError(SteerdocsError):
    """Raised when the installed-state document exists but cannot be understood."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: installed-state metadata is corrupted ({reason})")
        self.path = path
        self.reason = reason


class InstalledFileMissingError(SteerdocsError):
    """Raised when an installed framework's target document no longer exists."""

    def __init__(self, framework_id: str, path: Path) -> None:
        super().__init__(f"Installed file for '{framework_id}' is missing: {path}")
        self.framework_id = framework_id
        self.path = path


class ConcurrentModificationError(SteerdocsError):
    """Raised when a target changed between the decision to write and the write itself."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"{path} changed while the operation was in progress; retry the command")
        self.path = path


class FileAccessError(SteerdocsError):
    """Raised when a filesystem operation fails.

    Attributes:
        path: Filesystem path the operation targeted.
        operation: Short name of the failed operation (``read``, ``write`` ...).
    """

    def __init__(self, path: Path, operation: str, detail: str) -> None:
        super().__init__(f"Failed to {operation} {path}: {detail}")
        self.path = path
        self.operation = operation
        self.detail = detail


class PermissionDeniedError(FileAccessError):
    """Raised when the operating system refuses access to a path."""

    def __init__(self, path: Path, operation: str) -> None:
        super().__init__(path, operation, "permission denied")


class ConfigError(SteerdocsError):
    """Raised when configuration input is invalid."""


__all__ = [
    "ConcurrentModificationError",
    "ConfigError",
    "FileAccessError",
    "FrameworkNotFoundError",
    "FrameworkNotInstalledError",
    "InstalledFileMissingError",
    "ManifestError",
    "ManifestIntegrityError",
    "ManifestParseError",
    "ManifestSchemaError",
    "MetadataCorruptError",
    "PermissionDeniedError",
    "SteerdocsError",
]
