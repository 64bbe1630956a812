# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Wire the catalog, state store, and engines for one project workspace."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .catalog import FrameworkCatalog, ManifestLoader
from .config import Settings, load_settings
from .filesystem import FileAccess, LocalFileAccess
from .install import InstallationEngine
from .paths import INSTALLED_METADATA_FILE, bundled_frameworks_root
from .state import MetadataStore
from .update import UpdateEngine
from .validation import SteeringValidator


@dataclass(slots=True)
class Workspace:
    """Engines bound to a single workspace root."""

    root: Path
    settings: Settings
    files: FileAccess
    catalog: FrameworkCatalog
    store: MetadataStore
    installer: InstallationEngine
    updater: UpdateEngine
    validator: SteeringValidator

    @classmethod
    def open(
        cls,
        root: Path,
        *,
        settings: Settings | None = None,
        files: FileAccess | None = None,
        catalog: FrameworkCatalog | None = None,
    ) -> Workspace:
        """Build a workspace for ``root``.

        Args:
            root: Project directory containing (or receiving) ``.kiro``.
            settings: Pre-resolved settings; loaded from ``root`` when omitted.
            files: File access layer; the local filesystem by default.
            catalog: Shared catalog; a new one reading the configured
                resources directory is created when omitted.

        Returns:
            Workspace: Fully wired workspace.
        """

        resolved_root = root.resolve()
        resolved = settings.resolve(resolved_root) if settings is not None else load_settings(resolved_root)
        access = files or LocalFileAccess()
        if catalog is None:
            frameworks_root = resolved.resources_dir or bundled_frameworks_root()
            catalog = FrameworkCatalog(ManifestLoader(frameworks_root=frameworks_root, files=access))
        store = MetadataStore(resolved.metadata_dir / INSTALLED_METADATA_FILE, access)
        installer = InstallationEngine(
            catalog=catalog,
            store=store,
            files=access,
            steering_dir=resolved.steering_dir,
        )
        updater = UpdateEngine(catalog=catalog, store=store, files=access, installer=installer)
        validator = SteeringValidator(
            required_sections=resolved.validation.required_sections,
            min_content_length=resolved.validation.min_content_length,
        )
        return cls(
            root=resolved_root,
            settings=resolved,
            files=access,
            catalog=catalog,
            store=store,
            installer=installer,
            updater=updater,
            validator=validator,
        )


__all__ = ["Workspace"]
