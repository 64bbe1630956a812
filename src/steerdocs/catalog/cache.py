# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""In-memory catalog cache with explicit reload semantics."""

from __future__ import annotations

import logging
from threading import Lock

from ..errors import FrameworkNotFoundError
from .loader import ManifestLoader
from .models import CatalogEntry, FrameworkCategory, Manifest

LOGGER = logging.getLogger(__name__)


class FrameworkCatalog:
    """Own the parsed manifest and answer catalog lookups.

    The manifest is read on first use and then served from memory until
    :meth:`reload` is called. A failed reload keeps the previous snapshot.
    """

    def __init__(self, loader: ManifestLoader | None = None) -> None:
        self._loader = loader or ManifestLoader()
        self._manifest: Manifest | None = None
        self._index: dict[str, CatalogEntry] = {}
        self._lock = Lock()

    @property
    def loader(self) -> ManifestLoader:
        return self._loader

    def manifest(self) -> Manifest:
        """Return the cached manifest, loading it on first access."""

        with self._lock:
            manifest = self._manifest
            if manifest is None:
                manifest = self._loader.load()
                self._store(manifest)
            return manifest

    def reload(self) -> Manifest:
        """Re-read the manifest from disk and replace the cached snapshot.

        Returns:
            Manifest: Freshly loaded manifest.

        Raises:
            ManifestError: When loading fails; the previous snapshot stays cached.
        """

        manifest = self._loader.load()
        with self._lock:
            self._store(manifest)
        LOGGER.info("catalog reloaded (%d frameworks)", len(manifest.frameworks))
        return manifest

    def list_available(self) -> tuple[CatalogEntry, ...]:
        return self.manifest().frameworks

    def get_by_id(self, framework_id: str) -> CatalogEntry | None:
        self.manifest()
        return self._index.get(framework_id)

    def require(self, framework_id: str) -> CatalogEntry:
        """Return the entry for ``framework_id`` or raise :class:`FrameworkNotFoundError`."""

        entry = self.get_by_id(framework_id)
        if entry is None:
            raise FrameworkNotFoundError(framework_id)
        return entry

    def search(self, query: str | None) -> tuple[CatalogEntry, ...]:
        """Return entries whose name, description, or category contains ``query``.

        The query is matched literally and case-insensitively; an empty query
        returns the whole catalog in manifest order.
        """

        frameworks = self.list_available()
        if not query or not query.strip():
            return frameworks
        needle = query.lower()
        return tuple(entry for entry in frameworks if entry.matches(needle))

    def by_category(self, category: FrameworkCategory) -> tuple[CatalogEntry, ...]:
        return tuple(entry for entry in self.list_available() if entry.category is category)

    def read_content(self, entry: CatalogEntry) -> str:
        """Return the bundled markdown body for ``entry``."""

        return self._loader.files.read(self._loader.source_path(entry))

    def _store(self, manifest: Manifest) -> None:
        self._manifest = manifest
        self._index = manifest.index()


__all__ = ["FrameworkCatalog"]
