# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
import shutil
from collections.abc import Callable
from pathlib import Path

import pytest

from steerdocs.config import Settings
from steerdocs.errors import FileAccessError
from steerdocs.filesystem import LocalFileAccess
from steerdocs.paths import MANIFEST_FILE, bundled_frameworks_root
from steerdocs.workspace import Workspace


class RecordingFileAccess(LocalFileAccess):
    """Local file access that records every call as ``(operation, path)``."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Path]] = []

    def exists(self, path: Path) -> bool:
        self.calls.append(("exists", path))
        return super().exists(path)

    def read(self, path: Path) -> str:
        self.calls.append(("read", path))
        return super().read(path)

    def write(self, path: Path, content: str) -> None:
        self.calls.append(("write", path))
        super().write(path, content)

    def copy(self, source: Path, destination: Path) -> None:
        self.calls.append(("copy", source))
        super().copy(source, destination)

    def delete(self, path: Path) -> None:
        self.calls.append(("delete", path))
        super().delete(path)

    def ensure_directory(self, path: Path) -> None:
        self.calls.append(("ensure_directory", path))
        super().ensure_directory(path)


class FailingFileAccess(LocalFileAccess):
    """Local file access whose writes fail for file names listed in ``fail_on``."""

    def __init__(self) -> None:
        self.fail_on: set[str] = set()

    def write(self, path: Path, content: str) -> None:
        if path.name in self.fail_on:
            raise FileAccessError(path, "write", "simulated disk failure")
        super().write(path, content)


class CatalogEditor:
    """Edit a copied catalog on disk to simulate new framework releases."""

    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_FILE

    def document(self) -> dict:
        return json.loads(self.manifest_path.read_text(encoding="utf-8"))

    def save(self, document: dict) -> None:
        self.manifest_path.write_text(json.dumps(document, indent=2), encoding="utf-8")

    def release(
        self,
        framework_id: str,
        version: str,
        *,
        body: str | None = None,
        file_name: str | None = None,
    ) -> None:
        """Bump ``framework_id`` to ``version``, optionally replacing its body or renaming its file."""

        document = self.document()
        for entry in document["frameworks"]:
            if entry["id"] == framework_id:
                entry["version"] = version
                if file_name is not None:
                    previous = self.root / entry["fileName"]
                    (self.root / file_name).write_text(previous.read_text(encoding="utf-8"), encoding="utf-8")
                    entry["fileName"] = file_name
                if body is not None:
                    (self.root / entry["fileName"]).write_text(body, encoding="utf-8")
                break
        else:
            raise KeyError(framework_id)
        self.save(document)

    def retire(self, framework_id: str) -> None:
        document = self.document()
        document["frameworks"] = [entry for entry in document["frameworks"] if entry["id"] != framework_id]
        self.save(document)


@pytest.fixture
def catalog_root(tmp_path: Path) -> Path:
    """Return a writable copy of the bundled framework catalog."""

    target = tmp_path / "catalog"
    shutil.copytree(bundled_frameworks_root(), target)
    return target


@pytest.fixture
def catalog_editor(catalog_root: Path) -> CatalogEditor:
    return CatalogEditor(catalog_root)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def settings(catalog_root: Path) -> Settings:
    return Settings(resources_dir=catalog_root)


@pytest.fixture
def make_workspace(project_root: Path, settings: Settings) -> Callable[..., Workspace]:
    """Return a factory opening the test workspace with an optional file access layer."""

    def _factory(files: LocalFileAccess | None = None) -> Workspace:
        return Workspace.open(project_root, settings=settings, files=files)

    return _factory


@pytest.fixture
def workspace(make_workspace: Callable[..., Workspace]) -> Workspace:
    return make_workspace()


@pytest.fixture
def recording_files() -> RecordingFileAccess:
    return RecordingFileAccess()


@pytest.fixture
def failing_files() -> FailingFileAccess:
    return FailingFileAccess()
