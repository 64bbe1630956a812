# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for manifest loading, caching, and catalog lookups."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from steerdocs.catalog import FrameworkCatalog, FrameworkCategory, ManifestLoader
from steerdocs.errors import (
    FrameworkNotFoundError,
    ManifestIntegrityError,
    ManifestParseError,
    ManifestSchemaError,
)

BUNDLED_IDS = ["c4-model", "testing-pyramid", "owasp-top-10", "twelve-factor", "kanban"]


def _catalog(root: Path, files=None) -> FrameworkCatalog:
    if files is None:
        return FrameworkCatalog(ManifestLoader(frameworks_root=root))
    return FrameworkCatalog(ManifestLoader(frameworks_root=root, files=files))


def test_bundled_catalog_loads_in_manifest_order() -> None:
    catalog = FrameworkCatalog()

    entries = catalog.list_available()

    assert [entry.id for entry in entries] == BUNDLED_IDS
    twelve = catalog.get_by_id("twelve-factor")
    assert twelve is not None
    assert twelve.dependencies == ("c4-model",)
    assert twelve.category is FrameworkCategory.DEVOPS
    assert twelve.file_name == "twelve-factor.md"


def test_every_bundled_entry_has_a_body() -> None:
    catalog = FrameworkCatalog()

    for entry in catalog.list_available():
        assert catalog.read_content(entry).strip()


def test_unknown_id_lookups() -> None:
    catalog = FrameworkCatalog()

    assert catalog.get_by_id("does-not-exist") is None
    with pytest.raises(FrameworkNotFoundError) as excinfo:
        catalog.require("does-not-exist")
    assert excinfo.value.framework_id == "does-not-exist"


@pytest.mark.parametrize("query", ["", "   ", None])
def test_empty_search_returns_full_catalog(query: str | None) -> None:
    catalog = FrameworkCatalog()

    assert [entry.id for entry in catalog.search(query)] == BUNDLED_IDS


def test_search_is_case_insensitive_over_name_description_and_category() -> None:
    catalog = FrameworkCatalog()

    assert [entry.id for entry in catalog.search("PYRAMID")] == ["testing-pyramid"]
    assert [entry.id for entry in catalog.search("work in progress")] == ["kanban"]
    assert [entry.id for entry in catalog.search("work-management")] == ["kanban"]


@pytest.mark.parametrize("query", ["(", "[a-", ".*", "\\"])
def test_search_treats_query_literally(query: str) -> None:
    assert FrameworkCatalog().search(query) == ()


def test_by_category_filters_entries() -> None:
    catalog = FrameworkCatalog()

    assert [entry.id for entry in catalog.by_category(FrameworkCategory.SECURITY)] == ["owasp-top-10"]
    assert catalog.by_category(FrameworkCategory.CLOUD) == ()


def test_manifest_is_read_once_until_reload(catalog_root: Path, recording_files) -> None:
    catalog = _catalog(catalog_root, recording_files)
    manifest_path = catalog_root / "manifest.json"

    catalog.list_available()
    catalog.get_by_id("kanban")
    catalog.search("kanban")
    reads = [path for operation, path in recording_files.calls if operation == "read"]
    assert reads == [manifest_path]

    catalog.reload()
    reads = [path for operation, path in recording_files.calls if operation == "read"]
    assert reads == [manifest_path, manifest_path]


def test_reload_picks_up_new_versions(catalog_root: Path, catalog_editor) -> None:
    catalog = _catalog(catalog_root)
    assert catalog.require("kanban").version == "1.0.0"

    catalog_editor.release("kanban", "2.0.0")
    assert catalog.require("kanban").version == "1.0.0"

    catalog.reload()
    assert catalog.require("kanban").version == "2.0.0"


def test_failed_reload_keeps_previous_snapshot(catalog_root: Path) -> None:
    catalog = _catalog(catalog_root)
    catalog.list_available()
    (catalog_root / "manifest.json").write_text("{ not json", encoding="utf-8")

    with pytest.raises(ManifestParseError):
        catalog.reload()

    assert [entry.id for entry in catalog.list_available()] == BUNDLED_IDS


def test_entry_missing_required_field_is_a_schema_error(catalog_root: Path, catalog_editor) -> None:
    document = catalog_editor.document()
    del document["frameworks"][1]["version"]
    catalog_editor.save(document)

    with pytest.raises(ManifestSchemaError, match="version"):
        _catalog(catalog_root).list_available()


def test_unknown_category_is_a_schema_error(catalog_root: Path, catalog_editor) -> None:
    document = catalog_editor.document()
    document["frameworks"][0]["category"] = "gardening"
    catalog_editor.save(document)

    with pytest.raises(ManifestSchemaError):
        _catalog(catalog_root).list_available()


def test_duplicate_ids_are_never_deduplicated(catalog_root: Path, catalog_editor) -> None:
    document = catalog_editor.document()
    document["frameworks"].append(dict(document["frameworks"][0]))
    catalog_editor.save(document)

    with pytest.raises(ManifestIntegrityError, match="c4-model"):
        _catalog(catalog_root).list_available()


def test_unknown_dependency_only_logs_a_warning(
    catalog_root: Path,
    catalog_editor,
    caplog: pytest.LogCaptureFixture,
) -> None:
    document = catalog_editor.document()
    document["frameworks"][0]["dependencies"] = ["ghost"]
    catalog_editor.save(document)

    with caplog.at_level(logging.WARNING, logger="steerdocs"):
        entries = _catalog(catalog_root).list_available()

    assert len(entries) == len(BUNDLED_IDS)
    assert "ghost" in caplog.text


def test_manifest_without_dependencies_defaults_to_empty(catalog_root: Path) -> None:
    manifest = {
        "version": "1.0.0",
        "frameworks": [
            {
                "id": "solo",
                "name": "Solo",
                "description": "Single entry.",
                "category": "cloud",
                "version": "0.1.0",
                "fileName": "solo.md",
            },
        ],
    }
    (catalog_root / "manifest.json").write_text(json.dumps(manifest), encoding="utf-8")

    entry = _catalog(catalog_root).require("solo")

    assert entry.dependencies == ()
    assert entry.category.label == "Cloud"
