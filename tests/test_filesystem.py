# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the local file access layer and content hashing."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from steerdocs.errors import FileAccessError, PermissionDeniedError
from steerdocs.filesystem import FileAccess, LocalFileAccess
from steerdocs.hashing import compute_content_hash, normalise_content


def test_local_file_access_satisfies_protocol() -> None:
    assert isinstance(LocalFileAccess(), FileAccess)


def test_write_creates_parents_and_preserves_line_endings(tmp_path: Path) -> None:
    files = LocalFileAccess()
    target = tmp_path / "a" / "b" / "doc.md"

    files.write(target, "one\r\ntwo\n")

    assert target.read_bytes() == b"one\r\ntwo\n"
    assert files.read(target) == "one\r\ntwo\n"
    assert [entry.name for entry in target.parent.iterdir()] == ["doc.md"]


def test_write_replaces_existing_content(tmp_path: Path) -> None:
    files = LocalFileAccess()
    target = tmp_path / "doc.md"
    target.write_text("old", encoding="utf-8")

    files.write(target, "new")

    assert target.read_text(encoding="utf-8") == "new"


def test_read_missing_file_reports_path_and_operation(tmp_path: Path) -> None:
    missing = tmp_path / "missing.md"

    with pytest.raises(FileAccessError) as excinfo:
        LocalFileAccess().read(missing)

    assert excinfo.value.path == missing
    assert excinfo.value.operation == "read"


def test_read_rejects_invalid_utf8(tmp_path: Path) -> None:
    target = tmp_path / "binary.md"
    target.write_bytes(b"\xff\xfe\xfa")

    with pytest.raises(FileAccessError, match="not valid utf-8"):
        LocalFileAccess().read(target)


@pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root ignores permission bits")
def test_write_into_read_only_directory_raises_permission_denied(tmp_path: Path) -> None:
    locked = tmp_path / "locked"
    locked.mkdir()
    existing = locked / "doc.md"
    existing.write_text("keep", encoding="utf-8")
    locked.chmod(0o500)
    try:
        with pytest.raises(PermissionDeniedError) as excinfo:
            LocalFileAccess().write(existing, "replace")
        assert excinfo.value.operation == "write"
    finally:
        locked.chmod(0o700)
    assert existing.read_text(encoding="utf-8") == "keep"


def test_delete_missing_file_is_a_no_op(tmp_path: Path) -> None:
    LocalFileAccess().delete(tmp_path / "absent.md")


def test_copy_stat_and_list_files(tmp_path: Path) -> None:
    files = LocalFileAccess()
    source = tmp_path / "doc.md"
    source.write_bytes(b"payload")
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")

    files.copy(source, tmp_path / "copies" / "doc.md")

    assert (tmp_path / "copies" / "doc.md").read_bytes() == b"payload"
    assert files.stat(source).size == len(b"payload")
    assert files.list_files(tmp_path, "*.md") == [source]
    assert files.list_files(tmp_path / "nowhere") == []


def test_content_hash_ignores_line_endings_and_bom() -> None:
    lf = compute_content_hash("# Title\nbody\n")

    assert compute_content_hash("# Title\r\nbody\r\n") == lf
    assert compute_content_hash("\ufeff# Title\nbody\n") == lf
    assert compute_content_hash("# Title\nbody changed\n") != lf
    assert len(lf) == 64


def test_normalise_content_folds_lone_carriage_returns() -> None:
    assert normalise_content("a\rb\r\nc") == "a\nb\nc"
