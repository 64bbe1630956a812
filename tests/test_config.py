# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for workspace configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from steerdocs.config import Settings, load_settings
from steerdocs.errors import ConfigError
from steerdocs.paths import METADATA_DIR, STEERING_DIR
from steerdocs.validation import DEFAULT_MIN_CONTENT_LENGTH, DEFAULT_REQUIRED_SECTIONS
from steerdocs.workspace import Workspace


def test_defaults_are_anchored_at_root(tmp_path: Path) -> None:
    settings = load_settings(tmp_path, env={})

    assert settings.steering_dir == tmp_path / STEERING_DIR
    assert settings.metadata_dir == tmp_path / METADATA_DIR
    assert settings.resources_dir is None
    assert settings.validation.required_sections == DEFAULT_REQUIRED_SECTIONS
    assert settings.validation.min_content_length == DEFAULT_MIN_CONTENT_LENGTH
    assert settings.output.emoji is True


def test_pyproject_section_is_overridden_by_dedicated_file(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "demo"\n\n'
        "[tool.steerdocs]\n"
        'steering_dir = "docs/steering"\n\n'
        "[tool.steerdocs.validation]\n"
        'required_sections = ["Overview", "Rules"]\n'
        "min_content_length = 50\n",
        encoding="utf-8",
    )
    (tmp_path / ".steerdocs.toml").write_text(
        "[validation]\nmin_content_length = 10\n\n[output]\nemoji = false\n",
        encoding="utf-8",
    )

    settings = load_settings(tmp_path, env={})

    assert settings.steering_dir == tmp_path / "docs" / "steering"
    assert settings.validation.required_sections == ("Overview", "Rules")
    assert settings.validation.min_content_length == 10
    assert settings.output.emoji is False


def test_environment_variables_are_expanded(tmp_path: Path) -> None:
    shared = tmp_path / "shared-catalog"
    (tmp_path / ".steerdocs.toml").write_text('resources_dir = "${CATALOG_HOME}/frameworks"\n', encoding="utf-8")

    settings = load_settings(tmp_path, env={"CATALOG_HOME": str(shared)})

    assert settings.resources_dir == shared / "frameworks"


@pytest.mark.parametrize(
    "payload",
    [
        "steering_dir = \n",
        "unknown_key = 1\n",
        "[validation]\nmin_content_length = -5\n",
        "[validation]\nrequired_sections = 3\n",
    ],
)
def test_invalid_configuration_raises_config_error(tmp_path: Path, payload: str) -> None:
    (tmp_path / ".steerdocs.toml").write_text(payload, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_settings(tmp_path, env={})


def test_workspace_uses_configured_directories(tmp_path: Path, catalog_root: Path) -> None:
    settings = Settings(steering_dir=Path("guides"), metadata_dir=Path("state"), resources_dir=catalog_root)

    workspace = Workspace.open(tmp_path, settings=settings)
    result = workspace.installer.install("kanban")

    assert result.path == tmp_path.resolve() / "guides" / "kanban.md"
    assert (tmp_path / "state" / "installed-frameworks.json").is_file()
    assert workspace.catalog.loader.frameworks_root == catalog_root
