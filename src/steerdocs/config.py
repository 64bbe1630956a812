# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for steerdocs workspaces."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .paths import METADATA_DIR, STEERING_DIR
from .validation import DEFAULT_MIN_CONTENT_LENGTH, DEFAULT_REQUIRED_SECTIONS

PYPROJECT_FILE: Final[str] = "pyproject.toml"
CONFIG_FILE: Final[str] = ".steerdocs.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "steerdocs"

_ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


class ValidationSettings(BaseModel):
    """Rules applied by the steering document validator."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    required_sections: tuple[str, ...] = DEFAULT_REQUIRED_SECTIONS
    min_content_length: int = Field(default=DEFAULT_MIN_CONTENT_LENGTH, ge=0)

    @field_validator("required_sections", mode="before")
    @classmethod
    def _coerce_sections(cls, value: object) -> tuple[str, ...]:
        if isinstance(value, str):
            return (value,)
        if isinstance(value, (list, tuple)):
            return tuple(str(entry) for entry in value)
        raise ValueError("required_sections must be a list of section names")


class OutputSettings(BaseModel):
    """Console presentation preferences."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    emoji: bool = True
    color: bool = True


class Settings(BaseModel):
    """Resolved configuration for one workspace."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    steering_dir: Path = STEERING_DIR
    metadata_dir: Path = METADATA_DIR
    resources_dir: Path | None = None
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)

    def resolve(self, root: Path) -> Settings:
        """Return a copy whose relative paths are anchored at ``root``."""

        def _anchor(path: Path) -> Path:
            expanded = path.expanduser()
            return expanded if expanded.is_absolute() else root / expanded

        return self.model_copy(
            update={
                "steering_dir": _anchor(self.steering_dir),
                "metadata_dir": _anchor(self.metadata_dir),
                "resources_dir": _anchor(self.resources_dir) if self.resources_dir else None,
            },
        )


def load_settings(root: Path, *, env: Mapping[str, str] | None = None) -> Settings:
    """Load settings for the workspace at ``root``.

    ``[tool.steerdocs]`` in ``pyproject.toml`` is read first and
    ``.steerdocs.toml`` overrides it. ``$VAR`` and ``${VAR}`` references in
    string values are expanded from ``env``.

    Args:
        root: Workspace root directory.
        env: Environment used for variable expansion; defaults to ``os.environ``.

    Returns:
        Settings: Settings with paths anchored at ``root``.

    Raises:
        ConfigError: When a configuration file is malformed or has invalid values.
    """

    environment = os.environ if env is None else env
    merged: dict[str, Any] = {}
    pyproject = _read_toml(root / PYPROJECT_FILE)
    tool_section = pyproject.get(PYPROJECT_TOOL_KEY, {})
    if isinstance(tool_section, Mapping):
        section = tool_section.get(PYPROJECT_SECTION_KEY, {})
        if not isinstance(section, Mapping):
            raise ConfigError(f"{root / PYPROJECT_FILE}: [tool.steerdocs] must be a table")
        merged = _deep_merge(merged, section)
    merged = _deep_merge(merged, _read_toml(root / CONFIG_FILE))
    try:
        settings = Settings.model_validate(_expand_env(merged, environment))
    except ValidationError as exc:
        raise ConfigError(f"Invalid steerdocs configuration: {exc}") from exc
    return settings.resolve(root)


def _read_toml(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"{path}: {exc.strerror or exc}") from exc


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _expand_env(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):

        def _replace(match: re.Match[str]) -> str:
            key = match.group(1) or match.group(2)
            return env.get(key, match.group(0))

        return _ENV_VAR_PATTERN.sub(_replace, value)
    if isinstance(value, Mapping):
        return {key: _expand_env(item, env) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item, env) for item in value]
    return value


__all__ = [
    "CONFIG_FILE",
    "OutputSettings",
    "Settings",
    "ValidationSettings",
    "load_settings",
]
