# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Variable substitution for steering document templates."""

from __future__ import annotations

import getpass
import re
from collections.abc import Mapping
from datetime import date
from pathlib import Path
from typing import Final

from .filesystem import FileAccess
from .paths import bundled_templates_root

DEFAULT_TEMPLATE: Final[str] = "custom-steering.md"
AVAILABLE_VARIABLES: Final[tuple[str, ...]] = ("feature-name", "date", "author", "project-name")

_ESCAPED_RE: Final[re.Pattern[str]] = re.compile(r"\\\{\{([^{}]+)\}\}")
_VARIABLE_RE: Final[re.Pattern[str]] = re.compile(r"\{\{([^{}]+)\}\}")


class TemplateEngine:
    """Render ``{{variable}}`` placeholders; ``\\{{variable}}`` is kept literally."""

    def render(self, template: str, variables: Mapping[str, str | None]) -> str:
        """Return ``template`` with known variables substituted.

        Unknown variables and variables mapped to ``None`` are left untouched.
        """

        rendered: list[str] = []
        cursor = 0
        for match in _ESCAPED_RE.finditer(template):
            rendered.append(self._substitute(template[cursor : match.start()], variables))
            rendered.append("{{" + match.group(1) + "}}")
            cursor = match.end()
        rendered.append(self._substitute(template[cursor:], variables))
        return "".join(rendered)

    def available_variables(self) -> tuple[str, ...]:
        return AVAILABLE_VARIABLES

    def default_variables(self, project_root: Path) -> dict[str, str | None]:
        return {
            "date": date.today().isoformat(),
            "author": _current_user(),
            "project-name": project_root.resolve().name or "project",
        }

    @staticmethod
    def _substitute(chunk: str, variables: Mapping[str, str | None]) -> str:
        def _replace(match: re.Match[str]) -> str:
            value = variables.get(match.group(1))
            return match.group(0) if value is None else value

        return _VARIABLE_RE.sub(_replace, chunk)


def load_template(files: FileAccess, name: str = DEFAULT_TEMPLATE, *, templates_root: Path | None = None) -> str:
    """Read a bundled template by file name."""

    return files.read((templates_root or bundled_templates_root()) / name)


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


__all__ = [
    "AVAILABLE_VARIABLES",
    "DEFAULT_TEMPLATE",
    "TemplateEngine",
    "load_template",
]
