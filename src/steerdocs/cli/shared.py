# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (context, output, error mapping)."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated, Final

import typer
from rich.console import Console

from ..console import fail, get_console_manager, info, ok, section, warn
from ..errors import (
    ConfigError,
    FrameworkNotFoundError,
    FrameworkNotInstalledError,
    ManifestError,
    MetadataCorruptError,
    SteerdocsError,
)
from ..workspace import Workspace

EXIT_FAILURE: Final[int] = 1
EXIT_USAGE: Final[int] = 2

FRAMEWORK_ARGUMENT = Annotated[str, typer.Argument(help="Framework id from the catalog.", show_default=False)]


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = EXIT_FAILURE) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around the console helpers respecting emoji and colour settings."""

    use_emoji: bool
    use_color: bool

    @property
    def console(self) -> Console:
        return get_console_manager().get(color=self.use_color, emoji=self.use_emoji)

    def info(self, message: str) -> None:
        info(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def ok(self, message: str) -> None:
        ok(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        warn(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def fail(self, message: str) -> None:
        fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def section(self, title: str) -> None:
        section(title, use_color=self.use_color)

    def echo(self, message: str) -> None:
        typer.echo(message)


@dataclass(slots=True)
class CLIContext:
    """Global options captured by the root callback and shared with commands."""

    root: Path
    emoji: bool = True
    color: bool = True
    debug: bool = False
    _workspace: Workspace | None = field(default=None, init=False, repr=False)

    @property
    def logger(self) -> CLILogger:
        return CLILogger(use_emoji=self.emoji, use_color=self.color)

    def workspace(self) -> Workspace:
        """Open the workspace lazily so commands that fail early never touch disk."""

        if self._workspace is None:
            self._workspace = Workspace.open(self.root)
            output = self._workspace.settings.output
            self.emoji = self.emoji and output.emoji
            self.color = self.color and output.color
        return self._workspace


def get_context(ctx: typer.Context) -> CLIContext:
    """Return the :class:`CLIContext` stored by the root callback."""

    state = ctx.find_root().obj
    if not isinstance(state, CLIContext):
        state = CLIContext(root=Path.cwd())
        ctx.find_root().obj = state
    return state


def _exit_code_for(exc: SteerdocsError) -> int:
    if isinstance(exc, (FrameworkNotFoundError, FrameworkNotInstalledError, ConfigError)):
        return EXIT_USAGE
    return EXIT_FAILURE


def _message_for(exc: SteerdocsError) -> str:
    if isinstance(exc, ManifestError):
        return f"Framework catalog is unavailable: {exc}"
    if isinstance(exc, MetadataCorruptError):
        return f"{exc}. Repair or delete the file and reinstall your frameworks."
    return str(exc)


@contextmanager
def reporting_errors(state: CLIContext) -> Iterator[None]:
    """Report package errors on the console and exit with a mapped status.

    Raises:
        typer.Exit: When a :class:`SteerdocsError` or :class:`CLIError` escapes the block.
    """

    try:
        yield
    except CLIError as exc:
        state.logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except SteerdocsError as exc:
        if state.debug:
            raise
        state.logger.fail(_message_for(exc))
        raise typer.Exit(code=_exit_code_for(exc)) from exc


__all__ = [
    "CLIContext",
    "CLIError",
    "CLILogger",
    "EXIT_FAILURE",
    "EXIT_USAGE",
    "FRAMEWORK_ARGUMENT",
    "get_context",
    "reporting_errors",
]
