# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared options."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .. import __version__
from ..console import configure_logging
from . import catalog, documents, install, update
from .shared import CLIContext

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Workspace root containing the .kiro directory.", show_default=False),
]
EMOJI_OPTION = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji output.")]
COLOR_OPTION = Annotated[bool, typer.Option("--color/--no-color", help="Toggle coloured output.")]
DEBUG_OPTION = Annotated[bool, typer.Option("--debug", help="Show debug logging and full tracebacks.")]


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


VERSION_OPTION = Annotated[
    bool,
    typer.Option("--version", help="Print the version and exit.", is_eager=True, callback=_print_version),
]

app = typer.Typer(
    name="steerdocs",
    help="Install, update, and validate steering documents for AI coding assistants.",
    no_args_is_help=True,
    add_completion=False,
    pretty_exceptions_enable=False,
)


@app.callback()
def main(
    ctx: typer.Context,
    root: ROOT_OPTION = Path("."),
    emoji: EMOJI_OPTION = True,
    color: COLOR_OPTION = True,
    debug: DEBUG_OPTION = False,
    version: VERSION_OPTION = False,
) -> None:
    """Capture global options for the invoked command."""

    configure_logging(debug=debug)
    ctx.obj = CLIContext(root=root.resolve(), emoji=emoji, color=color, debug=debug)


catalog.register(app)
install.register(app)
update.register(app)
documents.register(app)


__all__ = ["app", "main"]
