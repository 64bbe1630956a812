# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Catalog browsing commands: ``list``, ``search``, and ``show``."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated

import typer
from rich.table import Table

from ..catalog import CatalogEntry, FrameworkCategory
from .shared import FRAMEWORK_ARGUMENT, CLIContext, get_context, reporting_errors

CATEGORY_OPTION = Annotated[
    FrameworkCategory | None,
    typer.Option("--category", "-c", help="Only show frameworks in this category.", case_sensitive=False),
]
INSTALLED_OPTION = Annotated[
    bool,
    typer.Option("--installed", help="Only show frameworks installed in this workspace."),
]
QUERY_ARGUMENT = Annotated[str, typer.Argument(help="Text matched against name, description, and category.")]


def _render_entries(state: CLIContext, entries: Iterable[CatalogEntry], installed: set[str], *, title: str) -> int:
    table = Table(title=title, show_lines=False)
    table.add_column("Id", no_wrap=True)
    table.add_column("Name")
    table.add_column("Category", no_wrap=True)
    table.add_column("Version", no_wrap=True)
    table.add_column("Installed", no_wrap=True)
    count = 0
    for entry in entries:
        table.add_row(
            entry.id,
            entry.name,
            entry.category.label,
            entry.version,
            "yes" if entry.id in installed else "",
        )
        count += 1
    if count:
        state.logger.console.print(table)
    return count


def list_frameworks(
    ctx: typer.Context,
    category: CATEGORY_OPTION = None,
    installed_only: INSTALLED_OPTION = False,
) -> None:
    """List frameworks available in the catalog."""

    state = get_context(ctx)
    with reporting_errors(state):
        workspace = state.workspace()
        installed = {record.id for record in workspace.installer.installed_records()}
        if category is not None:
            entries = workspace.catalog.by_category(category)
        else:
            entries = workspace.catalog.list_available()
        if installed_only:
            entries = tuple(entry for entry in entries if entry.id in installed)
        if not _render_entries(state, entries, installed, title="Steering frameworks"):
            state.logger.info("No frameworks match.")


def search_frameworks(ctx: typer.Context, query: QUERY_ARGUMENT) -> None:
    """Search the catalog by name, description, or category."""

    state = get_context(ctx)
    with reporting_errors(state):
        workspace = state.workspace()
        installed = {record.id for record in workspace.installer.installed_records()}
        matches = workspace.catalog.search(query)
        if not _render_entries(state, matches, installed, title=f"Matches for '{query}'"):
            state.logger.info(f"No frameworks match '{query}'.")


def show_framework(ctx: typer.Context, framework_id: FRAMEWORK_ARGUMENT) -> None:
    """Show catalog details and installation state for one framework."""

    state = get_context(ctx)
    with reporting_errors(state):
        workspace = state.workspace()
        entry = workspace.catalog.require(framework_id)
        record = workspace.installer.installed_record(framework_id)
        console = state.logger.console
        console.print(f"{entry.name} ({entry.id})", markup=False)
        console.print(f"  Category:    {entry.category.label}", markup=False)
        console.print(f"  Version:     {entry.version}", markup=False)
        console.print(f"  File:        {entry.file_name}", markup=False)
        if entry.dependencies:
            console.print(f"  Depends on:  {', '.join(entry.dependencies)}", markup=False)
        console.print(f"  Description: {entry.description}", markup=False)
        if record is None:
            console.print("  Installed:   no", markup=False)
            return
        console.print(
            f"  Installed:   {record.version} on {record.installed_at.isoformat(timespec='seconds')}",
            markup=False,
        )
        if record.version != entry.version:
            state.logger.warn(f"Update available: {record.version} -> {entry.version}")


def register(app: typer.Typer) -> None:
    """Attach catalog commands to ``app``."""

    app.command("list")(list_frameworks)
    app.command("search")(search_frameworks)
    app.command("show")(show_framework)


__all__ = ["register"]
