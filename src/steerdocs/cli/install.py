# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Installation commands: ``install``, ``uninstall``, ``status``, and ``customize``."""

from __future__ import annotations

from typing import Annotated

import typer
from pydantic import ValidationError
from rich.table import Table

from ..install import InstallOptions, InstallResult, InstallStatus
from .shared import EXIT_FAILURE, EXIT_USAGE, FRAMEWORK_ARGUMENT, CLIContext, CLIError, get_context, reporting_errors

OVERWRITE_OPTION = Annotated[bool, typer.Option("--overwrite", help="Replace an existing steering document.")]
MERGE_OPTION = Annotated[
    bool,
    typer.Option("--merge", help="Append the framework to an existing document between conflict markers."),
]
BACKUP_OPTION = Annotated[
    bool,
    typer.Option("--backup", help="Back up an existing document before replacing or merging it."),
]


def _report_install(state: CLIContext, result: InstallResult) -> None:
    logger = state.logger
    if result.status is InstallStatus.CONFLICT:
        conflict = result.conflict
        detail = ""
        if conflict is not None:
            detail = f" ({conflict.size} bytes, modified {conflict.modified_at.isoformat(timespec='seconds')})"
        raise CLIError(
            f"{result.path} already exists{detail}. Re-run with --overwrite, --merge, or --backup --overwrite.",
            exit_code=EXIT_FAILURE,
        )
    if result.backup_path is not None:
        logger.info(f"Backup written to {result.backup_path}")
    if result.status is InstallStatus.MERGED:
        logger.warn(f"Merged {result.framework_id} into {result.path}; resolve the conflict markers.")
        return
    verb = "Overwrote" if result.status is InstallStatus.OVERWRITTEN else "Installed"
    logger.ok(f"{verb} {result.framework_id} {result.version} -> {result.path}")


def install_framework(
    ctx: typer.Context,
    framework_id: FRAMEWORK_ARGUMENT,
    overwrite: OVERWRITE_OPTION = False,
    merge: MERGE_OPTION = False,
    backup: BACKUP_OPTION = False,
) -> None:
    """Install a framework into the steering directory."""

    state = get_context(ctx)
    with reporting_errors(state):
        try:
            options = InstallOptions(overwrite=overwrite, merge=merge, create_backup=backup)
        except ValidationError as exc:
            raise CLIError("--overwrite and --merge cannot be combined.", exit_code=EXIT_USAGE) from exc
        result = state.workspace().installer.install(framework_id, options)
        _report_install(state, result)


def uninstall_framework(
    ctx: typer.Context,
    framework_id: FRAMEWORK_ARGUMENT,
    backup: Annotated[bool, typer.Option("--backup", help="Keep a backup copy of the removed document.")] = False,
) -> None:
    """Remove an installed framework and its steering document."""

    state = get_context(ctx)
    with reporting_errors(state):
        path = state.workspace().installer.uninstall(framework_id, create_backup_copy=backup)
        state.logger.ok(f"Uninstalled {framework_id} ({path})")


def show_status(ctx: typer.Context) -> None:
    """Show installed frameworks and whether they were customised."""

    state = get_context(ctx)
    with reporting_errors(state):
        workspace = state.workspace()
        statuses = workspace.updater.scan_customizations()
        if not statuses:
            state.logger.info("No frameworks installed.")
            return
        records = {record.id: record for record in workspace.installer.installed_records()}
        table = Table(title="Installed frameworks")
        table.add_column("Id", no_wrap=True)
        table.add_column("Version", no_wrap=True)
        table.add_column("State", no_wrap=True)
        table.add_column("Path")
        problems = 0
        for status in statuses:
            record = records.get(status.framework_id)
            if status.missing:
                label = "missing"
                problems += 1
            elif status.error:
                label = "error"
                problems += 1
            elif status.customized:
                label = "customized"
            else:
                label = "pristine"
            table.add_row(
                status.framework_id,
                record.version if record else "?",
                label,
                str(status.path) if status.path else status.error or "",
            )
        state.logger.console.print(table)
        if problems:
            state.logger.warn(f"{problems} installed framework(s) need attention.")


def customize_framework(ctx: typer.Context, framework_id: FRAMEWORK_ARGUMENT) -> None:
    """Flag an installed framework as customised so updates ask first."""

    state = get_context(ctx)
    with reporting_errors(state):
        state.workspace().installer.mark_customized(framework_id)
        state.logger.ok(f"Marked {framework_id} as customized.")


def register(app: typer.Typer) -> None:
    """Attach installation commands to ``app``."""

    app.command("install")(install_framework)
    app.command("uninstall")(uninstall_framework)
    app.command("status")(show_status)
    app.command("customize")(customize_framework)


__all__ = ["register"]
