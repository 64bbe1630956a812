# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Update commands: ``check``, ``update``, and ``update-all``."""

from __future__ import annotations

import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated

import typer
from rich.syntax import Syntax
from rich.table import Table

from ..update import ConfirmCallback, UpdateMode, UpdatePreview, UpdateResult, UpdateStatus
from .shared import EXIT_FAILURE, EXIT_USAGE, FRAMEWORK_ARGUMENT, CLIContext, CLIError, get_context, reporting_errors

YES_OPTION = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Overwrite customised documents without asking (a backup is still taken)."),
]
BACKUP_OPTION = Annotated[
    bool,
    typer.Option("--backup", help="Back up and overwrite customised documents without asking."),
]
PREVIEW_OPTION = Annotated[bool, typer.Option("--preview", help="Show the diff without writing anything.")]


def _resolve_mode(*, backup: bool, yes: bool, preview: bool = False) -> UpdateMode:
    if preview and (backup or yes):
        raise CLIError("--preview cannot be combined with --backup or --yes.", exit_code=EXIT_USAGE)
    if preview:
        return UpdateMode.PREVIEW
    if backup or yes:
        return UpdateMode.BACKUP
    return UpdateMode.SAFE


def _show_diff(state: CLIContext, preview: UpdatePreview) -> None:
    diff = preview.diff()
    if not diff:
        state.logger.info(f"{preview.framework_id}: installed text already matches the catalog.")
        return
    state.logger.console.print(Syntax(diff, "diff", theme="ansi_dark", word_wrap=True))


def _interactive_confirm(state: CLIContext) -> ConfirmCallback:
    def _confirm(preview: UpdatePreview) -> bool:
        state.logger.warn(
            f"{preview.framework_id} was customised; updating replaces your edits (a backup is kept).",
        )
        if typer.confirm("Show the differences first?", default=False):
            _show_diff(state, preview)
        return typer.confirm(f"Update {preview.framework_id} to {preview.latest_version}?", default=False)

    return _confirm


def _report_result(state: CLIContext, result: UpdateResult) -> None:
    if result.status is UpdateStatus.CANCELLED:
        state.logger.warn(f"Skipped {result.framework_id}: customised document left unchanged.")
        return
    if result.backup_path is not None:
        state.logger.info(f"Backup written to {result.backup_path}")
    state.logger.ok(f"Updated {result.framework_id} {result.previous_version} -> {result.version}")


def check_updates(ctx: typer.Context) -> None:
    """List installed frameworks with a newer catalog version."""

    state = get_context(ctx)
    with reporting_errors(state):
        candidates = state.workspace().updater.check_for_updates()
        if not candidates:
            state.logger.ok("All installed frameworks are up to date.")
            return
        table = Table(title="Available updates")
        table.add_column("Id", no_wrap=True)
        table.add_column("Installed", no_wrap=True)
        table.add_column("Latest", no_wrap=True)
        table.add_column("Changes")
        for candidate in candidates:
            table.add_row(
                candidate.framework_id,
                candidate.current_version,
                candidate.latest_version,
                "; ".join(candidate.changes),
            )
        state.logger.console.print(table)


def update_framework(
    ctx: typer.Context,
    framework_id: FRAMEWORK_ARGUMENT,
    yes: YES_OPTION = False,
    backup: BACKUP_OPTION = False,
    preview: PREVIEW_OPTION = False,
) -> None:
    """Update one installed framework to the catalog version."""

    state = get_context(ctx)
    with reporting_errors(state):
        mode = _resolve_mode(backup=backup, yes=yes, preview=preview)
        updater = state.workspace().updater
        if mode is UpdateMode.PREVIEW:
            _show_diff(state, updater.preview(framework_id))
            return
        result = updater.update(framework_id, mode, confirm=_interactive_confirm(state))
        _report_result(state, result)


@contextmanager
def _interrupt_sets(event: threading.Event) -> Iterator[None]:
    """Turn Ctrl+C into a cancellation request for the duration of the block."""

    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum: int, frame: object) -> None:
        event.set()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def update_all_frameworks(
    ctx: typer.Context,
    yes: YES_OPTION = False,
    backup: BACKUP_OPTION = False,
) -> None:
    """Update every outdated framework; failures are reported per framework."""

    state = get_context(ctx)
    with reporting_errors(state):
        mode = _resolve_mode(backup=backup, yes=yes)
        updater = state.workspace().updater
        cancel = threading.Event()
        with _interrupt_sets(cancel):
            summary = updater.update_all(mode, confirm=_interactive_confirm(state), cancel=cancel)
        if not summary.results and not summary.failures and not summary.skipped:
            state.logger.ok("All installed frameworks are up to date.")
            return
        for result in summary.results:
            _report_result(state, result)
        for framework_id, message in summary.failures:
            state.logger.fail(f"{framework_id}: {message}")
        if summary.cancelled:
            state.logger.warn(f"Cancelled; not attempted: {', '.join(summary.skipped)}")
        state.logger.section("Summary")
        state.logger.echo(
            f"updated={len(summary.updated)} failed={len(summary.failures)} skipped={len(summary.skipped)}",
        )
        if summary.exit_code():
            raise typer.Exit(code=EXIT_FAILURE)


def register(app: typer.Typer) -> None:
    """Attach update commands to ``app``."""

    app.command("check")(check_updates)
    app.command("update")(update_framework)
    app.command("update-all")(update_all_frameworks)


__all__ = ["register"]
