# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Authoring commands: ``validate`` and ``new``."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Annotated, Final

import typer

from ..templates import DEFAULT_TEMPLATE, TemplateEngine, load_template
from ..validation import Severity, ValidationIssue
from .shared import EXIT_FAILURE, EXIT_USAGE, CLIContext, CLIError, get_context, reporting_errors

_SLUG_RE: Final[re.Pattern[str]] = re.compile(r"[^a-z0-9]+")

FILES_ARGUMENT = Annotated[
    list[Path] | None,
    typer.Argument(help="Documents to validate; defaults to every document in the steering directory."),
]
STRICT_OPTION = Annotated[bool, typer.Option("--strict", help="Fail when warnings are reported.")]
NAME_ARGUMENT = Annotated[str, typer.Argument(help="Feature name used for the title and file name.")]
FORCE_OPTION = Annotated[bool, typer.Option("--force", help="Replace an existing document.")]
TEMPLATE_OPTION = Annotated[str, typer.Option("--template", help="Bundled template file name.")]


def _format_issue(path: Path, issue: ValidationIssue) -> str:
    start = issue.range.start
    code = f" [{issue.code.value}]" if issue.code else ""
    return f"{path}:{start.line + 1}:{start.character + 1}: {issue.severity.value}{code} {issue.message}"


def _discover(state: CLIContext) -> list[Path]:
    workspace = state.workspace()
    return workspace.files.list_files(workspace.settings.steering_dir, "*.md")


def validate_documents(
    ctx: typer.Context,
    files: FILES_ARGUMENT = None,
    strict: STRICT_OPTION = False,
) -> None:
    """Check steering documents for required sections, guidance, and formatting."""

    state = get_context(ctx)
    with reporting_errors(state):
        workspace = state.workspace()
        targets = [path if path.is_absolute() else state.root / path for path in files] if files else _discover(state)
        if not targets:
            state.logger.info("No steering documents to validate.")
            return
        errors = warnings = 0
        for path in targets:
            result = workspace.validator.validate(workspace.files.read(path))
            for issue in result.all_issues:
                state.logger.echo(_format_issue(path, issue))
                if issue.fix is not None and issue.severity is Severity.ERROR:
                    state.logger.echo(f"    fix: {issue.fix.title}")
            errors += len(result.issues)
            warnings += len(result.warnings)
        summary = f"{len(targets)} document(s): {errors} error(s), {warnings} warning(s)"
        if errors or (strict and warnings):
            state.logger.fail(summary)
            raise typer.Exit(code=EXIT_FAILURE)
        state.logger.ok(summary)


def _slugify(name: str) -> str:
    return _SLUG_RE.sub("-", name.lower()).strip("-")


def new_document(
    ctx: typer.Context,
    name: NAME_ARGUMENT,
    force: FORCE_OPTION = False,
    template: TEMPLATE_OPTION = DEFAULT_TEMPLATE,
) -> None:
    """Create a custom steering document from a template."""

    state = get_context(ctx)
    with reporting_errors(state):
        slug = _slugify(name)
        if not slug:
            raise CLIError(f"Cannot derive a file name from '{name}'.", exit_code=EXIT_USAGE)
        workspace = state.workspace()
        target = workspace.settings.steering_dir / f"{slug}.md"
        if workspace.files.exists(target) and not force:
            raise CLIError(f"{target} already exists. Re-run with --force to replace it.")
        engine = TemplateEngine()
        variables = {**engine.default_variables(workspace.root), "feature-name": name}
        text = engine.render(load_template(workspace.files, template), variables)
        workspace.files.write(target, text)
        state.logger.ok(f"Created {target}")


def register(app: typer.Typer) -> None:
    """Attach authoring commands to ``app``."""

    app.command("validate")(validate_documents)
    app.command("new")(new_document)


__all__ = ["register"]
