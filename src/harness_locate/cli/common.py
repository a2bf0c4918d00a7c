"""Helpers shared by CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from harness_locate.cli.config import get_config_value
from harness_locate.errors import UnknownHarnessError
from harness_locate.types import HarnessKind
from harness_locate.validation import Severity, ValidationIssue

console = Console()


def fail(message: str) -> NoReturn:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(code=1)


def resolve_harness(name: str | None) -> HarnessKind:
    """Parse a harness name, falling back to the configured ``default_harness``."""
    if not name:
        name = get_config_value("default_harness")
    if not name:
        console.print("[red]No harness given.[/red] Pass one or set a default with:")
        console.print("  harness-locate config set default_harness <harness>")
        raise typer.Exit(code=1)
    try:
        return HarnessKind.parse(str(name))
    except UnknownHarnessError:
        known = ", ".join(kind.value for kind in HarnessKind)
        fail(f"Unknown harness: {name} (expected one of: {known})")


def resolve_project(project: Path | None) -> Path | None:
    """Use the given project path, or the configured ``project_path``."""
    if project is not None:
        return project
    configured = get_config_value("project_path")
    return Path(configured).expanduser() if configured else None


def render_issues(title: str, issues: list[ValidationIssue]) -> None:
    if not issues:
        console.print(f"[green]✓[/green] {title}: no issues")
        return

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Severity", no_wrap=True)
    table.add_column("Field", style="cyan")
    table.add_column("Code", style="dim")
    table.add_column("Message")

    for issue in issues:
        style = "red" if issue.severity is Severity.ERROR else "yellow"
        table.add_row(
            f"[{style}]{issue.severity.value}[/{style}]",
            issue.field,
            issue.code or "-",
            issue.message,
        )

    console.print(table)
