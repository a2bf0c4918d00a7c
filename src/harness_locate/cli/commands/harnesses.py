"""Harness discovery CLI commands."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from harness_locate.cli.common import console, resolve_harness, resolve_project
from harness_locate.errors import UnsupportedScopeError
from harness_locate.harness import Harness
from harness_locate.types import ALL_HARNESSES, DirectoryResource, Scope

_STATUS_STYLES = {
    "installed": "green",
    "binary-only": "yellow",
    "config-only": "yellow",
    "not-installed": "dim",
}


def harnesses_command() -> None:
    """List every known harness and whether it is installed."""
    table = Table(title="Harnesses", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Display Name", style="green")
    table.add_column("Status")
    table.add_column("Binary", style="white")
    table.add_column("Config", style="white")

    for kind in ALL_HARNESSES:
        status = Harness(kind).installation_status()
        style = _STATUS_STYLES[status.state]
        table.add_row(
            kind.value,
            kind.display_name,
            f"[{style}]{status.state}[/{style}]",
            str(status.binary_path or "-"),
            str(status.config_path or "-"),
        )

    console.print(table)


def paths_command(
    harness_name: Annotated[
        str | None, typer.Argument(help="Harness name", metavar="HARNESS")
    ] = None,
    project: Annotated[
        Path | None, typer.Option("--project", help="Also resolve project paths")
    ] = None,
) -> None:
    """Show where a harness keeps its resources."""
    harness = Harness(resolve_harness(harness_name))
    scopes = [("global", Scope.global_())]
    project_root = resolve_project(project)
    if project_root is not None:
        scopes.append(("project", Scope.project(project_root)))

    for label, scope in scopes:
        table = Table(
            title=f"{harness.display_name} ({label})",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Resource", style="cyan", no_wrap=True)
        table.add_column("Path", style="white")
        table.add_column("Exists")
        for row in _resource_rows(harness, scope):
            table.add_row(*row)
        console.print(table)


def _resource_rows(harness: Harness, scope: Scope) -> list[tuple[str, str, str]]:
    rows = [("config", *_lookup(lambda: harness.config(scope)))]
    for name, resolve in (
        ("skills", harness.skills),
        ("commands", harness.commands),
        ("agents", harness.agents),
        ("plugins", harness.plugins),
        ("rules", harness.rules),
    ):
        rows.append((name, *_lookup(lambda resolve=resolve: resolve(scope))))

    try:
        mcp = harness.mcp(scope)
    except UnsupportedScopeError:
        rows.append(("mcp", "[dim]unsupported[/dim]", "-"))
    else:
        rows.append(("mcp", f"{mcp.file} ({mcp.key_path})", _exists(mcp.file_exists)))
    return rows


def _lookup(resolve: Callable[[], Path | DirectoryResource | None]) -> tuple[str, str]:
    try:
        found = resolve()
    except UnsupportedScopeError:
        return "[dim]unsupported[/dim]", "-"
    if found is None:
        return "[dim]unsupported[/dim]", "-"
    if isinstance(found, DirectoryResource):
        return str(found.path), _exists(found.exists)
    return str(found), _exists(found.exists())


def _exists(flag: bool) -> str:
    return "[green]yes[/green]" if flag else "[dim]no[/dim]"
