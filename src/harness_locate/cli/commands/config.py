"""Settings commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from harness_locate.cli.common import console, fail
from harness_locate.cli.config import (
    KNOWN_KEYS,
    get_config_file,
    load_config,
    set_config_value,
    unset_config_value,
)
from harness_locate.errors import UnknownHarnessError
from harness_locate.types import HarnessKind

config_app = typer.Typer(name="config", help="Manage CLI settings")


def normalize_value(key: str, value: str) -> str:
    """Check a value for a known key and return the form that is stored.

    Unknown keys are stored as given.
    """
    if key == "default_harness":
        try:
            return HarnessKind.parse(value).value
        except UnknownHarnessError:
            fail(f"Unknown harness: {value}")
    if key == "log_level":
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            fail(f"Unknown log level: {value}")
        return level
    if key == "project_path":
        return str(Path(value).expanduser().resolve())
    return value


@config_app.command("show")
def config_show() -> None:
    """Display the current settings."""
    config = load_config()
    if not config:
        console.print("[yellow]No configuration found.[/yellow]")
        console.print(f"Config file: [dim]{get_config_file()}[/dim]")
        return

    table = Table(
        title="harness-locate Configuration", show_header=True, header_style="bold magenta"
    )
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    for key, value in sorted(config.items()):
        label = key if key in KNOWN_KEYS else f"{key} [dim](unknown)[/dim]"
        table.add_row(label, str(value))

    console.print(table)
    console.print(f"\nConfig file: [dim]{get_config_file()}[/dim]")


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="Setting to change")],
    value: Annotated[str, typer.Argument(help="New value")],
) -> None:
    """Change a setting.

    Examples:
        harness-locate config set default_harness claude
        harness-locate config set log_level info
    """
    if key not in KNOWN_KEYS:
        console.print(
            f"[yellow]Unknown key {key}; known keys are {', '.join(KNOWN_KEYS)}.[/yellow]"
        )
    stored = normalize_value(key, value)
    set_config_value(key, stored)
    console.print(f"[green]✓[/green] Set [cyan]{key}[/cyan] = [green]{stored}[/green]")


@config_app.command("unset")
def config_unset(
    key: Annotated[str, typer.Argument(help="Setting to remove")],
) -> None:
    """Remove a setting."""
    if not unset_config_value(key):
        console.print(f"[yellow]{key} is not set.[/yellow]")
        return
    console.print(f"[green]✓[/green] Removed [cyan]{key}[/cyan]")
