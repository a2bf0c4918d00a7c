"""Main CLI application using Typer."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from harness_locate import __version__
from harness_locate.cli.commands.config import config_app
from harness_locate.cli.commands.harnesses import harnesses_command, paths_command
from harness_locate.cli.commands.mcp import mcp_app
from harness_locate.cli.commands.skills import skills_app
from harness_locate.cli.common import fail
from harness_locate.cli.config import DEFAULT_LOG_LEVEL, get_config_file, get_config_value
from harness_locate.errors import ConfigReadError

app = typer.Typer(
    name="harness-locate",
    help="Locate AI coding-assistant harnesses and translate their MCP configs",
    add_completion=False,
)
console = Console()

# Register subcommands
app.add_typer(config_app, name="config")
app.add_typer(mcp_app, name="mcp")
app.add_typer(skills_app, name="skills")
app.command("harnesses")(harnesses_command)
app.command("paths")(paths_command)


def version_callback(value: bool) -> None:
    """Show version information."""
    if value:
        console.print(f"harness-locate version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich, at DEBUG when verbose."""
    if verbose:
        level = logging.DEBUG
    else:
        configured = str(get_config_value("log_level", DEFAULT_LOG_LEVEL)).upper()
        level = logging.getLevelName(configured)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False)],
        force=True,
    )


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """harness-locate CLI - find harness configs and move MCP servers between them."""
    try:
        configure_logging(verbose)
    except ConfigReadError as e:
        fail(f"Unreadable settings, fix or remove {get_config_file()}\n{e}")


if __name__ == "__main__":
    app()
