"""MCP server listing, detection, validation and conversion commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from harness_locate.adapters import get_adapter
from harness_locate.cli.common import (
    console,
    fail,
    render_issues,
    resolve_harness,
    resolve_project,
)
from harness_locate.detect import detect_mcp_in_directory
from harness_locate.documents import dump_document, format_for_path, read_document
from harness_locate.errors import (
    ConfigReadError,
    MissingEnvVarError,
    UnsupportedMcpConfigError,
    UnsupportedScopeError,
)
from harness_locate.harness import Harness
from harness_locate.mcp import HttpMcpServer, SseMcpServer, StdioMcpServer
from harness_locate.translate import DecodeResult, decode_all_detailed, encode_all
from harness_locate.types import FileFormat, HarnessKind, Scope
from harness_locate.validation import has_errors, validate_for_harness

mcp_app = typer.Typer(name="mcp", help="Inspect and convert MCP server configs")

HarnessArgument = Annotated[
    str | None, typer.Argument(help="Harness name", metavar="HARNESS", show_default=False)
]
ProjectOption = Annotated[
    Path | None, typer.Option("--project", help="Read the project config under this path")
]
FileOption = Annotated[
    Path | None, typer.Option("--file", help="Read this native config file instead")
]


def _load(kind: HarnessKind, project: Path | None, file: Path | None) -> DecodeResult:
    """Decode the servers from an explicit file or the harness's own config."""
    try:
        if file is not None:
            if not file.exists():
                fail(f"File not found: {file}")
            return decode_all_detailed(read_document(file, _read_format(file)), kind)

        root = resolve_project(project)
        scope = Scope.project(root) if root is not None else Scope.global_()
        resource = Harness(kind).mcp(scope)
        if not resource.file_exists:
            console.print(f"[yellow]No MCP config found at {resource.file}[/yellow]")
            return DecodeResult()
        return decode_all_detailed(read_document(resource.file, resource.format), kind)
    except (ConfigReadError, UnsupportedMcpConfigError, UnsupportedScopeError) as exc:
        fail(str(exc))


def _read_format(file: Path) -> FileFormat:
    # JSONC parsing also accepts plain JSON.
    fmt = format_for_path(file)
    return FileFormat.JSONC if fmt is FileFormat.JSON else fmt


def _target(server: StdioMcpServer | SseMcpServer | HttpMcpServer) -> str:
    if isinstance(server, StdioMcpServer):
        return " ".join([server.command, *server.args])
    return server.url


def _report_errors(result: DecodeResult) -> None:
    for error in result.errors.values():
        console.print(f"[yellow]Skipped:[/yellow] {error.reason}")


@mcp_app.command("list")
def mcp_list(
    harness_name: HarnessArgument = None,
    project: ProjectOption = None,
    file: FileOption = None,
) -> None:
    """List the MCP servers configured for a harness."""
    kind = resolve_harness(harness_name)
    result = _load(kind, project, file)

    if not result.servers:
        console.print("No MCP servers configured.")
    else:
        table = Table(
            title=f"{kind.display_name} MCP Servers",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Transport", style="yellow")
        table.add_column("Target", style="white")
        table.add_column("Enabled")

        for name, server in result.servers:
            enabled = "[green]yes[/green]" if server.enabled else "[dim]no[/dim]"
            table.add_row(name, server.transport, _target(server), enabled)
        console.print(table)

    _report_errors(result)


@mcp_app.command("detect")
def mcp_detect(
    directory: Annotated[
        Path | None,
        typer.Argument(help="Project directory to inspect (default: current directory)"),
    ] = None,
) -> None:
    """Find the MCP servers a project ships in its manifests and package files."""
    root = (directory or Path.cwd()).expanduser()
    if not root.is_dir():
        fail(f"Not a directory: {root}")
    try:
        detected = detect_mcp_in_directory(root)
    except ConfigReadError as exc:
        fail(str(exc))

    if not detected:
        console.print(f"No MCP servers detected in {root}.")
        return

    table = Table(title=f"MCP Servers in {root}", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Source", style="yellow")
    table.add_column("Confidence")
    table.add_column("Target", style="white")
    table.add_column("Env vars", style="dim")

    for found in detected:
        table.add_row(
            found.name,
            found.source.value,
            found.confidence.label,
            _target(found.server),
            ", ".join(found.required_env_vars) or "-",
        )
    console.print(table)


@mcp_app.command("validate")
def mcp_validate(
    harness_name: HarnessArgument = None,
    project: ProjectOption = None,
    file: FileOption = None,
) -> None:
    """Validate every MCP server against a harness's capabilities.

    Exits with code 1 when any server has an error-severity issue or could
    not be decoded.
    """
    kind = resolve_harness(harness_name)
    result = _load(kind, project, file)
    failed = not result.ok

    for name, server in result.servers:
        issues = validate_for_harness(server, kind)
        render_issues(name, issues)
        failed = failed or has_errors(issues)

    for name, error in result.errors.items():
        console.print(f"[red]✗[/red] {name}: {error.reason}")

    if failed:
        raise typer.Exit(code=1)


@mcp_app.command("convert")
def mcp_convert(
    file: Annotated[Path, typer.Argument(help="Native MCP config to convert", metavar="FILE")],
    from_harness: Annotated[str, typer.Option("--from", help="Source harness")] = "",
    to_harness: Annotated[str, typer.Option("--to", help="Target harness")] = "",
    output: Annotated[
        Path | None, typer.Option("--output", help="Write to this file instead of stdout")
    ] = None,
) -> None:
    """Convert a native MCP config from one harness's format to another's.

    Examples:
        harness-locate mcp convert .mcp.json --from claude-code --to opencode
        harness-locate mcp convert .mcp.json --from claude --to goose --output config.yaml
    """
    if not from_harness:
        fail("Missing required option: --from")
    if not to_harness:
        fail("Missing required option: --to")
    source = resolve_harness(from_harness)
    target = resolve_harness(to_harness)

    result = _load(source, None, file)
    _report_errors(result)
    try:
        document = encode_all(result.servers, target)
    except (UnsupportedMcpConfigError, MissingEnvVarError) as exc:
        fail(str(exc))

    fmt = FileFormat.YAML if get_adapter(target).mcp_format is FileFormat.YAML else FileFormat.JSON
    text = dump_document(document, fmt)
    if output is None:
        typer.echo(text, nl=False)
        return

    output.write_text(text, encoding="utf-8")
    console.print(
        f"[green]✓[/green] Wrote {len(result.servers)} server(s) for "
        f"{target.display_name} to [cyan]{output}[/cyan]"
    )
