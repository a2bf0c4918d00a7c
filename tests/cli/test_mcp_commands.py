"""Tests for MCP CLI commands."""

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from harness_locate.cli.app import app
from harness_locate.cli.config import set_config_value

runner = CliRunner()


def _write_claude_config(path: Path, servers: dict) -> Path:
    path.write_text(json.dumps({"mcpServers": servers}))
    return path


def test_mcp_list_from_file(tmp_path: Path) -> None:
    """List servers from an explicit native file."""
    config = _write_claude_config(
        tmp_path / ".mcp.json",
        {
            "fs": {"command": "npx", "args": ["-y", "fs-server"]},
            "api": {"type": "http", "url": "https://api.example.com/mcp"},
        },
    )

    result = runner.invoke(app, ["mcp", "list", "claude-code", "--file", str(config)])

    assert result.exit_code == 0
    assert "Claude Code MCP Servers" in result.stdout
    assert "npx -y fs-server" in result.stdout
    assert "https://api.example.com/mcp" in result.stdout
    assert "Skipped" not in result.stdout


def test_mcp_list_reports_skipped_entries(tmp_path: Path) -> None:
    """Broken entries are listed after the servers that decoded."""
    config = _write_claude_config(
        tmp_path / ".mcp.json",
        {
            "fs": {"command": "npx"},
            "broken": {"command": "npx", "url": "https://x.example"},
        },
    )

    result = runner.invoke(app, ["mcp", "list", "claude", "--file", str(config)])

    assert result.exit_code == 0
    assert "fs" in result.stdout
    assert "Skipped: server 'broken'" in result.stdout


def test_mcp_list_project_config(tmp_path: Path) -> None:
    """Read the harness's own project config."""
    entry = {"type": "remote", "url": "https://docs.example/mcp", "enabled": False}
    (tmp_path / "opencode.json").write_text(json.dumps({"mcp": {"docs": entry}}))

    result = runner.invoke(app, ["mcp", "list", "opencode", "--project", str(tmp_path)])

    assert result.exit_code == 0
    assert "docs" in result.stdout
    assert "http" in result.stdout
    assert "no" in result.stdout


def test_mcp_list_missing_config() -> None:
    """A harness with no config file has no servers."""
    result = runner.invoke(app, ["mcp", "list", "goose"])

    assert result.exit_code == 0
    assert "No MCP config found" in result.stdout
    assert "No MCP servers configured." in result.stdout


def test_mcp_list_uses_default_harness(tmp_path: Path) -> None:
    """The configured default harness is used when none is given."""
    set_config_value("default_harness", "claude-code")
    config = _write_claude_config(tmp_path / ".mcp.json", {"fs": {"command": "npx"}})

    result = runner.invoke(app, ["mcp", "list", "--file", str(config)])

    assert result.exit_code == 0
    assert "Claude Code MCP Servers" in result.stdout


def test_mcp_list_unsupported_scope(tmp_path: Path) -> None:
    """AMP Code has no project MCP config."""
    result = runner.invoke(app, ["mcp", "list", "amp", "--project", str(tmp_path)])

    assert result.exit_code == 1
    assert "does not support project scope" in result.stdout


def test_mcp_list_missing_file(tmp_path: Path) -> None:
    """A missing --file is an error."""
    result = runner.invoke(
        app, ["mcp", "list", "claude", "--file", str(tmp_path / "missing.json")]
    )

    assert result.exit_code == 1
    assert "File not found" in result.stdout


def test_mcp_list_invalid_document(tmp_path: Path) -> None:
    """A document without the servers section is an error."""
    config = tmp_path / "opencode.json"
    config.write_text(json.dumps({"theme": "dark"}))

    result = runner.invoke(app, ["mcp", "list", "opencode", "--file", str(config)])

    assert result.exit_code == 1
    assert "Config missing 'mcp' object" in result.stdout


def test_mcp_validate_clean(tmp_path: Path) -> None:
    """Valid servers report no issues."""
    config = _write_claude_config(tmp_path / ".mcp.json", {"fs": {"command": "npx"}})

    result = runner.invoke(app, ["mcp", "validate", "claude", "--file", str(config)])

    assert result.exit_code == 0
    assert "fs: no issues" in result.stdout


def test_mcp_validate_warnings_only(tmp_path: Path) -> None:
    """Warnings are shown but do not fail the command."""
    config = _write_claude_config(
        tmp_path / ".mcp.json",
        {"fs": {"command": "npx", "env": {"API_KEY": "literal"}}},
    )

    result = runner.invoke(app, ["mcp", "validate", "claude", "--file", str(config)])

    assert result.exit_code == 0
    assert "env.suspicious_name" in result.stdout


def test_mcp_validate_errors(tmp_path: Path) -> None:
    """Error-severity issues fail the command."""
    config = _write_claude_config(
        tmp_path / ".mcp.json",
        {"files": {"type": "http", "url": "ftp://files.example"}},
    )

    result = runner.invoke(app, ["mcp", "validate", "claude", "--file", str(config)])

    assert result.exit_code == 1
    assert "url.scheme.invalid" in result.stdout


def test_mcp_validate_decode_failure(tmp_path: Path) -> None:
    """Entries that cannot be decoded fail the command."""
    config = _write_claude_config(tmp_path / ".mcp.json", {"empty": {}})

    result = runner.invoke(app, ["mcp", "validate", "claude", "--file", str(config)])

    assert result.exit_code == 1
    assert "✗ empty" in result.stdout


def test_mcp_convert_to_stdout(tmp_path: Path) -> None:
    """Convert a Claude Code config to OpenCode JSON on stdout."""
    config = _write_claude_config(
        tmp_path / ".mcp.json",
        {"fs": {"command": "npx", "args": ["-y", "pkg"], "env": {"KEY": "${TOK}"}}},
    )

    result = runner.invoke(
        app, ["mcp", "convert", str(config), "--from", "claude", "--to", "opencode"]
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "mcp": {
            "fs": {
                "type": "local",
                "command": ["npx", "-y", "pkg"],
                "environment": {"KEY": "{env:TOK}"},
                "enabled": True,
            }
        }
    }


def test_mcp_convert_to_goose_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Goose output is YAML with references resolved."""
    monkeypatch.setenv("TOK", "secret-value")
    config = _write_claude_config(
        tmp_path / ".mcp.json",
        {"fs": {"command": "npx", "env": {"KEY": "${TOK}"}}},
    )
    output = tmp_path / "config.yaml"

    result = runner.invoke(
        app,
        ["mcp", "convert", str(config), "--from", "claude", "--to", "goose",
         "--output", str(output)],
    )

    assert result.exit_code == 0
    assert "Wrote 1 server(s) for Goose" in result.stdout
    document = yaml.safe_load(output.read_text())
    assert document["extensions"]["fs"]["cmd"] == "npx"
    assert document["extensions"]["fs"]["envs"] == {"KEY": "secret-value"}


def test_mcp_convert_unsupported_transport(tmp_path: Path) -> None:
    """Servers the target cannot express fail the conversion."""
    config = tmp_path / "crush.json"
    config.write_text(json.dumps({"mcp": {"events": {"type": "sse", "url": "https://x.example"}}}))

    result = runner.invoke(
        app, ["mcp", "convert", str(config), "--from", "crush", "--to", "goose"]
    )

    assert result.exit_code == 1
    assert "SSE transport not supported" in result.stdout


def test_mcp_convert_requires_target(tmp_path: Path) -> None:
    """--to is required."""
    config = _write_claude_config(tmp_path / ".mcp.json", {})

    result = runner.invoke(app, ["mcp", "convert", str(config), "--from", "claude"])

    assert result.exit_code == 1
    assert "Missing required option: --to" in result.stdout


def test_mcp_detect_lists_project_servers(tmp_path: Path) -> None:
    """Servers from a manifest and a pyproject are listed with their source."""
    (tmp_path / "manifest.json").write_text(
        json.dumps(
            {
                "server": {"type": "stdio", "command": "node", "args": ["dist/index.js"]},
                "user_config": [{"id": "API_KEY", "name": "API key", "required": True}],
            }
        )
    )
    (tmp_path / "pyproject.toml").write_text('[project]\ndependencies = ["mcp-server-git"]\n')

    result = runner.invoke(app, ["mcp", "detect", str(tmp_path)])

    assert result.exit_code == 0
    assert "mcpb-server" in result.stdout
    assert "node dist/index.js" in result.stdout
    assert "API_KEY" in result.stdout
    assert "python -m mcp_server_git" in result.stdout
    assert "pyproject" in result.stdout


def test_mcp_detect_nothing_found(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(json.dumps({"name": "express"}))

    result = runner.invoke(app, ["mcp", "detect", str(tmp_path)])

    assert result.exit_code == 0
    assert "No MCP servers detected" in result.stdout


def test_mcp_detect_requires_directory(tmp_path: Path) -> None:
    result = runner.invoke(app, ["mcp", "detect", str(tmp_path / "missing")])

    assert result.exit_code == 1
    assert "Not a directory" in result.stdout
