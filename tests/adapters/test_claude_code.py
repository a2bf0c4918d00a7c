"""Tests for Claude Code adapter."""

from pathlib import Path

import pytest

from harness_locate.adapters.claude_code import ClaudeCodeAdapter
from harness_locate.env import EnvRef, Plain
from harness_locate.errors import UnsupportedMcpConfigError
from harness_locate.mcp import HttpMcpServer, OAuthConfig, SseMcpServer, StdioMcpServer
from harness_locate.types import Scope


@pytest.fixture
def adapter() -> ClaudeCodeAdapter:
    return ClaudeCodeAdapter()


def test_global_paths(adapter: ClaudeCodeAdapter, home: Path) -> None:
    scope = Scope.global_()

    assert adapter.config_dir(scope) == home / ".claude"
    assert adapter.skills_dir(scope) == home / ".claude" / "skills"
    assert adapter.mcp_file(scope) == home / ".claude" / ".mcp.json"
    assert adapter.rules_dir(scope) == home / ".claude"


def test_claude_config_dir_override(
    adapter: ClaudeCodeAdapter, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    custom = tmp_path / "claude-config"
    monkeypatch.setenv("CLAUDE_CONFIG_DIR", str(custom))
    assert adapter.global_config_dir() == custom

    monkeypatch.setenv("CLAUDE_CONFIG_DIR", "relative/dir")
    assert adapter.global_config_dir() == Path.home() / ".claude"


def test_project_paths(adapter: ClaudeCodeAdapter, tmp_path: Path) -> None:
    scope = Scope.project(tmp_path)

    assert adapter.config_dir(scope) == tmp_path / ".claude"
    assert adapter.commands_dir(scope) == tmp_path / ".claude" / "commands"
    assert adapter.agents_dir(scope) == tmp_path / ".claude" / "agents"
    assert adapter.mcp_file(scope) == tmp_path / ".mcp.json"
    assert adapter.rules_dir(scope) == tmp_path


def test_decode_stdio(adapter: ClaudeCodeAdapter) -> None:
    server = adapter.decode_server(
        {"command": "npx", "args": ["-y", "pkg"], "env": {"KEY": "${TOK}", "MODE": "dev"}}
    )

    assert server == StdioMcpServer(
        command="npx",
        args=["-y", "pkg"],
        env={"KEY": EnvRef(env="TOK"), "MODE": Plain("dev")},
    )


def test_decode_remote(adapter: ClaudeCodeAdapter) -> None:
    http = adapter.decode_server({"url": "https://x.example/mcp"})
    sse = adapter.decode_server({"type": "sse", "url": "https://x.example/sse"})

    assert isinstance(http, HttpMcpServer)
    assert isinstance(sse, SseMcpServer)


def test_decode_rejects_ambiguous_entry(adapter: ClaudeCodeAdapter) -> None:
    with pytest.raises(UnsupportedMcpConfigError) as exc_info:
        adapter.decode_server({"command": "npx", "url": "https://x.example"})

    message = str(exc_info.value)
    assert "'command'" in message
    assert "'url'" in message


@pytest.mark.parametrize("entry", [{}, {"args": []}])
def test_decode_rejects_entry_without_command_or_url(
    adapter: ClaudeCodeAdapter, entry: dict[str, list[str]]
) -> None:
    with pytest.raises(UnsupportedMcpConfigError) as exc_info:
        adapter.decode_server(entry)

    message = str(exc_info.value)
    assert "neither" in message
    assert "'command'" in message
    assert "'url'" in message


def test_decode_rejects_unknown_type(adapter: ClaudeCodeAdapter) -> None:
    with pytest.raises(UnsupportedMcpConfigError, match="Unknown server type: websocket"):
        adapter.decode_server({"type": "websocket", "url": "wss://x.example"})


def test_decode_rejects_wrong_field_types(adapter: ClaudeCodeAdapter) -> None:
    with pytest.raises(UnsupportedMcpConfigError, match="'args' must be an array"):
        adapter.decode_server({"command": "npx", "args": "-y"})
    with pytest.raises(UnsupportedMcpConfigError, match="non-negative"):
        adapter.decode_server({"command": "npx", "timeout": -5})
    with pytest.raises(UnsupportedMcpConfigError, match="must be an object"):
        adapter.decode_server(["npx"])


def test_encode_stdio(adapter: ClaudeCodeAdapter) -> None:
    server = StdioMcpServer(command="node", args=["server.js"], env={"KEY": EnvRef(env="TOK")})

    assert adapter.encode_server(server, "fs", {}) == {
        "command": "node",
        "args": ["server.js"],
        "env": {"KEY": "${TOK}"},
    }


def test_sse_is_written_without_type(adapter: ClaudeCodeAdapter) -> None:
    server = SseMcpServer(url="https://x.example/sse", timeout_ms=1000)

    entry = adapter.encode_server(server, "events", {})

    assert entry == {"url": "https://x.example/sse", "timeout": 1000}
    assert isinstance(adapter.decode_server(entry), HttpMcpServer)


def test_http_with_oauth_round_trips(adapter: ClaudeCodeAdapter) -> None:
    server = HttpMcpServer(
        url="https://api.example.com/mcp",
        headers={"X-Api-Key": EnvRef(env="API_KEY")},
        oauth=OAuthConfig(client_id="app", client_secret=EnvRef(env="SECRET"), scope="read"),
        timeout_ms=30_000,
    )

    entry = adapter.encode_server(server, "api", {})

    assert entry["type"] == "http"
    assert entry["oauth"] == {"client_id": "app", "client_secret": "${SECRET}", "scope": "read"}
    assert adapter.decode_server(entry) == server


def test_servers_section(adapter: ClaudeCodeAdapter) -> None:
    assert adapter.servers_section({"mcpServers": {"a": {}}}) == {"a": {}}
    with pytest.raises(UnsupportedMcpConfigError, match="mcpServers"):
        adapter.servers_section({"servers": {}})
    assert adapter.build_document({"a": {"command": "x"}}) == {
        "mcpServers": {"a": {"command": "x"}}
    }
