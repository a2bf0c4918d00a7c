"""Tests for OpenCode adapter."""

from pathlib import Path

import pytest

from harness_locate.adapters.opencode import OpencodeAdapter
from harness_locate.env import EnvRef
from harness_locate.errors import UnsupportedMcpConfigError
from harness_locate.mcp import HttpMcpServer, OAuthConfig, SseMcpServer, StdioMcpServer
from harness_locate.types import FileFormat, Scope


@pytest.fixture
def adapter() -> OpencodeAdapter:
    return OpencodeAdapter()


def test_paths(adapter: OpencodeAdapter, home: Path, tmp_path: Path) -> None:
    base = home / ".config" / "opencode"
    assert adapter.config_dir(Scope.global_()) == base
    assert adapter.skills_dir(Scope.global_()) == base / "skill"
    assert adapter.plugins_dir(Scope.global_()) == base / "plugin"
    assert adapter.mcp_file(Scope.global_()) == base / "opencode.json"
    assert adapter.rules_dir(Scope.global_()) is None

    project = Scope.project(tmp_path)
    assert adapter.commands_dir(project) == tmp_path / ".opencode" / "command"
    assert adapter.mcp_file(project) == tmp_path / "opencode.json"
    assert adapter.rules_dir(project) == tmp_path
    assert adapter.mcp_format is FileFormat.JSONC


def test_xdg_config_home(
    adapter: OpencodeAdapter, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    assert adapter.global_config_dir() == tmp_path / "xdg" / "opencode"


def test_decode_local(adapter: OpencodeAdapter) -> None:
    server = adapter.decode_server(
        {
            "type": "local",
            "command": ["npx", "-y", "pkg"],
            "environment": {"KEY": "{env:TOK}"},
            "enabled": False,
            "timeout": 5000,
        }
    )

    assert server == StdioMcpServer(
        command="npx",
        args=["-y", "pkg"],
        env={"KEY": EnvRef(env="TOK")},
        enabled=False,
        timeout_ms=5000,
    )


def test_decode_empty_command(adapter: OpencodeAdapter) -> None:
    with pytest.raises(UnsupportedMcpConfigError, match="Command array must not be empty"):
        adapter.decode_server({"type": "local", "command": []})


def test_decode_remote_is_http(adapter: OpencodeAdapter) -> None:
    server = adapter.decode_server(
        {
            "type": "remote",
            "url": "https://x.example/mcp",
            "oauth": {"client_id": "app", "client_secret": "{env:SECRET}"},
        }
    )

    assert server == HttpMcpServer(
        url="https://x.example/mcp",
        oauth=OAuthConfig(client_id="app", client_secret=EnvRef(env="SECRET")),
    )


def test_encode_local(adapter: OpencodeAdapter) -> None:
    server = StdioMcpServer(command="npx", args=["-y", "pkg"], env={"KEY": EnvRef(env="TOK")})

    assert adapter.encode_server(server, "fs", {}) == {
        "type": "local",
        "command": ["npx", "-y", "pkg"],
        "environment": {"KEY": "{env:TOK}"},
        "enabled": True,
    }


def test_sse_collapses_to_remote(adapter: OpencodeAdapter) -> None:
    server = SseMcpServer(url="https://x.example/sse", enabled=False)

    entry = adapter.encode_server(server, "events", {})

    assert entry == {"type": "remote", "url": "https://x.example/sse", "enabled": False}
    assert adapter.decode_server(entry) == HttpMcpServer(
        url="https://x.example/sse", enabled=False
    )


def test_unknown_type(adapter: OpencodeAdapter) -> None:
    with pytest.raises(UnsupportedMcpConfigError, match="Unknown server type: stdio"):
        adapter.decode_server({"type": "stdio", "command": ["x"]})
