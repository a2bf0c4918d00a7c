"""Claude Code harness adapter.

Claude Code keeps its configuration in:
- Global: ``$CLAUDE_CONFIG_DIR`` (when absolute) or ``~/.claude/``
- Project: ``.claude/`` in the project root, with MCP servers in ``.mcp.json``
  at the project root itself

MCP entries live under ``mcpServers`` and reference the environment as
``${VAR}``. There is no per-server ``enabled`` flag; a disabled server is one
that is absent from the file.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from harness_locate.adapters._native import (
    EntryReader,
    put_if,
    read_oauth,
    render_values,
    write_oauth,
)
from harness_locate.adapters.base import HarnessAdapter
from harness_locate.adapters.registry import register_adapter
from harness_locate.mcp import HttpMcpServer, SseMcpServer, StdioMcpServer
from harness_locate.platform import env_dir, home_dir
from harness_locate.types import HarnessKind, Scope

CLAUDE_CONFIG_DIR_ENV = "CLAUDE_CONFIG_DIR"


class ClaudeCodeAdapter(HarnessAdapter):
    """Adapter for Claude Code."""

    kind = HarnessKind.CLAUDE_CODE
    project_dir_name = ".claude"
    mcp_file_name = ".mcp.json"
    mcp_key_path = "/mcpServers"

    def global_config_dir(self) -> Path:
        return env_dir(CLAUDE_CONFIG_DIR_ENV) or home_dir() / ".claude"

    def mcp_file(self, scope: Scope) -> Path:
        if scope.kind == "global":
            return self.global_config_dir() / self.mcp_file_name
        return scope.root / self.mcp_file_name

    def decode_stdio(self, reader: EntryReader) -> StdioMcpServer:
        return StdioMcpServer(
            command=reader.required_string("command"),
            args=reader.string_list("args"),
            env=reader.env_map("env"),
            timeout_ms=reader.non_negative_int("timeout"),
        )

    def decode_sse(self, reader: EntryReader) -> SseMcpServer:
        return SseMcpServer(
            url=reader.required_string("url"),
            headers=reader.env_map("headers"),
            timeout_ms=reader.non_negative_int("timeout"),
        )

    def decode_http(self, reader: EntryReader) -> HttpMcpServer:
        return HttpMcpServer(
            url=reader.required_string("url"),
            headers=reader.env_map("headers"),
            oauth=read_oauth(reader),
            timeout_ms=reader.non_negative_int("timeout"),
        )

    def encode_stdio(
        self, server: StdioMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        entry: dict[str, Any] = {"command": server.command, "args": list(server.args)}
        put_if(entry, "env", render_values(server.env, self.kind, environ))
        put_if(entry, "timeout", server.timeout_ms)
        return entry

    def encode_sse(
        self, server: SseMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        # Written without a type tag, so it reads back as HTTP.
        entry: dict[str, Any] = {"url": server.url}
        put_if(entry, "headers", render_values(server.headers, self.kind, environ))
        put_if(entry, "timeout", server.timeout_ms)
        return entry

    def encode_http(
        self, server: HttpMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        entry: dict[str, Any] = {"type": "http", "url": server.url}
        put_if(entry, "headers", render_values(server.headers, self.kind, environ))
        put_if(entry, "timeout", server.timeout_ms)
        if server.oauth is not None:
            entry["oauth"] = write_oauth(server.oauth, self.kind, environ)
        return entry


register_adapter(ClaudeCodeAdapter())
