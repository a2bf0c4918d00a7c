"""OpenCode harness adapter.

OpenCode keeps its configuration in:
- Global: ``<config dir>/opencode/`` with ``opencode.json``
- Project: ``.opencode/`` for resources, ``opencode.json`` at the project root
- Resource directories use singular names (``skill/``, ``command/``, ``agent/``)

The config file is JSONC. MCP entries live under ``mcp``, are tagged
``local`` or ``remote``, and reference the environment as ``{env:VAR}``.
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
from harness_locate.platform import config_dir
from harness_locate.types import FileFormat, HarnessKind, Scope

# OpenCode has no separate SSE tag; every remote server reads back as HTTP.
_TRANSPORTS = {"local": "stdio", "remote": "http"}


class OpencodeAdapter(HarnessAdapter):
    """Adapter for OpenCode."""

    kind = HarnessKind.OPENCODE
    project_dir_name = ".opencode"
    mcp_file_name = "opencode.json"
    mcp_key_path = "/mcp"
    mcp_format = FileFormat.JSONC

    def global_config_dir(self) -> Path:
        return config_dir() / "opencode"

    def mcp_file(self, scope: Scope) -> Path:
        if scope.kind == "project":
            return scope.root / self.mcp_file_name
        return self.config_dir(scope) / self.mcp_file_name

    def rules_dir(self, scope: Scope) -> Path | None:
        if scope.kind == "global":
            return None
        return scope.root

    def read_transport(self, reader: EntryReader) -> str:
        return reader.transport(types=_TRANSPORTS)

    def decode_stdio(self, reader: EntryReader) -> StdioMcpServer:
        command = reader.string_list("command")
        if not command:
            raise reader.error("Command array must not be empty")
        return StdioMcpServer(
            command=command[0],
            args=command[1:],
            env=reader.env_map("environment"),
            enabled=reader.boolean("enabled", True),
            timeout_ms=reader.non_negative_int("timeout"),
        )

    def decode_http(self, reader: EntryReader) -> HttpMcpServer:
        return HttpMcpServer(
            url=reader.required_string("url"),
            headers=reader.env_map("headers"),
            oauth=read_oauth(reader),
            enabled=reader.boolean("enabled", True),
            timeout_ms=reader.non_negative_int("timeout"),
        )

    def encode_stdio(
        self, server: StdioMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        entry: dict[str, Any] = {"type": "local", "command": [server.command, *server.args]}
        put_if(entry, "environment", render_values(server.env, self.kind, environ))
        put_if(entry, "timeout", server.timeout_ms)
        entry["enabled"] = server.enabled
        return entry

    def encode_sse(
        self, server: SseMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        return self._remote_entry(server, environ)

    def encode_http(
        self, server: HttpMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        entry = self._remote_entry(server, environ)
        if server.oauth is not None:
            entry["oauth"] = write_oauth(server.oauth, self.kind, environ)
        return entry

    def _remote_entry(
        self, server: SseMcpServer | HttpMcpServer, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        entry: dict[str, Any] = {"type": "remote", "url": server.url}
        put_if(entry, "headers", render_values(server.headers, self.kind, environ))
        put_if(entry, "timeout", server.timeout_ms)
        entry["enabled"] = server.enabled
        return entry


register_adapter(OpencodeAdapter())
