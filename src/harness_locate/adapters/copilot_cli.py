"""GitHub Copilot CLI harness adapter.

Copilot CLI keeps its configuration in:
- Global: ``$XDG_CONFIG_HOME/.copilot/`` (when absolute) or ``~/.copilot/``
- Project: ``.github/`` in the project root; project MCP config is not supported

MCP servers live in ``mcp-config.json`` under ``mcpServers`` with ``${VAR}``
references. ``local`` is accepted as a synonym for ``stdio``.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from harness_locate.adapters._native import EntryReader, put_if, render_values
from harness_locate.adapters.base import HarnessAdapter
from harness_locate.adapters.registry import register_adapter
from harness_locate.errors import UnsupportedScopeError
from harness_locate.mcp import HttpMcpServer, SseMcpServer, StdioMcpServer
from harness_locate.platform import env_dir, home_dir
from harness_locate.types import HarnessKind, Scope

_TRANSPORTS = {"stdio": "stdio", "local": "stdio", "sse": "sse", "http": "http"}


class CopilotCliAdapter(HarnessAdapter):
    """Adapter for GitHub Copilot CLI."""

    kind = HarnessKind.COPILOT_CLI
    project_dir_name = ".github"
    mcp_file_name = "mcp-config.json"
    mcp_key_path = "/mcpServers"

    def global_config_dir(self) -> Path:
        xdg = env_dir("XDG_CONFIG_HOME")
        if xdg is not None:
            return xdg / ".copilot"
        return home_dir() / ".copilot"

    def skills_dir(self, scope: Scope) -> Path | None:
        if scope.kind == "project":
            return None
        return super().skills_dir(scope)

    def mcp_file(self, scope: Scope) -> Path:
        if scope.kind == "project":
            raise UnsupportedScopeError(self.display_name, "project")
        return super().mcp_file(scope)

    def read_transport(self, reader: EntryReader) -> str:
        return reader.transport(types=_TRANSPORTS)

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
        return self._remote_entry("sse", server, environ)

    def encode_http(
        self, server: HttpMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        return self._remote_entry("http", server, environ)

    def _remote_entry(
        self, server_type: str, server: SseMcpServer | HttpMcpServer, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        entry: dict[str, Any] = {"type": server_type, "url": server.url}
        put_if(entry, "headers", render_values(server.headers, self.kind, environ))
        put_if(entry, "timeout", server.timeout_ms)
        return entry


register_adapter(CopilotCliAdapter())
