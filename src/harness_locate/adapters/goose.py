"""Goose harness adapter.

Goose keeps its configuration in:
- Global: ``<config dir>/goose/config.yaml``
- Project: ``.goose/`` in the project root
- Skills: ``<config dir>/agents/skills/`` and ``.agents/skills/``, shared with AMP

MCP servers are YAML ``extensions``. Goose has no environment reference
syntax, so references are resolved when the entry is written, and timeouts
are stored in seconds.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from harness_locate.adapters._native import EntryReader, put_if, render_values
from harness_locate.adapters.base import HarnessAdapter
from harness_locate.adapters.registry import register_adapter
from harness_locate.mcp import HttpMcpServer, SseMcpServer, StdioMcpServer
from harness_locate.platform import config_dir
from harness_locate.types import FileFormat, HarnessKind, Scope

_TRANSPORTS = {"stdio": "stdio", "sse": "sse", "streamable_http": "http"}


def shared_skills_dir(scope: Scope) -> Path:
    """Skills directory shared by Goose and AMP Code."""
    if scope.kind == "global":
        return config_dir() / "agents" / "skills"
    if scope.kind == "project":
        return scope.root / ".agents" / "skills"
    return scope.root / "skills"


class GooseAdapter(HarnessAdapter):
    """Adapter for Goose."""

    kind = HarnessKind.GOOSE
    project_dir_name = ".goose"
    mcp_file_name = "config.yaml"
    mcp_key_path = "/extensions"
    mcp_format = FileFormat.YAML

    def global_config_dir(self) -> Path:
        return config_dir() / "goose"

    def skills_dir(self, scope: Scope) -> Path | None:
        return shared_skills_dir(scope)

    def read_transport(self, reader: EntryReader) -> str:
        return reader.transport(types=_TRANSPORTS, command_key="cmd", url_key="uri")

    def decode_stdio(self, reader: EntryReader) -> StdioMcpServer:
        return StdioMcpServer(
            command=reader.required_string("cmd"),
            args=reader.string_list("args"),
            env=reader.env_map("envs"),
            enabled=reader.boolean("enabled", True),
            timeout_ms=self._timeout_ms(reader),
        )

    def decode_sse(self, reader: EntryReader) -> SseMcpServer:
        return SseMcpServer(
            url=reader.required_string("uri"),
            headers=reader.env_map("headers"),
            enabled=reader.boolean("enabled", True),
            timeout_ms=self._timeout_ms(reader),
        )

    def decode_http(self, reader: EntryReader) -> HttpMcpServer:
        return HttpMcpServer(
            url=reader.required_string("uri"),
            headers=reader.env_map("headers"),
            enabled=reader.boolean("enabled", True),
            timeout_ms=self._timeout_ms(reader),
        )

    def encode_stdio(
        self, server: StdioMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        entry = self._entry_header(name, "stdio")
        entry["cmd"] = server.command
        entry["args"] = list(server.args)
        put_if(entry, "envs", render_values(server.env, self.kind, environ))
        return entry

    def encode_http(
        self, server: HttpMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        entry = self._entry_header(name, "streamable_http")
        entry["uri"] = server.url
        return entry

    def _entry_header(self, name: str, server_type: str) -> dict[str, Any]:
        # Goose cannot toggle servers, so anything written is enabled.
        return {"name": name, "description": "", "enabled": True, "type": server_type}

    def _timeout_ms(self, reader: EntryReader) -> int | None:
        seconds = reader.non_negative_int("timeout")
        return None if seconds is None else seconds * 1000


register_adapter(GooseAdapter())
