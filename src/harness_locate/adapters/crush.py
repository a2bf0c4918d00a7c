"""Crush harness adapter.

Crush keeps its configuration in:
- Global: ``<config dir>/crush/crush.json``
- Project: ``.crush/`` in the project root

MCP entries live under ``mcp`` with an explicit ``type`` of ``stdio``,
``http`` or ``sse``. Crush expands ``$VAR`` and ``${VAR}`` in values and
stores a ``disabled`` flag rather than ``enabled``.
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
from harness_locate.types import HarnessKind

TIMEOUT_KEY = "timeout_ms"


class CrushAdapter(HarnessAdapter):
    """Adapter for Crush."""

    kind = HarnessKind.CRUSH
    project_dir_name = ".crush"
    mcp_file_name = "crush.json"
    mcp_key_path = "/mcp"

    def global_config_dir(self) -> Path:
        return config_dir() / "crush"

    def decode_stdio(self, reader: EntryReader) -> StdioMcpServer:
        return StdioMcpServer(
            command=reader.required_string("command"),
            args=reader.string_list("args"),
            env=reader.env_map("env"),
            enabled=not reader.boolean("disabled", False),
            timeout_ms=reader.non_negative_int(TIMEOUT_KEY),
        )

    def decode_sse(self, reader: EntryReader) -> SseMcpServer:
        return SseMcpServer(
            url=reader.required_string("url"),
            headers=reader.env_map("headers"),
            enabled=not reader.boolean("disabled", False),
            timeout_ms=reader.non_negative_int(TIMEOUT_KEY),
        )

    def decode_http(self, reader: EntryReader) -> HttpMcpServer:
        return HttpMcpServer(
            url=reader.required_string("url"),
            headers=reader.env_map("headers"),
            enabled=not reader.boolean("disabled", False),
            timeout_ms=reader.non_negative_int(TIMEOUT_KEY),
        )

    def encode_stdio(
        self, server: StdioMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        entry: dict[str, Any] = {"type": "stdio", "command": server.command}
        put_if(entry, "args", list(server.args))
        put_if(entry, "env", render_values(server.env, self.kind, environ))
        return self._finish(entry, server)

    def encode_sse(
        self, server: SseMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        entry: dict[str, Any] = {"type": "sse", "url": server.url}
        put_if(entry, "headers", render_values(server.headers, self.kind, environ))
        return self._finish(entry, server)

    def encode_http(
        self, server: HttpMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        entry: dict[str, Any] = {"type": "http", "url": server.url}
        put_if(entry, "headers", render_values(server.headers, self.kind, environ))
        return self._finish(entry, server)

    def _finish(
        self, entry: dict[str, Any], server: StdioMcpServer | SseMcpServer | HttpMcpServer
    ) -> dict[str, Any]:
        if not server.enabled:
            entry["disabled"] = True
        put_if(entry, TIMEOUT_KEY, server.timeout_ms)
        return entry


register_adapter(CrushAdapter())
