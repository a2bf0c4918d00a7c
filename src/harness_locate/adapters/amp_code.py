"""AMP Code harness adapter.

AMP Code keeps its configuration in:
- Global: ``<config dir>/amp/settings.json``
- Project: no project config directory; project commands live in
  ``.agents/commands/``
- Skills: shared with Goose

MCP servers live under the literal dotted key ``amp.mcpServers``. AMP only
runs local stdio servers.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from harness_locate.adapters._native import EntryReader, put_if, render_values
from harness_locate.adapters.base import HarnessAdapter
from harness_locate.adapters.goose import shared_skills_dir
from harness_locate.adapters.registry import register_adapter
from harness_locate.mcp import HttpMcpServer, SseMcpServer, StdioMcpServer
from harness_locate.platform import config_dir
from harness_locate.types import HarnessKind, Scope

SERVERS_KEY = "amp.mcpServers"


class AmpCodeAdapter(HarnessAdapter):
    """Adapter for AMP Code."""

    kind = HarnessKind.AMP_CODE
    mcp_file_name = "settings.json"
    mcp_key_path = f"/{SERVERS_KEY}"

    def global_config_dir(self) -> Path:
        return config_dir() / "amp"

    def skills_dir(self, scope: Scope) -> Path | None:
        return shared_skills_dir(scope)

    def commands_dir(self, scope: Scope) -> Path | None:
        if scope.kind == "project":
            return scope.root / ".agents" / "commands"
        return self.config_dir(scope) / "commands"

    def servers_section(self, document: Mapping[str, Any]) -> Mapping[str, Any]:
        """Read the dotted key, falling back to a nested ``amp.mcpServers``.

        A document without either yields no servers rather than an error.
        """
        section = document.get(SERVERS_KEY)
        if section is None:
            amp = document.get("amp")
            section = amp.get("mcpServers") if isinstance(amp, Mapping) else None
        return section if isinstance(section, Mapping) else {}

    def decode_stdio(self, reader: EntryReader) -> StdioMcpServer:
        return StdioMcpServer(
            command=reader.required_string("command"),
            args=reader.string_list("args"),
            env=reader.env_map("env"),
        )

    def decode_sse(self, reader: EntryReader) -> SseMcpServer:
        return SseMcpServer(url=reader.required_string("url"), headers=reader.env_map("headers"))

    def decode_http(self, reader: EntryReader) -> HttpMcpServer:
        return HttpMcpServer(url=reader.required_string("url"), headers=reader.env_map("headers"))

    def encode_stdio(
        self, server: StdioMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        entry: dict[str, Any] = {"command": server.command, "args": list(server.args)}
        put_if(entry, "env", render_values(server.env, self.kind, environ))
        return entry


register_adapter(AmpCodeAdapter())
