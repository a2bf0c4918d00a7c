"""Base class for harness adapters.

An adapter owns everything harness-specific: where the harness keeps its
resources and how its native MCP entries are shaped. Shared plumbing lives
here so each concrete adapter only states what differs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from harness_locate.adapters._native import EntryReader
from harness_locate.errors import UnsupportedMcpConfigError, UnsupportedScopeError
from harness_locate.mcp import HttpMcpServer, SseMcpServer, StdioMcpServer
from harness_locate.types import FileFormat, HarnessKind, ResourceKind, Scope

AnyServer = StdioMcpServer | SseMcpServer | HttpMcpServer


class HarnessAdapter(ABC):
    """Base class for harness adapters."""

    kind: HarnessKind
    # Directory under a project root holding project config; None if unsupported.
    project_dir_name: str | None = None
    mcp_file_name: str = "config.json"
    mcp_key_path: str = "/mcpServers"
    mcp_format: FileFormat = FileFormat.JSON

    @property
    def name(self) -> str:
        """Machine-friendly adapter name."""
        return self.kind.value

    @property
    def display_name(self) -> str:
        """Human-friendly adapter name."""
        return self.kind.display_name

    # Paths

    @abstractmethod
    def global_config_dir(self) -> Path:
        """Return the user-wide configuration directory."""

    def project_config_dir(self, root: Path) -> Path:
        if self.project_dir_name is None:
            raise UnsupportedScopeError(self.display_name, "project")
        return root / self.project_dir_name

    def config_dir(self, scope: Scope) -> Path:
        """Return the base configuration directory for a scope."""
        if scope.kind == "global":
            return self.global_config_dir()
        if scope.kind == "project":
            return self.project_config_dir(scope.root)
        return scope.root

    def resource_dir(self, resource: ResourceKind, scope: Scope) -> Path | None:
        """Default layout: ``<config dir>/<resource dir name>``."""
        names = self.kind.directory_names(resource)
        if names is None:
            return None
        return self.config_dir(scope) / names[0]

    def skills_dir(self, scope: Scope) -> Path | None:
        return self.resource_dir(ResourceKind.SKILLS, scope)

    def commands_dir(self, scope: Scope) -> Path | None:
        return self.resource_dir(ResourceKind.COMMANDS, scope)

    def agents_dir(self, scope: Scope) -> Path | None:
        return self.resource_dir(ResourceKind.AGENTS, scope)

    def plugins_dir(self, scope: Scope) -> Path | None:
        return self.resource_dir(ResourceKind.PLUGINS, scope)

    def rules_dir(self, scope: Scope) -> Path | None:
        """Rules live in the global config dir or directly in the project root."""
        if scope.kind == "global":
            return self.global_config_dir()
        return scope.root

    def mcp_file(self, scope: Scope) -> Path:
        return self.config_dir(scope) / self.mcp_file_name

    # Native MCP documents

    def servers_section(self, document: Mapping[str, Any]) -> Mapping[str, Any]:
        """Return the mapping of server name to native entry.

        Raises:
            UnsupportedMcpConfigError: If the root key is missing or not an object.
        """
        section: Any = document
        for part in self._key_parts():
            section = section.get(part) if isinstance(section, Mapping) else None
        if not isinstance(section, Mapping):
            key = ".".join(self._key_parts())
            raise UnsupportedMcpConfigError(
                self.display_name, f"Config missing '{key}' object"
            )
        return section

    def build_document(self, entries: dict[str, Any]) -> dict[str, Any]:
        """Wrap encoded entries in the harness's root document shape."""
        document: dict[str, Any] = entries
        for part in reversed(self._key_parts()):
            document = {part: document}
        return document

    def _key_parts(self) -> list[str]:
        return [part for part in self.mcp_key_path.split("/") if part]

    # Native MCP entries

    def decode_server(self, entry: Any) -> AnyServer:
        """Decode one native entry.

        Raises:
            UnsupportedMcpConfigError: If the entry is malformed, ambiguous, or
                uses a transport this harness does not know.
        """
        reader = EntryReader(self.kind, entry)
        transport = self.read_transport(reader)
        try:
            if transport == "stdio":
                return self.decode_stdio(reader)
            if transport == "sse":
                return self.decode_sse(reader)
            return self.decode_http(reader)
        except ValidationError as e:
            raise reader.error(f"invalid server definition: {e}") from e

    def read_transport(self, reader: EntryReader) -> str:
        return reader.transport()

    @abstractmethod
    def decode_stdio(self, reader: EntryReader) -> StdioMcpServer:
        """Decode a local server entry."""

    def decode_sse(self, reader: EntryReader) -> SseMcpServer:
        raise reader.error("SSE transport not supported")

    def decode_http(self, reader: EntryReader) -> HttpMcpServer:
        raise reader.error("HTTP transport not supported")

    def encode_server(
        self, server: AnyServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        """Serialize an already capability-checked server to a native entry."""
        if isinstance(server, StdioMcpServer):
            return self.encode_stdio(server, name, environ)
        if isinstance(server, SseMcpServer):
            return self.encode_sse(server, name, environ)
        return self.encode_http(server, name, environ)

    @abstractmethod
    def encode_stdio(
        self, server: StdioMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        """Encode a local server."""

    def encode_sse(
        self, server: SseMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        raise UnsupportedMcpConfigError(self.display_name, "SSE transport not supported")

    def encode_http(
        self, server: HttpMcpServer, name: str, environ: Mapping[str, str]
    ) -> dict[str, Any]:
        raise UnsupportedMcpConfigError(self.display_name, "HTTP transport not supported")
