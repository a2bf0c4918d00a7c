"""Normalized MCP server model and per-harness capability matrix.

A server is one of three transports, tagged by ``transport`` in the
harness-neutral JSON form::

    {"transport": "stdio", "command": "node", "args": ["server.js"]}
    {"transport": "http", "url": "https://api.example.com/mcp"}

Models are immutable; build a new one (``model_copy(update=...)``) to change a
field.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from harness_locate.env import EnvRef, Plain
from harness_locate.errors import McpConfigError
from harness_locate.types import HarnessKind

Transport = Literal["stdio", "sse", "http"]


class OAuthConfig(BaseModel):
    """OAuth settings for an HTTP server. All fields are optional."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    client_id: str | None = None
    client_secret: Plain | EnvRef | None = None
    scope: str | None = None


class _BaseMcpServer(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = True
    timeout_ms: int | None = Field(default=None, ge=0)

    def _env_values(self) -> Iterator[Plain | EnvRef]:
        return iter(())

    def env_var_names(self) -> list[str]:
        """Names of environment variables referenced by this server."""
        return [value.env for value in self._env_values() if isinstance(value, EnvRef)]

    def missing_env_vars(self, environ: Mapping[str, str] | None = None) -> list[str]:
        """Referenced environment variables that are currently unset."""
        current = os.environ if environ is None else environ
        return [name for name in self.env_var_names() if name not in current]


class StdioMcpServer(_BaseMcpServer):
    """A local server spoken to over stdin/stdout."""

    transport: Literal["stdio"] = "stdio"
    command: str
    args: list[str] = Field(default_factory=list)
    env: dict[str, Plain | EnvRef] = Field(default_factory=dict)
    cwd: Path | None = None

    def _env_values(self) -> Iterator[Plain | EnvRef]:
        return iter(self.env.values())


class SseMcpServer(_BaseMcpServer):
    """A remote server streaming Server-Sent Events."""

    transport: Literal["sse"] = "sse"
    url: str
    headers: dict[str, Plain | EnvRef] = Field(default_factory=dict)

    def _env_values(self) -> Iterator[Plain | EnvRef]:
        return iter(self.headers.values())


class HttpMcpServer(_BaseMcpServer):
    """A remote server using streamable HTTP, optionally behind OAuth."""

    transport: Literal["http"] = "http"
    url: str
    headers: dict[str, Plain | EnvRef] = Field(default_factory=dict)
    oauth: OAuthConfig | None = None

    def _env_values(self) -> Iterator[Plain | EnvRef]:
        yield from self.headers.values()
        if self.oauth is not None and self.oauth.client_secret is not None:
            yield self.oauth.client_secret


McpServer = Annotated[
    StdioMcpServer | SseMcpServer | HttpMcpServer,
    Field(discriminator="transport"),
]

_SERVER_ADAPTER: TypeAdapter[StdioMcpServer | SseMcpServer | HttpMcpServer] = TypeAdapter(
    McpServer
)

_OMIT_WHEN_EMPTY = ("args", "env", "headers")


def load_server(data: Mapping[str, Any]) -> StdioMcpServer | SseMcpServer | HttpMcpServer:
    """Build a server from its harness-neutral JSON form.

    Raises:
        McpConfigError: If the document does not describe a valid server.
    """
    try:
        return _SERVER_ADAPTER.validate_python(dict(data))
    except ValidationError as exc:
        raise McpConfigError(f"invalid MCP server definition: {exc}") from exc


def dump_server(server: StdioMcpServer | SseMcpServer | HttpMcpServer) -> dict[str, Any]:
    """Return the harness-neutral JSON form of a server."""
    data = server.model_dump(mode="json", exclude_none=True)
    for key in _OMIT_WHEN_EMPTY:
        if key in data and not data[key]:
            del data[key]
    return data


@dataclass(frozen=True)
class McpCapabilities:
    """MCP features a harness can express in its native config."""

    stdio: bool = False
    sse: bool = False
    http: bool = False
    oauth: bool = False
    timeout: bool = False
    toggle: bool = False
    headers: bool = False
    cwd: bool = False

    def supports_transport(self, transport: Transport) -> bool:
        return bool(getattr(self, transport))

    def as_dict(self) -> dict[str, bool]:
        return asdict(self)


_CAPABILITIES: dict[HarnessKind, McpCapabilities] = {
    HarnessKind.CLAUDE_CODE: McpCapabilities(
        stdio=True, sse=True, http=True, oauth=True, timeout=True, headers=True
    ),
    HarnessKind.OPENCODE: McpCapabilities(
        stdio=True, sse=True, http=True, oauth=True, timeout=True, toggle=True, headers=True
    ),
    HarnessKind.GOOSE: McpCapabilities(stdio=True, http=True),
    HarnessKind.AMP_CODE: McpCapabilities(stdio=True),
    HarnessKind.COPILOT_CLI: McpCapabilities(
        stdio=True, sse=True, http=True, timeout=True, headers=True
    ),
    HarnessKind.CRUSH: McpCapabilities(
        stdio=True, sse=True, http=True, timeout=True, toggle=True, headers=True
    ),
}


def capabilities_for(harness: HarnessKind) -> McpCapabilities:
    """Return the fixed MCP capability record for a harness."""
    return _CAPABILITIES[harness]


def supports_server(
    server: StdioMcpServer | SseMcpServer | HttpMcpServer, harness: HarnessKind
) -> bool:
    """Quick yes/no check that every feature the server uses is supported."""
    caps = capabilities_for(harness)
    if not caps.supports_transport(server.transport):
        return False
    if server.timeout_ms is not None and not caps.timeout:
        return False
    if isinstance(server, StdioMcpServer):
        return server.cwd is None or caps.cwd
    if server.headers and not caps.headers:
        return False
    if isinstance(server, HttpMcpServer) and server.oauth is not None and not caps.oauth:
        return False
    return True
