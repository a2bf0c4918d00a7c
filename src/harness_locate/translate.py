"""Translate MCP server definitions to and from harness-native config.

Decoding turns a native entry into a harness-neutral server model; encoding
goes the other way, gated by validation and the target's capability matrix.
Both directions dispatch through the adapter registry.

Example::

    servers = decode_all(claude_document, HarnessKind.CLAUDE_CODE)
    opencode_document = encode_all(servers, HarnessKind.OPENCODE)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from harness_locate.adapters import get_adapter
from harness_locate.errors import UnsupportedMcpConfigError
from harness_locate.mcp import (
    HttpMcpServer,
    SseMcpServer,
    StdioMcpServer,
    capabilities_for,
)
from harness_locate.types import HarnessKind
from harness_locate.validation import errors, validate_for_harness

logger = logging.getLogger(__name__)

AnyServer = StdioMcpServer | SseMcpServer | HttpMcpServer
NamedServers = Mapping[str, AnyServer] | Iterable[tuple[str, AnyServer]]


@dataclass
class DecodeResult:
    """Outcome of decoding every entry in a native document."""

    servers: list[tuple[str, AnyServer]] = field(default_factory=list)
    errors: dict[str, UnsupportedMcpConfigError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def decode(entry: Any, harness: HarnessKind | str, name: str | None = None) -> AnyServer:
    """Decode one native server entry.

    Args:
        entry: The native entry, e.g. the value under ``mcpServers.<name>``.
        harness: Harness whose format the entry is written in.
        name: Entry name, used to give errors context.

    Raises:
        UnsupportedMcpConfigError: If the entry is malformed or ambiguous.
    """
    adapter = get_adapter(harness)
    try:
        server = adapter.decode_server(entry)
    except UnsupportedMcpConfigError as e:
        if name is None:
            raise
        raise e.with_entry(name) from e
    logger.debug("decoded %s server %r from %s", server.transport, name, adapter.name)
    return server


def decode_all_detailed(document: Mapping[str, Any], harness: HarnessKind | str) -> DecodeResult:
    """Decode every server in a native document, collecting per-entry failures.

    Disabled servers are kept; filtering them is up to the caller.

    Raises:
        UnsupportedMcpConfigError: If the document has no servers section.
    """
    adapter = get_adapter(harness)
    result = DecodeResult()
    for name, entry in adapter.servers_section(document).items():
        try:
            result.servers.append((name, decode(entry, adapter.kind, name)))
        except UnsupportedMcpConfigError as e:
            logger.warning("skipping %s server %r: %s", adapter.display_name, name, e.reason)
            result.errors[name] = e
    return result


def decode_all(
    document: Mapping[str, Any], harness: HarnessKind | str
) -> list[tuple[str, AnyServer]]:
    """Decode every server in a native document, skipping broken entries."""
    return decode_all_detailed(document, harness).servers


def encode(
    server: AnyServer,
    harness: HarnessKind | str,
    name: str,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Encode a server as a native entry for ``harness``.

    Headers the harness cannot store are dropped with a warning.

    Args:
        server: The server to encode.
        harness: Target harness.
        name: Entry name; some harnesses repeat it inside the entry.
        environ: Environment used for immediate resolution. Defaults to a
            snapshot of ``os.environ`` taken once per call.

    Raises:
        UnsupportedMcpConfigError: If validation reports an error or the
            harness cannot express the server's transport, OAuth settings or
            timeout.
        MissingEnvVarError: If the harness resolves references immediately
            and one is unset.
    """
    adapter = get_adapter(harness)
    kind = adapter.kind

    blocking = errors(validate_for_harness(server, kind))
    if blocking:
        reason = "; ".join(f"{issue.field}: {issue.message}" for issue in blocking)
        raise UnsupportedMcpConfigError(adapter.display_name, reason)

    server = _fit_capabilities(server, kind, name)
    snapshot = dict(os.environ) if environ is None else environ
    entry = adapter.encode_server(server, name, snapshot)
    logger.debug("encoded %s server %r for %s", server.transport, name, adapter.name)
    return entry


def encode_all(
    servers: NamedServers,
    harness: HarnessKind | str,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Encode named servers into the harness's complete root document.

    Disabled servers are left out for harnesses that cannot mark a server as
    disabled. Every entry is rendered against the same environment snapshot.

    Raises:
        UnsupportedMcpConfigError: If any server cannot be encoded; the reason
            names the offending entry.
    """
    adapter = get_adapter(harness)
    caps = capabilities_for(adapter.kind)
    snapshot = dict(os.environ) if environ is None else environ
    pairs = servers.items() if isinstance(servers, Mapping) else servers

    entries: dict[str, Any] = {}
    for name, server in pairs:
        if not server.enabled and not caps.toggle:
            logger.debug("omitting disabled server %r for %s", name, adapter.name)
            continue
        try:
            entries[name] = encode(server, adapter.kind, name, snapshot)
        except UnsupportedMcpConfigError as e:
            raise e.with_entry(name) from e
    return adapter.build_document(entries)


def translate(
    document: Mapping[str, Any],
    source: HarnessKind | str,
    target: HarnessKind | str,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Convert a native document from one harness's format to another's."""
    return encode_all(decode_all(document, source), target, environ)


def _fit_capabilities(server: AnyServer, harness: HarnessKind, name: str) -> AnyServer:
    caps = capabilities_for(harness)
    display = harness.display_name

    if not caps.supports_transport(server.transport):
        raise UnsupportedMcpConfigError(
            display, f"{server.transport.upper()} transport not supported"
        )
    if isinstance(server, HttpMcpServer) and server.oauth is not None and not caps.oauth:
        raise UnsupportedMcpConfigError(display, "OAuth not supported")
    if server.timeout_ms is not None and not caps.timeout:
        raise UnsupportedMcpConfigError(display, "timeout not supported")

    if not isinstance(server, StdioMcpServer) and server.headers and not caps.headers:
        logger.warning("%s does not support headers; dropping them from %r", display, name)
        return server.model_copy(update={"headers": {}})
    return server
