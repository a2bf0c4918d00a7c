"""Harness discovery and resource resolution.

``Harness`` is the entry point for callers that want to know where a harness
keeps its resources, or to move MCP servers in and out of its native config::

    harness = Harness.locate(HarnessKind.CLAUDE_CODE)
    skills = harness.skills(Scope.global_())
    servers = harness.load_mcp_servers(Scope.project("."))
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from harness_locate.adapters import HarnessAdapter, get_adapter
from harness_locate.detection import find_binary
from harness_locate.documents import read_document
from harness_locate.errors import HarnessNotFoundError
from harness_locate.mcp import (
    HttpMcpServer,
    McpCapabilities,
    SseMcpServer,
    StdioMcpServer,
    capabilities_for,
    supports_server,
)
from harness_locate.translate import decode, decode_all, encode
from harness_locate.types import (
    ALL_HARNESSES,
    ConfigResource,
    DirectoryResource,
    DirectoryStructure,
    FileFormat,
    HarnessKind,
    InstallationStatus,
    Scope,
)
from harness_locate.validation import (
    SkillCapabilities,
    ValidationIssue,
    validate_for_harness,
    validate_skill_for_harness,
)

logger = logging.getLogger(__name__)

AnyServer = StdioMcpServer | SseMcpServer | HttpMcpServer

_SKILL_LAYOUT = DirectoryStructure.nested("*", "SKILL.md")
_MARKDOWN_FILES = DirectoryStructure.flat("*.md")

_AGENT_LAYOUT: dict[HarnessKind, tuple[DirectoryStructure, FileFormat]] = {
    HarnessKind.CLAUDE_CODE: (_MARKDOWN_FILES, FileFormat.MARKDOWN_WITH_FRONTMATTER),
    HarnessKind.OPENCODE: (DirectoryStructure.flat("*.{yaml,json}"), FileFormat.YAML),
    HarnessKind.COPILOT_CLI: (_MARKDOWN_FILES, FileFormat.MARKDOWN_WITH_FRONTMATTER),
}

_PLUGIN_LAYOUT: dict[HarnessKind, tuple[DirectoryStructure, FileFormat]] = {
    HarnessKind.CLAUDE_CODE: (DirectoryStructure.nested("*", ".claude-plugin"), FileFormat.JSON),
    HarnessKind.OPENCODE: (DirectoryStructure.flat("*.{js,ts}"), FileFormat.JSON),
}


def _directory(
    path: Path | None, structure: DirectoryStructure, file_format: FileFormat
) -> DirectoryResource | None:
    if path is None:
        return None
    return DirectoryResource(
        path=path, exists=path.exists(), structure=structure, file_format=file_format
    )


class Harness:
    """A harness and the resources it keeps on this system."""

    def __init__(self, kind: HarnessKind | str) -> None:
        self.adapter: HarnessAdapter = get_adapter(kind)
        self.kind: HarnessKind = self.adapter.kind

    def __repr__(self) -> str:
        return f"Harness({self.kind.value!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Harness) and other.kind is self.kind

    def __hash__(self) -> int:
        return hash(self.kind)

    @property
    def display_name(self) -> str:
        return self.kind.display_name

    # Discovery

    @classmethod
    def locate(cls, kind: HarnessKind | str) -> Harness:
        """Return the harness if it is installed.

        Raises:
            HarnessNotFoundError: If the harness is not installed.
        """
        harness = cls(kind)
        if not harness.is_installed():
            raise HarnessNotFoundError(harness.display_name)
        return harness

    @classmethod
    def installed(cls) -> list[Harness]:
        """Return every harness installed on this system."""
        return [harness for harness in map(cls, ALL_HARNESSES) if harness.is_installed()]

    def is_installed(self) -> bool:
        """A harness counts as installed once its global config directory exists."""
        return self.adapter.global_config_dir().exists()

    def installation_status(self) -> InstallationStatus:
        """Check for both an executable on PATH and a global config directory."""
        binary_path = None
        for name in self.kind.binary_names:
            binary_path = find_binary(name)
            if binary_path is not None:
                break
        config_path = self.adapter.global_config_dir()
        return InstallationStatus(
            binary_path=binary_path,
            config_path=config_path if config_path.exists() else None,
        )

    # Paths

    def config(self, scope: Scope) -> Path:
        """Return the base configuration directory for a scope.

        Raises:
            UnsupportedScopeError: If the harness has no config at this scope.
        """
        return self.adapter.config_dir(scope)

    def skills(self, scope: Scope) -> DirectoryResource | None:
        fmt = (
            FileFormat.MARKDOWN_WITH_FRONTMATTER
            if self.kind is HarnessKind.CLAUDE_CODE
            else FileFormat.MARKDOWN
        )
        return _directory(self.adapter.skills_dir(scope), _SKILL_LAYOUT, fmt)

    def commands(self, scope: Scope) -> DirectoryResource | None:
        return _directory(
            self.adapter.commands_dir(scope),
            _MARKDOWN_FILES,
            FileFormat.MARKDOWN_WITH_FRONTMATTER,
        )

    def agents(self, scope: Scope) -> DirectoryResource | None:
        layout = _AGENT_LAYOUT.get(self.kind)
        if layout is None:
            return None
        return _directory(self.adapter.agents_dir(scope), *layout)

    def plugins(self, scope: Scope) -> DirectoryResource | None:
        layout = _PLUGIN_LAYOUT.get(self.kind)
        if layout is None:
            return None
        return _directory(self.adapter.plugins_dir(scope), *layout)

    def rules(self, scope: Scope) -> DirectoryResource | None:
        """Directory holding rules files (behavioural instructions)."""
        return _directory(self.adapter.rules_dir(scope), _MARKDOWN_FILES, FileFormat.MARKDOWN)

    def mcp(self, scope: Scope) -> ConfigResource:
        """Return the MCP config file and the JSON pointer to its servers.

        Raises:
            UnsupportedScopeError: If the harness has no MCP config at this scope.
        """
        path = self.adapter.mcp_file(scope)
        return ConfigResource(
            file=path,
            file_exists=path.exists(),
            key_path=self.adapter.mcp_key_path,
            format=self.adapter.mcp_format,
        )

    # MCP

    def mcp_capabilities(self) -> McpCapabilities:
        return capabilities_for(self.kind)

    def supports_mcp_server(self, server: AnyServer) -> bool:
        """True when every feature the server uses can be expressed natively."""
        return supports_server(server, self.kind)

    def validate_mcp_server(self, server: AnyServer) -> list[ValidationIssue]:
        return validate_for_harness(server, self.kind)

    def mcp_to_native(
        self, name: str, server: AnyServer, environ: Mapping[str, str] | None = None
    ) -> dict[str, Any]:
        return encode(server, self.kind, name, environ)

    def parse_mcp_config(self, document: Mapping[str, Any]) -> dict[str, AnyServer]:
        """Decode every server in a native document, including disabled ones."""
        return dict(decode_all(document, self.kind))

    def parse_mcp_server_config(self, name: str, entry: Any) -> AnyServer:
        return decode(entry, self.kind, name)

    def load_mcp_servers(self, scope: Scope) -> dict[str, AnyServer]:
        """Read the native MCP config for a scope and decode its servers.

        A missing file yields no servers.

        Raises:
            UnsupportedScopeError: If the harness has no MCP config at this scope.
            ConfigReadError: If the file exists but cannot be parsed.
            UnsupportedMcpConfigError: If the document has no servers section.
        """
        resource = self.mcp(scope)
        if not resource.file_exists:
            logger.debug("no %s MCP config at %s", self.kind.value, resource.file)
            return {}
        document = read_document(resource.file, resource.format)
        return self.parse_mcp_config(document)

    # Skills

    def skill_capabilities(self) -> SkillCapabilities | None:
        return SkillCapabilities.for_kind(self.kind)

    def validate_skill(self, content: str, directory_name: str) -> list[ValidationIssue]:
        return validate_skill_for_harness(content, directory_name, self.kind)
