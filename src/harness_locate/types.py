"""Core type definitions for harness path resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

from harness_locate.errors import UnknownHarnessError

ScopeKind = Literal["global", "project", "custom"]


class ResourceKind(str, Enum):
    """Kinds of directory resources a harness may keep."""

    SKILLS = "skills"
    COMMANDS = "commands"
    AGENTS = "agents"
    PLUGINS = "plugins"


class HarnessKind(str, Enum):
    """Supported AI coding-assistant harnesses."""

    CLAUDE_CODE = "claude-code"
    OPENCODE = "opencode"
    GOOSE = "goose"
    AMP_CODE = "amp-code"
    COPILOT_CLI = "copilot-cli"
    CRUSH = "crush"

    @property
    def display_name(self) -> str:
        """Human-friendly harness name."""
        return _DISPLAY_NAMES[self]

    @property
    def binary_names(self) -> tuple[str, ...]:
        """Executable names that indicate the harness is installed."""
        return _BINARY_NAMES[self]

    def directory_names(self, resource: ResourceKind) -> tuple[str, ...] | None:
        """Return directory names used for a resource, or None if unsupported."""
        return _DIRECTORY_NAMES.get((self, resource))

    @classmethod
    def parse(cls, name: str) -> HarnessKind:
        """Normalize a user-supplied harness name to a HarnessKind."""
        lower_name = name.strip().lower().replace("_", "-").replace(" ", "-")
        if lower_name in HARNESS_ALIASES:
            return HARNESS_ALIASES[lower_name]
        for kind in cls:
            if lower_name == kind.value:
                return kind
        raise UnknownHarnessError(name)


ALL_HARNESSES: tuple[HarnessKind, ...] = tuple(HarnessKind)

_DISPLAY_NAMES: dict[HarnessKind, str] = {
    HarnessKind.CLAUDE_CODE: "Claude Code",
    HarnessKind.OPENCODE: "OpenCode",
    HarnessKind.GOOSE: "Goose",
    HarnessKind.AMP_CODE: "AMP Code",
    HarnessKind.COPILOT_CLI: "Copilot CLI",
    HarnessKind.CRUSH: "Crush",
}

_BINARY_NAMES: dict[HarnessKind, tuple[str, ...]] = {
    HarnessKind.CLAUDE_CODE: ("claude",),
    HarnessKind.OPENCODE: ("opencode",),
    HarnessKind.GOOSE: ("goose",),
    HarnessKind.AMP_CODE: ("amp",),
    HarnessKind.COPILOT_CLI: ("copilot",),
    HarnessKind.CRUSH: ("crush",),
}

# OpenCode uses singular directory names, everyone else plural.
_DIRECTORY_NAMES: dict[tuple[HarnessKind, ResourceKind], tuple[str, ...]] = {
    (HarnessKind.OPENCODE, ResourceKind.SKILLS): ("skill",),
    (HarnessKind.OPENCODE, ResourceKind.COMMANDS): ("command",),
    (HarnessKind.OPENCODE, ResourceKind.AGENTS): ("agent",),
    (HarnessKind.OPENCODE, ResourceKind.PLUGINS): ("plugin",),
    (HarnessKind.CLAUDE_CODE, ResourceKind.SKILLS): ("skills",),
    (HarnessKind.CLAUDE_CODE, ResourceKind.COMMANDS): ("commands",),
    (HarnessKind.CLAUDE_CODE, ResourceKind.AGENTS): ("agents",),
    (HarnessKind.CLAUDE_CODE, ResourceKind.PLUGINS): ("plugins",),
    (HarnessKind.GOOSE, ResourceKind.SKILLS): ("skills",),
    (HarnessKind.AMP_CODE, ResourceKind.SKILLS): ("skills",),
    (HarnessKind.AMP_CODE, ResourceKind.COMMANDS): ("commands",),
    (HarnessKind.COPILOT_CLI, ResourceKind.SKILLS): ("skills",),
    (HarnessKind.COPILOT_CLI, ResourceKind.AGENTS): ("agents",),
    (HarnessKind.CRUSH, ResourceKind.SKILLS): ("skills",),
}

HARNESS_ALIASES: dict[str, HarnessKind] = {
    "claude": HarnessKind.CLAUDE_CODE,
    "claudecode": HarnessKind.CLAUDE_CODE,
    "open-code": HarnessKind.OPENCODE,
    "amp": HarnessKind.AMP_CODE,
    "ampcode": HarnessKind.AMP_CODE,
    "copilot": HarnessKind.COPILOT_CLI,
    "github-copilot": HarnessKind.COPILOT_CLI,
    "copilotcli": HarnessKind.COPILOT_CLI,
}


@dataclass(frozen=True)
class Scope:
    """Where to look for harness resources.

    ``global`` is the user-wide location, ``project`` is relative to a project
    root, and ``custom`` points at an explicitly supplied directory.
    """

    kind: ScopeKind
    path: Path | None = None

    @classmethod
    def global_(cls) -> Scope:
        return cls("global")

    @classmethod
    def project(cls, root: Path | str) -> Scope:
        return cls("project", Path(root).expanduser())

    @classmethod
    def custom(cls, path: Path | str) -> Scope:
        return cls("custom", Path(path).expanduser())

    @property
    def root(self) -> Path:
        """Directory carried by project and custom scopes."""
        if self.path is None:
            raise ValueError(f"{self.kind} scope has no path")
        return self.path


class FileFormat(str, Enum):
    """On-disk format of a harness resource."""

    JSON = "json"
    JSONC = "jsonc"
    YAML = "yaml"
    MARKDOWN = "markdown"
    MARKDOWN_WITH_FRONTMATTER = "markdown-with-frontmatter"


@dataclass(frozen=True)
class DirectoryStructure:
    """How files are laid out inside a resource directory.

    Flat directories hold files matching ``file_pattern`` directly. Nested
    directories hold one subdirectory per item, each containing ``file_name``.
    """

    kind: Literal["flat", "nested"]
    file_pattern: str | None = None
    subdir_pattern: str | None = None
    file_name: str | None = None

    @classmethod
    def flat(cls, file_pattern: str) -> DirectoryStructure:
        return cls("flat", file_pattern=file_pattern)

    @classmethod
    def nested(cls, subdir_pattern: str, file_name: str) -> DirectoryStructure:
        return cls("nested", subdir_pattern=subdir_pattern, file_name=file_name)


@dataclass(frozen=True)
class DirectoryResource:
    """A resolved resource directory."""

    path: Path
    exists: bool
    structure: DirectoryStructure
    file_format: FileFormat


@dataclass(frozen=True)
class ConfigResource:
    """A resolved config file and the JSON pointer where MCP servers live."""

    file: Path
    file_exists: bool
    key_path: str
    format: FileFormat


@dataclass(frozen=True)
class InstallationStatus:
    """What was found for a harness on this system."""

    binary_path: Path | None = None
    config_path: Path | None = None

    @property
    def state(self) -> Literal["not-installed", "config-only", "binary-only", "installed"]:
        if self.binary_path and self.config_path:
            return "installed"
        if self.binary_path:
            return "binary-only"
        if self.config_path:
            return "config-only"
        return "not-installed"

    @property
    def is_runnable(self) -> bool:
        """True when a binary was found."""
        return self.binary_path is not None
