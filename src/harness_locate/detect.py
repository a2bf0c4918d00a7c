"""Find the MCP servers a project ships, from its manifests and package metadata.

Sources are checked in priority order, and servers from explicit MCP configs
are trusted more than servers inferred from dependencies:

1. ``manifest.json``, an MCPB desktop-extension manifest (high confidence)
2. ``.mcp.json`` and ``mcp.json`` (high confidence)
3. ``package.json`` (medium confidence)
4. ``pyproject.toml`` (medium confidence)

A file that cannot be parsed is skipped with a warning; detection itself never
fails on bad project metadata.
"""

from __future__ import annotations

import logging
import re
import tomllib
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any

from harness_locate.documents import parse_document
from harness_locate.errors import ConfigReadError, McpConfigError
from harness_locate.mcp import load_server
from harness_locate.translate import AnyServer, decode_all_detailed
from harness_locate.types import FileFormat, HarnessKind

logger = logging.getLogger(__name__)

MANIFEST_FILE = "manifest.json"
MCP_JSON_FILES = (".mcp.json", "mcp.json")
PACKAGE_JSON_FILE = "package.json"
PYPROJECT_FILE = "pyproject.toml"
DETECTION_FILES = (MANIFEST_FILE, *MCP_JSON_FILES, PACKAGE_JSON_FILE, PYPROJECT_FILE)

# Manifests describe a single unnamed server.
MANIFEST_SERVER_NAME = "mcpb-server"

NPM_MCP_SCOPE = "@modelcontextprotocol/"

_MANIFEST_HTTP_TYPES = ("http", "streamable-http")
_REQUIREMENT_NAME = re.compile(r"\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


class DetectionSource(str, Enum):
    """Which file a server was found in."""

    MANIFEST = "manifest"
    MCP_JSON = "mcp-json"
    PACKAGE_JSON = "package-json"
    PYPROJECT = "pyproject"


class DetectionConfidence(IntEnum):
    """How sure detection is that a server exists; ordered low to high."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class DetectedMcp:
    """A server found in a project, with the variables it needs to run."""

    name: str
    server: AnyServer
    source: DetectionSource
    confidence: DetectionConfidence
    required_env_vars: tuple[str, ...] = ()


def _detected(
    name: str,
    server: AnyServer,
    source: DetectionSource,
    confidence: DetectionConfidence,
    extra_env_vars: Iterable[str] = (),
) -> DetectedMcp:
    names = dict.fromkeys([*server.env_var_names(), *extra_env_vars])
    return DetectedMcp(name, server, source, confidence, tuple(names))


def _json_object(content: str, filename: str) -> dict[str, Any] | None:
    try:
        return parse_document(content, FileFormat.JSON)
    except ConfigReadError as e:
        logger.warning("ignoring %s: %s", filename, e)
        return None


# manifest.json


def _required_user_config(manifest: Mapping[str, Any]) -> list[str]:
    """Ids of user settings the manifest marks as required.

    ``user_config`` may be a list of entries with an ``id`` or an object keyed by id.
    """
    entries = manifest.get("user_config") or []
    if isinstance(entries, Mapping):
        entries = [
            {**value, "id": key} for key, value in entries.items() if isinstance(value, Mapping)
        ]
    if not isinstance(entries, list):
        return []
    return [
        entry["id"]
        for entry in entries
        if isinstance(entry, Mapping) and entry.get("required") and isinstance(entry.get("id"), str)
    ]


def detect_manifest(content: str) -> DetectedMcp | None:
    """Read the server declared by an MCPB ``manifest.json``.

    Returns None if the manifest has no server of a known type.
    """
    manifest = _json_object(content, MANIFEST_FILE)
    if manifest is None:
        return None
    config = manifest.get("server")
    if not isinstance(config, Mapping):
        logger.debug("%s declares no server", MANIFEST_FILE)
        return None

    server_type = config.get("type")
    if server_type == "stdio":
        neutral = {
            "transport": "stdio",
            "command": config.get("command"),
            "args": config.get("args", []),
            "env": config.get("env", {}),
        }
    elif server_type in _MANIFEST_HTTP_TYPES:
        neutral = {"transport": "http", "url": config.get("url")}
    else:
        logger.debug("%s server type %r is not detected", MANIFEST_FILE, server_type)
        return None

    try:
        server = load_server(neutral)
    except McpConfigError as e:
        logger.warning("ignoring %s server: %s", MANIFEST_FILE, e)
        return None
    return _detected(
        MANIFEST_SERVER_NAME,
        server,
        DetectionSource.MANIFEST,
        DetectionConfidence.HIGH,
        _required_user_config(manifest),
    )


# .mcp.json


def detect_mcp_json(content: str, filename: str = ".mcp.json") -> list[DetectedMcp]:
    """Read the servers in a project MCP file.

    Both the Claude Code shape (servers under ``mcpServers``) and a bare map of
    name to entry are accepted. Entries that fail to decode are skipped.
    """
    document = _json_object(content, filename)
    if document is None:
        return []
    section = document.get("mcpServers", document)
    if not isinstance(section, Mapping):
        logger.warning("ignoring %s: 'mcpServers' is not an object", filename)
        return []

    result = decode_all_detailed({"mcpServers": section}, HarnessKind.CLAUDE_CODE)
    return [
        _detected(name, server, DetectionSource.MCP_JSON, DetectionConfidence.HIGH)
        for name, server in result.servers
    ]


# package.json


def is_npm_mcp_dependency(name: str) -> bool:
    return name.startswith(NPM_MCP_SCOPE) or name == "mcp" or name.startswith("mcp-")


def is_npm_mcp_package(name: str) -> bool:
    return name.startswith(NPM_MCP_SCOPE) or name.startswith("mcp-")


def _mapping_keys(value: Any) -> list[str]:
    return list(value) if isinstance(value, Mapping) else []


def detect_npm(content: str) -> DetectedMcp | None:
    """Infer a server from an npm package that is, or depends on, an MCP package.

    The server runs the package with ``npx -y <name>``.
    """
    package = _json_object(content, PACKAGE_JSON_FILE)
    if package is None:
        return None
    name = package.get("name")
    if not isinstance(name, str) or not name:
        return None

    dependencies = [
        *_mapping_keys(package.get("dependencies")),
        *_mapping_keys(package.get("devDependencies")),
    ]
    if not is_npm_mcp_package(name) and not any(map(is_npm_mcp_dependency, dependencies)):
        return None

    server = load_server({"transport": "stdio", "command": "npx", "args": ["-y", name]})
    return _detected(name, server, DetectionSource.PACKAGE_JSON, DetectionConfidence.MEDIUM)


# pyproject.toml


def is_python_mcp_package(name: str) -> bool:
    lowered = name.lower()
    return lowered == "mcp" or lowered.startswith("mcp-") or lowered.endswith("-mcp")


def requirement_name(requirement: str) -> str | None:
    """Return the distribution name at the start of a PEP 508 requirement."""
    match = _REQUIREMENT_NAME.match(requirement)
    return match.group(1) if match else None


def _pyproject_dependencies(document: Mapping[str, Any]) -> Iterator[str]:
    project = document.get("project")
    if isinstance(project, Mapping):
        dependencies = project.get("dependencies")
        requirements = list(dependencies) if isinstance(dependencies, list) else []
        optional = project.get("optional-dependencies")
        if isinstance(optional, Mapping):
            for group in optional.values():
                if isinstance(group, list):
                    requirements.extend(group)
        for requirement in requirements:
            if isinstance(requirement, str) and (name := requirement_name(requirement)):
                yield name

    tool = document.get("tool")
    poetry = tool.get("poetry") if isinstance(tool, Mapping) else None
    if isinstance(poetry, Mapping):
        yield from _mapping_keys(poetry.get("dependencies"))


def detect_python(content: str) -> list[DetectedMcp]:
    """Infer servers from MCP packages a ``pyproject.toml`` depends on.

    Each server runs its package as a module, ``python -m <name_with_underscores>``.
    Project dependencies, optional dependency groups and Poetry dependencies are
    all checked; a package listed twice is reported once.
    """
    try:
        document = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        logger.warning("ignoring %s: %s", PYPROJECT_FILE, e)
        return []

    names = dict.fromkeys(
        name for name in _pyproject_dependencies(document) if is_python_mcp_package(name)
    )
    return [
        _detected(
            name,
            load_server(
                {"transport": "stdio", "command": "python", "args": ["-m", name.replace("-", "_")]}
            ),
            DetectionSource.PYPROJECT,
            DetectionConfidence.MEDIUM,
        )
        for name in names
    ]


def detect_mcp_from_files(files: Mapping[str, str]) -> list[DetectedMcp]:
    """Detect servers from file contents keyed by file name.

    Results are ordered by source priority: manifest, MCP JSON files,
    ``package.json``, then ``pyproject.toml``. Unknown file names are ignored.
    """
    detected: list[DetectedMcp] = []

    if MANIFEST_FILE in files:
        found = detect_manifest(files[MANIFEST_FILE])
        if found is not None:
            detected.append(found)

    for filename in MCP_JSON_FILES:
        if filename in files:
            detected.extend(detect_mcp_json(files[filename], filename))

    if PACKAGE_JSON_FILE in files:
        found = detect_npm(files[PACKAGE_JSON_FILE])
        if found is not None:
            detected.append(found)

    if PYPROJECT_FILE in files:
        detected.extend(detect_python(files[PYPROJECT_FILE]))

    logger.debug("detected %d MCP server(s) in %s", len(detected), sorted(files))
    return detected


def detect_mcp_in_directory(root: Path) -> list[DetectedMcp]:
    """Detect servers from the known files directly under ``root``.

    Raises:
        ConfigReadError: If a present file cannot be read.
    """
    files: dict[str, str] = {}
    for filename in DETECTION_FILES:
        path = root / filename
        if not path.is_file():
            continue
        try:
            files[filename] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigReadError(f"Failed to read {path}: {e}") from e
    return detect_mcp_from_files(files)
