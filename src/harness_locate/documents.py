"""Reading native config documents (JSON, JSONC, YAML)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from harness_locate.errors import ConfigReadError
from harness_locate.types import FileFormat

logger = logging.getLogger(__name__)


def strip_json_comments(content: str) -> str:
    """Strip ``//`` line comments that appear outside of JSON strings."""
    cleaned_lines = []
    for line in content.split("\n"):
        if "//" in line:
            comment_idx = _comment_index(line)
            if comment_idx is not None:
                line = line[:comment_idx]
        cleaned_lines.append(line)
    return "\n".join(cleaned_lines)


def _comment_index(line: str) -> int | None:
    in_string = False
    escaped = False
    for idx, char in enumerate(line):
        if escaped:
            escaped = False
        elif char == "\\" and in_string:
            escaped = True
        elif char == '"':
            in_string = not in_string
        elif not in_string and line.startswith("//", idx):
            return idx
    return None


def parse_document(content: str, file_format: FileFormat) -> dict[str, Any]:
    """Parse native config text into a mapping.

    An empty YAML document parses to an empty mapping.

    Raises:
        ConfigReadError: If the text is not valid for its format or is not a mapping.
    """
    try:
        if file_format is FileFormat.YAML:
            data = yaml.safe_load(content)
            if data is None:
                data = {}
        elif file_format is FileFormat.JSONC:
            data = json.loads(strip_json_comments(content))
        else:
            data = json.loads(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigReadError(f"Invalid {file_format.value} document: {e}") from e

    if not isinstance(data, dict):
        raise ConfigReadError(f"Expected a {file_format.value} object at the top level")
    return data


def read_document(path: Path, file_format: FileFormat | None = None) -> dict[str, Any]:
    """Read and parse a config file, inferring the format from its suffix if needed.

    Raises:
        ConfigReadError: If the file cannot be read or parsed.
    """
    if file_format is None:
        file_format = format_for_path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigReadError(f"Failed to read {path}: {e}") from e

    logger.info("loading %s config from %s", file_format.value, path)
    try:
        return parse_document(content, file_format)
    except ConfigReadError as e:
        raise ConfigReadError(f"{path}: {e}") from e


def format_for_path(path: Path) -> FileFormat:
    """Guess a document format from a file suffix."""
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return FileFormat.YAML
    if suffix == ".jsonc":
        return FileFormat.JSONC
    return FileFormat.JSON


def dump_document(data: dict[str, Any], file_format: FileFormat) -> str:
    """Serialize a native document for writing."""
    if file_format is FileFormat.YAML:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2) + "\n"
