"""Validation of skill and agent descriptors against harness conventions.

Descriptors are markdown files with YAML frontmatter. Like MCP validation,
every check runs and all issues are returned.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from harness_locate.errors import FrontmatterError
from harness_locate.frontmatter import parse_frontmatter
from harness_locate.types import HarnessKind, ResourceKind
from harness_locate.validation.issues import (
    CODE_AGENT_COLOR_FORMAT,
    CODE_AGENT_DESCRIPTION_MISSING,
    CODE_AGENT_MODE_UNSUPPORTED,
    CODE_AGENT_PARSE_ERROR,
    CODE_AGENT_TOOLS_FORMAT,
    CODE_AGENT_UNSUPPORTED,
    CODE_SKILL_DESCRIPTION_LENGTH,
    CODE_SKILL_DESCRIPTION_MISSING,
    CODE_SKILL_NAME_DIRECTORY_MISMATCH,
    CODE_SKILL_NAME_FORMAT,
    CODE_SKILL_NAME_LENGTH,
    CODE_SKILL_PARSE_ERROR,
    CODE_SKILL_UNSUPPORTED,
    ValidationIssue,
)

SKILL_NAME_REGEX = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
SKILL_NAME_MAX_LEN = 64
SKILL_DESCRIPTION_MAX_LEN = 1024

AGENT_MODES = ("primary", "subagent", "all")
NAMED_COLORS = ("red", "blue", "green", "yellow", "purple", "orange", "pink", "cyan")
_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


@dataclass(frozen=True)
class SkillCapabilities:
    """Constraints a harness places on SKILL.md descriptors."""

    name_max_len: int = SKILL_NAME_MAX_LEN
    description_max_len: int = SKILL_DESCRIPTION_MAX_LEN
    requires_description: bool = True
    directory_must_match: bool = True

    @classmethod
    def for_kind(cls, harness: HarnessKind) -> SkillCapabilities | None:
        """Return the skill constraints, or None if the harness has no skills."""
        if harness.directory_names(ResourceKind.SKILLS) is None:
            return None
        return cls()


class ColorFormat(str, Enum):
    NAMED = "named"
    HEX = "hex"
    NONE = "none"


class ToolsFormat(str, Enum):
    LIST = "list"
    BOOLEAN_MAP = "boolean-map"


@dataclass(frozen=True)
class AgentCapabilities:
    """How a harness expects agent frontmatter to be written."""

    supports_mode: bool
    color_format: ColorFormat
    tools_format: ToolsFormat

    @classmethod
    def for_kind(cls, harness: HarnessKind) -> AgentCapabilities | None:
        """Return the agent conventions, or None if the harness has no agents."""
        return _AGENT_CAPABILITIES.get(harness)


_AGENT_CAPABILITIES: dict[HarnessKind, AgentCapabilities] = {
    HarnessKind.CLAUDE_CODE: AgentCapabilities(
        supports_mode=False, color_format=ColorFormat.NAMED, tools_format=ToolsFormat.LIST
    ),
    HarnessKind.OPENCODE: AgentCapabilities(
        supports_mode=True, color_format=ColorFormat.HEX, tools_format=ToolsFormat.BOOLEAN_MAP
    ),
    HarnessKind.COPILOT_CLI: AgentCapabilities(
        supports_mode=False, color_format=ColorFormat.NONE, tools_format=ToolsFormat.LIST
    ),
}


def validate_skill_for_harness(
    content: str, directory_name: str, harness: HarnessKind
) -> list[ValidationIssue]:
    """Validate SKILL.md content that lives in ``directory_name``."""
    caps = SkillCapabilities.for_kind(harness)
    if caps is None:
        return [
            ValidationIssue.error(
                "skill", f"{harness.display_name} does not support skills", CODE_SKILL_UNSUPPORTED
            )
        ]

    data, parse_issue = _load_frontmatter(content, "skill", CODE_SKILL_PARSE_ERROR)
    if parse_issue is not None:
        return [parse_issue]

    issues: list[ValidationIssue] = []
    name = data.get("name")
    if not isinstance(name, str) or not name:
        issues.append(
            ValidationIssue.error("name", "Skill name is required", CODE_SKILL_NAME_FORMAT)
        )
    else:
        if len(name) > caps.name_max_len:
            issues.append(
                ValidationIssue.error(
                    "name",
                    f"Skill name is {len(name)} characters; maximum is {caps.name_max_len}",
                    CODE_SKILL_NAME_LENGTH,
                )
            )
        if not SKILL_NAME_REGEX.match(name):
            issues.append(
                ValidationIssue.error(
                    "name",
                    f"Skill name '{name}' must be lowercase letters, digits and single hyphens",
                    CODE_SKILL_NAME_FORMAT,
                )
            )
        if caps.directory_must_match and name != directory_name:
            issues.append(
                ValidationIssue.error(
                    "name",
                    f"Skill name '{name}' does not match directory '{directory_name}'",
                    CODE_SKILL_NAME_DIRECTORY_MISMATCH,
                )
            )

    description = data.get("description")
    if not isinstance(description, str) or not description.strip():
        if caps.requires_description:
            issues.append(
                ValidationIssue.error(
                    "description", "Skill description is required", CODE_SKILL_DESCRIPTION_MISSING
                )
            )
    elif len(description) > caps.description_max_len:
        issues.append(
            ValidationIssue.error(
                "description",
                f"Skill description is {len(description)} characters; "
                f"maximum is {caps.description_max_len}",
                CODE_SKILL_DESCRIPTION_LENGTH,
            )
        )
    return issues


def validate_agent_for_harness(content: str, harness: HarnessKind) -> list[ValidationIssue]:
    """Validate an agent markdown file for a harness."""
    caps = AgentCapabilities.for_kind(harness)
    if caps is None:
        return [
            ValidationIssue.error(
                "agent", f"{harness.display_name} does not support agents", CODE_AGENT_UNSUPPORTED
            )
        ]

    data, parse_issue = _load_frontmatter(content, "agent", CODE_AGENT_PARSE_ERROR)
    if parse_issue is not None:
        return [parse_issue]

    issues: list[ValidationIssue] = []
    description = data.get("description")
    if not isinstance(description, str) or not description.strip():
        issues.append(
            ValidationIssue.error(
                "description", "Agent description is required", CODE_AGENT_DESCRIPTION_MISSING
            )
        )

    if "mode" in data:
        mode = data["mode"]
        if not caps.supports_mode:
            issues.append(
                ValidationIssue.warning(
                    "mode",
                    f"{harness.display_name} ignores the agent mode field",
                    CODE_AGENT_MODE_UNSUPPORTED,
                )
            )
        elif mode not in AGENT_MODES:
            issues.append(
                ValidationIssue.error(
                    "mode",
                    f"Agent mode must be one of {', '.join(AGENT_MODES)}, got {mode!r}",
                    CODE_AGENT_MODE_UNSUPPORTED,
                )
            )

    if "color" in data:
        issue = _check_color(data["color"], caps.color_format, harness)
        if issue is not None:
            issues.append(issue)

    if "tools" in data and not _tools_match(data["tools"], caps.tools_format):
        expected = (
            "a mapping of tool names to booleans"
            if caps.tools_format is ToolsFormat.BOOLEAN_MAP
            else "a list or comma-separated string of tool names"
        )
        issues.append(
            ValidationIssue.error(
                "tools",
                f"{harness.display_name} expects tools as {expected}",
                CODE_AGENT_TOOLS_FORMAT,
            )
        )
    return issues


def _load_frontmatter(
    content: str, kind: str, code: str
) -> tuple[dict[str, Any], ValidationIssue | None]:
    try:
        frontmatter = parse_frontmatter(content)
    except FrontmatterError as e:
        return {}, ValidationIssue.error("frontmatter", str(e), code)
    if frontmatter.yaml is None:
        return {}, ValidationIssue.error(
            "frontmatter", f"The {kind} file has no YAML frontmatter", code
        )
    return frontmatter.yaml, None


def _check_color(
    color: object, color_format: ColorFormat, harness: HarnessKind
) -> ValidationIssue | None:
    if color_format is ColorFormat.NONE:
        return ValidationIssue.warning(
            "color",
            f"{harness.display_name} ignores the agent color field",
            CODE_AGENT_COLOR_FORMAT,
        )
    if color_format is ColorFormat.HEX:
        if isinstance(color, str) and _HEX_COLOR.match(color):
            return None
        return ValidationIssue.error(
            "color",
            f"Agent color must be a hex value like #ff8800, got {color!r}",
            CODE_AGENT_COLOR_FORMAT,
        )
    if isinstance(color, str) and color.lower() in NAMED_COLORS:
        return None
    return ValidationIssue.error(
        "color",
        f"Agent color must be one of {', '.join(NAMED_COLORS)}, got {color!r}",
        CODE_AGENT_COLOR_FORMAT,
    )


def _tools_match(tools: object, tools_format: ToolsFormat) -> bool:
    if tools_format is ToolsFormat.BOOLEAN_MAP:
        return isinstance(tools, dict) and all(
            isinstance(key, str) and isinstance(value, bool) for key, value in tools.items()
        )
    if isinstance(tools, str):
        return True
    return isinstance(tools, list) and all(isinstance(tool, str) for tool in tools)
