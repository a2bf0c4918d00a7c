"""Issue-collecting validation for MCP servers, skills and agents."""

from harness_locate.validation.issues import (
    Severity,
    ValidationIssue,
    errors,
    has_errors,
    warnings,
)
from harness_locate.validation.mcp import validate, validate_for_harness, validate_mcp_server
from harness_locate.validation.skill import (
    AgentCapabilities,
    ColorFormat,
    SkillCapabilities,
    ToolsFormat,
    validate_agent_for_harness,
    validate_skill_for_harness,
)

__all__ = [
    "AgentCapabilities",
    "ColorFormat",
    "Severity",
    "SkillCapabilities",
    "ToolsFormat",
    "ValidationIssue",
    "errors",
    "has_errors",
    "validate",
    "validate_agent_for_harness",
    "validate_for_harness",
    "validate_mcp_server",
    "validate_skill_for_harness",
    "warnings",
]
