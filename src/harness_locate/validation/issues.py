"""Validation issue records shared by MCP, skill and agent validation."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict

CODE_EMPTY_COMMAND = "stdio.command.empty"
CODE_INVALID_URL = "url.invalid"
CODE_INVALID_SCHEME = "url.scheme.invalid"
CODE_TIMEOUT_EXCESSIVE = "timeout.excessive"
CODE_SUSPICIOUS_ENV = "env.suspicious_name"
CODE_CWD_UNSUPPORTED = "harness.cwd.unsupported"
CODE_TOGGLE_UNSUPPORTED = "harness.toggle.unsupported"
CODE_SSE_DEPRECATED = "harness.transport.sse_deprecated"

CODE_SKILL_PARSE_ERROR = "skill.parse_error"
CODE_SKILL_UNSUPPORTED = "skill.unsupported"
CODE_SKILL_NAME_FORMAT = "skill.name.format"
CODE_SKILL_NAME_LENGTH = "skill.name.length"
CODE_SKILL_NAME_DIRECTORY_MISMATCH = "skill.name.directory_mismatch"
CODE_SKILL_DESCRIPTION_MISSING = "skill.description.missing"
CODE_SKILL_DESCRIPTION_LENGTH = "skill.description.length"

CODE_AGENT_PARSE_ERROR = "agent.parse_error"
CODE_AGENT_UNSUPPORTED = "agent.unsupported"
CODE_AGENT_MODE_UNSUPPORTED = "agent.mode.unsupported"
CODE_AGENT_COLOR_FORMAT = "agent.color.format"
CODE_AGENT_TOOLS_FORMAT = "agent.tools.format"
CODE_AGENT_DESCRIPTION_MISSING = "agent.description.missing"


class Severity(str, Enum):
    """How serious a validation issue is."""

    ERROR = "error"
    WARNING = "warning"


class ValidationIssue(BaseModel):
    """One problem found while validating a configuration.

    ``field`` is a dotted path into the validated object, e.g. ``env.API_KEY``.
    """

    model_config = ConfigDict(frozen=True)

    severity: Severity
    field: str
    message: str
    code: str | None = None

    @classmethod
    def error(cls, field: str, message: str, code: str | None = None) -> ValidationIssue:
        return cls(severity=Severity.ERROR, field=field, message=message, code=code)

    @classmethod
    def warning(cls, field: str, message: str, code: str | None = None) -> ValidationIssue:
        return cls(severity=Severity.WARNING, field=field, message=message, code=code)

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


def errors(issues: Iterable[ValidationIssue]) -> list[ValidationIssue]:
    """Return only the error-severity issues."""
    return [issue for issue in issues if issue.severity is Severity.ERROR]


def warnings(issues: Iterable[ValidationIssue]) -> list[ValidationIssue]:
    """Return only the warning-severity issues."""
    return [issue for issue in issues if issue.severity is Severity.WARNING]


def has_errors(issues: Iterable[ValidationIssue]) -> bool:
    return any(issue.severity is Severity.ERROR for issue in issues)
