"""Structural and capability validation for MCP servers.

Validation collects every issue it finds instead of stopping at the first
one, and never raises. Severity is advisory: callers decide whether a warning
should block anything.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import AnyUrl, TypeAdapter, ValidationError

from harness_locate.env import EnvRef, Plain
from harness_locate.mcp import (
    HttpMcpServer,
    SseMcpServer,
    StdioMcpServer,
    capabilities_for,
)
from harness_locate.types import HarnessKind
from harness_locate.validation.issues import (
    CODE_CWD_UNSUPPORTED,
    CODE_EMPTY_COMMAND,
    CODE_INVALID_SCHEME,
    CODE_INVALID_URL,
    CODE_SSE_DEPRECATED,
    CODE_SUSPICIOUS_ENV,
    CODE_TIMEOUT_EXCESSIVE,
    CODE_TOGGLE_UNSUPPORTED,
    ValidationIssue,
)

MAX_RECOMMENDED_TIMEOUT_MS = 300_000

SUSPICIOUS_ENV_PATTERNS = (
    "PASSWORD",
    "PASSWD",
    "SECRET",
    "TOKEN",
    "API_KEY",
    "PRIVATE_KEY",
    "ACCESS_KEY",
    "CREDENTIAL",
    "BEARER",
    "AUTH",
)

_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def validate_mcp_server(
    server: StdioMcpServer | SseMcpServer | HttpMcpServer,
) -> list[ValidationIssue]:
    """Run the harness-independent checks on a server."""
    issues: list[ValidationIssue] = []
    if isinstance(server, StdioMcpServer):
        if not server.command.strip():
            issues.append(
                ValidationIssue.error("command", "Command must not be empty", CODE_EMPTY_COMMAND)
            )
        issues.extend(_validate_timeout(server.timeout_ms))
        issues.extend(_validate_env_names(server.env, "env"))
        return issues

    issues.extend(_validate_url(server.url))
    issues.extend(_validate_timeout(server.timeout_ms))
    issues.extend(_validate_env_names(server.headers, "headers"))
    return issues


validate = validate_mcp_server


def validate_for_harness(
    server: StdioMcpServer | SseMcpServer | HttpMcpServer, harness: HarnessKind
) -> list[ValidationIssue]:
    """Structural checks plus what the target harness can actually express."""
    issues = validate_mcp_server(server)
    caps = capabilities_for(harness)
    name = harness.display_name

    if isinstance(server, StdioMcpServer) and server.cwd is not None and not caps.cwd:
        issues.append(
            ValidationIssue.error(
                "cwd", f"Working directory not supported by {name}", CODE_CWD_UNSUPPORTED
            )
        )
    if isinstance(server, SseMcpServer) and harness is HarnessKind.CLAUDE_CODE:
        issues.append(
            ValidationIssue.warning(
                "transport",
                f"SSE transport works but HTTP is preferred for {name}",
                CODE_SSE_DEPRECATED,
            )
        )
    if not server.enabled and not caps.toggle:
        issues.append(
            ValidationIssue.warning(
                "enabled",
                f"{name} ignores the enabled field; server will always run",
                CODE_TOGGLE_UNSUPPORTED,
            )
        )
    return issues


def _validate_url(url: str, field: str = "url") -> list[ValidationIssue]:
    try:
        parsed = _URL_ADAPTER.validate_python(url)
    except ValidationError as exc:
        reason = exc.errors()[0]["msg"]
        return [ValidationIssue.error(field, f"Invalid URL: {reason}", CODE_INVALID_URL)]

    if parsed.scheme not in ("http", "https"):
        return [
            ValidationIssue.error(
                field,
                f"URL scheme must be http or https, got '{parsed.scheme}'",
                CODE_INVALID_SCHEME,
            )
        ]
    return []


def _validate_timeout(timeout_ms: int | None, field: str = "timeout_ms") -> list[ValidationIssue]:
    if timeout_ms is None or timeout_ms <= MAX_RECOMMENDED_TIMEOUT_MS:
        return []
    return [
        ValidationIssue.warning(
            field,
            f"Timeout of {timeout_ms}ms exceeds recommended maximum of "
            f"{MAX_RECOMMENDED_TIMEOUT_MS}ms (5 minutes)",
            CODE_TIMEOUT_EXCESSIVE,
        )
    ]


def _validate_env_names(
    values: Mapping[str, Plain | EnvRef], field_prefix: str
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for key in values:
        upper = key.upper()
        if any(pattern in upper for pattern in SUSPICIOUS_ENV_PATTERNS):
            issues.append(
                ValidationIssue.warning(
                    f"{field_prefix}.{key}",
                    f"Variable name '{key}' suggests sensitive data; "
                    "consider using environment variable references",
                    CODE_SUSPICIOUS_ENV,
                )
            )
    return issues
