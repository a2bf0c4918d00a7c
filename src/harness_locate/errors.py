"""harness-locate exception hierarchy.

All public exceptions inherit from HarnessLocateError, giving callers a single
base class to catch when they want to handle any library failure without
swallowing unrelated errors.
"""

from __future__ import annotations


class HarnessLocateError(Exception):
    """Base exception for all harness-locate errors."""


class HarnessNotFoundError(HarnessLocateError):
    """Raised when a harness is not installed on this system."""

    def __init__(self, harness: str) -> None:
        self.harness = harness
        super().__init__(f"harness not found: {harness}")


class UnknownHarnessError(HarnessLocateError, ValueError):
    """Raised when a harness name does not match any known harness."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown harness: {name!r}")


class UnsupportedMcpConfigError(HarnessLocateError):
    """Raised when an MCP server definition cannot be expressed for a harness.

    Covers malformed native entries, unknown or ambiguous transports, and
    features the target harness does not support.
    """

    def __init__(self, harness: str, reason: str) -> None:
        self.harness = harness
        self.reason = reason
        super().__init__(f"unsupported MCP config for {harness}: {reason}")

    def with_entry(self, name: str) -> UnsupportedMcpConfigError:
        """Return a copy whose reason names the server entry it came from."""
        return UnsupportedMcpConfigError(self.harness, f"server '{name}': {self.reason}")


class MissingEnvVarError(HarnessLocateError):
    """Raised when an environment variable must be resolved but is unset."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"environment variable not set: {name}")


class UnsupportedScopeError(HarnessLocateError):
    """Raised when a harness has no location for the requested scope."""

    def __init__(self, harness: str, scope: str) -> None:
        self.harness = harness
        self.scope = scope
        super().__init__(f"{harness} does not support {scope} scope")


class MissingFieldError(HarnessLocateError):
    """Raised when a required field is missing from the input."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"missing required field: {field}")


class FrontmatterError(HarnessLocateError):
    """Raised when descriptor frontmatter is not valid YAML."""


class ConfigReadError(HarnessLocateError):
    """Raised when a native config document cannot be read or parsed."""


class McpConfigError(HarnessLocateError):
    """Raised when a harness-neutral server document fails model validation."""
