"""Environment-aware string values used in MCP server env maps and headers.

A value is either a literal (``Plain``) or a named reference into the process
environment (``EnvRef``). Each harness spells references differently:

- Claude Code, AMP Code, Copilot CLI and Crush: ``${NAME}``
- OpenCode: ``{env:NAME}``
- Goose: no template syntax; references are resolved when the config is written

The harness-neutral JSON form is untagged: a bare string is ``Plain`` and a
one-key object ``{"env": NAME}`` is ``EnvRef``.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, RootModel

from harness_locate.errors import MissingEnvVarError
from harness_locate.types import HarnessKind

_ENV_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# (prefix, suffix) per harness; None means references are resolved immediately.
_TEMPLATE_SYNTAX: dict[HarnessKind, tuple[str, str] | None] = {
    HarnessKind.CLAUDE_CODE: ("${", "}"),
    HarnessKind.AMP_CODE: ("${", "}"),
    HarnessKind.COPILOT_CLI: ("${", "}"),
    HarnessKind.CRUSH: ("${", "}"),
    HarnessKind.OPENCODE: ("{env:", "}"),
    HarnessKind.GOOSE: None,
}


def _environ(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


class EnvValue:
    """Behaviour shared by ``Plain`` and ``EnvRef``."""

    @staticmethod
    def plain(value: str) -> Plain:
        return Plain(value)

    @staticmethod
    def from_env(name: str) -> EnvRef:
        return EnvRef(env=name)

    @staticmethod
    def parse(value: str, harness: HarnessKind) -> Plain | EnvRef:
        """Parse a harness-native string back into a value.

        Goose has no inline reference syntax, so its strings are always plain.
        """
        syntax = _TEMPLATE_SYNTAX[harness]
        if syntax is None:
            return Plain(value)

        prefix, suffix = syntax
        if harness is HarnessKind.CRUSH:
            value_stripped = value.strip()
            name = _strip_template(value_stripped, prefix, suffix)
            if name is None and value_stripped.startswith("$"):
                name = value_stripped[1:]
            if name is not None and _ENV_NAME_PATTERN.match(name):
                return EnvRef(env=name)
            return Plain(value)

        name = _strip_template(value, prefix, suffix)
        if name:
            return EnvRef(env=name)
        return Plain(value)

    @property
    def is_plain(self) -> bool:
        return isinstance(self, Plain)

    @property
    def is_env_ref(self) -> bool:
        return isinstance(self, EnvRef)

    def render(self, harness: HarnessKind, environ: Mapping[str, str] | None = None) -> str:
        """Render for a harness, resolving Goose references to ``""`` when unset."""
        raise NotImplementedError

    def render_strict(
        self, harness: HarnessKind, environ: Mapping[str, str] | None = None
    ) -> str:
        """Render for a harness, failing when Goose needs an unset variable."""
        raise NotImplementedError

    def resolve(self, environ: Mapping[str, str] | None = None) -> str | None:
        """Return the effective value, or None for an unset reference."""
        raise NotImplementedError


def _strip_template(value: str, prefix: str, suffix: str) -> str | None:
    if (
        value.startswith(prefix)
        and value.endswith(suffix)
        and len(value) >= len(prefix) + len(suffix)
    ):
        return value[len(prefix) : len(value) - len(suffix)]
    return None


class Plain(EnvValue, RootModel[str]):
    """A literal string value."""

    model_config = ConfigDict(frozen=True)

    @property
    def value(self) -> str:
        return self.root

    def render(self, harness: HarnessKind, environ: Mapping[str, str] | None = None) -> str:
        return self.root

    def render_strict(
        self, harness: HarnessKind, environ: Mapping[str, str] | None = None
    ) -> str:
        return self.root

    def resolve(self, environ: Mapping[str, str] | None = None) -> str | None:
        return self.root


class EnvRef(EnvValue, BaseModel):
    """A reference to a named environment variable."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    env: str

    @property
    def name(self) -> str:
        return self.env

    def render(self, harness: HarnessKind, environ: Mapping[str, str] | None = None) -> str:
        syntax = _TEMPLATE_SYNTAX[harness]
        if syntax is None:
            return _environ(environ).get(self.env, "")
        prefix, suffix = syntax
        return f"{prefix}{self.env}{suffix}"

    def render_strict(
        self, harness: HarnessKind, environ: Mapping[str, str] | None = None
    ) -> str:
        if _TEMPLATE_SYNTAX[harness] is None:
            resolved = self.resolve(environ)
            if resolved is None:
                raise MissingEnvVarError(self.env)
            return resolved
        return self.render(harness, environ)

    def resolve(self, environ: Mapping[str, str] | None = None) -> str | None:
        return _environ(environ).get(self.env)
