"""Helpers for reading and writing harness-native MCP entries."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from harness_locate.env import EnvRef, EnvValue, Plain
from harness_locate.errors import UnsupportedMcpConfigError
from harness_locate.mcp import OAuthConfig
from harness_locate.types import HarnessKind

DEFAULT_TRANSPORTS: dict[str, str] = {"stdio": "stdio", "sse": "sse", "http": "http"}


class EntryReader:
    """Typed access to one native server entry.

    Every accessor raises UnsupportedMcpConfigError naming the harness and
    the offending field, so decoders can read fields without repeating checks.
    """

    def __init__(self, harness: HarnessKind, entry: Any) -> None:
        self.harness = harness
        if not isinstance(entry, Mapping):
            raise self.error("Server configuration must be an object")
        self.entry: Mapping[str, Any] = entry

    def error(self, reason: str) -> UnsupportedMcpConfigError:
        return UnsupportedMcpConfigError(self.harness.display_name, reason)

    def has(self, key: str) -> bool:
        return key in self.entry

    def raw(self, key: str) -> Any:
        return self.entry.get(key)

    def string(self, key: str) -> str | None:
        value = self.entry.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise self.error(f"'{key}' must be a string")
        return value

    def required_string(self, key: str) -> str:
        value = self.string(key)
        if value is None:
            raise self.error(f"Missing '{key}' field")
        return value

    def string_list(self, key: str) -> list[str]:
        value = self.entry.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise self.error(f"'{key}' must be an array")
        for idx, item in enumerate(value):
            if not isinstance(item, str):
                raise self.error(f"{key}[{idx}] must be a string")
        return list(value)

    def env_map(self, key: str) -> dict[str, Plain | EnvRef]:
        """Read a string mapping, parsing each value in the harness's env syntax."""
        value = self.entry.get(key)
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise self.error(f"'{key}' must be an object")
        result: dict[str, Plain | EnvRef] = {}
        for name, item in value.items():
            if not isinstance(item, str):
                raise self.error(f"{key}.{name} must be a string")
            result[str(name)] = EnvValue.parse(item, self.harness)
        return result

    def boolean(self, key: str, default: bool) -> bool:
        value = self.entry.get(key)
        if value is None:
            return default
        if not isinstance(value, bool):
            raise self.error(f"'{key}' must be a boolean")
        return value

    def non_negative_int(self, key: str) -> int | None:
        value = self.entry.get(key)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise self.error(f"'{key}' must be a non-negative integer")
        return value

    def transport(
        self,
        type_key: str = "type",
        types: Mapping[str, str] = DEFAULT_TRANSPORTS,
        command_key: str = "command",
        url_key: str = "url",
    ) -> str:
        """Work out which transport an entry uses.

        An explicit type tag wins. Without one, a command means stdio and a
        URL means HTTP; having both or neither is rejected.
        """
        if self.has(type_key):
            server_type = self.entry[type_key]
            if not isinstance(server_type, str):
                raise self.error(f"'{type_key}' must be a string")
            if server_type not in types:
                raise self.error(f"Unknown server type: {server_type}")
            return types[server_type]

        has_command = self.has(command_key)
        has_url = self.has(url_key)
        if has_command and has_url:
            raise self.error(
                f"Server has both '{command_key}' and '{url_key}' fields - "
                f"specify '{type_key}' to disambiguate"
            )
        if has_command:
            return "stdio"
        if has_url:
            return "http"
        raise self.error(
            f"Server has neither '{command_key}' (stdio) nor '{url_key}' (http) field"
        )


def render_values(
    values: Mapping[str, Plain | EnvRef], harness: HarnessKind, environ: Mapping[str, str]
) -> dict[str, str]:
    """Render env or header values in a harness's native syntax.

    Raises:
        MissingEnvVarError: If the harness resolves references immediately and
            one is unset.
    """
    return {key: value.render_strict(harness, environ) for key, value in values.items()}


def put_if(target: dict[str, Any], key: str, value: Any) -> None:
    """Set ``key`` only when ``value`` is not None and not an empty collection."""
    if value is None:
        return
    if isinstance(value, (dict, list)) and not value:
        return
    target[key] = value


def read_oauth(reader: EntryReader, key: str = "oauth") -> OAuthConfig | None:
    value = reader.raw(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise reader.error(f"'{key}' must be an object")
    oauth = EntryReader(reader.harness, value)
    secret = oauth.string("client_secret")
    return OAuthConfig(
        client_id=oauth.string("client_id"),
        client_secret=EnvValue.parse(secret, reader.harness) if secret is not None else None,
        scope=oauth.string("scope"),
    )


def write_oauth(
    oauth: OAuthConfig, harness: HarnessKind, environ: Mapping[str, str]
) -> dict[str, str]:
    result: dict[str, str] = {}
    put_if(result, "client_id", oauth.client_id)
    if oauth.client_secret is not None:
        result["client_secret"] = oauth.client_secret.render_strict(harness, environ)
    put_if(result, "scope", oauth.scope)
    return result
