"""Harness adapter registry."""

from __future__ import annotations

import importlib
import pkgutil
from pathlib import Path

from harness_locate.adapters.base import HarnessAdapter
from harness_locate.errors import UnknownHarnessError
from harness_locate.types import HarnessKind

_ADAPTERS: dict[HarnessKind, HarnessAdapter] = {}
_AUTO_DISCOVERED = False


def register_adapter(adapter: HarnessAdapter) -> None:
    """Register a harness adapter."""
    _ADAPTERS[adapter.kind] = adapter


def get_adapter(harness: HarnessKind | str) -> HarnessAdapter:
    """Return the adapter for a harness kind or user-supplied harness name.

    Raises:
        UnknownHarnessError: If the name is unknown or no adapter is registered.
    """
    _ensure_auto_discovery()
    kind = harness if isinstance(harness, HarnessKind) else HarnessKind.parse(harness)
    adapter = _ADAPTERS.get(kind)
    if adapter is None:
        raise UnknownHarnessError(str(harness))
    return adapter


def list_adapters() -> list[HarnessAdapter]:
    """List registered harness adapters in HarnessKind order."""
    _ensure_auto_discovery()
    return [_ADAPTERS[kind] for kind in HarnessKind if kind in _ADAPTERS]


def _ensure_auto_discovery() -> None:
    """Ensure adapters have been auto-discovered."""
    global _AUTO_DISCOVERED
    if not _AUTO_DISCOVERED:
        _auto_discover_adapters()
        _AUTO_DISCOVERED = True


def _auto_discover_adapters() -> None:
    """Import every adapter module in this package so each registers itself."""
    adapters_dir = Path(__file__).parent

    for module_info in pkgutil.iter_modules([str(adapters_dir)]):
        module_name = module_info.name
        if module_name in ("base", "registry") or module_name.startswith("_"):
            continue
        importlib.import_module(f"harness_locate.adapters.{module_name}")
