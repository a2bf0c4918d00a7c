"""Harness adapters: per-harness path layout and native MCP codec."""

from harness_locate.adapters.base import HarnessAdapter
from harness_locate.adapters.registry import get_adapter, list_adapters, register_adapter

__all__ = ["HarnessAdapter", "get_adapter", "list_adapters", "register_adapter"]
