"""Fixtures for CLI tests."""

import pytest

from harness_locate.cli import common


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Render rich output wide enough that table cells are not wrapped."""
    monkeypatch.setattr(common.console, "width", 200)
