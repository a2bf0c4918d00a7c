"""Tests for per-OS base directory lookup."""

import sys
from pathlib import Path

import pytest

from harness_locate.platform import config_dir, env_dir, home_dir


def test_home_dir(home: Path) -> None:
    assert home_dir() == home


def test_env_dir_requires_absolute_path(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HL_TEST_DIR", str(tmp_path))
    assert env_dir("HL_TEST_DIR") == tmp_path

    monkeypatch.setenv("HL_TEST_DIR", "relative/dir")
    assert env_dir("HL_TEST_DIR") is None

    monkeypatch.setenv("HL_TEST_DIR", "")
    assert env_dir("HL_TEST_DIR") is None

    monkeypatch.delenv("HL_TEST_DIR")
    assert env_dir("HL_TEST_DIR") is None


def test_config_dir_linux(home: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    assert config_dir() == home / ".config"

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    assert config_dir() == tmp_path / "xdg"


def test_config_dir_macos_ignores_xdg(
    home: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr(sys, "platform", "darwin")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

    assert config_dir() == home / ".config"


def test_config_dir_windows(home: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(sys, "platform", "win32")
    assert config_dir() == home / "AppData" / "Roaming"

    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    assert config_dir() == tmp_path / "appdata"
