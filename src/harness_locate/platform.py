"""Per-OS base directory lookup."""

from __future__ import annotations

import os
import sys
from pathlib import Path


def home_dir() -> Path:
    return Path.home()


def env_dir(var_name: str) -> Path | None:
    """Return the directory named by an environment variable if it is absolute."""
    value = os.environ.get(var_name, "")
    if not value:
        return None
    path = Path(value)
    return path if path.is_absolute() else None


def config_dir() -> Path:
    """Return the user configuration directory.

    Linux honours an absolute ``XDG_CONFIG_HOME``; macOS always uses
    ``~/.config`` and Windows uses ``%APPDATA%``.
    """
    if sys.platform == "win32":
        appdata = env_dir("APPDATA")
        if appdata is not None:
            return appdata
        return home_dir() / "AppData" / "Roaming"
    if sys.platform != "darwin":
        xdg = env_dir("XDG_CONFIG_HOME")
        if xdg is not None:
            return xdg
    return home_dir() / ".config"
