"""CLI settings stored as JSON in the user configuration directory."""

import json
from pathlib import Path
from typing import Any

from harness_locate.documents import read_document
from harness_locate.platform import config_dir
from harness_locate.types import FileFormat

CONFIG_DIR_NAME = "harness-locate"
KNOWN_KEYS = ("default_harness", "log_level", "project_path")
DEFAULT_LOG_LEVEL = "WARNING"


def get_config_dir() -> Path:
    """Get the settings directory, ``~/.config/harness-locate/`` on Linux and macOS.

    The directory is only created when settings are saved.
    """
    return config_dir() / CONFIG_DIR_NAME


def get_config_file() -> Path:
    return get_config_dir() / "config.json"


def load_config() -> dict[str, Any]:
    """Load settings, or an empty dict when none have been saved.

    Raises:
        ConfigReadError: If the file cannot be read, is not JSON, or is not an object.
    """
    config_file = get_config_file()
    if not config_file.exists():
        return {}
    return read_document(config_file, FileFormat.JSON)


def save_config(config: dict[str, Any]) -> None:
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(config, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def get_config_value(key: str, default: Any = None) -> Any:
    return load_config().get(key, default)


def set_config_value(key: str, value: Any) -> None:
    config = load_config()
    config[key] = value
    save_config(config)


def unset_config_value(key: str) -> bool:
    """Remove a setting.

    Returns:
        True if the key was present.
    """
    config = load_config()
    if key not in config:
        return False
    del config[key]
    save_config(config)
    return True
