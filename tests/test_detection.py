"""Tests for binary detection."""

from pathlib import Path
from unittest.mock import patch

from harness_locate.detection import find_binary


def test_find_binary_found() -> None:
    with patch("harness_locate.detection.shutil.which", return_value="/usr/bin/goose"):
        assert find_binary("goose") == Path("/usr/bin/goose")


def test_find_binary_missing() -> None:
    with patch("harness_locate.detection.shutil.which", return_value=None) as mock_which:
        assert find_binary("goose") is None

    mock_which.assert_called_once_with("goose")
