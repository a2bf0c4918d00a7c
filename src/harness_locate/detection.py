"""Binary detection on PATH."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def find_binary(name: str) -> Path | None:
    """Return the full path of an executable on PATH, or None."""
    found = shutil.which(name)
    if found is None:
        logger.debug("binary %s not found on PATH", name)
        return None
    return Path(found)
