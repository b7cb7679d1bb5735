"""Process-wide logging setup for the room service."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from hotel.utils.config import get_settings


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured_level: Optional[str] = None


def configure_logging(level: Optional[str] = None) -> str:
    """Install the stdout handler once and return the active level name.

    A later call with an explicit ``level`` only adjusts the root level; the
    handler is never installed twice.
    """

    global _configured_level
    resolved_level = (level or get_settings().log_level).upper()
    if _configured_level is None:
        logging.basicConfig(level=resolved_level, format=LOG_FORMAT, stream=sys.stdout)
        _configured_level = resolved_level
    elif level is not None and resolved_level != _configured_level:
        logging.getLogger().setLevel(resolved_level)
        _configured_level = resolved_level
    return _configured_level


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
