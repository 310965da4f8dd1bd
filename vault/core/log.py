"""Logging setup shared by the app and the scripts."""

from __future__ import annotations

import logging

from .config import get_settings

LOG_FORMAT = "[%(name)s] %(levelname)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once, using LOG_LEVEL when no level is given."""
    value = (level or get_settings().log_level or "INFO").upper()
    logging.basicConfig(level=getattr(logging, value, logging.INFO), format=LOG_FORMAT)
