"""Logging setup shared by the CLI and embedding hosts."""

from __future__ import annotations

import logging
import os

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> logging.Logger:
    """Configure root logging and return the ``dark_forest`` logger.

    ``level`` falls back to the ``DARK_FOREST_LOG_LEVEL`` environment
    variable, then WARNING.
    """
    raw_level = level if level is not None else os.getenv("DARK_FOREST_LOG_LEVEL")
    resolved_level = (raw_level or "WARNING").upper()
    logging.basicConfig(level=resolved_level, format=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)

    app_logger = logging.getLogger("dark_forest")
    app_logger.setLevel(resolved_level)
    app_logger.debug("logging configured at %s", resolved_level)
    return app_logger
