"""Logging helpers for img-lens."""

from __future__ import annotations

import logging
from typing import Optional

ROOT_LOGGER_NAME = "imglens"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
DATE_FORMAT = "%H:%M:%S"

_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the package logger, or a child of it for a module name."""

    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(verbosity: int = 0, level: Optional[str] = None) -> None:
    """
    Configure console logging for the command-line tool.

    verbosity counts -v flags: 0 = WARNING, 1 = INFO, 2+ = DEBUG. An explicit
    level name (e.g. from the settings file) wins when no -v was given.
    """

    resolved = _LEVELS[min(max(verbosity, 0), 2)]
    if verbosity == 0 and level:
        named = logging.getLevelName(level.strip().upper())
        if isinstance(named, int):
            resolved = named

    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
    get_logger().setLevel(resolved)
