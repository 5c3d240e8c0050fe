"""Centralised logging configuration for the ``clarity`` package.

Entry points (the Streamlit app and the scripts) call :func:`configure_logging`
once at startup. Library modules only ever call :func:`get_logger` and never
attach handlers of their own, so importing ``clarity`` stays silent until a host
application opts in.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

PACKAGE_LOGGER = "clarity"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_configured = False


def parse_level(level: int | str | None, default: int = logging.INFO) -> int:
    """Resolve ``level`` given as an int, a numeric string or a level name."""

    if isinstance(level, int):
        return level
    if isinstance(level, str):
        text = level.strip().upper()
        if text.isdigit():
            return int(text)
        numeric = logging.getLevelName(text)
        if isinstance(numeric, int):
            return numeric
    return default


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Attach a single stream handler to the package logger (idempotent)."""

    global _configured
    if _configured:
        return

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    resolved = parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, making sure the package logger has at least a NullHandler."""

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not _configured and not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
