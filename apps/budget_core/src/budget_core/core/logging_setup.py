"""Logging configuration for the ``budget_core`` package.

Entrypoints (the API factory and the CLI) call ``configure_logging`` once at
startup. Library modules only use ``logging.getLogger(__name__)`` and never
attach handlers themselves.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

_PKG_LOGGER_NAME = "budget_core"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_configured = False


def _parse_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    level = level.strip().upper()
    if level.isdigit():
        return int(level)
    numeric = getattr(logging, level, None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def configure_logging(
    level: int | str = logging.INFO,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Attach a single stream handler to the package logger.

    Repeated calls only update the level.
    """

    global _configured
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    logger.setLevel(_parse_level(level))
    if _configured:
        return

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))
    logger.addHandler(handler)
    _configured = True
