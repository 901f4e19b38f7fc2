"""Process-wide logging setup.

The CLI calls ``setup_logging()`` once at startup; library modules only ask
for a logger. ``LOG_LEVEL`` picks the level (INFO when unset). At DEBUG the
format adds timestamps and call sites, and SQLAlchemy's engine log is let
through as well.
"""

from __future__ import annotations

import logging
import os
import sys

_VERBOSE_FORMAT = "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s"
_SHORT_FORMAT = "%(levelname).1s %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Install a single stderr handler on the root logger."""
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    debug = numeric_level <= logging.DEBUG
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter(_VERBOSE_FORMAT if debug else _SHORT_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if debug else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["get_logger", "setup_logging"]
