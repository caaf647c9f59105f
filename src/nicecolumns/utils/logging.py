"""Logging helpers for nicecolumns.

Library modules only call ``get_logger(__name__)``; records go wherever the
host application routes them. Demos call ``configure_logging()`` to see the
resolver's decisions on stderr.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "nicecolumns"

_FMT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: Optional[Union[str, int]] = None) -> None:
    """Send nicecolumns records to stderr.

    ``level`` defaults to the NICECOLUMNS_LOG_LEVEL env var, else INFO.
    Calling again only changes the level.
    """
    if level is None:
        level = os.environ.get("NICECOLUMNS_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for h in logger.handlers:
        if getattr(h, "_nicecolumns_console", False):
            h.setLevel(level)
            return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_FMT))
    console._nicecolumns_console = True  # type: ignore[attr-defined]
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger ``name``, or the package logger when name is None."""
    return logging.getLogger(name or LOGGER_NAME)
