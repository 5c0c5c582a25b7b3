"""Logging wrapper for kvstorage.

The level comes from the caller, else from ``KVSTORAGE_LOG_LEVEL``, else INFO.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

_LEVEL_ENV = "KVSTORAGE_LOG_LEVEL"


def _resolve_level(level: Optional[Union[int, str]]) -> int:
    if level is None:
        level = os.getenv(_LEVEL_ENV, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    # getLevelName returns "Level X" for unknown names
    return resolved if isinstance(resolved, int) else logging.INFO


def get_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Return a configured logger with the given name.

    Logging format:  [LEVEL]  logger_name — message

    Parameters
    ----------
    name : str
        Typically __name__ of the calling module.
    level : int | str | None
        Logging level or level name. ``None`` reads ``KVSTORAGE_LOG_LEVEL``
        and falls back to INFO.

    Returns
    -------
    logging.Logger
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s  [%(levelname)s]  %(name)s — %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.propagate = False

    logger.setLevel(_resolve_level(level))
    return logger
