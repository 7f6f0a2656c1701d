# vme/common/logging.py
from __future__ import annotations

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str = "vme", level: Optional[int] = None) -> logging.Logger:
    """
    Return a logger under the `vme` namespace.
    If no handlers are set, we add a basicConfig once (stderr, so console
    reports on stdout stay clean).
    """
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and not logger.handlers:
        logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    if level is not None:
        logger.setLevel(level)
    return logger


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Set the level for the whole `vme` logger tree (CLI entry point)."""
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO
    return get_logger("vme", level=level)
