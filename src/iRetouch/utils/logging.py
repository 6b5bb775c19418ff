"""Logging helpers for iRetouch."""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER: Optional[logging.Logger] = None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(level: int = logging.INFO) -> logging.Logger:
    """Return the package logger, attaching a stream handler on first use.

    Modules log through ``logging.getLogger(__name__)`` so their records
    propagate to the logger configured here.
    """

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger("iRetouch")
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            _LOGGER.addHandler(handler)
        _LOGGER.setLevel(level)
    return _LOGGER
