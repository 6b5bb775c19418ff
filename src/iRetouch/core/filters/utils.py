"""Shared plumbing for the filter implementations.

Every public transform funnels its work through :func:`transform_guard` so
internal faults surface as :class:`~iRetouch.errors.TransformError` rather
than escaping as arbitrary NumPy or Numba exceptions, and checks its
cancellation flag through :func:`check_cancelled` between stages.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import numpy as np

from ...errors import (
    CorruptEntryError,
    InvalidArgumentError,
    OperationCancelled,
    TransformError,
)

_LOGGER = logging.getLogger(__name__)

_PASSTHROUGH_ERRORS = (InvalidArgumentError, OperationCancelled, CorruptEntryError, TransformError)


def check_cancelled(cancel: Optional[threading.Event], stage: str) -> None:
    """Raise :class:`OperationCancelled` when *cancel* has been set."""

    if cancel is not None and cancel.is_set():
        _LOGGER.debug("Transform cancelled before %s", stage)
        raise OperationCancelled(f"Cancelled before {stage}")


@contextmanager
def transform_guard(operation: str) -> Iterator[None]:
    """Translate unexpected exceptions raised inside the block into ``TransformError``."""

    try:
        yield
    except _PASSTHROUGH_ERRORS:
        raise
    except Exception as exc:
        _LOGGER.exception("%s failed", operation)
        raise TransformError(operation, str(exc) or type(exc).__name__) from exc


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Round *values* half-up and clamp them into the ``uint8`` range."""

    return np.clip(np.floor(values + 0.5), 0.0, 255.0).astype(np.uint8)


def writable_copy(surface: np.ndarray) -> np.ndarray:
    """Return a C-contiguous writable copy suitable for the JIT kernels."""

    return np.array(surface, dtype=np.uint8, order="C", copy=True)


__all__ = ["check_cancelled", "to_uint8", "transform_guard", "writable_copy"]
