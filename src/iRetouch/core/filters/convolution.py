"""Multi-pass separable box blur approximating a Gaussian."""

from __future__ import annotations

import logging
import threading
from typing import Optional

import numpy as np

from ...config import MAX_BLUR_PASSES, MAX_BLUR_RADIUS
from ..pixel_buffer import PixelBuffer, require_buffer
from .jit_executor import box_blur_columns, box_blur_rows
from .utils import check_cancelled, transform_guard, writable_copy

_LOGGER = logging.getLogger(__name__)


def blur(
    buffer: PixelBuffer,
    radius: int,
    cancel: Optional[threading.Event] = None,
    *,
    max_radius: int = MAX_BLUR_RADIUS,
    max_passes: int = MAX_BLUR_PASSES,
) -> PixelBuffer:
    """Blur *buffer* with ``min(max_passes, radius)`` horizontal+vertical box passes.

    ``radius <= 0`` returns an unchanged copy.  The radius is clamped to
    *max_radius*.  Every channel, alpha included, is averaged the same way.
    Setting *cancel* aborts the blur before the next stage with
    :class:`~iRetouch.errors.OperationCancelled`; no partial frame is returned.
    """

    buffer = require_buffer(buffer)
    radius = int(radius)
    if radius <= 0:
        return buffer.copy()

    radius = min(radius, int(max_radius))
    passes = min(int(max_passes), radius)

    with transform_guard("blur"):
        source = writable_copy(buffer.view())
        # Rows read ``source`` into ``scratch``; columns read it back into ``source``.
        scratch = np.empty_like(source)
        for index in range(passes):
            check_cancelled(cancel, f"horizontal blur pass {index + 1}")
            box_blur_rows(source, scratch, radius)
            check_cancelled(cancel, f"vertical blur pass {index + 1}")
            box_blur_columns(scratch, source, radius)

        _LOGGER.debug(
            "Blurred %dx%d frame with radius %d in %d passes",
            buffer.width,
            buffer.height,
            radius,
            passes,
        )
        return PixelBuffer.from_array(source)


__all__ = ["blur"]
