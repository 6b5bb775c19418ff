"""Sobel edge detection on top of the grayscale colour matrix."""

from __future__ import annotations

import threading
from typing import Optional

import numpy as np

from ..pixel_buffer import PixelBuffer, require_buffer
from .color_matrix import grayscale
from .jit_executor import sobel_magnitude
from .utils import check_cancelled, transform_guard, writable_copy


def detect_edges(buffer: PixelBuffer, cancel: Optional[threading.Event] = None) -> PixelBuffer:
    """Return the Sobel gradient magnitude of *buffer* as an opaque gray frame.

    Interior pixels carry the magnitude in B, G and R with alpha 255.  The
    one-pixel border is not computed and stays zero (transparent black);
    frames narrower or shorter than three pixels are therefore all zero.
    """

    buffer = require_buffer(buffer)
    check_cancelled(cancel, "grayscale conversion")
    gray = grayscale(buffer)
    check_cancelled(cancel, "gradient computation")

    with transform_guard("detect edges"):
        source = writable_copy(gray.view())
        target = np.zeros_like(source)
        sobel_magnitude(source, target)
        return PixelBuffer.from_array(target)


__all__ = ["detect_edges"]
