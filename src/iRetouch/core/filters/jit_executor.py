"""Numba-compiled kernels for the neighbourhood filters.

The kernels operate on ``height x width x 4`` ``uint8`` arrays.  Each one
reads from a source array that no other worker writes to and fills a separate
destination array, so the ``prange`` partitions (rows or columns) never
observe each other's in-progress output.
"""

from __future__ import annotations

import math

import numpy as np
from numba import jit, prange


@jit(nopython=True, cache=True, parallel=True)
def box_blur_rows(source: np.ndarray, target: np.ndarray, radius: int) -> None:
    """Horizontal box average of every row of *source* into *target*.

    The window is clamped to the frame, so edge pixels are divided by the
    number of samples that actually exist rather than ``2 * radius + 1``.
    """

    height = source.shape[0]
    width = source.shape[1]
    channels = source.shape[2]
    for y in prange(height):
        for x in range(width):
            start = max(0, x - radius)
            stop = min(width - 1, x + radius)
            count = stop - start + 1
            for c in range(channels):
                total = 0
                for i in range(start, stop + 1):
                    total += source[y, i, c]
                target[y, x, c] = total // count


@jit(nopython=True, cache=True, parallel=True)
def box_blur_columns(source: np.ndarray, target: np.ndarray, radius: int) -> None:
    """Vertical counterpart of :func:`box_blur_rows`, partitioned by column."""

    height = source.shape[0]
    width = source.shape[1]
    channels = source.shape[2]
    for x in prange(width):
        for y in range(height):
            start = max(0, y - radius)
            stop = min(height - 1, y + radius)
            count = stop - start + 1
            for c in range(channels):
                total = 0
                for i in range(start, stop + 1):
                    total += source[i, x, c]
                target[y, x, c] = total // count


@jit(nopython=True, cache=True, parallel=True)
def sobel_magnitude(gray: np.ndarray, target: np.ndarray) -> None:
    """Write the Sobel gradient magnitude of *gray* into *target*.

    *gray* is a BGRA frame whose colour channels are equal; the blue channel
    is sampled.  Only interior pixels are written, the one-pixel border of
    *target* keeps whatever the caller initialised it with.
    """

    height = gray.shape[0]
    width = gray.shape[1]
    for y in prange(1, height - 1):
        for x in range(1, width - 1):
            p00 = np.int64(gray[y - 1, x - 1, 0])
            p01 = np.int64(gray[y - 1, x, 0])
            p02 = np.int64(gray[y - 1, x + 1, 0])
            p10 = np.int64(gray[y, x - 1, 0])
            p12 = np.int64(gray[y, x + 1, 0])
            p20 = np.int64(gray[y + 1, x - 1, 0])
            p21 = np.int64(gray[y + 1, x, 0])
            p22 = np.int64(gray[y + 1, x + 1, 0])

            gx = -p00 + p02 - 2 * p10 + 2 * p12 - p20 + p22
            gy = -p00 - 2 * p01 - p02 + p20 + 2 * p21 + p22

            magnitude = int(math.floor(math.sqrt(float(gx * gx + gy * gy)) + 0.5))
            if magnitude > 255:
                magnitude = 255
            elif magnitude < 0:
                magnitude = 0

            target[y, x, 0] = magnitude
            target[y, x, 1] = magnitude
            target[y, x, 2] = magnitude
            target[y, x, 3] = 255


__all__ = ["box_blur_columns", "box_blur_rows", "sobel_magnitude"]
