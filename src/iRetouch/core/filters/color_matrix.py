"""Affine 5x5 colour-matrix transforms applied with vectorised NumPy.

Matrices follow the row-vector convention: row ``k`` holds the contribution
of input channel ``k`` (R, G, B, A) to every output channel and row 4 holds
the constant translation expressed in normalised ``[0, 1]`` units.  The
fifth column is unused and kept only so the matrices stay square.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from ..pixel_buffer import PixelBuffer, require_buffer
from .utils import to_uint8, transform_guard
from ...errors import InvalidArgumentError

_LOGGER = logging.getLogger(__name__)

LUMA_WEIGHTS = (0.3086, 0.6094, 0.0820)
"""Perceptual weights used by the saturation interpolation matrix."""

SATURATION_THRESHOLD = 0.1

# BGRA <-> RGBA channel permutation; the mapping is its own inverse.
_SWAP_RB = [2, 1, 0, 3]

GRAYSCALE_MATRIX = np.array(
    [
        [0.299, 0.299, 0.299, 0.0, 0.0],
        [0.587, 0.587, 0.587, 0.0, 0.0],
        [0.114, 0.114, 0.114, 0.0, 0.0],
        [0.0, 0.0, 0.0, 1.0, 0.0],
        [0.0, 0.0, 0.0, 0.0, 1.0],
    ],
    dtype=np.float64,
)

SEPIA_MATRIX = np.array(
    [
        [0.393, 0.349, 0.272, 0.0, 0.0],
        [0.769, 0.686, 0.534, 0.0, 0.0],
        [0.189, 0.168, 0.131, 0.0, 0.0],
        [0.0, 0.0, 0.0, 1.0, 0.0],
        [0.0, 0.0, 0.0, 0.0, 1.0],
    ],
    dtype=np.float64,
)

INVERT_MATRIX = np.array(
    [
        [-1.0, 0.0, 0.0, 0.0, 0.0],
        [0.0, -1.0, 0.0, 0.0, 0.0],
        [0.0, 0.0, -1.0, 0.0, 0.0],
        [0.0, 0.0, 0.0, 1.0, 0.0],
        [1.0, 1.0, 1.0, 0.0, 1.0],
    ],
    dtype=np.float64,
)

for _matrix in (GRAYSCALE_MATRIX, SEPIA_MATRIX, INVERT_MATRIX):
    _matrix.setflags(write=False)


def build_adjustment_matrix(brightness: float, contrast: float, saturation: float) -> np.ndarray:
    """Return the colour matrix for a brightness/contrast/saturation edit.

    When saturation is active its luminance interpolation block replaces the
    contrast diagonal instead of being multiplied with it, so contrast has no
    effect on the RGB block whenever ``abs(saturation) > 0.1``.  Brightness
    lives in the translation row and is kept in both cases.
    """

    brightness_factor = float(brightness) / 100.0
    contrast_factor = (float(contrast) + 100.0) / 100.0
    saturation_factor = (float(saturation) + 100.0) / 100.0

    matrix = np.zeros((5, 5), dtype=np.float64)
    matrix[0, 0] = contrast_factor
    matrix[1, 1] = contrast_factor
    matrix[2, 2] = contrast_factor
    matrix[3, 3] = 1.0
    matrix[4, 4] = 1.0
    matrix[4, 0:3] = brightness_factor

    if abs(float(saturation)) > SATURATION_THRESHOLD:
        complement = 1.0 - saturation_factor
        for row, weight in enumerate(LUMA_WEIGHTS):
            matrix[row, 0:3] = weight * complement
            matrix[row, row] += saturation_factor

    return matrix


def _validate_matrix(matrix: np.ndarray) -> np.ndarray:
    values = np.asarray(matrix, dtype=np.float64)
    if values.shape != (5, 5):
        raise InvalidArgumentError(f"Colour matrix must be 5x5, got shape {values.shape}")
    if not np.all(np.isfinite(values)):
        raise InvalidArgumentError("Colour matrix contains non-finite values")
    return values


def _apply_matrix_vectorized(buffer: PixelBuffer, matrix: np.ndarray) -> PixelBuffer:
    rgba = buffer.view()[..., _SWAP_RB].astype(np.float64)
    # Work in byte space so integer inputs combined with the exact offsets
    # (e.g. 127.5 for +50 brightness) round deterministically.
    transformed = rgba @ matrix[:4, :4] + matrix[4, :4] * 255.0
    result = to_uint8(transformed)[..., _SWAP_RB]
    return PixelBuffer.from_array(np.ascontiguousarray(result))


def apply_color_matrix(buffer: PixelBuffer, matrix: np.ndarray) -> PixelBuffer:
    """Apply an arbitrary 5x5 colour *matrix* and return a new buffer."""

    buffer = require_buffer(buffer)
    values = _validate_matrix(matrix)
    with transform_guard("color matrix"):
        return _apply_matrix_vectorized(buffer, values)


def adjust(buffer: PixelBuffer, brightness: float, contrast: float, saturation: float) -> PixelBuffer:
    """Apply brightness, contrast and saturation in a single matrix pass."""

    buffer = require_buffer(buffer)
    for name, value in (("brightness", brightness), ("contrast", contrast), ("saturation", saturation)):
        if not math.isfinite(float(value)):
            raise InvalidArgumentError(f"{name} must be finite, got {value!r}")
    matrix = _validate_matrix(build_adjustment_matrix(brightness, contrast, saturation))
    with transform_guard("adjust"):
        _LOGGER.debug(
            "Adjusting %dx%d frame: brightness=%s contrast=%s saturation=%s",
            buffer.width,
            buffer.height,
            brightness,
            contrast,
            saturation,
        )
        return _apply_matrix_vectorized(buffer, matrix)


def grayscale(buffer: PixelBuffer) -> PixelBuffer:
    """Return a luma-weighted grayscale copy of *buffer*."""

    buffer = require_buffer(buffer)
    with transform_guard("grayscale"):
        return _apply_matrix_vectorized(buffer, GRAYSCALE_MATRIX)


def sepia(buffer: PixelBuffer) -> PixelBuffer:
    buffer = require_buffer(buffer)
    with transform_guard("sepia"):
        return _apply_matrix_vectorized(buffer, SEPIA_MATRIX)


def invert(buffer: PixelBuffer) -> PixelBuffer:
    """Return ``255 - value`` for every colour channel; alpha is preserved."""

    buffer = require_buffer(buffer)
    with transform_guard("invert"):
        return _apply_matrix_vectorized(buffer, INVERT_MATRIX)


__all__ = [
    "GRAYSCALE_MATRIX",
    "INVERT_MATRIX",
    "LUMA_WEIGHTS",
    "SEPIA_MATRIX",
    "adjust",
    "apply_color_matrix",
    "build_adjustment_matrix",
    "grayscale",
    "invert",
    "sepia",
]
