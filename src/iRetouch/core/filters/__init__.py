"""Pixel-buffer filters for non-destructive photo editing.

The package separates concerns the same way for every operation:
- color_matrix: affine colour transforms evaluated with NumPy
- jit_executor: Numba kernels for the neighbourhood filters
- convolution / edges: stage orchestration and cancellation around the kernels
- pillow_executor: resampling through Pillow
- utils: error translation and cancellation helpers
"""

from __future__ import annotations

from .color_matrix import (
    adjust,
    apply_color_matrix,
    build_adjustment_matrix,
    grayscale,
    invert,
    sepia,
)
from .convolution import blur
from .edges import detect_edges
from .pillow_executor import fit_preview, resize

__all__ = [
    "adjust",
    "apply_color_matrix",
    "blur",
    "build_adjustment_matrix",
    "detect_edges",
    "fit_preview",
    "grayscale",
    "invert",
    "resize",
    "sepia",
]
