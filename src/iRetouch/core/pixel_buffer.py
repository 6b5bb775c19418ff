"""Immutable BGRA frame container shared by every transform.

A :class:`PixelBuffer` owns a contiguous byte sequence laid out row by row.
Each row holds ``width`` pixels of four bytes in B, G, R, A order followed by
optional padding up to ``stride`` bytes, which matches the memory layout of
32-bit ARGB framebuffers on little-endian machines.  Transforms never touch
the bytes in place: they read through :meth:`PixelBuffer.view` and hand a new
array to :meth:`PixelBuffer.from_array`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from ..errors import InvalidArgumentError

BYTES_PER_PIXEL = 4

BLUE, GREEN, RED, ALPHA = 0, 1, 2, 3
"""Channel offsets inside a single BGRA pixel."""


@dataclass(frozen=True)
class PixelBuffer:
    """A raw 32-bit BGRA frame."""

    width: int
    height: int
    stride: int
    pixels: bytes

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidArgumentError(
                f"Buffer dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.stride < self.width * BYTES_PER_PIXEL:
            raise InvalidArgumentError(
                f"Stride {self.stride} is smaller than a row of {self.width} pixels"
            )
        if not isinstance(self.pixels, bytes):
            # Accept bytearray/memoryview input but keep the stored copy immutable.
            object.__setattr__(self, "pixels", bytes(self.pixels))
        expected = self.stride * self.height
        if len(self.pixels) != expected:
            raise InvalidArgumentError(
                f"Expected {expected} bytes for a {self.width}x{self.height} frame "
                f"with stride {self.stride}, got {len(self.pixels)}"
            )

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def blank(
        cls,
        width: int,
        height: int,
        fill: tuple[int, int, int, int] = (0, 0, 0, 0),
    ) -> "PixelBuffer":
        """Return a compact buffer where every pixel equals the BGRA tuple *fill*."""

        if width <= 0 or height <= 0:
            raise InvalidArgumentError(f"Buffer dimensions must be positive, got {width}x{height}")
        surface = np.empty((height, width, BYTES_PER_PIXEL), dtype=np.uint8)
        surface[...] = np.asarray(fill, dtype=np.uint8)
        return cls.from_array(surface)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Wrap a ``height x width x 4`` ``uint8`` array as a compact buffer."""

        if array.ndim != 3 or array.shape[2] != BYTES_PER_PIXEL:
            raise InvalidArgumentError(f"Expected an HxWx4 array, got shape {array.shape}")
        if array.dtype != np.uint8:
            raise InvalidArgumentError(f"Expected a uint8 array, got {array.dtype}")
        height, width = int(array.shape[0]), int(array.shape[1])
        data = np.ascontiguousarray(array).tobytes()
        return cls(width, height, width * BYTES_PER_PIXEL, data)

    @classmethod
    def from_image(cls, image: Any) -> "PixelBuffer":
        """Convert a Pillow image into a compact BGRA buffer."""

        if image.mode != "RGBA":
            image = image.convert("RGBA")
        width, height = image.size
        data = image.tobytes("raw", "BGRA")
        return cls(width, height, width * BYTES_PER_PIXEL, data)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def view(self) -> np.ndarray:
        """Return a read-only ``height x width x 4`` view over the visible pixels.

        Row padding is sliced away; the view shares memory with ``pixels``.
        """

        flat = np.frombuffer(self.pixels, dtype=np.uint8, count=self.stride * self.height)
        surface = flat.reshape((self.height, self.stride))
        return surface[:, : self.width * BYTES_PER_PIXEL].reshape(
            (self.height, self.width, BYTES_PER_PIXEL)
        )

    def to_array(self) -> np.ndarray:
        """Return a writable, C-contiguous copy of the visible pixels."""

        return np.array(self.view(), dtype=np.uint8, order="C", copy=True)

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the BGRA tuple at ``(x, y)``."""

        if not (0 <= x < self.width and 0 <= y < self.height):
            raise InvalidArgumentError(f"Pixel ({x}, {y}) is outside a {self.width}x{self.height} frame")
        offset = y * self.stride + x * BYTES_PER_PIXEL
        b, g, r, a = self.pixels[offset : offset + BYTES_PER_PIXEL]
        return b, g, r, a

    def copy(self) -> "PixelBuffer":
        """Return an independent buffer with identical layout and content."""

        return PixelBuffer(self.width, self.height, self.stride, bytes(self.pixels))

    def compact(self) -> "PixelBuffer":
        """Return the same frame with ``stride == width * 4``."""

        if self.stride == self.width * BYTES_PER_PIXEL:
            return self
        return PixelBuffer.from_array(self.view())

    def to_image(self) -> Any:
        """Return the frame as a Pillow ``RGBA`` image."""

        from PIL import Image

        return Image.frombuffer(
            "RGBA",
            (self.width, self.height),
            self.pixels,
            "raw",
            "BGRA",
            self.stride,
            1,
        ).copy()


def require_buffer(buffer: Any) -> PixelBuffer:
    """Return *buffer* when it is a :class:`PixelBuffer`, else raise."""

    if not isinstance(buffer, PixelBuffer):
        raise InvalidArgumentError(f"Expected PixelBuffer, got {type(buffer).__name__}")
    return buffer


__all__ = [
    "ALPHA",
    "BLUE",
    "BYTES_PER_PIXEL",
    "GREEN",
    "PixelBuffer",
    "RED",
    "require_buffer",
]
