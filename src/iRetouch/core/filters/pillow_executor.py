"""Pillow-backed resampling for aspect-preserving resize."""

from __future__ import annotations

import logging
import math
import threading
from typing import Optional

from PIL import Image

from ...config import EngineSettings
from ...errors import InvalidArgumentError
from ..pixel_buffer import PixelBuffer, require_buffer
from .utils import check_cancelled, transform_guard

_LOGGER = logging.getLogger(__name__)


def scaled_size(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Return the largest size that fits ``max_width x max_height`` at the same aspect ratio."""

    if max_width <= 0 or max_height <= 0:
        raise InvalidArgumentError(f"Resize limits must be positive, got {max_width}x{max_height}")
    scale = min(max_width / width, max_height / height)
    new_width = int(math.floor(width * scale))
    new_height = int(math.floor(height * scale))
    if new_width <= 0 or new_height <= 0:
        raise InvalidArgumentError(
            f"Resizing {width}x{height} into {max_width}x{max_height} collapses a dimension"
        )
    return new_width, new_height


def resize(
    buffer: PixelBuffer,
    max_width: int,
    max_height: int,
    cancel: Optional[threading.Event] = None,
) -> PixelBuffer:
    """Scale *buffer* to fit inside ``max_width x max_height`` using bicubic resampling.

    The aspect ratio is preserved; the result is never padded or cropped and
    may be larger than the input when both limits exceed it.
    """

    buffer = require_buffer(buffer)
    new_size = scaled_size(buffer.width, buffer.height, int(max_width), int(max_height))
    check_cancelled(cancel, "resize")

    with transform_guard("resize"):
        image = buffer.to_image()
        resized = image.resize(new_size, Image.Resampling.BICUBIC)
        _LOGGER.debug("Resized %dx%d frame to %dx%d", buffer.width, buffer.height, *new_size)
        return PixelBuffer.from_image(resized)


def fit_preview(
    buffer: PixelBuffer,
    max_size: Optional[int] = None,
    cancel: Optional[threading.Event] = None,
    *,
    settings: Optional[EngineSettings] = None,
) -> PixelBuffer:
    """Return *buffer* itself when it fits a ``max_size`` square, else a resized copy.

    Without an explicit *max_size* the limit is ``settings.preview_max_size``.
    """

    buffer = require_buffer(buffer)
    if max_size is None:
        max_size = (settings or EngineSettings()).preview_max_size
    if buffer.width <= max_size and buffer.height <= max_size:
        return buffer
    return resize(buffer, max_size, max_size, cancel)


__all__ = ["fit_preview", "resize", "scaled_size"]
