"""Snapshot codec: JPEG frames wrapped in a gzip stream.

The format is private to the history store.  JPEG keeps snapshots small at
the cost of exact pixel values and transparency: decoded frames are always
opaque.
"""

from __future__ import annotations

import gzip
import io
import logging
import zlib
from typing import Optional

from PIL import Image, UnidentifiedImageError

from ..errors import CorruptEntryError
from .pixel_buffer import PixelBuffer, require_buffer

_LOGGER = logging.getLogger(__name__)

SNAPSHOT_FORMAT = "JPEG"


def encode(
    buffer: PixelBuffer,
    *,
    quality: Optional[int] = None,
    compression_level: int = 9,
) -> bytes:
    """Return the compressed snapshot bytes for *buffer*.

    *quality* ``None`` keeps the JPEG encoder's default.
    """

    buffer = require_buffer(buffer)
    image = buffer.to_image().convert("RGB")
    stream = io.BytesIO()
    save_kwargs = {} if quality is None else {"quality": int(quality)}
    image.save(stream, format=SNAPSHOT_FORMAT, **save_kwargs)
    payload = gzip.compress(stream.getvalue(), compresslevel=compression_level)
    _LOGGER.debug(
        "Encoded %dx%d frame into %d bytes (%d raw)",
        buffer.width,
        buffer.height,
        len(payload),
        len(buffer.pixels),
    )
    return payload


def decode(data: bytes) -> PixelBuffer:
    """Rebuild a frame from :func:`encode` output.

    Raises :class:`CorruptEntryError` when *data* is empty, is not a valid
    gzip stream, does not contain a decodable image, or decodes to an empty
    frame.
    """

    if not data:
        raise CorruptEntryError("Snapshot payload is empty")
    try:
        raw = gzip.decompress(bytes(data))
    except (OSError, EOFError, zlib.error) as exc:
        raise CorruptEntryError(f"Snapshot decompression failed: {exc}") from exc

    try:
        with Image.open(io.BytesIO(raw)) as image:
            image.load()
            width, height = image.size
            if width <= 0 or height <= 0:
                raise CorruptEntryError(f"Snapshot has invalid dimensions {width}x{height}")
            rgba = image.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as exc:
        raise CorruptEntryError(f"Snapshot image decode failed: {exc}") from exc

    return PixelBuffer.from_image(rgba)


__all__ = ["SNAPSHOT_FORMAT", "decode", "encode"]
