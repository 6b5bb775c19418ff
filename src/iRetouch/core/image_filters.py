"""Combined adjustment pipeline driven by the edit sliders."""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

from ..config import EngineSettings
from .adjustments import AdjustmentParams, clamp_blur_radius
from .filters import adjust, blur
from .filters.utils import check_cancelled
from .pixel_buffer import PixelBuffer, require_buffer

_LOGGER = logging.getLogger(__name__)


def apply_adjustments(
    buffer: PixelBuffer,
    params: AdjustmentParams,
    cancel: Optional[threading.Event] = None,
    *,
    settings: Optional[EngineSettings] = None,
) -> PixelBuffer:
    """Return *buffer* with the tone adjustments of *params* followed by its blur.

    Stages whose sliders sit within ``adjustment_epsilon`` of zero are
    skipped.  The original buffer is never modified; an all-zero *params*
    yields an unchanged copy.
    """

    buffer = require_buffer(buffer)
    settings = settings or EngineSettings()
    epsilon = settings.adjustment_epsilon
    started = time.perf_counter()

    check_cancelled(cancel, "adjustments")
    result = buffer.copy()
    if params.is_identity(epsilon):
        return result

    if params.has_tone_adjustment(epsilon):
        check_cancelled(cancel, "tone adjustment")
        result = adjust(result, params.brightness, params.contrast, params.saturation)

    if params.has_blur(epsilon):
        check_cancelled(cancel, "blur")
        radius = clamp_blur_radius(params.blur, settings.max_blur_radius)
        result = blur(
            result,
            radius,
            cancel,
            max_radius=settings.max_blur_radius,
            max_passes=settings.max_blur_passes,
        )

    _LOGGER.debug(
        "Applied %s to %dx%d frame in %.1f ms",
        params.describe(epsilon),
        buffer.width,
        buffer.height,
        (time.perf_counter() - started) * 1000.0,
    )
    return result


__all__ = ["apply_adjustments"]
