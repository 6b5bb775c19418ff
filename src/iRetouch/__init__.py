"""iRetouch: BGRA pixel-buffer transforms with a compressed undo/redo history."""

from __future__ import annotations

from .config import EngineSettings, default_settings
from .core.adjustments import AdjustmentParams
from .core.filters import (
    adjust,
    blur,
    detect_edges,
    fit_preview,
    grayscale,
    invert,
    resize,
    sepia,
)
from .core.image_filters import apply_adjustments
from .core.pixel_buffer import PixelBuffer
from .errors import (
    CorruptEntryError,
    InvalidArgumentError,
    IRetouchError,
    OperationCancelled,
    SettingsError,
    TransformError,
)
from .history import DecodedEntry, HistoryEntry, HistoryStore

__version__ = "0.1.0"

__all__ = [
    "AdjustmentParams",
    "CorruptEntryError",
    "DecodedEntry",
    "EngineSettings",
    "HistoryEntry",
    "HistoryStore",
    "IRetouchError",
    "InvalidArgumentError",
    "OperationCancelled",
    "PixelBuffer",
    "SettingsError",
    "TransformError",
    "adjust",
    "apply_adjustments",
    "blur",
    "default_settings",
    "detect_edges",
    "fit_preview",
    "grayscale",
    "invert",
    "resize",
    "sepia",
]
