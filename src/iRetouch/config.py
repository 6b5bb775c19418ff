"""Engine settings and their JSON persistence."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

from .errors import SettingsError
from .utils.jsonio import read_json, write_json

_LOGGER = logging.getLogger(__name__)

HISTORY_CAPACITY = 20
"""Maximum number of snapshots retained by :class:`HistoryStore`."""

MAX_BLUR_RADIUS = 10
MAX_BLUR_PASSES = 3
PREVIEW_MAX_SIZE = 1200
ADJUSTMENT_EPSILON = 0.1
"""Slider values closer to zero than this are treated as "no adjustment"."""

SETTINGS_ENV_VAR = "IRETOUCH_SETTINGS"


@dataclass(frozen=True)
class EngineSettings:
    """Tunable limits for the transform engine and the history store."""

    history_capacity: int = HISTORY_CAPACITY
    max_blur_radius: int = MAX_BLUR_RADIUS
    max_blur_passes: int = MAX_BLUR_PASSES
    preview_max_size: int = PREVIEW_MAX_SIZE
    jpeg_quality: Optional[int] = None
    compression_level: int = 9
    adjustment_epsilon: float = ADJUSTMENT_EPSILON

    def __post_init__(self) -> None:
        if self.history_capacity < 1:
            raise SettingsError(f"history_capacity must be >= 1, got {self.history_capacity}")
        if self.max_blur_radius < 0:
            raise SettingsError(f"max_blur_radius must be >= 0, got {self.max_blur_radius}")
        if self.max_blur_passes < 1:
            raise SettingsError(f"max_blur_passes must be >= 1, got {self.max_blur_passes}")
        if self.preview_max_size < 1:
            raise SettingsError(f"preview_max_size must be >= 1, got {self.preview_max_size}")
        if self.jpeg_quality is not None and not (1 <= self.jpeg_quality <= 95):
            raise SettingsError(f"jpeg_quality must be 1-95, got {self.jpeg_quality}")
        if not (0 <= self.compression_level <= 9):
            raise SettingsError(f"compression_level must be 0-9, got {self.compression_level}")
        if self.adjustment_epsilon < 0.0:
            raise SettingsError(f"adjustment_epsilon must be >= 0, got {self.adjustment_epsilon}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EngineSettings":
        """Build settings from *data*, ignoring keys that are not settings."""

        known = {field.name for field in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                _LOGGER.debug("Ignoring unknown setting %r", key)
                continue
            values[key] = value
        try:
            return cls(**_coerce(values))
        except (TypeError, ValueError) as exc:
            raise SettingsError(f"Invalid engine settings: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _coerce(values: dict[str, Any]) -> dict[str, Any]:
    coerced = dict(values)
    for key in ("history_capacity", "max_blur_radius", "max_blur_passes", "preview_max_size", "compression_level"):
        if key in coerced:
            coerced[key] = int(coerced[key])
    if coerced.get("jpeg_quality") is not None:
        coerced["jpeg_quality"] = int(coerced["jpeg_quality"])
    if "adjustment_epsilon" in coerced:
        coerced["adjustment_epsilon"] = float(coerced["adjustment_epsilon"])
    return coerced


def load_settings(path: Path) -> EngineSettings:
    """Read settings from the JSON file at *path*."""

    return EngineSettings.from_mapping(read_json(path))


def save_settings(path: Path, settings: EngineSettings) -> None:
    """Persist *settings* to *path* atomically."""

    write_json(path, settings.to_dict())


def default_settings() -> EngineSettings:
    """Return the settings named by ``IRETOUCH_SETTINGS`` or the built-in defaults."""

    location = os.environ.get(SETTINGS_ENV_VAR)
    if not location:
        return EngineSettings()
    settings = load_settings(Path(location))
    _LOGGER.info("Loaded engine settings from %s", location)
    return settings
