"""Slider values describing a single edit and their textual summary."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..config import ADJUSTMENT_EPSILON, MAX_BLUR_RADIUS

ADJUSTMENT_KEYS = ("Brightness", "Contrast", "Saturation", "Blur")
"""Canonical order of the adjustments, also used by :meth:`AdjustmentParams.describe`."""

def clamp_blur_radius(radius: float, limit: int = MAX_BLUR_RADIUS) -> int:
    """Round *radius* to an integer and clamp it into ``[0, limit]``."""

    return max(0, min(int(limit), int(round(float(radius)))))


@dataclass(frozen=True)
class AdjustmentParams:
    """Brightness, contrast, saturation and blur applied to a frame."""

    brightness: float = 0.0
    contrast: float = 0.0
    saturation: float = 0.0
    blur: float = 0.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "AdjustmentParams":
        """Build params from a mapping keyed by :data:`ADJUSTMENT_KEYS` (any case)."""

        if not data:
            return cls()
        lowered = {str(key).lower(): value for key, value in data.items()}
        return cls(
            brightness=float(lowered.get("brightness", 0.0)),
            contrast=float(lowered.get("contrast", 0.0)),
            saturation=float(lowered.get("saturation", 0.0)),
            blur=float(lowered.get("blur", 0.0)),
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "Brightness": self.brightness,
            "Contrast": self.contrast,
            "Saturation": self.saturation,
            "Blur": self.blur,
        }

    @property
    def blur_radius(self) -> int:
        return clamp_blur_radius(self.blur)

    def has_tone_adjustment(self, epsilon: float = ADJUSTMENT_EPSILON) -> bool:
        """Return ``True`` when brightness, contrast or saturation is active."""

        return (
            abs(self.brightness) > epsilon
            or abs(self.contrast) > epsilon
            or abs(self.saturation) > epsilon
        )

    def has_blur(self, epsilon: float = ADJUSTMENT_EPSILON) -> bool:
        return self.blur > epsilon

    def is_identity(self, epsilon: float = ADJUSTMENT_EPSILON) -> bool:
        return not self.has_tone_adjustment(epsilon) and not self.has_blur(epsilon)

    def describe(self, epsilon: float = ADJUSTMENT_EPSILON) -> str:
        """Return a summary such as ``"Brightness: 50, Blur: 3"``.

        Values within *epsilon* of zero are omitted; ``"Adjustment"`` is
        returned when nothing remains.
        """

        parts = [
            f"{key}: {value:.0f}"
            for key, value in self.to_dict().items()
            if abs(value) > epsilon
        ]
        return ", ".join(parts) if parts else "Adjustment"


__all__ = [
    "ADJUSTMENT_KEYS",
    "AdjustmentParams",
    "clamp_blur_radius",
]
