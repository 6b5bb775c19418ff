"""Tests for the combined adjustment pipeline and its parameters."""

import threading

import pytest

from iRetouch.config import EngineSettings
from iRetouch.core.adjustments import AdjustmentParams, clamp_blur_radius
from iRetouch.core.filters import adjust, blur
from iRetouch.core.image_filters import apply_adjustments
from iRetouch.errors import OperationCancelled


def test_identity_params_return_copy(random_buffer) -> None:
    buffer = random_buffer()

    result = apply_adjustments(buffer, AdjustmentParams())

    assert result == buffer
    assert result is not buffer


def test_tone_then_blur_order(random_buffer) -> None:
    buffer = random_buffer(seed=4)
    params = AdjustmentParams(brightness=20, contrast=10, saturation=-30, blur=2.4)

    result = apply_adjustments(buffer, params)

    assert result == blur(adjust(buffer, 20, 10, -30), 2)


def test_values_below_epsilon_are_skipped(random_buffer) -> None:
    buffer = random_buffer()
    params = AdjustmentParams(brightness=0.05, blur=0.09)

    assert apply_adjustments(buffer, params) == buffer


def test_settings_limit_blur_radius(random_buffer) -> None:
    buffer = random_buffer(width=20, height=20)
    settings = EngineSettings(max_blur_radius=2)

    result = apply_adjustments(buffer, AdjustmentParams(blur=8), settings=settings)

    assert result == blur(buffer, 2)


def test_cancelled_pipeline_raises(random_buffer) -> None:
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(OperationCancelled):
        apply_adjustments(random_buffer(), AdjustmentParams(brightness=10), cancel)


@pytest.mark.parametrize(
    "params, expected",
    [
        (AdjustmentParams(), "Adjustment"),
        (AdjustmentParams(brightness=50), "Brightness: 50"),
        (AdjustmentParams(contrast=-20.4, blur=3), "Contrast: -20, Blur: 3"),
        (AdjustmentParams(saturation=0.05), "Adjustment"),
    ],
)
def test_describe(params, expected) -> None:
    assert params.describe() == expected


def test_from_mapping_accepts_any_case() -> None:
    params = AdjustmentParams.from_mapping({"Brightness": 5, "blur": "2"})

    assert params == AdjustmentParams(brightness=5.0, blur=2.0)
    assert AdjustmentParams.from_mapping(None) == AdjustmentParams()


@pytest.mark.parametrize("radius, expected", [(-2, 0), (0.4, 0), (2.6, 3), (50, 10)])
def test_clamp_blur_radius(radius, expected) -> None:
    assert clamp_blur_radius(radius) == expected


@pytest.mark.parametrize(
    "params, expected",
    [
        (AdjustmentParams(), True),
        (AdjustmentParams(brightness=0.05, contrast=-0.1, blur=0.1), True),
        (AdjustmentParams(saturation=-0.2), False),
        (AdjustmentParams(blur=1), False),
    ],
)
def test_is_identity(params, expected) -> None:
    assert params.is_identity() is expected


def test_identity_params_skip_every_stage(random_buffer, monkeypatch) -> None:
    from iRetouch.core import image_filters

    def _unexpected(*_args, **_kwargs):
        raise AssertionError("stage should not run")

    monkeypatch.setattr(image_filters, "adjust", _unexpected)
    monkeypatch.setattr(image_filters, "blur", _unexpected)
    buffer = random_buffer()

    assert apply_adjustments(buffer, AdjustmentParams(contrast=0.05)) == buffer
