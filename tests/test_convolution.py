"""Tests for the multi-pass box blur."""

import threading

import numpy as np
import pytest

from iRetouch.core.filters.convolution import blur
from iRetouch.core.pixel_buffer import PixelBuffer
from iRetouch.errors import OperationCancelled


def _reference_pass(surface: np.ndarray, radius: int, axis: int) -> np.ndarray:
    """Clamped-window truncating average along *axis*, written for clarity."""

    source = surface.astype(np.int64)
    result = np.empty_like(source)
    length = source.shape[axis]
    for index in range(length):
        start = max(0, index - radius)
        stop = min(length - 1, index + radius)
        window = np.take(source, range(start, stop + 1), axis=axis)
        total = window.sum(axis=axis)
        averaged = total // (stop - start + 1)
        if axis == 1:
            result[:, index, :] = averaged
        else:
            result[index, :, :] = averaged
    return result.astype(np.uint8)


def _reference_blur(surface: np.ndarray, radius: int) -> np.ndarray:
    radius = min(radius, 10)
    current = surface
    for _ in range(min(3, radius)):
        current = _reference_pass(current, radius, axis=1)
        current = _reference_pass(current, radius, axis=0)
    return current


def test_zero_radius_returns_equal_copy(random_buffer) -> None:
    buffer = random_buffer()

    result = blur(buffer, 0)

    assert result == buffer
    assert result is not buffer


def test_negative_radius_is_identity(random_buffer) -> None:
    buffer = random_buffer()

    assert blur(buffer, -3) == buffer


@pytest.mark.parametrize("radius", [1, 2, 4])
def test_blur_matches_reference(random_buffer, radius) -> None:
    buffer = random_buffer(width=13, height=9, seed=radius)

    result = blur(buffer, radius)

    np.testing.assert_array_equal(result.view(), _reference_blur(buffer.to_array(), radius))


def test_radius_is_clamped_to_ten(random_buffer) -> None:
    buffer = random_buffer(width=30, height=25, seed=5)

    assert blur(buffer, 25) == blur(buffer, 10)


def test_uniform_frame_is_unchanged() -> None:
    buffer = PixelBuffer.blank(9, 7, (12, 34, 56, 78))

    assert blur(buffer, 3) == buffer


def test_alpha_is_averaged_like_colour() -> None:
    surface = np.zeros((1, 3, 4), dtype=np.uint8)
    surface[0, 1] = (90, 90, 90, 90)
    buffer = PixelBuffer.from_array(surface)

    result = blur(buffer, 1)

    # One pass: horizontal windows of 2, 3, 2 samples, then a 1-row vertical pass.
    assert result.pixel(0, 0) == (45, 45, 45, 45)
    assert result.pixel(1, 0) == (30, 30, 30, 30)
    assert result.pixel(2, 0) == (45, 45, 45, 45)


def test_blur_leaves_input_untouched(random_buffer) -> None:
    buffer = random_buffer()
    snapshot = bytes(buffer.pixels)

    blur(buffer, 3)

    assert buffer.pixels == snapshot


def test_cancelled_blur_produces_no_buffer(random_buffer) -> None:
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(OperationCancelled):
        blur(random_buffer(), 2, cancel)
