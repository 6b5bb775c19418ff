import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make the ``src`` layout importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from iRetouch.core.pixel_buffer import PixelBuffer  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """Provide a ``QCoreApplication`` so the history thread pool has an owner."""

    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def random_buffer():
    """Return a factory producing reproducible random BGRA frames."""

    def _factory(width: int = 16, height: int = 12, seed: int = 7, opaque: bool = False) -> PixelBuffer:
        rng = np.random.default_rng(seed)
        pixels = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
        if opaque:
            pixels[..., 3] = 255
        return PixelBuffer.from_array(pixels)

    return _factory


@pytest.fixture
def gradient_buffer():
    """Return a smooth opaque gradient that survives JPEG round trips well."""

    def _factory(width: int = 32, height: int = 24) -> PixelBuffer:
        xs = np.linspace(0, 255, width, dtype=np.float64)
        ys = np.linspace(0, 255, height, dtype=np.float64)
        surface = np.empty((height, width, 4), dtype=np.uint8)
        surface[..., 0] = xs[None, :].astype(np.uint8)
        surface[..., 1] = ys[:, None].astype(np.uint8)
        surface[..., 2] = 128
        surface[..., 3] = 255
        return PixelBuffer.from_array(surface)

    return _factory
