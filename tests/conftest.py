import numpy as np
import pytest

from termscheme import PixelBuffer


@pytest.fixture
def red_blue_buffer():
    """2x2 image: two red pixels, two blue pixels."""
    data = bytes([255, 0, 0, 255, 0, 0, 0, 0, 255, 0, 0, 255])
    return PixelBuffer(2, 2, data)


@pytest.fixture
def grey_buffer():
    """Solid 4x4 image of (128, 128, 128)."""
    return PixelBuffer(4, 4, bytes([128] * 4 * 4 * 3))


@pytest.fixture
def pattern_pixels():
    """Deterministic 32x32 image with many distinct colors."""
    i = np.arange(32 * 32)
    return np.stack([(i * 37) % 256, (i * 91) % 256, (i * 13) % 256], axis=1).astype(np.uint8)


@pytest.fixture
def pattern_buffer(pattern_pixels):
    return PixelBuffer(32, 32, pattern_pixels.tobytes())
