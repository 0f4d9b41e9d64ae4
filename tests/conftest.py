import numpy as np
import pytest

from glyph_art.bitmap import Bitmap


def nearest_resize(bitmap, new_width, new_height):
    """Index-based resize so tests can predict every sample."""
    arr = bitmap.to_array()
    ys = (np.arange(new_height) * bitmap.height) // new_height
    xs = (np.arange(new_width) * bitmap.width) // new_width
    return Bitmap.from_array(arr[ys][:, xs])


@pytest.fixture
def solid():
    def make(width, height, rgba):
        return Bitmap(width, height, bytes(rgba) * (width * height))
    return make


@pytest.fixture
def noise_bitmap():
    rng = np.random.default_rng(1234)
    arr = rng.integers(0, 256, size=(24, 30, 4), dtype=np.uint8)
    return Bitmap.from_array(arr)
