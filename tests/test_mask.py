import numpy as np
import pytest
from PIL import Image

from millsim.mask import IntersectionMask


@pytest.fixture
def pixels():
    data = np.zeros((4, 8, 4), dtype=np.uint8)
    data[0, 0] = (10, 20, 30, 40)
    data[3, 7] = (200, 150, 100, 50)
    data[2, 5] = (1, 2, 3, 4)
    return data


def test_dimensions(pixels):
    mask = IntersectionMask(pixels)
    assert (mask.width, mask.height, mask.channels) == (8, 4, 4)


def test_sample_corners(pixels):
    mask = IntersectionMask(pixels)
    assert mask.sample(0.0, 0.0) == (10, 20, 30, 40)
    assert mask.sample(0.99, 0.99) == (200, 150, 100, 50)


def test_sample_uses_u_for_columns_and_v_for_rows(pixels):
    mask = IntersectionMask(pixels)
    assert mask.sample(5 / 8, 2 / 4) == tuple(int(c) for c in pixels[2, 5])


@pytest.mark.parametrize("u, v", [(1.0, 0.5), (0.5, 1.0), (-0.5, 0.5), (0.5, -0.5), (2.0, 2.0)])
def test_outside_returns_zero(pixels, u, v):
    assert IntersectionMask(pixels).sample(u, v) == (0, 0, 0, 0)


def test_small_negative_truncates_to_first_pixel(pixels):
    mask = IntersectionMask(pixels)
    assert mask.sample(-0.01, -0.01) == mask.sample(0.0, 0.0)


def test_from_file_round_trip(tmp_path, pixels):
    path = tmp_path / "mask.png"
    Image.fromarray(pixels, "RGBA").save(path)
    mask = IntersectionMask.from_file(path)
    assert np.array_equal(mask.pixels, pixels)


def test_rgb_file_gets_opaque_alpha(tmp_path):
    rgb = np.full((2, 3, 3), 90, dtype=np.uint8)
    path = tmp_path / "rgb.png"
    Image.fromarray(rgb, "RGB").save(path)
    mask = IntersectionMask.from_file(path)
    assert mask.sample(0.5, 0.5) == (90, 90, 90, 255)


def test_wrong_shape_is_rejected():
    with pytest.raises(ValueError):
        IntersectionMask(np.zeros((4, 4, 3), dtype=np.uint8))


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        IntersectionMask.from_file(tmp_path / "none.png")