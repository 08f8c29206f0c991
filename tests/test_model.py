import numpy as np
import pytest

from millsim.model import (
    MARGIN_XZ,
    MIN_BASE_HEIGHT,
    c0_surface_point_ids,
    c2_surface_point_ids,
    generate_transform,
    transform_points,
    upload_points,
)
from millsim.patch import patch_indices

BASE = (150.0, 50.0, 150.0)


@pytest.fixture
def sample_points():
    return {
        3: (2.0, -1.0, 4.0),
        1: (-10.0, 3.0, 1.0),
        7: (5.0, 0.5, -8.0),
    }


def test_transform_fits_points_to_margins(sample_points):
    transform = generate_transform(sample_points, BASE)
    moved = transform_points(transform, sample_points)
    coords = np.array(list(moved.values()))
    assert np.max(np.abs(coords[:, 0])) == pytest.approx(BASE[0] / 2 - MARGIN_XZ)
    assert np.max(np.abs(coords[:, 2])) == pytest.approx(BASE[2] / 2 - MARGIN_XZ)
    assert np.max(coords[:, 1]) == pytest.approx(BASE[1])


def test_transform_mirrors_x_and_lifts(sample_points):
    transform = generate_transform(sample_points, BASE)
    assert transform[0, 0] < 0
    assert transform[1, 1] > 0
    assert transform[2, 2] > 0
    moved = transform_points(transform, {0: (0.0, 0.0, 0.0)})
    assert moved[0] == pytest.approx((0.0, MIN_BASE_HEIGHT, 0.0))


def test_transform_accepts_plain_sequence(sample_points):
    from_map = generate_transform(sample_points, BASE)
    from_list = generate_transform(list(sample_points.values()), BASE)
    assert np.allclose(from_map, from_list)


def test_transform_rejects_empty():
    with pytest.raises(ValueError):
        generate_transform({}, BASE)


def test_transform_points_keeps_ids(sample_points):
    moved = transform_points(np.eye(4), sample_points)
    assert set(moved) == set(sample_points)
    for key, p in sample_points.items():
        assert moved[key] == pytest.approx(p)


def test_transform_points_rejects_bad_matrix(sample_points):
    with pytest.raises(ValueError):
        transform_points(np.eye(3), sample_points)


def test_c0_single_patch_is_identity_layout():
    patch = list(range(100, 116))
    assert c0_surface_point_ids(1, 1, [patch]) == patch


def test_c2_single_patch_is_identity_layout():
    patch = list(range(200, 216))
    assert c2_surface_point_ids(1, 1, [patch]) == patch


def test_c0_grid_matches_patch_indices():
    width, height = 2, 3
    # Build patches so that each patch's points are the global grid ids.
    indices = patch_indices(False, False, width, height)
    patches = [indices[16 * p:16 * p + 16] for p in range(width * height)]
    ids = c0_surface_point_ids(width, height, patches)
    assert ids == list(range((3 * width + 1) * (3 * height + 1)))


def test_c2_grid_matches_patch_indices():
    width, height = 3, 2
    indices = patch_indices(False, True, width, height)
    patches = [indices[16 * p:16 * p + 16] for p in range(width * height)]
    ids = c2_surface_point_ids(width, height, patches)
    assert ids == list(range((width + 3) * (height + 3)))


def test_c2_missing_patch_raises():
    with pytest.raises(ValueError):
        c2_surface_point_ids(2, 1, [list(range(16))])


def test_upload_points_renumbers_in_id_order(sample_points):
    id_map, renumbered = upload_points(sample_points, start_id=10)
    assert id_map == {1: 10, 3: 11, 7: 12}
    for old, new in id_map.items():
        assert renumbered[new] == sample_points[old]


def test_upload_points_default_start(sample_points):
    id_map, renumbered = upload_points(sample_points)
    assert sorted(renumbered) == [0, 1, 2]
    assert sorted(id_map.values()) == [0, 1, 2]