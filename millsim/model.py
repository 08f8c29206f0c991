"""Placing an imported surface model on the milling base."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

import numpy as np

Vec3 = tuple[float, float, float]

MARGIN_XZ = 5.0
MARGIN_Y = 0.0
MIN_BASE_HEIGHT = 15.0
POINTS_PER_PATCH_ROW = 4


def _vec3(p: Sequence[float]) -> Vec3:
    return (float(p[0]), float(p[1]), float(p[2]))


def _point_list(points: Mapping[int, Sequence[float]] | Iterable[Sequence[float]]) -> list[Vec3]:
    values = points.values() if isinstance(points, Mapping) else points
    return [_vec3(p) for p in values]


def generate_transform(
    points: Mapping[int, Sequence[float]] | Iterable[Sequence[float]],
    base_dimensions: Sequence[float],
) -> np.ndarray:
    """Return the 4x4 matrix fitting the points inside the base.

    Each axis is scaled so that the point farthest from the origin lands on
    the margin of the base; x is mirrored and the model is lifted so that it
    stands on the minimal base height.
    """
    coords = np.array(_point_list(points), dtype=np.float64)
    if coords.size == 0:
        raise ValueError("cannot fit an empty set of points")
    distances = np.max(np.abs(coords), axis=0)
    if np.any(distances == 0):
        raise ValueError("points are flat along an axis and cannot be scaled")

    bx, by, bz = (float(d) for d in base_dimensions)
    final = np.array([
        bx / 2.0 - MARGIN_XZ,
        by - MIN_BASE_HEIGHT - MARGIN_Y,
        bz / 2.0 - MARGIN_XZ,
    ])
    scale = final / distances
    scale[0] = -scale[0]

    transform = np.diag([scale[0], scale[1], scale[2], 1.0])
    transform[1, 3] = MIN_BASE_HEIGHT
    return transform


def transform_points(
    transform: np.ndarray, points: Mapping[int, Sequence[float]]
) -> dict[int, Vec3]:
    """Apply a 4x4 affine matrix to every point, keeping the ids."""
    matrix = np.asarray(transform, dtype=np.float64)
    if matrix.shape != (4, 4):
        raise ValueError(f"expected a 4x4 matrix, got shape {matrix.shape}")
    result: dict[int, Vec3] = {}
    for point_id, p in points.items():
        moved = matrix @ np.array([float(p[0]), float(p[1]), float(p[2]), 1.0])
        result[point_id] = (float(moved[0]), float(moved[1]), float(moved[2]))
    return result


def _patch_point(patch_point_ids: Sequence[Sequence[int]], patch: int, point: int) -> int:
    try:
        return patch_point_ids[patch][point]
    except IndexError:
        raise ValueError(f"missing control point {point} of patch {patch}") from None


def c0_surface_point_ids(
    size_x: int, size_y: int, patch_point_ids: Sequence[Sequence[int]]
) -> list[int]:
    """Flatten the 16-point Bézier patches into one shared control grid.

    The grid is ``3 * size_x + 1`` points wide and ``3 * size_y + 1`` high,
    listed row by row.
    """
    ids: list[int] = []
    for j in range(3 * size_y + 1):
        for i in range(3 * size_x + 1):
            patch = (0 if i == 0 else (i - 1) // 3) + (0 if j == 0 else ((j - 1) // 3) * size_x)
            point = (0 if i == 0 else (i - 1) % 3 + 1) + (
                0 if j == 0 else ((j - 1) % 3 + 1) * POINTS_PER_PATCH_ROW
            )
            ids.append(_patch_point(patch_point_ids, patch, point))
    return ids


def c2_surface_point_ids(
    size_x: int, size_y: int, patch_point_ids: Sequence[Sequence[int]]
) -> list[int]:
    """Flatten the 16-point B-spline patches into one de Boor grid.

    The grid is ``size_x + 3`` points wide and ``size_y + 3`` high, listed
    row by row.
    """
    ids: list[int] = []
    for j in range(size_y + 3):
        for i in range(size_x + 3):
            patch = (0 if i < 3 else i - 3) + (0 if j < 3 else (j - 3) * size_x)
            point = (i if i < 3 else 3) + (j if j < 3 else 3) * POINTS_PER_PATCH_ROW
            ids.append(_patch_point(patch_point_ids, patch, point))
    return ids


def upload_points(
    points: Mapping[int, Sequence[float]], start_id: int = 0
) -> tuple[dict[int, int], dict[int, Vec3]]:
    """Give the points consecutive ids from ``start_id`` in order of their old ids.

    Returns the mapping from old to new ids and the points under their new ids.
    """
    id_map: dict[int, int] = {}
    renumbered: dict[int, Vec3] = {}
    for new_id, old_id in enumerate(sorted(points), start=start_id):
        id_map[old_id] = new_id
        renumbered[new_id] = _vec3(points[old_id])
    return id_map, renumbered