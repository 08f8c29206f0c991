"""Bicubic Bézier (C0) and uniform B-spline (C2) surface patches."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

Vec3 = tuple[float, float, float]
Basis = tuple[float, float, float, float]


def patch_indices(
    wrapped: bool, c2: bool, patch_count_width: int, patch_count_length: int
) -> list[int]:
    """Return 16 control-point indices per patch, patches in row-major order.

    The control net is a grid ``vert_n`` points wide; a C0 surface shares
    edge points between neighbouring patches, a C2 surface shifts by one.
    A wrapped surface reuses its first columns at the end of each row.
    """
    vert_n = patch_count_width + 3 if c2 else 3 * patch_count_width + 1
    wrapped_overlap = 3 if c2 else 1
    if wrapped:
        vert_n -= wrapped_overlap
    step = 1 if c2 else 3

    indices: list[int] = []
    for m in range(patch_count_length):
        for n in range(patch_count_width):
            for j in range(4):
                for i in range(4):
                    k = i + step * n
                    row = j + step * m
                    if wrapped and k >= vert_n:
                        indices.append(row * vert_n + (k - vert_n))
                    else:
                        indices.append(k + row * vert_n)
    return indices


def bernstein_basis(t: float, n: int) -> Basis:
    """Return the Bernstein polynomials of degree ``n`` at ``t``, padded to four."""
    if not 0 <= n <= 3:
        raise ValueError(f"degree must be between 0 and 3, got {n}")
    s = 1.0 - t
    row = [1.0, 0.0, 0.0, 0.0]
    for j in range(1, n + 1):
        previous = row[:]
        row[0] = previous[0] * s
        for i in range(1, j + 1):
            row[i] = previous[i] * s + previous[i - 1] * t
    return (row[0], row[1], row[2], row[3])


def bspline_basis(t: float, n: int) -> Basis:
    """Return uniform B-spline basis values on ``[0, 1]``.

    Degree 2 gives three values followed by a zero; any other degree gives
    the four cubic values.
    """
    n10 = 1.0 - t
    n11 = t

    n2_1 = n10 * (1.0 - t) / 2.0
    n20 = n10 * (t + 1.0) / 2.0 + n11 * (2.0 - t) / 2.0
    n21 = n11 * t / 2.0
    if n == 2:
        return (n2_1, n20, n21, 0.0)

    n3_2 = n2_1 * (1.0 - t) / 3.0
    n3_1 = n2_1 * (t + 2.0) / 3.0 + n20 * (2.0 - t) / 3.0
    n30 = n20 * (t + 1.0) / 3.0 + n21 * (3.0 - t) / 3.0
    n31 = n21 * t / 3.0
    return (n3_2, n3_1, n30, n31)


def de_boor_coeffs(t: float, i: int, knot_count: int) -> Basis:
    """Return the four cubic B-spline basis values at ``t`` on uniform knots ``k / knot_count``."""
    knot_dist = 1.0 / knot_count
    basis = [0.0] * 5
    left = [0.0] * 4
    right = [0.0] * 4
    basis[1] = 1.0
    for j in range(1, 4):
        left[j] = knot_dist * (i + j) - t
        right[j] = t - knot_dist * (i + 1 - j)
        saved = 0.0
        for k in range(1, j + 1):
            term = basis[k] / (left[k] + right[j + 1 - k])
            basis[k] = saved + left[k] * term
            saved = right[j + 1 - k] * term
        basis[j + 1] = saved
    return (basis[1], basis[2], basis[3], basis[4])


def cap(point: float, lower_limit: float, upper_limit: float, wrap: bool) -> float:
    """Clamp ``point`` to the limits, or wrap it around them when ``wrap`` is set."""
    if wrap:
        span = upper_limit - lower_limit
        if (point < lower_limit or point > upper_limit) and span <= 0:
            raise ValueError("cannot wrap into an empty range")
        while point < lower_limit:
            point += span
        while point > upper_limit:
            point -= span
        return point
    return min(max(point, lower_limit), upper_limit)


def _as_tuple(v: np.ndarray) -> Vec3:
    return (float(v[0]), float(v[1]), float(v[2]))


def _normalize(v: np.ndarray) -> np.ndarray:
    with np.errstate(divide="ignore", invalid="ignore"):
        return v / np.linalg.norm(v)


class _Patch:
    def __init__(
        self,
        control_points: Sequence[Sequence[float]],
        indices: Sequence[int],
        patch_count_x: int,
        patch_count_y: int,
        wrapped: bool,
    ) -> None:
        points = np.asarray(control_points, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] != 3:
            raise ValueError(f"control points must be 3D, got shape {points.shape}")
        index_array = np.asarray(indices, dtype=np.int64)
        if patch_count_x <= 0 or patch_count_y <= 0:
            raise ValueError("patch counts must be positive")
        if len(index_array) < 16 * patch_count_x * patch_count_y:
            raise ValueError("not enough indices for the patch counts")
        if len(index_array) and (index_array.min() < 0 or index_array.max() >= len(points)):
            raise ValueError("index refers to a missing control point")
        self.control_points = points
        self.indices = index_array
        self.patch_count_x = int(patch_count_x)
        self.patch_count_y = int(patch_count_y)
        self.wrapped = bool(wrapped)

    def range_u(self) -> float:
        return float(self.patch_count_x)

    def range_v(self) -> float:
        return float(self.patch_count_y)

    def _single_patch(self, u: float, v: float) -> tuple[np.ndarray, float, float]:
        """Return the 4x4 control net ``[u][v]`` of the patch holding ``(u, v)`` and local coordinates."""
        i = int(u)
        j = int(v)
        if i == self.patch_count_x:
            i -= 1
        if j == self.patch_count_y:
            j -= 1
        if not (0 <= i < self.patch_count_x and 0 <= j < self.patch_count_y):
            raise ValueError(f"parameters ({u}, {v}) lie outside the surface")
        start = 16 * (j * self.patch_count_x + i)
        points = self.control_points[self.indices[start:start + 16]]
        coefficients = points.reshape(4, 4, 3).transpose(1, 0, 2)
        return coefficients, u - i, v - j

    def _tangents(self, u: float, v: float, basis) -> tuple[np.ndarray, np.ndarray]:
        coefficients, lu, lv = self._single_patch(u, v)
        u4 = np.array(basis(lu, 3))
        v4 = np.array(basis(lv, 3))
        u3 = np.array(basis(lu, 2)[:3])
        v3 = np.array(basis(lv, 2)[:3])
        along_u = np.einsum("b,abk->ak", v4, coefficients)
        along_v = np.einsum("a,abk->bk", u4, coefficients)
        du = 3.0 * np.einsum("i,ik->k", u3, np.diff(along_u, axis=0))
        dv = 3.0 * np.einsum("i,ik->k", v3, np.diff(along_v, axis=0))
        return du, dv

    def _point(self, u: float, v: float) -> np.ndarray:
        raise NotImplementedError

    def evaluate(self, u: float, v: float) -> Vec3:
        """Return the surface point at ``(u, v)``."""
        return _as_tuple(self._point(u, v))

    def _normal(self, u: float, v: float, radius: float) -> np.ndarray:
        du = np.array(self.evaluate_du(u, v))
        dv = np.array(self.evaluate_dv(u, v))
        return _normalize(np.cross(du, dv)) * radius


class PatchC0(_Patch):
    """A surface of bicubic Bézier patches sharing their edge points."""

    def __init__(
        self,
        control_points: Sequence[Sequence[float]],
        indices: Sequence[int],
        patch_count_x: int,
        patch_count_y: int,
        wrapped: bool,
    ) -> None:
        super().__init__(control_points, indices, patch_count_x, patch_count_y, wrapped)

    def range_u(self) -> float:
        return super().range_u()

    def range_v(self) -> float:
        return super().range_v()

    def _point(self, u: float, v: float) -> np.ndarray:
        coefficients, lu, lv = self._single_patch(u, v)
        uc = np.array(bernstein_basis(lu, 3))
        vc = np.array(bernstein_basis(lv, 3))
        return np.einsum("a,b,abk->k", uc, vc, coefficients)

    def evaluate(self, u: float, v: float) -> Vec3:
        return super().evaluate(u, v)

    def evaluate_du(self, u: float, v: float) -> Vec3:
        """Return the partial derivative along ``u``."""
        return _as_tuple(self._tangents(u, v, bernstein_basis)[0])

    def evaluate_dv(self, u: float, v: float) -> Vec3:
        """Return the partial derivative along ``v``."""
        return _as_tuple(self._tangents(u, v, bernstein_basis)[1])

    def evaluate_tool(self, u: float, v: float, radius: float) -> Vec3:
        """Return the surface point moved by ``radius`` along the unit normal."""
        return _as_tuple(self._point(u, v) + self._normal(u, v, radius))


class PatchC2(_Patch):
    """A surface of uniform bicubic B-spline patches."""

    def __init__(
        self,
        control_points: Sequence[Sequence[float]],
        indices: Sequence[int],
        patch_count_x: int,
        patch_count_y: int,
        wrapped: bool,
        name: str = "",
    ) -> None:
        super().__init__(control_points, indices, patch_count_x, patch_count_y, wrapped)
        self.name = name

    def range_u(self) -> float:
        return super().range_u()

    def range_v(self) -> float:
        return super().range_v()

    def _point(self, u: float, v: float) -> np.ndarray:
        p, lu, lv = self._single_patch(u, v)
        idx_u = self.patch_count_x + 3
        idx_v = self.patch_count_y + 3
        count_u = int(3 * self.range_u() + 4)
        count_v = int(3 * self.range_v() + 4)

        u0, u1 = idx_u / count_u, (idx_u + 1) / count_u
        v0, v1 = idx_v / count_v, (idx_v + 1) / count_v
        knot_u = u0 + (u1 - u0) * lu
        knot_v = v0 + (v1 - v0) * lv

        un = np.array(de_boor_coeffs(knot_u, idx_u, count_u))
        vn = np.array(de_boor_coeffs(knot_v, idx_v, count_v))
        return np.einsum("a,b,abk->k", un, vn, p)

    def evaluate(self, u: float, v: float) -> Vec3:
        return super().evaluate(u, v)

    def evaluate_du(self, u: float, v: float) -> Vec3:
        """Return the tangent along ``u``."""
        return _as_tuple(self._tangents(u, v, bspline_basis)[0])

    def evaluate_dv(self, u: float, v: float) -> Vec3:
        """Return the tangent along ``v``."""
        return _as_tuple(self._tangents(u, v, bspline_basis)[1])

    def evaluate_tool(self, u: float, v: float, radius: float) -> Vec3:
        """Return the surface point offset by ``radius`` along the normal; reversed for "fin"."""
        normal = self._normal(u, v, radius)
        sign = -1.0 if self.name == "fin" else 1.0
        return _as_tuple(self._point(u, v) + normal * sign)