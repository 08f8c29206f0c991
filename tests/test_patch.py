import pytest

from millsim.patch import (
    PatchC0,
    PatchC2,
    bernstein_basis,
    bspline_basis,
    cap,
    de_boor_coeffs,
    patch_indices,
)


def _grid(columns, rows, scale):
    return [(c * scale, r * scale, 0.0) for r in range(rows) for c in range(columns)]


def _c0_plane(width=1, length=1):
    columns, rows = 3 * width + 1, 3 * length + 1
    return PatchC0(
        _grid(columns, rows, 1.0 / 3.0),
        patch_indices(False, False, width, length),
        width,
        length,
        False,
    )


def _c2_plane(name=""):
    return PatchC2(_grid(4, 4, 1.0), patch_indices(False, True, 1, 1), 1, 1, False, name)


def test_single_patch_indices_cover_the_grid():
    assert patch_indices(False, False, 1, 1) == list(range(16))
    assert patch_indices(False, True, 1, 1) == list(range(16))


@pytest.mark.parametrize("wrapped", [False, True])
@pytest.mark.parametrize("c2", [False, True])
def test_patch_indices_size_and_bounds(wrapped, c2):
    width, length = 4, 3
    indices = patch_indices(wrapped, c2, width, length)
    assert len(indices) == 16 * width * length
    vert_n = (width + 3 if c2 else 3 * width + 1) - ((3 if c2 else 1) if wrapped else 0)
    rows = length + 3 if c2 else 3 * length + 1
    assert min(indices) == 0
    assert max(indices) < vert_n * rows


def test_neighbouring_c0_patches_share_an_edge():
    indices = patch_indices(False, False, 2, 1)
    first, second = indices[:16], indices[16:32]
    assert [first[4 * j + 3] for j in range(4)] == [second[4 * j] for j in range(4)]


@pytest.mark.parametrize("t", [0.0, 0.2, 0.5, 0.9, 1.0])
def test_bernstein_partition_of_unity(t):
    assert sum(bernstein_basis(t, 3)) == pytest.approx(1.0)
    quadratic = bernstein_basis(t, 2)
    assert quadratic[3] == 0.0
    assert sum(quadratic) == pytest.approx(1.0)


def test_bernstein_endpoints():
    assert bernstein_basis(0.0, 3) == pytest.approx((1.0, 0.0, 0.0, 0.0))
    assert bernstein_basis(1.0, 3) == pytest.approx((0.0, 0.0, 0.0, 1.0))


def test_bernstein_rejects_high_degree():
    with pytest.raises(ValueError):
        bernstein_basis(0.5, 4)


@pytest.mark.parametrize("t", [0.0, 0.3, 0.7, 1.0])
def test_bspline_partition_of_unity(t):
    assert sum(bspline_basis(t, 3)) == pytest.approx(1.0)
    quadratic = bspline_basis(t, 2)
    assert quadratic[3] == 0.0
    assert sum(quadratic) == pytest.approx(1.0)


def test_bspline_at_zero():
    assert bspline_basis(0.0, 3) == pytest.approx((1 / 6, 2 / 3, 1 / 6, 0.0))


@pytest.mark.parametrize("s", [0.0, 0.25, 0.6, 1.0])
def test_de_boor_matches_uniform_basis(s):
    index, count = 5, 10
    t = index / count + s / count
    assert de_boor_coeffs(t, index, count) == pytest.approx(bspline_basis(s, 3))


def test_cap_clamps_and_wraps():
    assert cap(-5.0, 0.0, 10.0, False) == 0.0
    assert cap(15.0, 0.0, 10.0, False) == 10.0
    assert cap(4.0, 0.0, 10.0, False) == 4.0
    assert cap(-3.0, 0.0, 10.0, True) == pytest.approx(cap(7.0, 0.0, 10.0, True))
    assert cap(7.0, 0.0, 10.0, True) == 7.0
    assert cap(27.0, 0.0, 10.0, True) == pytest.approx(7.0)


def test_cap_wrap_empty_range_raises():
    with pytest.raises(ValueError):
        cap(5.0, 1.0, 1.0, True)


def test_c0_ranges():
    patch = _c0_plane(2, 1)
    assert patch.range_u() == 2.0
    assert patch.range_v() == 1.0


def test_c0_corners_interpolate_control_points():
    patch = _c0_plane()
    assert patch.evaluate(0.0, 0.0) == pytest.approx(tuple(patch.control_points[0]))
    assert patch.evaluate(1.0, 1.0) == pytest.approx(tuple(patch.control_points[15]))


@pytest.mark.parametrize("u,v", [(0.25, 0.5), (0.8, 0.1), (1.5, 0.5), (2.0, 1.0)])
def test_c0_linear_precision_across_patches(u, v):
    patch = _c0_plane(2, 1)
    assert patch.evaluate(u, v) == pytest.approx((u, v, 0.0))


def test_c0_derivatives_and_tool_offset():
    patch = _c0_plane()
    assert patch.evaluate_du(0.4, 0.6) == pytest.approx((1.0, 0.0, 0.0))
    assert patch.evaluate_dv(0.4, 0.6) == pytest.approx((0.0, 1.0, 0.0))
    assert patch.evaluate_tool(0.4, 0.6, 2.5) == pytest.approx((0.4, 0.6, 2.5))


def test_c0_outside_surface_raises():
    patch = _c0_plane()
    with pytest.raises(ValueError):
        patch.evaluate(2.5, 0.5)


def test_patch_requires_enough_indices():
    with pytest.raises(ValueError):
        PatchC0(_grid(4, 4, 1.0), list(range(8)), 1, 1, False)


def test_c2_constant_net_reproduces_point():
    point = (3.0, -2.0, 7.0)
    patch = PatchC2([point] * 16, list(range(16)), 1, 1, False)
    assert patch.evaluate(0.3, 0.8) == pytest.approx(point)


def test_c2_linear_precision():
    patch = _c2_plane()
    base = patch.evaluate(0.0, 0.5)
    moved = patch.evaluate(0.25, 0.5)
    assert moved[0] - base[0] == pytest.approx(0.25)
    assert moved[1] == pytest.approx(base[1])
    assert moved[2] == pytest.approx(0.0)


def test_c2_tool_offset_direction_depends_on_name():
    assert _c2_plane().evaluate_tool(0.5, 0.5, 2.0)[2] == pytest.approx(2.0)
    assert _c2_plane("fin").evaluate_tool(0.5, 0.5, 2.0)[2] == pytest.approx(-2.0)


def test_c2_tangents_lie_in_plane():
    patch = _c2_plane()
    du = patch.evaluate_du(0.5, 0.5)
    dv = patch.evaluate_dv(0.5, 0.5)
    assert du[0] > 0 and du[1] == pytest.approx(0.0) and du[2] == pytest.approx(0.0)
    assert dv[1] > 0 and dv[0] == pytest.approx(0.0) and dv[2] == pytest.approx(0.0)