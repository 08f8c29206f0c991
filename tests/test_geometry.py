import math

import pytest

from millsim.geometry import MeshData, Vertex, generate_cylinder, generate_quad, generate_sphere


def _length(v):
    return math.sqrt(sum(c * c for c in v))


@pytest.mark.parametrize("slices", [3, 8, 15])
def test_cylinder_counts(slices):
    mesh = generate_cylinder(0.5, 1.0, slices)
    assert len(mesh.vertices) == 4 * (slices + 1) + 2
    assert len(mesh.indices) == 6 * slices + 6 * (slices + 1)
    assert all(0 <= i < len(mesh.vertices) for i in mesh.indices)


def test_cylinder_side_vertices_lie_on_rim():
    radius, height, slices = 2.0, 6.0, 12
    mesh = generate_cylinder(radius, height, slices)
    side = mesh.vertices[: 2 * (slices + 1)]
    for vertex in side:
        x, y, z = vertex.position
        assert math.hypot(x, z) == pytest.approx(radius)
        assert abs(y) == pytest.approx(height / 2)
        assert _length(vertex.normal) == pytest.approx(1.0)
        assert vertex.normal[1] == 0.0


def test_cylinder_cap_centres():
    mesh = generate_cylinder(1.0, 4.0, 6)
    top, bottom = mesh.vertices[-2], mesh.vertices[-1]
    assert top.position == (0.0, 2.0, 0.0)
    assert bottom.position == (0.0, -2.0, 0.0)
    assert top.normal == (0.0, 1.0, 0.0)
    assert bottom.normal == (0.0, -1.0, 0.0)


def test_cylinder_defaults_match_explicit():
    assert generate_cylinder() == generate_cylinder(0.5, 1.0, 15)


@pytest.mark.parametrize("parallels, meridians", [(3, 4), (10, 10), (6, 9)])
def test_sphere_counts(parallels, meridians):
    mesh = generate_sphere(parallels, meridians)
    assert len(mesh.vertices) == 2 + meridians * (parallels - 1)
    assert len(mesh.indices) == 6 * meridians + 6 * meridians * (parallels - 2)
    assert len(mesh.indices) % 3 == 0
    assert all(0 <= i < len(mesh.vertices) for i in mesh.indices)


def test_sphere_vertices_on_unit_sphere():
    mesh = generate_sphere(10, 10)
    for vertex in mesh.vertices:
        assert _length(vertex.position) == pytest.approx(1.0)
        assert vertex.normal == pytest.approx(vertex.position)


def test_sphere_every_vertex_is_used():
    mesh = generate_sphere(5, 7)
    assert set(mesh.indices) == set(range(len(mesh.vertices)))


def test_quad():
    mesh = generate_quad()
    assert isinstance(mesh, MeshData)
    assert mesh.indices == [1, 2, 0, 2, 3, 0]
    assert all(v.normal == (0.0, 0.0, 1.0) for v in mesh.vertices)
    assert {v.position for v in mesh.vertices} == {
        (-0.5, -0.5, 0.0),
        (0.5, -0.5, 0.0),
        (0.5, 0.5, 0.0),
        (-0.5, 0.5, 0.0),
    }


def test_vertex_default_tex_coords():
    vertex = Vertex((1.0, 2.0, 3.0), (0.0, 1.0, 0.0))
    assert vertex.tex_coords == (0.0, 0.0)