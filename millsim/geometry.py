"""Triangle meshes for the tool model and the base."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]


@dataclass(frozen=True)
class Vertex:
    """A vertex with position, normal and texture coordinates."""

    position: Vec3
    normal: Vec3
    tex_coords: Vec2 = (0.0, 0.0)


@dataclass
class MeshData:
    """Vertices and the triangle indices into them."""

    vertices: list[Vertex] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)


def _normalize(v: Vec3) -> Vec3:
    length = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    return (v[0] / length, v[1] / length, v[2] / length)


def generate_cylinder(radius: float = 0.5, height: float = 1.0, slices: int = 15) -> MeshData:
    """Build a capped cylinder centred on the origin along the y axis."""
    texture_step = 1.0 / slices
    angle_step = 2.0 * math.pi / slices
    half = height / 2.0
    up: Vec3 = (0.0, 1.0, 0.0)
    down: Vec3 = (0.0, -1.0, 0.0)

    part_size = slices * 2
    start_faces = slices * 2
    top_middle = slices * 4
    bottom_middle = slices * 4 + 1

    rim = [
        (radius * math.cos(i * angle_step), radius * math.sin(i * angle_step), i * texture_step)
        for i in range(slices + 1)
    ]

    vertices: list[Vertex] = []
    for x, z, tex in rim:
        normal = _normalize((x, 0.0, z))
        vertices.append(Vertex((x, half, z), normal, (tex, 0.0)))
        vertices.append(Vertex((x, -half, z), normal, (tex, 1.0)))
    for x, z, _ in rim:
        vertices.append(Vertex((x, half, z), up))
        vertices.append(Vertex((x, -half, z), down))
    vertices.append(Vertex((0.0, half, 0.0), up))
    vertices.append(Vertex((0.0, -half, 0.0), down))

    indices: list[int] = []
    for i in range(0, slices * 2 - 1, 2):
        next_top = 0 if i + 2 >= part_size else i + 2
        next_bottom = 1 if i + 3 >= part_size else i + 3
        indices += [i, next_bottom, i + 1]
        indices += [i, next_top, next_bottom]

    for i in range(slices + 1):
        next_top = 0 if (i + 1) * 2 >= part_size else (i + 1) * 2
        next_bottom = 1 if (i + 1) * 2 + 1 >= part_size else (i + 1) * 2 + 1
        indices += [start_faces + i * 2, top_middle, start_faces + next_top]
        indices += [start_faces + i * 2 + 1, start_faces + next_bottom, bottom_middle]

    return MeshData(vertices, indices)


def generate_sphere(parallel_count: int = 10, meridian_count: int = 10) -> MeshData:
    """Build a unit UV sphere from poles, parallels and meridians."""
    vertices = [Vertex((0.0, 1.0, 0.0), (0.0, 1.0, 0.0))]
    for i in range(parallel_count - 1):
        phi = math.pi * (i + 1) / parallel_count
        for j in range(meridian_count):
            theta = 2.0 * math.pi * j / meridian_count
            pos = (
                math.sin(phi) * math.cos(theta),
                math.cos(phi),
                math.sin(phi) * math.sin(theta),
            )
            vertices.append(Vertex(pos, _normalize(pos)))
    vertices.append(Vertex((0.0, -1.0, 0.0), (0.0, -1.0, 0.0)))

    bottom = len(vertices) - 1
    last_ring = meridian_count * (parallel_count - 2) + 1
    indices: list[int] = []
    for i in range(meridian_count):
        following = (i + 1) % meridian_count
        indices += [0, i + 1, following + 1]
        indices += [bottom, i + last_ring, following + last_ring]

    for j in range(parallel_count - 2):
        j0 = j * meridian_count + 1
        j1 = (j + 1) * meridian_count + 1
        for i in range(meridian_count):
            following = (i + 1) % meridian_count
            i0, i1 = j0 + i, j0 + following
            i2, i3 = j1 + following, j1 + i
            indices += [i0, i1, i2]
            indices += [i3, i0, i2]

    return MeshData(vertices, indices)


def generate_quad() -> MeshData:
    """Build a unit square in the xy plane facing +z."""
    normal: Vec3 = (0.0, 0.0, 1.0)
    vertices = [
        Vertex((-0.5, -0.5, 0.0), normal, (0.0, 0.0)),
        Vertex((0.5, -0.5, 0.0), normal, (1.0, 0.0)),
        Vertex((0.5, 0.5, 0.0), normal, (1.0, 1.0)),
        Vertex((-0.5, 0.5, 0.0), normal, (0.0, 1.0)),
    ]
    return MeshData(vertices, [1, 2, 0, 2, 3, 0])