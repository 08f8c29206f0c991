"""Integer line rasterisation in two and three dimensions."""

from __future__ import annotations

import math
from collections.abc import Iterator

Pixel = tuple[int, int, float]
Voxel = tuple[int, int, int]


def _line_low(x1: int, y1: int, x2: int, y2: int) -> Iterator[Pixel]:
    dx, dy = x2 - x1, y2 - y1
    yi = 1
    if dy < 0:
        yi = -1
        dy = -dy
    d = 2 * dy - dx
    y = y1
    for x in range(x1, x2 + 1):
        yield x, y, (x - x1) / (x2 - x1)
        if d > 0:
            y += yi
            d -= 2 * dx
        d += 2 * dy


def _line_high(x1: int, y1: int, x2: int, y2: int) -> Iterator[Pixel]:
    dx, dy = x2 - x1, y2 - y1
    xi = 1
    if dx < 0:
        xi = -1
        dx = -dx
    d = 2 * dx - dy
    x = x1
    for y in range(y1, y2 + 1):
        t = (y - y1) / (y2 - y1) if y2 != y1 else math.nan
        yield x, y, t
        if d > 0:
            x += xi
            d -= 2 * dy
        d += 2 * dx


def bresenham(x1: int, y1: int, x2: int, y2: int) -> Iterator[Pixel]:
    """Yield ``(x, y, t)`` for every pixel on the segment.

    Pixels are produced along increasing x (shallow lines) or increasing y
    (steep lines); ``t`` is the fraction along that driving axis.  A line
    of a single pixel yields ``t`` as NaN.
    """
    dx = x2 - x1
    dy = y2 - y1
    if abs(dy) < abs(dx):
        if dx < 0:
            yield from _line_low(x2, y2, x1, y1)
        else:
            yield from _line_low(x1, y1, x2, y2)
    elif dy < 0:
        yield from _line_high(x2, y2, x1, y1)
    else:
        yield from _line_high(x1, y1, x2, y2)


def bresenham_3d(x1: int, y1: int, z1: int, x2: int, y2: int, z2: int) -> list[Voxel]:
    """Return the voxels from the start point to the end point, both included."""
    points: list[Voxel] = [(x1, y1, z1)]
    dx, dy, dz = abs(x2 - x1), abs(y2 - y1), abs(z2 - z1)
    xs = 1 if x2 > x1 else -1
    ys = 1 if y2 > y1 else -1
    zs = 1 if z2 > z1 else -1

    if dx >= dy and dx >= dz:
        p1 = 2 * dy - dx
        p2 = 2 * dz - dx
        while x1 != x2:
            x1 += xs
            if p1 >= 0:
                y1 += ys
                p1 -= 2 * dx
            if p2 >= 0:
                z1 += zs
                p2 -= 2 * dx
            p1 += 2 * dy
            p2 += 2 * dz
            points.append((x1, y1, z1))
    elif dy >= dx and dy >= dz:
        p1 = 2 * dx - dy
        p2 = 2 * dz - dy
        while y1 != y2:
            y1 += ys
            if p1 >= 0:
                x1 += xs
                p1 -= 2 * dy
            if p2 >= 0:
                z1 += zs
                p2 -= 2 * dy
            p1 += 2 * dx
            p2 += 2 * dz
            points.append((x1, y1, z1))
    else:
        p1 = 2 * dy - dz
        p2 = 2 * dx - dz
        while z1 != z2:
            z1 += zs
            if p1 >= 0:
                y1 += ys
                p1 -= 2 * dz
            if p2 >= 0:
                x1 += xs
                p2 -= 2 * dz
            p1 += 2 * dy
            p2 += 2 * dx
            points.append((x1, y1, z1))
    return points