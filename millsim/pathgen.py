"""Finishing tool paths built from outlines, intersection masks and surfaces."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Protocol

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]

SAFE_HEIGHT = 66.0
HOME: Vec3 = (0.0, SAFE_HEIGHT, 0.0)
BASE_HEIGHT = 15.0
F10_RADIUS = 5.0
K08_RADIUS = 4.0

F10_OUTLINE_ORDER: tuple[str, ...] = (
    "body_top",
    "wings_top",
    "wings_bottom",
    "body_top",
    "fin_top",
    "fin_bottom",
    "body_top",
    "tail6",
    "tail7",
    "tail8",
    "tail2",
    "butt3",
    "butt2",
    "tail4",
    "tail3",
    "tail5",
    "body_bottom",
    "bottom_fin_bottom",
    "bottom_fin_top",
    "body_bottom",
    "eye_bottom",
    "nose_bottom",
    "nose_top",
    "eye_top",
)

K08_MASK_ORDER: tuple[str, ...] = (
    "butt", "tail", "wings", "bottom_fin", "fin", "nose", "bottom_eye", "top_eye", "body",
)

K08_START_CURSORS: dict[str, tuple[Vec2, ...]] = {
    "butt": ((100 / 256, 30 / 255),),
    "tail": ((130 / 256, 70 / 255), (190 / 256, 105 / 255), (90 / 256, 30 / 255)),
    "wings": ((100 / 256, 20 / 255), (100 / 256, 230 / 255)),
    "bottom_fin": ((151 / 256, 9 / 255), (151 / 256, 241 / 255)),
    "fin": ((110 / 256, 160 / 255),),
    "nose": ((151 / 256, 40 / 255), (220 / 256, 250 / 255)),
    "bottom_eye": ((123 / 256, 80 / 255),),
    "top_eye": ((123 / 256, 80 / 255),),
    "body": (
        (20 / 256, 10 / 256),
        (146 / 256, 2 / 256),
        (136 / 256, 251 / 256),
        (1 / 256, 244 / 256),
        (50 / 256, 90 / 256),
        (193 / 256, 252 / 256),
    ),
}

_OUTLINE_EPSILON = 0.5
_U_STEP = 0.015
_V_STEP = 0.005
_MAX_MASK_STEPS = 500_000


class _Surface(Protocol):
    def range_u(self) -> float: ...

    def range_v(self) -> float: ...

    def evaluate_tool(self, u: float, v: float, radius: float) -> Vec3: ...


class _Mask(Protocol):
    def sample(self, u: float, v: float) -> tuple[int, int, int, int]: ...


def _vec3(p: Sequence[float]) -> Vec3:
    return (float(p[0]), float(p[1]), float(p[2]))


def _flat(p: Vec3) -> Vec2:
    return (p[0], p[2])


def _lifted(p: Sequence[float]) -> Vec3:
    return (float(p[0]), SAFE_HEIGHT, float(p[2]))


def _check_every_nth(every_nth: int) -> None:
    if every_nth <= 0:
        raise ValueError(f"every_nth must be positive, got {every_nth}")


def segments_intersect(
    a1: Sequence[float], a2: Sequence[float], b1: Sequence[float], b2: Sequence[float]
) -> bool:
    """Tell whether the 2D segments ``a1-a2`` and ``b1-b2`` cross; parallel ones never do."""
    rx, ry = a2[0] - a1[0], a2[1] - a1[1]
    sx, sy = b2[0] - b1[0], b2[1] - b1[1]
    qx, qy = b1[0] - a1[0], b1[1] - a1[1]
    denominator = rx * sy - ry * sx
    if denominator == 0:
        return False
    t = (qx * sy - qy * sx) / denominator
    u = (qx * ry - qy * rx) / denominator
    return 0 <= t <= 1 and 0 <= u <= 1


def outside_range(cursor: Sequence[float]) -> bool:
    """Tell whether a mask cursor has left the unit square through a corner region."""
    x, y = cursor[0], cursor[1]
    y_out = y < 0 or y >= 1
    return (x < 0 and y_out) or (x >= 1 and y_out)


def analytical_f10_path(
    outlines: Mapping[str, Sequence[Sequence[float]]],
    order: Sequence[str] = F10_OUTLINE_ORDER,
    every_nth: int = 1,
) -> list[Vec3]:
    """Follow the named outlines in turn, jumping to the next one where they meet.

    An outline is left where one of its segments crosses a segment of the
    next outline (seen from above), or where its last point lies within 0.5
    of a point of the next one; the next outline is then entered there.
    A missing outline counts as empty.
    """
    _check_every_nth(every_nth)
    lines = [[_vec3(p) for p in outlines.get(name, ())] for name in order]
    path: list[Vec3] = [HOME, (-87.0, SAFE_HEIGHT, -87.0), (-87.0, BASE_HEIGHT, -87.0)]

    counter = 0
    skip = False
    j = 0
    for i, current in enumerate(lines):
        if not skip:
            j = 0
        skip = False
        following = lines[i + 1] if i + 1 < len(lines) else None
        n1 = len(current)
        while j < n1:
            point = current[j]
            next_point = current[(j + 1) % n1]
            if following is not None and j != n1 - 1:
                n2 = len(following)
                for k in range(n2 - 1):
                    if segments_intersect(
                        _flat(point), _flat(next_point),
                        _flat(following[k]), _flat(following[(k + 1) % n2]),
                    ):
                        skip = True
                        j = (k + 1) % n2
                        break
            if following is not None and j == n1 - 1:
                for k, other in enumerate(following):
                    if math.dist(point, other) < _OUTLINE_EPSILON:
                        skip = True
                        j = k + 1
                        break
            if skip:
                break
            if counter % every_nth == 0:
                path.append(point)
            counter += 1
            j += 1

    path.append(_lifted(path[-1]))
    path.append(HOME)
    return path


def eye_path(
    inside_bottom: Sequence[Sequence[float]],
    inside_top: Sequence[Sequence[float]],
    every_nth: int = 1,
) -> list[Vec3]:
    """Spiral down the inner outline in three passes, then trace it at its own height."""
    _check_every_nth(every_nth)
    bottom = [_vec3(p) for p in inside_bottom]
    top = [_vec3(p) for p in inside_top]
    if not bottom:
        raise ValueError("the bottom inner outline is empty")

    path: list[Vec3] = [HOME, _lifted(bottom[0])]
    first_depth = 45.0
    step = 10.0
    half_step = step / 2
    counter = 0

    def descend(points: list[Vec3], start_depth: float) -> None:
        nonlocal counter
        delta = half_step / (len(points) - 1) if len(points) > 1 else 0.0
        for i, p in enumerate(points):
            if i != 0:
                keep = counter % every_nth == 0
                counter += 1
                if not keep:
                    continue
            path.append((p[0], start_depth - delta * i, p[2]))

    for k in range(3):
        descend(bottom, first_depth - k * step)
        descend(top, first_depth - half_step - k * step)

    path.extend(bottom)
    path.extend(top)
    path.append(_lifted(path[-1]))
    path.append(HOME)
    return path


def _same_colour_run(mask: _Mask, cursor: list[float], colour, sign: float) -> None:
    # Beyond [-1, 2] nothing but the empty colour can be sampled.
    while mask.sample(cursor[0], cursor[1]) == colour and -1.0 <= cursor[0] <= 2.0:
        cursor[0] += sign * _U_STEP
    cursor[0] -= sign * _U_STEP


def mask_path(
    mask: _Mask,
    surface: _Surface,
    start_cursors: Sequence[Sequence[float]],
    radius: float = K08_RADIUS,
) -> list[Vec3]:
    """Zigzag over the mask region under each start cursor, milling the surface there.

    From every cursor the region of its colour is swept once upwards and
    once downwards; each sweep that yields points is entered and left at
    the safe height.  The cursor's ``y`` maps to ``u`` and ``x`` to ``v``.
    """
    path: list[Vec3] = []
    for start in start_cursors:
        cursor = [float(start[0]), float(start[1])]
        along_sign = 1.0
        perp_sign = 1.0
        colour = mask.sample(cursor[0], cursor[1])
        for _ in range(2):
            sweep: list[Vec3] = []
            for _ in range(_MAX_MASK_STEPS):
                if outside_range(cursor):
                    break
                if mask.sample(cursor[0], cursor[1]) == colour:
                    u = cursor[1] * surface.range_u()
                    v = cursor[0] * surface.range_v()
                    x, y, z = surface.evaluate_tool(u, v, -radius)
                    sweep.append((x, y - radius, z))
                    cursor[0] += along_sign * _U_STEP
                    continue
                cursor[1] += perp_sign * _V_STEP
                if mask.sample(cursor[0], cursor[1]) == colour:
                    _same_colour_run(mask, cursor, colour, along_sign)
                else:
                    old_x, old_y = cursor
                    while (
                        mask.sample(cursor[0], cursor[1]) != colour
                        and math.hypot(cursor[0] - old_x, cursor[1] - old_y) < 0.5
                    ):
                        cursor[0] -= along_sign * _U_STEP
                along_sign = -along_sign
            cursor = [float(start[0]), float(start[1])]
            along_sign = -1.0
            perp_sign = -1.0
            if sweep:
                path.append(_lifted(sweep[0]))
                path.extend(sweep)
                path.append(_lifted(sweep[-1]))
    return path


def intersection_path(
    outlines: Sequence[Sequence[Sequence[float]]],
    surfaces: Sequence[_Surface],
    radius: float = K08_RADIUS,
    every_nth: int = 1,
) -> list[Vec3]:
    """Trace curves given in surface parameters, each on its own surface.

    Every curve is entered and left at the safe height; points whose tool
    centre lies too close to the base are left out.
    """
    _check_every_nth(every_nth)
    pairs = list(zip(outlines, surfaces, strict=True))
    path: list[Vec3] = [HOME]
    counter = 0
    for outline, surface in pairs:
        last = len(outline) - 1
        for j, uv in enumerate(outline):
            x, y, z = surface.evaluate_tool(float(uv[0]), float(uv[1]), -radius)
            if j == 0:
                path.append((x, SAFE_HEIGHT, z))
            if j == last:
                path.append((x, SAFE_HEIGHT, z))
            if y < BASE_HEIGHT + radius + 1:
                continue
            if counter % every_nth == 0:
                path.append((x, y - radius, z))
            counter += 1
    path.append(_lifted(path[-1]))
    path.append(HOME)
    return path