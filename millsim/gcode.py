"""Reading and writing linear-move G-code paths."""

from __future__ import annotations

import re
from collections.abc import Iterable
from os import PathLike

Point = tuple[float, float, float]

_MOVE = re.compile(r"G01")
_X = re.compile(r"X(-?[0-9]+\.[0-9]+)")
_Y = re.compile(r"Y(-?[0-9]+\.[0-9]+)")
_Z = re.compile(r"Z(-?[0-9]+\.[0-9]+)")


def parse_gcode_lines(lines: Iterable[str]) -> list[Point]:
    """Collect the points of every ``G01`` line.

    Machine coordinates (X, Y, Z) become scene points (X, Z, -Y).  A
    coordinate missing from a line keeps its previous value, starting at 0.
    """
    x = y = z = 0.0
    points: list[Point] = []
    for line in lines:
        if not _MOVE.search(line):
            continue
        if match := _X.search(line):
            x = float(match.group(1))
        if match := _Y.search(line):
            y = float(match.group(1))
        if match := _Z.search(line):
            z = float(match.group(1))
        points.append((x, z, -y))
    return points


def parse_gcode(path: str | PathLike[str]) -> list[Point]:
    """Read a G-code file and return its path in scene coordinates."""
    with open(path, encoding="ascii", errors="replace") as handle:
        return parse_gcode_lines(handle)


def format_gcode(points: Iterable[Point], newline: str = "\r\n") -> str:
    """Render scene points as numbered ``G01`` lines with three decimals."""
    return "".join(
        f"N{number}G01X{x:.3f}Y{-z:.3f}Z{y:.3f}{newline}"
        for number, (x, y, z) in enumerate(points, start=1)
    )


def export_gcode(path: str | PathLike[str], points: Iterable[Point]) -> None:
    """Write scene points to a G-code file with CRLF line endings."""
    with open(path, "w", encoding="ascii", newline="") as handle:
        handle.write(format_gcode(points))