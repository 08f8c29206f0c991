"""Preparation of the model's helper outlines before path generation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TypeVar

T = TypeVar("T")

REVERSED_OUTLINES: tuple[str, ...] = (
    "tail5", "tail6", "tail3", "tail4", "tail7", "tail8", "butt1", "butt2", "butt3",
)
BODY_FIN_PARTS: tuple[str, ...] = tuple(f"body_fin{i}" for i in range(1, 9))
BUTT_TAIL_PARTS: tuple[str, ...] = tuple(f"butt_tail{i}" for i in range(1, 5))
BODY_TAIL_PARTS: tuple[str, ...] = tuple(str(i) for i in range(1, 29))


def split_half(points: Iterable[T]) -> tuple[list[T], list[T]]:
    """Split a sequence in two; an odd middle element goes to the second half."""
    items = list(points)
    middle = len(items) // 2
    return items[:middle], items[middle:]


def _joined(outlines: Mapping[str, Sequence[T]], parts: Sequence[str]) -> list[T]:
    return [point for part in parts for point in outlines.get(part, ())]


def prepare_outlines(outlines: Mapping[str, Sequence[T]]) -> dict[str, list[T]]:
    """Return a copy of the outlines with the derived ones the path generators use.

    Some tail and butt outlines are reversed, the pieces of the body/fin,
    butt/tail and body/tail intersections are joined, and the wings and fin
    outlines are split into top and bottom halves.  Missing outlines count
    as empty.
    """
    result = {name: list(points) for name, points in outlines.items()}
    for name in REVERSED_OUTLINES:
        result[name] = list(reversed(result.get(name, [])))
    result["body_fin"] = _joined(result, BODY_FIN_PARTS)
    result["butt_tail"] = _joined(result, BUTT_TAIL_PARTS)
    result["body_tail"] = _joined(result, BODY_TAIL_PARTS)
    result["wings_top"], result["wings_bottom"] = split_half(result.get("wings", []))
    result["fin_top"], result["fin_bottom"] = split_half(result.get("fin", []))
    return result