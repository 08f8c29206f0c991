"""Milling tool that carves a height map while following a path."""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Sequence
from enum import Enum

from millsim.bresenham import bresenham

Vec3 = tuple[float, float, float]

_TICK = 0.01

MIN_HEIGHT_ERROR = "Mill has crossed min height limit"
TOO_STEEP_ERROR = "Mill path too steep"
NON_CUTTING_ERROR = "Milling with a non-cutting part"


class MillType(Enum):
    """Shape of the cutting end of the tool."""

    FLAT = "flat"
    SPHERICAL = "spherical"


class MillError(Exception):
    """Raised when a move cannot be milled."""


def _vec(p: Sequence[float]) -> Vec3:
    return (float(p[0]), float(p[1]), float(p[2]))


def _sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _along(origin: Vec3, t: float, direction: Vec3) -> Vec3:
    return (
        origin[0] + t * direction[0],
        origin[1] + t * direction[1],
        origin[2] + t * direction[2],
    )


def _length(v: Vec3) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


class Mill:
    """A cutter with a path, able to mill it step by step or in a worker thread."""

    def __init__(
        self,
        height: float,
        radius: float,
        position: Sequence[float],
        velocity: float,
        max_descend_angle: float,
        min_height: float,
    ) -> None:
        self.type = MillType.SPHERICAL
        self.height = float(height)
        self.radius = float(radius)
        self.velocity = float(velocity)
        self.max_descend_angle = float(max_descend_angle)
        self.min_height = float(min_height)

        self._position_lock = threading.Lock()
        self._height_map_lock = threading.Lock()
        self._position: Vec3 = _vec(position)

        self.path: list[Vec3] = []
        self.current_point = 0
        self.t_mill_path = 0.0

        self._thread: threading.Thread | None = None
        self._thread_running = False
        self._thread_finished = False
        self._stop = threading.Event()
        self._thread_error = False
        self._error_message = "OK"

    @property
    def position(self) -> Vec3:
        with self._position_lock:
            return self._position

    @position.setter
    def position(self, value: Sequence[float]) -> None:
        with self._position_lock:
            self._position = _vec(value)

    @property
    def thread_running(self) -> bool:
        return self._thread_running

    @property
    def thread_finished(self) -> bool:
        return self._thread_finished

    def set_path(self, path: Sequence[Sequence[float]]) -> None:
        """Replace the path and rewind to its start."""
        self.path = [_vec(p) for p in path]
        self.current_point = 0
        self.t_mill_path = 0.0

    def reset(self) -> None:
        """Rewind to the start of the path."""
        self.t_mill_path = 0.0
        self.current_point = 0

    def path_finished(self) -> bool:
        return bool(self.path) and self.current_point == len(self.path) - 1

    def advance(self, height_map, base_dimensions: Sequence[float], delta_time: float) -> None:
        """Move along the path by ``velocity * delta_time``, milling on the way."""
        if not self.path or self.current_point == len(self.path) - 1:
            return
        amount_left = self.velocity * delta_time
        while amount_left > 0:
            curr = self.path[self.current_point]
            nxt = self.path[self.current_point + 1]
            direction = _sub(nxt, curr)
            distance = _length(direction)
            t_increment = amount_left / distance if distance else math.inf
            t = self.t_mill_path
            if t + t_increment > 1:
                self.mill(height_map, base_dimensions, _along(curr, t, direction), nxt)
                self.current_point += 1
                self.t_mill_path = 0.0
                if self.current_point == len(self.path) - 1:
                    self.position = nxt
                    break
                amount_left -= distance
                continue
            amount_left = 0
            self.t_mill_path += t_increment
            end = _along(curr, self.t_mill_path, direction)
            self.mill(height_map, base_dimensions, _along(curr, t, direction), end)
            self.position = end

    def _cut_height(self, base_height: float, radius2: float) -> float:
        if self.type is MillType.FLAT:
            return base_height
        rest = self.radius * self.radius - radius2
        if rest < 0:
            return math.nan
        return base_height + self.radius - math.sqrt(rest)

    def _lower(self, height_map, row: int, col: int, value: float) -> None:
        with self._height_map_lock:
            height_map[row][col] = value

    def mill(self, height_map, base_dimensions: Sequence[float], p1: Sequence[float], p2: Sequence[float]) -> None:
        """Carve the move from ``p1`` to ``p2`` into ``height_map[row][col]``."""
        p1 = _vec(p1)
        p2 = _vec(p2)
        direction = _sub(p2, p1)

        if p2[1] < self.min_height:
            raise MillError(MIN_HEIGHT_ERROR)
        length = _length(direction)
        descend_angle = -direction[1] / length if length else math.nan
        too_steep = descend_angle > self.max_descend_angle and self.type is MillType.FLAT

        rows = len(height_map)
        cols = len(height_map[0])
        bx, bz = float(base_dimensions[0]), float(base_dimensions[2])

        def grid_x(col: int) -> float:
            return col / cols * bx - bx / 2.0

        def grid_z(row: int) -> float:
            return row / rows * bz - bz / 2.0

        p1_col = int((p1[0] + bx / 2.0) / bx * cols)
        p1_row = int((p1[2] + bz / 2.0) / bz * rows)
        p2_col = int((p2[0] + bx / 2.0) / bx * cols)
        p2_row = int((p2[2] + bz / 2.0) / bz * rows)

        rx = int(self.radius / bx * cols + 2)
        rz = int(self.radius / bz * rows + 2)
        radius_sq = self.radius * self.radius

        for col in range(max(p1_col - rx, 0), min(p1_col + rx, cols - 1) + 1):
            for row in range(max(p1_row - rz, 0), min(p1_row + rz, rows - 1) + 1):
                r2 = (grid_x(col) - p1[0]) ** 2 + (grid_z(row) - p1[2]) ** 2
                if r2 >= radius_sq:
                    continue
                point_height = self._cut_height(p1[1], r2)
                current = height_map[row][col]
                if current > point_height:
                    if too_steep:
                        raise MillError(TOO_STEEP_ERROR)
                    if current - point_height > self.height:
                        raise MillError(NON_CUTTING_ERROR)
                    self._lower(height_map, row, col, point_height)

        perp_x, perp_z = -direction[2], direction[0]
        perp_len = math.hypot(perp_x, perp_z)
        if not perp_len or not math.isfinite(perp_len):
            return
        perp_x /= perp_len
        perp_z /= perp_len

        offset_x, offset_z = int(perp_x * rx), int(perp_z * rz)
        bottom = (p1_col - offset_x, p1_row - offset_z)
        top = (p1_col + offset_x, p1_row + offset_z)
        diff_x, diff_z = p2_col - p1_col, p2_row - p1_row
        ab_x, ab_z = direction[0], direction[2]
        length_sq_ab = ab_x * ab_x + ab_z * ab_z

        error = False
        message = ""
        for x, y, _ in bresenham(bottom[0], bottom[1], top[0], top[1]):
            gx, gz = grid_x(x), grid_z(y)
            r2 = (gx - p1[0]) ** 2 + (gz - p1[2]) ** 2
            for ix, iy, _ in bresenham(x, y, x + diff_x, y + diff_z):
                if ix < 0 or ix >= cols or iy < 0 or iy >= rows:
                    continue
                ap_x, ap_z = grid_x(ix) - gx, grid_z(iy) - gz
                t = (ap_x * ab_x + ap_z * ab_z) / length_sq_ab
                if t > 1:
                    continue
                point_height = self._cut_height(p1[1] + t * direction[1], r2)
                current = height_map[iy][ix]
                if current > point_height:
                    if too_steep:
                        message = TOO_STEEP_ERROR
                        continue
                    if current - point_height > self.height:
                        error = True
                        message = NON_CUTTING_ERROR
                        continue
                    self._lower(height_map, iy, ix, point_height)
        if error:
            raise MillError(message)

    def run_instant(self, height_map, base_dimensions: Sequence[float]) -> None:
        """Mill the rest of the path at once, segment by segment."""
        while not self._stop.is_set() and self.current_point < len(self.path) - 1:
            start = self.path[self.current_point]
            end = self.path[self.current_point + 1]
            self.mill(height_map, base_dimensions, start, end)
            self.position = end
            self.current_point += 1

    def _run_milling(self, height_map, base_dimensions: Sequence[float]) -> None:
        while (
            not self._stop.is_set()
            and self.path
            and self.current_point != len(self.path) - 1
        ):
            self.advance(height_map, base_dimensions, _TICK)
            time.sleep(_TICK)

    def _worker(self, work, height_map, base_dimensions) -> None:
        try:
            work(height_map, base_dimensions)
        except MillError as exc:
            self._error_message = str(exc)
            self._thread_error = True
        finally:
            self._thread_finished = True
            self._thread_running = False

    def _start(self, work, height_map, base_dimensions) -> None:
        if self._thread_running:
            raise RuntimeError("the mill is already running")
        self._thread_running = True
        self._thread_finished = False
        self._stop.clear()
        self._thread_error = False
        self._thread = threading.Thread(
            target=self._worker, args=(work, height_map, base_dimensions), daemon=True
        )
        self._thread.start()

    def start_instant(self, height_map, base_dimensions: Sequence[float]) -> None:
        """Mill the rest of the path at once in a background thread."""
        self._start(self.run_instant, height_map, base_dimensions)

    def start_milling(self, height_map, base_dimensions: Sequence[float]) -> None:
        """Mill the path in real time in a background thread."""
        self._start(self._run_milling, height_map, base_dimensions)

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for the worker thread; return whether it has finished."""
        if self._thread is not None:
            self._thread.join(timeout)
        return self._thread_finished

    def signal_stop(self) -> None:
        self._stop.set()

    def check_error(self) -> str | None:
        """Return the error of the last run, if there was one."""
        return self._error_message if self._thread_error else None

    def clear_error(self) -> None:
        self._thread_error = False
        self._error_message = "OK"