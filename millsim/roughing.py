"""Roughing tool paths read from a top-down depth rendering of the model."""

from __future__ import annotations

import numpy as np

Vec3 = tuple[float, float, float]

SAFE_HEIGHT = 66.0
HOME: Vec3 = (0.0, SAFE_HEIGHT, 0.0)
BASE_SIZE = 150.0
MIN_MODEL_HEIGHT = 15.0
MAX_MODEL_HEIGHT = 50.0
K16_RADIUS = 8.0
F10_RADIUS = 5.0

_START = -87.0
_END = 87.0
_K16_DEPTHS = (35.0, 20.0)
_K16_BASE_MARGIN = 12.0
_K16_HEIGHT_MARGIN = 2.0
_F10_DEPTH = 15.0
_F10_RADIUS_MARGIN = 3.0


def depth_to_height(value: float) -> float:
    """Convert a depth-buffer value to a model height; cleared or empty depth gives 0."""
    value = float(value)
    if 0.0 < value < 1.0:
        return (1.0 - value) * (MAX_MODEL_HEIGHT - MIN_MODEL_HEIGHT) + MIN_MODEL_HEIGHT
    return 0.0


def _heights(depth: np.ndarray) -> np.ndarray:
    inside = (depth > 0.0) & (depth < 1.0)
    scaled = (1.0 - depth) * (MAX_MODEL_HEIGHT - MIN_MODEL_HEIGHT) + MIN_MODEL_HEIGHT
    return np.where(inside, scaled, 0.0)


def _as_depth(depth) -> np.ndarray:
    array = np.asarray(depth, dtype=np.float64)
    if array.ndim != 2 or array.size == 0:
        raise ValueError(f"expected a non-empty 2D depth buffer, got shape {array.shape}")
    return array


def _window_max(heights: np.ndarray, x0: int, y0: int, width: int, height: int) -> float:
    """Highest value in a pixel window; pixels outside the buffer count as 0."""
    if width <= 0 or height <= 0:
        raise ValueError("sampling window is empty")
    rows, cols = heights.shape
    xa, xb = max(x0, 0), min(x0 + width, cols)
    ya, yb = max(y0, 0), min(y0 + height, rows)
    if xa >= xb or ya >= yb:
        return 0.0
    return float(heights[ya:yb, xa:xb].max())


def _max_height(heights: np.ndarray, x: float, y: float, radius: float, radius_margin: float) -> float:
    rows, cols = heights.shape
    hm_x = int((x + BASE_SIZE / 2) * cols / BASE_SIZE)
    hm_y = int((y + BASE_SIZE / 2) * rows / BASE_SIZE)
    res_x = int(2 * (radius + radius_margin) * cols / BASE_SIZE)
    res_y = int(2 * (radius + radius_margin) * rows / BASE_SIZE)
    return _window_max(heights, hm_x - res_x // 2, hm_y - res_y // 2, res_x, res_y)


def max_height(depth, x: float, y: float, radius: float, radius_margin: float = 0.0) -> float:
    """Return the highest model point under a tool of ``radius + radius_margin`` at ``(x, y)``.

    ``depth`` is indexed ``[row][column]``; the base spans 150 units centred on the origin.
    """
    return _max_height(_heights(_as_depth(depth)), x, y, radius, radius_margin)


def k16_path(depth) -> list[Vec3]:
    """Zigzag roughing path for the 16 mm ball cutter in two passes (35 and 20)."""
    heights = _heights(_as_depth(depth))
    rows, cols = heights.shape
    steps = cols // 4
    if steps == 0:
        raise ValueError("depth buffer is too narrow")

    between = K16_RADIUS
    tracks = int((_END - _START) / between) + 1
    advance_x = (_END - _START) / steps
    win_x = int(2 * K16_RADIUS * cols / BASE_SIZE)
    win_y = int(2 * K16_RADIUS * rows / BASE_SIZE)

    path: list[Vec3] = [HOME]
    mill = [_START, SAFE_HEIGHT, _START]
    path.append((mill[0], mill[1], mill[2]))
    dir_x = 1
    dir_z = 1
    for pass_depth in _K16_DEPTHS:
        for track in range(tracks):
            for step in range(steps):
                hm_x = int((step * advance_x - _K16_BASE_MARGIN) * cols / BASE_SIZE)
                hm_y = int((track * between - _K16_BASE_MARGIN) * rows / BASE_SIZE)
                if dir_x == -1:
                    hm_x = cols - hm_x
                if dir_z == -1:
                    hm_y = rows - hm_y
                value = _window_max(heights, hm_x - win_x // 2, hm_y - win_y // 2, win_x, win_y)
                raised = value + _K16_HEIGHT_MARGIN
                mill[1] = raised if raised > pass_depth else pass_depth
                mill[0] += dir_x * advance_x
                if raised > pass_depth:
                    path.append((mill[0], mill[1], mill[2]))
            path.append((mill[0], mill[1], mill[2]))
            mill[2] += dir_z * between
            path.append((mill[0], mill[1], mill[2]))
            dir_x = -dir_x
        dir_z = -dir_z

    path.append((_START, SAFE_HEIGHT, _START))
    path.append(HOME)
    return path


def _move_x(dir_x: int, advance: float, angle: int) -> Vec3:
    d = dir_x * advance
    return ((d, 0.0, 0.0), (0.0, 0.0, -d), (-d, 0.0, 0.0), (0.0, 0.0, d))[angle]


def _move_y(angle: int) -> Vec3:
    b = F10_RADIUS
    return ((0.0, 0.0, b), (b, 0.0, 0.0), (0.0, 0.0, -b), (-b, 0.0, 0.0))[angle]


def _shift(point: list[float], delta: Vec3, sign: float = 1.0) -> list[float]:
    return [point[0] + sign * delta[0], point[1] + sign * delta[1], point[2] + sign * delta[2]]


def f10_path(depth) -> list[Vec3]:
    """Flat-cutter path around the model at base height, swept from three sides."""
    heights = _heights(_as_depth(depth))
    rows, cols = heights.shape
    between = F10_RADIUS
    level = _F10_DEPTH

    def height_at(point: list[float]) -> float:
        return _max_height(heights, point[0], point[2], F10_RADIUS, _F10_RADIUS_MARGIN)

    path: list[Vec3] = [HOME]

    def emit(point: list[float]) -> None:
        path.append((point[0], point[1], point[2]))

    start_x = _START
    mill = [0.0, 0.0, 0.0]
    for angle in range(3):
        if angle == 0:
            start_z = _START + 18.0
            mill = [start_x, SAFE_HEIGHT, start_z]
            emit(mill)
            mill[1] = level
            emit(mill)
            tracks = int((60.0 - start_z) / between) + 1
            advance = (_END - start_x) / cols
        elif angle == 1:
            start_z = _START
            mill = [start_x, level, -start_z]
            emit(mill)
            mill = _shift(mill, (15.0, 0.0, 0.0))
            emit(mill)
            tracks = int((60.0 - mill[0]) / between) + 1
            advance = (80.0 - start_z) / rows
        else:
            start_z = -70.0
            mill = [_END, level, -start_z]
            emit(mill)
            tracks = int((70.0 - start_z) / between) + 1
            advance = (_END - start_x) / cols
        dir_x = 1

        track = 0
        while track < tracks:
            x = 0
            while 0 <= x < cols:
                if height_at(mill) > level:
                    emit(mill)
                    track += 1
                    mill = _shift(mill, _move_y(angle))
                    step = _move_x(dir_x, advance, angle)
                    if height_at(mill) > level:
                        while height_at(mill) > level:
                            x -= dir_x
                            mill = _shift(mill, step, -1.0)
                            if x < 0 or x > cols:
                                break
                    else:
                        while height_at(mill) <= level:
                            x += dir_x
                            mill = _shift(mill, step)
                            if x < 0 or x > cols:
                                break
                        x -= dir_x
                        mill = _shift(mill, step, -1.0)
                    emit(mill)
                    dir_x = -dir_x
                mill = _shift(mill, _move_x(dir_x, advance, angle))
                x += dir_x
            emit(mill)
            mill = _shift(mill, _move_y(angle))
            emit(mill)
            dir_x = -dir_x
            track += 1

    mill[1] = SAFE_HEIGHT
    emit(mill)
    path.append(HOME)
    return path