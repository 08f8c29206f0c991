"""Grid of material heights over the milling base."""

from __future__ import annotations

import numpy as np


class HeightMap:
    """Heights stored as ``data[i][j]`` with ``i < size[0]`` and ``j < size[1]``."""

    def __init__(self, size: tuple[int, int], default_value: float) -> None:
        self.size: tuple[int, int] = (0, 0)
        self.max_value: float = 0.0
        self.data: np.ndarray = np.zeros((0, 0))
        self.resize(size, default_value)

    def resize(self, size: tuple[int, int], default_value: float) -> None:
        """Replace the grid by one of the given size filled with ``default_value``."""
        size_x, size_y = int(size[0]), int(size[1])
        if size_x < 0 or size_y < 0:
            raise ValueError(f"height map size must not be negative: {size!r}")
        self.size = (size_x, size_y)
        self.max_value = float(default_value)
        self.data = np.full((size_x, size_y), self.max_value, dtype=np.float64)

    def normalized(self) -> np.ndarray:
        """Return heights divided by ``max_value``, laid out as ``[j][i]``."""
        with np.errstate(divide="ignore", invalid="ignore"):
            return (self.data.T / self.max_value).astype(np.float32)