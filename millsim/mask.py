"""RGBA image sampled by texture coordinates."""

from __future__ import annotations

from os import PathLike

import numpy as np
from PIL import Image

Color = tuple[int, int, int, int]


class IntersectionMask:
    """Colour regions of a parameter space, looked up by ``(u, v)``."""

    channels = 4

    def __init__(self, pixels) -> None:
        array = np.asarray(pixels, dtype=np.uint8)
        if array.ndim != 3 or array.shape[2] != self.channels:
            raise ValueError(f"expected an array of shape (height, width, 4), got {array.shape}")
        self.pixels = array
        self.height, self.width = array.shape[:2]

    @classmethod
    def from_file(cls, path: str | PathLike[str]) -> IntersectionMask:
        """Load an image file, converted to RGBA."""
        with Image.open(path) as image:
            return cls(np.array(image.convert("RGBA")))

    def sample(self, u: float, v: float) -> Color:
        """Return the colour at ``(u, v)``, or all zeros outside the image."""
        idx = int(u * float(self.width))
        idy = int(v * float(self.height))
        if idx < 0 or idy < 0 or idx >= self.width or idy >= self.height:
            return (0, 0, 0, 0)
        r, g, b, a = (int(c) for c in self.pixels[idy, idx])
        return (r, g, b, a)