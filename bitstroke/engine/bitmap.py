"""Reference 1-bit pixel buffer.

The engine never allocates pixels itself; it writes through any object
satisfying PixelBuffer. Bitmap is the in-process implementation used by
tests, the replay CLI and simple hosts.

Layout:
    - pixels: (H, W) uint8, 1 = ink, 0 = paper
    - alpha:  (H, W) uint8, 1 = opaque, 0 = transparent
    - Row-major, top-left origin, +Y down

Bitmap does not clip: writing outside the planes raises IndexError. The
brush rasterizer is responsible for bounds checks.
"""

from typing import Optional, Protocol, Tuple

import numpy as np


class PixelBuffer(Protocol):
    """What the engine needs from a host bitmap."""

    width: int
    height: int

    def set_pixel(self, x: int, y: int, draw: int, alpha: int) -> None:
        ...


class Bitmap:
    """Numpy-backed draw/alpha planes with dirty-rectangle tracking.

    Attributes
    ----------
    width, height : int
        Size in pixels
    pixels : np.ndarray
        Draw bits, shape (height, width), uint8
    alpha : np.ndarray
        Opacity bits, shape (height, width), uint8
    writes : int
        Number of set_pixel calls since creation
    """

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"Bitmap size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width), dtype=np.uint8)
        self.alpha = np.zeros((height, width), dtype=np.uint8)
        self.writes = 0
        self._dirty: Optional[list] = None

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_pixel(self, x: int, y: int, draw: int, alpha: int) -> None:
        """Write one draw bit and one opacity bit.

        Raises
        ------
        IndexError
            If (x, y) is outside the bitmap
        """
        if not self.in_bounds(x, y):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} bitmap")
        self.pixels[y, x] = draw
        self.alpha[y, x] = alpha
        self.writes += 1

        if self._dirty is None:
            self._dirty = [x, y, x, y]
        else:
            d = self._dirty
            if x < d[0]:
                d[0] = x
            elif x > d[2]:
                d[2] = x
            if y < d[1]:
                d[1] = y
            elif y > d[3]:
                d[3] = y

    def get_pixel(self, x: int, y: int) -> Tuple[int, int]:
        """(draw, alpha) at (x, y)."""
        if not self.in_bounds(x, y):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} bitmap")
        return int(self.pixels[y, x]), int(self.alpha[y, x])

    def dirty_rect(self) -> Optional[Tuple[int, int, int, int]]:
        """Inclusive (x0, y0, x1, y1) of pixels written since the last clear."""
        return tuple(self._dirty) if self._dirty is not None else None

    def clear_dirty(self) -> None:
        self._dirty = None

    def opaque_pixels(self) -> set:
        """Set of (x, y) whose alpha bit is set."""
        ys, xs = np.nonzero(self.alpha)
        return set(zip(xs.tolist(), ys.tolist()))

    def to_ascii(self, ink: str = '#', paper: str = '.', clear: str = ' ') -> str:
        """Render as text, one row per line; transparent pixels use clear."""
        rows = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                if not self.alpha[y, x]:
                    row.append(clear)
                else:
                    row.append(ink if self.pixels[y, x] else paper)
            rows.append(''.join(row))
        return '\n'.join(rows)
