"""Brush dab rasterization onto a 1-bit pixel buffer.

A dab covers the integer pixels around a center snapped half-up to the
pixel grid:
    - size == 1: the center pixel only
    - otherwise, with radius = size // 2, every (x, y) in the
      (2·radius+1)² square around the center; circles keep only
      offsets with dx² + dy² ≤ radius²

Offsets depend only on (size, shape) and are cached. Pixels outside the
buffer are skipped here; the buffer itself is never asked to clip.

Fill patterns:
    An 8×8 alpha tile repeated over the bitmap. For pattern bit b at
    (x mod 8, y mod 8) the written value is (primary if b else secondary, b),
    primary = draw_value, secondary = 1 - draw_value. Unknown names fall
    back to solid (draw_value, 1).
"""

from functools import lru_cache
from typing import Optional, Tuple

import numpy as np

from bitstroke.utils.geometry import round_half_up
from bitstroke.utils.validators import BrushParams, BrushShape


def _tile(*rows: str) -> np.ndarray:
    return np.array([[1 if ch == '#' else 0 for ch in row] for row in rows], dtype=np.uint8)


PATTERNS = {
    'solid-black': np.ones((8, 8), dtype=np.uint8),
    'solid-white': np.zeros((8, 8), dtype=np.uint8),
    'checkerboard': _tile(
        '##..##..', '##..##..', '..##..##', '..##..##',
        '##..##..', '##..##..', '..##..##', '..##..##',
    ),
    'diagonal-checkerboard': _tile(
        '#.#.#.#.', '.#.#.#.#', '#.#.#.#.', '.#.#.#.#',
        '#.#.#.#.', '.#.#.#.#', '#.#.#.#.', '.#.#.#.#',
    ),
    'horizontal-stripes': _tile(
        '########', '........', '########', '........',
        '########', '........', '########', '........',
    ),
    'vertical-stripes': _tile(
        '#.#.#.#.', '#.#.#.#.', '#.#.#.#.', '#.#.#.#.',
        '#.#.#.#.', '#.#.#.#.', '#.#.#.#.', '#.#.#.#.',
    ),
    'diagonal-stripes': _tile(
        '#...#...', '.#...#..', '..#...#.', '...#...#',
        '#...#...', '.#...#..', '..#...#.', '...#...#',
    ),
    'bricks': _tile(
        '########', '#...#...', '#...#...', '########',
        '..#...#.', '..#...#.', '########', '#...#...',
    ),
    'dots': _tile(
        '........', '.#...#..', '........', '...#...#',
        '........', '.#...#..', '........', '...#...#',
    ),
}


def pattern_value(name: str, x: int, y: int, primary: int) -> Tuple[int, int]:
    """(draw, alpha) that pattern `name` writes at (x, y)."""
    tile = PATTERNS.get(name)
    if tile is None:
        return primary, 1
    bit = int(tile[y % 8, x % 8])
    return (primary if bit else 1 - primary), bit


@lru_cache(maxsize=64)
def brush_offsets(size: int, shape: BrushShape) -> np.ndarray:
    """Integer (dx, dy) offsets covered by one dab.

    Parameters
    ----------
    size : int
        Brush diameter (≥ 1)
    shape : BrushShape
        CIRCLE or SQUARE

    Returns
    -------
    np.ndarray
        Offsets, shape (K, 2), int64, row-major order (dy outer, dx inner).
        Read-only: the array is shared between callers.
    """
    if size == 1:
        offsets = np.zeros((1, 2), dtype=np.int64)
    else:
        radius = size // 2
        dy, dx = np.mgrid[-radius:radius + 1, -radius:radius + 1]
        dx = dx.ravel()
        dy = dy.ravel()
        if BrushShape(shape) == BrushShape.CIRCLE:
            keep = dx * dx + dy * dy <= radius * radius
            dx, dy = dx[keep], dy[keep]
        offsets = np.stack([dx, dy], axis=1).astype(np.int64)
    offsets.setflags(write=False)
    return offsets


def stamp_dab(
    buffer,
    center: Tuple[float, float],
    size: int,
    shape: BrushShape,
    draw_value: int,
    alpha_value: int,
    pattern: Optional[str] = None
) -> int:
    """Write one dab and return how many pixels were written.

    Parameters
    ----------
    buffer : PixelBuffer
        Target with width, height and set_pixel(x, y, draw, alpha)
    center : (x, y)
        Sub-pixel center; snapped half-up to the pixel grid
    size, shape : int, BrushShape
        Footprint
    draw_value, alpha_value : int
        Bits written when no pattern is active
    pattern : str, optional
        Fill pattern name

    Returns
    -------
    int
        Pixels written (in-bounds candidates)
    """
    cx = round_half_up(center[0])
    cy = round_half_up(center[1])
    offsets = brush_offsets(size, shape)

    xs = offsets[:, 0] + cx
    ys = offsets[:, 1] + cy
    inside = (xs >= 0) & (xs < buffer.width) & (ys >= 0) & (ys < buffer.height)
    if not inside.any():
        return 0

    set_pixel = buffer.set_pixel
    written = 0
    for x, y in zip(xs[inside].tolist(), ys[inside].tolist()):
        if pattern is None:
            set_pixel(x, y, draw_value, alpha_value)
        else:
            draw, alpha = pattern_value(pattern, x, y, draw_value)
            set_pixel(x, y, draw, alpha)
        written += 1
    return written


def rasterize_dab(
    buffer,
    center: Tuple[float, float],
    brush: BrushParams,
    size: Optional[int] = None
) -> bool:
    """Stamp `brush` at `center`; True iff at least one pixel was written.

    `size` overrides brush.size for tools that vary it per call (eraser).
    """
    return stamp_dab(
        buffer,
        center,
        size if size is not None else brush.size,
        brush.shape,
        brush.draw_value,
        brush.alpha_value,
        brush.pattern,
    ) > 0
