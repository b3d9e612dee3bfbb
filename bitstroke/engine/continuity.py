"""Straight-line stroke continuity.

Two fallbacks for when the spline is not wanted:

    connect():       brush dabs spaced along a straight segment, used when
                     smoothing is off so fast motion leaves no gaps
    bresenham_line(): the exact integer pixels of a line, inclusive of both
                     endpoints, for pixel-exact tools and preview overlays

Gap-fill spacing: step = max(0.5, size·0.3), steps = ceil(d / step); dabs
at t = i/steps for i in 1..steps-1 (the endpoints are drawn by the caller).
"""

import math
from typing import Iterator, Optional, Tuple

from bitstroke.engine.brush import pattern_value, stamp_dab
from bitstroke.utils.geometry import distance, lerp, round_half_up, snap
from bitstroke.utils.validators import BrushParams, ContinuityConfig


def gap_points(
    p1: Tuple[float, float],
    p2: Tuple[float, float],
    brush_size: int,
    config: Optional[ContinuityConfig] = None
) -> list:
    """Interior points between p1 and p2 spaced for a brush of brush_size."""
    cfg = config or ContinuityConfig()
    d = distance(p1, p2)
    step = max(cfg.step_floor, brush_size * cfg.step_scale)
    steps = math.ceil(d / step)
    return [lerp(p1, p2, i / steps) for i in range(1, steps)]


def connect(
    buffer,
    p1: Tuple[float, float],
    p2: Tuple[float, float],
    brush: BrushParams,
    config: Optional[ContinuityConfig] = None
) -> int:
    """Fill the gap between two dabs with intermediate dabs.

    Returns
    -------
    int
        Pixels written
    """
    written = 0
    for p in gap_points(p1, p2, brush.size, config):
        written += stamp_dab(
            buffer, p, brush.size, brush.shape,
            brush.draw_value, brush.alpha_value, brush.pattern,
        )
    return written


def bresenham_line(x1: float, y1: float, x2: float, y2: float) -> Iterator[Tuple[int, int]]:
    """Yield the integer pixels from (x1, y1) to (x2, y2), both inclusive.

    Sub-pixel endpoints are snapped half-up first, like brush centers.

    Examples
    --------
    >>> list(bresenham_line(0, 0, 5, 2))
    [(0, 0), (1, 0), (2, 1), (3, 1), (4, 2), (5, 2)]
    """
    x1, y1 = round_half_up(x1), round_half_up(y1)
    x2, y2 = round_half_up(x2), round_half_up(y2)
    dx = abs(x2 - x1)
    dy = abs(y2 - y1)
    sx = 1 if x1 < x2 else -1
    sy = 1 if y1 < y2 else -1
    err = dx - dy

    x, y = x1, y1
    while True:
        yield x, y
        if x == x2 and y == y2:
            return
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy


def rasterize_line(
    buffer,
    p1: Tuple[float, float],
    p2: Tuple[float, float],
    draw_value: int = 1,
    alpha_value: int = 1,
    pattern: Optional[str] = None
) -> int:
    """Write an exact 1-pixel line, skipping pixels outside the buffer.

    Sub-pixel endpoints are snapped half-up to the pixel grid.

    Returns
    -------
    int
        Pixels written
    """
    written = 0
    (x1, y1), (x2, y2) = snap(p1), snap(p2)
    for x, y in bresenham_line(x1, y1, x2, y2):
        if 0 <= x < buffer.width and 0 <= y < buffer.height:
            if pattern is None:
                buffer.set_pixel(x, y, draw_value, alpha_value)
            else:
                buffer.set_pixel(x, y, *pattern_value(pattern, x, y, draw_value))
            written += 1
    return written
