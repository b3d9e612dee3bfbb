"""Catmull-Rom interpolation of the newest stroke segment.

Each call produces the dense curve between the two middle control points of
the newest window of samples. Two modes, chosen by history length:

Standard (4 ≤ n < advanced_from):
    - Window: last 4 samples
    - Control points: each sample Gaussian-averaged with up to 2 neighbours
      per side inside the window, w(k) = exp(-0.5·k²), renormalized
    - steps = clamp(ceil(d·1.5 / max(1, size/2.5)), 2, 40)
    - redraw threshold = max(0.15, size·0.06)

Advanced (n ≥ advanced_from, default 6):
    - Window: last 6 samples p0..p5
    - Control points from fixed 3-point averages:
        q1 = avg(p0,p1,p2; 0.1,0.8,0.1)    q2 = avg(p1,p2,p3; 0.15,0.7,0.15)
        q3 = avg(p2,p3,p4; 0.15,0.7,0.15)  q4 = avg(p3,p4,p5; 0.1,0.8,0.1)
    - steps = clamp(ceil(d·2 / max(1, size/2)), 2, 50)
    - redraw threshold = max(0.1, size·0.05)

In both modes d is the distance between the two middle control points;
segments shorter than min_segment (0.3 px) produce nothing.

The caller rasterizes a curve point only when it lies farther than the
threshold from the last drawn point. The functions here are pure.
"""

import math
from typing import NamedTuple, Optional, Sequence, Tuple

import numpy as np

from bitstroke.utils.geometry import catmull_rom_eval, distance, gaussian_smooth, weighted_average
from bitstroke.utils.validators import SplineConfig, SplineModeConfig

STANDARD = "standard"
ADVANCED = "advanced"


class Segment(NamedTuple):
    """Interpolated curve points for one update."""
    points: np.ndarray  # (N, 2), float64, t = 0..1 inclusive
    threshold: float  # min distance between consecutive drawn points
    mode: str


def step_count(d: float, brush_size: int, mode: SplineModeConfig) -> int:
    """Number of intervals to split a segment of length d into."""
    brush_factor = max(1.0, brush_size / mode.brush_divisor)
    steps = math.ceil(d * mode.step_multiplier / brush_factor)
    return max(mode.min_steps, min(mode.max_steps, steps))


def draw_threshold(brush_size: int, mode: SplineModeConfig) -> float:
    return max(mode.threshold_floor, brush_size * mode.threshold_scale)


def standard_controls(window: Sequence[Tuple[float, float]], radius: int = 2) -> list:
    """Gaussian-smoothed control points q0..q3 for a 4-sample window."""
    return gaussian_smooth(window, radius)


def advanced_controls(
    window: Sequence[Tuple[float, float]],
    edge_weights: Sequence[float] = (0.1, 0.8, 0.1),
    inner_weights: Sequence[float] = (0.15, 0.7, 0.15)
) -> list:
    """Control points q1..q4 from a 6-sample window p0..p5."""
    p = window
    return [
        weighted_average(p[0:3], edge_weights),
        weighted_average(p[1:4], inner_weights),
        weighted_average(p[2:5], inner_weights),
        weighted_average(p[3:6], edge_weights),
    ]


def interpolate_segment(
    samples: Sequence,
    brush_size: int,
    config: Optional[SplineConfig] = None
) -> Optional[Segment]:
    """Interpolate the newest segment of a sample history.

    Parameters
    ----------
    samples : sequence
        Sample history, oldest first; items expose .x and .y
        (DerivedSample) or are (x, y) pairs
    brush_size : int
        Brush diameter in pixels (≥ 1)
    config : SplineConfig, optional
        Heuristic constants; defaults to the tuned values

    Returns
    -------
    Segment or None
        None when fewer than 4 samples exist or the segment is degenerate
    """
    cfg = config or SplineConfig()
    n = len(samples)
    if n < 4:
        return None

    if n >= cfg.advanced_from:
        window = [_xy(s) for s in list(samples)[-6:]]
        controls = advanced_controls(window, cfg.edge_weights, cfg.inner_weights)
        mode, mode_name = cfg.advanced, ADVANCED
    else:
        window = [_xy(s) for s in list(samples)[-4:]]
        controls = standard_controls(window, cfg.gaussian_radius)
        mode, mode_name = cfg.standard, STANDARD

    a, b, c, d = controls
    seg_len = distance(b, c)
    if seg_len < cfg.min_segment:
        return None

    steps = step_count(seg_len, brush_size, mode)
    t = np.arange(steps + 1, dtype=np.float64) / steps
    points = catmull_rom_eval(a, b, c, d, t)

    return Segment(points, draw_threshold(brush_size, mode), mode_name)


def _xy(s) -> Tuple[float, float]:
    if hasattr(s, 'x'):
        return (s.x, s.y)
    return (s[0], s[1])
