"""Point math for stroke smoothing and rasterization.

Provides:
    - Point: immutable (x, y) pair in pixel space
    - Distances, half-up rounding, linear interpolation
    - Weighted point averages and Gaussian neighbour weights
    - Uniform Catmull-Rom evaluation (scalar and batched over t)

Used by:
    - Sample filter: inter-sample distance for velocity and merge gating
    - Spline interpolator: control point smoothing and curve evaluation
    - Continuity fallback: gap-fill interpolation and pixel snapping

All coordinates are in bitmap pixels. Sub-pixel values are kept as floats
until the rasterizer snaps them with round_half_up().
"""

import math
from typing import NamedTuple, Sequence, Tuple

import numpy as np


class Point(NamedTuple):
    """Sub-pixel position on the bitmap."""
    x: float
    y: float


def distance(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """Euclidean distance between two (x, y) pairs."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def round_half_up(v: float) -> int:
    """Round to the nearest integer, ties towards +inf.

    Notes
    -----
    Python's round() uses banker's rounding, which makes pixel snapping
    depend on the parity of the coordinate. Strokes must snap the same way
    everywhere on the canvas.
    """
    return math.floor(v + 0.5)


def snap(p: Tuple[float, float]) -> Tuple[int, int]:
    """Snap a sub-pixel point to its integer pixel."""
    return round_half_up(p[0]), round_half_up(p[1])


def lerp(a: Tuple[float, float], b: Tuple[float, float], t: float) -> Point:
    """Linear interpolation between a (t=0) and b (t=1)."""
    return Point(a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def weighted_average(
    points: Sequence[Tuple[float, float]],
    weights: Sequence[float]
) -> Point:
    """Weighted mean of points.

    Parameters
    ----------
    points : sequence of (x, y)
        Points to average
    weights : sequence of float
        One weight per point; normalized here so callers may pass raw weights

    Returns
    -------
    Point
        Weighted centroid
    """
    total = float(sum(weights))
    x = sum(p[0] * w for p, w in zip(points, weights)) / total
    y = sum(p[1] * w for p, w in zip(points, weights)) / total
    return Point(x, y)


def gaussian_weight(offset: int) -> float:
    """Gaussian-like neighbour weight exp(-0.5 * offset²)."""
    return math.exp(-0.5 * offset * offset)


def gaussian_smooth(
    points: Sequence[Tuple[float, float]],
    radius: int = 2
) -> list:
    """Smooth every point with its neighbours inside the sequence.

    Parameters
    ----------
    points : sequence of (x, y)
        Input points (not modified)
    radius : int
        Neighbours considered on each side, default 2

    Returns
    -------
    list of Point
        Smoothed points, same length as input

    Notes
    -----
    Neighbours outside the sequence are dropped and the remaining weights
    renormalized, so the end points are pulled only towards the interior.
    """
    n = len(points)
    smoothed = []
    for i in range(n):
        lo = max(0, i - radius)
        hi = min(n - 1, i + radius)
        window = points[lo:hi + 1]
        weights = [gaussian_weight(j - i) for j in range(lo, hi + 1)]
        smoothed.append(weighted_average(window, weights))
    return smoothed


def catmull_rom_point(
    a: Tuple[float, float],
    b: Tuple[float, float],
    c: Tuple[float, float],
    d: Tuple[float, float],
    t: float
) -> Point:
    """Evaluate the uniform Catmull-Rom segment between b and c at t.

    Notes
    -----
    x(t) = 0.5·(2b + (c-a)·t + (2a-5b+4c-d)·t² + (-a+3b-3c+d)·t³)
    x(0) = b and x(1) = c.
    """
    t2 = t * t
    t3 = t2 * t
    x = 0.5 * (
        2.0 * b[0]
        + (-a[0] + c[0]) * t
        + (2.0 * a[0] - 5.0 * b[0] + 4.0 * c[0] - d[0]) * t2
        + (-a[0] + 3.0 * b[0] - 3.0 * c[0] + d[0]) * t3
    )
    y = 0.5 * (
        2.0 * b[1]
        + (-a[1] + c[1]) * t
        + (2.0 * a[1] - 5.0 * b[1] + 4.0 * c[1] - d[1]) * t2
        + (-a[1] + 3.0 * b[1] - 3.0 * c[1] + d[1]) * t3
    )
    return Point(x, y)


def catmull_rom_eval(
    a: Tuple[float, float],
    b: Tuple[float, float],
    c: Tuple[float, float],
    d: Tuple[float, float],
    t: np.ndarray
) -> np.ndarray:
    """Evaluate a Catmull-Rom segment at many parameter values at once.

    Parameters
    ----------
    a, b, c, d : (x, y)
        Control points; the curve runs from b (t=0) to c (t=1)
    t : np.ndarray
        Parameter values in [0, 1], shape (N,)

    Returns
    -------
    np.ndarray
        Points on curve, shape (N, 2), float64
    """
    t = np.asarray(t, dtype=np.float64).reshape(-1, 1)
    p = np.array([a, b, c, d], dtype=np.float64)

    # Polynomial coefficients, each shape (2,)
    c0 = 2.0 * p[1]
    c1 = -p[0] + p[2]
    c2 = 2.0 * p[0] - 5.0 * p[1] + 4.0 * p[2] - p[3]
    c3 = -p[0] + 3.0 * p[1] - 3.0 * p[2] + p[3]

    return 0.5 * (c0 + c1 * t + c2 * t ** 2 + c3 * t ** 3)
