"""Stroke smoothing and brush rasterization engine.

Components (leaves first):
    - sample_filter: distance/velocity gating, bounded sample history
    - spline: Catmull-Rom interpolation of the newest segment
    - brush: dab footprints, fill patterns, bounds-checked pixel writes
    - continuity: straight gap-fill and exact Bresenham lines
    - session: the Idle → Active → Idle state machine tying them together
    - bitmap: numpy reference pixel buffer

Data flow:
    samples → SampleFilter → (spline | continuity) → brush → pixel buffer

Usage:
    from bitstroke.engine import Bitmap, BrushParams, StrokeSession

    bitmap = Bitmap(64, 32)
    session = StrokeSession(bitmap, on_commit=history.checkpoint)
    session.start(3, 4, 0.0, BrushParams(size=3))
    session.update(9, 5, 16.0)
    summary = session.finish()
"""

from bitstroke.engine.bitmap import Bitmap, PixelBuffer
from bitstroke.engine.brush import rasterize_dab, brush_offsets
from bitstroke.engine.continuity import bresenham_line, connect, rasterize_line
from bitstroke.engine.sample_filter import DerivedSample, Sample, SampleFilter
from bitstroke.engine.session import StrokeSession, StrokeState, StrokeSummary
from bitstroke.engine.spline import Segment, interpolate_segment
from bitstroke.utils.validators import BrushParams, BrushShape, EngineConfigV1

__all__ = [
    "Bitmap",
    "BrushParams",
    "BrushShape",
    "DerivedSample",
    "EngineConfigV1",
    "PixelBuffer",
    "Sample",
    "SampleFilter",
    "Segment",
    "StrokeSession",
    "StrokeState",
    "StrokeSummary",
    "bresenham_line",
    "brush_offsets",
    "connect",
    "interpolate_segment",
    "rasterize_dab",
    "rasterize_line",
]
