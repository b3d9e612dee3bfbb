"""Stroke session: one pointer-down → pointer-up stroke.

State machine:
    IDLE --start()--> ACTIVE --update()*--> ACTIVE --finish()--> IDLE

    - start(): clears history and last-drawn point, stores the first sample
      and stamps one dab so a tap always leaves a mark
    - update(): filters the sample, then draws through one of
        pixel_exact → exact Bresenham line from the last drawn pixel
        smoothing   → raw dab while < 4 samples, spline segment afterwards
        otherwise   → straight gap-fill plus a dab at the sample
    - finish(): clears state and notifies commit listeners exactly once,
      so the host takes one undo snapshot per stroke
    - update()/finish() while IDLE are ignored (out-of-order input events)
    - start() while ACTIVE commits the open stroke first

Everything runs synchronously inside the caller's input handler; nothing
here blocks or yields. Every dab is written to the buffer immediately.
"""

import logging
import uuid
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from bitstroke.engine.brush import stamp_dab
from bitstroke.engine.continuity import connect, rasterize_line
from bitstroke.engine.sample_filter import Sample, SampleFilter
from bitstroke.engine.spline import interpolate_segment
from bitstroke.utils.geometry import Point, distance, snap
from bitstroke.utils.logging_config import pop_context, push_context
from bitstroke.utils.profiler import TimerAccumulator
from bitstroke.utils.validators import BrushParams, EngineConfigV1

logger = logging.getLogger(__name__)


def make_stroke_id(idx: int) -> str:
    """Stroke ID "IIIII-HHHHHHHH": ordinal plus 8 hex chars of a uuid4."""
    return f"{idx:05d}-{uuid.uuid4().hex[:8]}"


class StrokeState(Enum):
    IDLE = "idle"
    ACTIVE = "active"


@dataclass(frozen=True)
class StrokeSummary:
    """What a finished stroke did; handed to commit listeners.

    dabs counts brush stamps at samples and curve points (gap-fill dabs and
    exact lines count once per call). bbox is a conservative inclusive
    (x0, y0, x1, y1) around every pixel written, clipped to the buffer, or
    None when nothing was written.
    """
    stroke_id: str
    dabs: int
    pixels_written: int
    samples: int
    merged_samples: int
    bbox: Optional[Tuple[int, int, int, int]]
    mean_update_ms: float
    max_update_ms: float

    def to_dict(self) -> dict:
        d = asdict(self)
        d['bbox'] = list(self.bbox) if self.bbox is not None else None
        return d


class StrokeSession:
    """Owns the sample history and last-drawn point of the active stroke.

    Parameters
    ----------
    buffer : PixelBuffer
        Bitmap receiving the pixels (width, height, set_pixel)
    config : EngineConfigV1, optional
        Smoothing heuristics; defaults to the tuned values
    brush : BrushParams, optional
        Default brush for start()/push() when none is passed
    on_commit : Callable[[StrokeSummary], None], optional
        First commit listener
    """

    def __init__(
        self,
        buffer,
        config: Optional[EngineConfigV1] = None,
        brush: Optional[BrushParams] = None,
        on_commit: Optional[Callable[[StrokeSummary], None]] = None
    ):
        self.buffer = buffer
        self.config = config or EngineConfigV1()
        self.brush = brush
        self.filter = SampleFilter(self.config.sample_filter)
        self.last_drawn: Optional[Point] = None
        self.state = StrokeState.IDLE
        self.stroke_id: Optional[str] = None

        self._listeners: List[Callable[[StrokeSummary], None]] = []
        if on_commit is not None:
            self._listeners.append(on_commit)

        self._strokes_started = 0
        self._timer = TimerAccumulator("update")
        self._reset_counters()

    @property
    def is_active(self) -> bool:
        return self.state is StrokeState.ACTIVE

    def add_commit_listener(self, fn: Callable[[StrokeSummary], None]) -> None:
        self._listeners.append(fn)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def start(self, x: float, y: float, t: float, brush: Optional[BrushParams] = None) -> bool:
        """Begin a stroke at (x, y) and stamp the first dab.

        Returns
        -------
        bool
            True iff the first dab wrote at least one pixel
        """
        brush = brush or self.brush
        if brush is None:
            raise ValueError("No brush given and no default brush configured")

        if self.is_active:
            logger.warning(f"start() while stroke {self.stroke_id} is active; committing it first")
            self.finish()

        self.brush = brush
        self.filter.clear()
        self.last_drawn = None
        self._reset_counters()
        self._timer.reset()

        self._strokes_started += 1
        self.stroke_id = make_stroke_id(self._strokes_started)
        self.state = StrokeState.ACTIVE
        push_context(stroke=self.stroke_id)

        self.filter.add_sample(x, y, t)
        self._samples = 1
        p = Point(x, y)
        if brush.pixel_exact:
            wrote = self._line(p, p)
        else:
            wrote = self._dab(p, brush.size)
        self.last_drawn = p

        logger.debug(
            f"Stroke started at ({x:.1f}, {y:.1f}) size={brush.size} "
            f"shape={brush.shape.value} smoothing={brush.smoothing}"
        )
        return wrote > 0

    def update(self, x: float, y: float, t: float, size: Optional[int] = None) -> bool:
        """Feed one pointer sample to the active stroke.

        Parameters
        ----------
        x, y : float
            Position in bitmap pixels
        t : float
            Timestamp in milliseconds
        size : int, optional
            Brush size for this sample only

        Returns
        -------
        bool
            True iff any pixel was written; False when idle
        """
        if not self.is_active:
            return False

        with self._timer.measure():
            self._samples += 1
            before = self._pixels
            self.filter.add_sample(x, y, t)

            brush = self.brush
            size = size if size is not None else brush.size
            p = Point(x, y)

            if brush.pixel_exact:
                self._line(self.last_drawn, p)
                self.last_drawn = p
            elif brush.smoothing:
                self._smooth_to(p, size)
            else:
                if self.last_drawn is not None:
                    if size != brush.size:
                        brush = brush.model_copy(update={'size': size})
                    self._gap_fill(self.last_drawn, p, brush)
                self._dab(p, size)
                self.last_drawn = p

            return self._pixels > before

    def push(self, sample: Sample) -> bool:
        """Feed an (x, y, t) sample, starting a stroke with the default brush when idle."""
        x, y, t = sample
        if self.is_active:
            return self.update(x, y, t)
        return self.start(x, y, t)

    def finish(self) -> Optional[StrokeSummary]:
        """End the stroke and notify commit listeners once.

        Returns
        -------
        StrokeSummary or None
            None when no stroke was active
        """
        if not self.is_active:
            return None

        summary = StrokeSummary(
            stroke_id=self.stroke_id,
            dabs=self._dabs,
            pixels_written=self._pixels,
            samples=self._samples,
            merged_samples=self.filter.merged,
            bbox=tuple(self._bbox) if self._bbox is not None else None,
            mean_update_ms=self._timer.mean_ms(),
            max_update_ms=self._timer.max_time * 1000.0,
        )

        self.filter.clear()
        self.last_drawn = None
        self.state = StrokeState.IDLE

        logger.debug(
            f"Stroke finished: {summary.dabs} dabs, {summary.pixels_written} px, "
            f"{summary.samples} samples, mean update {summary.mean_update_ms:.3f} ms"
        )
        pop_context(keys=["stroke"])

        for listener in list(self._listeners):
            listener(summary)
        return summary

    # ------------------------------------------------------------------
    # Drawing paths
    # ------------------------------------------------------------------

    def _smooth_to(self, p: Point, size: int) -> None:
        history = self.filter.history
        if len(history) < 4:
            self._dab(p, size)
            self.last_drawn = p
            return

        segment = interpolate_segment(history, size, self.config.spline)
        if segment is None:
            return

        threshold = segment.threshold
        for px, py in segment.points.tolist():
            q = Point(px, py)
            if self.last_drawn is None or distance(q, self.last_drawn) > threshold:
                self._dab(q, size)
                self.last_drawn = q

    def _gap_fill(self, p1: Point, p2: Point, brush: BrushParams) -> None:
        written = connect(self.buffer, p1, p2, brush, self.config.continuity)
        if written:
            self._pixels += written
            (ax, ay), (bx, by) = snap(p1), snap(p2)
            r = brush.size // 2
            self._grow_bbox(min(ax, bx) - r, min(ay, by) - r, max(ax, bx) + r, max(ay, by) + r)

    def _dab(self, p: Point, size: int) -> int:
        brush = self.brush
        written = stamp_dab(
            self.buffer, p, size, brush.shape,
            brush.draw_value, brush.alpha_value, brush.pattern,
        )
        self._dabs += 1
        if written:
            self._pixels += written
            cx, cy = snap(p)
            r = size // 2
            self._grow_bbox(cx - r, cy - r, cx + r, cy + r)
        return written

    def _line(self, p1: Point, p2: Point) -> int:
        a, b = snap(p1), snap(p2)
        brush = self.brush
        written = rasterize_line(
            self.buffer, a, b, brush.draw_value, brush.alpha_value, brush.pattern,
        )
        self._dabs += 1
        if written:
            self._pixels += written
            self._grow_bbox(min(a[0], b[0]), min(a[1], b[1]), max(a[0], b[0]), max(a[1], b[1]))
        return written

    def _grow_bbox(self, x0: int, y0: int, x1: int, y1: int) -> None:
        x0 = max(0, x0)
        y0 = max(0, y0)
        x1 = min(self.buffer.width - 1, x1)
        y1 = min(self.buffer.height - 1, y1)
        if self._bbox is None:
            self._bbox = [x0, y0, x1, y1]
        else:
            b = self._bbox
            b[0] = min(b[0], x0)
            b[1] = min(b[1], y0)
            b[2] = max(b[2], x1)
            b[3] = max(b[3], y1)

    def _reset_counters(self) -> None:
        self._dabs = 0
        self._pixels = 0
        self._samples = 0
        self._bbox: Optional[list] = None
