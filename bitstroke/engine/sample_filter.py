"""Raw pointer sample gating and bounded history.

Pointer devices report positions at irregular intervals, often several
times per pixel during slow movement. Every sample is annotated with its
distance and velocity relative to the previous retained sample, then either
appended to the history or merged into the newest entry:

    - velocity > fast_velocity px/ms → min distance fast_min_distance (1.5 px)
    - otherwise                       → min distance slow_min_distance (0.5 px)
    - closer than the min distance and history longer than merge_after (2)
      → the newest entry is replaced by the new sample
    - otherwise → appended; the oldest entry is evicted past history_cap (150)

Merging replaces rather than drops, so the newest stored position is always
the newest input.
"""

from collections import deque
from typing import NamedTuple, Optional

from bitstroke.utils.geometry import distance
from bitstroke.utils.validators import SampleFilterConfig


class Sample(NamedTuple):
    """Raw pointer sample: position in pixels, timestamp in ms."""
    x: float
    y: float
    t: float


class DerivedSample(NamedTuple):
    """Pointer sample plus motion relative to its predecessor."""
    x: float
    y: float
    t: float
    distance: float = 0.0
    velocity: float = 0.0


class SampleFilter:
    """Sliding window of retained samples for one stroke.

    Parameters
    ----------
    config : SampleFilterConfig, optional
        Thresholds and history cap; defaults to the tuned values
    """

    def __init__(self, config: Optional[SampleFilterConfig] = None):
        self.config = config or SampleFilterConfig()
        self.history = deque(maxlen=self.config.history_cap)
        self.merged = 0

    def __len__(self) -> int:
        return len(self.history)

    def clear(self) -> None:
        self.history.clear()
        self.merged = 0

    def last(self) -> Optional[DerivedSample]:
        return self.history[-1] if self.history else None

    def tail(self, n: int) -> list:
        """The newest n samples, oldest first."""
        return list(self.history)[-n:]

    def add_sample(self, x: float, y: float, t: float) -> DerivedSample:
        """Annotate and store one sample.

        Parameters
        ----------
        x, y : float
            Position in bitmap pixels
        t : float
            Timestamp in milliseconds

        Returns
        -------
        DerivedSample
            The stored entry (appended or merged)
        """
        cfg = self.config
        prev = self.last()

        if prev is None:
            sample = DerivedSample(x, y, t)
        else:
            d = distance((prev.x, prev.y), (x, y))
            dt = t - prev.t
            # Out-of-order or duplicate timestamps carry no speed information
            velocity = d / dt if dt > 0 else 0.0
            sample = DerivedSample(x, y, t, d, velocity)

        min_distance = cfg.fast_min_distance if sample.velocity > cfg.fast_velocity else cfg.slow_min_distance

        if len(self.history) > cfg.merge_after and sample.distance < min_distance:
            self.history[-1] = sample
            self.merged += 1
        else:
            # deque(maxlen) evicts the oldest entry on overflow
            self.history.append(sample)

        return sample
