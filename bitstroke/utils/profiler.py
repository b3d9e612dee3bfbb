"""Wall-clock timers for the per-sample path.

Provides:
    - timer(): context manager that reports one elapsed time to a sink
    - TimerAccumulator: running total/count/max for repeated measurements

The stroke session wraps every update() in a TimerAccumulator so that a
finished stroke can report its mean and worst per-sample latency. Pointer
handlers must finish well inside one input frame.

No heavy dependencies; time.perf_counter only.
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@contextmanager
def timer(name: str, sink: Optional[Callable[[str, float], None]] = None):
    """Time the enclosed block.

    Parameters
    ----------
    name : str
        Label passed to the sink
    sink : Optional[Callable[[str, float], None]]
        Callback(name, elapsed_seconds); logs at DEBUG when None

    Examples
    --------
    >>> with timer("replay"):
    ...     replay(trace)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if sink is not None:
            sink(name, elapsed)
        else:
            logger.debug(f"{name}: {elapsed * 1000.0:.3f} ms")


class TimerAccumulator:
    """Accumulate repeated timings of the same operation.

    Examples
    --------
    >>> updates = TimerAccumulator("update")
    >>> with updates.measure():
    ...     session.update(x, y, t)
    >>> updates.mean_ms()
    """

    def __init__(self, name: str):
        self.name = name
        self.total_time = 0.0
        self.max_time = 0.0
        self.count = 0

    @contextmanager
    def measure(self):
        """Time the enclosed block and add it to the totals."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.total_time += elapsed
            self.max_time = max(self.max_time, elapsed)
            self.count += 1

    def mean(self) -> float:
        """Mean seconds per measurement, 0.0 when nothing was measured."""
        return self.total_time / self.count if self.count > 0 else 0.0

    def mean_ms(self) -> float:
        return self.mean() * 1000.0

    def reset(self) -> None:
        self.total_time = 0.0
        self.max_time = 0.0
        self.count = 0

    def __repr__(self) -> str:
        return f"TimerAccumulator({self.name}, mean={self.mean_ms():.3f}ms, count={self.count})"
