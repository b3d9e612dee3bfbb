"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - Point math and spline evaluation (geometry)
    - Brush/config/trace validation (validators)
    - YAML I/O (fs)
    - Unified logging (logging_config)
    - Latency timers (profiler)

No module in utils/ may import from bitstroke.engine.

Convenience imports:
    from bitstroke.utils import geometry, validators
    from bitstroke.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import geometry
from . import logging_config
from . import profiler
from . import validators

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    # Modules
    'fs',
    'geometry',
    'logging_config',
    'profiler',
    'validators',
    # Direct exports
    'setup_logging',
    'get_logger',
    'push_context',
]
