"""Brush, engine config and trace validation.

Provides centralized validation using pydantic:
    - BrushParams: size, shape, draw/alpha bits, smoothing and pattern options
    - Engine schema (stroke_engine.v1.yaml): every tunable smoothing constant
    - Trace schema (trace.v1.yaml): recorded pointer samples for replay

The smoothing constants below were tuned by eye so that strokes look clean
at brush sizes 1-10. They are exposed as config so they can be recalibrated
without touching the engine.

Units:
    - Geometry: bitmap pixels
    - Time: milliseconds
    - Velocity: pixels per millisecond

Usage:
    from bitstroke.utils import validators

    cfg = validators.load_engine_config("configs/stroke_engine.v1.yaml")
    trace = validators.load_trace("recorded.yaml")
    brush = validators.BrushParams(size=4, shape="circle")
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ============================================================================
# BRUSH
# ============================================================================

class BrushShape(str, Enum):
    """Dab footprint."""
    CIRCLE = "circle"
    SQUARE = "square"


class BrushParams(BaseModel):
    """Brush held constant for one stroke.

    Validated once when the stroke starts; the per-sample path reads the
    fields without re-checking them.
    """
    model_config = ConfigDict(frozen=True)

    size: int = Field(1, ge=1, description="Dab diameter in pixels")
    shape: BrushShape = Field(BrushShape.CIRCLE, description="Dab footprint")
    draw_value: int = Field(1, ge=0, le=1, description="Pixel bit to write")
    alpha_value: int = Field(1, ge=0, le=1, description="Opacity bit to write")
    smoothing: bool = Field(True, description="Spline smoothing (False = gap-fill)")
    pixel_exact: bool = Field(False, description="Exact Bresenham lines, no brush")
    pattern: Optional[str] = Field(None, description="8x8 fill pattern name")


# ============================================================================
# ENGINE SCHEMA V1
# ============================================================================

class SampleFilterConfig(BaseModel):
    """Distance/velocity gating of raw samples."""
    history_cap: int = Field(150, ge=6, description="Max samples kept (sliding window)")
    fast_velocity: float = Field(0.5, gt=0.0, description="px/ms above which input is fast")
    fast_min_distance: float = Field(1.5, ge=0.0, description="Merge distance for fast input (px)")
    slow_min_distance: float = Field(0.5, ge=0.0, description="Merge distance for slow input (px)")
    merge_after: int = Field(2, ge=0, description="Merge only once history has more entries than this")


class SplineModeConfig(BaseModel):
    """Step count and redraw threshold for one interpolation mode."""
    brush_divisor: float = Field(..., gt=0.0, description="brushFactor = max(1, size / divisor)")
    step_multiplier: float = Field(..., gt=0.0, description="steps ∝ segment length × multiplier")
    min_steps: int = Field(2, ge=1)
    max_steps: int = Field(..., ge=1)
    threshold_floor: float = Field(..., ge=0.0, description="Min distance between drawn points (px)")
    threshold_scale: float = Field(..., ge=0.0, description="Threshold growth per brush pixel")

    @model_validator(mode='after')
    def validate_step_range(self) -> 'SplineModeConfig':
        """Ensure min_steps <= max_steps."""
        if self.min_steps > self.max_steps:
            raise ValueError(
                f"min_steps={self.min_steps} exceeds max_steps={self.max_steps}"
            )
        return self


class StandardModeConfig(SplineModeConfig):
    """Standard mode (4-5 samples), tuned for Gaussian-smoothed windows."""
    brush_divisor: float = Field(2.5, gt=0.0)
    step_multiplier: float = Field(1.5, gt=0.0)
    max_steps: int = Field(40, ge=1)
    threshold_floor: float = Field(0.15, ge=0.0)
    threshold_scale: float = Field(0.06, ge=0.0)


class AdvancedModeConfig(SplineModeConfig):
    """Advanced mode (6+ samples), tuned for 3-point weighted windows."""
    brush_divisor: float = Field(2.0, gt=0.0)
    step_multiplier: float = Field(2.0, gt=0.0)
    max_steps: int = Field(50, ge=1)
    threshold_floor: float = Field(0.1, ge=0.0)
    threshold_scale: float = Field(0.05, ge=0.0)


class SplineConfig(BaseModel):
    """Catmull-Rom interpolation heuristics."""
    min_segment: float = Field(0.3, ge=0.0, description="Shorter segments are skipped (px)")
    gaussian_radius: int = Field(2, ge=0, description="Neighbours per side in standard mode")
    advanced_from: int = Field(6, ge=6, description="History length that enables advanced mode")
    edge_weights: Tuple[float, float, float] = Field((0.1, 0.8, 0.1))
    inner_weights: Tuple[float, float, float] = Field((0.15, 0.7, 0.15))
    standard: StandardModeConfig = Field(default_factory=StandardModeConfig)
    advanced: AdvancedModeConfig = Field(default_factory=AdvancedModeConfig)

    @field_validator('edge_weights', 'inner_weights')
    @classmethod
    def validate_weights(cls, v: Tuple[float, float, float]) -> Tuple[float, float, float]:
        if any(w < 0.0 for w in v) or sum(v) <= 0.0:
            raise ValueError(f"Weights must be non-negative with a positive sum, got {v}")
        return v


class ContinuityConfig(BaseModel):
    """Gap-fill spacing when smoothing is disabled."""
    step_floor: float = Field(0.5, gt=0.0, description="Min spacing between gap dabs (px)")
    step_scale: float = Field(0.3, ge=0.0, description="Spacing growth per brush pixel")


class EngineConfigV1(BaseModel):
    """Complete engine configuration (stroke_engine.v1.yaml schema).

    Every field defaults to the tuned value, so an empty file is valid.
    """
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("stroke_engine.v1", alias="schema")
    sample_filter: SampleFilterConfig = Field(default_factory=SampleFilterConfig)
    spline: SplineConfig = Field(default_factory=SplineConfig)
    continuity: ContinuityConfig = Field(default_factory=ContinuityConfig)

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "stroke_engine.v1":
            raise ValueError(f"Expected schema 'stroke_engine.v1', got '{v}'")
        return v

    @model_validator(mode='after')
    def validate_advanced_reachable(self) -> 'EngineConfigV1':
        """Ensure the history can grow long enough for advanced mode."""
        if self.spline.advanced_from > self.sample_filter.history_cap:
            raise ValueError(
                f"spline.advanced_from={self.spline.advanced_from} exceeds "
                f"sample_filter.history_cap={self.sample_filter.history_cap}"
            )
        return self


# ============================================================================
# TRACE SCHEMA V1
# ============================================================================

class TraceV1(BaseModel):
    """Recorded pointer samples for offline replay (trace.v1.yaml)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field("trace.v1", alias="schema")
    width: int = Field(64, ge=1, description="Bitmap width (px)")
    height: int = Field(32, ge=1, description="Bitmap height (px)")
    samples: List[Tuple[float, float, float]] = Field(
        ..., min_length=1, description="[x, y, t_ms] triples in input order"
    )

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != "trace.v1":
            raise ValueError(f"Expected schema 'trace.v1', got '{v}'")
        return v


# ============================================================================
# LOADERS
# ============================================================================

def load_engine_config(path: Union[str, Path]) -> EngineConfigV1:
    """Load and validate engine config from YAML.

    Parameters
    ----------
    path : Union[str, Path]
        Path to stroke_engine.v1.yaml file

    Returns
    -------
    EngineConfigV1
        Validated configuration

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails (with actionable error message)
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Engine config not found: {path}")

    data = fs.load_yaml(path) or {}
    try:
        return EngineConfigV1(**data)
    except Exception as e:
        raise ValueError(f"Engine config validation failed at {path}: {e}") from e


def load_trace(path: Union[str, Path]) -> TraceV1:
    """Load and validate a recorded pointer trace.

    Parameters
    ----------
    path : Union[str, Path]
        Path to trace.v1.yaml file

    Returns
    -------
    TraceV1
        Validated trace

    Raises
    ------
    FileNotFoundError
        If path doesn't exist
    ValueError
        If validation fails
    """
    from . import fs

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Trace not found: {path}")

    data = fs.load_yaml(path) or {}
    try:
        return TraceV1(**data)
    except Exception as e:
        raise ValueError(f"Trace validation failed at {path}: {e}") from e
