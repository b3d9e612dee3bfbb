#!/usr/bin/env python3
"""Replay a recorded pointer trace through the stroke engine.

CLI tool for tuning the smoothing heuristics: feeds every sample of a
trace.v1.yaml file through a StrokeSession and prints the resulting bitmap
as text together with the stroke summary.

Usage:
    # Smoothed circle brush, size 3
    python scripts/replay_stroke.py --trace configs/traces/wave.v1.yaml --size 3

    # Smoothing off (straight gap-fill), square brush
    python scripts/replay_stroke.py --trace configs/traces/wave.v1.yaml --size 4 \
        --shape square --no-smoothing

    # Exact 1-pixel lines with a fill pattern, custom heuristics
    python scripts/replay_stroke.py --trace configs/traces/wave.v1.yaml --pixel-exact \
        --pattern checkerboard --config configs/stroke_engine.v1.yaml

Outputs:
    - stdout: ASCII rendering ('#' ink, '.' paper, ' ' transparent)
    - --metadata-out FILE: stroke summary as YAML (written atomically)
"""

import argparse
import sys

from bitstroke.engine import Bitmap, BrushParams, EngineConfigV1, Sample, StrokeSession
from bitstroke.utils import fs, logging_config, validators
from bitstroke.utils.profiler import timer

logger = logging_config.get_logger("replay_stroke")


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Replay a pointer trace through the stroke engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--trace', type=str, required=True, help='Path to trace.v1.yaml')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to stroke_engine.v1.yaml (default: tuned values)')

    parser.add_argument('--size', type=int, default=1, help='Brush size in px, default: 1')
    parser.add_argument('--shape', type=str, default='circle', choices=['circle', 'square'],
                        help='Brush shape, default: circle')
    parser.add_argument('--erase', action='store_true', help='Write paper (draw bit 0)')
    parser.add_argument('--no-smoothing', action='store_true', help='Straight gap-fill instead of splines')
    parser.add_argument('--pixel-exact', action='store_true', help='Exact 1-pixel Bresenham lines')
    parser.add_argument('--pattern', type=str, default=None, help='Fill pattern name')

    parser.add_argument('--width', type=int, default=None, help='Override trace bitmap width')
    parser.add_argument('--height', type=int, default=None, help='Override trace bitmap height')

    parser.add_argument('--metadata-out', type=str, default=None, help='Write summary YAML here')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser.parse_args(argv)


def replay(trace: validators.TraceV1, brush: BrushParams, config: EngineConfigV1,
           width: int, height: int):
    """Run one stroke over the trace; returns (bitmap, summary)."""
    bitmap = Bitmap(width, height)
    session = StrokeSession(bitmap, config=config, brush=brush)
    for sample in trace.samples:
        session.push(Sample(*sample))
    return bitmap, session.finish()


def main(argv=None) -> int:
    args = parse_args(argv)
    logging_config.setup_logging(log_level="INFO", context={"app": "replay"})
    if args.verbose:
        logging_config.set_level("DEBUG")

    try:
        trace = validators.load_trace(args.trace)
        config = validators.load_engine_config(args.config) if args.config else EngineConfigV1()
        brush = BrushParams(
            size=args.size,
            shape=args.shape,
            draw_value=0 if args.erase else 1,
            smoothing=not args.no_smoothing,
            pixel_exact=args.pixel_exact,
            pattern=args.pattern,
        )
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    width = args.width or trace.width
    height = args.height or trace.height

    with timer("replay"):
        bitmap, summary = replay(trace, brush, config, width, height)

    print(bitmap.to_ascii())
    logger.info(
        f"{summary.stroke_id}: {summary.samples} samples ({summary.merged_samples} merged), "
        f"{summary.dabs} dabs, {summary.pixels_written} px, bbox={summary.bbox}, "
        f"update mean {summary.mean_update_ms:.3f} ms / max {summary.max_update_ms:.3f} ms"
    )

    if args.metadata_out:
        fs.atomic_yaml_dump(
            {
                'trace': args.trace,
                'brush': brush.model_dump(mode='json'),
                'bitmap': [width, height],
                'summary': summary.to_dict(),
            },
            args.metadata_out,
        )
        logger.info(f"Summary written to {args.metadata_out}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
