"""Bitstroke: stroke smoothing and brush rasterization for 1-bit bitmaps.

This package turns a jittery stream of pointer samples into filled pixels
on a black/white bitmap with an independent opacity bit.

Architecture layers (strict one-way dependency):
    scripts/ → bitstroke/engine/ → bitstroke/utils/

Key invariants:
    - Sample history is bounded (150 by default), oldest evicted first
    - One commit notification per stroke, never per dab
    - The engine bounds-checks every pixel before writing it
    - Output is binary: one draw bit plus one alpha bit per pixel
    - YAML-only configs, validated with pydantic
"""

__version__ = "1.4.0"
