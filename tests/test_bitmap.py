"""Test the reference bitmap.

Tests for bitstroke.engine.bitmap:
    - Planes start transparent paper
    - set_pixel writes both bits and raises outside the bitmap
    - Dirty rectangle tracking
    - ASCII rendering

Run:
    pytest tests/test_bitmap.py -v
"""

import numpy as np
import pytest

from bitstroke.engine.bitmap import Bitmap


def test_new_bitmap_is_clear():
    bm = Bitmap(8, 4)
    assert bm.pixels.shape == (4, 8)
    assert bm.alpha.shape == (4, 8)
    assert bm.pixels.dtype == np.uint8
    assert not bm.alpha.any()
    assert bm.dirty_rect() is None
    assert bm.opaque_pixels() == set()


@pytest.mark.parametrize("size", [(0, 4), (4, 0), (-1, -1)])
def test_invalid_size(size):
    with pytest.raises(ValueError):
        Bitmap(*size)


def test_set_and_get_pixel():
    bm = Bitmap(8, 4)
    bm.set_pixel(7, 3, 1, 1)
    bm.set_pixel(0, 0, 0, 1)
    assert bm.get_pixel(7, 3) == (1, 1)
    assert bm.get_pixel(0, 0) == (0, 1)
    assert bm.get_pixel(3, 2) == (0, 0)
    assert bm.pixels[3, 7] == 1
    assert bm.writes == 2


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (8, 0), (0, 4)])
def test_out_of_range_write_raises(x, y):
    bm = Bitmap(8, 4)
    with pytest.raises(IndexError):
        bm.set_pixel(x, y, 1, 1)
    assert bm.writes == 0
    assert bm.dirty_rect() is None


def test_dirty_rect():
    bm = Bitmap(16, 16)
    bm.set_pixel(5, 5, 1, 1)
    assert bm.dirty_rect() == (5, 5, 5, 5)
    bm.set_pixel(2, 9, 1, 1)
    bm.set_pixel(11, 1, 1, 1)
    assert bm.dirty_rect() == (2, 1, 11, 9)
    bm.clear_dirty()
    assert bm.dirty_rect() is None
    bm.set_pixel(3, 3, 1, 1)
    assert bm.dirty_rect() == (3, 3, 3, 3)


def test_to_ascii():
    bm = Bitmap(3, 2)
    bm.set_pixel(0, 0, 1, 1)
    bm.set_pixel(1, 0, 0, 1)
    assert bm.to_ascii() == "#. \n   "
    assert bm.to_ascii(ink='X', paper='o', clear='-') == "Xo-\n---"
