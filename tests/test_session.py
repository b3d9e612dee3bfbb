"""Test the stroke session state machine.

Tests for bitstroke.engine.session:
    - start() always leaves a mark (tap)
    - update()/finish() while idle are ignored
    - Exactly one commit notification per stroke
    - Smoothed strokes stay inside their corridor
    - Gap-fill and pixel-exact paths
    - History bound and merge behaviour through the session
    - Stroke id pushed into the logging context while active

Run:
    pytest tests/test_session.py -v
"""

import pytest

from bitstroke.engine import Bitmap, BrushParams, StrokeSession, StrokeState
from bitstroke.engine.continuity import bresenham_line
from bitstroke.utils.logging_config import get_context


@pytest.fixture
def bitmap():
    return Bitmap(40, 40)


@pytest.fixture
def commits():
    return []


@pytest.fixture
def session(bitmap, commits):
    return StrokeSession(bitmap, on_commit=commits.append)


@pytest.mark.session
def test_tap_draws_one_pixel(session, bitmap):
    assert session.start(0, 0, 0.0, BrushParams(size=1)) is True
    assert session.is_active
    assert bitmap.opaque_pixels() == {(0, 0)}


@pytest.mark.session
def test_tap_commits_once(session, commits):
    session.start(5, 5, 0.0, BrushParams(size=3))
    summary = session.finish()
    assert commits == [summary]
    assert summary.dabs == 1
    assert summary.pixels_written == 5
    assert summary.samples == 1
    assert summary.bbox == (4, 4, 6, 6)


@pytest.mark.session
def test_idle_calls_are_noops(session, bitmap, commits):
    assert session.update(3, 3, 10.0) is False
    assert session.finish() is None
    assert commits == []
    assert bitmap.writes == 0
    assert session.state is StrokeState.IDLE


@pytest.mark.session
def test_finish_clears_state(session, commits):
    session.start(1, 1, 0.0, BrushParams(size=2))
    for i in range(1, 8):
        session.update(1 + 3 * i, 1, 16.0 * i)
    session.finish()
    assert session.state is StrokeState.IDLE
    assert len(session.filter) == 0
    assert session.last_drawn is None
    # Second finish does nothing
    assert session.finish() is None
    assert len(commits) == 1


@pytest.mark.session
def test_one_commit_per_stroke(session, commits):
    for stroke in range(3):
        session.start(2, 2 + stroke * 5, 0.0, BrushParams(size=2))
        for i in range(1, 30):
            session.update(2 + i, 2 + stroke * 5, 8.0 * i)
        assert len(commits) == stroke
        session.finish()
    assert len(commits) == 3
    assert len({c.stroke_id for c in commits}) == 3


@pytest.mark.session
def test_start_while_active_commits_previous(session, commits):
    session.start(2, 2, 0.0, BrushParams(size=1))
    first_id = session.stroke_id
    session.start(10, 10, 100.0, BrushParams(size=1))
    assert len(commits) == 1
    assert commits[0].stroke_id == first_id
    assert session.is_active
    session.finish()
    assert len(commits) == 2


@pytest.mark.session
def test_start_requires_brush(bitmap):
    with pytest.raises(ValueError):
        StrokeSession(bitmap).start(1, 1, 0.0)


@pytest.mark.smoothing
def test_straight_stroke_stays_in_corridor(session, bitmap):
    brush = BrushParams(size=4)
    session.start(10, 10, 0.0, brush)
    session.update(12, 10, 16.0)
    session.update(14, 10, 32.0)
    session.update(16, 10, 48.0)
    session.finish()

    radius = brush.size // 2
    pixels = bitmap.opaque_pixels()
    assert pixels
    for x, y in pixels:
        assert abs(y - 10) <= radius
        assert 10 - radius <= x <= 16 + radius


@pytest.mark.smoothing
def test_smoothed_horizontal_line(session, bitmap):
    session.start(5, 10, 0.0, BrushParams(size=1))
    for i in range(1, 10):
        session.update(5 + 3 * i, 10, 16.0 * i)
    summary = session.finish()
    pixels = bitmap.opaque_pixels()
    assert {y for _, y in pixels} == {10}
    assert all(5 <= x <= 32 for x, _ in pixels)
    assert summary.dabs > 10


@pytest.mark.smoothing
def test_smoothed_diagonal_advanced_mode(session, bitmap):
    session.start(10, 10, 0.0, BrushParams(size=2))
    for i in range(1, 10):
        session.update(10 + 2 * i, 10 + 2 * i, 16.0 * i)
    session.finish()
    for x, y in bitmap.opaque_pixels():
        assert abs(x - y) <= 1


@pytest.mark.session
def test_gap_fill_without_smoothing(session, bitmap):
    session.start(2, 5, 0.0, BrushParams(size=1, smoothing=False))
    session.update(20, 5, 10.0)
    assert bitmap.opaque_pixels() == {(x, 5) for x in range(2, 21)}
    assert session.last_drawn == (20, 5)


@pytest.mark.session
def test_size_override_per_update(session, bitmap):
    session.start(5, 5, 0.0, BrushParams(size=1, smoothing=False))
    session.update(10, 5, 10.0, size=3)
    assert (10, 4) in bitmap.opaque_pixels()
    assert (10, 6) in bitmap.opaque_pixels()


@pytest.mark.session
def test_pixel_exact_stroke(session, bitmap):
    session.start(0, 0, 0.0, BrushParams(size=5, pixel_exact=True))
    session.update(5, 2, 10.0)
    assert bitmap.opaque_pixels() == set(bresenham_line(0, 0, 5, 2))


@pytest.mark.session
def test_push_uses_default_brush(bitmap):
    s = StrokeSession(bitmap, brush=BrushParams(size=1, smoothing=False))
    s.push((1, 1, 0.0))
    assert s.is_active
    s.push((5, 1, 10.0))
    summary = s.finish()
    assert summary.samples == 2
    assert bitmap.opaque_pixels() == {(x, 1) for x in range(1, 6)}


@pytest.mark.session
def test_offcanvas_stroke_writes_nothing(session, bitmap):
    session.start(-50, -50, 0.0, BrushParams(size=3))
    for i in range(1, 8):
        session.update(-50 + 5 * i, -50 + 5 * i, 16.0 * i)
    summary = session.finish()
    assert bitmap.writes == 0
    assert summary.pixels_written == 0
    assert summary.bbox is None


@pytest.mark.smoothing
def test_history_bounded_through_session(session):
    session.start(0, 0, 0.0, BrushParams(size=1))
    for i in range(1, 400):
        session.update(i * 10.0, 0.0, i * 5.0)
        assert len(session.filter) <= 150
    assert len(session.filter) == 150


@pytest.mark.smoothing
def test_rapid_close_samples_keep_latest(session):
    session.start(0, 0, 0.0, BrushParams(size=1))
    for i in range(1, 151):
        session.update(i * 0.1, 0.0, i * 16.0)
    last = session.filter.last()
    assert len(session.filter) <= 150
    assert (last.x, last.y) == (150 * 0.1, 0.0)
    assert session.finish().merged_samples > 0


def test_stroke_id_in_logging_context(session):
    session.start(1, 1, 0.0, BrushParams(size=1))
    assert get_context().get('stroke') == session.stroke_id
    session.finish()
    assert 'stroke' not in get_context()


def test_summary_to_dict(session):
    session.start(5, 5, 0.0, BrushParams(size=1))
    d = session.finish().to_dict()
    assert d['bbox'] == [5, 5, 5, 5]
    assert set(d) >= {'stroke_id', 'dabs', 'pixels_written', 'samples', 'mean_update_ms'}


def test_add_commit_listener(bitmap):
    seen = []
    s = StrokeSession(bitmap)
    s.add_commit_listener(seen.append)
    s.add_commit_listener(lambda summary: seen.append(summary.stroke_id))
    s.start(1, 1, 0.0, BrushParams(size=1))
    summary = s.finish()
    assert seen == [summary, summary.stroke_id]
