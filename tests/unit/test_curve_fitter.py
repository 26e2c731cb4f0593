"""Unit tests for the rolling-window bezier fitter."""

import itertools

import pytest

from doodle_ink.geometry import Sample
from doodle_ink.processors.curve_fitter import CurveFitter
from doodle_ink.segments import BezierStroke, Dot, StrokeStyle


def run(fitter, points, dt=0.1):
    """Feed points through a fitter, returning emitted segments."""
    fitter.begin(Sample(points[0], 0.0))
    segments = []
    for i, point in enumerate(points[1:], start=1):
        segment = fitter.add(Sample(point, i * dt))
        if segment is not None:
            segments.append(segment)
    return segments


@pytest.fixture
def fitter():
    return CurveFitter(StrokeStyle(color=(0, 0, 255), base_width=10.0))


class TestFitting:
    """Tests for segment construction."""

    def test_five_samples_make_one_segment(self, fitter):
        points = [(0, 0), (10, 0), (20, 0), (30, 0), (40, 0)]
        segments = run(fitter, points)

        assert len(segments) == 1
        segment = segments[0]
        assert isinstance(segment, BezierStroke)
        assert segment.start == (0.0, 0.0)
        assert segment.ctrl1 == (10.0, 0.0)
        assert segment.ctrl2 == (20.0, 0.0)
        assert segment.end == (30.0, 0.0)
        assert segment.color == (0, 0, 255)

    def test_no_segment_before_window_fills(self, fitter):
        assert run(fitter, [(0, 0), (1, 1), (2, 2), (3, 3)]) == []
        assert fitter.pending_samples == 4

    def test_window_slides_by_three(self, fitter):
        """Segments are emitted at the 4th move, then every 3 moves."""
        points = [(i * 5.0, 0.0) for i in range(14)]
        assert len(run(fitter, points)) == 4

    def test_window_keeps_end_and_last_sample(self, fitter):
        run(fitter, [(0, 0), (10, 0), (20, 0), (30, 0), (40, 0)])
        assert [s.position for s in fitter.window] == [(30.0, 0.0), (40.0, 0.0)]
        assert fitter.window[0].timestamp == pytest.approx(0.4)

    def test_segments_are_continuous(self, fitter):
        points = [(i * 3.0, (i % 4) * 7.0) for i in range(40)]
        segments = run(fitter, points)
        assert len(segments) > 5
        for previous, current in zip(segments, segments[1:]):
            assert current.start == previous.end

    def test_variable_width_from_velocity(self, fitter):
        segment = run(fitter, [(0, 0), (10, 0), (20, 0), (30, 0), (40, 0)])[0]
        model = fitter.width_model
        # 30 px between (0,0)@0.0 and the synthesized end point stamped @0.4
        expected = model.width_for_velocity(0.9 * (30.0 / 0.4) + 0.1 * 220.0)
        assert segment.start_width == 10.0
        assert segment.end_width == pytest.approx(expected)
        assert not segment.is_constant_width

    def test_constant_width_mode(self):
        fitter = CurveFitter(StrokeStyle(base_width=6.0, is_constant_width=True))
        segments = run(fitter, [(i * 9.0, i * 2.0) for i in range(20)], dt=0.001)
        assert segments
        for segment in segments:
            assert segment.is_constant_width
            assert segment.start_width == segment.end_width == 6.0

    def test_zero_time_delta_keeps_width_finite(self, fitter):
        fitter.begin(Sample((0, 0), 1.0))
        segment = None
        for x in (10, 20, 30, 40):
            segment = fitter.add(Sample((x, 0), 1.0))
        assert segment is not None
        assert segment.end_width == pytest.approx(fitter.width_model.width_for_velocity(220.0))

    def test_sequence_ids_increase(self):
        fitter = CurveFitter(StrokeStyle(), itertools.count(100))
        segments = run(fitter, [(i * 4.0, 0.0) for i in range(11)])
        assert [s.seq for s in segments] == [100, 101, 102]

    def test_add_while_idle_is_ignored(self, fitter):
        assert fitter.add(Sample((1, 1), 0.0)) is None
        assert fitter.pending_samples == 0


class TestFinish:
    """Tests for ending a stroke."""

    def test_tap_makes_dot(self, fitter):
        fitter.begin(Sample((12, 34), 0.0))
        dot = fitter.finish()
        assert isinstance(dot, Dot)
        assert dot.position == (12.0, 34.0)
        assert dot.width == pytest.approx(1.5 * fitter.width_model.width_for_velocity(220.0))
        assert not fitter.is_collecting

    def test_moved_stroke_makes_no_dot(self, fitter):
        run(fitter, [(0, 0), (10, 0), (20, 0), (30, 0), (40, 0)])
        assert fitter.finish() is None

    def test_short_stroke_is_dropped(self, fitter):
        run(fitter, [(0, 0), (5, 5), (10, 10)])
        assert fitter.finish() is None
        assert fitter.pending_samples == 0


class TestStyleChange:
    """Tests for discarding the in-flight window."""

    def test_set_style_discards_window(self, fitter):
        run(fitter, [(0, 0), (1, 0), (2, 0), (3, 0)])
        discarded = fitter.set_style(StrokeStyle(color=(255, 0, 0)))
        assert discarded == 4
        assert fitter.pending_samples == 0
        assert fitter.is_collecting

    def test_new_style_applies_after_window_refills(self, fitter):
        run(fitter, [(0, 0), (1, 0), (2, 0)])
        fitter.set_style(StrokeStyle(color=(255, 0, 0)))
        emitted = [fitter.add(Sample((10 + i, 0), 1.0 + i * 0.1)) for i in range(5)]
        assert emitted[:4] == [None] * 4
        assert emitted[4].color == (255, 0, 0)
        assert emitted[4].start == (10.0, 0.0)

    def test_discarded_tap_makes_no_dot(self, fitter):
        fitter.begin(Sample((5, 5), 0.0))
        fitter.discard_window()
        assert fitter.finish() is None
