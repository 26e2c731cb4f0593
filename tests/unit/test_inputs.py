"""Unit tests for the mouse input forwarder and its wiring to the canvas."""

import cv2
import pytest

from doodle_ink.drawing_canvas import DrawingCanvas
from doodle_ink.inputs.mouse_input import MouseInputHandler


@pytest.fixture
def handler():
    return MouseInputHandler("test window", (100, 80))


def record(handler):
    events = []
    for name in ("stroke_start", "stroke_continue", "stroke_end"):
        handler.add_callback(name, lambda data, name=name: events.append((name, data)))
    return events


class TestMouseInputHandler:
    """Tests for MouseInputHandler event forwarding."""

    def test_point_validity(self, handler):
        assert handler.is_point_valid(0, 0)
        assert handler.is_point_valid(99, 79)
        assert not handler.is_point_valid(100, 10)
        assert not handler.is_point_valid(10, -1)

    def test_stroke_events(self, handler):
        events = record(handler)
        handler._start_stroke(5, 5, timestamp=1.0)
        handler._continue_stroke(15, 5, timestamp=1.1)
        handler._end_stroke()

        assert [name for name, _ in events] == ["stroke_start", "stroke_continue", "stroke_end"]
        assert events[0][1] == {"x": 5, "y": 5, "timestamp": 1.0}
        assert events[1][1] == {"from": (5, 5), "to": (15, 5), "timestamp": 1.1}
        assert events[2][1] == {"stroke": [[5, 5, 1.0], [15, 5, 1.1]]}

    def test_stale_timestamp_dropped(self, handler):
        events = record(handler)
        handler._start_stroke(5, 5, timestamp=1.0)
        handler._continue_stroke(15, 5, timestamp=1.0)
        handler._continue_stroke(25, 5, timestamp=0.5)
        assert [name for name, _ in events] == ["stroke_start"]

    def test_small_moves_ignored(self, handler):
        events = record(handler)
        handler._start_stroke(5, 5, timestamp=1.0)
        handler._continue_stroke(6, 5, timestamp=1.1)
        assert len(events) == 1

    def test_mouse_callback_dispatch(self, handler):
        events = record(handler)
        handler._mouse_callback(cv2.EVENT_LBUTTONDOWN, 10, 10, 0, None)
        handler._mouse_callback(cv2.EVENT_MOUSEMOVE, 500, 500, 0, None)
        handler._mouse_callback(cv2.EVENT_LBUTTONUP, 500, 500, 0, None)
        assert [name for name, _ in events] == ["stroke_start", "stroke_end"]
        assert not handler.is_drawing

    def test_button_up_without_stroke(self, handler):
        events = record(handler)
        handler._end_stroke()
        assert events == []


def test_handler_drives_canvas(handler):
    canvas = DrawingCanvas(100, 80)
    handler.add_callback(
        "stroke_start", lambda d: canvas.touch_began((d["x"], d["y"]), d["timestamp"])
    )
    handler.add_callback(
        "stroke_continue", lambda d: canvas.touch_moved(d["to"], d["timestamp"])
    )
    handler.add_callback("stroke_end", lambda d: canvas.touch_ended())

    handler._start_stroke(10, 40, timestamp=0.0)
    for i in range(1, 8):
        handler._continue_stroke(10 + 8 * i, 40, timestamp=0.02 * i)
    handler._end_stroke()

    assert len(canvas.stroke_history) == 1
    assert len(canvas.all_segments) == 2
