"""Shared pytest fixtures for the doodle_ink test suite.

Fixtures:
    canvas: Small DrawingCanvas with the default style
    wavy_points: Factory for smooth pointer paths
    feed_stroke: Helper that plays a point list through a canvas as one stroke
"""

import math

import pytest

from doodle_ink.drawing_canvas import DrawingCanvas


@pytest.fixture
def canvas():
    """Return a 120x90 canvas with default style."""
    return DrawingCanvas(120, 90)


@pytest.fixture
def wavy_points():
    """Return a factory producing a sine-shaped path of n points.

    Args (of the factory):
        n: Number of points.
        y_offset: Vertical offset of the path.
        step: Horizontal spacing between points.
    """

    def make(n, y_offset=45.0, step=4.0):
        return [
            (10.0 + i * step, y_offset + 15.0 * math.sin(i / 3.0)) for i in range(n)
        ]

    return make


@pytest.fixture
def feed_stroke():
    """Return a helper that draws points as one stroke with increasing timestamps."""

    def feed(canvas, points, t0=0.0, dt=0.01):
        canvas.touch_began(points[0], t0)
        for i, point in enumerate(points[1:], start=1):
            canvas.touch_moved(point, t0 + i * dt)
        return canvas.touch_ended()

    return feed
