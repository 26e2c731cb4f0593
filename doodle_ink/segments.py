"""
Path segments, strokes and the segment rasterizer
"""

import math
from dataclasses import dataclass, field
from typing import FrozenSet, Tuple, Union

import cv2
import numpy as np

from doodle_ink.config import (
    DEFAULT_CONSTANT_WIDTH,
    DEFAULT_STROKE_COLOR,
    DEFAULT_STROKE_WIDTH,
    DRAW_STEPS_PER_BEZIER,
    POLYLINE_STEPS_PER_BEZIER,
    SUBPIXEL_SHIFT,
)
from doodle_ink.geometry import (
    Color,
    Point,
    bgra,
    cubic_bezier_points,
    stamp_dot,
)


def _check_color(color) -> Color:
    if len(color) != 3 or not all(0 <= int(c) <= 255 for c in color):
        raise ValueError(f"Color must be a BGR triple in 0..255, got {color}")
    return tuple(int(c) for c in color)


@dataclass(frozen=True)
class StrokeStyle:
    """Style applied to newly fitted segments"""

    color: Color = DEFAULT_STROKE_COLOR
    base_width: float = DEFAULT_STROKE_WIDTH
    is_constant_width: bool = DEFAULT_CONSTANT_WIDTH

    def __post_init__(self):
        object.__setattr__(self, "color", _check_color(self.color))
        if not self.base_width > 0:
            raise ValueError(f"Stroke width must be positive, got {self.base_width}")


@dataclass(frozen=True)
class Dot:
    """A single-sample touch drawn as a filled circle"""

    position: Point
    width: float
    color: Color
    seq: int = 0

    def __post_init__(self):
        if not self.width > 0:
            raise ValueError(f"Dot width must be positive, got {self.width}")

    def rasterize(self, surface: np.ndarray):
        stamp_dot(surface, self.position, self.width, self.color)


@dataclass(frozen=True)
class BezierStroke:
    """One fitted cubic bezier with a width at each end"""

    start: Point
    end: Point
    ctrl1: Point
    ctrl2: Point
    start_width: float
    end_width: float
    color: Color
    is_constant_width: bool = False
    timestamp: float = 0.0
    seq: int = 0

    def __post_init__(self):
        if not (self.start_width > 0 and self.end_width > 0):
            raise ValueError(
                f"Segment widths must be positive, got {self.start_width}, {self.end_width}"
            )
        if self.is_constant_width and self.start_width != self.end_width:
            raise ValueError("Constant-width segment needs equal end widths")

    def point_at(self, t) -> np.ndarray:
        return cubic_bezier_points(self.start, self.ctrl1, self.ctrl2, self.end, t)

    def width_at(self, t):
        # Cubic weight, not linear: eases the width change toward the end
        return self.start_width + (t**3) * (self.end_width - self.start_width)

    def rasterize(self, surface: np.ndarray):
        if self.is_constant_width:
            self._stroke_path(surface)
        else:
            self._stamp_ribbon(surface)

    def _stroke_path(self, surface: np.ndarray):
        """Stroke the curve with a single round-capped polyline.

        OpenCV only takes whole-pixel thickness, so fractional widths are
        rounded up rather than drawn thinner than requested.
        """
        t = np.linspace(0.0, 1.0, POLYLINE_STEPS_PER_BEZIER + 1)
        points = np.rint(self.point_at(t) * (1 << SUBPIXEL_SHIFT)).astype(np.int32)
        cv2.polylines(
            surface,
            [points.reshape(-1, 1, 2)],
            False,
            bgra(self.color),
            thickness=self.line_thickness(),
            lineType=cv2.LINE_AA,
            shift=SUBPIXEL_SHIFT,
        )

    def line_thickness(self) -> int:
        return max(1, int(math.ceil(self.start_width)))

    def _stamp_ribbon(self, surface: np.ndarray):
        """Approximate a tapered stroke with evenly parameterized dots"""
        t = np.arange(DRAW_STEPS_PER_BEZIER, dtype=np.float64) / DRAW_STEPS_PER_BEZIER
        points = self.point_at(t)
        widths = self.width_at(t)
        for (x, y), width in zip(points, widths):
            stamp_dot(surface, (x, y), width, self.color)


PathSegment = Union[Dot, BezierStroke]


def draw_segment(segment: PathSegment, surface: np.ndarray):
    """Rasterize one segment onto a BGRA surface"""
    segment.rasterize(surface)


@dataclass(frozen=True)
class Stroke:
    """Segments drawn between one pointer-down and its pointer-up"""

    segments: Tuple[PathSegment, ...]
    seq_ids: FrozenSet[int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "seq_ids", frozenset(s.seq for s in self.segments))

    def __len__(self):
        return len(self.segments)


__all__ = [
    "BezierStroke",
    "Dot",
    "PathSegment",
    "Stroke",
    "StrokeStyle",
    "draw_segment",
]
