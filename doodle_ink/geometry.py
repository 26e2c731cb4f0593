"""
Geometry and raster primitives shared by the fitter and the rasterizer
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

from doodle_ink.config import SUBPIXEL_SHIFT
from doodle_ink.errors import SurfaceAllocationError

Point = Tuple[float, float]
Color = Tuple[int, int, int]

_FIXED_SCALE = 1 << SUBPIXEL_SHIFT


@dataclass(frozen=True)
class Sample:
    """One pointer sample: where and when the touch was seen"""

    position: Point
    timestamp: float

    def __post_init__(self):
        x, y = self.position
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Sample position must be finite, got {self.position}")
        object.__setattr__(self, "position", (float(x), float(y)))

    def velocity_from(self, origin: "Sample") -> Optional[float]:
        """Speed (px/sec) travelled from origin to this sample.

        Returns None when the two samples share a timestamp (or arrive out of
        order), since no finite speed can be derived from them.
        """
        interval = self.timestamp - origin.timestamp
        if interval <= 0.0:
            return None
        return distance(self.position, origin.position) / interval


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)


def cubic_bezier_points(
    start: Point, ctrl1: Point, ctrl2: Point, end: Point, t: np.ndarray
) -> np.ndarray:
    """Evaluate a cubic bezier at every parameter in t, returns an (N, 2) array"""
    t = np.asarray(t, dtype=np.float64)[:, None]
    u = 1.0 - t
    return (
        u * u * u * np.asarray(start)
        + 3.0 * u * u * t * np.asarray(ctrl1)
        + 3.0 * u * t * t * np.asarray(ctrl2)
        + t * t * t * np.asarray(end)
    )


def to_fixed(value: float) -> int:
    """Convert a coordinate to OpenCV fixed point for the configured shift"""
    return int(round(value * _FIXED_SCALE))


def bgra(color: Color) -> Tuple[int, int, int, int]:
    b, g, r = color
    return (int(b), int(g), int(r), 255)


def stamp_dot(surface: np.ndarray, center: Point, width: float, color: Color):
    """Fill a circle of diameter width centred at center"""
    cv2.circle(
        surface,
        (to_fixed(center[0]), to_fixed(center[1])),
        max(0, to_fixed(width / 2)),
        bgra(color),
        thickness=-1,
        lineType=cv2.LINE_AA,
        shift=SUBPIXEL_SHIFT,
    )


def surface_size(width, height) -> Tuple[int, int]:
    """Validate a surface size, returning it as plain ints.

    Integral floats such as 120.0 are accepted and converted, since numpy
    slicing and OpenCV dsize arguments both need real ints.
    """
    size = (width, height)
    try:
        valid = int(width) == width and int(height) == height
    except (TypeError, ValueError, OverflowError):
        valid = False
    if not valid or width <= 0 or height <= 0:
        raise SurfaceAllocationError(size, "dimensions must be positive integers")
    return int(width), int(height)


def allocate_surface(width: int, height: int) -> np.ndarray:
    """Allocate a blank, fully transparent BGRA surface"""
    width, height = surface_size(width, height)
    try:
        return np.zeros((height, width, 4), dtype=np.uint8)
    except MemoryError as exc:
        raise SurfaceAllocationError((width, height), "out of memory") from exc


def copy_surface(surface: np.ndarray) -> np.ndarray:
    try:
        return surface.copy()
    except MemoryError as exc:
        height, width = surface.shape[:2]
        raise SurfaceAllocationError((width, height), "out of memory") from exc
