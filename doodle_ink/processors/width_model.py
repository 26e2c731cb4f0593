"""
Maps pointer velocity to stroke width
"""

import math
from typing import Optional, Tuple

from doodle_ink.config import (
    DOT_WIDTH_SCALE,
    INITIAL_VELOCITY,
    RELATIVE_MIN_STROKE_WIDTH,
    VELOCITY_FILTER_WEIGHT,
)


class StrokeWidthModel:
    """Velocity-filtered stroke width for variable-width drawing.

    Width follows a logistic curve centred on the reference velocity: slow
    movement approaches ``base_width`` and fast movement approaches
    ``RELATIVE_MIN_STROKE_WIDTH * base_width``. Raw velocities are smoothed
    with an exponential filter so consecutive segments of a stroke join
    without visible steps in width.
    """

    def __init__(
        self,
        base_width: float,
        initial_velocity: float = INITIAL_VELOCITY,
        filter_weight: float = VELOCITY_FILTER_WEIGHT,
    ):
        self.base_width = base_width
        self.initial_velocity = initial_velocity
        self.filter_weight = filter_weight
        self.last_velocity = initial_velocity
        self.last_width = base_width

    def reset(self, base_width: Optional[float] = None):
        """Seed the filter for a new stroke"""
        if base_width is not None:
            self.base_width = base_width
        self.last_velocity = self.initial_velocity
        self.last_width = self.base_width

    def width_for_velocity(self, velocity: float) -> float:
        v0 = self.initial_velocity
        span = self.base_width * (1 - RELATIVE_MIN_STROKE_WIDTH)
        return self.base_width - span / (1 + math.exp(-(velocity - v0) / v0))

    def dot_width(self) -> float:
        return DOT_WIDTH_SCALE * self.width_for_velocity(self.initial_velocity)

    def next_widths(self, raw_velocity: Optional[float]) -> Tuple[float, float]:
        """Return (start_width, end_width) for the next segment.

        A raw velocity of None (no usable time delta between samples) holds
        the filter at its last value instead of feeding it inf or NaN.
        """
        if raw_velocity is None or not math.isfinite(raw_velocity):
            velocity = self.last_velocity
        else:
            velocity = (
                self.filter_weight * raw_velocity
                + (1 - self.filter_weight) * self.last_velocity
            )

        width = self.width_for_velocity(velocity)
        start_width = self.last_width

        self.last_velocity = velocity
        self.last_width = width
        return start_width, width
