"""
Fits raw pointer samples to cubic bezier segments
"""

import itertools
import logging
from typing import Iterator, List, Optional

from doodle_ink.config import FIT_WINDOW_CARRY, FIT_WINDOW_SIZE
from doodle_ink.geometry import Sample, midpoint
from doodle_ink.processors.width_model import StrokeWidthModel
from doodle_ink.segments import BezierStroke, Dot, StrokeStyle

_logger = logging.getLogger(__name__)


class CurveFitter:
    """Rolling-window bezier fitter for one pointer stream.

    Every fifth sample in the window closes a segment. Its end point is the
    midpoint of the third and fifth samples, and the window then keeps that
    end point plus the fifth sample, so each new segment starts exactly where
    the previous one ended.
    """

    def __init__(self, style: StrokeStyle, seq_source: Optional[Iterator[int]] = None):
        self.style = style
        self.width_model = StrokeWidthModel(style.base_width)
        self.seq_source = seq_source if seq_source is not None else itertools.count(1)
        self.window: List[Sample] = []
        self.is_collecting = False
        self.samples_seen = 0

    @property
    def pending_samples(self) -> int:
        return len(self.window)

    def begin(self, sample: Sample):
        """Start a new stroke at sample"""
        self.width_model.reset(self.style.base_width)
        self.window = [sample]
        self.samples_seen = 1
        self.is_collecting = True

    def add(self, sample: Sample) -> Optional[BezierStroke]:
        """Add a moved sample, returning a segment when the window fills"""
        if not self.is_collecting:
            _logger.debug("Ignoring sample outside of a stroke: %s", sample)
            return None

        self.window.append(sample)
        self.samples_seen += 1
        if len(self.window) < FIT_WINDOW_SIZE:
            return None

        segment = self._fit_window()
        self.window = self.window[-FIT_WINDOW_CARRY:]
        return segment

    def finish(self) -> Optional[Dot]:
        """End the stroke, returning a dot for a stationary tap"""
        dot = None
        if self.is_collecting and self.samples_seen == 1 and len(self.window) == 1:
            dot = Dot(
                position=self.window[0].position,
                width=self.width_model.dot_width(),
                color=self.style.color,
                seq=next(self.seq_source),
            )
        self.window = []
        self.samples_seen = 0
        self.is_collecting = False
        self.width_model.reset(self.style.base_width)
        return dot

    def discard_window(self) -> int:
        """Drop unflushed samples without emitting a partial segment"""
        discarded = len(self.window)
        self.window = []
        self.width_model.reset(self.style.base_width)
        if discarded:
            _logger.debug("Discarded %d pending samples", discarded)
        return discarded

    def set_style(self, style: StrokeStyle) -> int:
        self.style = style
        return self.discard_window()

    def _fit_window(self) -> BezierStroke:
        p0, p1, p2, _, p4 = self.window

        # The synthesized end point replaces p3 and is stamped with p4's time
        end_sample = Sample(midpoint(p2.position, p4.position), p4.timestamp)
        self.window[3] = end_sample

        if self.style.is_constant_width:
            start_width = end_width = self.style.base_width
        else:
            start_width, end_width = self.width_model.next_widths(
                end_sample.velocity_from(p0)
            )

        segment = BezierStroke(
            start=p0.position,
            end=end_sample.position,
            ctrl1=p1.position,
            ctrl2=p2.position,
            start_width=start_width,
            end_width=end_width,
            color=self.style.color,
            is_constant_width=self.style.is_constant_width,
            timestamp=p0.timestamp,
            seq=next(self.seq_source),
        )
        _logger.debug("Fitted segment %d ending at %s", segment.seq, segment.end)
        return segment
