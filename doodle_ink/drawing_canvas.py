"""
Manages the drawing session, its cached bitmap and rendering
"""

import itertools
import logging
import time
from typing import List, Optional, Tuple

import cv2
import numpy as np

from doodle_ink.config import CLEAR_FADE_SECONDS, DEFAULT_CANVAS_SIZE
from doodle_ink.errors import ExportError
from doodle_ink.geometry import (
    Color,
    Point,
    Sample,
    allocate_surface,
    copy_surface,
    stamp_dot,
    surface_size,
)
from doodle_ink.processors.curve_fitter import CurveFitter
from doodle_ink.segments import PathSegment, Stroke, StrokeStyle, draw_segment

_logger = logging.getLogger(__name__)


class DrawingCanvas:
    """Manages drawing canvas and stroke rendering.

    Segments are kept in an append-only list in draw order and rasterized
    into a cached BGRA bitmap. New segments are composited on top of the
    cache one at a time; undo rebuilds the cache from the remaining segments.
    """

    def __init__(
        self,
        width: int = DEFAULT_CANVAS_SIZE[0],
        height: int = DEFAULT_CANVAS_SIZE[1],
        style: Optional[StrokeStyle] = None,
    ):
        self.width, self.height = surface_size(width, height)
        self.style = style if style is not None else StrokeStyle()

        self.all_segments: List[PathSegment] = []
        self.stroke_history: List[Stroke] = []
        self.cached_bitmap: Optional[np.ndarray] = None

        self._seq = itertools.count(1)
        self._fitter = CurveFitter(self.style, self._seq)
        self._current_stroke: List[PathSegment] = []
        self._pending_draw: List[PathSegment] = []

        self.clear_fade_seconds = CLEAR_FADE_SECONDS
        self.callbacks = {"display": [], "clear": []}

    # Callbacks

    def add_callback(self, event_type: str, callback):
        """Add callback for canvas events"""
        if event_type in self.callbacks:
            self.callbacks[event_type].append(callback)

    def trigger_callback(self, event_type: str, data=None):
        """Trigger callbacks for specific events"""
        for callback in self.callbacks.get(event_type, []):
            callback(data)

    # Style

    @property
    def stroke_color(self) -> Color:
        return self.style.color

    @stroke_color.setter
    def stroke_color(self, color: Color):
        self.set_style(color=color)

    @property
    def stroke_width(self) -> float:
        return self.style.base_width

    @stroke_width.setter
    def stroke_width(self, width: float):
        self.set_style(base_width=width)

    @property
    def is_stroke_width_constant(self) -> bool:
        return self.style.is_constant_width

    @is_stroke_width_constant.setter
    def is_stroke_width_constant(self, is_constant: bool):
        self.set_style(is_constant_width=is_constant)

    def set_style(
        self,
        color: Optional[Color] = None,
        base_width: Optional[float] = None,
        is_constant_width: Optional[bool] = None,
    ) -> int:
        """Replace the stroke style and discard the in-flight fit window.

        Returns the number of raw samples that were discarded.
        """
        self.style = StrokeStyle(
            color=self.style.color if color is None else color,
            base_width=self.style.base_width if base_width is None else base_width,
            is_constant_width=(
                self.style.is_constant_width
                if is_constant_width is None
                else bool(is_constant_width)
            ),
        )
        return self._fitter.set_style(self.style)

    # Touch handling

    def touch_began(self, point: Point, timestamp: Optional[float] = None):
        """Start a new stroke at point"""
        self._current_stroke = []
        self._fitter.begin(Sample(point, self._timestamp(timestamp)))
        self.draw_latest_only()

    def touch_moved(self, point: Point, timestamp: Optional[float] = None):
        """Feed a moved point, drawing any segment it completes"""
        segment = self._fitter.add(Sample(point, self._timestamp(timestamp)))
        if segment is not None:
            self._append_segment(segment)
            self.draw_latest_only()

    def touch_ended(self) -> Optional[Stroke]:
        """Finish the active stroke and record it for undo"""
        if not self._fitter.is_collecting:
            _logger.debug("touch_ended without an active stroke")
            return None

        dot = self._fitter.finish()
        if dot is not None:
            self._append_segment(dot)
        self.draw_latest_only()

        stroke = None
        if self._current_stroke:
            stroke = Stroke(tuple(self._current_stroke))
            self.stroke_history.append(stroke)
            _logger.debug("Stroke sealed with %d segments", len(stroke))
        self._current_stroke = []
        return stroke

    def add_stroke(self, points: List[Tuple[float, float, float]]) -> Optional[Stroke]:
        """Replay a recorded list of (x, y, timestamp) points as one stroke"""
        if not points:
            return None
        x, y, t = points[0]
        self.touch_began((x, y), t)
        for x, y, t in points[1:]:
            self.touch_moved((x, y), t)
        return self.touch_ended()

    # Undo / clear

    def undo_last_stroke(self) -> Optional[Stroke]:
        """Remove the most recent completed stroke and redraw"""
        if not self.stroke_history:
            return None

        stroke = self.stroke_history.pop()
        self.all_segments = [
            s for s in self.all_segments if s.seq not in stroke.seq_ids
        ]
        self._fitter.discard_window()
        self.cached_bitmap = None
        self.redraw_all()
        _logger.debug("Undid stroke with %d segments", len(stroke))
        return stroke

    def clear(self):
        """Clear the canvas"""
        self.all_segments = []
        self.stroke_history = []
        self._current_stroke = []
        self._pending_draw = []
        self._fitter.discard_window()
        self.cached_bitmap = None
        self.trigger_callback("clear", {"duration": self.clear_fade_seconds})

    clear_all = clear

    # Drawing

    def draw_latest_only(self):
        """Composite segments drawn since the last call onto the cache"""
        if self.cached_bitmap is None:
            self.redraw_all()
            return

        surface = copy_surface(self.cached_bitmap)
        for segment in self._pending_draw:
            draw_segment(segment, surface)
        self._pending_draw = []
        self.cached_bitmap = surface
        self.trigger_callback("display", self._with_preview(surface))

    def redraw_all(self):
        """Rasterize every segment from a blank surface"""
        surface = allocate_surface(self.width, self.height)
        for segment in self.all_segments:
            draw_segment(segment, surface)
        self._pending_draw = []
        self.cached_bitmap = surface
        self.trigger_callback("display", self._with_preview(surface))

    def get_canvas_copy(self) -> np.ndarray:
        """Get copy of current canvas, including a preview of a pending tap"""
        if self.cached_bitmap is None:
            canvas = allocate_surface(self.width, self.height)
        else:
            canvas = copy_surface(self.cached_bitmap)
        self._draw_preview(canvas)
        return canvas

    def _has_preview(self) -> bool:
        fitter = self._fitter
        return fitter.is_collecting and fitter.samples_seen == fitter.pending_samples == 1

    def _draw_preview(self, canvas: np.ndarray):
        """Stamp the dot a lone pending sample would become"""
        if self._has_preview():
            stamp_dot(
                canvas,
                self._fitter.window[0].position,
                self._fitter.width_model.dot_width(),
                self.style.color,
            )

    def _with_preview(self, surface: np.ndarray) -> np.ndarray:
        """Return the frame to display, never writing the preview into surface"""
        if not self._has_preview():
            return surface
        frame = copy_surface(surface)
        self._draw_preview(frame)
        return frame

    # Rendering

    def render_onto(
        self, background: Optional[np.ndarray], output_size: Tuple[int, int]
    ) -> np.ndarray:
        """Render every segment over background into a new output_size image.

        The background is scaled to the canvas size, not to output_size, and
        anchored at the top-left corner. The cached bitmap is not used.
        """
        segments = tuple(self.all_segments)
        out_width, out_height = surface_size(*output_size)
        surface = allocate_surface(out_width, out_height)

        if background is not None:
            scaled = cv2.resize(
                _to_bgra(background),
                (self.width, self.height),
                interpolation=cv2.INTER_AREA,
            )
            h = min(out_height, self.height)
            w = min(out_width, self.width)
            surface[:h, :w] = scaled[:h, :w]

        for segment in segments:
            draw_segment(segment, surface)
        return surface

    def render_on_color(
        self, color: Color, output_size: Optional[Tuple[int, int]] = None
    ) -> np.ndarray:
        """Render the drawing over a solid background color"""
        if output_size is None:
            output_size = (self.width, self.height)
        background = np.empty((self.height, self.width, 3), dtype=np.uint8)
        background[:] = color
        return self.render_onto(background, output_size)

    # UI helpers

    def add_ui_text(
        self,
        canvas: np.ndarray,
        text: str,
        position: Tuple[int, int],
        font_scale: float = 0.6,
        color: Tuple[int, int, int, int] = (100, 100, 100, 255),
    ) -> np.ndarray:
        """Add UI text to canvas"""
        cv2.putText(
            canvas,
            text,
            position,
            cv2.FONT_HERSHEY_SIMPLEX,
            font_scale,
            color,
            1,
        )
        return canvas

    def get_stroke_stats(self) -> dict:
        """Get statistics about current drawing"""
        return {
            "num_strokes": len(self.stroke_history),
            "num_segments": len(self.all_segments),
            "pending_samples": self._fitter.pending_samples,
        }

    # Internals

    def _append_segment(self, segment: PathSegment):
        self.all_segments.append(segment)
        self._current_stroke.append(segment)
        self._pending_draw.append(segment)

    @staticmethod
    def _timestamp(timestamp: Optional[float]) -> float:
        return time.monotonic() if timestamp is None else timestamp


def _to_bgra(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGRA)
    if image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2BGRA)
    return image


def save_image(path: str, image: np.ndarray) -> str:
    """Write a rendered image to disk"""
    try:
        ok = cv2.imwrite(path, image)
    except cv2.error as exc:
        raise ExportError(f"Could not write {path}: {exc}") from exc
    if not ok:
        raise ExportError(f"Could not write {path}")
    return path
