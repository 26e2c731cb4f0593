"""
Mouse-based drawing input handler
"""

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from doodle_ink.inputs.base_input import BaseInputHandler

_logger = logging.getLogger(__name__)


class MouseInputHandler(BaseInputHandler):
    """Handles mouse input for drawing"""

    def __init__(self, window_name: str, canvas_size: Tuple[int, int]):
        super().__init__()
        self.window_name = window_name
        self.canvas_width, self.canvas_height = canvas_size
        self.last_point: Optional[Tuple[int, int]] = None
        self.min_point_distance = 2

    def start_capture(self):
        """Start mouse capture"""
        cv2.setMouseCallback(self.window_name, self._mouse_callback)

    def stop_capture(self):
        """Stop mouse capture"""
        cv2.setMouseCallback(self.window_name, lambda *args: None)

    def is_point_valid(self, x: int, y: int) -> bool:
        """Check if point is within canvas bounds"""
        return 0 <= x < self.canvas_width and 0 <= y < self.canvas_height

    def _mouse_callback(self, event, x, y, flags, param):
        """Handle mouse events"""
        if event == cv2.EVENT_LBUTTONUP:
            self._end_stroke()
            return

        if not self.is_point_valid(x, y):
            return

        if event == cv2.EVENT_LBUTTONDOWN:
            self._start_stroke(x, y)
        elif event == cv2.EVENT_MOUSEMOVE and self.is_drawing:
            self._continue_stroke(x, y)

    def _start_stroke(self, x: int, y: int, timestamp: Optional[float] = None):
        """Start new stroke"""
        self.last_timestamp = None
        timestamp = self.next_timestamp(timestamp)
        self.is_drawing = True
        self.last_point = (x, y)
        self.current_stroke = [[x, y, timestamp]]
        self.trigger_callback("stroke_start", {"x": x, "y": y, "timestamp": timestamp})

    def _continue_stroke(self, x: int, y: int, timestamp: Optional[float] = None):
        """Continue current stroke"""
        if self.last_point is None:
            return

        # Only add point if moved minimum distance
        distance = np.hypot(x - self.last_point[0], y - self.last_point[1])
        if distance < self.min_point_distance:
            return

        timestamp = self.next_timestamp(timestamp)
        if timestamp is None:
            _logger.debug("Dropping mouse sample with stale timestamp at (%d, %d)", x, y)
            return

        self.current_stroke.append([x, y, timestamp])
        self.trigger_callback(
            "stroke_continue",
            {"from": self.last_point, "to": (x, y), "timestamp": timestamp},
        )
        self.last_point = (x, y)

    def _end_stroke(self):
        """End current stroke"""
        if not self.is_drawing:
            return
        self.is_drawing = False
        self.last_point = None
        self.trigger_callback("stroke_end", {"stroke": self.current_stroke.copy()})
        self.current_stroke = []
