"""
Abstract base class for pointer input forwarders
"""

import time
from abc import ABC, abstractmethod
from typing import List, Optional


class BaseInputHandler(ABC):
    """Abstract base class for input handlers.

    Handlers forward one pointer stream at a time as ``stroke_start``,
    ``stroke_continue`` and ``stroke_end`` callbacks. Timestamps attached to
    the events are strictly increasing within a stroke.
    """

    def __init__(self):
        self.is_drawing = False
        self.current_stroke: List[List[float]] = []
        self.last_timestamp: Optional[float] = None
        self.callbacks = {"stroke_start": [], "stroke_continue": [], "stroke_end": []}

    def add_callback(self, event_type: str, callback):
        """Add callback for input events"""
        if event_type in self.callbacks:
            self.callbacks[event_type].append(callback)

    def trigger_callback(self, event_type: str, data=None):
        """Trigger callbacks for specific events"""
        for callback in self.callbacks.get(event_type, []):
            callback(data)

    def next_timestamp(self, timestamp: Optional[float] = None) -> Optional[float]:
        """Return the event timestamp, or None if it does not advance the clock"""
        if timestamp is None:
            timestamp = time.monotonic()
        if self.last_timestamp is not None and timestamp <= self.last_timestamp:
            return None
        self.last_timestamp = timestamp
        return timestamp

    @abstractmethod
    def start_capture(self):
        """Start capturing input"""
        pass

    @abstractmethod
    def stop_capture(self):
        """Stop capturing input"""
        pass

    @abstractmethod
    def is_point_valid(self, x: int, y: int) -> bool:
        """Check if point is within valid drawing area"""
        pass
