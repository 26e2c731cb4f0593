"""
Freehand drawing engine: bezier stroke smoothing and incremental rendering
"""

from doodle_ink.drawing_canvas import DrawingCanvas, save_image
from doodle_ink.errors import DoodleInkError, ExportError, SurfaceAllocationError
from doodle_ink.geometry import Sample
from doodle_ink.segments import BezierStroke, Dot, Stroke, StrokeStyle, draw_segment

__version__ = "0.1.0"
