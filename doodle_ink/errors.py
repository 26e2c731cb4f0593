"""
Exceptions raised by the drawing engine
"""


class DoodleInkError(Exception):
    """Base class for drawing engine errors"""


class SurfaceAllocationError(DoodleInkError):
    """A raster surface could not be allocated"""

    def __init__(self, size, reason: str):
        self.size = size
        super().__init__(f"Cannot allocate {size[0]}x{size[1]} surface: {reason}")


class ExportError(DoodleInkError):
    """A rendered image could not be written out"""
