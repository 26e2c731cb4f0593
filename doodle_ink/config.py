"""
Drawing constants and default stroke style
"""

# Velocity filter and width model
VELOCITY_FILTER_WEIGHT = 0.9  # weight of the newest raw velocity
INITIAL_VELOCITY = 220.0  # reference velocity (px/sec), centre of the width curve
RELATIVE_MIN_STROKE_WIDTH = 0.4  # fastest strokes shrink to this fraction of base width
DOT_WIDTH_SCALE = 1.5  # single-tap dots are drawn this much wider

# Curve fitting
FIT_WINDOW_SIZE = 5  # raw samples per fitted bezier
FIT_WINDOW_CARRY = 2  # samples kept for the next bezier

# Rasterization
DRAW_STEPS_PER_BEZIER = 300  # stamped dots per variable-width segment
POLYLINE_STEPS_PER_BEZIER = 64  # flattening steps for constant-width segments
SUBPIXEL_SHIFT = 4  # fractional bits passed to OpenCV drawing calls

# Default style (BGR like the rest of OpenCV)
DEFAULT_STROKE_COLOR = (0, 0, 0)
DEFAULT_STROKE_WIDTH = 10.0
DEFAULT_CONSTANT_WIDTH = False

# Canvas
DEFAULT_CANVAS_SIZE = (640, 480)
CLEAR_FADE_SECONDS = 0.2
