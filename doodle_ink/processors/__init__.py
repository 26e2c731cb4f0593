from doodle_ink.processors.curve_fitter import CurveFitter
from doodle_ink.processors.width_model import StrokeWidthModel
