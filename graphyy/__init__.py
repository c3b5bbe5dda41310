"""graphyy - numeric core of a graphing calculator"""
from .analysis import find_intersections, find_root, numerical_derivative, numerical_integral
from .classifier import detect_function_type
from .datasets import DataPoint, export_csv, parse_csv
from .errors import GraphyyError, InsufficientDataError, RegressionError, SingularMatrixError
from .evaluator import Error, Value, evaluate, is_valid
from .functions import parse_function
from .graph import Point2D, SampleRange, Viewport
from .sampler import build_curve, sample_cartesian, sample_parametric, sample_polar
from .sanitizer import sanitize_expression
from .stats import calculate_statistics, fit

__version__ = "0.1.0"
