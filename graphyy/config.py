"""
Configuration & defaults
========================
Central registry of the tunable numbers used across the package.

Everything here is a plain constant so callers can read it without
instantiating anything. The only value taken from the environment is the
log level used by the command line front end.
"""
import math
import os

# ============================================================================
# VIEWPORT
# ============================================================================

DEFAULT_X_RANGE = (-10.0, 10.0)
DEFAULT_Y_RANGE = (-10.0, 10.0)
ZOOM_FACTOR = 1.5
FIT_PADDING = 0.1

# ============================================================================
# SAMPLING
# ============================================================================

# Samples per horizontal pixel; 2 gives sub-pixel resolution
SAMPLES_PER_PIXEL = 2
MAX_SAMPLES = 20000
DEFAULT_PARAMETER_RANGE = (-10.0, 10.0)
DEFAULT_THETA_RANGE = (0.0, 2 * math.pi)

# Grid used for implicit curves, (columns, rows)
IMPLICIT_GRID = (80, 60)

# 60 fps
FRAME_BUDGET = 1.0 / 60

# ============================================================================
# NUMERICAL ANALYSIS
# ============================================================================

DERIVATIVE_STEP = 1e-8
INTEGRAL_INTERVALS = 1000
ROOT_MAX_ITERATIONS = 100
ROOT_TOLERANCE = 1e-10
MAX_INTERSECTIONS = 5

# ============================================================================
# STATISTICS & SIMPLIFICATION
# ============================================================================

SINGULAR_TOLERANCE = 1e-10
OUTLIER_IQR_FACTOR = 1.5
CURVE_SMOOTHING = 0.3
SIMPLIFY_TOLERANCE = 1.0

# ============================================================================
# APPLICATION STATE
# ============================================================================

HISTORY_LIMIT = 50
ANIMATION_FPS = 60
ANIMATION_DURATION = 10.0
TIME_VARIABLE = "t"

# ============================================================================
# CACHES & LOGGING
# ============================================================================

PARSE_CACHE_SIZE = 512

# Largest literal power (in decimal digits) the parser will build
MAX_POWER_DIGITS = 10000
COMPILE_CACHE_SIZE = 256

LOG_LEVEL = os.environ.get("GRAPHYY_LOG_LEVEL", "WARNING").upper()
