"""
Curve sampling
==============
Turns function specs into sequences of world-coordinate points by walking a
domain and evaluating the expression at each step. Samples that do not
evaluate to a finite number are skipped, so the output may be empty but
sampling itself never fails.
"""
import logging
import math
import time
from dataclasses import dataclass

from .config import (
    DEFAULT_PARAMETER_RANGE,
    DEFAULT_THETA_RANGE,
    FRAME_BUDGET,
    IMPLICIT_GRID,
    MAX_SAMPLES,
    SAMPLES_PER_PIXEL,
    SIMPLIFY_TOLERANCE,
)
from .evaluator import evaluate_value
from .functions import (
    KIND_CARTESIAN,
    KIND_IMPLICIT,
    KIND_PARAMETRIC,
    KIND_PIECEWISE,
    KIND_POLAR,
)
from .graph import Point2D, SampleRange, split_discontinuities, world_to_screen
from .simplify import simplify_indices

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Curve:
    """Sampled function: a tuple of segments, each a tuple of points"""
    segments: tuple
    connected: bool = True
    elapsed: float = 0.0

    @property
    def points(self):
        return [point for segment in self.segments for point in segment]

    @property
    def over_budget(self):
        return self.elapsed > FRAME_BUDGET


# ============================================================================
# DOMAIN WALKS
# ============================================================================

def sample_cartesian(expression, x_range, extra_variables=None):
    """Points (x, f(x)) over ``x_range``"""
    extra = extra_variables or {}
    points = []
    for x in x_range.values():
        y = evaluate_value(expression, {'x': x, **extra})
        if y is not None:
            points.append(Point2D(x, y))
    return points


def sample_parametric(x_expression, y_expression, parameter, parameter_range,
                      extra_variables=None):
    """Points (f(t), g(t)); kept only when both coordinates evaluate"""
    extra = extra_variables or {}
    points = []
    for t in parameter_range.values():
        scope = {parameter: t, **extra}
        x = evaluate_value(x_expression, scope)
        if x is None:
            continue
        y = evaluate_value(y_expression, scope)
        if y is not None:
            points.append(Point2D(x, y))
    return points


def sample_polar(r_expression, theta_range, extra_variables=None):
    """Points (r cos theta, r sin theta); ``t`` is an alias for theta"""
    extra = extra_variables or {}
    points = []
    for theta in theta_range.values():
        r = evaluate_value(r_expression, {'theta': theta, 't': theta, **extra})
        if r is None:
            continue
        x = r * math.cos(theta)
        y = r * math.sin(theta)
        if math.isfinite(x) and math.isfinite(y):
            points.append(Point2D(x, y))
    return points


def sample_implicit(expression, viewport, columns=IMPLICIT_GRID[0], rows=IMPLICIT_GRID[1],
                    extra_variables=None):
    """
    Zero crossings of f(x, y) on a grid over the viewport.

    Every grid edge whose endpoints have opposite signs contributes one
    linearly interpolated point; grid nodes where f is exactly zero are
    emitted as they are. The result is an unordered point cloud.
    """
    extra = extra_variables or {}
    xs = [viewport.x_min + viewport.width * i / columns for i in range(columns + 1)]
    ys = [viewport.y_min + viewport.height * j / rows for j in range(rows + 1)]

    grid = [[evaluate_value(expression, {'x': x, 'y': y, **extra}) for x in xs] for y in ys]

    points = []
    for j, y in enumerate(ys):
        for i, x in enumerate(xs):
            value = grid[j][i]
            if value is None:
                continue
            if value == 0:
                points.append(Point2D(x, y))
                continue
            # Edge to the right
            if i + 1 < len(xs):
                right = grid[j][i + 1]
                if right is not None and right != 0 and (value < 0) != (right < 0):
                    fraction = value / (value - right)
                    points.append(Point2D(x + fraction * (xs[i + 1] - x), y))
            # Edge above
            if j + 1 < len(ys):
                above = grid[j + 1][i]
                if above is not None and above != 0 and (value < 0) != (above < 0):
                    fraction = value / (value - above)
                    points.append(Point2D(x, y + fraction * (ys[j + 1] - y)))
    return points


def cartesian_step(viewport, pixel_width, samples_per_pixel=SAMPLES_PER_PIXEL):
    """x step giving ``samples_per_pixel`` samples per horizontal pixel"""
    return viewport.width / (samples_per_pixel * pixel_width)


def _sample_range(minimum, maximum, step):
    sample_range = SampleRange(minimum, maximum, step)
    throttled = sample_range.throttled(MAX_SAMPLES)
    if throttled is not sample_range:
        logger.info("Throttled %d samples to %d (step %.3g -> %.3g)",
                    sample_range.count, throttled.count, step, throttled.step)
    return throttled


# ============================================================================
# DISPATCH
# ============================================================================

def sample_function(spec, viewport, pixel_width, extra_variables=None):
    """Sample any function spec over the viewport"""
    step = cartesian_step(viewport, pixel_width)

    if spec.kind in (KIND_CARTESIAN, KIND_PIECEWISE):
        x_range = _sample_range(viewport.x_min, viewport.x_max, step)
        return sample_cartesian(spec.expression, x_range, extra_variables)

    if spec.kind == KIND_PARAMETRIC:
        low, high = spec.parameter_range or DEFAULT_PARAMETER_RANGE
        t_range = _sample_range(low, high, step)
        return sample_parametric(spec.x_expression, spec.y_expression, spec.parameter,
                                 t_range, extra_variables)

    if spec.kind == KIND_POLAR:
        low, high = spec.theta_range or DEFAULT_THETA_RANGE
        theta_range = _sample_range(low, high, step)
        return sample_polar(spec.r_expression, theta_range, extra_variables)

    if spec.kind == KIND_IMPLICIT:
        columns, rows = IMPLICIT_GRID
        return sample_implicit(spec.expression, viewport, columns, rows, extra_variables)

    raise ValueError(f"Unknown function kind: {spec.kind!r}")


def build_curve(spec, viewport, pixel_width, pixel_height, extra_variables=None,
                tolerance=SIMPLIFY_TOLERANCE):
    """
    Sample, split at discontinuities and simplify a function for drawing.

    Simplification runs in screen space so ``tolerance`` is in pixels.
    """
    start = time.perf_counter()
    points = sample_function(spec, viewport, pixel_width, extra_variables)

    if spec.kind == KIND_IMPLICIT:
        segments = (tuple(points),) if points else ()
        connected = False
    else:
        segments = []
        for segment in split_discontinuities(points, viewport, pixel_width, pixel_height):
            screen = [world_to_screen(p, viewport, pixel_width, pixel_height) for p in segment]
            segments.append(tuple(segment[i] for i in simplify_indices(screen, tolerance)))
        segments = tuple(segments)
        connected = True

    elapsed = time.perf_counter() - start
    if elapsed > FRAME_BUDGET:
        logger.debug("Sampling %s took %.1f ms (%d points), over the frame budget",
                     spec.kind, elapsed * 1000, len(points))
    return Curve(segments, connected, elapsed)
