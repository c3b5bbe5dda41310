"""
Numerical analysis
Derivative, definite integral, root and intersection finding on expression
strings. Failures come back as None; nothing here raises.
"""
import logging

from .config import (
    DERIVATIVE_STEP,
    INTEGRAL_INTERVALS,
    MAX_INTERSECTIONS,
    ROOT_MAX_ITERATIONS,
    ROOT_TOLERANCE,
)
from .evaluator import evaluate_value
from .graph import Point2D

logger = logging.getLogger(__name__)


def _f(expression, x, extra_variables):
    return evaluate_value(expression, {**(extra_variables or {}), 'x': x})


def numerical_derivative(expression, x, h=DERIVATIVE_STEP, extra_variables=None):
    """Central difference (f(x+h) - f(x-h)) / 2h"""
    f1 = _f(expression, x + h, extra_variables)
    f2 = _f(expression, x - h, extra_variables)
    if f1 is None or f2 is None:
        return None
    return (f1 - f2) / (2 * h)


def numerical_integral(expression, a, b, n=INTEGRAL_INTERVALS, extra_variables=None):
    """Composite Simpson's rule over [a, b] with ``n`` (even) intervals"""
    n = max(2, int(n))
    if n % 2:
        n += 1

    h = (b - a) / n
    total = 0.0
    for i in range(n + 1):
        fx = _f(expression, a + i * h, extra_variables)
        if fx is None:
            return None
        if i == 0 or i == n:
            total += fx
        elif i % 2:
            total += 4 * fx
        else:
            total += 2 * fx

    return h / 3 * total


def find_root(expression, initial_guess, max_iterations=ROOT_MAX_ITERATIONS,
              tolerance=ROOT_TOLERANCE, extra_variables=None):
    """
    Newton-Raphson from ``initial_guess``.

    Returns the root once successive iterates agree within ``tolerance``, or
    None when evaluation fails, the slope vanishes or iterations run out.
    """
    x = initial_guess
    for _ in range(max_iterations):
        fx = _f(expression, x, extra_variables)
        slope = numerical_derivative(expression, x, extra_variables=extra_variables)
        if fx is None or slope is None or abs(slope) < tolerance:
            return None

        new_x = x - fx / slope
        if abs(new_x - x) < tolerance:
            return new_x
        x = new_x

    logger.debug("Newton iteration for %r did not converge from %s", expression, initial_guess)
    return None


def find_intersections(first, second, x_range, extra_variables=None, limit=MAX_INTERSECTIONS):
    """
    Points where y = first and y = second cross over ``x_range``.

    Sign changes of first - second between consecutive samples seed Newton
    refinement; roots outside the bracketing step or not actually on both
    curves (poles) are discarded.
    """
    difference = f"({first}) - ({second})"
    found = []

    previous_x = previous_value = None
    for x in x_range.values():
        value = _f(difference, x, extra_variables)
        if value is None:
            previous_x = previous_value = None
            continue

        if value == 0:
            candidate = x
        elif previous_value is not None and (previous_value < 0) != (value < 0):
            candidate = find_root(difference, (previous_x + x) / 2,
                                  extra_variables=extra_variables)
            if candidate is not None and not previous_x <= candidate <= x:
                candidate = None
        else:
            candidate = None

        if candidate is not None:
            residual = _f(difference, candidate, extra_variables)
            y = _f(first, candidate, extra_variables)
            is_new = all(abs(candidate - p.x) > x_range.step / 2 for p in found)
            if residual is not None and abs(residual) < 1e-6 and y is not None and is_new:
                found.append(Point2D(candidate, y))
                if len(found) >= limit:
                    break

        previous_x, previous_value = x, value

    return found
