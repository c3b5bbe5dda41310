"""
Statistics and regression
=========================
Descriptive statistics over the y values of a dataset and least-squares
curve fits. Fits raise ``RegressionError`` subclasses when the data cannot
support them; everything else returns plain values.

Points are anything indexable as (x, y), e.g. ``DataPoint`` or ``Point2D``.
"""
import logging
from collections import Counter
from dataclasses import dataclass

import numpy as np
from numpy.polynomial import polynomial as P

from .config import OUTLIER_IQR_FACTOR, SINGULAR_TOLERANCE
from .errors import InsufficientDataError, SingularMatrixError

logger = logging.getLogger(__name__)

FAMILY_LINEAR = "linear"
FAMILY_QUADRATIC = "quadratic"
FAMILY_POLYNOMIAL = "polynomial"
FAMILY_EXPONENTIAL = "exponential"
FAMILY_LOGARITHMIC = "logarithmic"

REGRESSION_FAMILIES = (
    FAMILY_LINEAR, FAMILY_QUADRATIC, FAMILY_POLYNOMIAL,
    FAMILY_EXPONENTIAL, FAMILY_LOGARITHMIC,
)


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass(frozen=True)
class StatisticalSummary:
    mean: float
    median: float
    mode: tuple
    standard_deviation: float
    variance: float
    min: float
    max: float
    quartiles: tuple


@dataclass(frozen=True)
class RegressionResult:
    """
    Fitted model.

    Coefficient order by family:
        linear       (intercept, slope)
        quadratic    (c, b, a) for a*x^2 + b*x + c
        polynomial   ascending powers of x
        exponential  (a, b) for a * e^(b*x)
        logarithmic  (a, b) for a + b * ln(x)
    """
    family: str
    coefficients: tuple
    r_squared: float
    residuals: tuple
    equation: str

    def predict(self, x):
        if self.family == FAMILY_EXPONENTIAL:
            a, b = self.coefficients
            return float(a * np.exp(b * x))
        if self.family == FAMILY_LOGARITHMIC:
            a, b = self.coefficients
            return float(a + b * np.log(x)) if x > 0 else float('nan')
        return float(P.polyval(x, self.coefficients))


# ============================================================================
# HELPERS
# ============================================================================

def _xy(points):
    x = np.array([float(p[0]) for p in points])
    y = np.array([float(p[1]) for p in points])
    return x, y


def _r_squared(y, predicted):
    """1 - SSres/SStot; a constant series scores 1 only when fitted exactly"""
    ss_res = float(np.sum((y - predicted) ** 2))
    ss_tot = float(np.sum((y - np.mean(y)) ** 2))
    if ss_tot == 0:
        return 1.0 if ss_res == 0 else 0.0
    return 1 - ss_res / ss_tot


def _residuals(points, result, include):
    """Index-aligned residuals; 0 where ``include`` rejects the point"""
    return tuple(
        float(p[1] - result(float(p[0]))) if include(p) else 0.0
        for p in points
    )


def _ols(x, y):
    """(intercept, slope) of the least-squares line"""
    dx = x - x.mean()
    denominator = float(np.sum(dx * dx))
    if denominator == 0:
        raise SingularMatrixError("Cannot fit a line: all x values are identical")
    slope = float(np.sum(dx * (y - y.mean()))) / denominator
    intercept = float(y.mean()) - slope * float(x.mean())
    return intercept, slope


def _format_polynomial(coefficients):
    terms = []
    for power in range(len(coefficients) - 1, -1, -1):
        c = coefficients[power]
        if power == 0:
            terms.append(f"{c:.4f}")
        elif power == 1:
            terms.append(f"{c:.4f}x")
        else:
            terms.append(f"{c:.4f}x^{power}")
    return "y = " + " + ".join(terms)


# ============================================================================
# DESCRIPTIVE STATISTICS
# ============================================================================

def calculate_statistics(points):
    """Summary of the y values of ``points``"""
    values = [float(p[1]) for p in points]
    if not values:
        return StatisticalSummary(0.0, 0.0, (), 0.0, 0.0, 0.0, 0.0, (0.0, 0.0, 0.0))

    array = np.array(values)
    counts = Counter(values)
    top = max(counts.values())
    mode = tuple(sorted(v for v, c in counts.items() if c == top))

    variance = float(np.var(array, ddof=1)) if len(values) > 1 else 0.0
    q1, q2, q3 = (float(q) for q in np.quantile(array, [0.25, 0.5, 0.75]))

    return StatisticalSummary(
        mean=float(np.mean(array)),
        median=float(np.median(array)),
        mode=mode,
        standard_deviation=float(np.sqrt(variance)),
        variance=variance,
        min=float(np.min(array)),
        max=float(np.max(array)),
        quartiles=(q1, q2, q3),
    )


def detect_outliers(points):
    """Points whose y lies outside the 1.5 * IQR fences"""
    points = list(points)
    if not points:
        return []
    values = np.array([float(p[1]) for p in points])
    q1, q3 = np.quantile(values, [0.25, 0.75])
    iqr = q3 - q1
    lower = q1 - OUTLIER_IQR_FACTOR * iqr
    upper = q3 + OUTLIER_IQR_FACTOR * iqr
    return [p for p in points if p[1] < lower or p[1] > upper]


def calculate_correlation(first, second):
    """Pearson correlation of the y values over the common prefix"""
    n = min(len(first), len(second))
    if n < 2:
        return 0.0
    a = np.array([float(p[1]) for p in first[:n]])
    b = np.array([float(p[1]) for p in second[:n]])
    da, db = a - a.mean(), b - b.mean()
    denominator = float(np.sqrt(np.sum(da * da) * np.sum(db * db)))
    if denominator == 0:
        return 0.0
    return float(np.sum(da * db)) / denominator


# ============================================================================
# REGRESSION
# ============================================================================

def linear_regression(points):
    """Ordinary least squares y = slope * x + intercept"""
    points = list(points)
    if len(points) < 2:
        raise InsufficientDataError(FAMILY_LINEAR, 2, len(points))

    x, y = _xy(points)
    intercept, slope = _ols(x, y)

    def predict(v):
        return intercept + slope * v

    return RegressionResult(
        family=FAMILY_LINEAR,
        coefficients=(intercept, slope),
        r_squared=_r_squared(y, predict(x)),
        residuals=_residuals(points, predict, lambda p: True),
        equation=f"y = {slope:.4f}x + {intercept:.4f}",
    )


def quadratic_regression(points):
    """y = a*x^2 + b*x + c from the normal equations, solved by Cramer's rule"""
    points = list(points)
    n = len(points)
    if n < 3:
        raise InsufficientDataError(FAMILY_QUADRATIC, 3, n)

    x, y = _xy(points)
    sx, sx2, sx3, sx4 = (float(np.sum(x ** k)) for k in (1, 2, 3, 4))
    sy = float(np.sum(y))
    sxy = float(np.sum(x * y))
    sx2y = float(np.sum(x * x * y))

    det = (n * (sx2 * sx4 - sx3 * sx3)
           - sx * (sx * sx4 - sx2 * sx3)
           + sx2 * (sx * sx3 - sx2 * sx2))
    if abs(det) < SINGULAR_TOLERANCE:
        raise SingularMatrixError("Cannot solve quadratic regression - singular matrix")

    c = (sy * (sx2 * sx4 - sx3 * sx3)
         - sxy * (sx * sx4 - sx2 * sx3)
         + sx2y * (sx * sx3 - sx2 * sx2)) / det
    b = (n * (sxy * sx4 - sx2y * sx3)
         - sy * (sx * sx4 - sx2 * sx3)
         + sx2 * (sx * sx2y - sxy * sx2)) / det
    a = (n * (sx2 * sx2y - sx3 * sxy)
         - sx * (sx * sx2y - sx2 * sxy)
         + sy * (sx * sx3 - sx2 * sx2)) / det

    def predict(v):
        return a * v * v + b * v + c

    return RegressionResult(
        family=FAMILY_QUADRATIC,
        coefficients=(c, b, a),
        r_squared=_r_squared(y, predict(x)),
        residuals=_residuals(points, predict, lambda p: True),
        equation=f"y = {a:.4f}x^2 + {b:.4f}x + {c:.4f}",
    )


def polynomial_regression(points, degree):
    """Least-squares polynomial; degrees 1 and 2 use the exact solvers"""
    if degree < 1:
        raise ValueError(f"Polynomial degree must be at least 1, got {degree}")
    points = list(points)
    if len(points) < degree + 1:
        raise InsufficientDataError(f"degree {degree} polynomial", degree + 1, len(points))

    if degree == 1:
        return linear_regression(points)
    if degree == 2:
        return quadratic_regression(points)

    x, y = _xy(points)
    if np.linalg.matrix_rank(np.vander(x, degree + 1)) < degree + 1:
        raise SingularMatrixError(
            f"Cannot fit degree {degree} polynomial - too few distinct x values")

    coefficients = tuple(float(c) for c in P.polyfit(x, y, degree))

    def predict(v):
        return P.polyval(v, coefficients)

    return RegressionResult(
        family=FAMILY_POLYNOMIAL,
        coefficients=coefficients,
        r_squared=_r_squared(y, predict(x)),
        residuals=_residuals(points, predict, lambda p: True),
        equation=_format_polynomial(coefficients),
    )


def exponential_regression(points):
    """y = a * e^(b*x), fitted as a line through (x, ln y) for y > 0"""
    points = list(points)
    valid = [p for p in points if p[1] > 0]
    if len(valid) < 2:
        raise InsufficientDataError("exponential (positive y)", 2, len(valid))

    x, y = _xy(valid)
    ln_a, b = _ols(x, np.log(y))
    a = float(np.exp(ln_a))

    def predict(v):
        return a * np.exp(b * v)

    return RegressionResult(
        family=FAMILY_EXPONENTIAL,
        coefficients=(a, b),
        r_squared=_r_squared(y, predict(x)),
        residuals=_residuals(points, lambda v: float(predict(v)), lambda p: p[1] > 0),
        equation=f"y = {a:.4f} * e^({b:.4f}x)",
    )


def logarithmic_regression(points):
    """y = a + b * ln(x), fitted as a line through (ln x, y) for x > 0"""
    points = list(points)
    valid = [p for p in points if p[0] > 0]
    if len(valid) < 2:
        raise InsufficientDataError("logarithmic (positive x)", 2, len(valid))

    x, y = _xy(valid)
    a, b = _ols(np.log(x), y)

    def predict(v):
        return a + b * np.log(v)

    return RegressionResult(
        family=FAMILY_LOGARITHMIC,
        coefficients=(a, b),
        r_squared=_r_squared(y, predict(x)),
        residuals=_residuals(points, lambda v: float(predict(v)), lambda p: p[0] > 0),
        equation=f"y = {a:.4f} + {b:.4f} * ln(x)",
    )


def fit(family, points, degree=2):
    """Run the regression named by ``family``"""
    if family == FAMILY_LINEAR:
        result = linear_regression(points)
    elif family == FAMILY_QUADRATIC:
        result = quadratic_regression(points)
    elif family == FAMILY_POLYNOMIAL:
        result = polynomial_regression(points, degree)
    elif family == FAMILY_EXPONENTIAL:
        result = exponential_regression(points)
    elif family == FAMILY_LOGARITHMIC:
        result = logarithmic_regression(points)
    else:
        raise ValueError(f"Unknown regression family: {family!r} "
                         f"(expected one of {', '.join(REGRESSION_FAMILIES)})")

    logger.debug("Fitted %s: %s (R^2 = %.4f)", family, result.equation, result.r_squared)
    return result
