"""Exceptions raised by graphyy.

Evaluation and numerical analysis report failure through their return
values; only caller misuse (bad ranges, too few points, degenerate data)
is raised.
"""


class GraphyyError(Exception):
    """Base class for all graphyy errors"""


class RegressionError(GraphyyError, ValueError):
    """A regression could not be fitted to the given points"""


class InsufficientDataError(RegressionError):
    """Fewer points than the regression family requires"""

    def __init__(self, family, required, available):
        self.family = family
        self.required = required
        self.available = available
        super().__init__(
            f"Need at least {required} data points for {family} regression, got {available}"
        )


class SingularMatrixError(RegressionError):
    """The normal equations have no unique solution"""
