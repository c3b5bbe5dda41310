import pytest

from graphyy.classifier import (
    FUNCTION_TYPE_EXAMPLES,
    TYPE_EXPONENTIAL,
    TYPE_IMPLICIT,
    TYPE_LINEAR,
    TYPE_LOGARITHMIC,
    TYPE_PARAMETRIC,
    TYPE_PIECEWISE,
    TYPE_POLAR,
    TYPE_POLYNOMIAL,
    TYPE_QUADRATIC,
    TYPE_TRIGONOMETRIC,
    describe_function_type,
    detect_function_type,
    polynomial_degree,
)


@pytest.mark.parametrize("tag", [
    TYPE_LINEAR, TYPE_QUADRATIC, TYPE_POLYNOMIAL, TYPE_TRIGONOMETRIC,
    TYPE_LOGARITHMIC, TYPE_EXPONENTIAL, TYPE_IMPLICIT, TYPE_PIECEWISE,
])
def test_examples_classify_as_their_type(tag):
    for expression in FUNCTION_TYPE_EXAMPLES[tag]:
        assert detect_function_type(expression) == tag, expression


@pytest.mark.parametrize("expression, expected", [
    ("sin(x)", TYPE_TRIGONOMETRIC),
    ("x^2", TYPE_QUADRATIC),
    ("2x + 1", TYPE_LINEAR),
    ("x*x*x", TYPE_POLYNOMIAL),
    ("x**3", TYPE_POLYNOMIAL),
    ("exp(x)", TYPE_EXPONENTIAL),
    ("2^x", TYPE_EXPONENTIAL),
    ("log(x)", TYPE_LOGARITHMIC),
    ("x = t^2, y = t^3", TYPE_PARAMETRIC),
    ("r = 2", TYPE_POLAR),
    ("theta^2", TYPE_POLAR),
    ("x^2 + y^2 = 25", TYPE_IMPLICIT),
    ("y = 2x + 1", TYPE_LINEAR),
    ("{x < 0: -x, x^2}", TYPE_PIECEWISE),
    ("5", TYPE_POLYNOMIAL),
])
def test_detect_function_type(expression, expected):
    assert detect_function_type(expression) == expected


def test_trig_wins_over_polar():
    # Rules are ordered; trig names are checked first
    assert detect_function_type("r = sin(3*theta)") == TYPE_TRIGONOMETRIC


def test_sqrt_is_not_polar():
    assert detect_function_type("sqrt(x)") == TYPE_LINEAR


def test_whitespace_and_case_ignored():
    assert detect_function_type("  SIN( x )") == TYPE_TRIGONOMETRIC
    assert detect_function_type("x ^ 2") == TYPE_QUADRATIC


def test_empty_defaults_to_polynomial():
    assert detect_function_type("") == TYPE_POLYNOMIAL
    assert detect_function_type("   ") == TYPE_POLYNOMIAL


def test_polynomial_degree():
    assert polynomial_degree("x^3 + x") == 3
    assert polynomial_degree("x*x") == 2
    assert polynomial_degree("3*x") == 1
    assert polynomial_degree("7") == 0


def test_describe_function_type():
    assert describe_function_type(TYPE_QUADRATIC) == "Quadratic function (degree 2)"
    assert describe_function_type("nonsense") == "Unknown function type"
