import math

import pytest

from graphyy.analysis import (
    find_intersections,
    find_root,
    numerical_derivative,
    numerical_integral,
)
from graphyy.graph import SampleRange


def test_derivative_of_square():
    assert numerical_derivative("x^2", 3) == pytest.approx(6.0, abs=1e-5)


def test_derivative_of_sine():
    assert numerical_derivative("sin(x)", 0) == pytest.approx(1.0, abs=1e-5)


def test_derivative_with_extra_variables():
    assert numerical_derivative("a*x", 1, extra_variables={"a": 4}) == pytest.approx(4.0, abs=1e-5)


def test_derivative_of_invalid_expression():
    assert numerical_derivative("y", 1) is None


def test_integral_of_square():
    assert numerical_integral("x^2", 0, 3) == pytest.approx(9.0, rel=1e-9)


def test_integral_of_sine_over_period():
    assert numerical_integral("sin(x)", 0, math.pi) == pytest.approx(2.0, rel=1e-9)


def test_integral_odd_interval_count_rounded_up():
    assert numerical_integral("x", 0, 1, n=3) == pytest.approx(0.5)
    assert numerical_integral("x", 0, 1, n=1) == pytest.approx(0.5)


def test_integral_hits_pole():
    assert numerical_integral("1/x", -1, 1, n=2) is None


def test_newton_root():
    assert find_root("x^2 - 4", 1) == pytest.approx(2.0, abs=1e-8)
    assert find_root("x^2 - 4", -1) == pytest.approx(-2.0, abs=1e-8)


def test_newton_flat_start_fails():
    assert find_root("x^2 + 1", 0) is None


def test_newton_without_real_root_fails():
    assert find_root("x^2 + 1", 1) is None


def test_newton_on_invalid_expression():
    assert find_root("foo(x)", 1) is None


def test_intersections_of_parabola_and_line():
    points = find_intersections("x^2", "2", SampleRange(-3, 3, 0.1))
    assert len(points) == 2
    assert [p.x for p in points] == pytest.approx([-math.sqrt(2), math.sqrt(2)])
    assert [p.y for p in points] == pytest.approx([2, 2])


def test_parallel_lines_never_meet():
    assert find_intersections("x", "x + 1", SampleRange(-5, 5, 0.5)) == []


def test_pole_is_not_an_intersection():
    assert find_intersections("tan(x)", "0", SampleRange(1, 2, 0.1)) == []


def test_intersection_limit():
    points = find_intersections("sin(x)", "0", SampleRange(-20, 20, 0.1), limit=3)
    assert len(points) == 3
