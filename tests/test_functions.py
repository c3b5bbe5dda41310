import pytest

from graphyy.evaluator import evaluate, is_valid
from graphyy.functions import (
    Cartesian,
    Implicit,
    Parametric,
    Piecewise,
    Polar,
    format_function,
    parse_function,
    spec_from_dict,
    spec_to_dict,
)


def test_bare_expression_is_cartesian():
    assert parse_function("x^2") == Cartesian("x^2")


@pytest.mark.parametrize("text", ["y = 2x + 1", "f(x) = 2x + 1", "y=2x + 1"])
def test_cartesian_prefixes_stripped(text):
    assert parse_function(text) == Cartesian("2x + 1")


def test_trig_cartesian():
    assert parse_function("f(x) = sin(x)") == Cartesian("sin(x)")


def test_parametric_with_named_parameter():
    spec = parse_function("x(t) = cos(t), y(t) = sin(t)")
    assert spec == Parametric("cos(t)", "sin(t)", "t")
    assert spec.kind == "parametric"


def test_parametric_plain_form():
    assert parse_function("x = t^2, y = t^3") == Parametric("t^2", "t^3")


def test_parametric_custom_parameter():
    assert parse_function("x(s) = s, y(s) = 2s").parameter == "s"


def test_polar_forms():
    assert parse_function("r = 1 + cos(θ)") == Polar("1 + cos(theta)")
    assert parse_function("r(theta) = 2") == Polar("2")
    assert parse_function("sin(3*theta)") == Polar("sin(3*theta)")


def test_implicit_equation():
    assert parse_function("x^2 + y^2 = 25") == Implicit("(x^2 + y^2) - (25)")


def test_implicit_without_equals():
    assert parse_function("x*y - 1") == Implicit("x*y - 1")


def test_y_on_both_sides_is_implicit():
    assert parse_function("y = x + y^2").kind == "implicit"


def test_piecewise_braces():
    spec = parse_function("{x < 0: -x, x^2}")
    assert spec == Piecewise((("x < 0", "-x"),), "x^2")
    assert spec.expression == "Piecewise((-x, x < 0), (x^2, True))"


def test_piecewise_if_nested():
    spec = parse_function("if(x < 0, -x, if(x < 2, 1, x))")
    assert spec.branches == (("x < 0", "-x"), ("x < 2", "1"))
    assert spec.otherwise == "x"


def test_piecewise_ternary():
    assert parse_function("x > 0 ? x : -x") == Piecewise((("x > 0", "x"),), "-x")


def test_piecewise_expression_evaluates():
    spec = parse_function("{x < 0: -x, x^2}")
    assert evaluate(spec.expression, {"x": -2}).value == pytest.approx(2.0)
    assert evaluate(spec.expression, {"x": 3}).value == pytest.approx(9.0)


def test_piecewise_without_default_has_gaps():
    spec = Piecewise((("x < 0", "-x"),))
    assert not is_valid(evaluate(spec.expression, {"x": 1}))


def test_explicit_type_overrides_detection():
    assert parse_function("theta", function_type="linear") == Polar("theta")
    with pytest.raises(ValueError):
        parse_function("x", function_type="bogus")


def test_format_function():
    assert format_function(Cartesian("x^2")) == "y = x^2"
    assert format_function(Parametric("cos(t)", "sin(t)")) == "x(t) = cos(t), y(t) = sin(t)"
    assert format_function(Polar("2")) == "r = 2"
    assert format_function(Implicit("x*y - 1")) == "x*y - 1 = 0"
    assert format_function(Piecewise((("x < 0", "-x"),), "x")) == "{x < 0: -x, x}"


@pytest.mark.parametrize("spec", [
    Cartesian("x^2"),
    Parametric("cos(t)", "sin(t)", "t", (0.0, 6.0)),
    Parametric("u", "u^2", "u"),
    Polar("1 + cos(theta)", (0.0, 3.14)),
    Implicit("x^2 + y^2 - 1"),
    Piecewise((("x < 0", "-x"), ("x < 1", "0")), "x"),
])
def test_dict_round_trip(spec):
    data = spec_to_dict(spec)
    assert data["kind"] == spec.kind
    assert spec_from_dict(data) == spec


def test_unknown_kind_rejected():
    with pytest.raises(ValueError):
        spec_from_dict({"kind": "spiral"})
