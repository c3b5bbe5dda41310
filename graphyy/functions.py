"""
Function specs
Typed variants for every kind of plottable function and the text parser
that turns what the user typed into one of them.
"""
import re
from dataclasses import dataclass

from .classifier import (
    FUNCTION_TYPES,
    TYPE_IMPLICIT,
    TYPE_PARAMETRIC,
    TYPE_PIECEWISE,
    TYPE_POLAR,
    detect_function_type,
)
from .sanitizer import normalize_symbols

KIND_CARTESIAN = "cartesian"
KIND_PARAMETRIC = "parametric"
KIND_POLAR = "polar"
KIND_IMPLICIT = "implicit"
KIND_PIECEWISE = "piecewise"


# ============================================================================
# VARIANTS
# ============================================================================

@dataclass(frozen=True)
class Cartesian:
    """y = f(x)"""
    expression: str

    kind = KIND_CARTESIAN


@dataclass(frozen=True)
class Parametric:
    """x = f(t), y = g(t); ``parameter_range`` is (min, max) or None"""
    x_expression: str
    y_expression: str
    parameter: str = "t"
    parameter_range: tuple = None

    kind = KIND_PARAMETRIC


@dataclass(frozen=True)
class Polar:
    """r = f(theta); ``theta_range`` is (min, max) or None"""
    r_expression: str
    theta_range: tuple = None

    kind = KIND_POLAR


@dataclass(frozen=True)
class Implicit:
    """The curve expression == 0 in x and y"""
    expression: str

    kind = KIND_IMPLICIT


@dataclass(frozen=True)
class Piecewise:
    """First branch whose condition holds wins, else ``otherwise``"""
    branches: tuple
    otherwise: str = None

    kind = KIND_PIECEWISE

    @property
    def expression(self):
        """The branches as a single expression the evaluator understands"""
        parts = [f"({expr}, {condition})" for condition, expr in self.branches]
        if self.otherwise is not None:
            parts.append(f"({self.otherwise}, True)")
        return f"Piecewise({', '.join(parts)})"


SPEC_TYPES = {
    KIND_CARTESIAN: Cartesian,
    KIND_PARAMETRIC: Parametric,
    KIND_POLAR: Polar,
    KIND_IMPLICIT: Implicit,
    KIND_PIECEWISE: Piecewise,
}


def format_function(spec):
    """Human readable form of a spec"""
    if spec.kind == KIND_PARAMETRIC:
        p = spec.parameter
        return f"x({p}) = {spec.x_expression}, y({p}) = {spec.y_expression}"
    if spec.kind == KIND_POLAR:
        return f"r = {spec.r_expression}"
    if spec.kind == KIND_IMPLICIT:
        return f"{spec.expression} = 0"
    if spec.kind == KIND_PIECEWISE:
        branches = [f"{condition}: {expr}" for condition, expr in spec.branches]
        if spec.otherwise is not None:
            branches.append(spec.otherwise)
        return "{" + ", ".join(branches) + "}"
    return f"y = {spec.expression}"


# ============================================================================
# TEXT PARSING
# ============================================================================

_PARAMETRIC_X = re.compile(r"^x\s*(?:\(\s*([A-Za-z_]\w*)\s*\))?\s*=(.+)$")
_PARAMETRIC_Y = re.compile(r"^y\s*(?:\(\s*([A-Za-z_]\w*)\s*\))?\s*=(.+)$")
_POLAR_PREFIX = re.compile(r"^r\s*(?:\(\s*theta\s*\))?\s*=(.+)$")
_CARTESIAN_PREFIX = re.compile(r"^(?:y|f\s*\(\s*x\s*\))\s*=(?!=)")
_IF_CALL = re.compile(r"^if\s*\((.*)\)$", re.DOTALL)
_TERNARY = re.compile(r"^([^?]+)\?([^:]+):(.+)$")
# A lone '=' (not part of <=, >=, ==, !=)
_SINGLE_EQUALS = re.compile(r"(?<![<>=!])=(?!=)")
_WORD_X = re.compile(r"\bx\b")
_WORD_Y = re.compile(r"\by\b")
_WORD_THETA = re.compile(r"\btheta\b")


def _split_top_level(text, separator=","):
    """Split on ``separator`` outside of any brackets"""
    parts = []
    depth = 0
    current = []
    for char in text:
        if char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
        if char == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append("".join(current).strip())
    return parts


def _parse_parametric(text):
    parts = _split_top_level(text)
    if len(parts) != 2:
        return None
    x_match = _PARAMETRIC_X.match(parts[0])
    y_match = _PARAMETRIC_Y.match(parts[1])
    if not (x_match and y_match):
        return None

    x_param, y_param = x_match.group(1), y_match.group(1)
    if x_param and y_param and x_param != y_param:
        return None
    parameter = x_param or y_param or "t"
    return Parametric(x_match.group(2).strip(), y_match.group(2).strip(), parameter)


def _parse_polar(text):
    match = _POLAR_PREFIX.match(text)
    if match:
        return Polar(match.group(1).strip())
    if _WORD_THETA.search(text) and not (_WORD_X.search(text) or _WORD_Y.search(text)):
        if _SINGLE_EQUALS.search(text):
            return None
        return Polar(text)
    return None


def _parse_piecewise(text):
    if text.startswith("{") and text.endswith("}"):
        branches = []
        otherwise = None
        for part in _split_top_level(text[1:-1]):
            if ":" in part:
                condition, expr = part.split(":", 1)
                branches.append((condition.strip(), expr.strip()))
            elif part:
                otherwise = part
        if not branches:
            return None
        return Piecewise(tuple(branches), otherwise)

    match = _IF_CALL.match(text)
    if match:
        parts = _split_top_level(match.group(1))
        if len(parts) not in (2, 3):
            return None
        branches = [(parts[0], parts[1])]
        otherwise = parts[2] if len(parts) == 3 else None
        # if(a, b, if(c, d, e)) flattens into one chain
        nested = _parse_piecewise(otherwise) if otherwise else None
        if nested is not None:
            branches.extend(nested.branches)
            otherwise = nested.otherwise
        return Piecewise(tuple(branches), otherwise)

    match = _TERNARY.match(text)
    if match:
        condition, expr, otherwise = (g.strip() for g in match.groups())
        return Piecewise(((condition, expr),), otherwise)
    return None


def _parse_implicit(text):
    equals = list(_SINGLE_EQUALS.finditer(text))
    if len(equals) > 1:
        return None
    if equals:
        position = equals[0].start()
        lhs, rhs = text[:position].strip(), text[position + 1:].strip()
        if not lhs or not rhs:
            return None
        if _CARTESIAN_PREFIX.match(text) and not _WORD_Y.search(rhs):
            return None
        return Implicit(f"({lhs}) - ({rhs})")
    if _WORD_X.search(text) and _WORD_Y.search(text):
        return Implicit(text)
    return None


def _parse_cartesian(text):
    return Cartesian(_CARTESIAN_PREFIX.sub("", text, count=1).strip())


FALLBACK_ORDER = (
    _parse_parametric,
    _parse_polar,
    _parse_piecewise,
    _parse_implicit,
    _parse_cartesian,
)

_PARSERS_BY_TYPE = {
    TYPE_PARAMETRIC: _parse_parametric,
    TYPE_POLAR: _parse_polar,
    TYPE_PIECEWISE: _parse_piecewise,
    TYPE_IMPLICIT: _parse_implicit,
}


def parse_function(text, function_type=None):
    """
    Build a function spec from user text.

    The detected (or given) function type picks the first parser to try;
    every parser only accepts its own form, so the rest are tried in turn
    and anything left over is plotted as y = f(x).
    """
    if function_type is not None and function_type not in FUNCTION_TYPES:
        raise ValueError(f"Unknown function type: {function_type}")

    text = normalize_symbols(text or "").strip()
    tag = function_type or detect_function_type(text)

    first = _PARSERS_BY_TYPE.get(tag)
    order = FALLBACK_ORDER
    if first is not None:
        order = (first,) + tuple(p for p in FALLBACK_ORDER if p is not first)

    for parser in order:
        spec = parser(text)
        if spec is not None:
            return spec
    return Cartesian(text)


# ============================================================================
# PERSISTENCE
# ============================================================================

def spec_to_dict(spec):
    if spec.kind == KIND_CARTESIAN:
        data = {'expression': spec.expression}
    elif spec.kind == KIND_PARAMETRIC:
        data = {
            'xExpression': spec.x_expression,
            'yExpression': spec.y_expression,
            'parameter': spec.parameter,
            'parameterRange': list(spec.parameter_range) if spec.parameter_range else None,
        }
    elif spec.kind == KIND_POLAR:
        data = {
            'rExpression': spec.r_expression,
            'thetaRange': list(spec.theta_range) if spec.theta_range else None,
        }
    elif spec.kind == KIND_IMPLICIT:
        data = {'expression': spec.expression}
    else:
        data = {
            'branches': [[condition, expr] for condition, expr in spec.branches],
            'otherwise': spec.otherwise,
        }
    return {'kind': spec.kind, **data}


def spec_from_dict(data):
    kind = data.get('kind')
    if kind not in SPEC_TYPES:
        raise ValueError(f"Unknown function kind: {kind!r}")

    if kind == KIND_CARTESIAN:
        return Cartesian(data['expression'])
    if kind == KIND_PARAMETRIC:
        parameter_range = data.get('parameterRange')
        return Parametric(
            data['xExpression'],
            data['yExpression'],
            data.get('parameter', 't'),
            tuple(parameter_range) if parameter_range else None,
        )
    if kind == KIND_POLAR:
        theta_range = data.get('thetaRange')
        return Polar(data['rExpression'], tuple(theta_range) if theta_range else None)
    if kind == KIND_IMPLICIT:
        return Implicit(data['expression'])
    return Piecewise(
        tuple((condition, expr) for condition, expr in data['branches']),
        data.get('otherwise'),
    )
