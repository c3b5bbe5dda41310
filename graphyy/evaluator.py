"""
Safe expression evaluation
==========================
Parses sanitized expression strings with sympy and evaluates them against a
scope of real-valued variables.

The outcome is always a ``Value`` or an ``Error``; nothing raised by the
parser or by the arithmetic escapes ``evaluate``. Numeric evaluation first
goes through a ``lambdify``'d callable on the ``math`` module and falls back
to sympy's exact ``evalf`` when the fast path hits a domain error, so that
``1/x`` at 0 is reported as a non-finite result and ``sqrt(-4)`` yields the
real part of ``2i``.
"""
import logging
import math
from dataclasses import dataclass
from functools import lru_cache

import sympy as sp
from sympy.core.function import AppliedUndef
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication,
    parse_expr,
    standard_transformations,
)

from .config import COMPILE_CACHE_SIZE, MAX_POWER_DIGITS, PARSE_CACHE_SIZE
from .sanitizer import sanitize_expression

logger = logging.getLogger(__name__)

# ============================================================================
# RESULT TYPES
# ============================================================================

ERROR_SYNTAX = "syntax"
ERROR_DOMAIN = "domain"            # reserved
ERROR_COMPUTATION = "computation"
ERROR_OVERFLOW = "overflow"

ERROR_KINDS = (ERROR_SYNTAX, ERROR_DOMAIN, ERROR_COMPUTATION, ERROR_OVERFLOW)

SYNTAX_SUGGESTIONS = ("Check syntax", "Verify function names", "Check parentheses")
COMPUTATION_SUGGESTIONS = ("Check for division by zero", "Verify domain restrictions")


@dataclass(frozen=True)
class Value:
    """Successful evaluation"""
    value: float

    @property
    def is_valid(self):
        return math.isfinite(self.value)


@dataclass(frozen=True)
class Error:
    """Failed evaluation, with hints for the user"""
    kind: str
    message: str
    suggestions: tuple = ()

    is_valid = False


def is_valid(result):
    """True for a finite ``Value``"""
    return isinstance(result, Value) and math.isfinite(result.value)


# ============================================================================
# PARSING CONTEXT
# ============================================================================

def get_math_context():
    """Return dictionary of available math functions and constants"""
    return {
        'sin': sp.sin, 'cos': sp.cos, 'tan': sp.tan,
        'sec': sp.sec, 'csc': sp.csc, 'cot': sp.cot,
        'asin': sp.asin, 'acos': sp.acos, 'atan': sp.atan, 'atan2': sp.atan2,
        'sinh': sp.sinh, 'cosh': sp.cosh, 'tanh': sp.tanh,
        'sqrt': sp.sqrt, 'cbrt': sp.cbrt, 'exp': sp.exp,
        'log': sp.log, 'ln': sp.log,
        'log10': lambda arg: sp.log(arg, 10),
        'log2': lambda arg: sp.log(arg, 2),
        'abs': sp.Abs, 'sign': sp.sign,
        'floor': sp.floor, 'ceil': sp.ceiling, 'ceiling': sp.ceiling,
        'min': sp.Min, 'max': sp.Max, 'mod': sp.Mod,
        'pi': sp.pi, 'e': sp.E,
    }


MATH_CONTEXT = get_math_context()

# Only what the parser's own transformations emit; no Python builtins
_PARSER_GLOBALS = {
    '__builtins__': {},
    'Symbol': sp.Symbol,
    'Function': sp.Function,
    'Integer': sp.Integer,
    'Float': sp.Float,
    'Rational': sp.Rational,
    'factorial': sp.factorial,
    'Piecewise': sp.Piecewise,
    'Add': sp.Add,
    'Mul': sp.Mul,
    'Pow': sp.Pow,
    'Eq': sp.Eq, 'Ne': sp.Ne,
    'Lt': sp.Lt, 'Le': sp.Le, 'Gt': sp.Gt, 'Ge': sp.Ge,
    'And': sp.And, 'Or': sp.Or, 'Not': sp.Not,
    'I': sp.I,
    'oo': sp.oo,
}

TRANSFORMATIONS = standard_transformations + (implicit_multiplication, convert_xor)


def _literal_digits(node):
    """Rough log10 of |node| for a tree of number literals; None once a symbol is involved"""
    if node.is_Rational:
        if node.p == 0:
            return 0.0
        return math.log10(abs(node.p)) - math.log10(node.q)
    if node.is_Pow:
        base = _literal_digits(node.base)
        exponent = _literal_digits(node.exp)
        if base is None or exponent is None:
            return None
        if exponent > 300:
            # Exponent past float range
            return math.inf if base else 0.0
        return base * float(node.exp)
    if node.is_Mul or node.is_Add:
        parts = [_literal_digits(arg) for arg in node.args]
        if any(part is None for part in parts):
            return None
        return sum(parts) if node.is_Mul else max(parts) + 1
    if node.is_number:
        try:
            value = abs(float(node))
        except (TypeError, ValueError):
            return None
        return math.log10(value) if value else 0.0
    return None


def _check_power_sizes(expr):
    """Raise OverflowError for literal powers too large to build exactly"""
    for node in sp.preorder_traversal(expr):
        if node.is_Pow:
            digits = _literal_digits(node)
            if digits is not None and abs(digits) > MAX_POWER_DIGITS:
                raise OverflowError(f"Power exceeds {MAX_POWER_DIGITS} digits")


@lru_cache(maxsize=PARSE_CACHE_SIZE)
def parse_expression(sanitized, names=()):
    """
    Parse a sanitized expression string into a sympy object.

    ``names`` are the caller's variable names; they become plain symbols even
    when they would otherwise collide with a sympy name. Literal powers such
    as ``9^9^9^9`` are sized on an unevaluated parse first and rejected with
    ``OverflowError``; otherwise raises whatever the parser raises.
    """
    text = sanitized.replace('^', '**').strip()
    if not text:
        raise ValueError("Empty expression")

    local_dict = dict(MATH_CONTEXT)
    for name in names:
        if name not in local_dict:
            local_dict[name] = sp.Symbol(name)

    if '**' in text:
        _check_power_sizes(parse_expr(
            text,
            local_dict=local_dict,
            global_dict=dict(_PARSER_GLOBALS),
            transformations=TRANSFORMATIONS,
            evaluate=False,
        ))

    return parse_expr(
        text,
        local_dict=local_dict,
        global_dict=dict(_PARSER_GLOBALS),
        transformations=TRANSFORMATIONS,
    )


@lru_cache(maxsize=COMPILE_CACHE_SIZE)
def _compile(expr, symbols):
    """Lambdify an expression for fast float evaluation"""
    return sp.lambdify(symbols, expr, 'math')


# ============================================================================
# EVALUATION
# ============================================================================

def _real(value):
    if isinstance(value, complex):
        value = value.real
    return float(value)


def _evaluate_parsed(expr, scope):
    """Evaluate a parsed expression; None when the result is not a number"""
    if not isinstance(expr, sp.Expr):
        # Relations, booleans and tuples are not plottable values
        return None

    undefined = sorted(str(f.func) for f in expr.atoms(AppliedUndef))
    if undefined:
        raise NameError(f"Undefined function {undefined[0]}")

    symbols = tuple(sorted(expr.free_symbols, key=lambda s: s.name))
    missing = [s.name for s in symbols if s.name not in scope]
    if missing:
        raise NameError(f"Undefined symbol {missing[0]}")

    args = [float(scope[s.name]) for s in symbols]

    if symbols:
        try:
            return _real(_compile(expr, symbols)(*args))
        except (ArithmeticError, ValueError, TypeError, NameError):
            # Domain errors on the math module; redo it exactly below
            pass

    numeric = expr.subs(list(zip(symbols, args))).evalf()
    if not numeric.is_number or numeric.has(sp.zoo, sp.nan):
        return None
    try:
        return float(sp.re(numeric))
    except TypeError:
        return None


def evaluate(expression, variables=None):
    """
    Evaluate ``expression`` with the given variable values.

    Returns ``Value(real)`` or ``Error(kind, message, suggestions)``; never
    raises. ``pi`` and ``e`` are always available.
    """
    scope = dict(variables or {})
    try:
        sanitized = sanitize_expression(expression)
        expr = parse_expression(sanitized, tuple(sorted(scope)))
        result = _evaluate_parsed(expr, scope)
    except OverflowError as e:
        logger.debug("Evaluation of %r overflowed: %s", expression, e)
        return Error(ERROR_OVERFLOW, str(e), COMPUTATION_SUGGESTIONS)
    except Exception as e:  # parser and engine failures are reported, not raised
        message = str(e) or e.__class__.__name__
        logger.debug("Evaluation of %r failed: %s", expression, message)
        return Error(ERROR_SYNTAX, message, SYNTAX_SUGGESTIONS)

    if result is None or not math.isfinite(result):
        return Error(ERROR_COMPUTATION, "non-finite result", COMPUTATION_SUGGESTIONS)
    return Value(result)


def evaluate_value(expression, variables=None):
    """Evaluate and return the float, or None when the result is not valid"""
    result = evaluate(expression, variables)
    return result.value if is_valid(result) else None
