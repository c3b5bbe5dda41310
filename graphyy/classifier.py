"""
Function type detection
Heuristic tagging of expression strings; the tag only picks a sampling
strategy and never changes how an expression evaluates.
"""
import re

# ============================================================================
# FUNCTION TYPES
# ============================================================================

TYPE_LINEAR = "linear"
TYPE_QUADRATIC = "quadratic"
TYPE_POLYNOMIAL = "polynomial"
TYPE_TRIGONOMETRIC = "trigonometric"
TYPE_LOGARITHMIC = "logarithmic"
TYPE_EXPONENTIAL = "exponential"
TYPE_PARAMETRIC = "parametric"
TYPE_POLAR = "polar"
TYPE_IMPLICIT = "implicit"
TYPE_PIECEWISE = "piecewise"
TYPE_RECURSIVE = "recursive"
TYPE_COMPLEX = "complex"

FUNCTION_TYPES = (
    TYPE_LINEAR, TYPE_QUADRATIC, TYPE_POLYNOMIAL, TYPE_TRIGONOMETRIC,
    TYPE_LOGARITHMIC, TYPE_EXPONENTIAL, TYPE_PARAMETRIC, TYPE_POLAR,
    TYPE_IMPLICIT, TYPE_PIECEWISE, TYPE_RECURSIVE, TYPE_COMPLEX,
)

TRIG_FUNCTIONS = ['sin', 'cos', 'tan', 'sec', 'csc', 'cot', 'asin', 'acos', 'atan']
LOG_FUNCTIONS = ['log', 'ln', 'log10', 'log2']
EXP_FUNCTIONS = ['exp', 'e^', 'e**']
PARAMETRIC_MARKERS = ['x(t)', 'y(t)', 'x=', 'y=']
PIECEWISE_MARKERS = ['{', 'if', '?', ':']

_EXP_POWER = re.compile(r"\b\d+(?:\^|\*\*)x|\be(?:\^|\*\*)x")
_X_POWER = re.compile(r"x(?:\^|\*\*)(\d+)")
_X_CHAIN = re.compile(r"x(?:\*x)+")

TYPE_DESCRIPTIONS = {
    TYPE_LINEAR: "Linear function (degree 1)",
    TYPE_QUADRATIC: "Quadratic function (degree 2)",
    TYPE_POLYNOMIAL: "Polynomial function (degree 3+)",
    TYPE_TRIGONOMETRIC: "Trigonometric function",
    TYPE_LOGARITHMIC: "Logarithmic function",
    TYPE_EXPONENTIAL: "Exponential function",
    TYPE_PARAMETRIC: "Parametric equations",
    TYPE_POLAR: "Polar coordinates",
    TYPE_IMPLICIT: "Implicit function",
    TYPE_PIECEWISE: "Piecewise function",
    TYPE_RECURSIVE: "Recursive function",
    TYPE_COMPLEX: "Complex function",
}

# Example expressions by type
FUNCTION_TYPE_EXAMPLES = {
    TYPE_LINEAR: ["2*x + 3", "x - 5", "0.5*x"],
    TYPE_QUADRATIC: ["x^2 + 2*x + 1", "x^2 - 4", "2*x^2 + 3*x - 1"],
    TYPE_POLYNOMIAL: ["x^3 - 2*x^2 + x - 1", "x^4 + x^2", "2*x^5 - 3*x^3 + x"],
    TYPE_TRIGONOMETRIC: ["sin(x)", "cos(2*x) + sin(x)", "tan(x/2)"],
    TYPE_LOGARITHMIC: ["log(x)", "ln(x) + 2", "log10(x^2)"],
    TYPE_EXPONENTIAL: ["exp(x)", "2^x", "e^(-x^2)"],
    TYPE_PARAMETRIC: ["x(t) = cos(t), y(t) = sin(t)", "x = t^2, y = t^3"],
    TYPE_POLAR: ["r = 1 + cos(theta)", "r = sin(3*theta)"],
    TYPE_IMPLICIT: ["x^2 + y^2 = 25", "x^2 - y^2 = 1"],
    TYPE_PIECEWISE: ["{x < 0: -x, x^2}", "if(x > 0, x^2, -x)"],
    TYPE_RECURSIVE: ["f(n) = f(n-1) + f(n-2)"],
    TYPE_COMPLEX: ["z^2 + c", "sin(z)"],
}


# ============================================================================
# DETECTION
# ============================================================================

def polynomial_degree(expression):
    """Highest power of x written explicitly or as an x*x*... chain"""
    clean = re.sub(r"\s", "", expression).lower()

    max_degree = 0
    for match in _X_POWER.finditer(clean):
        max_degree = max(max_degree, int(match.group(1)))
    for match in _X_CHAIN.finditer(clean):
        max_degree = max(max_degree, match.group(0).count('x'))

    # A bare x is degree 1
    if max_degree == 0 and 'x' in clean:
        max_degree = 1
    return max_degree


def detect_function_type(expression):
    """Return the function type tag for an expression string"""
    if not expression or not expression.strip():
        return TYPE_POLYNOMIAL

    s = re.sub(r"\s", "", expression.lower())

    if any(name in s for name in TRIG_FUNCTIONS):
        return TYPE_TRIGONOMETRIC

    if any(name in s for name in LOG_FUNCTIONS):
        return TYPE_LOGARITHMIC

    if any(name in s for name in EXP_FUNCTIONS) or _EXP_POWER.search(s):
        return TYPE_EXPONENTIAL

    if 't' in s and any(marker in s for marker in PARAMETRIC_MARKERS):
        return TYPE_PARAMETRIC

    if 'theta' in s or 'θ' in s or ('r' in s and 'sqrt' not in s):
        return TYPE_POLAR

    if 'x' in s and 'y' in s and not (s.startswith('y=') or s.startswith('f(x)=')):
        return TYPE_IMPLICIT

    if any(marker in s for marker in PIECEWISE_MARKERS):
        return TYPE_PIECEWISE

    degree = polynomial_degree(s)
    if degree == 1:
        return TYPE_LINEAR
    if degree == 2:
        return TYPE_QUADRATIC
    return TYPE_POLYNOMIAL


def describe_function_type(function_type):
    return TYPE_DESCRIPTIONS.get(function_type, "Unknown function type")
