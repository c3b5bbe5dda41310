"""Pre-parse filtering of user expression strings.

Strips anything that is not plain math before the text reaches the sympy
parser and maps common unicode math symbols to their ASCII spelling.
"""
import re

# ============================================================================
# PATTERNS
# ============================================================================

# Identifiers that could load code or reach the interpreter through the parser
BLOCKED_KEYWORDS = (
    "eval", "exec", "compile", "import", "export", "require", "Function",
    "open", "globals", "locals", "getattr", "setattr", "delattr", "lambda",
    "os", "sys", "subprocess", "builtins",
)

UNICODE_REPLACEMENTS = [
    ("×", "*"),
    ("·", "*"),
    ("÷", "/"),
    ("−", "-"),
    ("π", "pi"),
    ("θ", "theta"),
    ("√", "sqrt"),
    ("∞", "oo"),
    ("±", "+"),
    ("≈", "=="),
]

_STRIP_PATTERNS = [
    re.compile(r"['\"`;]"),                                   # quotes, separators
    re.compile(r"\b(?:%s)\b" % "|".join(BLOCKED_KEYWORDS)),
    re.compile(r"__"),                                        # dunder access
    re.compile(r"\.\."),                                      # path traversal
    re.compile(r"\.(?=[A-Za-z_])"),                           # attribute access
    re.compile(r"\$\{.*?\}"),                                 # template literals
]


# ============================================================================
# SANITIZER
# ============================================================================

def normalize_symbols(text):
    """Replace unicode math symbols with their ASCII equivalents"""
    for symbol, replacement in UNICODE_REPLACEMENTS:
        text = text.replace(symbol, replacement)
    return text


def sanitize_expression(expression):
    """
    Return a copy of ``expression`` that is safe to hand to the evaluator.

    Removal runs until nothing changes, so pieces that only become dangerous
    once something between them is stripped (``ev;al``, ``e..val``) are
    caught as well and the function is idempotent. Never raises: the worst
    case is an empty or unparsable string, which the evaluator reports.
    """
    if expression is None:
        return ""
    text = normalize_symbols(str(expression))

    previous = None
    while text != previous:
        previous = text
        for pattern in _STRIP_PATTERNS:
            text = pattern.sub("", text)

    return text.strip()
