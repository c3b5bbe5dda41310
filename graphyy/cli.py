"""
Command line front end
Exit status: 0 on success, 1 when an expression cannot be evaluated,
2 for bad input (unreadable files, malformed options, unfittable data).
"""
import argparse
import logging
import sys

from .analysis import find_intersections, find_root, numerical_derivative, numerical_integral
from .classifier import describe_function_type, detect_function_type
from .datasets import parse_csv
from .errors import RegressionError
from .evaluator import evaluate, is_valid
from .functions import KIND_CARTESIAN, format_function, parse_function
from .graph import SampleRange, Viewport
from .logging_config import setup_logging
from .sampler import build_curve, cartesian_step
from .stats import REGRESSION_FAMILIES, calculate_statistics, detect_outliers, fit
from .textplot import render_text_plot

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_EVALUATION = 1
EXIT_INPUT = 2


def _fmt(value, precision=6):
    return f"{value:.{precision}g}"


def _parse_variables(pairs):
    variables = {}
    for pair in pairs or []:
        name, sep, value = pair.partition('=')
        if not sep or not name.strip():
            raise ValueError(f"Expected NAME=VALUE, got {pair!r}")
        variables[name.strip()] = float(value)
    return variables


def _read_points(path):
    if path == '-':
        return parse_csv(sys.stdin.read())
    with open(path, encoding='utf-8-sig') as f:
        return parse_csv(f.read())


# ============================================================================
# COMMANDS
# ============================================================================

def cmd_eval(args):
    result = evaluate(args.expression, args.variables)
    if not is_valid(result):
        print(f"Error ({result.kind}): {result.message}", file=sys.stderr)
        for hint in result.suggestions:
            print(f"  - {hint}", file=sys.stderr)
        return EXIT_EVALUATION
    print(_fmt(result.value, args.precision))
    return EXIT_OK


def cmd_type(args):
    tag = detect_function_type(args.expression)
    spec = parse_function(args.expression)
    print(f"{tag}: {describe_function_type(tag)}")
    print(f"plotted as {spec.kind}: {format_function(spec)}")
    return EXIT_OK


def cmd_analyze(args):
    status = EXIT_OK
    expression, variables = args.expression, args.variables

    if args.derivative_at is not None:
        value = numerical_derivative(expression, args.derivative_at, extra_variables=variables)
        status |= _report(f"f'({_fmt(args.derivative_at)})", value, args.precision)

    if args.integral is not None:
        a, b = args.integral
        value = numerical_integral(expression, a, b, extra_variables=variables)
        status |= _report(f"integral [{_fmt(a)}, {_fmt(b)}]", value, args.precision)

    if args.root is not None:
        value = find_root(expression, args.root, extra_variables=variables)
        status |= _report(f"root near {_fmt(args.root)}", value, args.precision)

    return status


def _report(label, value, precision):
    if value is None:
        print(f"{label}: undefined", file=sys.stderr)
        return EXIT_EVALUATION
    print(f"{label} = {_fmt(value, precision)}")
    return EXIT_OK


def cmd_plot(args):
    viewport = Viewport(args.x_range[0], args.x_range[1], args.y_range[0], args.y_range[1])
    specs = [parse_function(text) for text in args.expressions]
    curves = [build_curve(spec, viewport, args.width, args.height, args.variables)
              for spec in specs]

    highlights = []
    if args.intersections and len(specs) >= 2 and all(s.kind == KIND_CARTESIAN for s in specs[:2]):
        x_range = SampleRange(viewport.x_min, viewport.x_max, cartesian_step(viewport, args.width))
        highlights = find_intersections(specs[0].expression, specs[1].expression,
                                        x_range, args.variables)

    print(render_text_plot(curves, viewport, args.width, args.height, highlights))
    for spec, curve in zip(specs, curves):
        if not curve.segments:
            logger.warning("Nothing to draw for %s", format_function(spec))
    for point in highlights:
        print(f"intersection ({_fmt(point.x, 4)}, {_fmt(point.y, 4)})")
    return EXIT_OK


def cmd_fit(args):
    points = _read_points(args.csv)
    result = fit(args.family, points, args.degree)
    print(result.equation)
    print(f"R^2 = {_fmt(result.r_squared, args.precision)}")
    print("coefficients: " + ", ".join(_fmt(c, args.precision) for c in result.coefficients))
    return EXIT_OK


def cmd_stats(args):
    points = _read_points(args.csv)
    summary = calculate_statistics(points)
    p = args.precision
    print(f"count    {len(points)}")
    print(f"mean     {_fmt(summary.mean, p)}")
    print(f"median   {_fmt(summary.median, p)}")
    print(f"mode     {', '.join(_fmt(m, p) for m in summary.mode) or '-'}")
    print(f"std dev  {_fmt(summary.standard_deviation, p)}")
    print(f"variance {_fmt(summary.variance, p)}")
    print(f"min      {_fmt(summary.min, p)}")
    print(f"max      {_fmt(summary.max, p)}")
    print("quartiles " + ", ".join(_fmt(q, p) for q in summary.quartiles))
    outliers = detect_outliers(points)
    if outliers:
        print("outliers " + ", ".join(f"({_fmt(o[0], p)}, {_fmt(o[1], p)})" for o in outliers))
    return EXIT_OK


# ============================================================================
# ENTRY POINTS
# ============================================================================

def build_parser():
    parser = argparse.ArgumentParser(prog="graphyy", description="Graphing calculator")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument("--precision", type=int, default=6, help="Significant digits")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("eval", help="Evaluate an expression")
    p.add_argument("expression")
    p.add_argument("--var", action="append", dest="var", metavar="NAME=VALUE")
    p.set_defaults(handler=cmd_eval)

    p = sub.add_parser("type", help="Classify an expression")
    p.add_argument("expression")
    p.set_defaults(handler=cmd_type)

    p = sub.add_parser("analyze", help="Derivative, integral and root of f(x)")
    p.add_argument("expression")
    p.add_argument("--derivative-at", type=float, metavar="X")
    p.add_argument("--integral", type=float, nargs=2, metavar=("A", "B"))
    p.add_argument("--root", type=float, metavar="GUESS")
    p.add_argument("--var", action="append", dest="var", metavar="NAME=VALUE")
    p.set_defaults(handler=cmd_analyze)

    p = sub.add_parser("plot", help="Draw functions as text")
    p.add_argument("expressions", nargs="+")
    p.add_argument("--x-range", type=float, nargs=2, default=(-10.0, 10.0), metavar=("A", "B"))
    p.add_argument("--y-range", type=float, nargs=2, default=(-10.0, 10.0), metavar=("A", "B"))
    p.add_argument("--width", type=int, default=75)
    p.add_argument("--height", type=int, default=24)
    p.add_argument("--intersections", action="store_true",
                   help="Mark where the first two functions cross")
    p.add_argument("--var", action="append", dest="var", metavar="NAME=VALUE")
    p.set_defaults(handler=cmd_plot)

    p = sub.add_parser("fit", help="Fit a regression to CSV data")
    p.add_argument("family", choices=REGRESSION_FAMILIES)
    p.add_argument("csv", help="CSV file with x,y[,label] columns ('-' for stdin)")
    p.add_argument("--degree", type=int, default=2)
    p.set_defaults(handler=cmd_fit)

    p = sub.add_parser("stats", help="Summary statistics of CSV data")
    p.add_argument("csv", help="CSV file with x,y[,label] columns ('-' for stdin)")
    p.set_defaults(handler=cmd_stats)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else None, args.log_file)

    try:
        args.variables = _parse_variables(getattr(args, "var", None))
        return args.handler(args)
    except (RegressionError, ValueError, OSError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT


def run():
    """Entry point"""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    run()
