# --- Imports ---
import argparse
import logging
import sys

import numpy as np

from grapher import CONSTANTS, FUNCTION_NAMES, CompileError, EvalError, GraphSession, GrapherConfig
from grapher.config import (DEFAULT_COLUMNS, DEFAULT_RESOLUTION, DEFAULT_STEP, DEFAULT_VARIABLES, DEFAULT_X_RANGE,
                            DEFAULT_Y_RANGE, SURFACE_VARIABLES)
from grapher.logger import LOGGER


# --- Argument Parsing ---
def parse_binding(raw):
    name, sep, value = raw.partition('=')
    if not sep: raise argparse.ArgumentTypeError(f"expected name=value, got '{raw}'")
    try: return name.strip(), float(value)
    except ValueError: raise argparse.ArgumentTypeError(f"'{value}' is not a number") from None


def build_parser():
    epilog = f"functions: {', '.join(FUNCTION_NAMES)}; constants: {', '.join(CONSTANTS)}"
    parser = argparse.ArgumentParser(description="Compile and evaluate a grapher expression, e.g. \"sin(x) + x^2\".",
                                     epilog=epilog)
    parser.add_argument("expression")
    parser.add_argument("--surface", action="store_true", help="two-variable expression over x and y")
    parser.add_argument("--at", type=parse_binding, action="append", default=[], metavar="NAME=VALUE",
                        help="variable binding; repeat for x and y")
    parser.add_argument("--derivative", type=float, metavar="X", help="central-difference slope at X")
    parser.add_argument("--step", type=float, default=DEFAULT_STEP)
    parser.add_argument("--sample", action="store_true", help="sample over the view on a worker thread")
    parser.add_argument("--x-range", type=float, nargs=2, default=DEFAULT_X_RANGE)
    parser.add_argument("--y-range", type=float, nargs=2, default=DEFAULT_Y_RANGE)
    parser.add_argument("--columns", type=int, default=DEFAULT_COLUMNS)
    parser.add_argument("--resolution", type=int, default=DEFAULT_RESOLUTION)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


# --- Commands ---
def report_samples(samples):
    if samples is None: print("Sampling failed."); return
    values = samples.values
    defined = np.isfinite(values)
    print(f"Sampled {values.size} points, {int(defined.sum())} defined.")
    if defined.any(): print(f"  range: [{np.nanmin(values):.6g}, {np.nanmax(values):.6g}]")


def run(args):
    variables = SURFACE_VARIABLES if args.surface else DEFAULT_VARIABLES
    config = GrapherConfig(variables=variables, x_range=args.x_range, y_range=args.y_range,
                           columns=args.columns, resolution=args.resolution, step=args.step)
    session = GraphSession(config)
    try:
        program = session.submit(args.expression)
    except CompileError as e:
        print(f"Error: {e}"); return 2
    print(f"Postfix: {program.postfix()}")

    status = 0
    if args.at:
        bindings = dict(args.at)
        try: print(f"Value: {session.evaluate(bindings):.12g}")
        except EvalError as e: print(f"Undefined: {e}"); status = 1
        except KeyError as e: print(f"Error: missing binding for {e}"); return 2
    if args.derivative is not None:
        if args.surface: print("Error: derivative needs a one-variable expression"); return 2
        try: print(f"Slope: {session.derivative(args.derivative):.12g}")
        except EvalError as e: print(f"Undefined: {e}"); status = 1
    if args.sample:
        session.request_samples()
        session.wait_idle()
        report_samples(session.poll_result())
    return status


# --- Main Execution ---
def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.verbose: LOGGER.setLevel(logging.DEBUG)
    return run(args)


if __name__ == '__main__':
    sys.exit(main())
