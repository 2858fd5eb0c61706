# --- Sampling Helpers ---
# What the render side calls each frame: one sample per pixel column for a
# curve, one per mesh vertex for a surface. Undefined samples are NaN so the
# caller can break the curve/surface there.
import math

import numpy as np

from .config import DEFAULT_COLUMNS, DEFAULT_RESOLUTION, DEFAULT_STEP, DEFAULT_X_RANGE, DEFAULT_Y_RANGE
from .errors import EvalError
from .evaluator import Evaluator, evaluate_array
from .logger import LOGGER


def _axis(value_range, count):
    if count < 2: raise ValueError(f"Need at least 2 samples, got {count}")
    return np.linspace(value_range[0], value_range[1], count, dtype=np.float64)


def _require_one_variable(program):
    if len(program.variables) != 1:
        raise ValueError(f"Need a one-variable program, got {program.variables}")


def _safe_array(program, bindings, shape):
    try:
        return evaluate_array(program, bindings)
    except EvalError as e:
        LOGGER.warn(f"'{program.text}' is undefined everywhere: {e}")
        return np.full(shape, np.nan)


def sample_curve(program, x_range=DEFAULT_X_RANGE, columns=DEFAULT_COLUMNS, vectorized=True):
    """
    Sample a one-variable program at `columns` evenly spaced x values.
    Returns (xs, ys); ys is NaN wherever evaluation failed or was not finite.
    """
    _require_one_variable(program)
    xs = _axis(x_range, columns)
    if vectorized:
        return xs, _safe_array(program, {program.variables[0]: xs}, xs.shape)

    evaluator = Evaluator(max(1, program.depth))
    ys = np.empty_like(xs)
    for i, x in enumerate(xs.tolist()):
        try:
            y = evaluator.run(program, (x,))
        except EvalError:
            y = math.nan
        ys[i] = y if math.isfinite(y) else math.nan
    return xs, ys


def sample_surface(program, x_range=DEFAULT_X_RANGE, y_range=DEFAULT_Y_RANGE, resolution=DEFAULT_RESOLUTION):
    """
    Sample a program over a resolution x resolution grid of (x, y).
    Returns (X, Y, Z) with 'ij' indexing, so Z[i, j] = f(xs[i], ys[j]).
    The program's first variable runs along X and its second along Y.
    """
    if not 1 <= len(program.variables) <= 2:
        raise ValueError(f"Need a one- or two-variable program, got {program.variables}")
    x_vals = _axis(x_range, resolution)
    y_vals = _axis(y_range, resolution)
    x_grid, y_grid = np.meshgrid(x_vals, y_vals, indexing='ij')
    bindings = dict(zip(program.variables, (x_grid, y_grid)))
    z_grid = _safe_array(program, bindings, x_grid.shape)
    return x_grid, y_grid, z_grid


def sample_derivative(program, x_range=DEFAULT_X_RANGE, columns=DEFAULT_COLUMNS, h=DEFAULT_STEP):
    """Central-difference slope at each column; NaN where either side is undefined."""
    _require_one_variable(program)
    if not h: raise ValueError("derivative step must be non-zero")
    xs = _axis(x_range, columns)
    name = program.variables[0]
    ahead = _safe_array(program, {name: xs + h}, xs.shape)
    behind = _safe_array(program, {name: xs - h}, xs.shape)
    with np.errstate(all="ignore"):
        slopes = (ahead - behind) / (2.0 * h)
    slopes[~np.isfinite(slopes)] = np.nan
    return xs, slopes
