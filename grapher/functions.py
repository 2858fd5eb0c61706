import math
from enum import Enum

import numpy as np


# --- Constant Table ---
# Folded into Number tokens by the lexer; never reaches the evaluator by name.
CONSTANTS = {
    'pi': math.pi,
    'e': math.e,
}


def _floor(a):
    return float(math.floor(a))


def _ceil(a):
    return float(math.ceil(a))


# --- Function Table ---
class Builtin(Enum):
    """
    The fixed set of unary functions an expression may call.

    Each member carries its source name, a scalar implementation from
    ``math`` and the matching numpy ufunc. ``math`` raises on out-of-domain
    input or overflow where C would return NaN/inf; in that case the ufunc
    is used to produce the IEEE result instead, so ``ln(0)`` is ``-inf`` and
    ``asin(2)`` is ``nan``.
    """

    SIN = ("sin", math.sin, np.sin)
    COS = ("cos", math.cos, np.cos)
    TAN = ("tan", math.tan, np.tan)
    ASIN = ("asin", math.asin, np.arcsin)
    ACOS = ("acos", math.acos, np.arccos)
    ATAN = ("atan", math.atan, np.arctan)
    SINH = ("sinh", math.sinh, np.sinh)
    COSH = ("cosh", math.cosh, np.cosh)
    TANH = ("tanh", math.tanh, np.tanh)
    EXP = ("exp", math.exp, np.exp)
    LN = ("ln", math.log, np.log)
    LOG = ("log", math.log10, np.log10)
    SQRT = ("sqrt", math.sqrt, np.sqrt)
    ABS = ("abs", math.fabs, np.abs)
    FLOOR = ("floor", _floor, np.floor)
    CEIL = ("ceil", _ceil, np.ceil)

    def __init__(self, symbol, scalar, ufunc):
        self.symbol = symbol
        self.scalar = scalar
        self.ufunc = ufunc

    def __call__(self, a):
        try:
            return self.scalar(a)
        except (ValueError, OverflowError):
            with np.errstate(all="ignore"):
                return float(self.ufunc(a))

    def apply_array(self, values):
        with np.errstate(all="ignore"):
            return self.ufunc(values)

    @classmethod
    def lookup(cls, name):
        """Resolve a function name, or None when it is not a builtin."""
        return _BY_NAME.get(name)


_BY_NAME = {member.symbol: member for member in Builtin}

FUNCTION_NAMES = tuple(_BY_NAME)


def power(a, b):
    """Real exponentiation with IEEE results instead of math exceptions."""
    try:
        return math.pow(a, b)
    except (ValueError, OverflowError):
        with np.errstate(all="ignore"):
            return float(np.power(float(a), float(b)))
