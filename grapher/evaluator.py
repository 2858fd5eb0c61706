import threading

import numpy as np

from .config import STACK_CAPACITY
from .errors import DivisionByZero, InsufficientOperands, MalformedProgram, UnknownFunction
from .functions import power
from .tokens import TokenKind

NUMBER = TokenKind.NUMBER
VARIABLE = TokenKind.VARIABLE
OPERATOR = TokenKind.OPERATOR


class Evaluator:
    """
    Postfix stack machine over a pre-sized operand buffer.

    The buffer is reused across calls and only replaced when a Program
    deeper than its capacity is evaluated, so the steady-state path does no
    list allocation. An Evaluator is not shared between threads; use one per
    worker (the module-level ``evaluate`` keeps one per thread).
    """

    def __init__(self, capacity=STACK_CAPACITY):
        self._stack = [0.0] * max(1, capacity)

    @property
    def capacity(self):
        return len(self._stack)

    def run(self, program, values=()):
        """
        Evaluate with positional variable values, ordered like ``program.variables``.
        Returns a float or raises an EvalError subclass.
        """
        if program.depth > len(self._stack):
            self._stack = [0.0] * program.depth
        stack = self._stack
        top = 0
        for token in program.tokens:
            kind = token.kind
            if kind is NUMBER:
                stack[top] = token.value; top += 1
            elif kind is VARIABLE:
                stack[top] = values[token.slot]; top += 1
            elif kind is OPERATOR:
                if top < 2: raise InsufficientOperands(token.symbol)
                top -= 1
                b = stack[top]; a = stack[top - 1]
                s = token.symbol
                if s == '+': stack[top - 1] = a + b
                elif s == '-': stack[top - 1] = a - b
                elif s == '*': stack[top - 1] = a * b
                elif s == '/':
                    if b == 0: raise DivisionByZero()
                    stack[top - 1] = a / b
                else: stack[top - 1] = power(a, b)
            else:
                if top < 1: raise InsufficientOperands(token.name)
                fn = token.builtin
                if fn is None: raise UnknownFunction(token.name)
                stack[top - 1] = fn(stack[top - 1])
        if top != 1: raise MalformedProgram(top)
        return stack[0]


_local = threading.local()


def thread_evaluator():
    """The calling thread's own Evaluator, created on first use."""
    evaluator = getattr(_local, 'evaluator', None)
    if evaluator is None:
        evaluator = _local.evaluator = Evaluator()
    return evaluator


def bind(program, bindings):
    """Order a name -> value mapping like the program's variables. Missing names raise KeyError."""
    return tuple(float(bindings[name]) for name in program.variables)


def evaluate(program, bindings=None):
    if bindings is None: bindings = {}
    return thread_evaluator().run(program, bind(program, bindings))


# --- Vectorised Evaluation ---
def evaluate_array(program, bindings):
    """
    Evaluate over numpy arrays (broadcast together) in one pass.

    Elements where the scalar evaluator would raise DivisionByZero, or whose
    value is not finite, come back as NaN. Failures that do not depend on
    the values (InsufficientOperands, UnknownFunction, MalformedProgram)
    are raised as in the scalar path.
    """
    arrays = [np.asarray(bindings[name], dtype=np.float64) for name in program.variables]
    shape = np.broadcast_shapes(*(a.shape for a in arrays)) if arrays else ()
    undefined = np.zeros(shape, dtype=bool)
    stack = []
    with np.errstate(all="ignore"):
        for token in program.tokens:
            kind = token.kind
            if kind is NUMBER:
                stack.append(np.float64(token.value))
            elif kind is VARIABLE:
                stack.append(arrays[token.slot])
            elif kind is OPERATOR:
                if len(stack) < 2: raise InsufficientOperands(token.symbol)
                b = stack.pop(); a = stack.pop()
                s = token.symbol
                if s == '+': r = a + b
                elif s == '-': r = a - b
                elif s == '*': r = a * b
                elif s == '/':
                    zero = b == 0
                    undefined = undefined | zero
                    r = a / np.where(zero, 1.0, b)
                else: r = np.power(a, b)
                stack.append(r)
            else:
                if not stack: raise InsufficientOperands(token.name)
                fn = token.builtin
                if fn is None: raise UnknownFunction(token.name)
                stack.append(fn.apply_array(stack.pop()))
    if len(stack) != 1: raise MalformedProgram(len(stack))
    result = np.array(np.broadcast_to(stack[0], shape), dtype=np.float64)
    result[undefined | ~np.isfinite(result)] = np.nan
    return result
