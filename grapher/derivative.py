from .config import DEFAULT_STEP
from .evaluator import thread_evaluator


def derivative(program, x, h=DEFAULT_STEP, evaluator=None):
    """
    Central-difference slope of a one-variable program at x:
    (f(x+h) - f(x-h)) / 2h. The first EvalError from either side is raised
    unchanged; there is no one-sided fallback.
    """
    if len(program.variables) != 1:
        raise ValueError(f"derivative needs a one-variable program, got {program.variables}")
    if not h:
        raise ValueError("derivative step must be non-zero")
    if evaluator is None: evaluator = thread_evaluator()
    x = float(x)
    ahead = evaluator.run(program, (x + h,))
    behind = evaluator.run(program, (x - h,))
    return (ahead - behind) / (2.0 * h)
