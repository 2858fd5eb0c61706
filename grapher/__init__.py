from .compiler import compile, to_postfix
from .config import GrapherConfig
from .derivative import derivative
from .errors import (
    CompileError,
    DivisionByZero,
    EmptyExpression,
    EvalError,
    ExpressionError,
    InsufficientOperands,
    LexError,
    MalformedProgram,
    MisplacedComma,
    UnbalancedParens,
    UnknownFunction,
)
from .evaluator import Evaluator, evaluate, evaluate_array
from .functions import CONSTANTS, FUNCTION_NAMES, Builtin
from .lexer import normalize_unary_minus, tokenize
from .sampling import sample_curve, sample_derivative, sample_surface
from .session import GraphSession, Samples, Snapshot
from .tokens import Program

__version__ = "0.1.0"
