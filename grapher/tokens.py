from enum import IntEnum
from typing import NamedTuple, Optional

from .functions import Builtin


class TokenKind(IntEnum):
    NUMBER = 0
    VARIABLE = 1
    OPERATOR = 2
    FUNCTION = 3
    LEFT_PAREN = 4
    RIGHT_PAREN = 5
    COMMA = 6


# --- Token Variants ---
class Number(NamedTuple):
    value: float
    kind = TokenKind.NUMBER

    def __str__(self):
        return f"{self.value:.12g}"


class Variable(NamedTuple):
    name: str
    slot: int
    kind = TokenKind.VARIABLE

    def __str__(self):
        return self.name


class Operator(NamedTuple):
    symbol: str
    precedence: int
    right_assoc: bool = False
    prefix: bool = False
    kind = TokenKind.OPERATOR

    def __str__(self):
        return self.symbol


class Function(NamedTuple):
    name: str
    builtin: Optional[Builtin] = None
    kind = TokenKind.FUNCTION

    def __str__(self):
        return self.name


class LeftParen(NamedTuple):
    kind = TokenKind.LEFT_PAREN

    def __str__(self):
        return "("


class RightParen(NamedTuple):
    kind = TokenKind.RIGHT_PAREN

    def __str__(self):
        return ")"


class Comma(NamedTuple):
    kind = TokenKind.COMMA

    def __str__(self):
        return ","


LEFT_PAREN = LeftParen()
RIGHT_PAREN = RightParen()
COMMA = Comma()

OPERATORS = {
    '+': Operator('+', 1),
    '-': Operator('-', 1),
    '*': Operator('*', 2),
    '/': Operator('/', 2),
    '^': Operator('^', 3, right_assoc=True),
}

# A unary minus after normalization: evaluates as binary 0 - a but is pushed
# without popping, so "2*-3" groups as 2*(0-3) and "-x^2" as 0-(x^2)
NEGATE = Operator('-', 2, right_assoc=True, prefix=True)

PROGRAM_KINDS = frozenset((TokenKind.NUMBER, TokenKind.VARIABLE, TokenKind.OPERATOR, TokenKind.FUNCTION))


def stack_profile(tokens):
    """
    Walk a postfix sequence counting operands only.
    Returns (max_depth, final_depth, complete) where complete is False when
    some operator or function would run out of operands.
    """
    depth = max_depth = 0
    for token in tokens:
        kind = token.kind
        if kind is TokenKind.OPERATOR:
            if depth < 2: return max_depth, depth, False
            depth -= 1
        elif kind is TokenKind.FUNCTION:
            if depth < 1: return max_depth, depth, False
        else:
            depth += 1
            if depth > max_depth: max_depth = depth
    return max_depth, depth, True


# --- Compiled Program ---
class Program:
    """
    An immutable postfix token sequence ready for evaluation.

    Holds the variable names it was compiled against (a Variable token's
    ``slot`` indexes into them) and the deepest operand stack its
    evaluation can reach.
    """

    __slots__ = ('_tokens', '_variables', '_text', '_depth', '_well_formed')

    def __init__(self, tokens, variables, text=""):
        tokens = tuple(tokens)
        for token in tokens:
            if token.kind not in PROGRAM_KINDS:
                raise TypeError(f"{type(token).__name__} token cannot appear in a Program")
        max_depth, final_depth, complete = stack_profile(tokens)
        object.__setattr__(self, '_tokens', tokens)
        object.__setattr__(self, '_variables', tuple(variables))
        object.__setattr__(self, '_text', text)
        object.__setattr__(self, '_depth', max_depth)
        object.__setattr__(self, '_well_formed', complete and final_depth == 1)

    def __setattr__(self, name, value):
        raise AttributeError("Program is immutable")

    @property
    def tokens(self): return self._tokens

    @property
    def variables(self): return self._variables

    @property
    def text(self): return self._text

    @property
    def depth(self): return self._depth

    @property
    def well_formed(self):
        """False when evaluation is bound to fail with a structural EvalError."""
        return self._well_formed

    def postfix(self):
        return " ".join(str(token) for token in self._tokens)

    def __len__(self): return len(self._tokens)

    def __iter__(self): return iter(self._tokens)

    def __eq__(self, other):
        if not isinstance(other, Program): return NotImplemented
        return self._tokens == other._tokens and self._variables == other._variables

    def __hash__(self): return hash((self._tokens, self._variables))

    def __repr__(self):
        return f"Program({self.postfix()!r}, variables={self._variables})"
