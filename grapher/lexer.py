from .errors import LexError
from .functions import CONSTANTS, Builtin
from .tokens import COMMA, LEFT_PAREN, NEGATE, OPERATORS, RIGHT_PAREN, Function, Number, TokenKind, Variable


DIGITS = frozenset('0123456789')


def _is_ident_start(c):
    return c.isalpha() or c == '_'


def _is_ident_char(c):
    return c.isalnum() or c == '_'


def _scan_number(text, i):
    """Return the end index of the numeric literal starting at i."""
    n = len(text)
    j = i
    seen_dot = False
    while j < n:
        c = text[j]
        if c in DIGITS: j += 1
        elif c == '.' and not seen_dot: seen_dot = True; j += 1
        else: break
    # Exponent only counts when digits follow it, so "2e" stays 2 followed by the constant e
    if j < n and text[j] in 'eE':
        k = j + 1
        if k < n and text[k] in '+-': k += 1
        if k < n and text[k] in DIGITS:
            while k < n and text[k] in DIGITS: k += 1
            j = k
    return j


def tokenize(text, variables=("x",), constants=CONSTANTS):
    """
    Split expression text into tokens.
    Identifiers resolve to a variable, then a constant (folded to a Number),
    otherwise a Function token. Raises LexError on any other character.
    """
    tokens = []
    n = len(text)
    i = 0
    while i < n:
        c = text[i]
        if c.isspace():
            i += 1; continue
        if c in DIGITS or (c == '.' and i + 1 < n and text[i + 1] in DIGITS):
            j = _scan_number(text, i)
            tokens.append(Number(float(text[i:j])))
            i = j; continue
        if _is_ident_start(c):
            j = i + 1
            while j < n and _is_ident_char(text[j]): j += 1
            name = text[i:j]
            if name in variables: tokens.append(Variable(name, variables.index(name)))
            elif name in constants: tokens.append(Number(constants[name]))
            else: tokens.append(Function(name, Builtin.lookup(name)))
            i = j; continue
        if c == '(': tokens.append(LEFT_PAREN)
        elif c == ')': tokens.append(RIGHT_PAREN)
        elif c == ',': tokens.append(COMMA)
        elif c in OPERATORS: tokens.append(OPERATORS[c])
        else: raise LexError(c, i)
        i += 1
    return tokens


_UNARY_CONTEXT = (TokenKind.OPERATOR, TokenKind.LEFT_PAREN, TokenKind.COMMA)


def normalize_unary_minus(tokens):
    """
    Insert Number(0) before each unary '-' so "-x" reads as "0 - x".
    A '-' is unary when it starts the stream or follows an operator, a
    left paren or a comma; it is replaced by NEGATE so it binds to its
    own operand.
    """
    fixed = []
    prev = None
    for token in tokens:
        if token.kind is TokenKind.OPERATOR and token.symbol == '-':
            if prev is None or prev.kind in _UNARY_CONTEXT:
                fixed.append(Number(0.0))
                token = NEGATE
        fixed.append(token)
        prev = token
    return fixed
