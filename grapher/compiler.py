from .config import DEFAULT_VARIABLES
from .errors import EmptyExpression, MisplacedComma, UnbalancedParens
from .lexer import normalize_unary_minus, tokenize
from .tokens import Program, TokenKind


def _pops(t, top):
    """True when the incoming operator t must pop operator top off the stack first."""
    if t.prefix: return False
    if t.right_assoc: return t.precedence < top.precedence
    return t.precedence <= top.precedence


def to_postfix(tokens):
    """
    Shunting-Yard: reorder an infix token list into postfix.
    Raises UnbalancedParens, MisplacedComma or EmptyExpression.
    """
    if not tokens: raise EmptyExpression()
    out = []; stack = []
    for t in tokens:
        kind = t.kind
        if kind is TokenKind.NUMBER or kind is TokenKind.VARIABLE:
            out.append(t)
        elif kind is TokenKind.FUNCTION or kind is TokenKind.LEFT_PAREN:
            stack.append(t)
        elif kind is TokenKind.OPERATOR:
            while stack and stack[-1].kind is TokenKind.OPERATOR and _pops(t, stack[-1]):
                out.append(stack.pop())
            stack.append(t)
        elif kind is TokenKind.RIGHT_PAREN:
            while stack and stack[-1].kind is not TokenKind.LEFT_PAREN:
                out.append(stack.pop())
            if not stack: raise UnbalancedParens("Unmatched ')'")
            stack.pop()
            # The group just closed is the argument of a pending function call
            if stack and stack[-1].kind is TokenKind.FUNCTION:
                out.append(stack.pop())
        elif kind is TokenKind.COMMA:
            while stack and stack[-1].kind is not TokenKind.LEFT_PAREN:
                out.append(stack.pop())
            # Builtins are unary, so a comma is only tolerated inside a paren group
            if not stack: raise MisplacedComma()
    while stack:
        top = stack.pop()
        if top.kind is TokenKind.LEFT_PAREN: raise UnbalancedParens("Unmatched '('")
        out.append(top)
    return out


def compile(text, variables=DEFAULT_VARIABLES):
    """
    Compile expression text into an immutable Program over the given variable names.
    Raises a CompileError subclass on failure.
    """
    if isinstance(variables, str): variables = (variables,)
    variables = tuple(variables)
    tokens = normalize_unary_minus(tokenize(text, variables))
    return Program(to_postfix(tokens), variables, text)
