# --- Engine Errors ---
# Every failure of lex/compile/evaluate is one of these; nothing else escapes.


class ExpressionError(ValueError):
    """Base class for all expression engine failures."""


# --- Compile-time failures (one per submission) ---
class CompileError(ExpressionError):
    pass


class LexError(CompileError):
    def __init__(self, char, offset):
        self.char = char
        self.offset = offset
        super().__init__(f"Unknown character '{char}' at index {offset}")


class UnbalancedParens(CompileError):
    def __init__(self, message="Mismatched parentheses"):
        super().__init__(message)


class MisplacedComma(CompileError):
    def __init__(self, message="Misplaced comma"):
        super().__init__(message)


class EmptyExpression(CompileError):
    def __init__(self, message="Expression is empty"):
        super().__init__(message)


# --- Evaluation-time failures (one per sample point) ---
class EvalError(ExpressionError):
    pass


class InsufficientOperands(EvalError):
    def __init__(self, symbol):
        self.symbol = symbol
        super().__init__(f"Not enough operands for '{symbol}'")


class UnknownFunction(EvalError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown function '{name}'")


class DivisionByZero(EvalError):
    def __init__(self, message="Division by zero"):
        super().__init__(message)


class MalformedProgram(EvalError):
    def __init__(self, remaining):
        self.remaining = remaining
        super().__init__(f"Program left {remaining} values on the stack, expected 1")
