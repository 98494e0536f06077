from typing import Optional

from sprig.tokens import Token, TokenType


class SprigError(Exception):
    """Base class for every error the Sprig toolchain reports to a user."""
    name = 'Error'


class LexError(SprigError):
    """Raised when a literal cannot be decoded from its source text."""
    name = 'LexError'

    def __init__(self, message: str, line: int):
        super().__init__(f"[line {line}] {message}")
        self.message = message
        self.line = line


class ParseError(SprigError):
    name = 'ParseError'

    def __init__(self, message: str, token: Token):
        where = 'at end' if token.type == TokenType.EOF else f"at '{token.lexeme}'"
        super().__init__(f"[line {token.line}] Error {where}: {message}")
        self.message = message
        self.token = token


class EvalError(SprigError):
    """Raised while evaluating a program. The token, when known, locates the failure."""
    name = 'EvalError'

    def __init__(self, message: str, token: Optional[Token] = None):
        super().__init__(message if token is None else f"[line {token.line}] {message}")
        self.message = message
        self.token = token


class TypeMismatchError(EvalError):
    name = 'TypeError'


class UndefinedVariableError(EvalError):
    name = 'NameError'


class DivisionByZeroError(EvalError):
    name = 'ZeroDivisionError'


class NotCallableError(EvalError):
    name = 'TypeError'


class ArityError(EvalError):
    name = 'ArityError'
