"""Tokenizer for the Sprig language.

The lexer walks the source once, keeping two cursors: ``start`` marks the
first character of the token being scanned and ``current`` the next
character to read. Each token is classified by its first character.

Lexing is forgiving. An unterminated string or a character the language
does not use is reported and skipped, so one bad character does not spoil
the rest of an interactive line. Only a numeric lexeme that cannot be
turned into a number raises ``LexError``. Number literals are narrowed to
single precision here, so ``0.1`` is already the ``float32`` nearest 0.1.
"""

from __future__ import annotations

import string
import sys
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .errors import LexError
from .tokens import KEYWORDS, ONE_OR_TWO_CHAR_TOKENS, SINGLE_CHAR_TOKENS, Token, TokenType
from .types import make_number


@dataclass(frozen=True)
class LexDiagnostic:
    line: int
    message: str

    def __str__(self) -> str:
        return f"[line {self.line}] Error: {self.message}"


def report_to_stderr(diagnostic: LexDiagnostic) -> None:
    print(str(diagnostic), file=sys.stderr)


# ASCII only, unlike str.isdigit and str.isalpha
def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_alpha(c: str) -> bool:
    return c in string.ascii_letters or c == '_'


def is_alnum(c: str) -> bool:
    return is_alpha(c) or is_digit(c)


class Lexer:
    def __init__(self, source: str, report: Optional[Callable[[LexDiagnostic], None]] = report_to_stderr):
        self.source = source
        self.tokens: List[Token] = []
        self.diagnostics: List[LexDiagnostic] = []
        self.report = report
        self.start = 0
        self.current = 0
        self.line = 1
        self.line_start = 0
        self.token_line = 1
        self.token_column = 1

    def lex(self) -> List[Token]:
        while not self.is_at_end():
            self.begin_token()
            self.scan_token()
        self.begin_token()
        self.tokens.append(Token(TokenType.EOF, '', None, self.token_line, self.token_column))
        return self.tokens

    def scan_token(self) -> None:
        c = self.advance()
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
        elif c in ONE_OR_TWO_CHAR_TOKENS:
            single, double = ONE_OR_TWO_CHAR_TOKENS[c]
            self.add_token(double if self.match('=') else single)
        elif c == '/':
            if self.match('/'):
                # comment runs to end of line; the newline itself is left for the main loop
                while self.peek() != '\n' and not self.is_at_end():
                    self.advance()
            else:
                self.add_token(TokenType.SLASH)
        elif c == '\n':
            self.line += 1
            self.line_start = self.current
        elif c.isspace():
            pass
        elif c == '"':
            self.string()
        elif is_digit(c):
            self.number()
        elif is_alpha(c):
            self.identifier()
        else:
            self.error(f"Unexpected character {c!r}.")

    def string(self) -> None:
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == '\n':
                self.line += 1
                self.line_start = self.current + 1
            self.advance()
        if self.is_at_end():
            self.error('Unterminated string.', self.token_line)
            return
        self.advance()  # closing quote
        # no escape processing: the literal is exactly the text between the quotes
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self) -> None:
        while is_digit(self.peek()):
            self.advance()
        if self.peek() == '.' and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()
        text = self.source[self.start:self.current]
        try:
            value = make_number(float(text))
        except ValueError:
            raise LexError(f"Invalid number literal {text!r}.", self.line)
        self.add_token(TokenType.NUMBER, value)

    def identifier(self) -> None:
        while is_alnum(self.peek()):
            self.advance()
        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def error(self, message: str, line: Optional[int] = None) -> None:
        diagnostic = LexDiagnostic(self.line if line is None else line, message)
        self.diagnostics.append(diagnostic)
        if self.report is not None:
            self.report(diagnostic)

    def add_token(self, token_type: TokenType, literal: Any = None) -> None:
        lexeme = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, lexeme, literal, self.token_line, self.token_column))

    def begin_token(self) -> None:
        self.start = self.current
        self.token_line = self.line
        self.token_column = self.start - self.line_start + 1

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def peek(self) -> str:
        if self.is_at_end():
            return '\0'
        return self.source[self.current]

    def peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)


def tokenize(source: str, report: Optional[Callable[[LexDiagnostic], None]] = report_to_stderr) -> List[Token]:
    """Convert source code into a list of tokens ending with EOF."""
    return Lexer(source, report).lex()
