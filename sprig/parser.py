"""Parser for the Sprig language.

Statements are parsed by recursive descent, dispatching on the first
token. Expressions are parsed by precedence climbing: a prefix form is
parsed first (literal, identifier, unary operator or parenthesised
group), then infix operators are folded in for as long as the next
operator binds tighter than the caller's minimum. The right-hand operand
of a binary operator is parsed at that operator's own level, which makes
binary operators left-associative. Assignment parses its right-hand side
below its own level and is therefore right-associative.

The first error aborts the parse; there is no recovery.
"""

from __future__ import annotations

from enum import IntEnum
from typing import List, Optional

from .ast import (
    Assign, Binary, Block, Call, Expr, Expression, Function, Grouping,
    Literal, Print, Stmt, Unary, Var, Variable,
)
from .errors import ParseError
from .tokens import Token, TokenType
from .types import NIL


class Precedence(IntEnum):
    NONE = 0
    ASSIGNMENT = 1  # =
    EQUALITY = 2  # == !=
    COMPARISON = 3  # < > <= >=
    TERM = 4  # + -
    FACTOR = 5  # * /
    UNARY = 6  # ! -
    CALL = 7  # ()


INFIX_PRECEDENCE = {
    TokenType.EQUAL: Precedence.ASSIGNMENT,
    TokenType.EQUAL_EQUAL: Precedence.EQUALITY,
    TokenType.BANG_EQUAL: Precedence.EQUALITY,
    TokenType.LESS: Precedence.COMPARISON,
    TokenType.LESS_EQUAL: Precedence.COMPARISON,
    TokenType.GREATER: Precedence.COMPARISON,
    TokenType.GREATER_EQUAL: Precedence.COMPARISON,
    TokenType.PLUS: Precedence.TERM,
    TokenType.MINUS: Precedence.TERM,
    TokenType.STAR: Precedence.FACTOR,
    TokenType.SLASH: Precedence.FACTOR,
    TokenType.LEFT_PAREN: Precedence.CALL,
}

BINARY_OPERATORS = frozenset({
    TokenType.EQUAL_EQUAL, TokenType.BANG_EQUAL,
    TokenType.LESS, TokenType.LESS_EQUAL, TokenType.GREATER, TokenType.GREATER_EQUAL,
    TokenType.PLUS, TokenType.MINUS, TokenType.STAR, TokenType.SLASH,
})


class Parser:
    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError('token stream must end with an EOF token')
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def check(self, token_type: TokenType) -> bool:
        return self.peek().type == token_type

    def match(self, *token_types: TokenType) -> bool:
        if self.peek().type in token_types:
            self.advance()
            return True
        return False

    def consume(self, token_type: TokenType, message: str) -> Token:
        if self.check(token_type):
            return self.advance()
        raise ParseError(message, self.peek())

    def parse_program(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.is_at_end():
            statements.append(self.parse_statement())
        return statements

    def parse_statement(self) -> Stmt:
        if self.match(TokenType.VAR):
            return self.parse_var_decl()
        if self.match(TokenType.PRINT):
            return self.parse_print_stmt()
        if self.match(TokenType.FUN):
            return self.parse_func_decl()
        if self.match(TokenType.LEFT_BRACE):
            return Block(tuple(self.parse_block()))
        expr = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    def parse_var_decl(self) -> Var:
        name = self.consume(TokenType.IDENTIFIER, 'Expect variable name.')
        initializer: Optional[Expr] = None
        if self.match(TokenType.EQUAL):
            initializer = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    def parse_print_stmt(self) -> Print:
        value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def parse_func_decl(self) -> Function:
        name = self.consume(TokenType.IDENTIFIER, 'Expect function name.')
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after function name.")
        params: List[Token] = []
        if not self.check(TokenType.RIGHT_PAREN):
            params.append(self.consume(TokenType.IDENTIFIER, 'Expect parameter name.'))
            while self.match(TokenType.COMMA):
                params.append(self.consume(TokenType.IDENTIFIER, 'Expect parameter name.'))
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        self.consume(TokenType.LEFT_BRACE, "Expect '{' before function body.")
        return Function(name, tuple(params), tuple(self.parse_block()))

    def parse_block(self) -> List[Stmt]:
        # the opening brace has already been consumed
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            statements.append(self.parse_statement())
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    # Expression parsing (precedence climbing)
    def parse_expression(self, min_precedence: Precedence = Precedence.NONE) -> Expr:
        left = self.parse_prefix()
        while min_precedence < self.infix_precedence():
            left = self.parse_infix(left, self.advance())
        return left

    def infix_precedence(self) -> Precedence:
        """Binding power of the next token when it follows a complete operand.

        This is only consulted after an operand has been parsed, so a '-'
        seen here is always subtraction. A '-' at the start of an operand
        never reaches this lookup; parse_prefix reads it as negation.
        """
        return INFIX_PRECEDENCE.get(self.peek().type, Precedence.NONE)

    def parse_prefix(self) -> Expr:
        token = self.peek()
        if token.type == TokenType.EOF:
            raise ParseError('Expect expression.', token)
        self.advance()
        if token.type in (TokenType.NUMBER, TokenType.STRING):
            return Literal(token.literal)
        if token.type == TokenType.TRUE:
            return Literal(True)
        if token.type == TokenType.FALSE:
            return Literal(False)
        if token.type == TokenType.NIL:
            return Literal(NIL)
        if token.type == TokenType.IDENTIFIER:
            return Variable(token)
        if token.type in (TokenType.MINUS, TokenType.BANG):
            return Unary(token, self.parse_expression(Precedence.UNARY))
        if token.type == TokenType.LEFT_PAREN:
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise ParseError('Expect expression.', token)

    def parse_infix(self, left: Expr, operator: Token) -> Expr:
        if operator.type == TokenType.EQUAL:
            if not isinstance(left, Variable):
                raise ParseError('Invalid assignment target.', operator)
            # parse below ASSIGNMENT so a chained '=' nests to the right
            return Assign(left.name, self.parse_expression(Precedence.NONE))
        if operator.type == TokenType.LEFT_PAREN:
            return self.finish_call(left)
        if operator.type in BINARY_OPERATORS:
            right = self.parse_expression(INFIX_PRECEDENCE[operator.type])
            return Binary(left, operator, right)
        raise ParseError('Expect operator.', operator)

    def finish_call(self, callee: Expr) -> Call:
        args: List[Expr] = []
        if not self.check(TokenType.RIGHT_PAREN):
            args.append(self.parse_expression())
            while self.match(TokenType.COMMA):
                args.append(self.parse_expression())
        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, tuple(args))


def parse(tokens: List[Token]) -> List[Stmt]:
    """Parse a token stream into the program's statements."""
    return Parser(tokens).parse_program()


def parse_expression(tokens: List[Token]) -> Expr:
    """Parse a token stream holding exactly one expression."""
    parser = Parser(tokens)
    expr = parser.parse_expression()
    if not parser.is_at_end():
        raise ParseError('Expect end of expression.', parser.peek())
    return expr
