"""Abstract Syntax Tree (AST) definitions for the Sprig language.

Expressions and statements are closed sets of node shapes. Each shape is
a frozen dataclass and ``Expr``/``Stmt`` are the unions over them; the
interpreter dispatches over these unions and treats any other object as
an internal error. Nodes are built once by the parser and never mutated.

Two renderers live here as well. ``to_sexpr`` prints a node in prefix
form, e.g. ``(+ 1 (* 2 3))``, and is what ``--ast`` shows. ``to_source``
prints an expression back as fully parenthesised Sprig source.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from .tokens import Token
from .types import NIL, format_number, is_number, to_string


@dataclass(frozen=True)
class Literal:
    value: Any  # numpy.float32, str, bool or NIL


@dataclass(frozen=True)
class Binary:
    left: 'Expr'
    operator: Token
    right: 'Expr'


@dataclass(frozen=True)
class Unary:
    operator: Token
    right: 'Expr'


@dataclass(frozen=True)
class Grouping:
    expression: 'Expr'


@dataclass(frozen=True)
class Variable:
    name: Token


@dataclass(frozen=True)
class Assign:
    name: Token
    value: 'Expr'


@dataclass(frozen=True)
class Call:
    callee: 'Expr'
    paren: Token  # closing paren, kept for error locations
    arguments: Tuple['Expr', ...]


Expr = Union[Literal, Binary, Unary, Grouping, Variable, Assign, Call]


@dataclass(frozen=True)
class Expression:
    expression: Expr


@dataclass(frozen=True)
class Print:
    expression: Expr


@dataclass(frozen=True)
class Var:
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True)
class Block:
    statements: Tuple['Stmt', ...]


@dataclass(frozen=True)
class Function:
    name: Token
    params: Tuple[Token, ...]
    body: Tuple['Stmt', ...]


Stmt = Union[Expression, Print, Var, Block, Function]


def to_sexpr(node: Union[Expr, Stmt]) -> str:
    if isinstance(node, Literal):
        return to_string(node.value)
    if isinstance(node, Binary):
        return f"({node.operator.lexeme} {to_sexpr(node.left)} {to_sexpr(node.right)})"
    if isinstance(node, Unary):
        return f"({node.operator.lexeme} {to_sexpr(node.right)})"
    if isinstance(node, Grouping):
        return to_sexpr(node.expression)
    if isinstance(node, Variable):
        return node.name.lexeme
    if isinstance(node, Assign):
        return f"(= {node.name.lexeme} {to_sexpr(node.value)})"
    if isinstance(node, Call):
        return _parens('call', to_sexpr(node.callee), *(to_sexpr(a) for a in node.arguments))
    if isinstance(node, Expression):
        return _parens('expr', to_sexpr(node.expression))
    if isinstance(node, Print):
        return _parens('print', to_sexpr(node.expression))
    if isinstance(node, Var):
        if node.initializer is None:
            return _parens('var', node.name.lexeme)
        return _parens('var', node.name.lexeme, to_sexpr(node.initializer))
    if isinstance(node, Block):
        return _parens('block', *(to_sexpr(s) for s in node.statements))
    if isinstance(node, Function):
        params = '(' + ' '.join(p.lexeme for p in node.params) + ')'
        return _parens('fun', node.name.lexeme, params, *(to_sexpr(s) for s in node.body))
    raise TypeError(f"to_sexpr: unexpected node type {type(node).__name__}")


def _parens(*parts: str) -> str:
    return '(' + ' '.join(parts) + ')'


def to_source(expr: Expr) -> str:
    """Render an expression as Sprig source that parses back to the same tree shape."""
    if isinstance(expr, Literal):
        value = expr.value
        if value is NIL:
            return 'nil'
        if isinstance(value, bool):
            return 'true' if value else 'false'
        if is_number(value):
            return format_number(value)
        return f'"{value}"'
    if isinstance(expr, Binary):
        return f"({to_source(expr.left)} {expr.operator.lexeme} {to_source(expr.right)})"
    if isinstance(expr, Unary):
        return f"({expr.operator.lexeme}{to_source(expr.right)})"
    if isinstance(expr, Grouping):
        # these shapes already render inside their own parentheses
        if isinstance(expr.expression, (Binary, Unary, Assign, Grouping)):
            return to_source(expr.expression)
        return f"({to_source(expr.expression)})"
    if isinstance(expr, Variable):
        return expr.name.lexeme
    if isinstance(expr, Assign):
        return f"({expr.name.lexeme} = {to_source(expr.value)})"
    if isinstance(expr, Call):
        args = ', '.join(to_source(a) for a in expr.arguments)
        return f"{to_source(expr.callee)}({args})"
    raise TypeError(f"to_source: unexpected node type {type(expr).__name__}")
