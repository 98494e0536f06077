"""Tree-walking interpreter for the Sprig language.

Source text goes through ``tokenize`` and ``parse`` and the resulting
statements are executed in order against a global ``Environment``.
Blocks and function calls run in a fresh child scope that is dropped when
they finish. Functions close over the scope they were declared in by
reference, so they see later changes to captured variables and can call
themselves by name.

Failures propagate as ``SprigError`` subclasses. ``Interpreter.run_source``
is the boundary used by the command line and the interactive prompt: it
turns a failure into a ``RunOutcome`` instead of raising, and leaves the
effects of statements that already ran in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, TextIO

import numpy as np

from .ast import (
    Assign, Binary, Block, Call, Expr, Expression, Function, Grouping,
    Literal, Print, Stmt, Unary, Var, Variable,
)
from .environment import Environment
from .errors import (
    ArityError, DivisionByZeroError, NotCallableError, SprigError,
    TypeMismatchError, UndefinedVariableError,
)
from .lexer import LexDiagnostic, Lexer
from .parser import parse
from .tokens import Token, TokenType
from .types import NIL, is_falsy, is_number, to_string, type_name, values_equal

# identifiers that evaluate to constants whatever the environment holds
CONSTANT_NAMES = {
    'True': True,
    'False': False,
    'Nil': NIL,
}


class FunctionValue:
    """Represents a user-defined Sprig function together with its defining scope."""
    def __init__(self, declaration: Function, closure: Environment):
        self.declaration = declaration
        self.closure = closure  # shared with the declaring scope, never copied

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    @property
    def arity(self) -> int:
        return len(self.declaration.params)

    def __repr__(self) -> str:
        return f"<fn {self.name}>"


@dataclass
class RunOutcome:
    error: Optional[SprigError] = None
    diagnostics: List[LexDiagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return '' if self.error is None else str(self.error)


def parse_program(source: str) -> List[Stmt]:
    """Tokenize and parse ``source`` into its list of statements."""
    return parse(Lexer(source).lex())


class Interpreter:
    """Core interpreter that executes Sprig statements."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.global_env = Environment()
        self.debug_level = debug_level
        self.debug_fp: Optional[TextIO] = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str, level: int = 1):
        if self.debug_level >= level:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def __enter__(self) -> 'Interpreter':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # Public API
    def run(self, program: List[Stmt], env: Optional[Environment] = None) -> None:
        if env is None:
            env = self.global_env
        self.execute_block(program, env)

    def run_source(self, source: str) -> RunOutcome:
        """Lex, parse and execute ``source`` against the global scope.

        Lex diagnostics are collected on the outcome, not printed, and do
        not stop the run. The first lex, parse or evaluation error is
        returned in the outcome.
        """
        lexer = Lexer(source, report=None)
        outcome = RunOutcome(diagnostics=lexer.diagnostics)
        try:
            program = parse(lexer.lex())
            self.run(program)
        except SprigError as e:
            self.debug(f"{e.name}: {e}")
            outcome.error = e
        return outcome

    def execute_block(self, statements: List[Stmt], env: Environment) -> None:
        for stmt in statements:
            self.execute(stmt, env)

    def execute(self, stmt: Stmt, env: Environment) -> None:
        self.debug(f"execute {type(stmt).__name__}")
        if isinstance(stmt, Expression):
            self.evaluate(stmt.expression, env)
            return
        if isinstance(stmt, Print):
            value = self.evaluate(stmt.expression, env)
            print(to_string(value))
            return
        if isinstance(stmt, Var):
            value = self.evaluate(stmt.initializer, env) if stmt.initializer is not None else NIL
            env.define(stmt.name.lexeme, value)
            self.debug(f"declare {stmt.name.lexeme}: {type_name(value)} = {to_string(value)}", 2)
            return
        if isinstance(stmt, Function):
            func_value = FunctionValue(stmt, env)
            env.define(stmt.name.lexeme, func_value)
            self.debug(f"define function {stmt.name.lexeme}/{func_value.arity}", 2)
            return
        if isinstance(stmt, Block):
            block_env = Environment(parent=env)
            self.debug(f"enter block scope at depth {block_env.depth()}", 3)
            self.execute_block(list(stmt.statements), block_env)
            self.debug(f"leave block scope at depth {block_env.depth()}", 3)
            return
        raise NotImplementedError(f"execute: unexpected node type {type(stmt)}")

    def evaluate(self, expr: Expr, env: Environment) -> Any:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Grouping):
            return self.evaluate(expr.expression, env)
        if isinstance(expr, Variable):
            return self.lookup_variable(expr.name, env)
        if isinstance(expr, Assign):
            value = self.evaluate(expr.value, env)
            if not env.assign(expr.name.lexeme, value):
                raise UndefinedVariableError(f"Undefined variable '{expr.name.lexeme}'.", expr.name)
            return value
        if isinstance(expr, Unary):
            operand = self.evaluate(expr.right, env)
            if expr.operator.type == TokenType.BANG:
                return is_falsy(operand)
            if expr.operator.type == TokenType.MINUS:
                if is_number(operand):
                    return -operand
                raise TypeMismatchError(f"Cannot negate {type_name(operand)}.", expr.operator)
            raise NotImplementedError(f"unsupported unary operator {expr.operator.lexeme}")
        if isinstance(expr, Binary):
            # no short-circuit: both sides are evaluated, left first
            left = self.evaluate(expr.left, env)
            right = self.evaluate(expr.right, env)
            return self.apply_binary_op(expr.operator, left, right)
        if isinstance(expr, Call):
            callee = self.evaluate(expr.callee, env)
            args = [self.evaluate(arg, env) for arg in expr.arguments]
            return self.call_function(callee, args, expr.paren)
        raise NotImplementedError(f"evaluate: unexpected node type {type(expr)}")

    def lookup_variable(self, name: Token, env: Environment) -> Any:
        if name.lexeme in CONSTANT_NAMES:
            return CONSTANT_NAMES[name.lexeme]
        value = env.get(name.lexeme)
        if value is None:
            raise UndefinedVariableError(f"Undefined variable '{name.lexeme}'.", name)
        return value

    def call_function(self, func: Any, args: List[Any], paren: Token) -> Any:
        if not isinstance(func, FunctionValue):
            raise NotCallableError(f"Can only call functions, got {type_name(func)}.", paren)
        if len(args) != func.arity:
            raise ArityError(f"{func.name} expects {func.arity} arguments but got {len(args)}.", paren)
        self.debug(f"call {func.name}({', '.join(to_string(a) for a in args)})", 3)
        # parent is the defining scope, not the caller's
        call_env = Environment(parent=func.closure)
        for param, arg in zip(func.declaration.params, args):
            call_env.define(param.lexeme, arg)
        self.execute_block(list(func.declaration.body), call_env)
        return NIL

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        op = operator.type
        if op == TokenType.EQUAL_EQUAL:
            return values_equal(a, b)
        if op == TokenType.BANG_EQUAL:
            return not values_equal(a, b)
        numbers = is_number(a) and is_number(b)
        if op == TokenType.PLUS:
            if numbers:
                return self.arithmetic(np.add, a, b)
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            raise TypeMismatchError(f"Cannot add {type_name(a)} and {type_name(b)}.", operator)
        if op == TokenType.MINUS:
            if numbers:
                return self.arithmetic(np.subtract, a, b)
            raise TypeMismatchError(f"Cannot subtract {type_name(a)} and {type_name(b)}.", operator)
        if op == TokenType.STAR:
            if numbers:
                return self.arithmetic(np.multiply, a, b)
            raise TypeMismatchError(f"Cannot multiply {type_name(a)} and {type_name(b)}.", operator)
        if op == TokenType.SLASH:
            if not numbers:
                raise TypeMismatchError(f"Cannot divide {type_name(a)} and {type_name(b)}.", operator)
            if b == 0:
                raise DivisionByZeroError('Division by zero.', operator)
            return self.arithmetic(np.divide, a, b)
        if op in (TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL):
            if not numbers:
                raise TypeMismatchError(f"Cannot compare {type_name(a)} and {type_name(b)}.", operator)
            if op == TokenType.GREATER: return bool(a > b)
            if op == TokenType.GREATER_EQUAL: return bool(a >= b)
            if op == TokenType.LESS: return bool(a < b)
            return bool(a <= b)
        raise NotImplementedError(f"unknown operator {operator.lexeme}")

    @staticmethod
    def arithmetic(ufunc, a: np.float32, b: np.float32) -> np.float32:
        # float32 in, float32 out; overflow to inf is the single precision result
        with np.errstate(over='ignore', invalid='ignore'):
            return ufunc(a, b, dtype=np.float32)


def run_program(source: str, debug_level: int = 0) -> Interpreter:
    """Convenience function to parse and run a Sprig program from source string."""
    program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.run(program)
    finally:
        interpreter.close()
    return interpreter


def run(source: str) -> RunOutcome:
    """Run ``source`` in a fresh interpreter and report how it went."""
    with Interpreter() as interpreter:
        return interpreter.run_source(source)
