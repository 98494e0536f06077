# Sprig language package
# This package provides a lexer, parser and tree-walking interpreter for the Sprig language.
from .errors import SprigError, LexError, ParseError, EvalError
from .interpreter import run, run_program, parse_program, Interpreter, RunOutcome

__all__ = [
    'run',
    'run_program',
    'parse_program',
    'Interpreter',
    'RunOutcome',
    'SprigError',
    'LexError',
    'ParseError',
    'EvalError',
]
