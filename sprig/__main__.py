"""CLI entry point for the Sprig interpreter.

Usage:
    python -m sprig [-v|-vv|-vvv] [--debug-file PATH] <program_file>
    python -m sprig [-v...] --ast <program_file>
    python -m sprig [-v...]

Options:
  -v            Increase debug verbosity (can be repeated)
  --debug-file  Where debug output goes (default: debug.txt)
  --ast         Parse the given .sprig file and print its AST instead of running it

Without a program file an interactive prompt is started. Debug
information is written to the debug file when verbosity is greater than
zero.
"""

import argparse
import sys
from pathlib import Path

from .ast import to_sexpr
from .errors import SprigError
from .interpreter import Interpreter, parse_program
from .repl import Shell, format_diagnostic, format_error


def main(argv: list = None) -> None:
    parser = argparse.ArgumentParser(description="Sprig language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', default='debug.txt', help='file that receives debug output')
    parser.add_argument('--ast', action='store_true', help='print the parsed program instead of running it')
    parser.add_argument('program', nargs='?', help='Sprig program file (.sprig) to execute')
    args = parser.parse_args(argv)

    if args.program is None:
        if args.ast:
            parser.error('--ast needs a program file')
        with Interpreter(debug_level=args.v, debug_file=args.debug_file) as interpreter:
            try:
                Shell(interpreter).cmdloop()
            except RecursionError:
                print("Fatal error: maximum recursion depth exceeded", file=sys.stderr)
                sys.exit(1)
        return

    program_file = Path(args.program)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        source = f.read()

    # Print AST mode
    if args.ast:
        try:
            program = parse_program(source)
        except SprigError as e:
            print(f"Syntax error: {e}", file=sys.stderr)
            sys.exit(1)
        for stmt in program:
            print(to_sexpr(stmt))
        return

    with Interpreter(debug_level=args.v, debug_file=args.debug_file) as interpreter:
        try:
            outcome = interpreter.run_source(source)
        except RecursionError:
            print("Fatal error: maximum recursion depth exceeded", file=sys.stderr)
            sys.exit(1)
    for diagnostic in outcome.diagnostics:
        print(format_diagnostic(diagnostic), file=sys.stderr)
    if not outcome.ok:
        print(format_error(outcome), file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
