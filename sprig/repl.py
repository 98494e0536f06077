"""Interactive prompt for Sprig. Uses cmd as backend."""

import cmd
import sys

from termcolor import colored

from .errors import ParseError, LexError
from .interpreter import Interpreter, RunOutcome

ERROR = 'red'
WARNING = 'magenta'


def format_error(outcome: RunOutcome) -> str:
    """Single display line for a failed run, e.g. ``error: [line 1] Undefined variable 'x'.``"""
    label = 'syntax error: ' if isinstance(outcome.error, (LexError, ParseError)) else 'error: '
    return colored(label, ERROR, attrs=['bold']) + outcome.message


def format_diagnostic(diagnostic) -> str:
    return colored('warning: ', WARNING, attrs=['bold']) + str(diagnostic)


class Shell(cmd.Cmd):
    """Sprig interpreter shell. Every line runs against one interpreter, so declarations persist."""
    intro = "Sprig interpreter\nEnter statements to run them; an empty line or 'exit' quits."
    prompt = '> '

    def __init__(self, interpreter: Interpreter, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.interpreter = interpreter
        self.line_num = 0

    def onecmd(self, line):
        """Only a line that is exactly a command name is a command.

        cmd.Cmd would otherwise route ``help(42);`` or ``exit = 1;`` to the
        ``do_*`` handlers by their first word.
        """
        command = line.strip()
        if not command:
            return self.emptyline()
        if command in ('EOF', 'exit', 'help'):
            return getattr(self, 'do_' + command)('')
        return self.default(line)

    def default(self, line):
        """Runs one line of Sprig."""
        self.line_num += 1
        outcome = self.interpreter.run_source(line)
        for diagnostic in outcome.diagnostics:
            self.stdout.write(format_diagnostic(diagnostic) + '\n')
        if not outcome.ok:
            self.stdout.write(format_error(outcome) + '\n')
        sys.stdout.flush()

    def emptyline(self):
        """An empty line ends the session."""
        return True

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write('\n')
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True

    def do_help(self, arg):
        """Short intro rather than per-command docs."""
        self.stdout.write("Sprig is a small dynamically typed scripting language.\n\n"
                          "Try 'var greeting = \"hi\";' and then 'print greeting;'.\n"
                          "Functions are declared with 'fun name(a, b) { ... }' and\n"
                          "called with 'name(1, 2);'.\n")
