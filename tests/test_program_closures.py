from pathlib import Path

from sprig.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_closures(capsys):
    """Closures observe later mutations, mutate shared state, and outlive the call that made them."""
    with open(EXAMPLES / 'closures.sprig', 'r', encoding='utf-8') as f:
        source = f.read()
    program = parse_program(source)
    interp = Interpreter()
    interp.run(program)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['hello, ada', 'goodbye, ada', '3', '[app] started']
