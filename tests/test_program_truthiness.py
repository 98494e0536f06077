from pathlib import Path

from sprig.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_truthiness(capsys):
    with open(EXAMPLES / 'truthiness.sprig', 'r', encoding='utf-8') as f:
        source = f.read()
    program = parse_program(source)
    interp = Interpreter()
    interp.run(program)
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == [
        'true', 'true', 'true', 'true',
        'false', 'false', 'false', 'false',
        'nil', 'true', 'true',
    ]
