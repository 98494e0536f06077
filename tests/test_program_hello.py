from pathlib import Path

from sprig.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_hello(capsys):
    with open(EXAMPLES / 'hello.sprig', 'r', encoding='utf-8') as f:
        source = f.read()
    program = parse_program(source)
    interp = Interpreter()
    interp.run(program)
    out = capsys.readouterr().out.strip()
    assert out == 'Hello World!!'
