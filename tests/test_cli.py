import io

import pytest

from sprig.__main__ import main
from sprig.interpreter import Interpreter
from sprig.repl import Shell


def write_program(tmp_path, source):
    path = tmp_path / 'program.sprig'
    path.write_text(source, encoding='utf-8')
    return str(path)


def test_runs_file(tmp_path, capsys):
    main([write_program(tmp_path, 'var x = 2; print x * 21;')])
    assert capsys.readouterr().out == '42\n'


def test_runtime_error_exits_with_message(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([write_program(tmp_path, 'print "before"; print 1 / 0; print "after";')])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == 'before\n'
    assert 'Division by zero.' in captured.err


def test_syntax_error_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([write_program(tmp_path, 'print 1')])
    assert excinfo.value.code == 1
    assert "Expect ';' after value." in capsys.readouterr().err


def test_lex_diagnostics_do_not_stop_the_program(tmp_path, capsys):
    main([write_program(tmp_path, 'print 1 $;')])
    captured = capsys.readouterr()
    assert captured.out == '1\n'
    assert "Unexpected character '$'." in captured.err


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / 'nope.sprig')])
    assert excinfo.value.code == 1
    assert 'not found' in capsys.readouterr().err


def test_print_ast(tmp_path, capsys):
    main(['--ast', write_program(tmp_path, 'var x = 1 + 2 * 3; print -x;')])
    assert capsys.readouterr().out == '(var x (+ 1 (* 2 3)))\n(print (- x))\n'


def test_recursion_is_fatal(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([write_program(tmp_path, 'fun f() { f(); } f();')])
    assert excinfo.value.code == 1
    assert 'maximum recursion depth' in capsys.readouterr().err


def test_verbose_flag_writes_debug_file(tmp_path):
    log = tmp_path / 'trace.txt'
    main(['-vv', '--debug-file', str(log), write_program(tmp_path, 'var x = 1;')])
    assert 'declare x: Number = 1' in log.read_text(encoding='utf-8')


def run_shell(lines):
    out = io.StringIO()
    shell = Shell(Interpreter(), stdin=io.StringIO(lines), stdout=out)
    shell.use_rawinput = False
    shell.cmdloop()
    return out.getvalue()


def test_shell_keeps_state_and_survives_errors(capsys):
    shell_out = run_shell('var x = 1;\nprint y;\nx = x + 1;\nprint x;\n')
    assert "Undefined variable 'y'." in shell_out
    assert capsys.readouterr().out == '2\n'


def test_shell_stops_on_empty_line(capsys):
    run_shell('print 1;\n\nprint 2;\n')
    assert capsys.readouterr().out == '1\n'


def test_shell_reports_syntax_errors_and_lex_warnings():
    shell_out = run_shell('var = 3;\nprint 1 #;\n')
    assert 'syntax error: ' in shell_out
    assert 'Expect variable name.' in shell_out
    assert "Unexpected character '#'." in shell_out


def test_shell_runs_lines_that_start_with_command_names(capsys):
    shell_out = run_shell(
        'fun help(x) { print x; }\n'
        'help(42);\n'
        'fun exit(x) { print x + 1; }\n'
        'exit(1);\n'
        'var EOF = 3;\n'
        'print EOF;\n'
    )
    assert capsys.readouterr().out == '42\n2\n3\n'
    assert 'error' not in shell_out


def test_shell_exit_command_ends_the_session(capsys):
    run_shell('print 1;\nexit\nprint 2;\n')
    assert capsys.readouterr().out == '1\n'
