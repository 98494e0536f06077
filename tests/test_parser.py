import pytest

from sprig.ast import Assign, Binary, Grouping, Literal, to_sexpr, to_source
from sprig.errors import ParseError
from sprig.lexer import tokenize
from sprig.parser import parse, parse_expression


def sexpr(source):
    return to_sexpr(parse_expression(tokenize(source)))


def program(source):
    return [to_sexpr(stmt) for stmt in parse(tokenize(source))]


@pytest.mark.parametrize('source, expected', [
    ('1 + 2 * 3', '(+ 1 (* 2 3))'),
    ('(1 + 2) * 3', '(* (+ 1 2) 3)'),
    ('-1 + 2', '(+ (- 1) 2)'),
    ('(-1 + 2) * 3', '(* (+ (- 1) 2) 3)'),
    ('8 - 3 - 2', '(- (- 8 3) 2)'),
    ('8 / 4 / 2', '(/ (/ 8 4) 2)'),
    ('1 - -2', '(- 1 (- 2))'),
    ('!-1', '(! (- 1))'),
    ('1 < 2 == true', '(== (< 1 2) true)'),
    ('a + b >= c * d', '(>= (+ a b) (* c d))'),
    ('a = b = 1', '(= a (= b 1))'),
    ('x = 1 + 2', '(= x (+ 1 2))'),
    ('f(1, 2 + 3)', '(call f 1 (+ 2 3))'),
    ('f()()', '(call (call f))'),
    ('-f(1)', '(- (call f 1))'),
    ('"hi" + nil', '(+ hi nil)'),
])
def test_expression_precedence(source, expected):
    assert sexpr(source) == expected


def test_grouping_is_kept_in_the_tree():
    expr = parse_expression(tokenize('(1)'))
    assert isinstance(expr, Grouping)
    assert expr.expression == Literal(1.0)


def test_assignment_node():
    expr = parse_expression(tokenize('x = 1'))
    assert isinstance(expr, Assign)
    assert expr.name.lexeme == 'x'
    assert isinstance(parse_expression(tokenize('x = y == z')).value, Binary)


def test_statements():
    assert program('var x; var y = 2; print y; y;') == [
        '(var x)', '(var y 2)', '(print y)', '(expr y)',
    ]
    assert program('{ var a = 1; { print a; } }') == ['(block (var a 1) (block (print a)))']
    assert program('fun add(a, b) { print a + b; } add(1, 2);') == [
        '(fun add (a b) (print (+ a b)))',
        '(expr (call add 1 2))',
    ]
    assert program('fun noop() {}') == ['(fun noop ())']
    assert program('') == []


@pytest.mark.parametrize('source, message', [
    ('print 1', "Expect ';' after value."),
    ('var = 1;', 'Expect variable name.'),
    ('var x = 1', "Expect ';' after variable declaration."),
    ('(1 + 2;', "Expect ')' after expression."),
    ('1 + a = 2;', 'Invalid assignment target.'),
    ('(a) = 2;', 'Invalid assignment target.'),
    ('1 ! 2;', "Expect ';' after expression."),
    ('{ print 1;', "Expect '}' after block."),
    ('fun (a) {}', 'Expect function name.'),
    ('fun f(a, 1) {}', 'Expect parameter name.'),
    ('fun f(a) print a;', "Expect '{' before function body."),
    ('f(1, 2;', "Expect ')' after arguments."),
    ('if (x) { print x; }', 'Expect expression.'),
    ('print;', 'Expect expression.'),
])
def test_parse_errors(source, message):
    with pytest.raises(ParseError) as excinfo:
        parse(tokenize(source))
    assert excinfo.value.message == message


def test_parse_error_names_the_offending_token():
    with pytest.raises(ParseError) as excinfo:
        parse(tokenize('\nwhile (true) {}'))
    assert str(excinfo.value) == "[line 2] Error at 'while': Expect expression."

    with pytest.raises(ParseError) as excinfo:
        parse(tokenize('print 1'))
    assert str(excinfo.value) == "[line 1] Error at end: Expect ';' after value."


def test_parse_expression_requires_whole_input():
    with pytest.raises(ParseError):
        parse_expression(tokenize('1 2'))


@pytest.mark.parametrize('source', [
    '1 + 2 * 3',
    '(1 + 2) * 3',
    '-1 + 2',
    '!(a == b) != false',
    '((1))',
    '"x" + y - -z / 4.5',
    'a = b = c',
    'f(1, g(2))(3)',
    'nil == true',
    '0.00001 + 1.5',
])
def test_render_round_trip(source):
    first = parse_expression(tokenize(source))
    rendered = to_source(first)
    second = parse_expression(tokenize(rendered))
    assert to_sexpr(second) == to_sexpr(first)
    assert to_source(second) == rendered


def test_number_literals_render_as_plain_decimals():
    assert to_source(parse_expression(tokenize('0.00001'))) == '0.00001'
    assert to_source(parse_expression(tokenize('2.0 * 100000000000000000000'))) == '(2 * 100000000000000000000)'
