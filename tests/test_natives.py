"""
Tests for the native functions
"""
import io
import time

import pytest

from plox.interpreter import Interpreter, run_source
from plox.std import Console


def run_with_input(source: str, text: str = ''):
    interpreter = Interpreter(console=Console(io.StringIO(text)))
    assert run_source(source, interpreter)


def test_clock_returns_integer_seconds(capsys):
    before = int(time.time())
    run_with_input('print clock(); print isInstance("int", clock());')
    value, is_int = capsys.readouterr().out.splitlines()
    assert before <= int(value) <= before + 5
    assert is_int == 'true'


def test_to_string_matches_print(capsys):
    run_with_input('print toString(1) + toString(1.5) + toString(nil) + toString(true) + toString(clock);')
    assert capsys.readouterr().out == '11.500000niltrue<native fn>\n'


def test_input_strips_newline_and_quotes(capsys):
    run_with_input('print input(); print input(); print input() == "";', 'say "hi"\nsecond\n')
    assert capsys.readouterr().out.splitlines() == ['say hi', 'second', 'true']


def test_input_at_end_of_stream(capsys):
    run_with_input('print input() == "";', 'no newline')
    assert capsys.readouterr().out.splitlines() == ['true']


@pytest.mark.parametrize('args, expected', [
    ('"int", "42"', '42'),
    ('"int", "-7"', '-7'),
    ('"float", "2.5"', '2.500000'),
    ('"float", "3"', '3.000000'),
    ('"bool", "true"', 'true'),
    ('"bool", "F"', 'false'),
    ('"bool", "1"', 'true'),
    ('"string", "text"', 'text'),
])
def test_parse_string(capsys, args, expected):
    run_with_input(f'print parseString({args});')
    assert capsys.readouterr().out.splitlines() == [expected]


@pytest.mark.parametrize('args, message', [
    ('"int", "4.5"', "Cannot convert '4.5' to int."),
    ('"int", " 4"', "Cannot convert ' 4' to int."),
    ('"float", "abc"', "Cannot convert 'abc' to float."),
    ('"float", "1_0"', "Cannot convert '1_0' to float."),
    ('"bool", "yes"', "Cannot convert 'yes' to boolean."),
    ('"list", "x"', "Type 'list' is not supported."),
    ('"int", 4', "Arguments are not strings."),
])
def test_parse_string_errors(capsys, args, message):
    with pytest.raises(SystemExit) as exc:
        run_source(f'var a = 1;\nparseString({args});', Interpreter())
    assert exc.value.code == 70
    assert capsys.readouterr().out == f"{message}\n[line 2] "


@pytest.mark.parametrize('args, expected', [
    ('"int", 1', 'true'),
    ('"int", 1.0', 'false'),
    ('"float", 1.0', 'true'),
    ('"boolean", false', 'true'),
    ('"boolean", nil', 'false'),
    ('"string", "s"', 'true'),
    ('"function", clock', 'true'),
    ('"function", f', 'true'),
    ('"function", "f"', 'false'),
])
def test_is_instance(capsys, args, expected):
    run_with_input(f'fun f() {{}} print isInstance({args});')
    assert capsys.readouterr().out.splitlines() == [expected]


def test_is_instance_errors(capsys):
    with pytest.raises(SystemExit):
        run_source('isInstance("number", 1);', Interpreter())
    assert capsys.readouterr().out == "Type 'number' is not supported.\n[line 1] "
    with pytest.raises(SystemExit):
        run_source('isInstance(1, 1);', Interpreter())
    assert capsys.readouterr().out == "Type argument must be string.\n[line 1] "


def test_native_arity_is_checked(capsys):
    with pytest.raises(SystemExit):
        run_source('toString();', Interpreter())
    assert capsys.readouterr().out == "Expected 1 arguments but got 0\n[line 1] "


def test_natives_can_be_shadowed(capsys):
    run_with_input('fun clock() { return "mine"; } print clock();')
    assert capsys.readouterr().out.splitlines() == ['mine']
