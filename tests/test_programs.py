import io
from pathlib import Path

import pytest

from plox.interpreter import Interpreter, run_source
from plox.std import Console

EXAMPLES = Path(__file__).resolve().parents[1] / 'examples'


def run_example(name, interpreter=None):
    source = (EXAMPLES / name).read_text(encoding='utf-8')
    return run_source(source, interpreter or Interpreter())


def test_program_hello(capsys):
    assert run_example('hello.lox')
    out = capsys.readouterr().out.strip()
    assert out == 'Hello World!!'


def test_program_fibonacci(capsys):
    run_example('fibonacci.lox')
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['0', '1', '1', '2', '3', '5', '8', '13', '21', '34']


def test_program_counter_closure(capsys):
    run_example('counter.lox')
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['<fn increment>', '1', '2', '3']


def test_program_scoping(capsys):
    run_example('scoping.lox')
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['inner a', 'global b', 'outer a', 'global a', 'changed b']


def test_program_numbers(capsys):
    run_example('numbers.lox')
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == [
        '2', '2.000000', '3.500000', '4', '1', '-1',
        '1.500000', '5.000000', 'true', 'concat', '2.500000!',
    ]


def test_program_constants(capsys):
    """The loop runs, then reassigning the constant aborts with status 70."""
    with pytest.raises(SystemExit) as exc:
        run_example('constants.lox')
    assert exc.value.code == 70
    out = capsys.readouterr().out
    assert out == "3\nCannot reassign constant variable 'limit'.\n[line 7] "


def test_program_guess(capsys):
    """Simulated input drives the guessing loop to completion."""
    console = Console(io.StringIO('3\n9\n7\n'))
    run_example('guess.lox', Interpreter(console=console))
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['higher', 'lower', 'found in 3 tries']
