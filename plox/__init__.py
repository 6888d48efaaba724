# plox language package
# This package provides a lexer, parser and tree-walking interpreter for plox.
from .interpreter import run_source, run_file, Interpreter
from .errors import LoxError, LoxRuntimeError

__all__ = [
    'run_source',
    'run_file',
    'Interpreter',
    'LoxError',
    'LoxRuntimeError',
]
