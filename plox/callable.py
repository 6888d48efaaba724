"""Callable values: user-defined functions and native functions.

Anything that can appear as the callee of a call expression implements
:class:`LoxCallable`. The interpreter evaluates the callee and the
arguments, checks :meth:`LoxCallable.arity` against the argument count and
then hands the already-evaluated arguments to :meth:`LoxCallable.call`.
Native functions report bad input by raising
:class:`plox.errors.LoxFunctionError`; the interpreter turns that into a
runtime error at the call site.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List

from .ast import Function
from .environment import Environment
from .errors import ReturnSignal

if TYPE_CHECKING:
    from .interpreter import Interpreter


class LoxCallable(ABC):
    type_name = 'function'

    @abstractmethod
    def arity(self) -> int:
        ...

    @abstractmethod
    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        ...


class LoxFunction(LoxCallable):
    """Represents a user-defined function and the environment it closes over."""
    def __init__(self, declaration: Function, closure: Environment):
        self.declaration = declaration
        self.closure = closure  # shared, never copied

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        call_env = Environment(enclosing=self.closure)
        for param, arg in zip(self.declaration.params, arguments):
            call_env.define(param.lexeme, arg)
        res = interpreter.execute_block(self.declaration.body, call_env)
        if isinstance(res, ReturnSignal):
            return res.value
        return None

    def __str__(self) -> str:
        return f"<fn {self.name}>"

    def __repr__(self) -> str:
        return f"<function {self.name}>"


@dataclass(eq=False)
class BuiltinFunction(LoxCallable):
    name: str
    params: int
    fn: Callable[[List[Any]], Any]

    def arity(self) -> int:
        return self.params

    def call(self, interpreter: 'Interpreter', arguments: List[Any]) -> Any:
        return self.fn(arguments)

    def __str__(self) -> str:
        return "<native fn>"

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
