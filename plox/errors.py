from typing import Any

from plox.tokens import Token


class LoxError(Exception):
    """Base class for errors raised while running plox source."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LoxSyntaxError(LoxError):
    """Raised inside the parser to unwind to the next synchronization point."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token


class LoxRuntimeError(LoxError):
    """Exception type used to propagate plox runtime errors."""
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token

    @property
    def line(self) -> int:
        return self.token.line


class LoxFunctionError(LoxError):
    """Raised by native functions; the interpreter stamps it with the call site."""


class ReturnSignal:
    """Outcome of executing a `return` statement."""
    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"
