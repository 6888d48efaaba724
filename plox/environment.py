from typing import Any, Dict, Optional, Set

from plox.errors import LoxRuntimeError
from plox.tokens import Token


class Environment:
    """Represents a scope mapping names to values, chained to its enclosing scope.

    Environments are shared by reference: closures keep the environment that
    was current when the function was declared, and every alias sees the
    same bindings.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Any] = {}
        self.consts: Set[str] = set()

    def define(self, name: str, value: Any, is_const: bool = False):
        self.values[name] = value
        if is_const:
            self.consts.add(name)

    def exists(self, name: str) -> bool:
        """True if `name` is bound in this scope (enclosing scopes are not searched)."""
        return name in self.values

    def resolve(self, name: str) -> Optional['Environment']:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env
            env = env.enclosing
        return None

    def is_const(self, name: str) -> bool:
        # constness belongs to the scope that owns the binding
        owner = self.resolve(name)
        return owner is not None and name in owner.consts

    def get(self, name: Token) -> Any:
        owner = self.resolve(name.lexeme)
        if owner is None:
            raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'")
        return owner.values[name.lexeme]

    def assign(self, name: Token, value: Any):
        owner = self.resolve(name.lexeme)
        if owner is None:
            raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'")
        owner.values[name.lexeme] = value
