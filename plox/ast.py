"""Abstract Syntax Tree (AST) definitions for the plox language.

Two closed families of nodes are defined here: expressions and
statements. Nodes are plain data; the interpreter dispatches on the node
class. Leaf nodes keep the token they were parsed from so that runtime
errors can report a line number.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from .tokens import Token


@dataclass
class Expr:
    """Base class for expression nodes."""
    pass


@dataclass
class Stmt:
    """Base class for statement nodes."""
    pass


@dataclass
class Assign(Expr):
    name: Token
    value: Expr


@dataclass
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Call(Expr):
    callee: Expr
    paren: Token  # closing parenthesis, used for error lines
    arguments: List[Expr]


@dataclass
class Grouping(Expr):
    expression: Expr


@dataclass
class Literal(Expr):
    value: Any  # None, int, float, bool or str


@dataclass
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass
class Variable(Expr):
    name: Token


@dataclass
class Block(Stmt):
    statements: List[Stmt]


@dataclass
class Expression(Stmt):
    expression: Expr


@dataclass
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass
class Print(Stmt):
    expression: Expr


@dataclass
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]
    is_const: bool = False


@dataclass
class Function(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]


@dataclass
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]
