"""Tree-walking interpreter for the plox language.

Statements are executed with :meth:`Interpreter.execute` and expressions
are evaluated with :meth:`Interpreter.evaluate`. Both receive the
environment to work in explicitly, so leaving a block or a call restores
the previous scope no matter how the nested code finished.

`execute` returns ``None`` on normal completion or a
:class:`~plox.errors.ReturnSignal` when a ``return`` statement ran. Blocks,
``if`` and ``while`` hand the signal straight back to their caller until
the enclosing :class:`~plox.callable.LoxFunction` consumes it.

Numbers follow one promotion rule for every arithmetic and comparison
operator: two integers stay integers (division only when it is exact),
anything involving a float is computed in floating point, where division
or remainder by zero gives an infinity or NaN. Only an integer remainder by
zero is an error. Runtime errors are raised as
:class:`~plox.errors.LoxRuntimeError`; :meth:`interpret` reports the first
one and terminates the process with status 70.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, List, Optional

from .ast import (
    Expr, Stmt, Assign, Binary, Call, Grouping, Literal, Logical, Unary, Variable,
    Block, Expression, If, Print, While, Var, Function, Return,
)
from .callable import LoxCallable, LoxFunction
from .environment import Environment
from .errors import LoxFunctionError, LoxRuntimeError, ReturnSignal
from .lexer import split_lines, tokenize
from .parser import parse_program
from .std import Console, populate_standard_environment
from .tokens import Token, TokenType
from .types import (
    float_divide, float_mod, is_equal, is_int, is_number, is_string, is_truthy, stringify, wrap_int64,
)

RUNTIME_ERROR_STATUS = 70


class Interpreter:
    """Core interpreter that executes plox statement trees."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', console: Optional[Console] = None):
        self.global_env = Environment()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None
        populate_standard_environment(self.global_env, console)

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, statements: List[Stmt], env: Optional[Environment] = None):
        """Run top-level statements; a runtime error ends the process."""
        if env is None:
            env = self.global_env
        try:
            for stmt in statements:
                if isinstance(self.execute(stmt, env), ReturnSignal):
                    break
        except LoxRuntimeError as err:
            self.debug(f"runtime error on line {err.line}: {err.message}")
            print(err.message)
            print(f"[line {err.line}] ", end='')
            sys.stdout.flush()
            raise SystemExit(RUNTIME_ERROR_STATUS)

    def execute_block(self, statements: List[Stmt], env: Environment) -> Optional[ReturnSignal]:
        for stmt in statements:
            result = self.execute(stmt, env)
            if isinstance(result, ReturnSignal):
                return result
        return None

    def execute(self, node: Stmt, env: Environment) -> Optional[ReturnSignal]:
        if isinstance(node, Expression):
            self.evaluate(node.expression, env)
            return None
        if isinstance(node, Print):
            value = self.evaluate(node.expression, env)
            print(stringify(value))
            return None
        if isinstance(node, Var):
            name = node.name.lexeme
            if env.exists(name):
                raise LoxRuntimeError(node.name, f"Variable '{name}' already exists.")
            value = self.evaluate(node.initializer, env) if node.initializer is not None else None
            env.define(name, value, node.is_const)
            if self.debug_level >= 2:
                kind = 'const' if node.is_const else 'var'
                self.debug(f"declare {kind} {name} = {stringify(value)}")
            return None
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(enclosing=env))
        if isinstance(node, If):
            cond = self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {stringify(cond)} -> {truthy}")
            if truthy:
                return self.execute(node.then_branch, env)
            if node.else_branch is not None:
                return self.execute(node.else_branch, env)
            return None
        if isinstance(node, While):
            while is_truthy(self.evaluate(node.condition, env)):
                res = self.execute(node.body, env)
                if isinstance(res, ReturnSignal):
                    return res
            return None
        if isinstance(node, Function):
            env.define(node.name.lexeme, LoxFunction(node, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name.lexeme}/{len(node.params)}")
            return None
        if isinstance(node, Return):
            value = self.evaluate(node.value, env) if node.value is not None else None
            return ReturnSignal(value)
        raise TypeError(f"execute: unexpected node type {type(node)}")

    def evaluate(self, node: Expr, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression, env)
        if isinstance(node, Variable):
            return env.get(node.name)
        if isinstance(node, Assign):
            if env.is_const(node.name.lexeme):
                raise LoxRuntimeError(node.name, f"Cannot reassign constant variable '{node.name.lexeme}'.")
            value = self.evaluate(node.value, env)
            env.assign(node.name, value)
            return value
        if isinstance(node, Logical):
            left = self.evaluate(node.left, env)
            if node.operator.type == TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(node.right, env)
        if isinstance(node, Unary):
            right = self.evaluate(node.right, env)
            if node.operator.type == TokenType.NOT:
                return not is_truthy(right)
            if not is_number(right):
                raise LoxRuntimeError(node.operator, 'Operand must be a number')
            if is_int(right):
                return wrap_int64(-right)
            return -right
        if isinstance(node, Binary):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, Call):
            return self.call_function(node, env)
        raise TypeError(f"evaluate: unexpected node type {type(node)}")

    def call_function(self, node: Call, env: Environment) -> Any:
        callee = self.evaluate(node.callee, env)
        args = [self.evaluate(arg, env) for arg in node.arguments]
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(node.paren, 'Can only call functions')
        if len(args) != callee.arity():
            raise LoxRuntimeError(node.paren, f"Expected {callee.arity()} arguments but got {len(args)}")
        if self.debug_level >= 3:
            self.debug(f"call {callee!r} with {len(args)} argument(s) on line {node.paren.line}")
        try:
            return callee.call(self, args)
        except LoxFunctionError as ex:
            raise LoxRuntimeError(node.paren, ex.message)

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        op = operator.type
        if op == TokenType.EQUAL_EQUAL:
            return is_equal(a, b)
        if op == TokenType.NOT_EQUAL:
            return not is_equal(a, b)
        if op == TokenType.PLUS:
            if is_string(a) and is_string(b):
                return a + b
            if not (is_number(a) and is_number(b)):
                raise LoxRuntimeError(operator, 'Operands must be two numbers or two strings')
        elif not (is_number(a) and is_number(b)):
            raise LoxRuntimeError(operator, 'Operands must be numbers')

        both_int = is_int(a) and is_int(b)
        if op == TokenType.MOD and both_int and b == 0:
            raise LoxRuntimeError(operator, 'Division by zero')
        if op == TokenType.SLASH and both_int and b != 0 and a % b == 0:
            return wrap_int64(a // b)
        if not both_int or op == TokenType.SLASH:
            a, b = float(a), float(b)

        if op == TokenType.PLUS:
            result = a + b
        elif op == TokenType.MINUS:
            result = a - b
        elif op == TokenType.STAR:
            result = a * b
        elif op == TokenType.SLASH:
            return float_divide(a, b)
        elif op == TokenType.MOD:
            # remainder takes the sign of the dividend, as in C
            if both_int:
                result = abs(a) % abs(b)
                if a < 0:
                    result = -result
            else:
                return float_mod(a, b)
        elif op == TokenType.GREATER_THAN:
            return a > b
        elif op == TokenType.GREATER_EQUAL:
            return a >= b
        elif op == TokenType.LESS_THAN:
            return a < b
        elif op == TokenType.LESS_EQUAL:
            return a <= b
        else:
            raise LoxRuntimeError(operator, f"Unknown operator '{operator.lexeme}'")
        return wrap_int64(result) if both_int else result


def run_source(source: str, interpreter: Optional[Interpreter] = None) -> bool:
    """Convenience function to scan, parse and run plox source text.

    Returns False when lexical or syntax errors stopped the pipeline
    before evaluation. Definitions land in the interpreter's global
    environment, so passing the same interpreter again continues the
    session.
    """
    if interpreter is None:
        interpreter = Interpreter()
    tokens, lex_error = tokenize(split_lines(source))
    interpreter.debug(f"scanned {len(tokens)} token(s)")
    if lex_error:
        return False
    statements, parse_error = parse_program(tokens)
    interpreter.debug(f"parsed {len(statements)} statement(s)")
    if parse_error:
        return False
    interpreter.interpret(statements)
    return True


def run_file(file_path: str, debug_level: int = 0, debug_file: str = 'debug.txt') -> bool:
    """Run a plox file; see :func:`run_source` for the return value."""
    source = Path(file_path).read_text(encoding='utf-8')
    interpreter = Interpreter(debug_level=debug_level, debug_file=debug_file)
    try:
        return run_source(source, interpreter)
    finally:
        interpreter.close()
