"""Recursive-descent parser for the plox language.

The parser consumes the token list produced by :mod:`plox.lexer` and
builds a list of statement trees. Expression precedence, from lowest to
highest, is::

    assignment -> or -> and -> equality -> comparison -> term -> factor
               -> unary -> call -> primary

All binary levels are left associative and are folded iteratively;
assignment is right associative and only accepts a bare variable on its
left-hand side.

`for` loops have no node of their own. They are rewritten here into a
`Block` holding the initializer followed by a `While` whose body appends
the increment after the original body.

Syntax errors are printed as soon as they are found. The declaration that
contains the error is abandoned and the parser discards tokens until the
next statement boundary (see :meth:`Parser.synchronize`), so a single run
reports at most one diagnostic per broken statement.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .ast import (
    Expr, Stmt, Assign, Binary, Call, Grouping, Literal, Logical, Unary, Variable,
    Block, Expression, If, Print, While, Var, Function, Return,
)
from .errors import LoxSyntaxError
from .tokens import Token, TokenType
from .types import INT64_MAX, INT64_MIN

MAX_ARGUMENTS = 255

SYNC_KEYWORDS = {
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
}


def number_value(lexeme: str):
    """Convert a NUMBER lexeme to an int when it fits in 64 bits, else a float."""
    if '.' not in lexeme:
        value = int(lexeme)
        if INT64_MIN <= value <= INT64_MAX:
            return value
    return float(lexeme)


class Parser:
    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        self.pos = 0
        self.had_error = False

    # Token helpers
    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def advance(self) -> Token:
        if not self.at_end():
            self.pos += 1
        return self.previous()

    def check(self, type_: TokenType) -> bool:
        return self.peek().type == type_

    def match(self, *types: TokenType) -> bool:
        for type_ in types:
            if self.check(type_):
                self.advance()
                return True
        return False

    def consume(self, type_: TokenType, message: str) -> Token:
        if not self.at_end() and self.check(type_):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token: Token, message: str) -> LoxSyntaxError:
        """Report a syntax error and return an exception the caller may raise."""
        self.had_error = True
        if token.type == TokenType.EOF:
            print(f"[line {token.line}] Error at end: {message}.")
        else:
            print(f"[line {token.line}] Error at '{token.lexeme}': {message}.")
        return LoxSyntaxError(token, message)

    def synchronize(self):
        """Discard tokens until a likely statement boundary."""
        self.advance()
        while not self.at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in SYNC_KEYWORDS:
                return
            self.advance()

    # Declarations
    def parse(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TokenType.VAR):
                return self.parse_var_decl(is_const=False)
            if self.match(TokenType.CONST):
                self.consume(TokenType.VAR, "Expect 'var' keyword after 'const'")
                return self.parse_var_decl(is_const=True)
            if self.match(TokenType.FUN):
                return self.parse_function()
            return self.parse_statement()
        except LoxSyntaxError:
            self.synchronize()
            return None

    def parse_var_decl(self, is_const: bool) -> Var:
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name")
        initializer: Optional[Expr] = None
        if is_const:
            self.consume(TokenType.EQUAL, "Expect '=' after constant name")
            initializer = self.parse_expression()
        elif self.match(TokenType.EQUAL):
            initializer = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration")
        return Var(name, initializer, is_const)

    def parse_function(self) -> Function:
        name = self.consume(TokenType.IDENTIFIER, "Expect function name")
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after function name")
        params: List[Token] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGUMENTS} parameters")
                params.append(self.consume(TokenType.IDENTIFIER, "Expect parameter name"))
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters")
        self.consume(TokenType.LEFT_BRACE, "Expect '{' before function body")
        body = self.parse_block()
        return Function(name, params, body)

    # Statements
    def parse_statement(self) -> Stmt:
        if self.match(TokenType.PRINT):
            value = self.parse_expression()
            self.consume(TokenType.SEMICOLON, "Expect ';' after value")
            return Print(value)
        if self.match(TokenType.LEFT_BRACE):
            return Block(self.parse_block())
        if self.match(TokenType.IF):
            return self.parse_if_stmt()
        if self.match(TokenType.WHILE):
            return self.parse_while_stmt()
        if self.match(TokenType.FOR):
            return self.parse_for_stmt()
        if self.match(TokenType.RETURN):
            return self.parse_return_stmt()
        return self.parse_expression_stmt()

    def parse_block(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.at_end() and not self.check(TokenType.RIGHT_BRACE):
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block")
        return statements

    def parse_if_stmt(self) -> If:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'")
        condition = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition")
        then_branch = self.parse_statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.parse_statement()
        return If(condition, then_branch, else_branch)

    def parse_while_stmt(self) -> While:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'")
        condition = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition")
        body = self.parse_statement()
        return While(condition, body)

    def parse_for_stmt(self) -> Stmt:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'")
        initializer: Optional[Stmt]
        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.CONST):
            self.consume(TokenType.VAR, "Expect 'var' keyword after 'const'")
            initializer = self.parse_var_decl(is_const=True)
        elif self.match(TokenType.VAR):
            initializer = self.parse_var_decl(is_const=False)
        else:
            initializer = self.parse_expression_stmt()

        condition: Optional[Expr] = None
        if not self.at_end() and not self.check(TokenType.SEMICOLON):
            condition = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition")

        increment: Optional[Expr] = None
        if not self.at_end() and not self.check(TokenType.RIGHT_PAREN):
            increment = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses")

        body = self.parse_statement()
        if increment is not None:
            body = Block([body, Expression(increment)])
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)
        if initializer is not None:
            body = Block([initializer, body])
        return body

    def parse_return_stmt(self) -> Return:
        keyword = self.previous()
        value: Optional[Expr] = None
        if not self.check(TokenType.SEMICOLON):
            value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after return value")
        return Return(keyword, value)

    def parse_expression_stmt(self) -> Expression:
        expr = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression")
        return Expression(expr)

    # Expressions
    def parse_expression(self) -> Expr:
        return self.parse_assign()

    def parse_assign(self) -> Expr:
        expr = self.parse_logic_or()
        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.parse_assign()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            raise self.error(equals, "Invalid assignment target")
        return expr

    def parse_logic_or(self) -> Expr:
        expr = self.parse_logic_and()
        while self.match(TokenType.OR):
            operator = self.previous()
            right = self.parse_logic_and()
            expr = Logical(expr, operator, right)
        return expr

    def parse_logic_and(self) -> Expr:
        expr = self.parse_equality()
        while self.match(TokenType.AND):
            operator = self.previous()
            right = self.parse_equality()
            expr = Logical(expr, operator, right)
        return expr

    def parse_equality(self) -> Expr:
        expr = self.parse_comparison()
        while self.match(TokenType.NOT_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self.previous()
            right = self.parse_comparison()
            expr = Binary(expr, operator, right)
        return expr

    def parse_comparison(self) -> Expr:
        expr = self.parse_term()
        while self.match(TokenType.GREATER_THAN, TokenType.GREATER_EQUAL,
                         TokenType.LESS_THAN, TokenType.LESS_EQUAL):
            operator = self.previous()
            right = self.parse_term()
            expr = Binary(expr, operator, right)
        return expr

    def parse_term(self) -> Expr:
        expr = self.parse_factor()
        while self.match(TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            right = self.parse_factor()
            expr = Binary(expr, operator, right)
        return expr

    def parse_factor(self) -> Expr:
        expr = self.parse_unary()
        while self.match(TokenType.SLASH, TokenType.STAR, TokenType.MOD):
            operator = self.previous()
            right = self.parse_unary()
            expr = Binary(expr, operator, right)
        return expr

    def parse_unary(self) -> Expr:
        if self.match(TokenType.NOT, TokenType.MINUS):
            operator = self.previous()
            right = self.parse_unary()
            return Unary(operator, right)
        return self.parse_call()

    def parse_call(self) -> Expr:
        expr = self.parse_primary()
        while self.match(TokenType.LEFT_PAREN):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGUMENTS} arguments")
                arguments.append(self.parse_expression())
                if not self.match(TokenType.COMMA):
                    break
        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments")
        return Call(callee, paren, arguments)

    def parse_primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)
        if self.match(TokenType.STRING):
            return Literal(self.previous().lexeme[1:-1])
        if self.match(TokenType.NUMBER):
            return Literal(number_value(self.previous().lexeme))
        if self.match(TokenType.LEFT_PAREN):
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression")
            return Grouping(expr)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        raise self.error(self.peek(), "Expect expression")


def parse_program(tokens: Sequence[Token]) -> Tuple[List[Stmt], bool]:
    """Parse a token list, returning the recovered statements and the error flag."""
    parser = Parser(tokens)
    statements = parser.parse()
    return statements, parser.had_error
