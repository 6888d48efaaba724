"""Lexer for the plox language.

The lexer works one source line at a time, left to right, with a single
character of lookahead. Each line produces zero or more tokens and the
whole run is terminated by an EOF token.

Lexical errors are reported immediately as ``[line N] Error: <message>.``
and the rest of the offending line is discarded. Scanning then resumes at
the next line so that several errors can be surfaced in one pass; callers
must check :attr:`Lexer.had_error` before parsing.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .tokens import Token, TokenType, SINGLE_LEXEMES, OPERATOR_LEXEMES, RESERVED_WORDS

IGNORABLE = {' ', '\r', '\t', '\n'}


class LexerError(Exception):
    pass


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_alpha(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z')


class Lexer:
    def __init__(self, lines: Sequence[str]):
        self.lines = list(lines)
        self.tokens: List[Token] = []
        self.had_error = False
        self.line_num = 0

    def scan_tokens(self) -> List[Token]:
        for index, line in enumerate(self.lines):
            self.line_num = index + 1
            try:
                self._scan_line(line)
            except LexerError:
                continue
        eof_line = max(len(self.lines), 1)
        self.tokens.append(Token(TokenType.EOF, "", eof_line))
        return self.tokens

    def error(self, message: str):
        self.had_error = True
        print(f"[line {self.line_num}] Error: {message}.")
        raise LexerError(message)

    def _add_token(self, type_: TokenType, lexeme: str):
        self.tokens.append(Token(type_, lexeme, self.line_num))

    def _scan_line(self, line: str):
        i = 0
        length = len(line)
        while i < length:
            c = line[i]
            nxt = line[i + 1] if i + 1 < length else ''
            if c in SINGLE_LEXEMES:
                self._add_token(SINGLE_LEXEMES[c], c)
                i += 1
            elif c in OPERATOR_LEXEMES:
                single, double = OPERATOR_LEXEMES[c]
                if nxt == '=':
                    self._add_token(double, c + nxt)
                    i += 2
                else:
                    self._add_token(single, c)
                    i += 1
            elif c in IGNORABLE:
                i += 1
            elif c == '/':
                if nxt == '/':
                    # comment runs to the end of the line
                    return
                self._add_token(TokenType.SLASH, c)
                i += 1
            elif c == '"':
                close = line.find('"', i + 1)
                if close == -1:
                    self.error("Unterminated string")
                self._add_token(TokenType.STRING, line[i:close + 1])
                i = close + 1
            elif is_digit(c):
                end = self._number_end(line, i + 1)
                self._add_token(TokenType.NUMBER, line[i:end])
                i = end
            elif is_alpha(c):
                end = i + 1
                while end < length and (is_alpha(line[end]) or is_digit(line[end])):
                    end += 1
                word = line[i:end]
                self._add_token(RESERVED_WORDS.get(word, TokenType.IDENTIFIER), word)
                i = end
            else:
                self.error(f"Unknown character '{c}'")

    def _number_end(self, line: str, start: int) -> int:
        """Return the index just past the number literal starting before `start`."""
        decimal_found = False
        i = start
        length = len(line)
        while i < length:
            c = line[i]
            if is_digit(c):
                i += 1
                continue
            if c == '.':
                if decimal_found:
                    self.error("Number cannot have two decimals")
                if i + 1 < length and is_digit(line[i + 1]):
                    decimal_found = True
                    i += 1
                    continue
            break
        return i


def tokenize(lines: Sequence[str]) -> Tuple[List[Token], bool]:
    """Scan the given source lines, returning the tokens and the error flag."""
    lexer = Lexer(lines)
    tokens = lexer.scan_tokens()
    return tokens, lexer.had_error


def split_lines(source: str) -> List[str]:
    """Split source text into lines on ``\\n`` only.

    A trailing ``\\r`` is dropped from each line and a final newline does not
    start an extra empty line. Other Unicode line separators stay inside
    their line.
    """
    lines = source.split('\n')
    if lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]
