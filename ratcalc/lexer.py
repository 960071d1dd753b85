"""Tokenizer turning one input line into a flat token list."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, List

from ratcalc.errors import LexerError


class Symbol(enum.Enum):
    """Operator symbols recognised by the lexer, keyed by their surface character."""
    ADD = '+'
    SUBTRACT = '-'
    MULTIPLY = '*'
    DIVIDE = '/'
    MODULUS = '%'
    EXPONENT = '^'
    EQUALS = '='


@dataclass(frozen=True)
class Token:
    """Represents a token with type, value, and character position."""
    type: str
    value: Any
    pos: int

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, pos={self.pos})"


_OP_CHARS = {s.value: s for s in Symbol}
_GROUPING = {'(': 'LPAREN', ')': 'RPAREN', ',': 'COMMA'}


class Lexer:
    """Tokenizer for calculator expressions.

    Produces tokens: NUMBER, IDENT, OP, LPAREN, RPAREN, COMMA, EOF.
    Numbers are exact: ``12.5`` becomes ``Fraction(125, 10)``. '-' is always
    an operator; negative values are handled by the parser.
    """
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.len = len(text)

    def _peek(self, n: int = 0) -> str:
        i = self.pos + n
        return self.text[i] if i < self.len else ''

    def _advance(self, n: int = 1) -> None:
        self.pos += n

    def _skip_whitespace(self) -> None:
        while self._peek() and self._peek().isspace():
            self._advance()

    def _read_number(self) -> Token:
        start = self.pos
        digits: List[str] = []
        scale = None
        while True:
            ch = self._peek()
            if ch.isdecimal():
                digits.append(ch)
            elif ch == '_':
                pass
            elif ch == '.' and scale is None:
                scale = len(digits)
            else:
                break
            self._advance()
        # digits after the separator
        scale = 0 if scale is None else len(digits) - scale
        value = Fraction(int(''.join(digits)), 10 ** scale)
        return Token('NUMBER', value, start)

    def _read_ident(self) -> Token:
        start = self.pos
        while self._peek().isalpha():
            self._advance()
        return Token('IDENT', self.text[start:self.pos], start)

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        while True:
            self._skip_whitespace()
            ch = self._peek()
            if ch == '':
                break
            if ch.isdecimal():
                tokens.append(self._read_number())
            elif ch.isalpha():
                tokens.append(self._read_ident())
            elif ch in _GROUPING:
                tokens.append(Token(_GROUPING[ch], ch, self.pos))
                self._advance()
            elif ch in _OP_CHARS:
                tokens.append(Token('OP', _OP_CHARS[ch], self.pos))
                self._advance()
            else:
                raise LexerError(f"Unknown character at pos {self.pos}: {ch!r}", self.pos)
        tokens.append(Token('EOF', None, self.pos))
        return tokens


def tokenize(text: str) -> List[Token]:
    return Lexer(text).tokenize()
