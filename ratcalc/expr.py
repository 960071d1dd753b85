"""Expression tree nodes.

Nodes are frozen dataclasses: evaluation builds new trees from reduced
children and never edits a node in place, so subtrees can be shared freely.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from fractions import Fraction

from ratcalc.lexer import Symbol


class Op(enum.Enum):
    ADD = '+'
    SUBTRACT = '-'
    MULTIPLY = '*'
    DIVIDE = '/'
    MODULUS = '%'
    EXPONENT = '^'
    EQUALS = '='
    # implicit multiplication / function application, inserted by the parser
    ADJACENT = ' '

    @classmethod
    def from_symbol(cls, symbol: Symbol) -> 'Op':
        return cls(symbol.value)


@dataclass(frozen=True)
class Expr:
    """Base expression node."""
    pass


@dataclass(frozen=True)
class Number(Expr):
    value: Fraction

    def __post_init__(self):
        # Fraction keeps lowest terms and rejects a zero denominator
        if not isinstance(self.value, Fraction):
            object.__setattr__(self, 'value', Fraction(self.value))


@dataclass(frozen=True)
class Name(Expr):
    name: str


@dataclass(frozen=True)
class BinaryExpr(Expr):
    left: Expr
    op: Op
    right: Expr


@dataclass(frozen=True)
class Boolean(Expr):
    value: bool


@dataclass(frozen=True)
class Tuple(Expr):
    items: tuple

    def __post_init__(self):
        if not isinstance(self.items, tuple):
            object.__setattr__(self, 'items', tuple(self.items))
