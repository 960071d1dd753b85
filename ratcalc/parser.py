"""Pratt (top-down precedence) parser producing an expression tree."""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple, Union

from ratcalc.errors import ParseError
from ratcalc.expr import BinaryExpr, Expr, Name, Number, Op
from ratcalc.expr import Tuple as TupleExpr
from ratcalc.lexer import Symbol, Token, tokenize

logger = logging.getLogger(__name__)

# Explicit operator precedence maps. Higher number = higher precedence.
# Infix operators: map to (binding_power, right_assoc)
INFIX_BP: Dict[Op, Tuple[int, bool]] = {
    Op.EXPONENT: (40, True),
    Op.MULTIPLY: (30, False),
    Op.DIVIDE: (30, False),
    Op.MODULUS: (30, False),
    Op.ADJACENT: (30, False),
    Op.ADD: (20, False),
    Op.SUBTRACT: (20, False),
    Op.EQUALS: (10, False),
}

# Prefix sign operand binds like a product: -2 ^ 2 == -(2 ^ 2), -2 x == (-2) x
PREFIX_BP = 30

# Tokens that may start an operand; one of these directly after an operand
# means juxtaposition.
_PRIMARY_START = {'NUMBER', 'IDENT', 'LPAREN'}


class Parser:
    """Pratt parser producing an Expr tree for one input line."""

    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].type != 'EOF':
            end = tokens[-1].pos + 1 if tokens else 0
            tokens = list(tokens) + [Token('EOF', None, end)]
        self.tokens = tokens
        self.pos = 0

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def _expect(self, typ: str) -> Token:
        tok = self._current()
        if tok.type != typ:
            raise ParseError(f"Expected {typ} at pos {tok.pos}; got {_describe(tok)}", tok, tok.pos)
        return self._advance()

    def parse(self) -> Expr:
        """Parse the full token list; comma-separated expressions form a Tuple."""
        if self._current().type == 'EOF':
            raise ParseError("Empty input", self._current(), self._current().pos)
        items = [self.parse_expression(0)]
        while self._current().type == 'COMMA':
            self._advance()
            items.append(self.parse_expression(0))
        if self._current().type != 'EOF':
            tok = self._current()
            raise ParseError(f"Unexpected token {_describe(tok)} at pos {tok.pos}", tok, tok.pos)
        node = items[0] if len(items) == 1 else TupleExpr(tuple(items))
        logger.debug(f"Parsed {node!r}")
        return node

    def parse_expression(self, rbp: int = 0) -> Expr:
        tok = self._advance()
        left = self.nud(tok)
        seen_equals = False
        while True:
            cur = self._current()
            if cur.type == 'OP':
                op = Op.from_symbol(cur.value)
            elif cur.type in _PRIMARY_START:
                # two operands side by side with no operator between them
                op = Op.ADJACENT
            else:
                break
            bp, right_assoc = INFIX_BP[op]
            if bp <= rbp:
                break
            if op is Op.EQUALS:
                if seen_equals:
                    raise ParseError(f"Chained '=' at pos {cur.pos}; '=' is non-associative", cur, cur.pos)
                seen_equals = True
            if op is not Op.ADJACENT:
                self._advance()
            # For right-assoc operators, parse right-hand side with rbp = bp - 1
            rhs_rbp = bp - 1 if right_assoc else bp
            right = self.parse_expression(rhs_rbp)
            left = BinaryExpr(left, op, right)
        return left

    def nud(self, tok: Token) -> Expr:
        """Null denotation (prefix/primary)."""
        if tok.type == 'NUMBER':
            return Number(tok.value)
        if tok.type == 'IDENT':
            return Name(tok.value)
        if tok.type == 'LPAREN':
            expr = self.parse_expression(0)
            self._expect('RPAREN')
            return expr
        if tok.type == 'OP' and tok.value in (Symbol.SUBTRACT, Symbol.ADD):
            operand = self.parse_expression(PREFIX_BP)
            if tok.value is Symbol.ADD:
                return operand
            if isinstance(operand, Number):
                return Number(-operand.value)
            return BinaryExpr(Number(-1), Op.MULTIPLY, operand)
        if tok.type == 'EOF':
            raise ParseError(f"Unexpected end of input at pos {tok.pos}", tok, tok.pos)
        raise ParseError(f"Unexpected token {_describe(tok)} at pos {tok.pos}", tok, tok.pos)


def _describe(tok: Token) -> str:
    if tok.type == 'OP':
        return f"operator {tok.value.value!r}"
    if tok.type == 'EOF':
        return "end of input"
    return f"{tok.type} {tok.value!r}"


def parse(source: Union[str, List[Token]]) -> Expr:
    """Parse a line of text, or an already-lexed token list."""
    tokens = tokenize(source) if isinstance(source, str) else list(source)
    return Parser(tokens).parse()
