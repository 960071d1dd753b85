"""Rendering of expression trees for display."""

from __future__ import annotations

from ratcalc.expr import BinaryExpr, Boolean, Expr, Name, Number, Op, Tuple
from ratcalc.parser import INFIX_BP

_ATOM = 100
_TUPLE = 0
_PRODUCT = INFIX_BP[Op.MULTIPLY][0]


def _precedence(expr: Expr) -> int:
    if isinstance(expr, BinaryExpr):
        return INFIX_BP[expr.op][0]
    if isinstance(expr, Number):
        # "-3" and "1/3" re-parse as a prefix sign or a quotient
        v = expr.value
        return _ATOM if v >= 0 and v.denominator == 1 else _PRODUCT
    if isinstance(expr, Tuple):
        return _TUPLE
    return _ATOM


def _wrap(expr: Expr, parenthesize: bool) -> str:
    text = format_expr(expr)
    return f"({text})" if parenthesize else text


def format_expr(expr: Expr) -> str:
    """Infix text for ``expr`` that parses back to an equal-valued tree.

    Booleans are the exception: they print as ``true`` and ``false``, which
    read back as names.
    """
    if isinstance(expr, Number):
        return str(expr.value)
    if isinstance(expr, Name):
        return expr.name
    if isinstance(expr, Boolean):
        return 'true' if expr.value else 'false'
    if isinstance(expr, Tuple):
        return ', '.join(_wrap(item, isinstance(item, Tuple)) for item in expr.items)
    if isinstance(expr, BinaryExpr):
        bp, right_assoc = INFIX_BP[expr.op]
        lp, rp = _precedence(expr.left), _precedence(expr.right)
        if expr.op is Op.EQUALS:
            left, right = _wrap(expr.left, lp <= bp), _wrap(expr.right, rp <= bp)
        elif right_assoc:
            left, right = _wrap(expr.left, lp <= bp), _wrap(expr.right, rp < bp)
        else:
            left, right = _wrap(expr.left, lp < bp), _wrap(expr.right, rp <= bp)
        if expr.op is Op.ADJACENT:
            return f"{left} {right}"
        return f"{left} {expr.op.value} {right}"
    return repr(expr)


def format_structural(expr: Expr) -> str:
    """Constructor-style rendering, e.g. ``Name('x') Adjacent Number(3)``."""
    if isinstance(expr, Number):
        return f"Number({expr.value})"
    if isinstance(expr, Name):
        return f"Name({expr.name!r})"
    if isinstance(expr, Boolean):
        return f"Boolean({str(expr.value).lower()})"
    if isinstance(expr, Tuple):
        return "Tuple(" + ", ".join(format_structural(item) for item in expr.items) + ")"
    if isinstance(expr, BinaryExpr):
        op = expr.op.name.capitalize()
        return f"({format_structural(expr.left)} {op} {format_structural(expr.right)})"
    return repr(expr)
