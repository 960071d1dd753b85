"""One calculator session: a Context plus the line-at-a-time driver."""

from __future__ import annotations

import logging
from typing import Optional

from ratcalc.config import Settings
from ratcalc.context import Context
from ratcalc.errors import EvalError
from ratcalc.evaluator import evaluate
from ratcalc.expr import BinaryExpr, Expr, Name, Op, Tuple
from ratcalc.parser import parse

logger = logging.getLogger(__name__)


def as_assignment(expr: Expr) -> Optional[BinaryExpr]:
    """Return ``expr`` if it has the shape ``name = value``, else None."""
    if isinstance(expr, BinaryExpr) and expr.op is Op.EQUALS and isinstance(expr.left, Name):
        return expr
    return None


class Session:
    """Parses and evaluates lines against a single Context.

    A top-level ``name = value`` binds ``name`` to the reduced value instead
    of comparing; anything else with ``=`` is an equality test. Items of a
    top-level tuple run left to right, so ``x = 2, x x`` sees the new ``x``.
    """

    def __init__(self, settings: Optional[Settings] = None, context: Optional[Context] = None):
        self.settings = settings or Settings()
        self.context = context if context is not None else Context()

    def run_line(self, text: str) -> Expr:
        logger.debug(f"Evaluating line {text!r}")
        try:
            return self.execute(parse(text))
        except RecursionError as e:
            raise EvalError("Expression nested too deeply") from e

    def execute(self, root: Expr) -> Expr:
        if isinstance(root, Tuple):
            return Tuple(tuple(self._execute_item(item) for item in root.items))
        return self._execute_item(root)

    def _execute_item(self, item: Expr) -> Expr:
        limits = self.settings.power_limits
        assignment = as_assignment(item)
        if assignment is None:
            return evaluate(item, self.context, limits)
        value = evaluate(assignment.right, self.context, limits)
        self.context.set(assignment.left.name, value)
        return value
