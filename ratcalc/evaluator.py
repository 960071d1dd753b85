"""Tree-rewriting evaluator over exact rationals.

Evaluation is bottom-up: both operands of a binary node are reduced first,
then the operator is applied if it has a rule for the reduced operands.
When no rule applies the node is rebuilt from its reduced children, so
``x + 2 * 3`` with ``x`` unbound comes back as ``x + 6``. Only the failures
in ``ratcalc.errors`` abort an evaluation; everything else degrades to a
partially reduced tree.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Callable, Dict, Optional

from ratcalc.context import Context
from ratcalc.errors import DivisionByZeroError, EvalError
from ratcalc.expr import BinaryExpr, Boolean, Expr, Name, Number, Op, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PowerLimits:
    """Bounds past which exponentiation is left unreduced."""
    max_exponent: int = 2 ** 31 - 1
    max_bits: int = 1 << 20


DEFAULT_LIMITS = PowerLimits()

# --------------------------
# Builtins
# --------------------------

def _round_half_away(n: Fraction) -> Fraction:
    """Round to the nearest integer, halves away from zero."""
    r = math.floor(abs(n) + Fraction(1, 2))
    return Fraction(r if n >= 0 else -r)


# Builtins registry: map reserved names to unary functions on Fraction.
FUNCTIONS: Dict[str, Callable[[Fraction], Fraction]] = {}

def _register(name: str, func: Callable[[Fraction], Fraction]) -> None:
    FUNCTIONS[name] = func

_register('floor', lambda n: Fraction(math.floor(n)))
_register('ceil', lambda n: Fraction(math.ceil(n)))
_register('round', _round_half_away)
_register('trunc', lambda n: Fraction(math.trunc(n)))
_register('fract', lambda n: n - math.trunc(n))
_register('abs', abs)

FUNCTION_NAMES = sorted(FUNCTIONS)

# --------------------------
# Arithmetic
# --------------------------

def ratio_power(base: Fraction, exponent: Fraction, limits: PowerLimits = DEFAULT_LIMITS) -> Optional[Fraction]:
    """Raise ``base`` to an integer ``exponent`` exactly.

    Returns None when the exponent is not an integer or the result would be
    too large to compute; the caller then leaves the expression unreduced.
    """
    if exponent.denominator != 1:
        logger.warning(f"Non-integer exponents ({exponent}) are not supported")
        return None
    k = exponent.numerator
    if abs(k) > limits.max_exponent:
        logger.warning(f"Exponent {k} is outside the supported range")
        return None
    n, d = base.numerator, base.denominator
    if k < 0:
        if n == 0:
            raise DivisionByZeroError("Zero raised to a negative power")
        n, d, k = d, n, -k
    # 0, 1 and -1 stay small under any power
    if d == 1 and abs(n) <= 1:
        return Fraction(n ** k)
    # lower bound on the size of the larger of n ** k and d ** k
    if k * (max(abs(n).bit_length(), abs(d).bit_length()) - 1) > limits.max_bits:
        logger.warning(f"Result of {base} ^ {exponent} is too large to compute exactly")
        return None
    return Fraction(n ** k, d ** k)


def _truncated_mod(a: Fraction, b: Fraction) -> Fraction:
    # remainder takes the sign of the dividend
    return a - b * math.trunc(a / b)


def apply_numeric(op: Op, a: Fraction, b: Fraction, limits: PowerLimits = DEFAULT_LIMITS) -> Optional[Expr]:
    """Apply ``op`` to two rationals. Returns None if the operation does not reduce."""
    if op is Op.ADD:
        return Number(a + b)
    if op is Op.SUBTRACT:
        return Number(a - b)
    if op is Op.MULTIPLY or op is Op.ADJACENT:
        return Number(a * b)
    if op is Op.DIVIDE:
        if b == 0:
            raise DivisionByZeroError("Division by zero")
        return Number(a / b)
    if op is Op.MODULUS:
        if b == 0:
            raise DivisionByZeroError("Modulo by zero")
        return Number(_truncated_mod(a, b))
    if op is Op.EXPONENT:
        r = ratio_power(a, b, limits)
        return None if r is None else Number(r)
    if op is Op.EQUALS:
        return Boolean(a == b)
    raise EvalError(f"Unknown binary operator: {op}")


def apply_function(name: str, operand: Expr) -> Optional[Expr]:
    """Apply a builtin by name; None when ``name`` is not builtin or ``operand`` is not a Number."""
    func = FUNCTIONS.get(name)
    if func is None or not isinstance(operand, Number):
        return None
    return Number(func(operand.value))

# --------------------------
# Evaluator
# --------------------------

def evaluate(expr: Expr, context: Context, limits: PowerLimits = DEFAULT_LIMITS) -> Expr:
    """Reduce ``expr`` as far as possible against ``context``.

    Raises DivisionByZeroError and CircularReferenceError; every other
    irreducible case returns the partially reduced tree.
    """
    if isinstance(expr, BinaryExpr):
        left = evaluate(expr.left, context, limits)
        right = evaluate(expr.right, context, limits)
        if isinstance(left, Number) and isinstance(right, Number):
            reduced = apply_numeric(expr.op, left.value, right.value, limits)
            if reduced is not None:
                return reduced
        elif expr.op is Op.ADJACENT and isinstance(left, Name):
            applied = apply_function(left.name, right)
            if applied is not None:
                return applied
        return BinaryExpr(left, expr.op, right)
    if isinstance(expr, Name):
        bound = context.get(expr.name)
        if bound is None:
            return expr
        with context.enter(expr.name):
            return evaluate(bound, context, limits)
    if isinstance(expr, Tuple):
        return Tuple(tuple(evaluate(item, context, limits) for item in expr.items))
    if isinstance(expr, (Number, Boolean)):
        return expr
    raise EvalError(f"Unsupported expression node: {type(expr).__name__}")
