"""Exact rational arithmetic calculator: lexer, parser, evaluator and REPL."""

from ratcalc.context import Context
from ratcalc.errors import (
    CalcArithmeticError,
    CalcError,
    CircularReferenceError,
    DivisionByZeroError,
    EvalError,
    LexerError,
    ParseError,
)
from ratcalc.evaluator import FUNCTIONS, evaluate
from ratcalc.expr import BinaryExpr, Boolean, Expr, Name, Number, Op, Tuple
from ratcalc.parser import parse
from ratcalc.session import Session

__version__ = "0.1.0"
