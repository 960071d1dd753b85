"""Exception taxonomy shared by the lexer, parser and evaluator."""

from __future__ import annotations

from typing import Any, Optional


class CalcError(Exception):
    """Base class for calculator errors."""
    pass


class LexerError(CalcError):
    """Raised for errors during tokenization."""

    def __init__(self, message: str, pos: Optional[int] = None):
        super().__init__(message)
        self.pos = pos


class ParseError(CalcError):
    """Raised for parsing errors; carries the offending token and its position."""

    def __init__(self, message: str, token: Any = None, pos: Optional[int] = None):
        super().__init__(message)
        self.token = token
        self.pos = pos


class EvalError(CalcError):
    """Raised for errors during evaluation."""
    pass


class CalcArithmeticError(EvalError):
    """Arithmetic that has no exact rational result."""
    pass


class DivisionByZeroError(CalcArithmeticError):
    """Division or modulus by an exactly-zero rational."""
    pass


class CircularReferenceError(EvalError):
    """A variable's resolution chain revisited a name already being resolved."""

    def __init__(self, name: str):
        super().__init__(f"Circular reference while resolving '{name}'")
        self.name = name
