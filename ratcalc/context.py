"""Variable bindings for one calculator session."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, FrozenSet, Iterator, List, Optional, Set, Tuple

from ratcalc.errors import CircularReferenceError
from ratcalc.expr import Expr

logger = logging.getLogger(__name__)


class Context:
    """Maps names to bound expressions and tracks names mid-resolution.

    Bound expressions are immutable, so ``get`` hands back the stored node
    itself. ``enter`` marks a name as being resolved for the duration of a
    ``with`` block; entering the same name again inside that block means the
    binding refers back to itself.
    """

    def __init__(self, bindings: Optional[Dict[str, Expr]] = None):
        self._bindings: Dict[str, Expr] = dict(bindings or {})
        self._resolving: Set[str] = set()

    def get(self, name: str) -> Optional[Expr]:
        return self._bindings.get(name)

    def set(self, name: str, expr: Expr) -> None:
        logger.debug(f"Binding {name} = {expr!r}")
        self._bindings[name] = expr

    def unset(self, name: str) -> bool:
        """Remove a binding. Returns False if the name was not bound."""
        return self._bindings.pop(name, None) is not None

    def clear(self) -> None:
        self._bindings.clear()

    def names(self) -> List[str]:
        return sorted(self._bindings)

    def items(self) -> List[Tuple[str, Expr]]:
        return sorted(self._bindings.items())

    @property
    def resolving(self) -> FrozenSet[str]:
        return frozenset(self._resolving)

    @contextmanager
    def enter(self, name: str) -> Iterator[None]:
        if name in self._resolving:
            raise CircularReferenceError(name)
        self._resolving.add(name)
        try:
            yield
        finally:
            self._resolving.discard(name)

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)
