"""
Single-row query outcome.

A query expected to yield exactly one row has three possible outcomes, and
callers must be able to tell them apart without catching exceptions:

    NoRows          the query produced nothing
    Exactly[T]      exactly one row, mapped to T
    MoreThanOne     a second row exists (its content is not read)

Manifesto:
    - **Explicit cardinality:** "none" and "too many" are values, not errors
    - **Pattern matching:** frozen slotted dataclasses work with ``match``
    - **Opt-in failure:** ``unwrap()`` converts the two non-single outcomes
      into ``NoResultError`` / ``AmbiguousResultError`` when the caller wants
      exceptions instead

Architecture:
    ::

        ┌──────────────────────────────────────────────────┐
        │                  OneResult[T]                     │
        ├──────────────┬────────────────┬──────────────────┤
        │   NoRows     │  Exactly[T]    │  MoreThanOne     │
        ├──────────────┼────────────────┼──────────────────┤
        │ unwrap()     │ value: T       │ unwrap()         │
        │  -> raises   │ unwrap() -> T  │  -> raises       │
        │ NoResult     │ map()          │ Ambiguous        │
        └──────────────┴────────────────┴──────────────────┘

Examples:
    >>> from sqlbridge.core.result import Exactly, NoRows, MoreThanOne
    >>> result = Exactly(42)
    >>> match result:
    ...     case Exactly(value):
    ...         print(f"one row: {value}")
    ...     case NoRows():
    ...         print("no rows")
    ...     case MoreThanOne():
    ...         print("ambiguous")
    one row: 42
    >>> NoRows().unwrap_or(0)
    0

Guardrails:
    ❌ DON'T: Use ``None`` to signal "no row" when the mapper can return None
    ✅ DO: Match on NoRows / Exactly

Tags:
    result-pattern, cardinality, query, sqlbridge
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from sqlbridge.core.errors import AmbiguousResultError, NoResultError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class NoRows:
    """The query produced no rows."""

    def is_none(self) -> bool:
        return True

    def is_exactly(self) -> bool:
        return False

    def is_more_than_one(self) -> bool:
        return False

    def unwrap(self):
        raise NoResultError("Query returned no rows")

    def unwrap_or(self, default):
        return default

    def map(self, f: Callable) -> NoRows:
        return self


@dataclass(frozen=True, slots=True)
class Exactly(Generic[T]):
    """The query produced exactly one row, mapped to ``value``."""

    value: T

    def is_none(self) -> bool:
        return False

    def is_exactly(self) -> bool:
        return True

    def is_more_than_one(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Exactly[U]:
        """Transform the mapped row."""
        return Exactly(f(self.value))


@dataclass(frozen=True, slots=True)
class MoreThanOne:
    """The query produced at least two rows."""

    def is_none(self) -> bool:
        return False

    def is_exactly(self) -> bool:
        return False

    def is_more_than_one(self) -> bool:
        return True

    def unwrap(self):
        raise AmbiguousResultError("Query returned more than one row")

    def unwrap_or(self, default):
        return default

    def map(self, f: Callable) -> MoreThanOne:
        return self


OneResult = Union[NoRows, Exactly[T], MoreThanOne]


__all__ = [
    "OneResult",
    "NoRows",
    "Exactly",
    "MoreThanOne",
]
