"""Row source and mapper protocols.

The mapping core consumes only a ``RowSource``: a sequential, closable
cursor yielding one column-name -> value mapping per step. Engines hand
row sources to a ``Mapper``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class RowSource(Protocol):
    """Sequential, closable cursor over tabular results."""

    def __iter__(self) -> Iterator[Mapping[str, Any]]:
        """Yield rows one at a time."""
        ...

    def close(self) -> None:
        """Release the underlying cursor. Safe to call more than once."""
        ...


@runtime_checkable
class Mapper(Protocol):
    """Scan orchestrator protocol."""

    def map_one(self, rows: Any, dest: T) -> T:
        """Fold every row into the single entity ``dest``."""
        ...

    def map_many(self, rows: Any, dest: list[Any], entity_type: type) -> list[Any]:
        """Fill ``dest`` with the distinct root entities of ``entity_type``."""
        ...
