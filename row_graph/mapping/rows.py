"""Row source implementations."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from row_graph.core.exceptions import InvalidArgumentError
from row_graph.mapping.protocol import RowSource


class CursorRowSource:
    """Row source over a DB-API cursor.

    Handles both tuple-like rows (zipped with ``cursor.description``) and
    dict-like rows from different adapters. Rows are fetched one at a time.
    """

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor
        self._closed = False

    @property
    def columns(self) -> list[str]:
        if self._cursor.description is None:
            return []
        return [desc[0] for desc in self._cursor.description]

    def __iter__(self) -> Iterator[dict[str, Any]]:
        if self._closed or self._cursor.description is None:
            return
        columns = self.columns
        while True:
            row = self._cursor.fetchone()
            if row is None:
                return
            # Already dict-like (e.g., psycopg dict_row)
            if isinstance(row, Mapping):
                yield dict(row)
            else:
                yield dict(zip(columns, row, strict=True))

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._cursor.close()


class IterableRowSource:
    """Row source over in-memory rows (lists of dicts, generators)."""

    def __init__(self, rows: Iterable[Mapping[str, Any]]) -> None:
        self._rows = rows
        self.closed = False

    def __iter__(self) -> Iterator[Mapping[str, Any]]:
        if self.closed:
            return iter(())
        return iter(self._rows)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        close = getattr(self._rows, "close", None)
        if callable(close):
            close()


def as_row_source(rows: Any) -> RowSource:
    """Wrap ``rows`` as a RowSource unless it already is one."""
    if rows is None:
        raise InvalidArgumentError("rows cannot be None")
    if isinstance(rows, RowSource):
        return rows
    if isinstance(rows, Iterable) and not isinstance(rows, (str, bytes, Mapping)):
        return IterableRowSource(rows)
    raise InvalidArgumentError(
        f"rows must be a row source or an iterable of rows, got {type(rows).__name__}"
    )
