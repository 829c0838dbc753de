"""Statement execution shared by Engine and TransactionManager.

Subclasses supply a connection scope; this class binds parameters, runs
the statement through the adapter and hands the cursor to the mapper as a
row source.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import Any, TypeVar

from row_graph.core.exceptions import ExecutionError
from row_graph.core.params import normalize_params
from row_graph.mapping.mapper import RowMapper
from row_graph.mapping.rows import CursorRowSource

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StatementExecutor:
    """Query surface over an adapter and a mapper."""

    def __init__(self, adapter: Any, mapper: RowMapper) -> None:
        self._adapter = adapter
        self._paramstyle: str = adapter.paramstyle
        self._mapper = mapper

    @property
    def mapper(self) -> RowMapper:
        return self._mapper

    def _connection(self) -> AbstractContextManager[Any]:
        raise NotImplementedError

    def _written(self, connection: Any) -> None:
        """Hook run after a write statement succeeded."""

    def _run(self, connection: Any, sql: str, params: dict[str, Any] | None) -> Any:
        statement = normalize_params(sql, self._paramstyle)
        logger.debug("Executing: %s", statement)
        try:
            return self._adapter.execute(connection, statement, params)
        except Exception as e:
            raise ExecutionError(sql, e) from e

    def query_one(self, sql: str, dest: T, params: dict[str, Any] | None = None) -> T:
        """Run ``sql`` and fold its rows into the entity ``dest``.

        Raises:
            NoRowsError: If the result produced no root entity.
            TooManyRowsError: If it produced more than one.
        """
        with self._connection() as conn:
            source = CursorRowSource(self._run(conn, sql, params))
            return self._mapper.map_one(source, dest)

    def query_list(
        self,
        sql: str,
        dest: list[Any],
        entity_type: type[T],
        params: dict[str, Any] | None = None,
    ) -> list[T]:
        """Run ``sql`` and fill ``dest`` with its distinct ``entity_type`` roots."""
        with self._connection() as conn:
            source = CursorRowSource(self._run(conn, sql, params))
            return self._mapper.map_many(source, dest, entity_type)

    def fetch_all(self, sql: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Run ``sql`` and return its rows as plain dicts."""
        with self._connection() as conn:
            source = CursorRowSource(self._run(conn, sql, params))
            try:
                return list(source)
            finally:
                source.close()

    def iter_rows(self, sql: str, params: dict[str, Any] | None = None) -> Iterator[dict[str, Any]]:
        """Run ``sql`` and yield its rows one at a time.

        The connection is held until the iterator is exhausted or closed.
        """
        with self._connection() as conn:
            source = CursorRowSource(self._run(conn, sql, params))
            try:
                yield from source
            finally:
                source.close()

    def execute(self, sql: str, params: dict[str, Any] | None = None) -> int:
        """Execute a write statement. Returns the affected row count."""
        with self._connection() as conn:
            cursor = self._run(conn, sql, params)
            self._written(conn)
            return int(cursor.rowcount)
