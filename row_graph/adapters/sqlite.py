"""SQLite adapter using stdlib sqlite3."""

from __future__ import annotations

import sqlite3
from typing import Any

from row_graph.adapters.pool import ConnectionPool
from row_graph.core.connection import ConnectionConfig


class SqliteSyncAdapter:
    """Synchronous SQLite adapter.

    Connections use ``sqlite3.Row`` so cursors yield name-addressable rows,
    and may be handed between threads by the pool.
    """

    @property
    def paramstyle(self) -> str:
        return "named"

    def create_pool(self, config: ConnectionConfig) -> ConnectionPool:
        def connect() -> sqlite3.Connection:
            conn = sqlite3.connect(config.database, check_same_thread=False, **config.extra)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys=ON")
            return conn

        return ConnectionPool(connect, config.pool_size, config.pool_timeout)

    def acquire_connection(self, pool: ConnectionPool) -> sqlite3.Connection:
        return pool.acquire()  # type: ignore[no-any-return]

    def release_connection(self, connection: sqlite3.Connection, pool: ConnectionPool) -> None:
        pool.release(connection)

    def close_pool(self, pool: ConnectionPool) -> None:
        pool.close()

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> sqlite3.Cursor:
        return connection.execute(sql, params or {})
