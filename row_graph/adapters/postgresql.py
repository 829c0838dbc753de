"""PostgreSQL adapter using psycopg (v3+)."""

from __future__ import annotations

from typing import Any

from row_graph.adapters.pool import ConnectionPool
from row_graph.core.connection import ConnectionConfig


def build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields.

    ``config.extra`` entries are appended as additional keywords
    (e.g. ``sslmode``, ``application_name``).
    """
    fields: dict[str, Any] = {
        "host": config.host,
        "port": config.port,
        "user": config.user,
        "password": config.password,
        "dbname": config.database,
    }
    fields.update(config.extra)
    return " ".join(f"{name}={value}" for name, value in fields.items() if value is not None)


class PostgresqlSyncAdapter:
    """Synchronous PostgreSQL adapter. Cursors yield dict rows."""

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    def create_pool(self, config: ConnectionConfig) -> ConnectionPool:
        import psycopg
        import psycopg.rows

        conninfo = build_conninfo(config)

        def connect() -> Any:
            return psycopg.connect(conninfo, row_factory=psycopg.rows.dict_row)

        return ConnectionPool(connect, config.pool_size, config.pool_timeout)

    def acquire_connection(self, pool: ConnectionPool) -> Any:
        return pool.acquire()

    def release_connection(self, connection: Any, pool: ConnectionPool) -> None:
        # Never hand out a connection stuck in an aborted transaction.
        if connection.info.transaction_status != 0:  # psycopg.pq.TransactionStatus.IDLE
            connection.rollback()
        pool.release(connection)

    def close_pool(self, pool: ConnectionPool) -> None:
        pool.close()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return connection.execute(sql, params or {})
