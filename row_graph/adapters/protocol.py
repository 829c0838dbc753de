"""Database adapter protocol.

Adapters are the only code that talks to a driver. The engine relies on
this interface alone and hands each cursor to the mapper as a row source.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from row_graph.core.connection import ConnectionConfig


@runtime_checkable
class SyncAdapter(Protocol):
    """Synchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Parameter binding style: 'named' (:name) or 'pyformat' (%(name)s)."""
        ...

    def create_pool(self, config: ConnectionConfig) -> Any:
        """Open ``config.pool_size`` connections."""
        ...

    def acquire_connection(self, pool: Any) -> Any:
        """Take a connection out of the pool."""
        ...

    def release_connection(self, connection: Any, pool: Any) -> None:
        """Return a connection to the pool."""
        ...

    def close_pool(self, pool: Any) -> None:
        """Close every pooled connection."""
        ...

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute SQL and return a DB-API cursor."""
        ...
