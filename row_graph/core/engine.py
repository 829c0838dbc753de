"""Query execution engine.

The Engine runs parameterized SQL on pooled connections and maps the
resulting rows onto entities through a RowMapper.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any

from row_graph.core.connection import ConnectionConfig, ConnectionManager
from row_graph.core.executor import StatementExecutor
from row_graph.core.registry import MetadataRegistry
from row_graph.core.transaction import TransactionManager
from row_graph.mapping.mapper import RowMapper


class Engine(StatementExecutor):
    """Synchronous query execution engine.

    Each call borrows a connection from the pool for its duration; writes
    made through ``execute`` are committed immediately.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        mapper: RowMapper | None = None,
    ) -> None:
        super().__init__(connection_manager.adapter, mapper or RowMapper())
        self._connection_manager = connection_manager

    @classmethod
    def from_config(
        cls,
        config: ConnectionConfig,
        registry: MetadataRegistry | None = None,
    ) -> Engine:
        """Create an Engine from a ConnectionConfig.

        Args:
            config: ConnectionConfig instance
            registry: Descriptor registry for the engine's mapper. Defaults
                      to the process-wide registry.
        """
        return cls(ConnectionManager(config), RowMapper(registry))

    @property
    def connection_manager(self) -> ConnectionManager:
        return self._connection_manager

    def _connection(self) -> AbstractContextManager[Any]:
        return self._connection_manager.get_connection()

    def _written(self, connection: Any) -> None:
        connection.commit()

    def transaction(self) -> TransactionManager:
        """Create a new transaction context manager on a dedicated connection."""
        return TransactionManager(self._connection_manager, self._mapper)

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._connection_manager.close_pool()
