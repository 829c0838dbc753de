"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
ConnectionManager owns the adapter for the configured driver and the
lifecycle of its connection pool.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel, Field, field_validator

from row_graph.core.enums import DatabaseBackend
from row_graph.core.exceptions import AdapterError

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for database connections."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    pool_size: int = Field(default=5, ge=1)
    pool_timeout: float = Field(default=30, gt=0)
    extra: dict[str, Any] = {}

    @field_validator("driver")
    @classmethod
    def _known_driver(cls, value: str) -> str:
        try:
            return DatabaseBackend(value.lower()).value
        except ValueError:
            raise ValueError(f"Unsupported database driver: {value}") from None


# Driver -> (module_path, adapter class)
_ADAPTER_MAP: dict[DatabaseBackend, tuple[str, str]] = {
    DatabaseBackend.SQLITE: ("row_graph.adapters.sqlite", "SqliteSyncAdapter"),
    DatabaseBackend.POSTGRESQL: ("row_graph.adapters.postgresql", "PostgresqlSyncAdapter"),
}


def _load_adapter(driver: str) -> Any:
    """Instantiate the adapter registered for ``driver``."""
    try:
        backend = DatabaseBackend(driver.lower())
    except ValueError:
        raise AdapterError(f"Unsupported database driver: {driver}") from None

    module_path, cls_name = _ADAPTER_MAP[backend]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e


class ConnectionManager:
    """Connection manager using the SyncAdapter protocol.

    The pool is created on first use and shared by every caller.
    """

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._adapter = _load_adapter(config.driver)
        self._pool: Any = None

    @property
    def adapter(self) -> Any:
        return self._adapter

    @property
    def pool(self) -> Any:
        return self._pool

    def initialize_pool(self) -> Any:
        """Initialize the connection pool."""
        if self._pool is None:
            self._pool = self._adapter.create_pool(self.config)
            logger.debug(
                "Opened %s pool of %d connections", self.config.driver, self.config.pool_size
            )
        return self._pool

    def acquire(self) -> Any:
        """Take a connection out of the pool; pair with ``release``."""
        return self._adapter.acquire_connection(self.initialize_pool())

    def release(self, connection: Any) -> None:
        self._adapter.release_connection(connection, self._pool)

    @contextmanager
    def get_connection(self) -> Iterator[Any]:
        """Get a connection from the pool as a context manager."""
        connection = self.acquire()
        try:
            yield connection
        finally:
            self.release(connection)

    def close_pool(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            self._adapter.close_pool(self._pool)
            self._pool = None
