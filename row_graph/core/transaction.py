"""Transaction management.

Runs several statements on one connection atomically. Commits on success,
rolls back on exception, and returns the connection to the pool on exit.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from typing import TYPE_CHECKING, Any

from row_graph.core.exceptions import TransactionStateError
from row_graph.core.executor import StatementExecutor

if TYPE_CHECKING:
    from row_graph.core.connection import ConnectionManager
    from row_graph.mapping.mapper import RowMapper


class _TxState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class TransactionManager(StatementExecutor):
    """Synchronous transaction context manager.

    The connection is acquired on ``__enter__``; query methods may only be
    used while the transaction is active.
    """

    def __init__(self, connection_manager: ConnectionManager, mapper: RowMapper) -> None:
        super().__init__(connection_manager.adapter, mapper)
        self._connection_manager = connection_manager
        self._conn: Any = None
        self._state = _TxState.IDLE

    @property
    def state(self) -> str:
        return self._state.value

    def __enter__(self) -> TransactionManager:
        if self._state is not _TxState.IDLE:
            raise TransactionStateError(self._state.value, "begin")
        self._conn = self._connection_manager.acquire()
        self._state = _TxState.ACTIVE
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if self._state is _TxState.ACTIVE:
                if exc_type is not None:
                    self._conn.rollback()
                    self._state = _TxState.ROLLED_BACK
                else:
                    self._conn.commit()
                    self._state = _TxState.COMMITTED
        finally:
            self._connection_manager.release(self._conn)
            self._conn = None

    @contextmanager
    def _connection(self) -> Iterator[Any]:
        self._check_active()
        yield self._conn

    def commit(self) -> None:
        """Explicitly commit the transaction."""
        if self._state is not _TxState.ACTIVE:
            raise TransactionStateError(self._state.value, "commit")
        self._conn.commit()
        self._state = _TxState.COMMITTED

    def rollback(self) -> None:
        """Explicitly rollback the transaction."""
        if self._state is not _TxState.ACTIVE:
            raise TransactionStateError(self._state.value, "rollback")
        self._conn.rollback()
        self._state = _TxState.ROLLED_BACK

    def _check_active(self) -> None:
        if self._state is not _TxState.ACTIVE:
            raise TransactionStateError(self._state.value, "execute")
