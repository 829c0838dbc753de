"""Fixed-size connection pool shared by the adapters."""

from __future__ import annotations

import queue
from collections.abc import Callable
from typing import Any

from row_graph.core.exceptions import PoolError


class ConnectionPool:
    """Blocking fixed-size pool; safe to share between threads.

    Args:
        connect: Zero-argument callable opening one driver connection.
        size: Number of connections opened up front.
        timeout: Seconds ``acquire`` waits before raising PoolError.
    """

    def __init__(self, connect: Callable[[], Any], size: int, timeout: float) -> None:
        if size < 1:
            raise PoolError(f"pool size must be at least 1, got {size}")
        self._timeout = timeout
        self._idle: queue.LifoQueue[Any] = queue.LifoQueue()
        self._all: list[Any] = []
        for _ in range(size):
            connection = connect()
            self._all.append(connection)
            self._idle.put(connection)

    def acquire(self) -> Any:
        try:
            return self._idle.get(timeout=self._timeout)
        except queue.Empty:
            raise PoolError(
                f"No connection available within {self._timeout}s "
                f"(pool size {len(self._all)})"
            ) from None

    def release(self, connection: Any) -> None:
        self._idle.put(connection)

    def close(self) -> None:
        for connection in self._all:
            connection.close()
        self._all.clear()
        while not self._idle.empty():
            self._idle.get_nowait()

    @property
    def size(self) -> int:
        return len(self._all)

    @property
    def idle(self) -> int:
        return self._idle.qsize()
