"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest

from row_graph.core.connection import ConnectionConfig
from row_graph.core.registry import MetadataRegistry
from row_graph.mapping.mapper import RowMapper


class TrackingRowSource:
    """In-memory row source that records whether it was closed."""

    def __init__(self, rows: list[dict[str, Any]], fail_after: int | None = None) -> None:
        self._rows = rows
        self._fail_after = fail_after
        self.closed = False
        self.consumed = 0

    def __iter__(self) -> Iterator[dict[str, Any]]:
        for row in self._rows:
            if self._fail_after is not None and self.consumed >= self._fail_after:
                raise OSError("connection reset by peer")
            self.consumed += 1
            yield row

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config."""
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def registry() -> MetadataRegistry:
    """A registry private to one test."""
    return MetadataRegistry()


@pytest.fixture
def mapper(registry: MetadataRegistry) -> RowMapper:
    return RowMapper(registry)


@pytest.fixture
def row_source():
    """Factory for closable in-memory row sources.

    Usage:
        source = row_source([{"user_id": 1}], fail_after=None)
    """

    def _make(rows: list[dict[str, Any]], fail_after: int | None = None) -> TrackingRowSource:
        return TrackingRowSource(rows, fail_after)

    return _make
