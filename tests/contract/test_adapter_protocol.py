"""Contract tests for adapter and mapper protocol compliance."""

from __future__ import annotations

from row_graph.adapters.postgresql import PostgresqlSyncAdapter, build_conninfo
from row_graph.adapters.protocol import SyncAdapter
from row_graph.adapters.sqlite import SqliteSyncAdapter
from row_graph.core.connection import ConnectionConfig
from row_graph.core.registry import MetadataRegistry
from row_graph.mapping.mapper import RowMapper
from row_graph.mapping.protocol import Mapper, RowSource
from row_graph.mapping.rows import IterableRowSource


class TestSqliteSyncAdapterProtocol:
    def test_implements_sync_protocol(self) -> None:
        adapter = SqliteSyncAdapter()
        assert isinstance(adapter, SyncAdapter)

    def test_paramstyle(self) -> None:
        adapter = SqliteSyncAdapter()
        assert adapter.paramstyle == "named"

    def test_lifecycle(self, sqlite_config: ConnectionConfig) -> None:
        adapter = SqliteSyncAdapter()
        pool = adapter.create_pool(sqlite_config)
        assert pool.size == 1

        conn = adapter.acquire_connection(pool)
        assert conn is not None
        assert pool.idle == 0

        cursor = adapter.execute(conn, "SELECT :value AS val", {"value": 1})
        row = cursor.fetchone()
        assert row["val"] == 1

        adapter.release_connection(conn, pool)
        assert pool.idle == 1

        adapter.close_pool(pool)
        assert pool.size == 0

    def test_execute_without_params(self, sqlite_config: ConnectionConfig) -> None:
        adapter = SqliteSyncAdapter()
        pool = adapter.create_pool(sqlite_config)
        conn = adapter.acquire_connection(pool)
        try:
            assert adapter.execute(conn, "SELECT 1").fetchone()[0] == 1
        finally:
            adapter.release_connection(conn, pool)
            adapter.close_pool(pool)


class TestPostgresqlSyncAdapterProtocol:
    def test_implements_sync_protocol(self) -> None:
        adapter = PostgresqlSyncAdapter()
        assert isinstance(adapter, SyncAdapter)

    def test_paramstyle(self) -> None:
        assert PostgresqlSyncAdapter().paramstyle == "pyformat"

    def test_build_conninfo(self) -> None:
        config = ConnectionConfig(
            driver="postgresql",
            host="db.local",
            port=5432,
            user="app",
            password="secret",
            database="orders",
            extra={"sslmode": "require"},
        )
        assert build_conninfo(config) == (
            "host=db.local port=5432 user=app password=secret dbname=orders sslmode=require"
        )

    def test_build_conninfo_skips_unset_fields(self) -> None:
        config = ConnectionConfig(driver="postgresql", database="orders")
        assert build_conninfo(config) == "dbname=orders"


class TestMapperProtocol:
    def test_row_mapper_implements_mapper(self) -> None:
        assert isinstance(RowMapper(MetadataRegistry()), Mapper)

    def test_sources_implement_row_source(self) -> None:
        assert isinstance(IterableRowSource([]), RowSource)
        assert not isinstance([], RowSource)
