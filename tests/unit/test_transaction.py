"""Unit tests for TransactionManager."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import pytest

from row_graph.core.connection import ConnectionConfig, ConnectionManager
from row_graph.core.engine import Engine
from row_graph.core.exceptions import NoRowsError, PoolError, TransactionStateError
from row_graph.core.registry import MetadataRegistry
from row_graph.mapping.fields import column, primary_key
from row_graph.mapping.mapper import RowMapper

INSERT_USER = "INSERT INTO users (name, email) VALUES (:name, :email)"
COUNT_USERS = "SELECT COUNT(*) AS cnt FROM users"


@dataclass
class User:
    user_id: int | None = primary_key("user_id")
    name: str | None = column("name")


def _count(engine: Engine) -> int:
    return int(engine.fetch_all(COUNT_USERS)[0]["cnt"])


@pytest.fixture
def tx_engine(registry: MetadataRegistry) -> Iterator[Engine]:
    """Create an engine with a users table for transaction testing."""
    config = ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1, pool_timeout=0.05)
    manager = ConnectionManager(config)
    eng = Engine(manager, RowMapper(registry))

    with manager.get_connection() as conn:
        conn.execute(
            "CREATE TABLE users (user_id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, email TEXT)"
        )
        conn.commit()

    yield eng
    eng.close()


class TestTransactionManager:
    def test_commit_persists_changes(self, tx_engine: Engine) -> None:
        with tx_engine.transaction() as tx:
            tx.execute(INSERT_USER, {"name": "Alice", "email": "alice@ex.com"})

        assert _count(tx_engine) == 1

    def test_auto_rollback_on_exception(self, tx_engine: Engine) -> None:
        with pytest.raises(RuntimeError, match="boom"), tx_engine.transaction() as tx:
            tx.execute(INSERT_USER, {"name": "Alice", "email": "alice@ex.com"})
            raise RuntimeError("boom")

        assert _count(tx_engine) == 0

    def test_mapping_error_rolls_back(self, tx_engine: Engine) -> None:
        with pytest.raises(NoRowsError), tx_engine.transaction() as tx:
            tx.execute(INSERT_USER, {"name": "Alice", "email": "alice@ex.com"})
            tx.query_one("SELECT user_id, name FROM users WHERE user_id = 99", User())

        assert _count(tx_engine) == 0

    def test_reads_own_writes(self, tx_engine: Engine) -> None:
        with tx_engine.transaction() as tx:
            tx.execute(INSERT_USER, {"name": "Alice", "email": "alice@ex.com"})
            tx.execute(INSERT_USER, {"name": "Bob", "email": "bob@ex.com"})
            users = tx.query_list("SELECT user_id, name FROM users ORDER BY name", [], User)

        assert [u.name for u in users] == ["Alice", "Bob"]

    def test_explicit_rollback(self, tx_engine: Engine) -> None:
        with tx_engine.transaction() as tx:
            tx.execute(INSERT_USER, {"name": "Alice", "email": "alice@ex.com"})
            tx.rollback()

        assert _count(tx_engine) == 0

    def test_explicit_commit(self, tx_engine: Engine) -> None:
        with tx_engine.transaction() as tx:
            tx.execute(INSERT_USER, {"name": "Alice", "email": "alice@ex.com"})
            tx.commit()
            assert tx.state == "committed"

        assert _count(tx_engine) == 1

    def test_double_commit_raises(self, tx_engine: Engine) -> None:
        with tx_engine.transaction() as tx:
            tx.commit()
            with pytest.raises(TransactionStateError, match="Cannot commit"):
                tx.commit()

    def test_execute_after_commit_raises(self, tx_engine: Engine) -> None:
        with tx_engine.transaction() as tx:
            tx.commit()
            with pytest.raises(TransactionStateError, match="state 'committed'"):
                tx.fetch_all(COUNT_USERS)

    def test_use_outside_context_raises(self, tx_engine: Engine) -> None:
        tx = tx_engine.transaction()
        assert tx.state == "idle"
        with pytest.raises(TransactionStateError, match="Cannot execute"):
            tx.execute(INSERT_USER, {"name": "Alice", "email": "alice@ex.com"})

    def test_cannot_reenter(self, tx_engine: Engine) -> None:
        tx = tx_engine.transaction()
        with tx:
            pass
        with pytest.raises(TransactionStateError, match="Cannot begin"):
            tx.__enter__()

    def test_holds_its_connection(self, tx_engine: Engine) -> None:
        with tx_engine.transaction():
            with pytest.raises(PoolError, match="No connection available"):
                tx_engine.fetch_all(COUNT_USERS)

        assert tx_engine.connection_manager.pool.idle == 1
