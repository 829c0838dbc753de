"""Repository base class.

Thin wrapper over an Engine bound to one entity class.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from row_graph.core.exceptions import NoRowsError
from row_graph.core.executor import StatementExecutor
from row_graph.mapping.plan import EntityDescriptor

T = TypeVar("T")


class Repository(Generic[T]):
    """Base repository for one entity class.

    Subclasses define concrete data access methods in terms of
    ``get_one`` / ``find_one`` / ``find_all``. The executor may be an
    Engine or an active TransactionManager.
    """

    def __init__(self, executor: StatementExecutor, entity_type: type[T]) -> None:
        self.executor = executor
        self.entity_type = entity_type

    @property
    def descriptor(self) -> EntityDescriptor:
        return self.executor.mapper.registry.resolve(self.entity_type)

    def get_one(self, sql: str, params: dict[str, Any] | None = None) -> T:
        """Map the result onto a new entity.

        Raises:
            NoRowsError: If the query matched nothing.
        """
        instance: T = self.descriptor.new_instance()
        return self.executor.query_one(sql, instance, params)

    def find_one(self, sql: str, params: dict[str, Any] | None = None) -> T | None:
        """Like ``get_one`` but returns None when the query matched nothing."""
        try:
            return self.get_one(sql, params)
        except NoRowsError:
            return None

    def find_all(self, sql: str, params: dict[str, Any] | None = None) -> list[T]:
        """Map the result onto the distinct root entities, in first-seen order."""
        return self.executor.query_list(sql, [], self.entity_type, params)
