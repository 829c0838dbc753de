"""RowGraph - map flat relational results onto typed entity graphs."""

from __future__ import annotations

import logging

from row_graph.core.connection import ConnectionConfig, ConnectionManager
from row_graph.core.engine import Engine
from row_graph.core.enums import Cardinality, DatabaseBackend, ValueKind
from row_graph.core.exceptions import (
    AdapterError,
    CoercionError,
    ConnectionError,  # noqa: A004
    ExecutionError,
    FieldNotSettableError,
    InvalidArgumentError,
    MappingError,
    MissingKeyColumnError,
    NoRowsError,
    PlanCompilationError,
    PoolError,
    RowGraphError,
    SchemaError,
    TooManyRowsError,
    TransactionError,
    TransactionStateError,
    TypeMismatchError,
)
from row_graph.core.registry import MetadataRegistry, default_registry
from row_graph.core.transaction import TransactionManager
from row_graph.mapping import (
    RowMapper,
    column,
    entity,
    map_many,
    map_one,
    primary_key,
    relationship,
)
from row_graph.repository import Repository

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Mapping
    "map_one",
    "map_many",
    "RowMapper",
    "primary_key",
    "column",
    "relationship",
    "entity",
    # Registry
    "MetadataRegistry",
    "default_registry",
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    # Engine
    "Engine",
    "TransactionManager",
    "Repository",
    # Enums
    "DatabaseBackend",
    "Cardinality",
    "ValueKind",
    # Exceptions
    "RowGraphError",
    "MappingError",
    "InvalidArgumentError",
    "SchemaError",
    "PlanCompilationError",
    "NoRowsError",
    "TooManyRowsError",
    "MissingKeyColumnError",
    "CoercionError",
    "TypeMismatchError",
    "FieldNotSettableError",
    "ExecutionError",
    "TransactionError",
    "TransactionStateError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
]
