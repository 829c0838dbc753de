"""RowGraph exception hierarchy.

Mapping errors abort the current scan and reach the caller unchanged.
Raw driver exceptions are wrapped only at the client boundary (Engine,
TransactionManager); exceptions raised by a row source while it is being
iterated propagate as-is.
"""

from __future__ import annotations

from typing import Any


class RowGraphError(Exception):
    """Base exception for all RowGraph errors."""


# --- Mapping ---


class MappingError(RowGraphError):
    """Base for mapping errors."""


class InvalidArgumentError(MappingError):
    """Raised when a scan destination has the wrong shape."""


class SchemaError(MappingError):
    """Raised when an entity class cannot be described for mapping."""


class PlanCompilationError(SchemaError):
    """Raised when an explicit descriptor fails validation during build()."""


class NoRowsError(MappingError):
    """Raised by map_one when no row produced the root entity."""

    def __init__(self, entity_type: type) -> None:
        self.entity_type = entity_type
        super().__init__(f"no rows found for entity(name={entity_type.__name__})")


class TooManyRowsError(MappingError):
    """Raised when a single-valued slot receives a second distinct entity."""

    def __init__(self, entity_type: type, reason: str | None = None) -> None:
        self.entity_type = entity_type
        self.reason = reason
        message = f"Too many rows for entity(name={entity_type.__name__})"
        super().__init__(f"{message}: {reason}" if reason else message)


class MissingKeyColumnError(MappingError):
    """Raised when a row lacks the primary-key column of an entity."""

    def __init__(self, entity_type: type, column: str) -> None:
        self.entity_type = entity_type
        self.column = column
        super().__init__(
            f"no key field found in values: column '{column}' "
            f"for entity(name={entity_type.__name__})"
        )


class CoercionError(MappingError):
    """Raised when a source value cannot be written to a field."""

    def __init__(self, message: str, column: str | None = None) -> None:
        self.column = column
        super().__init__(message)


class TypeMismatchError(CoercionError):
    """Raised when the source value kind does not fit the destination kind."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"type mismatch: expected {expected}, got {actual}")


class FieldNotSettableError(CoercionError):
    """Raised when the destination object refuses an attribute assignment."""

    def __init__(self, entity_type: type, attribute: str) -> None:
        self.entity_type = entity_type
        self.attribute = attribute
        super().__init__(f"field '{attribute}' of {entity_type.__name__} is not settable")


# --- Execution ---


class ExecutionError(RowGraphError):
    """Raised when the driver fails to execute a statement."""

    def __init__(self, sql: str, detail: Any) -> None:
        self.sql = sql
        super().__init__(f"Statement execution failed: {detail}")


# --- Transaction ---


class TransactionError(RowGraphError):
    """Base for transaction errors."""


class TransactionStateError(TransactionError):
    """Raised on invalid transaction state transitions."""

    def __init__(self, current_state: str, attempted_action: str) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} transaction in state '{current_state}'")


# --- Adapter ---


class AdapterError(RowGraphError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""
