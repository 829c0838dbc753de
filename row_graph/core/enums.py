"""Enumerations shared by the client and mapping layers."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class Cardinality(Enum):
    """Relationship shape, inferred from the annotated field type."""

    ONE_TO_ONE = "one_to_one"
    ONE_TO_MANY = "one_to_many"


class FieldRole(Enum):
    """Role a marked dataclass field plays in row mapping."""

    PRIMARY_KEY = "primary_key"
    COLUMN = "column"
    RELATIONSHIP = "relationship"


class ValueKind(Enum):
    """Destination value kinds understood by the coercion engine."""

    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    STR = "str"
    BOOL = "bool"
    DATETIME = "datetime"
    COMPOSITE = "composite"
    LIST = "list"
    OPTIONAL = "optional"
    ANY = "any"
