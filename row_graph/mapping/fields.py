"""Field markers for declaring entity mappings on dataclasses.

    @dataclass
    class User:
        user_id: int | None = primary_key("user_id")
        name: str | None = column("user_name")
        address: Address | None = relationship()
        orders: list[Order] = relationship(default_factory=list)

Every marker is a ``dataclasses.field`` with a default (``None`` unless one
is given), so marked entities can be constructed without arguments.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from row_graph.core.enums import FieldRole

METADATA_KEY = "row_graph"


@dataclass(frozen=True)
class FieldMarker:
    """Mapping metadata attached to a dataclass field."""

    role: FieldRole
    column: str | None = None
    unsigned: bool = False


def _marked_field(
    marker: FieldMarker,
    default: Any,
    default_factory: Callable[[], Any] | None,
) -> Any:
    if default_factory is not None:
        if default is not dataclasses.MISSING:
            raise ValueError("cannot specify both default and default_factory")
        return dataclasses.field(default_factory=default_factory, metadata={METADATA_KEY: marker})
    if default is dataclasses.MISSING:
        default = None
    return dataclasses.field(default=default, metadata={METADATA_KEY: marker})


def primary_key(
    column: str,
    *,
    unsigned: bool = False,
    default: Any = dataclasses.MISSING,
    default_factory: Callable[[], Any] | None = None,
) -> Any:
    """Mark the identity field of an entity, read from ``column``."""
    marker = FieldMarker(FieldRole.PRIMARY_KEY, column, unsigned)
    return _marked_field(marker, default, default_factory)


def column(
    name: str,
    *,
    unsigned: bool = False,
    default: Any = dataclasses.MISSING,
    default_factory: Callable[[], Any] | None = None,
) -> Any:
    """Mark a plain field populated from result column ``name``."""
    marker = FieldMarker(FieldRole.COLUMN, name, unsigned)
    return _marked_field(marker, default, default_factory)


def relationship(
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Callable[[], Any] | None = None,
) -> Any:
    """Mark a field holding related entities.

    Cardinality follows the annotation: ``list[X]`` is one-to-many, any
    other shape (``X`` or ``X | None``) is one-to-one.
    """
    marker = FieldMarker(FieldRole.RELATIONSHIP)
    return _marked_field(marker, default, default_factory)


def get_marker(f: dataclasses.Field) -> FieldMarker | None:  # type: ignore[type-arg]
    """Return the marker attached to a dataclass field, if any."""
    return f.metadata.get(METADATA_KEY)
