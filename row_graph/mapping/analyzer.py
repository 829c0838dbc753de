"""Metadata analyzer.

Introspects marked dataclasses and compiles their ``EntityDescriptor``,
recursing into relationship targets. A placeholder is recorded for a class
before its relationships are followed, so self- and mutually-referential
graphs terminate.
"""

from __future__ import annotations

import dataclasses
import logging
import typing
from collections.abc import Callable
from types import MappingProxyType
from typing import Any

from row_graph.core.enums import Cardinality, FieldRole
from row_graph.core.exceptions import SchemaError
from row_graph.mapping.coercion import field_type_for, list_element, unwrap_optional
from row_graph.mapping.fields import get_marker
from row_graph.mapping.plan import ColumnBinding, EntityDescriptor, RelationshipBinding

logger = logging.getLogger(__name__)

_PENDING = None


def analyze(
    entity_type: type,
    is_known: Callable[[type], bool],
) -> dict[type, EntityDescriptor]:
    """Compile descriptors for ``entity_type`` and every new class it reaches.

    Args:
        entity_type: The entity class to analyze.
        is_known: Returns True for classes that already have a descriptor;
            those are neither re-analyzed nor included in the result.

    Returns:
        Mapping of class to completed descriptor.

    Raises:
        SchemaError: If any reachable class cannot be described.
    """
    pending: dict[type, EntityDescriptor | None] = {}
    _analyze(entity_type, is_known, pending)
    return {cls: descriptor for cls, descriptor in pending.items() if descriptor is not None}


def _analyze(
    entity_type: type,
    is_known: Callable[[type], bool],
    pending: dict[type, EntityDescriptor | None],
) -> None:
    if is_known(entity_type) or entity_type in pending:
        return

    if not isinstance(entity_type, type) or not dataclasses.is_dataclass(entity_type):
        raise SchemaError(
            f"cannot analyze {entity_type!r}: not a dataclass and no descriptor registered"
        )

    pending[entity_type] = _PENDING
    hints = _type_hints(entity_type)

    key_column: str | None = None
    key_attribute: str | None = None
    columns: dict[str, ColumnBinding] = {}
    relationships: list[RelationshipBinding] = []

    for f in dataclasses.fields(entity_type):
        marker = get_marker(f)
        if marker is None:
            if f.init and _has_no_default(f):
                raise SchemaError(
                    f"field '{f.name}' of {entity_type.__name__} has no default; "
                    "entities must be constructible without arguments"
                )
            continue

        if marker.role is FieldRole.PRIMARY_KEY:
            if key_column is not None:
                raise SchemaError(
                    f"multiple primary key fields found in {entity_type.__name__}: "
                    f"'{key_attribute}' and '{f.name}'"
                )
            key_column, key_attribute = marker.column, f.name
            _bind_column(entity_type, columns, marker.column, f.name, hints, marker.unsigned)
        elif marker.role is FieldRole.RELATIONSHIP:
            target, cardinality = _relationship_target(entity_type, f.name, hints)
            relationships.append(RelationshipBinding(f.name, target, cardinality))
            _analyze(target, is_known, pending)
        else:
            _bind_column(entity_type, columns, marker.column, f.name, hints, marker.unsigned)

    if key_column is None or key_attribute is None:
        raise SchemaError(f"no primary key field declared on {entity_type.__name__}")

    pending[entity_type] = EntityDescriptor(
        target_class=entity_type,
        key_column=key_column,
        key_attribute=key_attribute,
        columns=MappingProxyType(columns),
        relationships=tuple(relationships),
    )
    logger.debug(
        "Analyzed %s: key=%s, %d columns, %d relationships",
        entity_type.__name__,
        key_column,
        len(columns),
        len(relationships),
    )


def _has_no_default(f: dataclasses.Field) -> bool:  # type: ignore[type-arg]
    return f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING


def _type_hints(entity_type: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(entity_type)
    except (NameError, TypeError) as e:
        raise SchemaError(
            f"cannot resolve annotations of {entity_type.__name__}: {e}"
        ) from e


def _relationship_target(
    entity_type: type,
    attribute: str,
    hints: dict[str, Any],
) -> tuple[type, Cardinality]:
    """Return the related class and the cardinality implied by the field shape."""
    hint, _ = unwrap_optional(hints.get(attribute, Any))
    cardinality = Cardinality.ONE_TO_ONE

    element = list_element(hint)
    if element is not None:
        hint, _ = unwrap_optional(element)
        cardinality = Cardinality.ONE_TO_MANY

    if hint is Any or not isinstance(hint, type):
        raise SchemaError(
            f"unresolved relationship type for '{attribute}' of {entity_type.__name__}: {hint!r}"
        )
    return hint, cardinality


def _bind_column(
    entity_type: type,
    columns: dict[str, ColumnBinding],
    column_name: str | None,
    attribute: str,
    hints: dict[str, Any],
    unsigned: bool,
) -> None:
    if not column_name:
        raise SchemaError(f"field '{attribute}' of {entity_type.__name__} has no column name")
    if column_name in columns:
        raise SchemaError(f"column '{column_name}' is mapped twice in {entity_type.__name__}")
    columns[column_name] = ColumnBinding(
        column_name,
        attribute,
        field_type_for(hints.get(attribute, Any), unsigned),
    )
