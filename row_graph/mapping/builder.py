"""Explicit descriptor builder.

Describes an entity without introspecting field markers, for classes that
are not dataclasses or whose mapping should be declared at startup:

    descriptor = (
        entity(Account)
        .key("id", "account_id")
        .column("name", "account_name")
        .collection("members", Member)
        .register(registry)
    )
"""

from __future__ import annotations

import dataclasses
import inspect
import typing
from collections.abc import Callable
from types import MappingProxyType
from typing import Any

from row_graph.core.enums import Cardinality
from row_graph.core.exceptions import PlanCompilationError
from row_graph.core.registry import MetadataRegistry, default_registry
from row_graph.mapping.coercion import field_type_for
from row_graph.mapping.plan import (
    ANY_TYPE,
    ColumnBinding,
    EntityDescriptor,
    FieldType,
    RelationshipBinding,
)


def _get_field_names(cls: type) -> list[str]:
    """Extract field names from a class (dataclass, Pydantic, or plain)."""
    # Pydantic model
    if hasattr(cls, "model_fields"):
        return list(cls.model_fields.keys())

    if dataclasses.is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls)]

    # Plain class - use __init__ parameters
    try:
        sig = inspect.signature(cls.__init__)  # type: ignore[misc]
        return [name for name in sig.parameters if name not in ("self", "args", "kwargs")]
    except (ValueError, TypeError):
        return []


def _field_types(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError):
        return {}


def entity(target_class: type, factory: Callable[[], Any] | None = None) -> EntityDescriptorBuilder:
    """Entry point for the descriptor DSL.

    Args:
        target_class: The entity class.
        factory: Zero-argument callable producing a default-valued instance.
                 Defaults to calling ``target_class()``.
    """
    return EntityDescriptorBuilder(target_class, factory)


class EntityDescriptorBuilder:
    """Fluent builder for explicit entity descriptors."""

    def __init__(self, target_class: type, factory: Callable[[], Any] | None = None) -> None:
        self._target_class = target_class
        self._factory = factory
        self._key: tuple[str, str, bool] | None = None  # attribute, column, unsigned
        self._columns: list[tuple[str, str, bool]] = []
        self._auto_columns_enabled = False
        self._relationships: list[tuple[str, type, Cardinality]] = []

    def key(
        self, attribute: str, column: str | None = None, *, unsigned: bool = False
    ) -> EntityDescriptorBuilder:
        """Set the identity attribute and its column."""
        self._key = (attribute, column or attribute, unsigned)
        return self

    def column(
        self, attribute: str, column: str | None = None, *, unsigned: bool = False
    ) -> EntityDescriptorBuilder:
        """Map a single attribute to a column."""
        self._columns.append((attribute, column or attribute, unsigned))
        return self

    def auto_columns(self) -> EntityDescriptorBuilder:
        """Map every remaining field of the class to a column of the same name."""
        self._auto_columns_enabled = True
        return self

    def reference(self, attribute: str, target_class: type) -> EntityDescriptorBuilder:
        """Declare a one-to-one relationship."""
        self._relationships.append((attribute, target_class, Cardinality.ONE_TO_ONE))
        return self

    def collection(self, attribute: str, target_class: type) -> EntityDescriptorBuilder:
        """Declare a one-to-many relationship."""
        self._relationships.append((attribute, target_class, Cardinality.ONE_TO_MANY))
        return self

    def build(self) -> EntityDescriptor:
        """Compile and validate the declarations into an EntityDescriptor."""
        if self._key is None:
            raise PlanCompilationError(
                f"{self._target_class.__name__} must have a key set via .key()"
            )

        hints = _field_types(self._target_class)

        def field_type(attribute: str, unsigned: bool) -> FieldType:
            if attribute not in hints:
                return ANY_TYPE
            return field_type_for(hints[attribute], unsigned)

        relationship_names = {name for name, *_ in self._relationships}
        declared = [self._key, *self._columns]
        if self._auto_columns_enabled:
            taken = {attribute for attribute, *_ in declared} | relationship_names
            declared.extend(
                (name, name, False) for name in _get_field_names(self._target_class)
                if name not in taken
            )

        columns: dict[str, ColumnBinding] = {}
        for attribute, column_name, unsigned in declared:
            if attribute in relationship_names:
                raise PlanCompilationError(
                    f"'{attribute}' is declared both as a column and a relationship"
                )
            if column_name in columns:
                raise PlanCompilationError(
                    f"Duplicate column '{column_name}': each column maps to one attribute"
                )
            columns[column_name] = ColumnBinding(
                column_name, attribute, field_type(attribute, unsigned)
            )

        seen: set[str] = set()
        relationships = []
        for attribute, target_class, cardinality in self._relationships:
            if attribute in seen:
                raise PlanCompilationError(f"Duplicate relationship '{attribute}'")
            seen.add(attribute)
            relationships.append(RelationshipBinding(attribute, target_class, cardinality))

        key_attribute, key_column, _ = self._key
        return EntityDescriptor(
            target_class=self._target_class,
            key_column=key_column,
            key_attribute=key_attribute,
            columns=MappingProxyType(columns),
            relationships=tuple(relationships),
            factory=self._factory,
        )

    def register(self, registry: MetadataRegistry | None = None) -> EntityDescriptor:
        """Build the descriptor and register it (default registry if omitted)."""
        descriptor = self.build()
        (registry if registry is not None else default_registry).register(descriptor)
        return descriptor
