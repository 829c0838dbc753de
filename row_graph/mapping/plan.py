"""Entity descriptor data classes.

Frozen dataclasses holding the compiled mapping metadata of one entity
class. Built once by the analyzer or the builder, then shared read-only by
every scan.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from row_graph.core.enums import Cardinality, ValueKind


@dataclass(frozen=True)
class FieldType:
    """Destination kind of a mapped attribute.

    ``python_type`` is set for COMPOSITE; ``element`` is the item type of a
    LIST or the wrapped type of an OPTIONAL.
    """

    kind: ValueKind
    python_type: type | None = None
    element: FieldType | None = None

    def describe(self) -> str:
        if self.kind is ValueKind.COMPOSITE and self.python_type is not None:
            return self.python_type.__name__
        if self.kind in (ValueKind.LIST, ValueKind.OPTIONAL) and self.element is not None:
            return f"{self.kind.value}[{self.element.describe()}]"
        return self.kind.value


ANY_TYPE = FieldType(ValueKind.ANY)


@dataclass(frozen=True)
class ColumnBinding:
    """A result column written to an entity attribute."""

    column: str
    attribute: str
    field_type: FieldType = ANY_TYPE


@dataclass(frozen=True)
class RelationshipBinding:
    """An attribute holding one related entity or a list of them."""

    attribute: str
    target_class: type
    cardinality: Cardinality


@dataclass(frozen=True)
class EntityDescriptor:
    """Compiled mapping metadata for one entity class."""

    target_class: type
    key_column: str
    key_attribute: str
    columns: Mapping[str, ColumnBinding]  # column_name -> binding
    relationships: tuple[RelationshipBinding, ...] = ()
    factory: Callable[[], Any] | None = field(default=None, compare=False)

    @property
    def attributes(self) -> list[str]:
        """Every attribute the mapper may write, columns first."""
        names = [binding.attribute for binding in self.columns.values()]
        names.extend(rel.attribute for rel in self.relationships)
        return names

    def new_instance(self) -> Any:
        """Construct a default-valued instance of the target class."""
        if self.factory is not None:
            return self.factory()
        return self.target_class()
