"""Row materializer.

Folds one row into the entity graph of a scan. Every row feeds every class
reachable through relationships; the identity map absorbs the duplication
that join fan-out introduces.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from row_graph.core.enums import Cardinality
from row_graph.core.exceptions import (
    CoercionError,
    FieldNotSettableError,
    MappingError,
    MissingKeyColumnError,
    TooManyRowsError,
)
from row_graph.core.registry import MetadataRegistry
from row_graph.mapping.coercion import convert
from row_graph.mapping.plan import EntityDescriptor, RelationshipBinding

_MISSING = object()


class IdentityMap:
    """Scan-scoped map of (class, key) -> entity instance.

    Also remembers which children were already linked into which parent
    collection, so a one-to-many collection never holds the same entity
    twice. Never share one between scans.
    """

    def __init__(self) -> None:
        self._entities: dict[tuple[type, Any], Any] = {}
        self._links: set[tuple[int, str, int]] = set()

    def get(self, entity_type: type, key: Any, default: Any = None) -> Any:
        return self._entities.get(_identity(entity_type, key), default)

    def put(self, entity_type: type, key: Any, instance: Any) -> None:
        self._entities[_identity(entity_type, key)] = instance

    def link(self, parent: Any, attribute: str, child: Any) -> bool:
        """Record ``child`` under ``parent.attribute``. False if already recorded."""
        token = (id(parent), attribute, id(child))
        if token in self._links:
            return False
        self._links.add(token)
        return True

    def __contains__(self, item: tuple[type, Any]) -> bool:
        return _identity(*item) in self._entities

    def __len__(self) -> int:
        return len(self._entities)


def _identity(entity_type: type, key: Any) -> tuple[type, Any]:
    try:
        hash(key)
    except TypeError:
        raise MappingError(
            f"primary key value {key!r} of {entity_type.__name__} is not hashable"
        ) from None
    return entity_type, key


class Materializer:
    """Finds-or-creates entity instances from rows and wires their relationships."""

    def __init__(self, registry: MetadataRegistry) -> None:
        self._registry = registry

    def identify(self, entity_type: type, row: Mapping[str, Any]) -> Any:
        """Return the primary-key value of ``entity_type`` in ``row``.

        Raises:
            MissingKeyColumnError: If the row lacks the key column.
        """
        descriptor = self._registry.resolve(entity_type)
        return _key_value(descriptor, row)

    def materialize(
        self,
        entity_type: type,
        row: Mapping[str, Any],
        identity: IdentityMap,
        destination: Any = None,
    ) -> tuple[Any, bool]:
        """Fold ``row`` into the instance of ``entity_type`` it identifies.

        Args:
            entity_type: Class of the entity to materialize.
            row: Column name -> value mapping.
            identity: The scan's identity map.
            destination: Instance to populate when the key is new. A fresh
                default instance is created when omitted.

        Returns:
            ``(instance, existed_before)``. ``instance`` is None when the
            row's key value is NULL (the unmatched side of an outer join).
        """
        return self._materialize(entity_type, row, identity, destination, set())

    def is_default(self, instance: Any) -> bool:
        """True if every mapped attribute of ``instance`` still holds its default."""
        descriptor = self._registry.resolve(type(instance))
        return _is_default(instance, descriptor)

    def _materialize(
        self,
        entity_type: type,
        row: Mapping[str, Any],
        identity: IdentityMap,
        destination: Any,
        visited: set[tuple[type, Any]],
    ) -> tuple[Any, bool]:
        descriptor = self._registry.resolve(entity_type)
        key = _key_value(descriptor, row)
        if key is None:
            return None, False

        instance = identity.get(entity_type, key, _MISSING)
        existed = instance is not _MISSING
        if not existed:
            instance = destination if destination is not None else descriptor.new_instance()
            _populate(instance, descriptor, row)
            identity.put(entity_type, key, instance)

        # Each entity is wired once per row; cyclic graphs stop here.
        if (entity_type, key) in visited:
            return instance, existed
        visited.add((entity_type, key))

        for relationship in descriptor.relationships:
            self._attach(instance, relationship, row, identity, visited)
        return instance, existed

    def _attach(
        self,
        instance: Any,
        relationship: RelationshipBinding,
        row: Mapping[str, Any],
        identity: IdentityMap,
        visited: set[tuple[type, Any]],
    ) -> None:
        related, _ = self._materialize(relationship.target_class, row, identity, None, visited)
        # A row keyed the same on both sides of a self-reference names one entity.
        if related is None or related is instance:
            return

        current = getattr(instance, relationship.attribute, None)
        if relationship.cardinality is Cardinality.ONE_TO_ONE:
            if current is related:
                return
            if current is not None and not self.is_default(current):
                raise TooManyRowsError(relationship.target_class)
            _assign(instance, relationship.attribute, related)
            return

        if current is None:
            current = []
            _assign(instance, relationship.attribute, current)
        if identity.link(instance, relationship.attribute, related):
            current.append(related)


def _key_value(descriptor: EntityDescriptor, row: Mapping[str, Any]) -> Any:
    if descriptor.key_column not in row:
        raise MissingKeyColumnError(descriptor.target_class, descriptor.key_column)
    return row[descriptor.key_column]


def _populate(instance: Any, descriptor: EntityDescriptor, row: Mapping[str, Any]) -> None:
    """Write every non-NULL mapped column of ``row`` onto ``instance``."""
    for column_name, binding in descriptor.columns.items():
        value = row.get(column_name)
        if value is None:
            continue
        current = getattr(instance, binding.attribute, None)
        try:
            converted = convert(value, binding.field_type, current)
        except CoercionError as e:
            raise CoercionError(f"failed to map column {column_name}: {e}", column_name) from e
        _assign(instance, binding.attribute, converted)


def _assign(instance: Any, attribute: str, value: Any) -> None:
    try:
        setattr(instance, attribute, value)
    except AttributeError as e:
        raise FieldNotSettableError(type(instance), attribute) from e


def _is_default(instance: Any, descriptor: EntityDescriptor) -> bool:
    fresh = descriptor.new_instance()
    return all(
        getattr(instance, attribute, None) == getattr(fresh, attribute, None)
        for attribute in descriptor.attributes
    )
