"""Scan orchestrators.

``map_one`` folds a whole result into one entity; ``map_many`` produces
the distinct root entities in first-seen order. Both own a fresh identity
map per call and close the row source on every exit path.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, TypeVar

from row_graph.core.exceptions import InvalidArgumentError, NoRowsError, TooManyRowsError
from row_graph.core.registry import MetadataRegistry, default_registry
from row_graph.mapping.materializer import IdentityMap, Materializer
from row_graph.mapping.rows import as_row_source

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNSET = object()


class RowMapper:
    """Maps row sources onto entity graphs.

    Args:
        registry: Descriptor cache to use. Defaults to the process-wide
                  ``default_registry``.
    """

    def __init__(self, registry: MetadataRegistry | None = None) -> None:
        self._registry = registry if registry is not None else default_registry
        self._materializer = Materializer(self._registry)

    @property
    def registry(self) -> MetadataRegistry:
        return self._registry

    def map_one(self, rows: Any, dest: T) -> T:
        """Fold every row into the single entity ``dest``.

        Rows repeating the root key are merged into it; their related rows
        accumulate into one-to-many collections.

        Raises:
            InvalidArgumentError: If ``dest`` is not an entity instance.
            NoRowsError: If no row produced the root entity. ``dest`` is untouched.
            TooManyRowsError: If the rows hold two distinct roots, or a
                one-to-one relationship receives two distinct entities.
        """
        source = as_row_source(rows)
        try:
            entity_type = self._check_entity(dest, "dest")
            snapshot = self._snapshot(dest)
            try:
                row_count = self._scan_one(source, entity_type, dest)
            except Exception:
                self._restore(dest, snapshot)
                raise
        finally:
            source.close()

        logger.debug("map_one built %s from %d rows", entity_type.__name__, row_count)
        return dest

    def map_many(self, rows: Any, dest: list[Any], entity_type: type[T]) -> list[T]:
        """Replace the contents of ``dest`` with the root entities of ``rows``.

        Roots appear once each, in the order their key was first seen, in
        their fully merged state. ``dest`` is untouched if the scan fails.

        Raises:
            InvalidArgumentError: If ``dest`` is not a list or ``entity_type``
                is not an entity class.
        """
        source = as_row_source(rows)
        try:
            if dest is None:
                raise InvalidArgumentError("dest cannot be None")
            if not isinstance(dest, list):
                raise InvalidArgumentError("dest must be a list")
            self._check_entity_type(entity_type, "entity_type")

            identity = IdentityMap()
            order: list[Any] = []
            seen: set[Any] = set()
            row_count = 0
            for row in source:
                row_count += 1
                key = self._materializer.identify(entity_type, row)
                if key is None:
                    continue
                self._materializer.materialize(entity_type, row, identity)
                if key not in seen:
                    seen.add(key)
                    order.append(key)
        finally:
            source.close()

        dest[:] = [identity.get(entity_type, key) for key in order]
        logger.debug(
            "map_many built %d %s entities from %d rows",
            len(dest),
            entity_type.__name__,
            row_count,
        )
        return dest

    def _scan_one(self, source: Any, entity_type: type, dest: Any) -> int:
        identity = IdentityMap()
        root_key: Any = _UNSET
        row_count = 0
        for row in source:
            row_count += 1
            key = self._materializer.identify(entity_type, row)
            if key is None:
                continue
            if root_key is _UNSET:
                root_key = key
            elif key != root_key:
                raise TooManyRowsError(entity_type, "multiple root entities")
            self._materializer.materialize(entity_type, row, identity, destination=dest)

        if root_key is _UNSET:
            raise NoRowsError(entity_type)
        return row_count

    def _check_entity(self, dest: Any, name: str) -> type:
        if dest is None:
            raise InvalidArgumentError(f"{name} cannot be None")
        if isinstance(dest, type):
            raise InvalidArgumentError(f"{name} must be an instance, not a class")
        entity_type = type(dest)
        if not self._is_entity_type(entity_type):
            raise InvalidArgumentError(f"{name} must be a composite entity instance")
        return entity_type

    def _check_entity_type(self, entity_type: Any, name: str) -> None:
        if entity_type is None or not isinstance(entity_type, type):
            raise InvalidArgumentError(f"{name} must be a class")
        if not self._is_entity_type(entity_type):
            raise InvalidArgumentError(f"{name} must be a composite entity class")

    def _is_entity_type(self, entity_type: type) -> bool:
        return entity_type in self._registry or dataclasses.is_dataclass(entity_type)

    def _snapshot(self, dest: Any) -> dict[str, tuple[Any, list[Any] | None]]:
        descriptor = self._registry.resolve(type(dest))
        snapshot = {}
        for attribute in descriptor.attributes:
            value = getattr(dest, attribute, None)
            snapshot[attribute] = (value, list(value) if isinstance(value, list) else None)
        return snapshot

    @staticmethod
    def _restore(dest: Any, snapshot: dict[str, tuple[Any, list[Any] | None]]) -> None:
        for attribute, (original, items) in snapshot.items():
            if items is not None:
                original[:] = items
            if getattr(dest, attribute, None) is not original:
                setattr(dest, attribute, original)


_default_mapper = RowMapper()


def map_one(rows: Any, dest: T) -> T:
    """Fold ``rows`` into ``dest`` using the default registry."""
    return _default_mapper.map_one(rows, dest)


def map_many(rows: Any, dest: list[Any], entity_type: type[T]) -> list[T]:
    """Fill ``dest`` with the root entities of ``rows`` using the default registry."""
    return _default_mapper.map_many(rows, dest, entity_type)
