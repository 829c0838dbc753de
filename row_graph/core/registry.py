"""Metadata Registry - caches entity descriptors by class.

Lifecycle: populated lazily (first scan of a class) or eagerly at startup
via ``register``; read-only in steady state. Entries are never evicted.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from row_graph.core.exceptions import SchemaError

if TYPE_CHECKING:
    from row_graph.mapping.plan import EntityDescriptor

logger = logging.getLogger(__name__)


class MetadataRegistry:
    """Thread-safe cache of entity descriptors keyed by class.

    Safe to share between any number of concurrent scans without caller-side
    locking. Analysis runs under the registry lock, so a class is analyzed at
    most once and a partially analyzed graph is never observable.

    A class whose analysis failed stays failed for the lifetime of the
    registry: ``resolve`` re-raises the original ``SchemaError`` until a
    descriptor is explicitly registered for it.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._descriptors: dict[type, EntityDescriptor] = {}
        self._failures: dict[type, SchemaError] = {}

    def get(self, entity_type: type) -> EntityDescriptor | None:
        """Return the descriptor for ``entity_type`` if it is known."""
        with self._lock:
            return self._descriptors.get(entity_type)

    def has(self, entity_type: type) -> bool:
        """Check if a descriptor is registered for ``entity_type``."""
        with self._lock:
            return entity_type in self._descriptors

    def register(self, descriptor: EntityDescriptor) -> None:
        """Register an explicit descriptor, replacing any previous one."""
        with self._lock:
            self._descriptors[descriptor.target_class] = descriptor
            self._failures.pop(descriptor.target_class, None)
        logger.debug("Registered descriptor for %s", descriptor.target_class.__name__)

    def resolve(self, entity_type: type) -> EntityDescriptor:
        """Return the descriptor for ``entity_type``, analyzing it on first use.

        Raises:
            SchemaError: If the class (or a class reachable through its
                relationships) cannot be analyzed.
        """
        descriptor = self.get(entity_type)
        if descriptor is not None:
            return descriptor

        from row_graph.mapping.analyzer import analyze

        with self._lock:
            descriptor = self._descriptors.get(entity_type)
            if descriptor is not None:
                return descriptor
            failure = self._failures.get(entity_type)
            if failure is not None:
                raise failure

            try:
                analyzed = analyze(entity_type, self._descriptors.__contains__)
            except SchemaError as e:
                self._failures[entity_type] = e
                raise

            self._descriptors.update(analyzed)
            return analyzed[entity_type]

    @property
    def entity_types(self) -> list[type]:
        """List all registered classes, sorted by qualified name."""
        with self._lock:
            return sorted(self._descriptors, key=lambda cls: cls.__qualname__)

    def __contains__(self, entity_type: object) -> bool:
        with self._lock:
            return entity_type in self._descriptors

    def __len__(self) -> int:
        """Number of registered descriptors."""
        with self._lock:
            return len(self._descriptors)


default_registry = MetadataRegistry()
