"""Mapping layer - fold row sources into typed entity graphs."""

from __future__ import annotations

from row_graph.mapping.builder import EntityDescriptorBuilder, entity
from row_graph.mapping.fields import column, primary_key, relationship
from row_graph.mapping.mapper import RowMapper, map_many, map_one
from row_graph.mapping.materializer import IdentityMap, Materializer
from row_graph.mapping.plan import (
    ColumnBinding,
    EntityDescriptor,
    FieldType,
    RelationshipBinding,
)
from row_graph.mapping.protocol import Mapper, RowSource
from row_graph.mapping.rows import CursorRowSource, IterableRowSource, as_row_source

__all__ = [
    "RowMapper",
    "map_one",
    "map_many",
    "Materializer",
    "IdentityMap",
    "entity",
    "EntityDescriptorBuilder",
    "primary_key",
    "column",
    "relationship",
    "EntityDescriptor",
    "ColumnBinding",
    "RelationshipBinding",
    "FieldType",
    "Mapper",
    "RowSource",
    "CursorRowSource",
    "IterableRowSource",
    "as_row_source",
]
