"""Unit tests for EntityDescriptor data classes and the descriptor builder DSL."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

import pytest

from row_graph.core.enums import Cardinality, ValueKind
from row_graph.core.exceptions import PlanCompilationError
from row_graph.core.registry import MetadataRegistry
from row_graph.mapping.builder import entity
from row_graph.mapping.plan import ANY_TYPE, ColumnBinding, EntityDescriptor, FieldType


class Member:
    def __init__(self, id: int | None = None, name: str | None = None) -> None:
        self.id = id
        self.name = name


class Account:
    def __init__(self) -> None:
        self.id: int | None = None
        self.name: str | None = None
        self.owner: Member | None = None
        self.members: list[Member] = []


@dataclass
class Product:
    sku: str = ""
    title: str = ""
    price: float = 0.0


class TestEntityDescriptor:
    def test_frozen(self) -> None:
        descriptor = EntityDescriptor(
            target_class=Member, key_column="id", key_attribute="id", columns={}
        )
        with pytest.raises(AttributeError):
            descriptor.key_column = "other"  # type: ignore[misc]

    def test_attributes_lists_columns_then_relationships(self) -> None:
        descriptor = entity(Account).key("id").column("name").reference("owner", Member).build()
        assert descriptor.attributes == ["id", "name", "owner"]

    def test_new_instance_uses_factory(self) -> None:
        descriptor = EntityDescriptor(
            target_class=Member,
            key_column="id",
            key_attribute="id",
            columns={},
            factory=lambda: Member(name="default"),
        )
        assert descriptor.new_instance().name == "default"

    def test_field_type_describe(self) -> None:
        assert FieldType(ValueKind.INT).describe() == "int"
        assert FieldType(ValueKind.COMPOSITE, python_type=Product).describe() == "Product"
        nested = FieldType(ValueKind.LIST, element=FieldType(ValueKind.STR))
        assert nested.describe() == "list[str]"


class TestEntityDescriptorBuilder:
    def test_basic_build(self) -> None:
        descriptor = entity(Account).key("id", "account_id").column("name", "account_name").build()
        assert isinstance(descriptor, EntityDescriptor)
        assert descriptor.target_class is Account
        assert descriptor.key_column == "account_id"
        assert descriptor.key_attribute == "id"
        assert descriptor.columns["account_name"].attribute == "name"

    def test_column_defaults_to_attribute_name(self) -> None:
        descriptor = entity(Account).key("id").column("name").build()
        assert set(descriptor.columns) == {"id", "name"}

    def test_columns_are_read_only(self) -> None:
        descriptor = entity(Account).key("id").build()
        assert isinstance(descriptor.columns, MappingProxyType)

    def test_untyped_attributes_accept_anything(self) -> None:
        descriptor = entity(Account).key("id").column("name").build()
        assert descriptor.columns["name"] == ColumnBinding("name", "name", ANY_TYPE)

    def test_types_come_from_annotations(self) -> None:
        descriptor = entity(Product).key("sku").auto_columns().build()
        assert descriptor.columns["price"].field_type.kind is ValueKind.FLOAT
        assert descriptor.columns["sku"].field_type.kind is ValueKind.STR

    def test_unsigned_only_applies_to_integers(self) -> None:
        descriptor = entity(Product).key("sku").column("price", unsigned=True).build()
        assert descriptor.columns["price"].field_type.kind is ValueKind.FLOAT

    def test_auto_columns_for_dataclass(self) -> None:
        descriptor = entity(Product).key("sku", "product_sku").auto_columns().build()
        assert {b.attribute: c for c, b in descriptor.columns.items()} == {
            "sku": "product_sku",
            "title": "title",
            "price": "price",
        }

    def test_auto_columns_for_plain_class(self) -> None:
        descriptor = entity(Member).key("id").auto_columns().build()
        assert set(descriptor.columns) == {"id", "name"}

    def test_auto_columns_skip_relationships(self) -> None:
        @dataclass
        class Basket:
            id: int = 0
            items: list[Product] | None = None

        descriptor = entity(Basket).key("id").auto_columns().collection("items", Product).build()
        assert set(descriptor.columns) == {"id"}

    def test_relationships(self) -> None:
        descriptor = (
            entity(Account)
            .key("id")
            .reference("owner", Member)
            .collection("members", Member)
            .build()
        )
        owner, members = descriptor.relationships
        assert owner.cardinality is Cardinality.ONE_TO_ONE
        assert members.cardinality is Cardinality.ONE_TO_MANY
        assert members.target_class is Member

    def test_register(self) -> None:
        registry = MetadataRegistry()
        descriptor = entity(Member).key("id").column("name").register(registry)
        assert registry.get(Member) is descriptor


class TestBuilderErrors:
    def test_missing_key_raises_error(self) -> None:
        with pytest.raises(PlanCompilationError, match="key"):
            entity(Account).column("name").build()

    def test_duplicate_column_raises_error(self) -> None:
        with pytest.raises(PlanCompilationError, match="Duplicate column 'name'"):
            entity(Account).key("id").column("name").column("owner_name", "name").build()

    def test_column_and_relationship_conflict(self) -> None:
        with pytest.raises(PlanCompilationError, match="both as a column and a relationship"):
            entity(Account).key("id").column("owner").reference("owner", Member).build()

    def test_duplicate_relationship(self) -> None:
        with pytest.raises(PlanCompilationError, match="Duplicate relationship"):
            (
                entity(Account)
                .key("id")
                .reference("owner", Member)
                .collection("owner", Member)
                .build()
            )
