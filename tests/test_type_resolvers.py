"""
Unit tests for type resolution

Tests:
- Resolver registry ordering and validation
- Primitive, enum, array, optional and descriptor resolution
- Deferred names and unresolvable fallbacks
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from uuid import UUID

import pytest

from routedoc.constants import format_for_type, primitive_type
from routedoc.descriptors import EntityDescriptor, TypeSpec
from routedoc.introspection import build_type_schema
from routedoc.schema import ProcessingStack, Schema, SchemaRegistry
from routedoc.type_resolvers import (
    ArrayResolver,
    DescriptorResolver,
    PrimitiveResolver,
    TypeResolver,
    TypeResolverRegistry,
    WrappedTypeResolver,
    register_named_type,
    resolve_type,
    type_resolvers,
    unregister_named_type,
)
from routedoc.type_resolvers.base import infer_format_from_name


class Color(Enum):
    RED = "red"
    GREEN = "green"


class Priority(Enum):
    LOW = 1
    HIGH = 2


class Money:
    pass


class MoneyResolver(TypeResolver):
    @classmethod
    def handles(cls, type_ref):
        return type_ref is Money

    @classmethod
    def build_schema(cls, type_ref, stack=None, registry=None):
        return Schema(type="string", format="money")


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def registry():
    return SchemaRegistry()


@pytest.fixture
def stack():
    return ProcessingStack()


@pytest.fixture
def named_user():
    user = EntityDescriptor("User")
    user.expose("id", declared_type=int)
    register_named_type("User", user)
    yield user
    unregister_named_type("User")


# ============================================================================
# TESTS: Registry
# ============================================================================


class TestTypeResolverRegistry:
    """Test ordering and validation"""

    def test_default_order(self):
        assert type_resolvers.to_list() == [DescriptorResolver, ArrayResolver, WrappedTypeResolver, PrimitiveResolver]

    def test_insert_before(self):
        registry = TypeResolverRegistry()
        registry.register(PrimitiveResolver)
        registry.register(MoneyResolver, before=PrimitiveResolver)

        assert registry.to_list() == [MoneyResolver, PrimitiveResolver]

    def test_insert_after(self):
        registry = TypeResolverRegistry()
        registry.register(ArrayResolver).register(PrimitiveResolver)
        registry.register(MoneyResolver, after=ArrayResolver)

        assert registry.to_list() == [ArrayResolver, MoneyResolver, PrimitiveResolver]

    def test_rejects_objects_without_interface(self):
        with pytest.raises(ValueError, match="must define handles"):
            TypeResolverRegistry().register(object())

    def test_custom_resolver_on_default_registry(self, stack, registry):
        type_resolvers.register(MoneyResolver, before=PrimitiveResolver)
        try:
            schema = build_type_schema(Money, stack, registry)
        finally:
            type_resolvers.unregister(MoneyResolver)

        assert schema.format == "money"


# ============================================================================
# TESTS: Resolution
# ============================================================================


class TestResolution:
    """Test schemas built for common type references"""

    @pytest.mark.parametrize(
        "type_ref, expected_type, expected_format",
        [
            (str, "string", None),
            (int, "integer", "int32"),
            (float, "number", "float"),
            (bool, "boolean", None),
            (Decimal, "number", "double"),
            (date, "string", "date"),
            (UUID, "string", "uuid"),
            ("Integer", "integer", "int32"),
            ("DateTime", "string", "date-time"),
            ("File", "file", None),
        ],
    )
    def test_primitives(self, type_ref, expected_type, expected_format, stack, registry):
        schema = build_type_schema(type_ref, stack, registry)

        assert schema.type == expected_type
        assert schema.format == expected_format

    def test_enum_classes(self, stack, registry):
        colors = build_type_schema(Color, stack, registry)
        priorities = build_type_schema(Priority, stack, registry)

        assert (colors.type, colors.enum) == ("string", ["red", "green"])
        assert (priorities.type, priorities.enum) == ("integer", [1, 2])

    def test_array_string(self, stack, registry):
        schema = build_type_schema("[Integer]", stack, registry)

        assert schema.type == "array"
        assert schema.items.type == "integer"

    def test_typing_list(self, stack, registry):
        schema = build_type_schema(List[str], stack, registry)

        assert schema.items.type == "string"

    def test_optional(self, stack, registry):
        schema = build_type_schema(Optional[int], stack, registry)

        assert schema.type == "integer"
        assert schema.nullable is True

    def test_type_spec(self, stack, registry):
        spec = TypeSpec(primitive=str, meta={"format": "hostname"}, rules=[["max_size", 253]])

        schema = build_type_schema(spec, stack, registry)

        assert schema.format == "hostname"
        assert schema.max_length == 253

    def test_deferred_descriptor_name(self, named_user, stack, registry):
        schema = build_type_schema("User", stack, registry)

        assert schema is registry.get("User")

    def test_array_of_deferred_descriptor(self, named_user, stack, registry):
        schema = build_type_schema("[User]", stack, registry)

        assert schema.items is registry.get("User")

    def test_nullable_named_type_spec_is_wrapped(self, named_user, stack, registry):
        spec = TypeSpec(primitive="User", meta={"description": "Owner"}).optional_of()

        schema = build_type_schema(spec, stack, registry)

        assert schema.is_reference_wrapper()
        assert schema.all_of[0] is registry.get("User")
        assert schema.nullable is True
        assert schema.description == "Owner"

    def test_dotted_import_path(self):
        assert resolve_type("decimal.Decimal") is Decimal
        assert resolve_type("no_such_module.Thing") is None

    def test_unresolvable_name_falls_back_to_string(self, stack, registry, caplog):
        schema = build_type_schema("ContactEmail", stack, registry)

        assert schema.type == "string"
        assert schema.format == "email"
        assert "Could not resolve type" in caplog.text

    def test_none_is_string(self, stack, registry):
        assert build_type_schema(None, stack, registry).type == "string"

    def test_primitive_table_lookup(self):
        assert primitive_type(str) == "string"
        assert primitive_type("Symbol") == "string"
        assert primitive_type("ContactEmail") is None
        assert format_for_type("long") == "int64"


class TestFormatInference:
    """Test name-based format guesses"""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("UserUUID", "uuid"),
            ("Types::DateTime", "date-time"),
            ("BirthDate", "date"),
            ("Email", "email"),
            ("HomepageURL", "uri"),
            ("Types::Url", "uri"),
            ("Name", None),
        ],
    )
    def test_infer_format(self, name, expected):
        assert infer_format_from_name(name) == expected
