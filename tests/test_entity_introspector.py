"""
Unit tests for entity introspection

Tests:
- Field exposures: types, documentation, aliases, hidden and conditional fields
- Registry: cache hits and reference identity
- Cycles: self and mutual references terminate with a cycle marker
- Inheritance: discriminator composition and flattening
"""

import pytest

from routedoc.constants import CYCLE_DESCRIPTION
from routedoc.descriptors import EntityDescriptor
from routedoc.introspection import EntityIntrospector
from routedoc.schema import ProcessingStack, Schema, SchemaRegistry


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
def address_entity():
    entity = EntityDescriptor("Address")
    entity.expose("street", declared_type=str, documentation={"required": True})
    entity.expose("city", declared_type=str)
    return entity


@pytest.fixture
def user_entity(address_entity):
    entity = EntityDescriptor("User", documentation={"description": "A registered user", "x-owner": "accounts"})
    entity.expose("id", declared_type=int, documentation={"required": True, "description": "Identifier"})
    entity.expose("email", declared_type=str, documentation={"format": "email", "required": True})
    entity.expose("address", using=address_entity, documentation={"desc": "Home address", "nullable": True})
    entity.expose("role", declared_type=str, documentation={"values": ["admin", "member"]})
    entity.expose("password", declared_type=str, never_shown=True)
    entity.expose("nickname", declared_type=str, conditional=True, documentation={"required": True})
    entity.expose("created", declared_type="datetime", alias="created_at")
    return entity


@pytest.fixture
def pet_hierarchy():
    pet = EntityDescriptor("Pet")
    pet.expose("type", declared_type=str, documentation={"is_discriminator": True, "required": True})
    pet.expose("name", declared_type=str)

    cat = EntityDescriptor("Cat", parent=pet)
    cat.expose("indoor", declared_type=bool)

    dog = EntityDescriptor("Dog", parent=pet)
    dog.expose("barks", declared_type=bool)
    return pet, cat, dog


def build(entity, stack, registry):
    return EntityIntrospector.build_schema(entity, stack, registry)


# ============================================================================
# TESTS: Field exposures
# ============================================================================


class TestFieldExposures:
    """Test properties built from exposures"""

    def test_object_schema(self, user_entity, stack, registry):
        schema = build(user_entity, stack, registry)

        assert schema.type == "object"
        assert schema.canonical_name == "User"
        assert schema.description == "A registered user"
        assert schema.extensions == {"x-owner": "accounts"}

    def test_primitive_properties(self, user_entity, stack, registry):
        schema = build(user_entity, stack, registry)

        assert schema.properties["id"].type == "integer"
        assert schema.properties["id"].description == "Identifier"
        assert schema.properties["email"].format == "email"
        assert schema.properties["role"].enum == ["admin", "member"]

    def test_never_shown_field_is_skipped(self, user_entity, stack, registry):
        schema = build(user_entity, stack, registry)

        assert "password" not in schema.properties

    def test_alias_names_the_property(self, user_entity, stack, registry):
        schema = build(user_entity, stack, registry)

        assert "created_at" in schema.properties
        assert schema.properties["created_at"].format == "date-time"

    def test_required_only_for_documented_unconditional_fields(self, user_entity, stack, registry):
        schema = build(user_entity, stack, registry)

        assert schema.required == ["id", "email"]

    def test_conditional_field_is_not_nullable(self, user_entity, stack, registry):
        schema = build(user_entity, stack, registry)

        assert "nickname" in schema.properties
        assert not schema.properties["nickname"].nullable

    def test_annotated_reference_is_wrapped(self, user_entity, stack, registry):
        schema = build(user_entity, stack, registry)
        address = schema.properties["address"]

        assert address.is_reference_wrapper()
        assert address.description == "Home address"
        assert address.nullable is True
        assert address.all_of[0] is registry.get("Address")
        # the shared node never carries field annotations
        assert registry.get("Address").description is None

    def test_merged_exposure_flattens_fields(self, address_entity, stack, registry):
        entity = EntityDescriptor("Shipment")
        entity.expose("tracking", declared_type=str)
        entity.expose("destination", using=address_entity, merge_into_parent=True)

        schema = build(entity, stack, registry)

        assert list(schema.properties) == ["tracking", "street", "city"]
        assert schema.required == ["street"]

    def test_array_exposure(self, address_entity, stack, registry):
        entity = EntityDescriptor("Customer")
        entity.expose("addresses", using=address_entity, documentation={"is_array": True})

        schema = build(entity, stack, registry)
        addresses = schema.properties["addresses"]

        assert addresses.type == "array"
        assert addresses.items is registry.get("Address")


# ============================================================================
# TESTS: Registry and cycles
# ============================================================================


class TestRegistryAndCycles:
    """Test caching, identity and termination"""

    def test_cache_hit_returns_same_node(self, user_entity, stack, registry):
        first = build(user_entity, stack, registry)
        second = build(user_entity, stack, registry)

        assert first is second
        assert len(stack) == 0

    def test_shared_reference_identity(self, address_entity, stack, registry):
        home = EntityDescriptor("Home")
        home.expose("address", using=address_entity)
        office = EntityDescriptor("Office")
        office.expose("address", using=address_entity)

        home_schema = build(home, stack, registry)
        office_schema = build(office, stack, registry)

        assert home_schema.properties["address"] is office_schema.properties["address"]

    def test_self_reference_terminates_with_marker(self, stack, registry):
        node = EntityDescriptor("TreeNode")
        node.expose("value", declared_type=int)
        node.expose("children", using=node, documentation={"is_array": True})

        schema = build(node, stack, registry)

        assert schema.properties["children"].items is schema
        assert schema.description == CYCLE_DESCRIPTION
        assert len(stack) == 0

    def test_mutual_reference_terminates(self, stack, registry):
        author = EntityDescriptor("Author")
        book = EntityDescriptor("Book")
        author.expose("books", using=book, documentation={"is_array": True})
        book.expose("author", using=author)

        schema = build(author, stack, registry)
        book_schema = registry.get("Book")

        assert book_schema.properties["author"] is schema
        assert schema.description == CYCLE_DESCRIPTION

    def test_standalone_call_creates_its_own_context(self, address_entity):
        schema = EntityIntrospector.build_schema(address_entity)

        assert isinstance(schema, Schema)
        assert schema.canonical_name == "Address"


# ============================================================================
# TESTS: Inheritance
# ============================================================================


class TestInheritance:
    """Test discriminator composition and flattening"""

    def test_parent_carries_discriminator(self, pet_hierarchy, stack, registry):
        pet, _, _ = pet_hierarchy
        schema = build(pet, stack, registry)

        assert schema.discriminator.property_name == "type"

    def test_subtype_composes_parent(self, pet_hierarchy, stack, registry):
        pet, cat, _ = pet_hierarchy
        schema = build(cat, stack, registry)

        assert schema.canonical_name == "Cat"
        assert len(schema.all_of) == 2
        assert schema.all_of[0] is registry.get("Pet")
        assert list(schema.all_of[1].properties) == ["indoor"]

    def test_discriminator_mapping_introspects_subtypes(self, pet_hierarchy, stack, registry):
        pet, cat, dog = pet_hierarchy
        pet.documentation["discriminator_mapping"] = {"cat": cat, "dog": dog}

        schema = build(pet, stack, registry)

        assert schema.discriminator.mapping == {"cat": "Cat", "dog": "Dog"}
        assert registry.get("Dog").all_of[0] is schema

    def test_inheritance_without_discriminator_flattens(self, address_entity, stack, registry):
        entity = EntityDescriptor("GeoAddress", parent=address_entity)
        entity.expose("lat", declared_type=float)

        schema = build(entity, stack, registry)

        assert list(schema.properties) == ["street", "city", "lat"]
        assert not schema.all_of
