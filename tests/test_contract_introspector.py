"""
Unit tests for contract introspection

Tests:
- Rule predicates and type specs -> property schemas
- Requiredness precedence
- Contract inheritance and anonymous contracts
"""

from typing import List, Optional

import pytest

from routedoc import generate
from routedoc.constants import CYCLE_DESCRIPTION
from routedoc.descriptors import ContractDescriptor, EntityDescriptor, RouteDescriptor, TypeSpec
from routedoc.introspection import ContractIntrospector
from routedoc.schema import ProcessingStack, SchemaRegistry


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
def post_contract():
    return ContractDescriptor(
        name="CreatePost",
        types={
            "status": TypeSpec(primitive=str),
            "title": TypeSpec(primitive=str, meta={"max_size": 120, "description": "Headline"}),
            "rating": TypeSpec(primitive=int, rules=[["and", [["gteq", 1], ["lteq", 5]]]]),
            "summary": TypeSpec(primitive=str).optional_of(),
            "tags": TypeSpec(primitive=list, member=str),
            "author_email": TypeSpec(primitive=str, name="AuthorEmail"),
        },
        rules={
            "status": ["and", [["key"], ["str"], ["min_size", 5], ["max_size", 50],
                               ["included_in", ["draft", "published"]]]],
            "title": ["and", [["key"], ["filled"]]],
            "rating": ["implication", [["key"], ["int"]]],
            "tags": ["and", [["key"], ["min_size", 1]]],
        },
    )


def build(contract, stack, registry):
    return ContractIntrospector.build_schema(contract, stack, registry)


# ============================================================================
# TESTS: Field schemas
# ============================================================================


class TestContractFields:
    """Test property schemas built from contract fields"""

    def test_string_field_with_rules(self, post_contract, stack, registry):
        status = build(post_contract, stack, registry).properties["status"]

        assert status.type == "string"
        assert status.min_length == 5
        assert status.max_length == 50
        assert status.enum == ["draft", "published"]
        assert status.format is None

    def test_type_metadata(self, post_contract, stack, registry):
        title = build(post_contract, stack, registry).properties["title"]

        assert title.max_length == 120
        assert title.description == "Headline"

    def test_type_level_rules(self, post_contract, stack, registry):
        rating = build(post_contract, stack, registry).properties["rating"]

        assert rating.type == "integer"
        assert (rating.minimum, rating.maximum) == (1, 5)

    def test_optional_type_is_nullable(self, post_contract, stack, registry):
        summary = build(post_contract, stack, registry).properties["summary"]

        assert summary.nullable is True

    def test_array_field(self, post_contract, stack, registry):
        tags = build(post_contract, stack, registry).properties["tags"]

        assert tags.type == "array"
        assert tags.items.type == "string"
        assert tags.min_items == 1

    def test_format_inferred_from_type_name(self, post_contract, stack, registry):
        email = build(post_contract, stack, registry).properties["author_email"]

        assert email.format == "email"

    def test_entity_field_is_referenced(self, stack, registry):
        author = EntityDescriptor("Author")
        author.expose("name", declared_type=str)
        contract = ContractDescriptor(name="Attribution", types={"author": author, "editor": Optional[str]})

        schema = build(contract, stack, registry)

        assert schema.properties["author"] is registry.get("Author")
        assert schema.properties["editor"].nullable is True

    def test_python_generic_field(self, stack, registry):
        contract = ContractDescriptor(name="Batch", types={"ids": List[int]})

        ids = build(contract, stack, registry).properties["ids"]

        assert ids.type == "array"
        assert ids.items.type == "integer"


# ============================================================================
# TESTS: Requiredness
# ============================================================================


class TestRequiredness:
    """Test which fields end up in required"""

    def test_required_list(self, post_contract, stack, registry):
        schema = build(post_contract, stack, registry)

        # rating is an implication (optional key); summary is an optional type
        assert "status" in schema.required
        assert "title" in schema.required
        assert "tags" in schema.required
        assert "rating" not in schema.required
        assert "summary" not in schema.required

    def test_fields_without_rules_default_to_required(self, post_contract, stack, registry):
        schema = build(post_contract, stack, registry)

        assert "author_email" in schema.required

    def test_explicit_meta_wins(self, stack, registry):
        contract = ContractDescriptor(
            name="Flags",
            types={
                "forced": TypeSpec(primitive=str, meta={"required": True}).optional_of(),
                "omitted": TypeSpec(primitive=str, meta={"omittable": True}),
            },
            rules={"omitted": ["and", [["key"]]]},
        )

        schema = build(contract, stack, registry)

        assert schema.required == ["forced"]


# ============================================================================
# TESTS: Composition
# ============================================================================


class TestContractComposition:
    """Test inheritance and anonymous contracts"""

    def test_named_contract_is_cached(self, post_contract, stack, registry):
        first = build(post_contract, stack, registry)

        assert first.canonical_name == "CreatePost"
        assert build(post_contract, stack, registry) is first

    def test_inherited_contract_composes_parent(self, stack, registry):
        base = ContractDescriptor(name="BaseParams", types={"page": int})
        search = ContractDescriptor(name="SearchParams", types={"query": str}, parent=base)

        schema = build(search, stack, registry)

        assert schema.all_of[0] is registry.get("BaseParams")
        assert list(schema.all_of[1].properties) == ["query"]

    def test_anonymous_contract_is_inline(self, stack, registry):
        contract = ContractDescriptor(types={"q": str})

        schema = build(contract, stack, registry)

        assert schema.canonical_name is None
        assert len(registry) == 0
        assert list(schema.properties) == ["q"]


# ============================================================================
# TESTS: Cycles
# ============================================================================


class TestContractCycles:
    """Test self-referencing contracts"""

    def test_self_reference_keeps_documented_description(self, stack, registry):
        node = ContractDescriptor(name="Node", documentation={"desc": "A tree node"})
        node.types["children"] = TypeSpec(primitive=list, member=node)

        schema = build(node, stack, registry)

        assert schema.properties["children"].items is schema
        assert schema.description == "A tree node"
        assert len(stack) == 0

    def test_undocumented_self_reference_gets_cycle_marker(self, stack, registry):
        node = ContractDescriptor(name="Node")
        node.types["next"] = TypeSpec(primitive=node).optional_of()

        schema = build(node, stack, registry)

        assert schema.description == CYCLE_DESCRIPTION

    def test_inherited_self_reference_keeps_description(self, stack, registry):
        base = ContractDescriptor(name="BaseNode", types={"id": int})
        node = ContractDescriptor(name="Node", parent=base, documentation={"desc": "A tree node"})
        node.types["parent"] = TypeSpec(primitive=node).optional_of()

        schema = build(node, stack, registry)

        assert schema.description == "A tree node"
        assert schema.all_of[1].properties["parent"].all_of[0] is schema

    def test_anonymous_self_reference_terminates(self, stack, registry):
        node = ContractDescriptor()
        node.types["children"] = TypeSpec(primitive=list, member=node)

        schema = build(node, stack, registry)

        assert schema.canonical_name is None
        assert schema.properties["children"].items.description == CYCLE_DESCRIPTION
        assert len(stack) == 0

    def test_generated_document_keeps_description(self):
        node = ContractDescriptor(name="Node", documentation={"desc": "A tree node"})
        node.types["children"] = TypeSpec(primitive=list, member=node)
        route = RouteDescriptor(method="POST", path="/nodes", body=node)

        document = generate([route], schema_type="oas3")

        assert document["components"]["schemas"]["Node"]["description"] == "A tree node"
