"""
Unit tests for the dialect exporters

Tests:
- Helpers: pluralization, reference names, enum coercion
- Schema rendering per dialect: references, nullability, hoisting, bounds
- Definitions: fixpoint over references and pruning
- Exporter registry
"""

import pytest

from routedoc.constants import NullableStrategy
from routedoc.exporter import (
    ExporterRegistry,
    OAS2Exporter,
    OAS31Exporter,
    OAS3Exporter,
    exporters,
    normalize_enum,
    pluralize,
    sanitize_ref_name,
)
from routedoc.schema import ApiDocument, Discriminator, Schema, SchemaRegistry


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def registry():
    return SchemaRegistry()


@pytest.fixture
def address(registry):
    schema = Schema(type="object", canonical_name="Address")
    schema.add_property("street", Schema(type="string"), required=True)
    return registry.put("Address", schema)


def renderer(exporter_class, registry, strategy=None):
    return exporter_class(registry, strategy).renderer


# ============================================================================
# TESTS: Helpers
# ============================================================================


class TestHelpers:
    """Test pluralization, names and enum coercion"""

    @pytest.mark.parametrize(
        "word, expected",
        [
            ("schema", "schemas"),
            ("requestBody", "requestBodies"),
            ("definition", "definitions"),
            ("securityScheme", "securitySchemes"),
            ("index", "indexes"),
            ("category", "categories"),
            ("key", "keys"),
        ],
    )
    def test_pluralize(self, word, expected):
        assert pluralize(word) == expected

    def test_sanitize_ref_name(self):
        assert sanitize_ref_name("Api::V1::User") == "Api_V1_User"
        assert sanitize_ref_name("Entities.User<Admin>") == "Entities.User_Admin_"

    def test_integer_enum_coercion(self):
        assert normalize_enum(["1", "2", "3"], "integer") == [1, 2, 3]

    def test_enum_coercion_is_idempotent(self):
        once = normalize_enum(["1", 2.0, "2", "x", True], "integer")

        assert once == [1, 2]
        assert normalize_enum(once, "integer") == once

    def test_number_and_boolean_coercion(self):
        assert normalize_enum(["1.5", 2, "n/a"], "number") == [1.5, 2]
        assert normalize_enum(["true", False, "yes"], "boolean") == [True, False]

    def test_string_enum_drops_other_values(self):
        assert normalize_enum(["a", 1, "a", None], "string") == ["a"]

    def test_enum_omitted_for_unsupported_types(self):
        assert normalize_enum(["a"], "object") is None
        assert normalize_enum(["a"], "array") is None
        assert normalize_enum(["x"], "integer") is None

    def test_type_array_uses_base_type(self):
        assert normalize_enum(["1"], ["integer", "null"]) == [1]


# ============================================================================
# TESTS: Schema rendering
# ============================================================================


class TestSchemaRendering:
    """Test rendering of individual schemas"""

    def test_named_schema_renders_as_reference(self, registry, address):
        rendered = renderer(OAS3Exporter, registry).render(address)

        assert rendered == {"$ref": "#/components/schemas/Address"}
        assert registry.is_used("Address")

    def test_oas2_reference_bucket(self, registry, address):
        assert renderer(OAS2Exporter, registry).render(address) == {"$ref": "#/definitions/Address"}

    def test_concrete_string_scenario(self, registry):
        schema = Schema(type="string", min_length=5, max_length=50, enum=["draft", "published"])

        rendered = renderer(OAS3Exporter, registry).render(schema)

        assert rendered == {"type": "string", "minLength": 5, "maxLength": 50, "enum": ["draft", "published"]}

    @pytest.mark.parametrize(
        "exporter_class, strategy, expected",
        [
            (OAS3Exporter, "keyword", {"type": "string", "nullable": True}),
            (OAS3Exporter, "type_array", {"type": ["string", "null"]}),
            (OAS3Exporter, "extension", {"type": "string", "x-nullable": True}),
            (OAS2Exporter, None, {"type": "string", "x-nullable": True}),
            (OAS2Exporter, "type_array", {"type": "string", "x-nullable": True}),
            (OAS31Exporter, "keyword", {"type": ["string", "null"]}),
        ],
    )
    def test_nullable_strategies(self, registry, exporter_class, strategy, expected):
        rendered = renderer(exporter_class, registry, strategy).render(Schema(type="string", nullable=True))

        assert rendered == expected

    def test_annotated_reference_keyword(self, registry, address):
        wrapper = Schema.reference_to(address, description="Home", nullable=True)

        rendered = renderer(OAS3Exporter, registry).render(wrapper)

        assert rendered == {
            "allOf": [{"$ref": "#/components/schemas/Address"}],
            "nullable": True,
            "description": "Home",
        }

    def test_annotated_reference_type_array(self, registry, address):
        wrapper = Schema.reference_to(address, description="Home", nullable=True)

        rendered = renderer(OAS31Exporter, registry).render(wrapper)

        assert rendered == {
            "anyOf": [{"$ref": "#/components/schemas/Address"}, {"type": "null"}],
            "description": "Home",
        }

    def test_array_item_annotations_are_hoisted(self, registry, address):
        items = Schema.reference_to(address, description="Stops", nullable=True)
        schema = Schema(type="array", items=items)

        rendered = renderer(OAS3Exporter, registry).render(schema)

        assert rendered == {
            "type": "array",
            "items": {"$ref": "#/components/schemas/Address"},
            "description": "Stops",
            "nullable": True,
        }

    def test_exclusive_bounds(self, registry):
        schema = Schema(type="integer", minimum=0, exclusive_minimum=True, maximum=10)

        oas3 = renderer(OAS3Exporter, registry).render(schema)
        oas31 = renderer(OAS31Exporter, registry).render(schema)

        assert oas3 == {"type": "integer", "minimum": 0, "exclusiveMinimum": True, "maximum": 10}
        assert oas31 == {"type": "integer", "exclusiveMinimum": 0, "maximum": 10}

    def test_file_type(self, registry):
        schema = Schema(type="file")

        assert renderer(OAS2Exporter, registry).render(schema) == {"type": "file"}
        assert renderer(OAS3Exporter, registry).render(schema) == {"type": "string", "format": "binary"}

    def test_oas2_one_of_falls_back_to_first_variant(self, registry, address):
        schema = Schema(one_of=[address, Schema(type="string")])

        rendered = renderer(OAS2Exporter, registry).render(schema)

        assert rendered["allOf"] == [{"$ref": "#/definitions/Address"}]
        assert rendered["x-oneOf"] == [{"$ref": "#/definitions/Address"}, {"type": "string"}]
        assert "oneOf" not in rendered

    def test_oas3_keeps_native_composition(self, registry, address):
        schema = Schema(any_of=[address, Schema(type="string")])

        rendered = renderer(OAS3Exporter, registry).render(schema)

        assert rendered == {"anyOf": [{"$ref": "#/components/schemas/Address"}, {"type": "string"}]}

    def test_json_schema_keywords_only_in_oas31(self, registry):
        schema = Schema(type="object", unevaluated_properties=False, defs={"Code": {"type": "string"}})

        oas3 = renderer(OAS3Exporter, registry).render(schema)
        oas31 = renderer(OAS31Exporter, registry).render(schema)

        assert "unevaluatedProperties" not in oas3 and "$defs" not in oas3
        assert oas31["unevaluatedProperties"] is False
        assert oas31["$defs"] == {"Code": {"type": "string"}}

    def test_extensions_pass_through(self, registry):
        schema = Schema(type="string", extensions={"x-internal": True}, default="n/a", examples="hello")

        rendered = renderer(OAS3Exporter, registry).render(schema)

        assert rendered["x-internal"] is True
        assert rendered["default"] == "n/a"
        assert rendered["example"] == "hello"


# ============================================================================
# TESTS: Discriminators and definitions
# ============================================================================


def pet_hierarchy(registry):
    pet = Schema(type="object", canonical_name="Pet", discriminator=Discriminator("type", {"cat": "Cat"}))
    pet.add_property("type", Schema(type="string"))
    registry.put("Pet", pet)

    cat_only = Schema(type="object")
    cat_only.add_property("indoor", Schema(type="boolean"))
    cat = registry.put("Cat", Schema(canonical_name="Cat", all_of=[pet, cat_only]))
    return pet, cat


class TestDefinitions:
    """Test discriminators, fixpoint emission and pruning"""

    def test_oas2_discriminator(self, registry):
        _, cat = pet_hierarchy(registry)
        exporter = OAS2Exporter(registry)
        exporter.renderer.render(cat)

        definitions = exporter.build_definitions()

        assert definitions["Pet"]["discriminator"] == "type"
        assert definitions["Pet"]["required"] == ["type"]
        assert definitions["Cat"] == {
            "allOf": [
                {"$ref": "#/definitions/Pet"},
                {"type": "object", "properties": {"indoor": {"type": "boolean"}}},
            ]
        }

    def test_oas3_discriminator(self, registry):
        pet, _ = pet_hierarchy(registry)
        exporter = OAS3Exporter(registry)
        exporter.renderer.render(pet)

        definitions = exporter.build_definitions()

        assert definitions["Pet"]["discriminator"] == {
            "propertyName": "type",
            "mapping": {"cat": "#/components/schemas/Cat"},
        }
        assert definitions["Cat"]["allOf"][0] == {"$ref": "#/components/schemas/Pet"}

    def test_references_inside_definitions_are_followed(self, registry, address):
        user = Schema(type="object", canonical_name="User")
        user.add_property("address", address)
        registry.put("User", user)
        exporter = OAS3Exporter(registry)
        exporter.renderer.render(user)

        assert list(exporter.build_definitions()) == ["Address", "User"]

    def test_unreferenced_schemas_are_pruned(self, registry, address, caplog):
        registry.put("Orphan", Schema(type="object", canonical_name="Orphan"))
        exporter = OAS3Exporter(registry)
        exporter.renderer.render(address)

        with caplog.at_level("INFO"):
            definitions = exporter.build_definitions()

        assert "Orphan" not in definitions
        assert "Pruned 1 unreferenced definitions" in caplog.text

    def test_cyclic_definitions_terminate(self, registry):
        node = Schema(type="object", canonical_name="Node")
        node.add_property("next", node)
        registry.put("Node", node)
        exporter = OAS31Exporter(registry)
        exporter.renderer.render(node)

        definitions = exporter.build_definitions()

        assert definitions["Node"]["properties"]["next"] == {"$ref": "#/components/schemas/Node"}

    def test_colliding_definition_keys_are_reported(self, registry, caplog):
        namespaced = registry.put("Api::User", Schema(type="object", canonical_name="Api::User"))
        flat = registry.put("Api_User", Schema(type="string", canonical_name="Api_User"))
        exporter = OAS3Exporter(registry)
        exporter.renderer.render(namespaced)
        exporter.renderer.render(flat)

        definitions = exporter.build_definitions()

        assert list(definitions) == ["Api_User"]
        assert definitions["Api_User"]["type"] == "object"
        assert "Definitions Api::User and Api_User both map to key Api_User" in caplog.text

    def test_empty_document_shapes(self, registry):
        document = ApiDocument(title="Empty", version="0")

        oas2 = OAS2Exporter(registry).export(document)
        oas3 = OAS3Exporter(registry).export(document)
        oas31 = OAS31Exporter(registry).export(document)

        assert oas2["swagger"] == "2.0" and oas2["definitions"] == {}
        assert oas3["openapi"] == "3.0.3" and oas3["components"] == {"schemas": {}}
        assert oas31["openapi"] == "3.1.0"
        assert oas31["info"]["license"]["identifier"] == "UNLICENSED"


# ============================================================================
# TESTS: Registry
# ============================================================================


class TestExporterRegistry:
    """Test dialect registration"""

    def test_default_dialects(self):
        assert exporters.for_type("oas2") is OAS2Exporter
        assert exporters.for_type("oas30") is OAS3Exporter
        assert exporters.for_type("oas31") is OAS31Exporter

    def test_unknown_dialect(self):
        with pytest.raises(ValueError, match="Unsupported schema type: raml"):
            exporters.for_type("raml")

    def test_register_and_unregister(self):
        registry = ExporterRegistry()
        registry.register(OAS3Exporter, as_=["a", "b"])

        assert registry.registered("a")
        assert len(registry) == 2

        registry.unregister("a")
        assert registry.schema_types == ["b"]
        assert len(registry.clear()) == 0

    def test_rejects_non_exporters(self):
        with pytest.raises(ValueError):
            ExporterRegistry().register(object, as_="x")

    def test_strategy_parsing(self, registry):
        assert OAS3Exporter(registry, "TYPE-ARRAY").nullable_strategy == NullableStrategy.TYPE_ARRAY
        with pytest.raises(ValueError):
            OAS3Exporter(registry, "sometimes")
