"""Builds the schema of one route parameter."""
import logging

from routedoc.descriptors.route import ParamSpec
from routedoc.introspection.property_extractor import PropertyExtractor
from routedoc.introspection.type_schema import build_type_schema
from routedoc.schema.models import Schema

logger = logging.getLogger(__name__)


class ParamSchemaBuilder:
    """Resolves the declared type, then layers the parameter's documentation on it."""

    def __init__(self, stack, registry):
        self.stack = stack
        self.registry = registry

    def build(self, param: ParamSpec, with_description: bool = False) -> Schema:
        doc = param.documentation
        type_ref = param.type if param.type is not None else doc.get("type")
        schema = build_type_schema(type_ref, self.stack, self.registry)

        description = PropertyExtractor.extract_description(doc) if with_description else None
        nullable = PropertyExtractor.extract_nullable(doc)

        if schema.canonical_name is not None:
            return Schema.reference_to(schema, description=description, nullable=nullable)
        if schema.is_reference_wrapper():
            schema.description = description or schema.description
            schema.nullable = True if nullable else schema.nullable
            return schema

        PropertyExtractor.apply_value_documentation(schema, doc)
        if param.values is not None:
            target = schema.items if schema.items is not None and schema.items.canonical_name is None else schema
            PropertyExtractor.apply_values(target, param.values)
        PropertyExtractor.apply_entity_level_properties(schema, doc)

        if description is not None:
            schema.description = description
        if nullable:
            schema.nullable = True
        if param.default is not None:
            schema.default = param.default
        return schema
