"""Turns entity field exposures into properties."""
import logging
from typing import List, Optional

from routedoc.constants import SchemaTypes
from routedoc.descriptors.entity import EntityDescriptor, FieldExposure
from routedoc.introspection.property_extractor import PropertyExtractor
from routedoc.introspection.type_schema import build_type_schema
from routedoc.schema.models import Schema

logger = logging.getLogger(__name__)


class ExposureProcessor:
    """Adds one property per exposure, flattening merged exposures."""

    def __init__(self, entity: EntityDescriptor, stack, registry):
        self.entity = entity
        self.stack = stack
        self.registry = registry

    def add_exposures_to_schema(self, schema: Schema, exposures: Optional[List[FieldExposure]] = None) -> None:
        if exposures is None:
            exposures = self.entity.exposures()

        for exposure in exposures:
            if exposure.never_shown:
                continue
            if exposure.merge_into_parent:
                self._merge_exposure(schema, exposure)
                continue
            schema.add_property(exposure.key, self.build_exposure_schema(exposure), required=self.is_required(exposure))

    def build_exposure_schema(self, exposure: FieldExposure) -> Schema:
        doc = exposure.documentation
        type_ref = exposure.resolved_type
        base = build_type_schema(type_ref, self.stack, self.registry)

        description = PropertyExtractor.extract_description(doc)
        nullable = PropertyExtractor.extract_nullable(doc)
        extensions = PropertyExtractor.extract_extensions(doc)

        if doc.get("is_array") and base.type != SchemaTypes.ARRAY:
            base = Schema(type=SchemaTypes.ARRAY, items=base)

        if _is_named(base):
            schema = Schema.reference_to(base, description=description, nullable=nullable)
            if extensions and schema is base:
                schema = Schema(all_of=[base])
            if schema is not base:
                schema.extensions.update(extensions)
            return schema

        PropertyExtractor.apply_value_documentation(base, doc)
        if description is not None:
            base.description = description
        if nullable:
            base.nullable = True
        base.extensions.update(extensions)
        return base

    @staticmethod
    def is_required(exposure: FieldExposure) -> bool:
        """Only documented fields that are always present are required."""
        if exposure.conditional:
            return False
        return doc_flag(exposure.documentation.get("required"))

    def _merge_exposure(self, schema: Schema, exposure: FieldExposure) -> None:
        nested = build_type_schema(exposure.resolved_type, self.stack, self.registry)
        for part in _flatten(nested):
            for name, prop in part.properties.items():
                required = name in part.required and not exposure.conditional
                schema.add_property(name, prop, required=required)


def doc_flag(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _is_named(schema: Schema) -> bool:
    return schema.canonical_name is not None or schema.is_reference_wrapper()


def _flatten(schema: Schema, depth: int = 0) -> List[Schema]:
    """Object parts of a (possibly composed) schema."""
    if depth > 10:
        return []
    parts = [schema] if schema.properties else []
    for member in schema.all_of:
        parts.extend(_flatten(member, depth + 1))
    return parts
