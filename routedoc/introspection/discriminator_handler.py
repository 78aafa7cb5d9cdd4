"""Discriminator fields of polymorphic entities."""
import logging
from typing import Dict, Optional

from routedoc.descriptors.entity import EntityDescriptor
from routedoc.schema.models import Discriminator, Schema

logger = logging.getLogger(__name__)


class DiscriminatorHandler:
    """Finds the field documented with `is_discriminator` on an entity."""

    def __init__(self, entity: EntityDescriptor):
        self.entity = entity

    def has_discriminator(self) -> bool:
        return self.find_discriminator_field() is not None

    def find_discriminator_field(self) -> Optional[str]:
        for exposure in self.entity.exposures():
            if exposure.documentation.get("is_discriminator"):
                return exposure.key
        return None

    def apply(self, schema: Schema) -> None:
        field_name = self.find_discriminator_field()
        if field_name is not None:
            schema.discriminator = Discriminator(property_name=field_name)

    def resolve_mapping(self, schema: Schema, stack, registry) -> None:
        """
        Introspect subtypes named in `discriminator_mapping`.

        Must run after this entity left the stack, since every subtype
        builds its parent first.
        """
        raw_mapping = self.entity.documentation.get("discriminator_mapping") or {}
        if schema.discriminator is None or not raw_mapping:
            return

        from routedoc.introspection.type_schema import build_type_schema
        from routedoc.type_resolvers.base import resolve_type

        mapping: Dict[str, str] = {}
        for value, subtype in raw_mapping.items():
            subtype = resolve_type(subtype) or subtype
            # subtypes already on the stack are mid-build and keep their name
            if getattr(subtype, "name", None) in stack:
                mapping[str(value)] = subtype.name
                continue
            subtype_schema = build_type_schema(subtype, stack, registry)
            if subtype_schema.canonical_name is None:
                logger.warning(f"Discriminator value {value!r} of {self.entity.name} does not map to a named type")
                continue
            mapping[str(value)] = subtype_schema.canonical_name
        schema.discriminator.mapping = mapping
