"""
Entity Introspector - builds object schemas from structural entity descriptors.

Handles:
- Cache hits through the per-call schema registry
- Cycles (self and mutual references) via the processing stack
- Merged, conditional, aliased and array exposures
- Discriminators and allOf inheritance
"""

import logging
from typing import Any, Optional

from routedoc.constants import SchemaTypes
from routedoc.descriptors.entity import EntityDescriptor
from routedoc.introspection.base import Introspector
from routedoc.introspection.cycle_tracker import CycleTracker
from routedoc.introspection.discriminator_handler import DiscriminatorHandler
from routedoc.introspection.exposure_processor import ExposureProcessor
from routedoc.introspection.inheritance_builder import InheritanceBuilder
from routedoc.introspection.property_extractor import PropertyExtractor
from routedoc.schema.models import Schema
from routedoc.schema.registry import ProcessingStack, SchemaRegistry
from routedoc.type_resolvers.base import ensure_context

logger = logging.getLogger(__name__)


class EntityIntrospector(Introspector):
    """
    Builds the canonical schema for one entity descriptor.

    Usage:
    ```python
    user = EntityDescriptor("User")
    user.expose("id", declared_type=int, documentation={"required": True})
    user.expose("friends", declared_type="[User]")

    schema = EntityIntrospector.build_schema(user)
    ```
    """

    def __init__(
        self,
        entity: EntityDescriptor,
        stack: Optional[ProcessingStack] = None,
        registry: Optional[SchemaRegistry] = None,
    ):
        self.entity = entity
        self.stack, self.registry = ensure_context(stack, registry)
        self.cycle_tracker = CycleTracker(entity.name, self.stack)
        self.discriminator_handler = DiscriminatorHandler(entity)

    @classmethod
    def handles(cls, subject: Any) -> bool:
        return isinstance(subject, EntityDescriptor)

    @classmethod
    def build_schema(cls, subject: Any, stack=None, registry=None) -> Schema:
        return cls(subject, stack, registry).build()

    def build(self) -> Schema:
        cached = self.registry.get(self.entity.name)
        if cached is not None and not cached.is_empty() and not self.cycle_tracker.is_cyclic():
            logger.debug(f"Cache hit for {self.entity.name}")
            return cached

        if InheritanceBuilder.inherits_with_discriminator(self.entity):
            builder = InheritanceBuilder(self.entity, self.stack, self.registry)
            return builder.build_inherited_schema(InheritanceBuilder.find_parent_entity(self.entity))

        schema = cached or self.registry.put(
            self.entity.name,
            Schema(type=SchemaTypes.OBJECT, canonical_name=self.entity.name),
        )
        if self.cycle_tracker.is_cyclic():
            return self.cycle_tracker.handle_cycle(schema)

        with self.cycle_tracker.tracking():
            self._populate(schema)

        self.discriminator_handler.resolve_mapping(schema, self.stack, self.registry)
        return schema

    def _populate(self, schema: Schema) -> None:
        doc = self.entity.documentation
        if schema.description is None:
            schema.description = PropertyExtractor.extract_description(doc)
        if schema.nullable is None and PropertyExtractor.extract_nullable(doc):
            schema.nullable = True
        PropertyExtractor.apply_entity_level_properties(schema, doc)
        schema.extensions.update(PropertyExtractor.extract_extensions(doc))
        self.discriminator_handler.apply(schema)

        ExposureProcessor(self.entity, self.stack, self.registry).add_exposures_to_schema(schema)
