"""allOf composition for entities whose parent declares a discriminator."""
import logging
from typing import Optional

from routedoc.descriptors.entity import EntityDescriptor
from routedoc.introspection.cycle_tracker import CycleTracker
from routedoc.introspection.discriminator_handler import DiscriminatorHandler
from routedoc.introspection.exposure_processor import ExposureProcessor
from routedoc.introspection.property_extractor import PropertyExtractor
from routedoc.introspection.type_schema import build_type_schema
from routedoc.constants import SchemaTypes
from routedoc.schema.models import Schema

logger = logging.getLogger(__name__)


class InheritanceBuilder:
    """Builds allOf: [parent, child-only fields]."""

    def __init__(self, entity: EntityDescriptor, stack, registry):
        self.entity = entity
        self.stack = stack
        self.registry = registry

    @staticmethod
    def find_parent_entity(entity: EntityDescriptor) -> Optional[EntityDescriptor]:
        return entity.parent

    @classmethod
    def inherits_with_discriminator(cls, entity: EntityDescriptor) -> bool:
        parent = cls.find_parent_entity(entity)
        return parent is not None and DiscriminatorHandler(parent).has_discriminator()

    def build_inherited_schema(self, parent: EntityDescriptor) -> Schema:
        name = self.entity.name
        tracker = CycleTracker(name, self.stack)
        existing = self.registry.get(name)
        if existing is not None:
            if tracker.is_cyclic():
                return tracker.handle_cycle(existing)
            if existing.all_of:
                return existing

        doc = self.entity.documentation
        schema = self.registry.put(
            name,
            Schema(canonical_name=name, description=PropertyExtractor.extract_description(doc)),
        )
        schema.extensions.update(PropertyExtractor.extract_extensions(doc))

        with tracker.tracking():
            parent_schema = build_type_schema(parent, self.stack, self.registry)
            child_schema = self.build_child_only_schema(parent)
            schema.all_of = [parent_schema, child_schema]

        logger.debug(f"{name} composed from {parent.name}")
        return schema

    def build_child_only_schema(self, parent: EntityDescriptor) -> Schema:
        parent_keys = set(parent.field_keys())
        own = [f for f in self.entity.exposures() if f.key not in parent_keys]

        child_schema = Schema(type=SchemaTypes.OBJECT)
        ExposureProcessor(self.entity, self.stack, self.registry).add_exposures_to_schema(child_schema, own)
        return child_schema
