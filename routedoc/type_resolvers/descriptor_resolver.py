"""Resolver for entity and contract descriptors (and names bound to them)."""
from typing import Any, Optional

from routedoc.descriptors.contract import ContractDescriptor
from routedoc.descriptors.entity import EntityDescriptor
from routedoc.schema.models import Schema
from routedoc.type_resolvers.base import TypeResolver, ensure_context, resolve_type

DESCRIPTOR_TYPES = (EntityDescriptor, ContractDescriptor)


class DescriptorResolver(TypeResolver):
    """Hands descriptors to the introspector registry, sharing stack and registry."""

    @classmethod
    def handles(cls, type_ref: Any) -> bool:
        if isinstance(type_ref, DESCRIPTOR_TYPES):
            return True
        if isinstance(type_ref, str) and not type_ref.startswith("["):
            return isinstance(resolve_type(type_ref), DESCRIPTOR_TYPES)
        return False

    @classmethod
    def build_schema(cls, type_ref: Any, stack=None, registry=None) -> Optional[Schema]:
        from routedoc.introspection import introspectors

        stack, registry = ensure_context(stack, registry)
        return introspectors.build_schema(resolve_type(type_ref), stack, registry)
