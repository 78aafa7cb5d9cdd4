"""
Introspection engine.

- EntityIntrospector: structural entity descriptors -> object schemas
- ContractIntrospector: validation contracts -> object schemas
- build_type_schema(): any type reference -> schema (via type resolvers)
- constraints: predicate trees -> ConstraintSet -> schema constraints

`introspectors` is the default, ordered registry.
"""

from .base import Introspector, IntrospectorRegistry
from .contract_introspector import ContractIntrospector
from .entity_introspector import EntityIntrospector
from .type_schema import build_type_schema, build_type_spec_schema

introspectors = IntrospectorRegistry()
introspectors.register(EntityIntrospector)
introspectors.register(ContractIntrospector)

__all__ = [
    "ContractIntrospector",
    "EntityIntrospector",
    "Introspector",
    "IntrospectorRegistry",
    "build_type_schema",
    "build_type_spec_schema",
    "introspectors",
]
