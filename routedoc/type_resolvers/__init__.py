"""
Type resolvers.

- DescriptorResolver: entity/contract descriptors and names bound to them
- ArrayResolver: "[Name]" strings and List[X] generics
- WrappedTypeResolver: TypeSpec chains and Optional[X]
- PrimitiveResolver: builtin classes, type names and Enum classes

`type_resolvers` is the default, ordered registry (first match wins).
"""

from .array_resolver import ArrayResolver
from .base import TypeResolver, register_named_type, resolve_type, unregister_named_type
from .descriptor_resolver import DescriptorResolver
from .primitive_resolver import PrimitiveResolver
from .registry import TypeResolverRegistry
from .wrapped_type_resolver import WrappedTypeResolver

type_resolvers = TypeResolverRegistry()
type_resolvers.register(DescriptorResolver)
type_resolvers.register(ArrayResolver)
type_resolvers.register(WrappedTypeResolver)
type_resolvers.register(PrimitiveResolver)

__all__ = [
    "ArrayResolver",
    "DescriptorResolver",
    "PrimitiveResolver",
    "TypeResolver",
    "TypeResolverRegistry",
    "WrappedTypeResolver",
    "register_named_type",
    "resolve_type",
    "type_resolvers",
    "unregister_named_type",
]
