"""Resolver for wrapped types: TypeSpec chains and Optional[X]."""
import types
import typing
from typing import Any, Optional

from routedoc.descriptors.contract import TypeSpec
from routedoc.schema.models import Schema
from routedoc.type_resolvers.base import TypeResolver, ensure_context

UNION_ORIGINS = tuple(o for o in (typing.Union, getattr(types, "UnionType", None)) if o is not None)


class WrappedTypeResolver(TypeResolver):
    """
    Unwraps constrained/optional wrappers down to their core type.

    The core is resolved through the full chain; type-level rules and
    metadata are applied on top. Named cores are referenced, never mutated.
    """

    @classmethod
    def handles(cls, type_ref: Any) -> bool:
        return isinstance(type_ref, TypeSpec) or optional_member(type_ref) is not None

    @classmethod
    def build_schema(cls, type_ref: Any, stack=None, registry=None) -> Optional[Schema]:
        from routedoc.introspection.type_schema import build_type_schema, build_type_spec_schema

        stack, registry = ensure_context(stack, registry)
        if isinstance(type_ref, TypeSpec):
            return build_type_spec_schema(type_ref, stack, registry)

        schema = build_type_schema(optional_member(type_ref), stack, registry)
        if schema.canonical_name is not None:
            return Schema.reference_to(schema, nullable=True)
        schema.nullable = True
        return schema


def optional_member(type_ref: Any) -> Optional[Any]:
    """X for Optional[X] / Union[X, None]; None otherwise."""
    if typing.get_origin(type_ref) not in UNION_ORIGINS:
        return None
    args = [a for a in typing.get_args(type_ref) if a is not type(None)]
    if len(args) != 1 or len(args) == len(typing.get_args(type_ref)):
        return None
    return args[0]
