"""Resolver for array types: "[Name]" strings and List[X]-style generics."""
import re
import typing
from typing import Any, Optional

from routedoc.constants import SchemaTypes
from routedoc.schema.models import Schema
from routedoc.type_resolvers.base import TypeResolver, ensure_context

ARRAY_PATTERN = re.compile(r"^\[\s*(.+?)\s*\]$")

ARRAY_ORIGINS = (list, tuple, set, frozenset)


class ArrayResolver(TypeResolver):
    """Builds {type: array} with items resolved through the full resolver chain."""

    @classmethod
    def handles(cls, type_ref: Any) -> bool:
        return cls.member_of(type_ref) is not None

    @classmethod
    def build_schema(cls, type_ref: Any, stack=None, registry=None) -> Optional[Schema]:
        from routedoc.introspection.type_schema import build_type_schema

        stack, registry = ensure_context(stack, registry)
        items = build_type_schema(cls.member_of(type_ref), stack, registry)
        return Schema(type=SchemaTypes.ARRAY, items=items)

    @staticmethod
    def member_of(type_ref: Any) -> Optional[Any]:
        """Member type of an array reference, or None when it is not one."""
        if isinstance(type_ref, str):
            match = ARRAY_PATTERN.match(type_ref.strip())
            return match.group(1) if match else None

        if typing.get_origin(type_ref) in ARRAY_ORIGINS:
            args = [a for a in typing.get_args(type_ref) if a is not Ellipsis]
            return args[0] if args else str
        return None
