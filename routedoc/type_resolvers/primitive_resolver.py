"""Primitive type resolver: builtin classes, type names and Enum classes."""
from enum import Enum
from typing import Any, Optional

from routedoc import constants
from routedoc.constants import SchemaTypes
from routedoc.schema.models import Schema
from routedoc.type_resolvers.base import TypeResolver, resolve_type


class PrimitiveResolver(TypeResolver):
    """
    Resolves str/int/float/bool/dict/list, date and time classes, Decimal,
    UUID, their names ("String", "Integer", "DateTime", ...) and Enum classes.

    Registered last: it is the fallback for anything primitive-looking.
    """

    @classmethod
    def handles(cls, type_ref: Any) -> bool:
        if _is_enum_class(type_ref):
            return True
        if isinstance(type_ref, type):
            return constants.primitive_type(type_ref) is not None
        if not isinstance(type_ref, str) or type_ref.startswith("["):
            return False
        if constants.primitive_type(type_ref) is not None:
            return True

        resolved = resolve_type(type_ref)
        return _is_enum_class(resolved) or (
            isinstance(resolved, type) and constants.primitive_type(resolved) is not None
        )

    @classmethod
    def build_schema(cls, type_ref: Any, stack=None, registry=None) -> Optional[Schema]:
        if isinstance(type_ref, str) and constants.primitive_type(type_ref) is None:
            type_ref = resolve_type(type_ref)

        if _is_enum_class(type_ref):
            return cls._build_enum_schema(type_ref)

        schema_type = constants.primitive_type(type_ref) or SchemaTypes.STRING
        return Schema(type=schema_type, format=constants.format_for_type(type_ref))

    @staticmethod
    def _build_enum_schema(enum_class) -> Schema:
        values = [member.value for member in enum_class]
        if values and all(isinstance(v, bool) for v in values):
            schema_type = SchemaTypes.BOOLEAN
        elif values and all(isinstance(v, int) and not isinstance(v, bool) for v in values):
            schema_type = SchemaTypes.INTEGER
        elif values and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
            schema_type = SchemaTypes.NUMBER
        else:
            schema_type = SchemaTypes.STRING
            values = [v if isinstance(v, str) else str(v) for v in values]
        return Schema(type=schema_type, enum=values)


def _is_enum_class(obj: Any) -> bool:
    return isinstance(obj, type) and issubclass(obj, Enum)
