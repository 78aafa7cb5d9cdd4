"""Schema building shared by resolvers and introspectors."""
import logging
from typing import Any, Optional

from routedoc.constants import SchemaTypes
from routedoc.descriptors.contract import TypeSpec
from routedoc.introspection.constraints import ConstraintApplier, ConstraintSet, extract_type_constraints
from routedoc.introspection.type_unwrapper import TypeUnwrapper
from routedoc.schema.models import Schema
from routedoc.schema.registry import ProcessingStack, SchemaRegistry
from routedoc.type_resolvers.base import ensure_context, infer_format_from_name

logger = logging.getLogger(__name__)


def build_type_schema(
    type_ref: Any,
    stack: Optional[ProcessingStack] = None,
    registry: Optional[SchemaRegistry] = None,
) -> Schema:
    """
    Schema for any type reference.

    Never returns None: a reference no resolver handles degrades to a
    string schema with a format guessed from its name.
    """
    from routedoc.type_resolvers import type_resolvers

    stack, registry = ensure_context(stack, registry)
    if type_ref is None:
        return Schema(type=SchemaTypes.STRING)

    schema = type_resolvers.build_schema(type_ref, stack, registry)
    if schema is not None:
        return schema

    type_name = type_ref.__name__ if isinstance(type_ref, type) else str(type_ref)
    logger.warning(f"Could not resolve type {type_name!r}, falling back to string")
    return Schema(type=SchemaTypes.STRING, format=infer_format_from_name(type_name))


def build_type_spec_schema(
    spec: TypeSpec,
    stack: Optional[ProcessingStack] = None,
    registry: Optional[SchemaRegistry] = None,
    constraints: Optional[ConstraintSet] = None,
) -> Schema:
    """
    Schema for a wrapped type.

    `constraints` are the merged field constraints when called from a
    contract; standalone specs use the rules along their own chain.
    """
    stack, registry = ensure_context(stack, registry)
    if constraints is None:
        constraints = extract_type_constraints(spec)

    meta = TypeUnwrapper.merged_meta(spec)
    nullable = TypeUnwrapper.is_nullable(spec) or bool(constraints.nullable)
    primitive, member = TypeUnwrapper.derive_primitive_and_member(spec)

    if primitive is list:
        items = build_type_schema(member, stack, registry) if member is not None else Schema(type=SchemaTypes.STRING)
        schema = Schema(type=SchemaTypes.ARRAY, items=items)
    else:
        schema = build_type_schema(primitive, stack, registry)
        if schema.canonical_name is not None or schema.is_reference_wrapper():
            return _reference(schema, meta, nullable)

    schema.format = meta.get("format") or infer_format_from_name(TypeUnwrapper.name(spec)) or schema.format
    description = meta.get("description") or meta.get("desc")
    if isinstance(description, str):
        schema.description = description
    if nullable:
        schema.nullable = True

    values = TypeUnwrapper.values(spec)
    if values is not None:
        schema.enum = values

    ConstraintApplier(schema, constraints, meta).apply()
    return schema


def _reference(schema: Schema, meta, nullable: bool) -> Schema:
    description = meta.get("description") or meta.get("desc")
    if not isinstance(description, str):
        description = None
    if schema.is_reference_wrapper():
        schema.description = schema.description or description
        schema.nullable = True if nullable else schema.nullable
        return schema
    return Schema.reference_to(schema, description=description, nullable=nullable or None)
