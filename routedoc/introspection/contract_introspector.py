"""
Contract Introspector - builds object schemas from validation contracts.

Each field merges constraints from two sources:
- the rule predicate attached to the field name
- rules and metadata carried by the field's declared type
"""

import logging
from typing import Any, Dict, List, Optional

from routedoc.constants import CYCLE_DESCRIPTION, SchemaTypes
from routedoc.descriptors.contract import ContractDescriptor, TypeSpec
from routedoc.introspection.base import Introspector
from routedoc.introspection.constraints import ConstraintApplier, ConstraintExtractor, ConstraintSet
from routedoc.introspection.inheritance_handler import InheritanceHandler, anonymous_key
from routedoc.introspection.property_extractor import PropertyExtractor
from routedoc.introspection.type_schema import build_type_schema, build_type_spec_schema
from routedoc.introspection.type_unwrapper import TypeUnwrapper
from routedoc.schema.models import Schema
from routedoc.schema.registry import ProcessingStack, SchemaRegistry
from routedoc.type_resolvers.base import ensure_context
from routedoc.type_resolvers.wrapped_type_resolver import optional_member

logger = logging.getLogger(__name__)


class ContractIntrospector(Introspector):
    """Builds the schema for one contract descriptor."""

    def __init__(
        self,
        contract: ContractDescriptor,
        stack: Optional[ProcessingStack] = None,
        registry: Optional[SchemaRegistry] = None,
    ):
        self.contract = contract
        self.stack, self.registry = ensure_context(stack, registry)
        self._constraints: Optional[Dict[str, ConstraintSet]] = None

    @classmethod
    def handles(cls, subject: Any) -> bool:
        return isinstance(subject, ContractDescriptor)

    @classmethod
    def build_schema(cls, subject: Any, stack=None, registry=None) -> Schema:
        return cls(subject, stack, registry).build()

    @property
    def constraints(self) -> Dict[str, ConstraintSet]:
        if self._constraints is None:
            self._constraints = ConstraintExtractor.extract(self.contract)
        return self._constraints

    def build(self) -> Schema:
        name = self.contract.name
        if name:
            cached = self.registry.get(name)
            if cached is not None:
                if name in self.stack:
                    logger.debug(f"Cycle detected at contract {name}")
                    if cached.description is None:
                        cached.description = CYCLE_DESCRIPTION
                    return cached
                if not cached.is_empty():
                    return cached

        handler = InheritanceHandler(self.contract, self.stack, self.registry)
        if handler.is_inherited():
            return handler.build_inherited_schema(
                handler.find_parent_contract(), self.add_fields, self._apply_documentation
            )
        return self._build_flat(name)

    def _build_flat(self, name: Optional[str]) -> Schema:
        schema = Schema(type=SchemaTypes.OBJECT, canonical_name=name)
        if name:
            schema = self.registry.put(name, schema)
        else:
            name = anonymous_key(self.contract)
            if name in self.stack:
                logger.debug(f"Cycle detected at anonymous contract {name}")
                return Schema(type=SchemaTypes.OBJECT, description=CYCLE_DESCRIPTION)

        # documented before the fields so a cycle marker never hides it
        self._apply_documentation(schema)
        self.stack.push(name)
        try:
            self.add_fields(schema, self.contract.field_names())
        finally:
            self.stack.pop()
        return schema

    def add_fields(self, schema: Schema, names: List[str]) -> None:
        types = self.contract.all_types()
        for field_name, declared in types.items():
            key = str(field_name)
            if key not in names:
                continue
            constraints = self.constraints.get(key)
            schema.add_property(
                key,
                self.build_field_schema(declared, constraints),
                required=self.is_required(declared, constraints),
            )

    def build_field_schema(self, declared: Any, constraints: Optional[ConstraintSet] = None) -> Schema:
        constraints = constraints or ConstraintSet()
        if isinstance(declared, TypeSpec):
            return build_type_spec_schema(declared, self.stack, self.registry, constraints)

        schema = build_type_schema(declared, self.stack, self.registry)
        if schema.canonical_name is not None:
            return Schema.reference_to(schema, nullable=constraints.nullable)
        if schema.is_reference_wrapper():
            if constraints.nullable:
                schema.nullable = True
            return schema
        return ConstraintApplier(schema, constraints).apply()

    @staticmethod
    def is_required(declared: Any, constraints: Optional[ConstraintSet] = None) -> bool:
        """
        Declared structure wins over rule shape.

        An explicit `required` in type metadata decides; optional types and
        omittable metadata are not required; otherwise the merged
        constraints decide, defaulting to required.
        """
        if isinstance(declared, TypeSpec):
            meta = TypeUnwrapper.merged_meta(declared)
            if isinstance(meta.get("required"), bool):
                return meta["required"]
            if TypeUnwrapper.is_nullable(declared) or meta.get("omittable"):
                return False
        elif optional_member(declared) is not None:
            return False

        if constraints is not None and constraints.required is not None:
            return constraints.required
        return True

    def _apply_documentation(self, schema: Schema) -> None:
        doc = self.contract.documentation
        if schema.description is None:
            schema.description = PropertyExtractor.extract_description(doc)
        PropertyExtractor.apply_entity_level_properties(schema, doc)
        schema.extensions.update(PropertyExtractor.extract_extensions(doc))
