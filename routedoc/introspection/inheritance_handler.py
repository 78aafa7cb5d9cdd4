"""allOf composition for contracts that extend another contract."""
from typing import List, Optional

from routedoc.constants import SchemaTypes
from routedoc.descriptors.contract import ContractDescriptor
from routedoc.introspection.cycle_tracker import CycleTracker
from routedoc.introspection.type_schema import build_type_schema
from routedoc.schema.models import Schema


def anonymous_key(contract: ContractDescriptor) -> str:
    """Stack key for a contract without a canonical name."""
    return f"<anonymous contract {id(contract)}>"


class InheritanceHandler:
    """Parent first (through the shared registry), then the child-only fields."""

    def __init__(self, contract: ContractDescriptor, stack, registry):
        self.contract = contract
        self.stack = stack
        self.registry = registry

    def find_parent_contract(self) -> Optional[ContractDescriptor]:
        return self.contract.parent

    def is_inherited(self) -> bool:
        return self.find_parent_contract() is not None

    def parent_field_names(self, parent: ContractDescriptor) -> List[str]:
        return parent.field_names()

    def build_inherited_schema(self, parent: ContractDescriptor, field_builder, documenter=None) -> Schema:
        """
        field_builder(schema, names) adds the named fields to schema; it is the
        contract introspector's own property loop. documenter(schema) applies
        contract-level documentation before any field is walked.
        """
        name = self.contract.name
        schema = Schema(canonical_name=name)
        if name:
            schema = self.registry.put(name, schema)
        if documenter is not None:
            documenter(schema)

        tracker = CycleTracker(name or anonymous_key(self.contract), self.stack)
        with tracker.tracking():
            parent_schema = build_type_schema(parent, self.stack, self.registry)
            parent_names = set(self.parent_field_names(parent))
            own_names = [n for n in self.contract.field_names() if n not in parent_names]

            child_schema = Schema(type=SchemaTypes.OBJECT)
            field_builder(child_schema, own_names)
            schema.all_of = [parent_schema, child_schema]
        return schema
