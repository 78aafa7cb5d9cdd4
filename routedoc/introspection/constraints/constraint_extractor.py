"""Extracts per-field ConstraintSets from a contract's rules and types."""
import logging
from typing import Dict

from routedoc.descriptors.contract import ContractDescriptor, TypeSpec
from routedoc.descriptors.predicates import Combinator
from routedoc.introspection.constraints import constraint_merger
from routedoc.introspection.constraints.ast_walker import AstWalker
from routedoc.introspection.constraints.constraint_set import ConstraintSet

logger = logging.getLogger(__name__)


class ConstraintExtractor:
    """Rule-derived constraints first, type-derived ones merged on top."""

    def __init__(self, contract: ContractDescriptor):
        self.contract = contract
        self.walker = AstWalker()

    @classmethod
    def extract(cls, contract: ContractDescriptor) -> Dict[str, ConstraintSet]:
        return cls(contract).run()

    def run(self) -> Dict[str, ConstraintSet]:
        constraints: Dict[str, ConstraintSet] = {}
        self._extract_from_rules(constraints)
        self._extract_from_types(constraints)
        return constraints

    def _extract_from_rules(self, constraints: Dict[str, ConstraintSet]) -> None:
        for name, node in self.contract.all_rules().items():
            extracted = self.walker.walk(node)
            # optional keys are declared as implications
            extracted.required = not (isinstance(node, Combinator) and node.kind == "implication")
            constraint_merger.merge(constraints.setdefault(str(name), ConstraintSet()), extracted)

    def _extract_from_types(self, constraints: Dict[str, ConstraintSet]) -> None:
        for name, declared in self.contract.all_types().items():
            if not isinstance(declared, TypeSpec):
                continue
            for node in type_rule_asts(declared):
                constraint_merger.merge(constraints.setdefault(str(name), ConstraintSet()), self.walker.walk(node))


def type_rule_asts(spec: TypeSpec):
    """Rules attached anywhere along a wrapper chain, outermost first."""
    from routedoc.introspection.type_unwrapper import TypeUnwrapper

    asts = []
    for link in TypeUnwrapper.chain(spec):
        asts.extend(link.rule_asts())
    return asts


def extract_type_constraints(spec: TypeSpec) -> ConstraintSet:
    """Constraints carried by a type spec on its own (outside a contract)."""
    walker = AstWalker()
    constraints = ConstraintSet()
    for node in type_rule_asts(spec):
        constraint_merger.merge(constraints, walker.walk(node))
    return constraints
