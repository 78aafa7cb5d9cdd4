"""Depth-first walk over a predicate tree into a ConstraintSet."""
import logging
from typing import List, Optional

from routedoc.descriptors.predicates import Combinator, Leaf, PredicateNode
from routedoc.introspection.constraints import constraint_merger
from routedoc.introspection.constraints.argument_extractor import extract_list, extract_literal
from routedoc.introspection.constraints.constraint_set import ConstraintSet
from routedoc.introspection.constraints.predicate_handler import PredicateHandler

logger = logging.getLogger(__name__)

# Combinators whose children all constrain the same value
CONJUNCTIONS = ["and", "implication", "key", "set"]


class AstWalker:
    """Walks Leaf/Combinator trees; every node kind has an explicit branch."""

    def walk(self, node: Optional[PredicateNode], constraints: Optional[ConstraintSet] = None) -> ConstraintSet:
        constraints = constraints if constraints is not None else ConstraintSet()
        if node is None:
            return constraints

        if isinstance(node, Leaf):
            PredicateHandler(constraints).handle(node)
        elif isinstance(node, Combinator):
            self._walk_combinator(node, constraints)
        else:
            logger.warning(f"Unknown predicate node: {node!r}")
        return constraints

    def _walk_combinator(self, node: Combinator, constraints: ConstraintSet) -> None:
        if node.kind in CONJUNCTIONS:
            for child in node.children:
                self.walk(child, constraints)
        elif node.kind == "or":
            self._walk_disjunction(node.children, constraints)
        elif node.kind == "not":
            self._walk_negation(node.children, constraints)
        else:
            # "each" constrains array members, which have no slot here
            _record_unhandled(constraints, node.kind)

    def _walk_disjunction(self, children: List[PredicateNode], constraints: ConstraintSet) -> None:
        """
        nil-or-X becomes nullable X; alternatives that are all enums union.

        Any other alternative set cannot be flattened and is recorded.
        """
        branches = [self.walk(child) for child in children]
        nullable = any(b.nullable for b in branches)
        others = [b for b in branches if not (b.nullable and _only_nullable(b))]

        if nullable:
            constraints.nullable = True

        if len(others) == 1:
            branch = others[0]
            branch.required = None
            constraint_merger.merge(constraints, branch)
        elif others and all(b.enum is not None for b in others):
            merged = []
            for branch in others:
                merged.extend(v for v in branch.enum if v not in merged)
            if constraints.enum is None:
                constraints.enum = merged
        elif others:
            _record_unhandled(constraints, "or")

    def _walk_negation(self, children: List[PredicateNode], constraints: ConstraintSet) -> None:
        child = children[0] if len(children) == 1 else None
        if isinstance(child, Leaf) and child.operator == "eql" and child.args:
            excluded = [extract_literal(child.args[0])]
        elif isinstance(child, Leaf) and child.operator == "included_in" and child.args:
            excluded = extract_list(child.args[0])
        else:
            excluded = None

        if excluded is None:
            _record_unhandled(constraints, "not")
            return
        current = constraints.excluded_values or []
        constraints.excluded_values = current + [v for v in excluded if v not in current]


def _only_nullable(constraints: ConstraintSet) -> bool:
    probe = ConstraintSet(nullable=constraints.nullable)
    return constraints == probe


def _record_unhandled(constraints: ConstraintSet, name: str) -> None:
    if name not in constraints.unhandled_predicates:
        constraints.unhandled_predicates.append(name)
