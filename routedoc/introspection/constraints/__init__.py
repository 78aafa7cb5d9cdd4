"""
Constraint extraction for contract fields.

- ConstraintSet: flat value object per field
- AstWalker / PredicateHandler: predicate tree -> ConstraintSet
- constraint_merger.merge: rule-derived + type-derived sets
- ConstraintExtractor: per-field sets for a whole contract
- ConstraintApplier: ConstraintSet -> Schema
"""

from .constraint_set import ConstraintSet
from .ast_walker import AstWalker
from .predicate_handler import PredicateHandler
from .constraint_merger import merge
from .constraint_extractor import ConstraintExtractor, extract_type_constraints
from .constraint_applier import ConstraintApplier

__all__ = [
    "ConstraintSet",
    "AstWalker",
    "PredicateHandler",
    "merge",
    "ConstraintExtractor",
    "extract_type_constraints",
    "ConstraintApplier",
]
