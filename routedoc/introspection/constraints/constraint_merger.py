"""Merges two ConstraintSets into the first."""
from typing import Optional

from routedoc.introspection.constraints.constraint_set import ConstraintSet

SCALAR_FIELDS = [
    "enum",
    "pattern",
    "format",
    "type_predicate",
    "parity",
    "min_size",
    "max_size",
    "minimum",
    "maximum",
    "excluded_values",
]

FLAG_FIELDS = ["nullable", "exclusive_minimum", "exclusive_maximum"]


def merge(target: ConstraintSet, source: Optional[ConstraintSet]) -> ConstraintSet:
    """
    Merge source into target and return target.

    Scalars keep the first non-null value, flags OR together, lists union.
    `required` is the exception: an explicit value in source always wins.
    """
    if source is None:
        return target

    for name in SCALAR_FIELDS:
        if getattr(target, name) is None and getattr(source, name) is not None:
            setattr(target, name, getattr(source, name))

    for name in FLAG_FIELDS:
        if getattr(source, name):
            setattr(target, name, True)
        elif getattr(target, name) is None:
            setattr(target, name, getattr(source, name))

    if source.required is not None:
        target.required = source.required

    for key, value in source.extensions.items():
        target.extensions.setdefault(key, value)

    for name in source.unhandled_predicates:
        if name not in target.unhandled_predicates:
            target.unhandled_predicates.append(name)

    return target
