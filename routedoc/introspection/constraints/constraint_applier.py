"""Writes type metadata and extracted constraints onto a Schema."""
from typing import Any, Dict, Optional

from routedoc.constants import SchemaTypes
from routedoc.introspection.constraints.constraint_set import ConstraintSet
from routedoc.schema.models import Schema

# Never surfaced in x-unhandledPredicates
IGNORED_PREDICATES = ["key", "str", "int", "bool", "boolean", "array", "hash", "number", "float"]

NUMERIC_TYPES = [SchemaTypes.INTEGER, SchemaTypes.NUMBER]


class ConstraintApplier:
    """
    Applies constraints to a schema.

    Values already present on the schema win; constraints only fill gaps.
    """

    def __init__(self, schema: Schema, constraints: Optional[ConstraintSet], meta: Optional[Dict[str, Any]] = None):
        self.schema = schema
        self.constraints = constraints
        self.meta = meta or {}

    def apply(self) -> Schema:
        self.apply_meta()
        self.apply_rule_constraints()
        return self.schema

    def apply_meta(self) -> None:
        if self.schema.type == SchemaTypes.STRING:
            self._apply_string_meta()
        elif self.schema.type in NUMERIC_TYPES:
            self._apply_numeric_meta()
        elif self.schema.type == SchemaTypes.ARRAY:
            self._apply_array_meta()

    def apply_rule_constraints(self) -> None:
        if self.constraints is None:
            return
        if self.schema.type == SchemaTypes.STRING:
            self._apply_string_constraints()
        elif self.schema.type == SchemaTypes.ARRAY:
            self._apply_array_constraints()
        elif self.schema.type in NUMERIC_TYPES:
            self._apply_numeric_constraints()
        self._apply_common_constraints()
        self._apply_extension_constraints()
        self._attach_unhandled()

    def _apply_string_meta(self):
        meta = self.meta
        min_length = _first(meta, "min_size", "min_length")
        max_length = _first(meta, "max_size", "max_length")
        if min_length is not None:
            self.schema.min_length = min_length
        if max_length is not None:
            self.schema.max_length = max_length
        if meta.get("pattern"):
            self.schema.pattern = meta["pattern"]

    def _apply_array_meta(self):
        min_items = _first(self.meta, "min_size", "min_items")
        max_items = _first(self.meta, "max_size", "max_items")
        if min_items is not None:
            self.schema.min_items = min_items
        if max_items is not None:
            self.schema.max_items = max_items

    def _apply_numeric_meta(self):
        meta = self.meta
        if meta.get("gt") is not None:
            self.schema.minimum = meta["gt"]
            self.schema.exclusive_minimum = True
        elif meta.get("gteq") is not None:
            self.schema.minimum = meta["gteq"]

        if meta.get("lt") is not None:
            self.schema.maximum = meta["lt"]
            self.schema.exclusive_maximum = True
        elif meta.get("lteq") is not None:
            self.schema.maximum = meta["lteq"]

    def _apply_string_constraints(self):
        c = self.constraints
        if self.schema.min_length is None and c.min_size is not None:
            self.schema.min_length = c.min_size
        if self.schema.max_length is None and c.max_size is not None:
            self.schema.max_length = c.max_size
        if self.schema.pattern is None and c.pattern is not None:
            self.schema.pattern = c.pattern

    def _apply_array_constraints(self):
        c = self.constraints
        if self.schema.min_items is None and c.min_size is not None:
            self.schema.min_items = c.min_size
        if self.schema.max_items is None and c.max_size is not None:
            self.schema.max_items = c.max_size

    def _apply_numeric_constraints(self):
        c = self.constraints
        numeric_min = c.minimum if c.minimum is not None else c.min_size
        numeric_max = c.maximum if c.maximum is not None else c.max_size
        if self.schema.minimum is None and numeric_min is not None:
            self.schema.minimum = numeric_min
        if self.schema.maximum is None and numeric_max is not None:
            self.schema.maximum = numeric_max
        self.schema.exclusive_minimum = self.schema.exclusive_minimum or c.exclusive_minimum
        self.schema.exclusive_maximum = self.schema.exclusive_maximum or c.exclusive_maximum

    def _apply_common_constraints(self):
        c = self.constraints
        if self.schema.enum is None and c.enum is not None:
            self.schema.enum = list(c.enum)
        if c.nullable:
            self.schema.nullable = True
        if self.schema.format is None and c.format is not None:
            self.schema.format = c.format

    def _apply_extension_constraints(self):
        c = self.constraints
        for key, value in c.extensions.items():
            self._apply_extension(key, value)
        self._apply_extension("x-excludedValues", c.excluded_values)
        self._apply_extension("x-typePredicate", c.type_predicate)
        self._apply_extension("x-numberParity", c.parity)

    def _apply_extension(self, key: str, value: Any) -> None:
        if value is None:
            return
        self.schema.extensions.setdefault(key, value)

    def _attach_unhandled(self):
        filtered = [p for p in self.constraints.unhandled_predicates if p not in IGNORED_PREDICATES]
        if filtered:
            self.schema.extensions["x-unhandledPredicates"] = filtered


def _first(meta: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if meta.get(key) is not None:
            return meta[key]
    return None
