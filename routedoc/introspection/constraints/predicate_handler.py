"""Interprets leaf predicates, writing into a ConstraintSet."""
import logging
from typing import Callable, Dict

from routedoc.descriptors.predicates import Leaf
from routedoc.introspection.constraints import argument_extractor as args_of
from routedoc.introspection.constraints.constraint_set import ConstraintSet

logger = logging.getLogger(__name__)

FORMAT_PREDICATES = {
    "uuid": "uuid",
    "uuid_v4": "uuid",
    "uri": "uri",
    "url": "uri",
    "email": "email",
    "date": "date",
    "time": "date-time",
    "date_time": "date-time",
}

# Type checks already represented by the resolved type
TYPE_CHECK_PREDICATES = ["str", "int", "array", "hash", "number", "float", "decimal", "dict", "list"]


class PredicateHandler:
    """Dispatches on Leaf.operator; unknown operators are recorded as unhandled."""

    def __init__(self, constraints: ConstraintSet):
        self.constraints = constraints
        self._handlers: Dict[str, Callable[..., None]] = {
            "key": self._handle_key,
            "required": self._handle_key,
            "size": self._handle_size,
            "min_size": self._handle_size,
            "max_size": self._handle_max_size,
            "bytesize": self._handle_size,
            "min_bytesize": self._handle_size,
            "max_bytesize": self._handle_max_size,
            "range": self._handle_range,
            "maybe": self._handle_nil,
            "nil": self._handle_nil,
            "filled": self._handle_filled,
            "empty": self._handle_empty,
            "included_in": self._handle_included_in,
            "excluded_from": self._handle_excluded_from,
            "eql": self._handle_eql,
            "gt": self._handle_gt,
            "gteq": self._handle_gteq,
            "min": self._handle_gteq,
            "lt": self._handle_lt,
            "lteq": self._handle_lteq,
            "max": self._handle_lteq,
            "format": self._handle_format,
            "bool": self._handle_bool,
            "boolean": self._handle_bool,
            "type": self._handle_type,
            "odd": self._handle_odd,
            "even": self._handle_even,
            "multiple_of": self._handle_multiple_of,
            "divisible_by": self._handle_multiple_of,
            "true": self._handle_true,
            "false": self._handle_false,
        }

    def handle(self, node: Leaf) -> None:
        operator = node.operator
        if operator in FORMAT_PREDICATES:
            self.constraints.format = FORMAT_PREDICATES[operator]
            return
        if operator in TYPE_CHECK_PREDICATES:
            return

        handler = self._handlers.get(operator)
        if handler is None:
            logger.debug(f"Unhandled predicate: {operator}")
            if operator not in self.constraints.unhandled_predicates:
                self.constraints.unhandled_predicates.append(operator)
            return
        handler(node.args, operator)

    def _handle_key(self, args, operator):
        if self.constraints.required is None:
            self.constraints.required = True

    def _handle_size(self, args, operator):
        first = args[0] if args else None
        value_range = args_of.extract_range(first)
        if value_range is not None:
            self._set_size_bounds(value_range.begin, _inclusive_end(value_range))
            return

        min_value = args_of.extract_numeric(first)
        max_value = None
        if operator in ("size", "bytesize"):
            second = args[1] if len(args) > 1 else None
            max_value = args_of.extract_numeric(second)
            # size?(5) means exactly five
            if second is None:
                max_value = min_value
        self._set_size_bounds(min_value, max_value)

    def _handle_max_size(self, args, operator):
        value = args_of.extract_numeric(args[0]) if args else None
        if value is not None:
            self.constraints.max_size = value

    def _set_size_bounds(self, min_value, max_value):
        if min_value is not None:
            self.constraints.min_size = min_value
        if max_value is not None:
            self.constraints.max_size = max_value

    def _handle_range(self, args, operator):
        value_range = args_of.extract_range(args[0]) if args else None
        if value_range is None:
            return
        if value_range.begin is not None:
            self.constraints.minimum = value_range.begin
        if value_range.end is not None:
            self.constraints.maximum = value_range.end
            self.constraints.exclusive_maximum = value_range.exclude_end or None

    def _handle_nil(self, args, operator):
        self.constraints.nullable = True

    def _handle_filled(self, args, operator):
        self.constraints.nullable = False

    def _handle_empty(self, args, operator):
        self.constraints.min_size = 0
        self.constraints.max_size = 0

    def _handle_included_in(self, args, operator):
        first = args[0] if args else None
        value_range = args_of.extract_range(first)
        if value_range is not None and value_range.is_numeric():
            self._handle_range((value_range,), "range")
            return

        values = args_of.extract_list(first)
        if values is not None:
            self.constraints.enum = values

    def _handle_excluded_from(self, args, operator):
        values = args_of.extract_list(args[0]) if args else None
        if values is not None:
            self.constraints.excluded_values = values

    def _handle_eql(self, args, operator):
        value = args_of.extract_literal(args[0]) if args else None
        if value is not None:
            self.constraints.enum = [value]

    def _handle_gt(self, args, operator):
        value = args_of.extract_numeric(args[0]) if args else None
        if value is not None:
            self.constraints.minimum = value
            self.constraints.exclusive_minimum = True

    def _handle_gteq(self, args, operator):
        value = args_of.extract_numeric(args[0]) if args else None
        if value is not None:
            self.constraints.minimum = value
            self.constraints.exclusive_minimum = None

    def _handle_lt(self, args, operator):
        value = args_of.extract_numeric(args[0]) if args else None
        if value is not None:
            self.constraints.maximum = value
            self.constraints.exclusive_maximum = True

    def _handle_lteq(self, args, operator):
        value = args_of.extract_numeric(args[0]) if args else None
        if value is not None:
            self.constraints.maximum = value
            self.constraints.exclusive_maximum = None

    def _handle_format(self, args, operator):
        pattern = args_of.extract_pattern(args[0]) if args else None
        if pattern is not None:
            self.constraints.pattern = pattern

    def _handle_bool(self, args, operator):
        if self.constraints.type_predicate is None:
            self.constraints.type_predicate = "boolean"

    def _handle_type(self, args, operator):
        value = args_of.extract_literal(args[0]) if args else None
        if value is not None:
            self.constraints.type_predicate = value.__name__ if isinstance(value, type) else str(value)

    def _handle_odd(self, args, operator):
        self.constraints.parity = "odd"

    def _handle_even(self, args, operator):
        self.constraints.parity = "even"

    def _handle_multiple_of(self, args, operator):
        value = args_of.extract_numeric(args[0]) if args else None
        if value is not None:
            self.constraints.extensions.setdefault("x-multipleOf", value)

    def _handle_true(self, args, operator):
        self.constraints.enum = [True]

    def _handle_false(self, args, operator):
        self.constraints.enum = [False]


def _inclusive_end(value_range):
    if value_range.end is None or not value_range.exclude_end:
        return value_range.end
    return value_range.end - 1 if isinstance(value_range.end, int) else value_range.end
