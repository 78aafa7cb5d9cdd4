"""
Unit tests for constraint extraction

Tests:
- Predicate parsing: tagged lists -> Leaf/Combinator
- AST walker and predicate handler: predicate trees -> ConstraintSet
- Merger: first-non-null scalars, OR-ed flags, required override
- Applier: ConstraintSet -> Schema, extension passthrough
"""

import re

import pytest

from routedoc.descriptors.predicates import Combinator, Leaf, ValueRange, parse_predicate
from routedoc.introspection.constraints import AstWalker, ConstraintApplier, ConstraintSet, merge
from routedoc.introspection.constraints.argument_extractor import range_to_enum_list
from routedoc.schema.models import Schema


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def walker():
    return AstWalker()


def walk(walker, raw):
    return walker.walk(parse_predicate(raw))


# ============================================================================
# TESTS: Predicate parsing
# ============================================================================


class TestParsePredicate:
    """Test tagged-list parsing"""

    def test_parse_leaf(self):
        node = parse_predicate(["min_size?", 5])

        assert node == Leaf("min_size", (5,))

    def test_parse_conjunction_with_child_list(self):
        node = parse_predicate(["and", [["key"], ["filled"]]])

        assert isinstance(node, Combinator)
        assert node.kind == "and"
        assert node.children == (Leaf("key"), Leaf("filled"))

    def test_parse_key_with_subject(self):
        node = parse_predicate(["key", "email", [["str"], ["filled"]]])

        assert node.kind == "key"
        assert node.subject == "email"
        assert len(node.children) == 2

    def test_parse_tagged_arguments(self):
        node = parse_predicate(["included_in", {"range": [1, 10]}])
        pattern = parse_predicate(["format", {"regex": "^[a-z]+$"}])

        assert node.args == (ValueRange(1, 10),)
        assert pattern.args[0].pattern == "^[a-z]+$"

    def test_malformed_node_returns_none(self):
        assert parse_predicate([42, "x"]) is None
        assert parse_predicate([]) is None


# ============================================================================
# TESTS: AST walker and predicate handler
# ============================================================================


class TestAstWalker:
    """Test predicate tree walking"""

    def test_string_constraints(self, walker):
        constraints = walk(
            walker,
            ["and", [["key"], ["str"], ["min_size", 5], ["max_size", 50], ["included_in", ["draft", "published"]]]],
        )

        assert constraints.required is True
        assert constraints.min_size == 5
        assert constraints.max_size == 50
        assert constraints.enum == ["draft", "published"]
        assert constraints.unhandled_predicates == []

    def test_size_with_single_argument_is_exact(self, walker):
        constraints = walk(walker, ["size", 3])

        assert constraints.min_size == 3
        assert constraints.max_size == 3

    def test_numeric_bounds(self, walker):
        constraints = walk(walker, ["and", [["gt", 0], ["lteq", 100]]])

        assert constraints.minimum == 0
        assert constraints.exclusive_minimum is True
        assert constraints.maximum == 100
        assert not constraints.exclusive_maximum

    def test_non_numeric_bound_keeps_earlier_bound(self, walker):
        constraints = walk(walker, ["and", [["gteq", 3], ["gt", "abc"], ["lteq", 9], ["lt", None]]])

        assert constraints.minimum == 3
        assert not constraints.exclusive_minimum
        assert constraints.maximum == 9
        assert not constraints.exclusive_maximum

    def test_numeric_range_membership_becomes_bounds(self, walker):
        constraints = walk(walker, ["included_in", range(1, 11)])

        assert constraints.minimum == 1
        assert constraints.maximum == 11
        assert constraints.exclusive_maximum is True
        assert constraints.enum is None

    def test_nil_or_value_is_nullable_value(self, walker):
        constraints = walk(walker, ["or", [["nil"], ["and", [["str"], ["min_size", 2]]]]])

        assert constraints.nullable is True
        assert constraints.min_size == 2
        assert "or" not in constraints.unhandled_predicates

    def test_enum_alternatives_union(self, walker):
        constraints = walk(walker, ["or", [["included_in", ["a", "b"]], ["eql", "c"]]])

        assert constraints.enum == ["a", "b", "c"]

    def test_unflattenable_disjunction_is_recorded(self, walker):
        constraints = walk(walker, ["or", [["int"], ["min_size", 2]]])

        assert "or" in constraints.unhandled_predicates

    def test_negated_membership_becomes_excluded_values(self, walker):
        constraints = walk(walker, ["not", [["included_in", ["root", "admin"]]]])

        assert constraints.excluded_values == ["root", "admin"]

    def test_format_and_pattern(self, walker):
        constraints = walk(walker, ["and", [["uuid"], ["format", re.compile(r"^\d+$")]]])

        assert constraints.format == "uuid"
        assert constraints.pattern == r"^\d+$"

    def test_unknown_predicate_is_recorded(self, walker):
        constraints = walk(walker, ["and", [["str"], ["luhn_checksum"]]])

        assert constraints.unhandled_predicates == ["luhn_checksum"]

    def test_parity_and_multiple(self, walker):
        constraints = walk(walker, ["and", [["odd"], ["multiple_of", 3]]])

        assert constraints.parity == "odd"
        assert constraints.extensions == {"x-multipleOf": 3}


class TestRangeExpansion:
    """Test non-numeric range expansion"""

    def test_character_range(self):
        assert range_to_enum_list(ValueRange("a", "e")) == ["a", "b", "c", "d", "e"]

    def test_exclusive_end(self):
        assert range_to_enum_list(ValueRange("a", "c", exclude_end=True)) == ["a", "b"]

    def test_word_range(self):
        assert range_to_enum_list(ValueRange("aa", "ad")) == ["aa", "ab", "ac", "ad"]

    def test_oversized_range_is_not_expanded(self):
        assert range_to_enum_list(ValueRange("aa", "zz")) is None

    def test_numeric_range_is_not_expanded(self):
        assert range_to_enum_list(ValueRange(1, 5)) is None


# ============================================================================
# TESTS: Merger
# ============================================================================


class TestMerge:
    """Test constraint merging"""

    def test_first_non_null_scalar_wins(self):
        target = ConstraintSet(min_size=1)
        merge(target, ConstraintSet(min_size=5, max_size=10))

        assert target.min_size == 1
        assert target.max_size == 10

    def test_flags_or_together(self):
        target = ConstraintSet(nullable=False)
        merge(target, ConstraintSet(nullable=True))

        assert target.nullable is True

    def test_explicit_required_overrides(self):
        target = ConstraintSet(required=True)
        merge(target, ConstraintSet(required=False))

        assert target.required is False

    def test_unhandled_predicates_union(self):
        target = ConstraintSet(unhandled_predicates=["a"])
        merge(target, ConstraintSet(unhandled_predicates=["a", "b"]))

        assert target.unhandled_predicates == ["a", "b"]


# ============================================================================
# TESTS: Applier
# ============================================================================


class TestConstraintApplier:
    """Test writing constraints onto schemas"""

    def test_string_schema(self):
        schema = Schema(type="string")
        ConstraintApplier(schema, ConstraintSet(min_size=2, max_size=8, pattern="^x")).apply()

        assert (schema.min_length, schema.max_length, schema.pattern) == (2, 8, "^x")

    def test_array_schema_uses_item_bounds(self):
        schema = Schema(type="array", items=Schema(type="string"))
        ConstraintApplier(schema, ConstraintSet(min_size=1, max_size=3)).apply()

        assert (schema.min_items, schema.max_items) == (1, 3)
        assert schema.min_length is None

    def test_meta_wins_over_rules(self):
        schema = Schema(type="integer")
        ConstraintApplier(schema, ConstraintSet(minimum=5), {"gteq": 1}).apply()

        assert schema.minimum == 1

    def test_extensions(self):
        schema = Schema(type="integer")
        constraints = ConstraintSet(excluded_values=[13], parity="even", unhandled_predicates=["int", "custom"])
        ConstraintApplier(schema, constraints).apply()

        assert schema.extensions["x-excludedValues"] == [13]
        assert schema.extensions["x-numberParity"] == "even"
        assert schema.extensions["x-unhandledPredicates"] == ["custom"]
