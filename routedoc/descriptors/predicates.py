"""
Predicate trees attached to contract rules.

A node is either a Leaf (operator plus arguments) or a Combinator over
child nodes. parse_predicate() turns the loosely typed tagged-list form
(["and", [["key"], ["min_size", 5]]]) into these variants.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

COMBINATOR_KINDS = ["and", "or", "implication", "not", "each", "key", "set"]


@dataclass(frozen=True)
class ValueRange:
    """Inclusive range unless exclude_end; either bound may be open (None)."""

    begin: Any = None
    end: Any = None
    exclude_end: bool = False

    def is_numeric(self) -> bool:
        return _is_number(self.begin) or _is_number(self.end)

    def is_bounded(self) -> bool:
        return self.begin is not None and self.end is not None


@dataclass(frozen=True)
class Leaf:
    """A single predicate such as min_size(5)."""

    operator: str
    args: Tuple[Any, ...] = ()

    def __post_init__(self):
        # accept dry-style names ("min_size?") and normalize once
        object.__setattr__(self, "operator", normalize_operator(self.operator))


@dataclass(frozen=True)
class Combinator:
    """and / or / implication / not / each / key over child nodes."""

    kind: str
    children: Tuple["PredicateNode", ...] = field(default_factory=tuple)
    subject: Optional[str] = None  # field name for "key" nodes


PredicateNode = Union[Leaf, Combinator]


def normalize_operator(name: Any) -> str:
    return str(name).strip().rstrip("?").lower()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def decode_argument(arg: Any) -> Any:
    """Decode tagged JSON argument forms into Python values."""
    if isinstance(arg, dict):
        if "range" in arg:
            bounds = list(arg["range"]) + [None, None]
            return ValueRange(bounds[0], bounds[1], bool(arg.get("exclusive", False)))
        if "regex" in arg:
            return re.compile(arg["regex"])
        if "list" in arg:
            return [decode_argument(v) for v in arg["list"]]
    if isinstance(arg, range):
        if arg.step != 1:
            return list(arg)
        return ValueRange(arg.start, arg.stop, exclude_end=True)
    if isinstance(arg, (set, frozenset)):
        return sorted(arg, key=repr)
    return arg


def parse_predicate(raw: Any) -> Optional[PredicateNode]:
    """
    Parse a tagged-list predicate into Leaf/Combinator nodes.

    ["and", [a, b]]           -> Combinator("and", (a, b))
    ["key", "name", [...]]    -> Combinator("key", (...), subject="name")
    ["min_size", 5]           -> Leaf("min_size", (5,))
    "filled"                  -> Leaf("filled")

    Returns None (and logs) for structures that are neither.
    """
    if isinstance(raw, (Leaf, Combinator)):
        return raw
    if isinstance(raw, str):
        return Leaf(raw)
    if not isinstance(raw, (list, tuple)) or not raw:
        logger.warning(f"Malformed predicate node: {raw!r}")
        return None

    head = raw[0]
    if not isinstance(head, str):
        logger.warning(f"Malformed predicate node: {raw!r}")
        return None

    kind = normalize_operator(head)
    if kind in COMBINATOR_KINDS:
        subject = None
        rest = list(raw[1:])
        if kind == "key" and rest and isinstance(rest[0], str):
            subject = rest.pop(0)
        children = _parse_children(rest)
        if kind == "key" and not children:
            return Leaf("key", (subject,) if subject else ())
        return Combinator(kind, tuple(children), subject=subject)

    return Leaf(kind, tuple(decode_argument(a) for a in raw[1:]))


def _parse_children(rest: List[Any]) -> List[PredicateNode]:
    # children come either as one list of nodes or as trailing node arguments
    if len(rest) == 1 and isinstance(rest[0], (list, tuple)) and rest[0] and all(
        isinstance(c, (list, tuple, Leaf, Combinator)) for c in rest[0]
    ):
        rest = list(rest[0])

    children = []
    for raw_child in rest:
        child = parse_predicate(raw_child)
        if child is not None:
            children.append(child)
    return children


def and_(*children: PredicateNode) -> Combinator:
    return Combinator("and", tuple(children))


def or_(*children: PredicateNode) -> Combinator:
    return Combinator("or", tuple(children))


def implication(*children: PredicateNode) -> Combinator:
    return Combinator("implication", tuple(children))


def leaf(operator: str, *args: Any) -> Leaf:
    return Leaf(operator, tuple(decode_argument(a) for a in args))
