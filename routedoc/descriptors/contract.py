"""Validation-contract descriptors and wrapped type specs."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from routedoc.descriptors.predicates import PredicateNode, parse_predicate


@dataclass(eq=False)
class TypeSpec:
    """
    A wrapped or constrained type.

    Wrappers chain through `wrapped` down to a core carrying `primitive`
    (a Python type or a type name). Arrays use primitive=list plus `member`.
    """

    primitive: Any = None
    member: Any = None
    wrapped: Optional[Any] = None
    name: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)
    optional: bool = False  # nullable wrapper
    values: Optional[List[Any]] = None
    rules: List[PredicateNode] = field(default_factory=list)

    def __post_init__(self):
        self.rules = [r for r in (parse_predicate(raw) for raw in self.rules) if r is not None]

    def is_optional(self) -> bool:
        return self.optional or bool(self.meta.get("maybe"))

    def rule_asts(self) -> List[PredicateNode]:
        """Predicates attached to the type itself and to its metadata."""
        meta_rules = self.meta.get("rules") or []
        if not isinstance(meta_rules, (list, tuple)):
            meta_rules = [meta_rules]
        parsed = [parse_predicate(raw) for raw in meta_rules]
        return list(self.rules) + [r for r in parsed if r is not None]

    def optional_of(self) -> "TypeSpec":
        """Nullable wrapper around this spec."""
        return TypeSpec(wrapped=self, optional=True, name=self.name)

    def __repr__(self) -> str:
        return f"TypeSpec({self.name or self.primitive!r})"


@dataclass(eq=False)
class ContractDescriptor:
    """
    Maps field names to declared types plus rule predicates.

    Anonymous contracts (name=None) are rendered inline; named ones become
    shared definitions.
    """

    name: Optional[str] = None
    types: Dict[str, Any] = field(default_factory=dict)
    rules: Dict[str, Any] = field(default_factory=dict)
    parent: Optional["ContractDescriptor"] = None
    documentation: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        parsed = {}
        for field_name, raw in self.rules.items():
            node = parse_predicate(raw)
            if node is not None:
                parsed[field_name] = node
        self.rules = parsed

    def all_types(self) -> Dict[str, Any]:
        """Own types layered over the parent's."""
        if self.parent is None:
            return dict(self.types)
        merged = self.parent.all_types()
        merged.update(self.types)
        return merged

    def all_rules(self) -> Dict[str, PredicateNode]:
        if self.parent is None:
            return dict(self.rules)
        merged = self.parent.all_rules()
        merged.update(self.rules)
        return merged

    def field_names(self) -> List[str]:
        return [str(name) for name in self.all_types()]

    def __repr__(self) -> str:
        return f"ContractDescriptor({self.name!r})"
