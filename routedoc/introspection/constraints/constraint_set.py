"""Flat value object holding the constraints extracted for one field."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ConstraintSet:
    """Constraints gathered from rule predicates and type metadata."""

    enum: Optional[List[Any]] = None
    nullable: Optional[bool] = None
    min_size: Optional[int] = None
    max_size: Optional[int] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: Optional[bool] = None
    exclusive_maximum: Optional[bool] = None
    pattern: Optional[str] = None
    excluded_values: Optional[List[Any]] = None
    required: Optional[bool] = None
    type_predicate: Optional[str] = None
    parity: Optional[str] = None  # "odd" / "even"
    format: Optional[str] = None
    extensions: Dict[str, Any] = field(default_factory=dict)
    unhandled_predicates: List[str] = field(default_factory=list)
