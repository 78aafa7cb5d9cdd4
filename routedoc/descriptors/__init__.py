"""
Input descriptors.

- Entities: named, ordered field exposures
- Contracts: field name -> declared type plus predicate rules
- Type specs: wrapped/constrained types
- Routes: method, path template, parameters, attached body/entity
"""

from .contract import ContractDescriptor, TypeSpec
from .entity import EntityDescriptor, FieldExposure
from .predicates import Combinator, Leaf, ValueRange, parse_predicate
from .route import ParamSpec, RouteDescriptor

__all__ = [
    "ContractDescriptor",
    "TypeSpec",
    "EntityDescriptor",
    "FieldExposure",
    "Combinator",
    "Leaf",
    "ValueRange",
    "parse_predicate",
    "ParamSpec",
    "RouteDescriptor",
]
