"""
Canonical schema graph.

- Schema nodes and the operation tree handed to exporters
- Per-generation registry (dedup, cycle breaking, reference tracking)
"""

from .models import (
    ApiDocument,
    ApiPath,
    Discriminator,
    MediaType,
    Operation,
    Parameter,
    RequestBody,
    Response,
    Schema,
)
from .registry import ProcessingStack, SchemaRegistry

__all__ = [
    "ApiDocument",
    "ApiPath",
    "Discriminator",
    "MediaType",
    "Operation",
    "Parameter",
    "RequestBody",
    "Response",
    "Schema",
    "ProcessingStack",
    "SchemaRegistry",
]
