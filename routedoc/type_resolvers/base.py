"""
Type Resolver Base - shared interface and helpers for type resolvers.

Type references reach the introspectors in many shapes: Python classes,
type names ("Integer", "[String]"), dotted import paths, wrapped type specs
and descriptors. A resolver answers two questions for a reference:

- handles(type_ref): can this resolver build a schema for it?
- build_schema(type_ref, stack, registry): build that schema

Custom resolvers subclass TypeResolver and are registered on the default
registry:

```python
class MoneyResolver(TypeResolver):
    @classmethod
    def handles(cls, type_ref):
        return resolve_type(type_ref) is Money

    @classmethod
    def build_schema(cls, type_ref, stack=None, registry=None):
        return Schema(type="string", format="money")

type_resolvers.register(MoneyResolver, before=PrimitiveResolver)
```
"""

import importlib
import logging
from typing import Any, Dict, Optional

from routedoc import constants
from routedoc.schema.models import Schema
from routedoc.schema.registry import ProcessingStack, SchemaRegistry

logger = logging.getLogger(__name__)

# Deferred names declared by the application (name -> type or descriptor)
_named_types: Dict[str, Any] = {}


def register_named_type(name: str, obj: Any) -> None:
    """Make obj resolvable from the deferred name `name`."""
    _named_types[name] = obj


def unregister_named_type(name: str) -> None:
    _named_types.pop(name, None)


def resolve_type(type_ref: Any) -> Optional[Any]:
    """
    Resolve a deferred type reference to the object it names.

    Non-string references are returned as-is. Strings are looked up among
    registered named types first, then imported as a dotted path
    ("package.module.attr"). Returns None when nothing matches.
    """
    if not isinstance(type_ref, str):
        return type_ref

    name = type_ref.strip()
    if not name:
        return None
    if name in _named_types:
        return _named_types[name]

    module_name, _, attr = name.replace("::", ".").rpartition(".")
    if not module_name:
        return None
    try:
        module = importlib.import_module(module_name)
    except (ImportError, ValueError):
        return None
    return getattr(module, attr, None)


def infer_format_from_name(name: Any) -> Optional[str]:
    """Infer a string format from the last segment of a type name."""
    last_segment = str(name or "").replace("::", ".").split(".")[-1]
    if not last_segment:
        return None

    if last_segment.endswith("UUID"):
        return "uuid"
    if last_segment.endswith("DateTime"):
        return "date-time"
    if last_segment.endswith("Date"):
        return "date"
    if last_segment.endswith("Email"):
        return "email"
    if last_segment.endswith(("URI", "Url", "URL")):
        return "uri"
    return None


def primitive_to_schema_type(type_ref: Any) -> str:
    """Schema type for a primitive class or name; unknown ones are strings."""
    return constants.primitive_type(type_ref) or constants.SchemaTypes.STRING


def ensure_context(stack: Optional[ProcessingStack], registry: Optional[SchemaRegistry]):
    """Fresh stack/registry for standalone calls."""
    if stack is None:
        stack = ProcessingStack()
    if registry is None:
        registry = SchemaRegistry()
    return stack, registry


class TypeResolver:
    """Interface every type resolver implements (as classmethods)."""

    @classmethod
    def handles(cls, type_ref: Any) -> bool:
        raise NotImplementedError(f"{cls.__name__} must implement handles(type_ref)")

    @classmethod
    def build_schema(
        cls,
        type_ref: Any,
        stack: Optional[ProcessingStack] = None,
        registry: Optional[SchemaRegistry] = None,
    ) -> Optional[Schema]:
        raise NotImplementedError(f"{cls.__name__} must implement build_schema(type_ref, stack, registry)")
