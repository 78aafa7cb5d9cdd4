"""
Introspector Base - interface for schema builders over descriptors.

An introspector answers handles(subject) and builds a Schema for it with
build_schema(subject, stack, registry). Third parties register their own
on the default registry:

```python
class PydanticIntrospector(Introspector):
    @classmethod
    def handles(cls, subject):
        return isinstance(subject, type) and issubclass(subject, BaseModel)

    @classmethod
    def build_schema(cls, subject, stack=None, registry=None):
        ...

introspectors.register(PydanticIntrospector, before=EntityIntrospector)
```
"""
from typing import Any, Optional

from routedoc.schema.models import Schema
from routedoc.schema.registry import ProcessingStack, SchemaRegistry
from routedoc.type_resolvers.registry import TypeResolverRegistry


class Introspector:
    """Interface every introspector implements (as classmethods)."""

    @classmethod
    def handles(cls, subject: Any) -> bool:
        raise NotImplementedError(f"{cls.__name__} must implement handles(subject)")

    @classmethod
    def build_schema(
        cls,
        subject: Any,
        stack: Optional[ProcessingStack] = None,
        registry: Optional[SchemaRegistry] = None,
    ) -> Optional[Schema]:
        raise NotImplementedError(f"{cls.__name__} must implement build_schema(subject, stack, registry)")


class IntrospectorRegistry(TypeResolverRegistry):
    """Ordered introspectors; same lookup and insertion rules as type resolvers."""

    kind = "Introspector"

    @property
    def introspectors(self):
        return self.resolvers
