"""Type resolver registry."""
import logging
from typing import Any, Iterator, List, Optional

from routedoc.schema.models import Schema
from routedoc.schema.registry import ProcessingStack, SchemaRegistry

logger = logging.getLogger(__name__)


class TypeResolverRegistry:
    """Ordered resolvers; the first one that handles a type wins."""

    kind = "Resolver"

    def __init__(self):
        """Initialize registry."""
        self.resolvers: List[Any] = []

    def register(self, resolver, before=None, after=None) -> "TypeResolverRegistry":
        """
        Register a resolver.

        Args:
            resolver: Class exposing handles() and build_schema()
            before: Insert before this resolver (appended when absent)
            after: Insert after this resolver (appended when absent)
        """
        if not (callable(getattr(resolver, "handles", None)) and callable(getattr(resolver, "build_schema", None))):
            raise ValueError(f"{self.kind} must define handles() and build_schema(subject, stack, registry)")

        if resolver in self.resolvers:
            return self

        anchor = before or after
        if anchor is not None and anchor in self.resolvers:
            index = self.resolvers.index(anchor)
            self.resolvers.insert(index if before else index + 1, resolver)
        else:
            self.resolvers.append(resolver)
        return self

    def unregister(self, resolver) -> "TypeResolverRegistry":
        if resolver in self.resolvers:
            self.resolvers.remove(resolver)
        return self

    def find(self, type_ref: Any):
        """First resolver handling type_ref, or None."""
        for resolver in self.resolvers:
            if resolver.handles(type_ref):
                logger.debug(f"{resolver.__name__} resolves {type_ref!r}")
                return resolver
        return None

    def handles(self, type_ref: Any) -> bool:
        return self.find(type_ref) is not None

    def build_schema(
        self,
        type_ref: Any,
        stack: Optional[ProcessingStack] = None,
        registry: Optional[SchemaRegistry] = None,
    ) -> Optional[Schema]:
        """Build with the first matching resolver; None when none matches."""
        resolver = self.find(type_ref)
        if resolver is None:
            return None
        return resolver.build_schema(type_ref, stack, registry)

    def clear(self) -> "TypeResolverRegistry":
        self.resolvers.clear()
        return self

    def to_list(self) -> List[Any]:
        return list(self.resolvers)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self.resolvers))

    def __len__(self) -> int:
        return len(self.resolvers)
