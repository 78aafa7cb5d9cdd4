"""Per-generation schema registry and processing stack."""
import logging
from typing import Dict, Iterator, List, Optional

from routedoc.schema.models import Schema

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """
    Maps canonical names to their one Schema node.

    Introspectors cache completed and in-progress builds here; exporters call
    ref() while rendering so only referenced names reach the shared
    definitions section. Create one per generation call and never share it
    between concurrent calls.
    """

    def __init__(self):
        self._schemas: Dict[str, Schema] = {}
        self._used: List[str] = []

    def get(self, name: str) -> Optional[Schema]:
        """Return the schema registered under name, if any."""
        return self._schemas.get(name)

    def put(self, name: str, schema: Schema) -> Schema:
        """
        Register schema under name.

        The first registration wins: once a name is bound its identity never
        changes, and the bound node is returned.
        """
        existing = self._schemas.get(name)
        if existing is not None and existing is not schema:
            logger.debug(f"Keeping existing schema for {name}")
            return existing
        self._schemas[name] = schema
        return schema

    def ref(self, name: str) -> str:
        """Mark name as referenced from the rendered document."""
        if name not in self._used:
            self._used.append(name)
        return name

    def is_used(self, name: str) -> bool:
        return name in self._used

    @property
    def used_names(self) -> List[str]:
        """Referenced names in first-reference order."""
        return list(self._used)

    def names(self) -> List[str]:
        return list(self._schemas.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)


class ProcessingStack:
    """Ordered set of canonical names currently being built."""

    def __init__(self):
        self._names: List[str] = []

    def push(self, name: str) -> None:
        self._names.append(name)

    def pop(self) -> Optional[str]:
        return self._names.pop() if self._names else None

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)
