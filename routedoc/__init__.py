"""
routedoc - API description documents from route, entity and contract descriptors.

- generate(): routes -> OAS 2.0 / 3.0 / 3.1 document (JSON-serializable dict)
- type_resolvers: ordered registry of type resolvers
- introspectors: ordered registry of descriptor introspectors
- exporters: dialect symbol -> exporter class
"""

import logging
import warnings
from typing import Any, Dict, Iterable, Optional

from .builder import ApiModelBuilder
from .constants import NullableStrategy, parse_schema_type
from .descriptors import RouteDescriptor
from .exporter import exporters
from .introspection import introspectors
from .schema import ProcessingStack, SchemaRegistry
from .type_resolvers import type_resolvers

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def generate(
    routes: Iterable[RouteDescriptor],
    schema_type: Any = "oas3",
    nullable_strategy: Any = None,
    nullable_keyword: Optional[bool] = None,
    namespace: Optional[str] = None,
    **info: Any,
) -> Dict[str, Any]:
    """
    Build the API description document for `routes`.

    Args:
        routes: Route descriptors, one per operation
        schema_type: Dialect symbol ("oas2", "swagger", "3.0", "oas31", ...)
        nullable_strategy: "keyword", "type_array" or "extension"
        nullable_keyword: Deprecated; True -> keyword, False -> type_array
        namespace: Only paths equal to or under this prefix
        **info: title, version, description, contact, license, host,
            base_path, schemes, servers, tags, security_definitions, x- keys

    Raises:
        ValueError: Unknown schema type or nullable strategy
    """
    exporter_class = exporters.for_type(parse_schema_type(schema_type) or "oas3")

    if nullable_keyword is not None:
        warnings.warn(
            "nullable_keyword is deprecated; use nullable_strategy instead",
            DeprecationWarning,
            stacklevel=2,
        )
        if nullable_strategy is None:
            nullable_strategy = NullableStrategy.KEYWORD if nullable_keyword else NullableStrategy.TYPE_ARRAY
    strategy = NullableStrategy.parse(nullable_strategy)

    # one registry and stack per call; never shared between generations
    registry = SchemaRegistry()
    stack = ProcessingStack()

    title = info.pop("title", None) or "API"
    version = info.pop("version", None) or "1"
    document = ApiModelBuilder(stack, registry, title=title, version=version, **info).build(routes, namespace)

    result = exporter_class(registry, strategy).export(document)
    logger.info(f"Generated {exporter_class.__name__} document with {len(document.paths)} paths")
    return result


__all__ = [
    "__version__",
    "exporters",
    "generate",
    "introspectors",
    "type_resolvers",
]
