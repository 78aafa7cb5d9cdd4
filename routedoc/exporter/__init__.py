"""
Dialect exporters.

- OAS2Exporter: Swagger 2.0 (definitions, string discriminator, x-nullable)
- OAS3Exporter: OpenAPI 3.0 (components, object discriminator, nullable keyword)
- OAS31Exporter: OpenAPI 3.1 (type-array nullability, $defs)

`exporters` is the default registry keyed by dialect symbol.
"""

from .base import DocumentExporter, SchemaRenderer, normalize_enum, pluralize, sanitize_ref_name
from .oas2 import OAS2Exporter, OAS2SchemaRenderer
from .oas3 import OAS3Exporter, OAS3SchemaRenderer
from .oas31 import OAS31Exporter, OAS31SchemaRenderer
from .registry import ExporterRegistry

exporters = ExporterRegistry()
exporters.register(OAS2Exporter, as_="oas2")
exporters.register(OAS3Exporter, as_=["oas3", "oas30"])
exporters.register(OAS31Exporter, as_="oas31")

__all__ = [
    "DocumentExporter",
    "ExporterRegistry",
    "OAS2Exporter",
    "OAS2SchemaRenderer",
    "OAS31Exporter",
    "OAS31SchemaRenderer",
    "OAS3Exporter",
    "OAS3SchemaRenderer",
    "SchemaRenderer",
    "exporters",
    "normalize_enum",
    "pluralize",
    "sanitize_ref_name",
]
