"""OAS 3.1 exporter."""
import logging
from typing import Any, Dict, Optional

from routedoc.constants import NullableStrategy
from routedoc.exporter.oas3 import OAS3Exporter, OAS3SchemaRenderer
from routedoc.schema.models import ApiDocument, Schema

logger = logging.getLogger(__name__)

DEFAULT_LICENSE = {"name": "Proprietary", "identifier": "UNLICENSED"}


class OAS31SchemaRenderer(OAS3SchemaRenderer):
    """JSON Schema 2020-12 flavour: numeric exclusive bounds, $defs, unevaluatedProperties."""

    json_schema_keywords = True

    def apply_bounds(self, out: Dict[str, Any], schema: Schema) -> None:
        if schema.minimum is not None:
            key = "exclusiveMinimum" if schema.exclusive_minimum else "minimum"
            out[key] = schema.minimum
        if schema.maximum is not None:
            key = "exclusiveMaximum" if schema.exclusive_maximum else "maximum"
            out[key] = schema.maximum

    def apply_examples(self, out: Dict[str, Any], schema: Schema) -> None:
        if schema.examples is None:
            return
        examples = schema.examples
        out["examples"] = list(examples) if isinstance(examples, (list, tuple)) else [examples]


class OAS31Exporter(OAS3Exporter):
    """Renders `{"openapi": "3.1.0", ...}`; nullability is always a type array."""

    renderer_class = OAS31SchemaRenderer
    openapi_version = "3.1.0"
    default_strategy = NullableStrategy.TYPE_ARRAY

    def resolve_strategy(self, requested: Optional[NullableStrategy]) -> NullableStrategy:
        if requested not in (None, NullableStrategy.TYPE_ARRAY):
            logger.debug(f"OAS 3.1 ignores nullable strategy {requested.value}")
        return NullableStrategy.TYPE_ARRAY

    def build_info(self, document: ApiDocument) -> Dict[str, Any]:
        info = super().build_info(document)
        info.setdefault("license", dict(DEFAULT_LICENSE))
        return info
