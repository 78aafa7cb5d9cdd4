"""Reads documentation maps onto schemas."""
import logging
from typing import Any, Dict, Optional

from routedoc.constants import EXTENSION_PREFIX, SchemaTypes
from routedoc.descriptors.predicates import ValueRange, decode_argument
from routedoc.introspection.constraints.argument_extractor import range_to_enum_list
from routedoc.schema.models import Schema

logger = logging.getLogger(__name__)


class PropertyExtractor:
    """Stateless helpers over field and entity documentation maps."""

    @staticmethod
    def extract_description(doc: Dict[str, Any]) -> Optional[str]:
        desc = doc.get("description") or doc.get("desc")
        return desc if isinstance(desc, str) and desc else None

    @staticmethod
    def extract_nullable(doc: Dict[str, Any]) -> bool:
        return bool(doc.get("nullable"))

    @staticmethod
    def extract_extensions(doc: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in doc.items() if isinstance(k, str) and k.startswith(EXTENSION_PREFIX)}

    @staticmethod
    def apply_entity_level_properties(schema: Schema, doc: Dict[str, Any]) -> None:
        if "additional_properties" in doc:
            schema.additional_properties = doc["additional_properties"]
        if "unevaluated_properties" in doc:
            schema.unevaluated_properties = doc["unevaluated_properties"]

        defs = doc.get("defs") or doc.get("$defs")
        if isinstance(defs, dict):
            schema.defs = dict(defs)

    @classmethod
    def apply_value_documentation(cls, schema: Schema, doc: Dict[str, Any]) -> None:
        """
        Apply format, example, values and bounds from a documentation map.

        On arrays of unnamed items, value-level keys target the items.
        """
        target = schema
        if schema.type == SchemaTypes.ARRAY and schema.items is not None:
            if schema.items.canonical_name is not None or schema.items.is_reference_wrapper():
                target = None
            else:
                target = schema.items

        if "example" in doc:
            schema.examples = doc["example"]
        if target is None:
            return

        if doc.get("format"):
            target.format = doc["format"]
        if "values" in doc:
            cls.apply_values(target, doc["values"])

        for key, attr in (
            ("minimum", "minimum"),
            ("maximum", "maximum"),
            ("min_length", "min_length"),
            ("max_length", "max_length"),
            ("pattern", "pattern"),
        ):
            if doc.get(key) is not None:
                setattr(target, attr, doc[key])
        if "additional_properties" in doc:
            target.additional_properties = doc["additional_properties"]

    @staticmethod
    def apply_values(schema: Schema, values: Any) -> None:
        """
        Documented `values`: lists become enums, numeric ranges bounds.

        A zero-argument callable is evaluated first.
        """
        if callable(values) and not isinstance(values, type):
            try:
                values = values()
            except TypeError:
                logger.warning(f"Skipping values callable that needs arguments: {values!r}")
                return

        values = decode_argument(values)
        if isinstance(values, ValueRange):
            if values.is_numeric():
                if values.begin is not None:
                    schema.minimum = values.begin
                if values.end is not None:
                    schema.maximum = values.end
                    schema.exclusive_maximum = values.exclude_end or None
                return
            values = range_to_enum_list(values)

        if isinstance(values, dict):
            values = list(values.keys())
        if isinstance(values, (list, tuple)):
            schema.enum = list(values)
