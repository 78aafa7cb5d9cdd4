"""Constants shared by the introspectors, builders and exporters."""
from enum import Enum
from typing import Any, Dict, Optional


class SchemaTypes:
    """JSON Schema type strings."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    FILE = "file"
    NULL = "null"


class NullableStrategy(str, Enum):
    """How a nullable schema is rendered."""

    KEYWORD = "keyword"  # "nullable": true beside the type
    TYPE_ARRAY = "type_array"  # "type": ["string", "null"]
    EXTENSION = "extension"  # "x-nullable": true

    @classmethod
    def parse(cls, value: Any) -> Optional["NullableStrategy"]:
        """Accept a strategy, its value or its name (any case)."""
        if value is None or isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "_")
        for strategy in cls:
            if normalized in (strategy.value, strategy.name.lower()):
                return strategy
        raise ValueError(f"Unknown nullable strategy: {value}")


class MimeTypes:
    """Common MIME types."""

    JSON = "application/json"
    XML = "application/xml"
    FORM_URLENCODED = "application/x-www-form-urlencoded"
    MULTIPART_FORM = "multipart/form-data"


# GET/HEAD/DELETE carry no request body in the generated documents
BODYLESS_HTTP_METHODS = ["get", "head", "delete"]

HTTP_METHODS = ["get", "put", "post", "delete", "options", "head", "patch"]

EXTENSION_PREFIX = "x-"

# Bound on unwrapping nested wrapper types (guards malformed or cyclic chains)
MAX_UNWRAP_DEPTH = 5

# Bound on expanding non-numeric ranges into enum lists
MAX_ENUM_RANGE_SIZE = 100

CYCLE_DESCRIPTION = "Cycle detected while introspecting"

# Lower-cased type name -> schema type and default format.
# Names not listed here fall back to a string.
PRIMITIVE_TYPE_MAPPING: Dict[str, Dict[str, Optional[str]]] = {
    "str": {"type": SchemaTypes.STRING},
    "string": {"type": SchemaTypes.STRING},
    "symbol": {"type": SchemaTypes.STRING},
    "int": {"type": SchemaTypes.INTEGER, "format": "int32"},
    "integer": {"type": SchemaTypes.INTEGER, "format": "int32"},
    "long": {"type": SchemaTypes.INTEGER, "format": "int64"},
    "float": {"type": SchemaTypes.NUMBER, "format": "float"},
    "double": {"type": SchemaTypes.NUMBER, "format": "double"},
    "decimal": {"type": SchemaTypes.NUMBER, "format": "double"},
    "bigdecimal": {"type": SchemaTypes.NUMBER, "format": "double"},
    "number": {"type": SchemaTypes.NUMBER, "format": "double"},
    "numeric": {"type": SchemaTypes.NUMBER},
    "bool": {"type": SchemaTypes.BOOLEAN},
    "boolean": {"type": SchemaTypes.BOOLEAN},
    "date": {"type": SchemaTypes.STRING, "format": "date"},
    "datetime": {"type": SchemaTypes.STRING, "format": "date-time"},
    "time": {"type": SchemaTypes.STRING, "format": "date-time"},
    "uuid": {"type": SchemaTypes.STRING, "format": "uuid"},
    "dict": {"type": SchemaTypes.OBJECT},
    "hash": {"type": SchemaTypes.OBJECT},
    "object": {"type": SchemaTypes.OBJECT},
    "list": {"type": SchemaTypes.ARRAY},
    "tuple": {"type": SchemaTypes.ARRAY},
    "set": {"type": SchemaTypes.ARRAY},
    "array": {"type": SchemaTypes.ARRAY},
    "file": {"type": SchemaTypes.FILE},
    "bytes": {"type": SchemaTypes.STRING, "format": "byte"},
}

# Dialect symbols accepted by generate(); values are exporter registry keys
SCHEMA_TYPE_ALIASES = {
    "2": "oas2",
    "2.0": "oas2",
    "oas2": "oas2",
    "swagger": "oas2",
    "3": "oas3",
    "3.0": "oas3",
    "oas3": "oas3",
    "oas30": "oas3",
    "oas3_0": "oas3",
    "openapi": "oas3",
    "openapi30": "oas3",
    "3.1": "oas31",
    "31": "oas31",
    "oas31": "oas31",
    "oas3_1": "oas31",
    "openapi31": "oas31",
}


def type_name_of(type_ref: Any) -> str:
    """Lower-cased, last-segment name of a class or type string."""
    if isinstance(type_ref, type):
        name = type_ref.__name__
    else:
        name = str(type_ref)
    return name.replace("::", ".").split(".")[-1].lower()


def primitive_type(type_ref: Any) -> Optional[str]:
    """Schema type for a primitive class or name, or None when unknown."""
    if type_ref is None:
        return None
    entry = PRIMITIVE_TYPE_MAPPING.get(type_name_of(type_ref))
    return entry["type"] if entry else None


def format_for_type(type_ref: Any) -> Optional[str]:
    """Default format for a primitive class or name."""
    if type_ref is None:
        return None
    entry = PRIMITIVE_TYPE_MAPPING.get(type_name_of(type_ref))
    return entry.get("format") if entry else None


def parse_schema_type(value: Any) -> Optional[str]:
    """Map a user supplied dialect symbol onto an exporter registry key."""
    if value is None:
        return None
    return SCHEMA_TYPE_ALIASES.get(str(value).strip().lower(), str(value))
