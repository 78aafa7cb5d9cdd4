"""
Exporter Base - shared schema rendering and document assembly.

SchemaRenderer walks the canonical Schema graph depth-first and produces
dialect JSON. Named nodes always render as references; every reference is
reported to the SchemaRegistry so DocumentExporter can emit only the
definitions reachable from an operation.

Dialects subclass both classes and override the hooks:

- SchemaRenderer: ref_prefix, render_type(), apply_bounds(),
  apply_composition(), apply_discriminator(), apply_examples()
- DocumentExporter: resolve_strategy(), build_operation_body(),
  build_document()
"""

import logging
import re
from enum import Enum
from typing import Any, Dict, List, Optional

from routedoc.constants import EXTENSION_PREFIX, NullableStrategy, SchemaTypes
from routedoc.schema.models import ApiDocument, Operation, Schema
from routedoc.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)

IRREGULAR_PLURALS = {
    "schema": "schemas",
    "requestBody": "requestBodies",
    "definition": "definitions",
}

INVALID_REF_CHARS = re.compile(r"[^A-Za-z0-9._-]")

_SKIP = object()


def pluralize(word: str) -> str:
    """Bucket names: schema -> schemas, requestBody -> requestBodies."""
    if word in IRREGULAR_PLURALS:
        return IRREGULAR_PLURALS[word]
    if word.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    if len(word) > 1 and word.endswith("y") and word[-2].lower() not in "aeiou":
        return word[:-1] + "ies"
    return word + "s"


def sanitize_ref_name(name: str) -> str:
    """Canonical name -> definitions key ("Api::User" -> "Api_User")."""
    return INVALID_REF_CHARS.sub("_", str(name).replace("::", "_"))


def base_type(type_value: Any) -> Optional[str]:
    """The non-null member of a rendered type value."""
    if isinstance(type_value, list):
        members = [t for t in type_value if t != SchemaTypes.NULL]
        return members[0] if members else None
    return type_value


def _coerce_enum_value(value: Any, schema_type: str) -> Any:
    if isinstance(value, Enum):
        value = value.value

    if schema_type == SchemaTypes.INTEGER:
        if isinstance(value, bool):
            return _SKIP
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value) if value.is_integer() else _SKIP
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return _SKIP
        return _SKIP

    if schema_type == SchemaTypes.NUMBER:
        if isinstance(value, bool):
            return _SKIP
        if isinstance(value, (int, float)):
            return value
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError:
                return _SKIP
        return _SKIP

    if schema_type == SchemaTypes.BOOLEAN:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        return _SKIP

    return value if isinstance(value, str) else _SKIP


def normalize_enum(values: Optional[List[Any]], schema_type: Any) -> Optional[List[Any]]:
    """
    Coerce enum values to the schema type and drop duplicates.

    Values that cannot be coerced are dropped; None is returned when nothing
    survives or the type cannot carry an enum (array, object, untyped).
    Running it again on its own output returns the same list.
    """
    schema_type = base_type(schema_type)
    if not values or schema_type in (None, SchemaTypes.ARRAY, SchemaTypes.OBJECT):
        return None

    result = []
    seen = set()
    for value in values:
        coerced = _coerce_enum_value(value, schema_type)
        if coerced is _SKIP:
            continue
        key = (type(coerced).__name__, coerced)
        if key in seen:
            continue
        seen.add(key)
        result.append(coerced)
    return result or None


def compact(mapping: Dict[str, Any]) -> Dict[str, Any]:
    """Drop None values and empty containers."""
    return {k: v for k, v in mapping.items() if v is not None and v != [] and v != {}}


def extensions_of(mapping: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in (mapping or {}).items() if str(k).startswith(EXTENSION_PREFIX)}


class SchemaRenderer:
    """Renders Schema nodes for one dialect and one nullable strategy."""

    ref_prefix = "#/definitions/"
    json_schema_keywords = False  # $defs / unevaluatedProperties

    def __init__(self, registry: SchemaRegistry, nullable_strategy: NullableStrategy):
        self.registry = registry
        self.nullable_strategy = nullable_strategy
        self.named: Dict[str, Schema] = {}

    # references

    def reference(self, target: Any) -> Dict[str, str]:
        """$ref to a named node (or a bare canonical name) and mark it used."""
        if isinstance(target, Schema):
            name = target.canonical_name
            self.named.setdefault(name, target)
        else:
            name = str(target)
        self.registry.ref(name)
        return {"$ref": f"{self.ref_prefix}{sanitize_ref_name(name)}"}

    def lookup(self, name: str) -> Optional[Schema]:
        return self.named.get(name) or self.registry.get(name)

    # entry points

    def render(self, schema: Optional[Schema]) -> Dict[str, Any]:
        if schema is None:
            return {}
        if schema.canonical_name is not None:
            return self.reference(schema)
        if schema.is_reference_wrapper():
            return self.render_reference_wrapper(schema)
        return self.render_body(schema)

    def render_definition(self, schema: Schema) -> Dict[str, Any]:
        """Full body of a named node, for the definitions section."""
        return self.render_body(schema)

    def render_reference_wrapper(self, wrapper: Schema) -> Dict[str, Any]:
        ref = self.reference(wrapper.all_of[0])
        if wrapper.description is None and not wrapper.nullable and not wrapper.extensions:
            return ref
        result = self.annotate_reference(ref, wrapper.description, bool(wrapper.nullable))
        result.update(wrapper.extensions)
        return result

    def annotate_reference(self, ref: Dict[str, Any], description: Optional[str], nullable: bool) -> Dict[str, Any]:
        """A bare $ref cannot carry siblings: wrap it so annotations have a home."""
        if nullable and self.nullable_strategy == NullableStrategy.TYPE_ARRAY:
            result: Dict[str, Any] = {"anyOf": [ref, {"type": SchemaTypes.NULL}]}
        else:
            result = {"allOf": [ref]}
            if nullable:
                result[self.nullable_key()] = True
        if description is not None:
            result["description"] = description
        return result

    def nullable_key(self) -> str:
        if self.nullable_strategy == NullableStrategy.EXTENSION:
            return "x-nullable"
        return "nullable"

    # body

    def render_body(self, schema: Schema) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        schema_type, schema_format = self.render_type(schema)
        if schema_type is not None:
            out["type"] = schema_type
        if schema_format is not None:
            out["format"] = schema_format
        if schema.description is not None:
            out["description"] = schema.description

        if schema.properties:
            out["properties"] = {name: self.render(prop) for name, prop in schema.properties.items()}
        if schema.required:
            out["required"] = list(dict.fromkeys(schema.required))

        nullable = bool(schema.nullable)
        if schema.items is not None:
            nullable = self.apply_items(out, schema) or nullable

        enum = normalize_enum(schema.enum, schema_type)
        if enum:
            out["enum"] = enum
        if schema.default is not None:
            out["default"] = schema.default
        self.apply_examples(out, schema)

        self.apply_bounds(out, schema)
        for key, value in (
            ("minLength", schema.min_length),
            ("maxLength", schema.max_length),
            ("pattern", schema.pattern),
            ("minItems", schema.min_items),
            ("maxItems", schema.max_items),
        ):
            if value is not None:
                out[key] = value

        self.apply_composition(out, schema)
        if schema.discriminator is not None:
            self.apply_discriminator(out, schema)

        additional = schema.additional_properties
        if additional is not None:
            out["additionalProperties"] = self.render(additional) if isinstance(additional, Schema) else additional
        if self.json_schema_keywords:
            self.apply_json_schema_keywords(out, schema)

        if nullable:
            self.apply_nullable(out)
        out.update(schema.extensions)
        return out

    def render_type(self, schema: Schema):
        """(type, format) as emitted by this dialect."""
        return schema.type, schema.format

    def apply_items(self, out: Dict[str, Any], schema: Schema) -> bool:
        """
        Render array items. An annotated reference item hoists its
        description and nullable flag to the array; returns the hoisted flag.
        """
        items = schema.items
        if not items.is_reference_wrapper():
            out["items"] = self.render(items)
            return False

        out["items"] = self.reference(items.all_of[0])
        if schema.description is None and items.description is not None:
            out["description"] = items.description
        out.update(items.extensions)
        return bool(items.nullable)

    def apply_nullable(self, out: Dict[str, Any]) -> None:
        if self.nullable_strategy != NullableStrategy.TYPE_ARRAY:
            out[self.nullable_key()] = True
            return

        schema_type = out.get("type")
        if isinstance(schema_type, list):
            if SchemaTypes.NULL not in schema_type:
                schema_type.append(SchemaTypes.NULL)
        elif schema_type is not None:
            out["type"] = [schema_type, SchemaTypes.NULL]
        else:
            for key in ("oneOf", "anyOf"):
                if key in out:
                    out[key].append({"type": SchemaTypes.NULL})
                    return
            variants = [dict(out)] if out else []
            out.clear()
            out["anyOf"] = variants + [{"type": SchemaTypes.NULL}]

    def apply_bounds(self, out: Dict[str, Any], schema: Schema) -> None:
        if schema.minimum is not None:
            out["minimum"] = schema.minimum
            if schema.exclusive_minimum:
                out["exclusiveMinimum"] = True
        if schema.maximum is not None:
            out["maximum"] = schema.maximum
            if schema.exclusive_maximum:
                out["exclusiveMaximum"] = True

    def apply_examples(self, out: Dict[str, Any], schema: Schema) -> None:
        if schema.examples is None:
            return
        examples = schema.examples
        out["example"] = examples[0] if isinstance(examples, list) and len(examples) == 1 else examples

    def apply_composition(self, out: Dict[str, Any], schema: Schema) -> None:
        for key, members in (("allOf", schema.all_of), ("oneOf", schema.one_of), ("anyOf", schema.any_of)):
            if members:
                out[key] = [self.render(member) for member in members]

    def apply_discriminator(self, out: Dict[str, Any], schema: Schema) -> None:
        out["discriminator"] = schema.discriminator.property_name

    def apply_json_schema_keywords(self, out: Dict[str, Any], schema: Schema) -> None:
        unevaluated = schema.unevaluated_properties
        if unevaluated is not None:
            out["unevaluatedProperties"] = self.render(unevaluated) if isinstance(unevaluated, Schema) else unevaluated
        if schema.defs:
            out["$defs"] = {
                name: self.render(value) if isinstance(value, Schema) else value
                for name, value in schema.defs.items()
            }


class DocumentExporter:
    """
    Renders an ApiDocument into one dialect.

    Usage:
    ```python
    exporter = OAS3Exporter(registry, nullable_strategy="type_array")
    document = exporter.export(api_document)
    ```
    """

    renderer_class = SchemaRenderer
    default_strategy = NullableStrategy.KEYWORD
    definitions_bucket = pluralize("definition")

    def __init__(self, registry: SchemaRegistry, nullable_strategy: Any = None):
        self.registry = registry
        self.nullable_strategy = self.resolve_strategy(NullableStrategy.parse(nullable_strategy))
        self.renderer = self.renderer_class(registry, self.nullable_strategy)

    def resolve_strategy(self, requested: Optional[NullableStrategy]) -> NullableStrategy:
        return requested or self.default_strategy

    def export(self, document: ApiDocument) -> Dict[str, Any]:
        paths = self.build_paths(document)
        definitions = self.build_definitions()
        logger.info(f"Exported {len(paths)} paths with {len(definitions)} definitions")
        return self.build_document(document, paths, definitions)

    # paths

    def build_paths(self, document: ApiDocument) -> Dict[str, Any]:
        paths: Dict[str, Any] = {}
        for api_path in document.paths:
            item = paths.setdefault(api_path.template, {})
            for operation in api_path.operations:
                item[operation.http_method] = self.build_operation(operation)
        return paths

    def build_operation(self, operation: Operation) -> Dict[str, Any]:
        out = compact(
            {
                "tags": list(operation.tags),
                "operationId": operation.operation_id,
                "summary": operation.summary,
                "description": operation.description,
            }
        )
        out.update(self.build_operation_body(operation))
        if operation.deprecated:
            out["deprecated"] = True
        if operation.security is not None:
            out["security"] = operation.security
        out.update(operation.extensions)
        return out

    def build_operation_body(self, operation: Operation) -> Dict[str, Any]:
        raise NotImplementedError(f"{type(self).__name__} must implement build_operation_body(operation)")

    # definitions

    def build_definitions(self) -> Dict[str, Any]:
        """
        Render every referenced name, following references made while
        rendering definitions until no new name appears.
        """
        rendered: Dict[str, Optional[Dict[str, Any]]] = {}
        while True:
            pending = [name for name in self.registry.used_names if name not in rendered]
            if not pending:
                break
            for name in pending:
                schema = self.renderer.lookup(name)
                if schema is None:
                    logger.warning(f"Referenced schema {name} was never built; emitting it as a plain object")
                    rendered[name] = {"type": SchemaTypes.OBJECT}
                    continue
                rendered[name] = self.renderer.render_definition(schema)

        pruned = [name for name in self.registry.names() if not self.registry.is_used(name)]
        if pruned:
            logger.info(f"Pruned {len(pruned)} unreferenced definitions")
            logger.debug(f"Pruned definitions: {', '.join(pruned)}")

        definitions: Dict[str, Any] = {}
        owners: Dict[str, str] = {}
        for name, body in rendered.items():
            key = sanitize_ref_name(name)
            if key in owners:
                logger.warning(f"Definitions {owners[key]} and {name} both map to key {key}; keeping {owners[key]}")
                continue
            owners[key] = name
            definitions[key] = body
        return dict(sorted(definitions.items()))

    # document

    def build_info(self, document: ApiDocument) -> Dict[str, Any]:
        return compact(
            {
                "title": document.title,
                "version": document.version,
                "description": document.description,
                "contact": document.contact,
                "license": document.license,
            }
        )

    def build_tags(self, document: ApiDocument) -> List[Dict[str, Any]]:
        names = sorted(set(document.tags()) | set(document.tag_descriptions))
        return [compact({"name": name, "description": document.tag_descriptions.get(name)}) for name in names]

    def build_document(self, document: ApiDocument, paths: Dict[str, Any], definitions: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError(f"{type(self).__name__} must implement build_document(document, paths, definitions)")
