"""OAS 2.0 (Swagger) exporter."""
import logging
from typing import Any, Dict, List, Optional

from routedoc.constants import MimeTypes, NullableStrategy, SchemaTypes
from routedoc.exporter.base import (
    DocumentExporter,
    SchemaRenderer,
    compact,
    pluralize,
    sanitize_ref_name,
)
from routedoc.schema.models import ApiDocument, Operation, Parameter, RequestBody, Response, Schema

logger = logging.getLogger(__name__)


class OAS2SchemaRenderer(SchemaRenderer):
    """
    Swagger 2.0 has no oneOf/anyOf and no nullable keyword: compositions
    fall back to their first variant with the full list kept under x-oneOf
    or x-anyOf, and the discriminator is a bare, required property name.
    """

    ref_prefix = f"#/{pluralize('definition')}/"

    def apply_composition(self, out: Dict[str, Any], schema: Schema) -> None:
        if schema.all_of:
            out["allOf"] = [self.render(member) for member in schema.all_of]

        for key, members in (("oneOf", schema.one_of), ("anyOf", schema.any_of)):
            if not members:
                continue
            rendered = [self.render(member) for member in members]
            out[f"x-{key}"] = rendered
            if "type" in out:
                continue
            first = rendered[0]
            if "$ref" in first:
                out.setdefault("allOf", []).append(first)
            else:
                for name, value in first.items():
                    out.setdefault(name, value)

    def apply_discriminator(self, out: Dict[str, Any], schema: Schema) -> None:
        name = schema.discriminator.property_name
        out["discriminator"] = name
        required = out.setdefault("required", [])
        if name not in required:
            required.append(name)


class OAS2Exporter(DocumentExporter):
    """Renders `{"swagger": "2.0", ...}` documents."""

    renderer_class = OAS2SchemaRenderer
    default_strategy = NullableStrategy.EXTENSION
    definitions_bucket = pluralize("definition")

    def resolve_strategy(self, requested: Optional[NullableStrategy]) -> NullableStrategy:
        if requested == NullableStrategy.TYPE_ARRAY:
            logger.warning("OAS 2.0 cannot express type arrays; using the x-nullable extension instead")
            return NullableStrategy.EXTENSION
        return requested or self.default_strategy

    def build_operation_body(self, operation: Operation) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "consumes": list(operation.consumes),
            "produces": list(operation.produces),
        }

        parameters = [self.build_parameter(param) for param in operation.parameters]
        if operation.request_body is not None:
            body = self.build_body_parameter(operation.request_body)
            if body is not None:
                parameters.append(body)
        if parameters:
            out["parameters"] = parameters

        out["responses"] = {
            response.http_status: self.build_response(response, operation.produces)
            for response in operation.responses
        }
        return out

    def build_parameter(self, param: Parameter) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": param.name, "in": param.location, "required": param.required}
        if param.description is not None:
            out["description"] = param.description

        rendered = self._inline_schema(param.schema)
        if param.description is not None:
            rendered.pop("description", None)
        out.update(rendered)

        if out.get("type") == SchemaTypes.ARRAY:
            out["collectionFormat"] = param.collection_format or "csv"
        out.update(param.extensions)
        return out

    def _inline_schema(self, schema: Schema) -> Dict[str, Any]:
        """Non-body parameters cannot hold references; inline the target's type."""
        target = schema
        if schema.is_reference_wrapper():
            target = schema.all_of[0]
        if target.canonical_name is None:
            return self.renderer.render(schema)

        logger.debug(f"Inlining {target.canonical_name} as a non-body parameter type")
        return compact({"type": target.type or SchemaTypes.STRING, "format": target.format,
                        "description": schema.description})

    def build_body_parameter(self, request_body: RequestBody) -> Optional[Dict[str, Any]]:
        media_type = request_body.media_types[0] if request_body.media_types else None
        if media_type is None or media_type.schema is None:
            return None

        schema = media_type.schema
        name = request_body.body_name
        if not name and schema.canonical_name:
            name = sanitize_ref_name(schema.canonical_name)

        out = {
            "name": name or "body",
            "in": "body",
            "required": request_body.required,
            "schema": self.renderer.render(schema),
        }
        if request_body.description is not None:
            out["description"] = request_body.description
        out.update(request_body.extensions)
        return out

    def build_response(self, response: Response, produces: List[str]) -> Dict[str, Any]:
        out: Dict[str, Any] = {"description": response.description}
        if response.media_types and response.media_types[0].schema is not None:
            out["schema"] = self.renderer.render(response.media_types[0].schema)
        if response.headers:
            out["headers"] = {
                header["name"]: compact(
                    {"type": header.get("type"), "format": header.get("format"), "description": header.get("description")}
                )
                for header in response.headers
            }
        if response.examples is not None:
            out["examples"] = self._examples(response.examples, produces)
        out.update(response.extensions)
        return out

    @staticmethod
    def _examples(examples: Any, produces: List[str]) -> Dict[str, Any]:
        """Swagger examples are keyed by MIME type."""
        if isinstance(examples, dict) and examples and all(k in produces or "/" in str(k) for k in examples):
            return examples
        return {(produces or [MimeTypes.JSON])[0]: examples}

    def build_document(self, document: ApiDocument, paths: Dict[str, Any], definitions: Dict[str, Any]) -> Dict[str, Any]:
        result: Dict[str, Any] = {"swagger": "2.0", "info": self.build_info(document)}
        result.update(
            compact(
                {
                    "host": document.host,
                    "basePath": document.base_path,
                    "schemes": document.schemes,
                }
            )
        )
        result["paths"] = paths
        result[self.definitions_bucket] = definitions
        result.update(
            compact(
                {
                    "tags": self.build_tags(document),
                    "securityDefinitions": document.security_definitions,
                }
            )
        )
        result.update(document.extensions)
        return result
