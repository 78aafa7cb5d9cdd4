"""OAS 3.0 exporter."""
import logging
from typing import Any, Dict, List

from routedoc.constants import MimeTypes, SchemaTypes
from routedoc.exporter.base import DocumentExporter, SchemaRenderer, compact, pluralize
from routedoc.schema.models import ApiDocument, MediaType, Operation, Parameter, RequestBody, Response, Schema

logger = logging.getLogger(__name__)

FORM_MIME_TYPES = [MimeTypes.MULTIPART_FORM, MimeTypes.FORM_URLENCODED]


class OAS3SchemaRenderer(SchemaRenderer):
    """Native oneOf/anyOf, object discriminators with $ref mappings."""

    ref_prefix = f"#/components/{pluralize('schema')}/"

    def render_type(self, schema: Schema):
        if schema.type == SchemaTypes.FILE:
            return SchemaTypes.STRING, "binary"
        return schema.type, schema.format

    def apply_discriminator(self, out: Dict[str, Any], schema: Schema) -> None:
        discriminator: Dict[str, Any] = {"propertyName": schema.discriminator.property_name}
        if schema.discriminator.mapping:
            discriminator["mapping"] = {
                value: self.reference(self.lookup(name) or name)["$ref"]
                for value, name in schema.discriminator.mapping.items()
            }
        out["discriminator"] = discriminator


class OAS3Exporter(DocumentExporter):
    """Renders `{"openapi": "3.0.3", ...}` documents."""

    renderer_class = OAS3SchemaRenderer
    openapi_version = "3.0.3"
    definitions_bucket = pluralize("schema")

    def build_operation_body(self, operation: Operation) -> Dict[str, Any]:
        out: Dict[str, Any] = {}

        form_params = [p for p in operation.parameters if p.location == "formData"]
        parameters = [self.build_parameter(p) for p in operation.parameters if p.location != "formData"]
        if parameters:
            out["parameters"] = parameters

        if operation.request_body is not None:
            out["requestBody"] = self.build_request_body(operation.request_body)
        elif form_params:
            out["requestBody"] = self.build_form_body(form_params, operation.consumes)

        out["responses"] = {response.http_status: self.build_response(response) for response in operation.responses}
        return out

    def build_parameter(self, param: Parameter) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": param.name, "in": param.location, "required": param.required}
        if param.description is not None:
            out["description"] = param.description
        out["schema"] = self.renderer.render(param.schema)
        out.update(param.extensions)
        return out

    def build_request_body(self, request_body: RequestBody) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if request_body.description is not None:
            out["description"] = request_body.description
        out["required"] = request_body.required
        out["content"] = {mt.mime_type: self.build_media_type(mt) for mt in request_body.media_types}
        out.update(request_body.extensions)
        return out

    def build_form_body(self, params: List[Parameter], consumes: List[str]) -> Dict[str, Any]:
        """formData parameters become one form-encoded object schema."""
        properties: Dict[str, Any] = {}
        required = []
        has_file = False
        for param in params:
            prop = self.renderer.render(param.schema)
            if param.description is not None:
                prop.setdefault("description", param.description)
            properties[param.name] = prop
            has_file = has_file or param.schema.type == SchemaTypes.FILE
            if param.required:
                required.append(param.name)

        mime_type = next((m for m in consumes if m in FORM_MIME_TYPES), None)
        if mime_type is None:
            mime_type = MimeTypes.MULTIPART_FORM if has_file else MimeTypes.FORM_URLENCODED

        schema = compact({"type": SchemaTypes.OBJECT, "properties": properties, "required": required})
        return {"required": bool(required), "content": {mime_type: {"schema": schema}}}

    def build_media_type(self, media_type: MediaType) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if media_type.schema is not None:
            out["schema"] = self.renderer.render(media_type.schema)
        if media_type.examples is not None:
            out.update(self._examples(media_type.examples))
        out.update(media_type.extensions)
        return out

    def build_response(self, response: Response) -> Dict[str, Any]:
        out: Dict[str, Any] = {"description": response.description}

        content = {}
        for media_type in response.media_types:
            content[media_type.mime_type] = self.build_media_type(media_type)
        if response.examples is not None and content:
            for mime_type, media in content.items():
                media.update(self._examples(self._examples_for(response.examples, mime_type)))
        if content:
            out["content"] = content

        if response.headers:
            out["headers"] = {
                header["name"]: compact(
                    {
                        "description": header.get("description"),
                        "schema": compact({"type": header.get("type"), "format": header.get("format")}),
                    }
                )
                for header in response.headers
            }
        out.update(response.extensions)
        return out

    @staticmethod
    def _examples_for(examples: Any, mime_type: str) -> Any:
        """Examples keyed by MIME type select the entry of that type."""
        if isinstance(examples, dict) and examples and all("/" in str(k) for k in examples):
            return examples.get(mime_type)
        return examples

    @staticmethod
    def _examples(examples: Any) -> Dict[str, Any]:
        if examples is None:
            return {}
        if isinstance(examples, dict) and examples and all(
            isinstance(v, dict) and "value" in v for v in examples.values()
        ):
            return {"examples": examples}
        return {"example": examples}

    def build_servers(self, document: ApiDocument) -> List[Dict[str, Any]]:
        if document.servers:
            return list(document.servers)
        if not document.host:
            return []
        schemes = document.schemes or ["https"]
        return [{"url": f"{scheme}://{document.host}{document.base_path or ''}"} for scheme in schemes]

    def build_components(self, document: ApiDocument, definitions: Dict[str, Any]) -> Dict[str, Any]:
        return compact(
            {
                self.definitions_bucket: definitions,
                pluralize("securityScheme"): document.security_definitions,
            }
        )

    def build_document(self, document: ApiDocument, paths: Dict[str, Any], definitions: Dict[str, Any]) -> Dict[str, Any]:
        result: Dict[str, Any] = {"openapi": self.openapi_version, "info": self.build_info(document)}
        servers = self.build_servers(document)
        if servers:
            result["servers"] = servers
        result["paths"] = paths

        components = self.build_components(document, definitions)
        result["components"] = components or {self.definitions_bucket: {}}

        tags = self.build_tags(document)
        if tags:
            result["tags"] = tags
        result.update(document.extensions)
        return result
