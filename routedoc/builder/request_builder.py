"""Builds parameters and the request body of an operation."""
import logging
from typing import List, Optional

from routedoc.builder.param_location_resolver import ParamLocationResolver
from routedoc.builder.param_schema_builder import ParamSchemaBuilder
from routedoc.constants import BODYLESS_HTTP_METHODS, MimeTypes, SchemaTypes
from routedoc.descriptors.route import RouteDescriptor
from routedoc.introspection.property_extractor import PropertyExtractor
from routedoc.introspection.type_schema import build_type_schema
from routedoc.schema.models import MediaType, Operation, Parameter, RequestBody, Schema

logger = logging.getLogger(__name__)


class RequestBuilder:
    """
    Splits route parameters into non-body parameters and an inline body
    object; an attached body entity/contract replaces the inline body.
    """

    def __init__(self, route: RouteDescriptor, operation: Operation, stack, registry):
        self.route = route
        self.operation = operation
        self.stack = stack
        self.registry = registry
        self.schema_builder = ParamSchemaBuilder(stack, registry)

    def build(self) -> None:
        route_params = ParamLocationResolver.route_param_names(self.route.path)
        body_schema = Schema(type=SchemaTypes.OBJECT)
        parameters: List[Parameter] = []

        for param in self.route.params:
            if ParamLocationResolver.is_hidden(param):
                logger.debug(f"Skipping hidden parameter {param.name}")
                continue

            location = ParamLocationResolver.resolve(param, route_params, self.route)
            if location == "body":
                schema = self.schema_builder.build(param, with_description=True)
                body_schema.add_property(param.name, schema, required=param.required)
                continue

            doc = param.documentation
            parameters.append(
                Parameter(
                    name=param.name,
                    location=location,
                    schema=self.schema_builder.build(param),
                    required=True if location == "path" else bool(param.required),
                    description=PropertyExtractor.extract_description(doc),
                    collection_format=doc.get("collection_format") or doc.get("collectionFormat"),
                    extensions=PropertyExtractor.extract_extensions(doc),
                )
            )

        # path placeholders without a declared parameter are still path parameters
        declared = {p.name for p in parameters}
        for name in route_params:
            if name not in declared:
                parameters.append(Parameter(name=name, location="path", schema=Schema(type=SchemaTypes.STRING), required=True))

        attached = self._build_attached_body()
        if attached is not None and self._body_as_query():
            parameters.extend(self._schema_to_query_params(attached, route_params))
        elif attached is not None:
            body_schema = attached

        self.operation.parameters.extend(parameters)
        self._append_request_body(body_schema)

    def _build_attached_body(self) -> Optional[Schema]:
        if self.route.body is None:
            return None
        return build_type_schema(self.route.body, self.stack, self.registry)

    def _allows_body(self) -> bool:
        return bool(self.route.documentation.get("request_body"))

    def _body_as_query(self) -> bool:
        return self.operation.http_method in BODYLESS_HTTP_METHODS and not self._allows_body()

    def _schema_to_query_params(self, schema: Schema, route_params: List[str]) -> List[Parameter]:
        """Bodyless methods expose the attached body's fields as query parameters."""
        parts = _object_parts(schema)
        if not parts and schema.is_composition():
            logger.warning(f"Body of {self.route.method} {self.route.path} has no fields to expose as query parameters")

        params = []
        seen = set(route_params)
        for part in parts:
            for name, prop in part.properties.items():
                if name in seen:
                    continue
                seen.add(name)
                params.append(
                    Parameter(
                        name=name,
                        location="query",
                        schema=prop,
                        required=name in part.required,
                        description=prop.description,
                    )
                )
        return params

    def _append_request_body(self, body_schema: Schema) -> None:
        if body_schema.is_empty() and body_schema.canonical_name is None:
            return
        if self.operation.http_method in BODYLESS_HTTP_METHODS and not self._allows_body():
            return

        doc = self.route.documentation
        mime_types = self.operation.consumes or [MimeTypes.JSON]
        self.operation.request_body = RequestBody(
            media_types=[MediaType(mime_type=mime, schema=body_schema) for mime in mime_types],
            description=doc.get("body_description"),
            required=bool(body_schema.required) or body_schema.canonical_name is not None,
            body_name=doc.get("body_name"),
            extensions=PropertyExtractor.extract_extensions(doc.get("body_documentation") or {}),
        )


def _object_parts(schema: Schema, depth: int = 0) -> List[Schema]:
    """Schemas contributing properties, walking allOf members and reference wrappers."""
    if depth > 10:
        return []
    parts = [schema] if schema.properties else []
    for member in schema.all_of:
        parts.extend(_object_parts(member, depth + 1))
    return parts
