"""Builds the documented responses of an operation."""
import logging
from typing import Any, Dict, List, Optional

from routedoc.constants import MimeTypes, SchemaTypes
from routedoc.descriptors.route import RouteDescriptor
from routedoc.introspection.property_extractor import PropertyExtractor
from routedoc.introspection.type_schema import build_type_schema
from routedoc.schema.models import MediaType, Response, Schema

logger = logging.getLogger(__name__)


class ResponseBuilder:
    """Default success response plus every entry of `http_codes`."""

    def __init__(self, route: RouteDescriptor, stack, registry, produces: Optional[List[str]] = None):
        self.route = route
        self.stack = stack
        self.registry = registry
        self.produces = produces or [MimeTypes.JSON]

    def build(self) -> List[Response]:
        doc = self.route.documentation
        responses: Dict[str, Response] = {}

        default = self._build_default()
        responses[default.http_status] = default

        for entry in doc.get("http_codes") or []:
            response = self._build_documented(entry)
            if response is not None:
                responses[response.http_status] = response

        return [responses[code] for code in sorted(responses)]

    def default_status(self) -> str:
        doc = self.route.documentation
        if doc.get("default_status"):
            return str(doc["default_status"])
        method = self.route.http_method
        if method == "post":
            return "201"
        if method == "delete" and self.route.entity is None:
            return "204"
        return "200"

    def _build_default(self) -> Response:
        doc = self.route.documentation
        success = doc.get("success")
        message = "Success"
        if isinstance(success, str):
            message = success
        elif isinstance(success, dict):
            message = success.get("message") or message

        return self._response(
            code=self.default_status(),
            message=message,
            entity=self.route.entity,
            is_array=bool(doc.get("is_array")),
            headers=doc.get("headers"),
            examples=doc.get("examples"),
        )

    def _build_documented(self, entry: Any) -> Optional[Response]:
        if isinstance(entry, (list, tuple)) and entry:
            entry = {"code": entry[0], "message": entry[1] if len(entry) > 1 else None,
                     "entity": entry[2] if len(entry) > 2 else None}
        if not isinstance(entry, dict) or entry.get("code") is None:
            logger.warning(f"Skipping malformed http_codes entry on {self.route.method} {self.route.path}: {entry!r}")
            return None

        response = self._response(
            code=str(entry["code"]),
            message=entry.get("message") or "Response",
            entity=entry.get("entity") or entry.get("model"),
            is_array=bool(entry.get("is_array")),
            headers=entry.get("headers"),
            examples=entry.get("examples"),
        )
        response.extensions.update(PropertyExtractor.extract_extensions(entry))
        return response

    def _response(self, code, message, entity, is_array, headers, examples) -> Response:
        media_types = []
        if entity is not None:
            schema = build_type_schema(entity, self.stack, self.registry)
            if is_array and schema.type != SchemaTypes.ARRAY:
                schema = Schema(type=SchemaTypes.ARRAY, items=schema)
            media_types = [MediaType(mime_type=mime, schema=schema) for mime in self.produces]

        return Response(
            http_status=code,
            description=message,
            media_types=media_types,
            headers=self._build_headers(headers),
            examples=examples,
        )

    @staticmethod
    def _build_headers(headers: Any) -> List[Dict[str, Any]]:
        """Accepts {name: {description, type}} or a list of dicts with a name key."""
        if not headers:
            return []
        if isinstance(headers, dict):
            headers = [dict(spec or {}, name=name) for name, spec in headers.items()]

        result = []
        for header in headers:
            if not isinstance(header, dict) or not header.get("name"):
                continue
            result.append(
                {
                    "name": header["name"],
                    "description": header.get("description") or header.get("desc"),
                    "type": header.get("type") or SchemaTypes.STRING,
                    "format": header.get("format"),
                }
            )
        return result
