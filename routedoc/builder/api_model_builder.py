"""
API Model Builder - turns route descriptors into the operation tree.

Path templates are normalized (":id" -> "{id}", trailing "(.:format)"
dropped), operations get an id, tags, parameters, request body and
responses, and the document carries the info block and server data.
"""
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from routedoc.builder.request_builder import RequestBuilder
from routedoc.builder.response_builder import ResponseBuilder
from routedoc.constants import EXTENSION_PREFIX, HTTP_METHODS, MimeTypes
from routedoc.descriptors.route import RouteDescriptor
from routedoc.schema.models import ApiDocument, ApiPath, Operation
from routedoc.schema.registry import ProcessingStack, SchemaRegistry

logger = logging.getLogger(__name__)

FORMAT_SUFFIX_PATTERN = re.compile(r"\(\.[^)]*\)$")
COLON_PARAM_PATTERN = re.compile(r":(\w+)")
VERSION_SEGMENT_PATTERN = re.compile(r"^v\d+$")

INFO_KEYS = ["description", "contact", "license", "host", "base_path", "schemes", "servers"]


def normalize_path(path: str) -> str:
    path = FORMAT_SUFFIX_PATTERN.sub("", path or "")
    path = COLON_PARAM_PATTERN.sub(r"{\1}", path)
    if not path.startswith("/"):
        path = "/" + path
    return path


def in_namespace(template: str, namespace: Optional[str]) -> bool:
    """True when the template is the namespace or lies under it."""
    if not namespace:
        return True
    namespace = normalize_path(namespace)
    prefix = namespace.rstrip("/")
    return template == namespace or template.startswith(prefix + "/")


def static_segments(template: str) -> List[str]:
    return [s for s in template.split("/") if s and not s.startswith("{")]


class ApiModelBuilder:
    """
    Builds an ApiDocument from route descriptors.

    Usage:
    ```python
    builder = ApiModelBuilder(stack, registry, title="Shop API", version="2")
    document = builder.build(routes, namespace="/orders")
    ```
    """

    def __init__(
        self,
        stack: Optional[ProcessingStack] = None,
        registry: Optional[SchemaRegistry] = None,
        title: str = "API",
        version: str = "1",
        **info: Any,
    ):
        self.stack = stack if stack is not None else ProcessingStack()
        self.registry = registry if registry is not None else SchemaRegistry()
        self.title = title
        self.version = str(version)
        self.info = info

    def build(self, routes: Iterable[RouteDescriptor], namespace: Optional[str] = None) -> ApiDocument:
        document = self._build_document()

        for route in routes:
            if route.http_method not in HTTP_METHODS:
                logger.warning(f"Skipping route with unsupported method: {route.method} {route.path}")
                continue

            template = normalize_path(route.path)
            if not in_namespace(template, namespace):
                logger.debug(f"Skipping {route.method.upper()} {template} outside namespace {namespace}")
                continue

            api_path = document.get_path(template)
            if api_path is None:
                api_path = ApiPath(template=template)
                document.add_path(api_path)
            api_path.add_operation(self.build_operation(route, template))

        logger.debug(f"Built {len(document.paths)} paths")
        return document

    def build_operation(self, route: RouteDescriptor, template: str) -> Operation:
        doc = route.documentation
        operation = Operation(
            http_method=route.http_method,
            operation_id=doc.get("operation_id") or doc.get("nickname") or self.operation_id(route.http_method, template),
            summary=doc.get("summary") or doc.get("desc"),
            description=doc.get("detail") or doc.get("description"),
            tags=list(doc.get("tags") or self.default_tags(template)),
            consumes=self._mime_list(doc.get("consumes")),
            produces=self._mime_list(doc.get("produces")),
            deprecated=bool(doc.get("deprecated")),
            security=doc.get("security"),
            extensions={k: v for k, v in doc.items() if str(k).startswith(EXTENSION_PREFIX)},
        )

        RequestBuilder(route, operation, self.stack, self.registry).build()
        operation.responses = ResponseBuilder(route, self.stack, self.registry, operation.produces).build()
        return operation

    @staticmethod
    def operation_id(method: str, template: str) -> str:
        """get /users/{id} -> getUsersId"""
        words = []
        for segment in template.split("/"):
            word = re.sub(r"[^0-9A-Za-z_]", "", segment)
            if word:
                words.extend(p for p in word.split("_") if p)
        return method.lower() + "".join(w[:1].upper() + w[1:] for w in words)

    @staticmethod
    def default_tags(template: str) -> List[str]:
        for segment in static_segments(template):
            if not VERSION_SEGMENT_PATTERN.match(segment):
                return [segment]
        return []

    @staticmethod
    def _mime_list(value: Any) -> List[str]:
        if not value:
            return [MimeTypes.JSON]
        if isinstance(value, str):
            return [value]
        return list(value)

    def _build_document(self) -> ApiDocument:
        info: Dict[str, Any] = {k: self.info.get(k) for k in INFO_KEYS if self.info.get(k) is not None}
        schemes = info.pop("schemes", None)
        servers = info.pop("servers", None)
        if isinstance(schemes, str):
            schemes = [schemes]

        return ApiDocument(
            title=self.title,
            version=self.version,
            schemes=list(schemes or []),
            servers=list(servers or []),
            tag_descriptions=dict(self.info.get("tags") or {}),
            security_definitions=dict(self.info.get("security_definitions") or {}),
            extensions={k: v for k, v in self.info.items() if str(k).startswith(EXTENSION_PREFIX)},
            **info,
        )
