"""Models for the canonical schema graph and the operation tree."""
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any


@dataclass
class Discriminator:
    """Names the property that selects a subtype."""

    property_name: str
    mapping: Dict[str, str] = field(default_factory=dict)  # value -> canonical name


@dataclass(eq=False)
class Schema:
    """
    Dialect-agnostic schema node.

    Nodes compare by identity: a node carrying a canonical_name is the one
    representative for that name, and graphs may be cyclic.
    """

    type: Optional[str] = None
    format: Optional[str] = None
    description: Optional[str] = None
    canonical_name: Optional[str] = None
    properties: Dict[str, "Schema"] = field(default_factory=dict)
    required: List[str] = field(default_factory=list)
    items: Optional["Schema"] = None
    nullable: Optional[bool] = None
    enum: Optional[List[Any]] = None
    examples: Any = None
    default: Any = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: Optional[bool] = None
    exclusive_maximum: Optional[bool] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    discriminator: Optional[Discriminator] = None
    all_of: List["Schema"] = field(default_factory=list)
    one_of: List["Schema"] = field(default_factory=list)
    any_of: List["Schema"] = field(default_factory=list)
    extensions: Dict[str, Any] = field(default_factory=dict)
    additional_properties: Any = None
    unevaluated_properties: Any = None
    defs: Dict[str, Any] = field(default_factory=dict)

    def add_property(self, name: str, schema: "Schema", required: bool = False) -> None:
        """Add (or replace) a property, optionally marking it required."""
        self.properties[name] = schema
        if required and name not in self.required:
            self.required.append(name)

    def is_empty(self) -> bool:
        """True while nothing has been populated (no properties, no composition)."""
        return not self.properties and not self.is_composition()

    def is_composition(self) -> bool:
        return bool(self.all_of or self.one_of or self.any_of)

    def is_reference_wrapper(self) -> bool:
        """A single-member allOf around a named schema, used to annotate a reference."""
        return (
            self.type is None
            and self.canonical_name is None
            and len(self.all_of) == 1
            and not self.one_of
            and not self.any_of
            and self.all_of[0].canonical_name is not None
        )

    @classmethod
    def reference_to(
        cls,
        target: "Schema",
        description: Optional[str] = None,
        nullable: Optional[bool] = None,
    ) -> "Schema":
        """
        Reference a named schema from a field.

        Field level annotations never touch the shared named node: when any
        are present they live on a wrapper around it.
        """
        if description is None and not nullable:
            return target
        return cls(all_of=[target], description=description, nullable=nullable or None)


@dataclass
class MediaType:
    """A content type with its schema."""

    mime_type: str
    schema: Optional[Schema] = None
    examples: Any = None
    extensions: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Parameter:
    """A non-body operation parameter."""

    name: str
    location: str  # "path", "query", "header", "formData"
    schema: Schema
    required: bool = False
    description: Optional[str] = None
    collection_format: Optional[str] = None
    extensions: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RequestBody:
    """Request payload of an operation."""

    media_types: List[MediaType] = field(default_factory=list)
    description: Optional[str] = None
    required: bool = False
    body_name: Optional[str] = None
    extensions: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Response:
    """One documented response of an operation."""

    http_status: str
    description: str = "Success"
    media_types: List[MediaType] = field(default_factory=list)
    headers: List[Dict[str, Any]] = field(default_factory=list)
    examples: Any = None
    extensions: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Operation:
    """A single HTTP method on a path."""

    http_method: str
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    parameters: List[Parameter] = field(default_factory=list)
    request_body: Optional[RequestBody] = None
    responses: List[Response] = field(default_factory=list)
    consumes: List[str] = field(default_factory=list)
    produces: List[str] = field(default_factory=list)
    deprecated: bool = False
    security: Optional[List[Dict[str, Any]]] = None
    extensions: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ApiPath:
    """A path template with its operations."""

    template: str
    operations: List[Operation] = field(default_factory=list)

    def add_operation(self, operation: Operation) -> None:
        self.operations.append(operation)


@dataclass
class ApiDocument:
    """The complete operation tree handed to an exporter."""

    title: str = "API"
    version: str = "1"
    description: Optional[str] = None
    contact: Optional[Dict[str, Any]] = None
    license: Optional[Dict[str, Any]] = None
    host: Optional[str] = None
    base_path: Optional[str] = None
    schemes: List[str] = field(default_factory=list)
    servers: List[Dict[str, Any]] = field(default_factory=list)
    paths: List[ApiPath] = field(default_factory=list)
    tag_descriptions: Dict[str, str] = field(default_factory=dict)
    security_definitions: Dict[str, Any] = field(default_factory=dict)
    extensions: Dict[str, Any] = field(default_factory=dict)

    def get_path(self, template: str) -> Optional[ApiPath]:
        """Returns path by template."""
        for path in self.paths:
            if path.template == template:
                return path
        return None

    def add_path(self, path: ApiPath) -> None:
        self.paths.append(path)

    def tags(self) -> List[str]:
        """All tags used by operations, sorted."""
        names = set()
        for path in self.paths:
            for op in path.operations:
                names.update(op.tags)
        return sorted(names)
