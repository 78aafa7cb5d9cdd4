"""Route descriptors consumed from the route-collection layer."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ParamSpec:
    """A declared route parameter."""

    name: str
    type: Any = None
    location: Optional[str] = None  # hint: "path", "query", "header", "body", "formData"
    required: bool = False
    documentation: Dict[str, Any] = field(default_factory=dict)
    values: Any = None
    default: Any = None


@dataclass
class RouteDescriptor:
    """
    One operation as declared by the application.

    `entity` describes the success response, `body` the request payload;
    both may be entity or contract descriptors (or deferred names).
    """

    method: str
    path: str
    params: List[ParamSpec] = field(default_factory=list)
    entity: Any = None
    body: Any = None
    documentation: Dict[str, Any] = field(default_factory=dict)

    @property
    def http_method(self) -> str:
        return self.method.lower()
