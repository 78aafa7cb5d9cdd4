"""Decides where a route parameter lives: path, query, header, body or formData."""
import re
from typing import List

from routedoc.constants import BODYLESS_HTTP_METHODS, type_name_of
from routedoc.descriptors.route import ParamSpec, RouteDescriptor

# ":id" and "{id}" placeholders
PATH_PARAM_PATTERN = re.compile(r":(\w+)|\{(\w+)\}")

LOCATION_ALIASES = {
    "path": "path",
    "query": "query",
    "header": "header",
    "body": "body",
    "json": "body",
    "form": "formData",
    "formdata": "formData",
    "form_data": "formData",
}

MAPPING_TYPE_NAMES = ["dict", "hash", "object", "json"]


class ParamLocationResolver:
    """Stateless location rules for route parameters."""

    @staticmethod
    def route_param_names(path: str) -> List[str]:
        return [a or b for a, b in PATH_PARAM_PATTERN.findall(path)]

    @classmethod
    def resolve(cls, param: ParamSpec, route_params: List[str], route: RouteDescriptor) -> str:
        if param.name in route_params:
            return "path"

        hint = param.documentation.get("param_type") or param.location
        if hint:
            location = LOCATION_ALIASES.get(str(hint).strip().lower(), "query")
        elif route.documentation.get("body_name") or cls.is_body_param(param):
            location = "body"
        else:
            location = "query"

        if location == "body" and route.http_method in BODYLESS_HTTP_METHODS:
            return "query"
        return location

    @staticmethod
    def is_body_param(param: ParamSpec) -> bool:
        if param.type is dict:
            return True
        return isinstance(param.type, str) and type_name_of(param.type) in MAPPING_TYPE_NAMES

    @staticmethod
    def is_hidden(param: ParamSpec) -> bool:
        """Hidden optional parameters are omitted; required ones never are."""
        if param.required:
            return False
        hidden = param.documentation.get("hidden")
        if callable(hidden):
            hidden = hidden()
        return bool(hidden)
