"""
Manifest Loader - reads declarative API descriptions into descriptors.

A manifest is a JSON document (local file or http(s) URL):

```json
{
  "info": {"title": "Shop API", "version": "2"},
  "types": {"Email": {"primitive": "string", "meta": {"format": "email"}}},
  "entities": {"User": {"fields": [{"name": "id", "type": "integer"}]}},
  "contracts": {"CreateUser": {"types": {"email": "Email"},
                               "rules": {"email": ["and", [["key"], ["filled"]]]}}},
  "routes": [{"method": "POST", "path": "/users", "body": "CreateUser", "entity": "User"}]
}
```

Type names resolve within the manifest (types, entities, contracts), then
as primitive names; "[Name]" is an array of Name.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from routedoc import constants
from routedoc.descriptors.contract import ContractDescriptor, TypeSpec
from routedoc.descriptors.entity import EntityDescriptor, FieldExposure
from routedoc.descriptors.predicates import parse_predicate
from routedoc.descriptors.route import ParamSpec, RouteDescriptor
from routedoc.type_resolvers.base import resolve_type

logger = logging.getLogger(__name__)

ARRAY_NAME_PATTERN = re.compile(r"^\[\s*(.+?)\s*\]$")

SECTIONS = ["info", "types", "entities", "contracts", "routes"]


@dataclass
class Manifest:
    """Descriptors read from one manifest."""

    info: Dict[str, Any] = field(default_factory=dict)
    types: Dict[str, TypeSpec] = field(default_factory=dict)
    entities: Dict[str, EntityDescriptor] = field(default_factory=dict)
    contracts: Dict[str, ContractDescriptor] = field(default_factory=dict)
    routes: List[RouteDescriptor] = field(default_factory=list)

    def summary(self) -> Dict[str, Any]:
        return {
            "title": self.info.get("title"),
            "version": self.info.get("version"),
            "types": sorted(self.types),
            "entities": sorted(self.entities),
            "contracts": sorted(self.contracts),
            "routes": [f"{r.method.upper()} {r.path}" for r in self.routes],
        }


class ManifestLoader:
    """
    Loads manifests from disk or over HTTP

    Usage:
    ```python
    loader = ManifestLoader(timeout=10, auth_token="secret")
    manifest = loader.load("https://example.com/api-manifest.json")
    print(f"Found {len(manifest.routes)} routes")
    ```
    """

    def __init__(self, timeout: int = 30, auth_token: Optional[str] = None):
        self.timeout = timeout
        self.session = requests.Session()
        if auth_token:
            self.session.headers["Authorization"] = f"Bearer {auth_token}"

    def load(self, source: str) -> Manifest:
        data = self.fetch(source)
        manifest = self.parse(data)
        logger.info(
            f"Loaded manifest {source}: {len(manifest.entities)} entities, "
            f"{len(manifest.contracts)} contracts, {len(manifest.routes)} routes"
        )
        return manifest

    def fetch(self, source: str) -> Dict[str, Any]:
        """Raw manifest data from a URL or a file path."""
        if str(source).startswith(("http://", "https://")):
            return self._fetch_url(source)
        return self._read_file(Path(source))

    def _fetch_url(self, url: str) -> Dict[str, Any]:
        try:
            logger.debug(f"Fetching manifest: {url}")
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise RuntimeError(f"Could not fetch manifest from {url}: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise ValueError(f"Manifest at {url} is not valid JSON: {e}") from e

    @staticmethod
    def _read_file(path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except OSError as e:
            raise RuntimeError(f"Could not read manifest {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ValueError(f"Manifest {path} is not valid JSON: {e}") from e

    def parse(self, data: Any) -> Manifest:
        if not isinstance(data, dict):
            raise ValueError("Manifest root must be a JSON object")
        unknown = [key for key in data if key not in SECTIONS]
        if unknown:
            logger.warning(f"Ignoring unknown manifest sections: {', '.join(unknown)}")

        return _ManifestParser(data).parse()


class _ManifestParser:
    """Two passes: declare every named descriptor, then fill them in."""

    def __init__(self, data: Dict[str, Any]):
        self.data = data
        self.manifest = Manifest(info=dict(data.get("info") or {}))
        self._raw_types: Dict[str, Any] = dict(self._section("types", dict))

    def parse(self) -> Manifest:
        entities = self._section("entities", dict)
        contracts = self._section("contracts", dict)

        for name in entities:
            self.manifest.entities[name] = EntityDescriptor(name=name)
        for name in contracts:
            self.manifest.contracts[name] = ContractDescriptor(name=name)
        for name in self._raw_types:
            self._type_spec(name)

        for name, raw in entities.items():
            self._fill_entity(self.manifest.entities[name], raw)
        for name, raw in contracts.items():
            self._fill_contract(self.manifest.contracts[name], raw)

        for index, raw in enumerate(self._section("routes", list)):
            self.manifest.routes.append(self._route(raw, index))
        return self.manifest

    def _section(self, key: str, kind: type) -> Any:
        value = self.data.get(key)
        if value is None:
            return kind()
        if not isinstance(value, kind):
            raise ValueError(f"Manifest section '{key}' must be a JSON {'object' if kind is dict else 'array'}")
        return value

    # type references

    def resolve(self, ref: Any, where: str) -> Any:
        """Manifest name -> descriptor, TypeSpec or primitive name."""
        if ref is None:
            return None
        if isinstance(ref, dict):
            return self._inline_type_spec(ref, where)
        if isinstance(ref, list) and len(ref) == 1:
            return TypeSpec(primitive=list, member=self.resolve(ref[0], where))
        if not isinstance(ref, str):
            raise ValueError(f"Invalid type reference {ref!r} in {where}")

        match = ARRAY_NAME_PATTERN.match(ref)
        if match:
            return TypeSpec(primitive=list, member=self.resolve(match.group(1), where))

        if ref in self.manifest.entities:
            return self.manifest.entities[ref]
        if ref in self.manifest.contracts:
            return self.manifest.contracts[ref]
        if ref in self._raw_types:
            return self._type_spec(ref)
        if constants.primitive_type(ref) is not None or resolve_type(ref) is not None:
            return ref
        raise ValueError(f"Unknown type {ref!r} referenced in {where}")

    def _type_spec(self, name: str) -> TypeSpec:
        if name in self.manifest.types:
            return self.manifest.types[name]
        raw = self._raw_types[name]
        if isinstance(raw, str):
            raw = {"primitive": raw}
        if not isinstance(raw, dict):
            raise ValueError(f"Type {name!r} must be a JSON object or a type name")

        spec = TypeSpec(name=name)
        self.manifest.types[name] = spec
        self._fill_type_spec(spec, raw, f"type {name}")
        return spec

    def _inline_type_spec(self, raw: Dict[str, Any], where: str) -> TypeSpec:
        spec = TypeSpec(name=raw.get("name"))
        self._fill_type_spec(spec, raw, where)
        return spec

    def _fill_type_spec(self, spec: TypeSpec, raw: Dict[str, Any], where: str) -> None:
        if raw.get("wrapped") is not None:
            wrapped = self.resolve(raw["wrapped"], where)
            if isinstance(wrapped, TypeSpec):
                spec.wrapped = wrapped
            else:
                spec.primitive = wrapped
        if raw.get("primitive") is not None:
            spec.primitive = self.resolve(raw["primitive"], where)
        if raw.get("member") is not None:
            spec.primitive = list
            spec.member = self.resolve(raw["member"], where)
        spec.meta = dict(raw.get("meta") or {})
        spec.optional = bool(raw.get("optional"))
        spec.values = raw.get("values")
        spec.rules = _parse_rules(raw.get("rules"))

    # descriptors

    def _fill_entity(self, entity: EntityDescriptor, raw: Dict[str, Any]) -> None:
        where = f"entity {entity.name}"
        if not isinstance(raw, dict):
            raise ValueError(f"{where} must be a JSON object")

        entity.documentation = dict(raw.get("documentation") or {})
        if raw.get("description"):
            entity.documentation.setdefault("description", raw["description"])
        mapping = entity.documentation.get("discriminator_mapping")
        if isinstance(mapping, dict):
            entity.documentation["discriminator_mapping"] = {
                value: self.resolve(subtype, where) for value, subtype in mapping.items()
            }

        if raw.get("parent"):
            parent = self.manifest.entities.get(raw["parent"])
            if parent is None:
                raise ValueError(f"Unknown parent entity {raw['parent']!r} in {where}")
            entity.parent = parent

        for raw_field in raw.get("fields") or []:
            if isinstance(raw_field, str):
                raw_field = {"name": raw_field}
            if not isinstance(raw_field, dict) or not raw_field.get("name"):
                raise ValueError(f"Every field of {where} needs a name")
            entity.fields.append(
                FieldExposure(
                    name=raw_field["name"],
                    declared_type=self.resolve(raw_field.get("type"), where),
                    documentation=dict(raw_field.get("documentation") or {}),
                    conditional=bool(raw_field.get("conditional")),
                    merge_into_parent=bool(raw_field.get("merge")),
                    using=self.resolve(raw_field.get("using"), where),
                    alias=raw_field.get("as") or raw_field.get("alias"),
                    never_shown=bool(raw_field.get("never_shown")),
                )
            )

    def _fill_contract(self, contract: ContractDescriptor, raw: Dict[str, Any]) -> None:
        where = f"contract {contract.name}"
        if not isinstance(raw, dict):
            raise ValueError(f"{where} must be a JSON object")

        contract.documentation = dict(raw.get("documentation") or {})
        if raw.get("parent"):
            parent = self.manifest.contracts.get(raw["parent"])
            if parent is None:
                raise ValueError(f"Unknown parent contract {raw['parent']!r} in {where}")
            contract.parent = parent

        contract.types = {name: self.resolve(ref, where) for name, ref in (raw.get("types") or {}).items()}
        rules = {}
        for field_name, raw_rule in (raw.get("rules") or {}).items():
            node = parse_predicate(raw_rule)
            if node is not None:
                rules[field_name] = node
        contract.rules = rules

    def _route(self, raw: Dict[str, Any], index: int) -> RouteDescriptor:
        where = f"route #{index}"
        if not isinstance(raw, dict) or not raw.get("method") or not raw.get("path"):
            raise ValueError(f"{where} needs a method and a path")

        params = []
        for raw_param in raw.get("params") or []:
            if not isinstance(raw_param, dict) or not raw_param.get("name"):
                raise ValueError(f"Every parameter of {where} needs a name")
            params.append(
                ParamSpec(
                    name=raw_param["name"],
                    type=self.resolve(raw_param.get("type"), where),
                    location=raw_param.get("in") or raw_param.get("location"),
                    required=bool(raw_param.get("required")),
                    documentation=dict(raw_param.get("documentation") or {}),
                    values=raw_param.get("values"),
                    default=raw_param.get("default"),
                )
            )

        documentation = dict(raw.get("documentation") or {})
        for entry in documentation.get("http_codes") or []:
            if isinstance(entry, dict) and entry.get("entity"):
                entry["entity"] = self.resolve(entry["entity"], where)

        return RouteDescriptor(
            method=str(raw["method"]).upper(),
            path=raw["path"],
            params=params,
            entity=self.resolve(raw.get("entity"), where),
            body=self.resolve(raw.get("body"), where),
            documentation=documentation,
        )


def _parse_rules(raw_rules: Any) -> List[Any]:
    if raw_rules is None:
        return []
    if not isinstance(raw_rules, list) or (raw_rules and isinstance(raw_rules[0], str)):
        raw_rules = [raw_rules]
    return [node for node in (parse_predicate(r) for r in raw_rules) if node is not None]
