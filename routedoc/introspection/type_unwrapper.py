"""Unwraps TypeSpec wrapper chains down to their core type."""
import logging
from typing import Any, Dict, List, Optional, Tuple

from routedoc.constants import MAX_UNWRAP_DEPTH, type_name_of
from routedoc.descriptors.contract import TypeSpec

logger = logging.getLogger(__name__)


class TypeUnwrapper:
    """Walks `wrapped` links; stops after MAX_UNWRAP_DEPTH hops."""

    @staticmethod
    def chain(spec: TypeSpec) -> List[TypeSpec]:
        """The spec followed by each wrapped spec, outermost first."""
        links = [spec]
        current = spec
        depth = 0
        while isinstance(current.wrapped, TypeSpec) and depth < MAX_UNWRAP_DEPTH:
            if current.wrapped is current or current.wrapped in links:
                break
            current = current.wrapped
            links.append(current)
            depth += 1

        if isinstance(current.wrapped, TypeSpec) and depth >= MAX_UNWRAP_DEPTH:
            logger.warning(f"Type wrapper chain deeper than {MAX_UNWRAP_DEPTH} levels for {spec!r}")
        return links

    @classmethod
    def unwrap(cls, spec: TypeSpec) -> TypeSpec:
        return cls.chain(spec)[-1]

    @classmethod
    def derive_primitive_and_member(cls, spec: TypeSpec) -> Tuple[Any, Any]:
        """
        (primitive, member) of the core.

        A core whose `wrapped` is a plain type (not a TypeSpec) uses that
        type as its primitive.
        """
        core = cls.unwrap(spec)
        primitive = core.primitive
        if primitive is None and core.wrapped is not None and not isinstance(core.wrapped, TypeSpec):
            primitive = core.wrapped

        if core.member is not None or _is_array_primitive(primitive):
            return list, core.member
        return primitive, None

    @classmethod
    def is_nullable(cls, spec: TypeSpec) -> bool:
        return any(link.is_optional() for link in cls.chain(spec))

    @classmethod
    def merged_meta(cls, spec: TypeSpec) -> Dict[str, Any]:
        """Metadata along the chain; outer wrappers override inner ones."""
        meta: Dict[str, Any] = {}
        for link in reversed(cls.chain(spec)):
            meta.update(link.meta)
        return meta

    @classmethod
    def values(cls, spec: TypeSpec) -> Optional[List[Any]]:
        for link in cls.chain(spec):
            if link.values is not None:
                return list(link.values)
        return None

    @classmethod
    def name(cls, spec: TypeSpec) -> Optional[str]:
        for link in cls.chain(spec):
            if link.name:
                return link.name
        return None


def _is_array_primitive(primitive: Any) -> bool:
    if primitive in (list, tuple, set, frozenset):
        return True
    return isinstance(primitive, str) and type_name_of(primitive) in ("array", "list")
