"""Structural entity descriptors."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(eq=False)
class FieldExposure:
    """One exposed field of an entity."""

    name: str
    declared_type: Any = None
    documentation: Dict[str, Any] = field(default_factory=dict)
    conditional: bool = False  # present only when a runtime condition holds
    merge_into_parent: bool = False  # flatten the nested entity's fields
    using: Any = None  # nested entity descriptor
    alias: Optional[str] = None
    never_shown: bool = False

    @property
    def key(self) -> str:
        """Property name in the rendered schema."""
        return self.alias or self.name

    @property
    def resolved_type(self) -> Any:
        """The nested entity when present, else the declared or documented type."""
        if self.using is not None:
            return self.using
        if self.declared_type is not None:
            return self.declared_type
        return self.documentation.get("type")


@dataclass(eq=False)
class EntityDescriptor:
    """
    A named, ordered list of field exposures.

    A child inherits every exposure of its parent; exposures() returns the
    combined list, the child's own overriding same-named parent ones.
    """

    name: str
    fields: List[FieldExposure] = field(default_factory=list)
    parent: Optional["EntityDescriptor"] = None
    documentation: Dict[str, Any] = field(default_factory=dict)

    def expose(self, name: str, **options) -> FieldExposure:
        """Append an exposure and return it."""
        exposure = FieldExposure(name=name, **options)
        self.fields.append(exposure)
        return exposure

    def exposures(self) -> List[FieldExposure]:
        if self.parent is None:
            return list(self.fields)

        own_keys = {f.key for f in self.fields}
        inherited = [f for f in self.parent.exposures() if f.key not in own_keys]
        return inherited + list(self.fields)

    def field_keys(self) -> List[str]:
        return [f.key for f in self.exposures()]

    def __repr__(self) -> str:
        return f"EntityDescriptor({self.name!r})"
