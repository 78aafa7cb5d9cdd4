"""
Exporter Registry - maps dialect symbols to exporter classes.

Third parties add dialects without touching the core:

```python
exporters.register(MyExporter, as_="custom")
exporters.register(OAS3Exporter, as_=["oas3", "oas30"])
```
"""
import logging
from typing import Any, Dict, Iterable, List, Type, Union

logger = logging.getLogger(__name__)


class ExporterRegistry:
    """Dialect symbol -> exporter class."""

    def __init__(self):
        self._exporters: Dict[str, Type] = {}

    def register(self, exporter_class: Type, as_: Union[str, Iterable[str]]) -> "ExporterRegistry":
        if not callable(getattr(exporter_class, "export", None)):
            raise ValueError(f"Exporter {exporter_class!r} must define export(document)")

        schema_types = [as_] if isinstance(as_, str) else list(as_)
        for schema_type in schema_types:
            self._exporters[str(schema_type)] = exporter_class
            logger.debug(f"Registered exporter {exporter_class.__name__} as {schema_type}")
        return self

    def unregister(self, *schema_types: Any) -> "ExporterRegistry":
        for schema_type in schema_types:
            names = [schema_type] if isinstance(schema_type, str) else list(schema_type)
            for name in names:
                self._exporters.pop(str(name), None)
        return self

    def for_type(self, schema_type: Any) -> Type:
        exporter = self._exporters.get(str(schema_type))
        if exporter is None:
            raise ValueError(f"Unsupported schema type: {schema_type}")
        return exporter

    def registered(self, schema_type: Any) -> bool:
        return str(schema_type) in self._exporters

    @property
    def schema_types(self) -> List[str]:
        return list(self._exporters.keys())

    def clear(self) -> "ExporterRegistry":
        self._exporters.clear()
        return self

    def __len__(self) -> int:
        return len(self._exporters)
