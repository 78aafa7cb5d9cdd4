"""Cycle detection over the processing stack."""
import logging
from contextlib import contextmanager

from routedoc.constants import CYCLE_DESCRIPTION
from routedoc.schema.models import Schema
from routedoc.schema.registry import ProcessingStack

logger = logging.getLogger(__name__)


class CycleTracker:
    """Tracks one canonical name on the shared stack."""

    def __init__(self, name: str, stack: ProcessingStack):
        self.name = name
        self.stack = stack

    def is_cyclic(self) -> bool:
        return self.name in self.stack

    def handle_cycle(self, schema: Schema) -> Schema:
        """Mark the in-progress schema instead of recursing into it again."""
        logger.debug(f"Cycle detected at {self.name}: {' -> '.join(self.stack)}")
        if schema.description is None:
            schema.description = CYCLE_DESCRIPTION
        return schema

    @contextmanager
    def tracking(self):
        self.stack.push(self.name)
        try:
            yield
        finally:
            self.stack.pop()
