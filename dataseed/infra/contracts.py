from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, Protocol

from .models import RawDefinition, StepRecord

ItemHandler = Callable[[Any], Any]


class DefinitionSource(Protocol):
    """Provider of raw step definitions, one per authored file/blob."""

    def iter_definitions(self) -> Iterable[RawDefinition]:
        raise NotImplementedError


class ContentHasher(Protocol):
    """Stable, deterministic, whitespace-insensitive content hash."""

    def hash(self, content: str) -> str:
        raise NotImplementedError


class SeedRepository(Protocol):
    """Durable record of which steps have completed, keyed by order."""

    def get_data_seed_steps(self) -> List[StepRecord]:
        raise NotImplementedError

    def save_data_seed_step(self, record: StepRecord) -> None:
        """Upsert keyed by record.order."""
        raise NotImplementedError


class TypeRegistry(Protocol):
    """Host-supplied mapping from logical item type names to item types and handlers."""

    def resolve_type(self, name: str) -> Optional[type]:
        raise NotImplementedError

    def handler_for(self, item_type: type) -> Optional[ItemHandler]:
        raise NotImplementedError
