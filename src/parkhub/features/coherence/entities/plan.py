"""Invalidation plan collected while a mutation runs."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

from ...database.entities.protocols import StoreSession
from .keys import EntityKind, cache_key


class InvalidationPlan:
    """Ordered, duplicate-free set of cache keys to delete after commit."""

    def __init__(self):
        self._keys: Dict[str, None] = {}

    def add(self, kind: EntityKind, *entity_ids: Any) -> None:
        for entity_id in entity_ids:
            if entity_id is not None:
                self._keys[cache_key(kind, entity_id)] = None

    @property
    def keys(self) -> List[str]:
        return list(self._keys)

    def __contains__(self, key: str) -> bool:
        return key in self._keys

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)


@dataclass
class MutationScope:
    """Open write transaction plus the plan flushed once it commits."""
    session: StoreSession
    plan: InvalidationPlan = field(default_factory=InvalidationPlan)
