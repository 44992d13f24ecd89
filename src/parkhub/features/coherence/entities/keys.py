"""Cache key scheme for entity snapshots."""

from enum import Enum
from typing import Any


class EntityKind(str, Enum):
    """Entity kinds; also used as event kind tags."""
    IDENTITY = "identity"
    CAR = "car"
    ADDRESS = "address"
    PARKING = "parking"


# Address snapshots are not cached
CACHED_KINDS = frozenset({EntityKind.IDENTITY, EntityKind.CAR, EntityKind.PARKING})

KEY_SEPARATOR = "::"


def cache_key(kind: EntityKind, entity_id: Any) -> str:
    """Build ``<kind>::<id>`` for an identifier (UUID, EntityId or str)."""
    return f"{kind.value}{KEY_SEPARATOR}{getattr(entity_id, 'value', entity_id)}"
