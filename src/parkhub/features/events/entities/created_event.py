"""Entity-created event."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ...coherence.entities.keys import EntityKind


@dataclass(frozen=True)
class EntityCreatedEvent:
    """Full projection of a freshly created entity, tagged with its kind."""

    kind: EntityKind
    entity_id: Any
    payload: str
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def name(self) -> str:
        return f"Create {self.kind.value.capitalize()}"

    def channel(self, prefix: str = "") -> str:
        return f"{prefix}{self.kind.value}-topic"

    def to_message(self) -> str:
        return json.dumps({
            "event": self.name,
            "kind": self.kind.value,
            "id": str(self.entity_id),
            "occurred_at": self.occurred_at.isoformat(),
            "payload": json.loads(self.payload),
        })
