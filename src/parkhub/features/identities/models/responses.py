"""Identity response models."""

from typing import List, Sequence

from ....core.projections import CarShort, IdentityShort
from ..entities.identity import Identity, Role


class IdentityResponse(IdentityShort):
    """Identity full projection: short fields, role, status and owned cars."""
    authority: Role
    enabled: bool
    cars: List[CarShort] = []

    @classmethod
    def from_entities(cls, identity: Identity, cars: Sequence[CarShort]) -> "IdentityResponse":
        return cls(
            **identity.to_short().model_dump(),
            authority=identity.authority,
            enabled=identity.enabled,
            cars=list(cars),
        )
