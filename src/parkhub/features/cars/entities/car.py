"""Car domain entity."""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from ....core.projections import CarShort
from ....core.shared import require
from ....core.value_objects import CarId, IdentityId, coerce_id

ENTITY = "Car"


@dataclass
class Car:
    """Vehicle with exactly one owning identity.

    ``model`` and ``description`` are unique across all cars.
    """

    id: CarId
    brand: str
    model: str
    description: str
    identity_id: IdentityId

    @classmethod
    def create(
        cls,
        *,
        brand: Optional[str],
        model: Optional[str],
        description: Optional[str],
        identity_id: Any,
    ) -> "Car":
        return cls(
            id=CarId.generate(),
            brand=require(ENTITY, "brand", brand),
            model=require(ENTITY, "model", model),
            description=require(ENTITY, "description", description),
            identity_id=coerce_id(IdentityId, require(ENTITY, "identity_id", identity_id), "identity_id"),
        )

    def with_changes(self, changes: Dict[str, Any]) -> "Car":
        supplied = {name: value for name, value in changes.items() if value is not None}
        for name in supplied:
            require(ENTITY, name, supplied[name])
        if "identity_id" in supplied:
            supplied["identity_id"] = coerce_id(IdentityId, supplied["identity_id"], "identity_id")
        return replace(self, **supplied)

    def to_row(self) -> Dict[str, Any]:
        return {
            "id": self.id.value,
            "brand": self.brand,
            "model": self.model,
            "description": self.description,
            "identity_id": self.identity_id.value,
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Car":
        return cls(
            id=CarId(row["id"]),
            brand=row["brand"],
            model=row["model"],
            description=row["description"],
            identity_id=IdentityId(row["identity_id"]),
        )

    def to_short(self) -> CarShort:
        return CarShort(id=self.id.value, brand=self.brand, model=self.model, description=self.description)
