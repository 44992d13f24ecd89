"""Address domain entity."""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from ....core.projections import AddressShort
from ....core.shared import require
from ....core.value_objects import AddressId

ENTITY = "Address"


@dataclass
class Address:
    """Independent location, optionally occupied by one parking."""

    id: AddressId
    city: str
    street: str
    house: str

    @classmethod
    def create(cls, *, city: Optional[str], street: Optional[str], house: Optional[str]) -> "Address":
        return cls(
            id=AddressId.generate(),
            city=require(ENTITY, "city", city),
            street=require(ENTITY, "street", street),
            house=require(ENTITY, "house", house),
        )

    def with_changes(self, changes: Dict[str, Any]) -> "Address":
        supplied = {name: value for name, value in changes.items() if value is not None}
        for name in supplied:
            require(ENTITY, name, supplied[name])
        return replace(self, **supplied)

    def to_row(self) -> Dict[str, Any]:
        return {"id": self.id.value, "city": self.city, "street": self.street, "house": self.house}

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Address":
        return cls(id=AddressId(row["id"]), city=row["city"], street=row["street"], house=row["house"])

    def to_short(self) -> AddressShort:
        return AddressShort(id=self.id.value, city=self.city, street=self.street, house=self.house)
