"""Parking domain entity and the parking/car link."""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from ....core.exceptions import ValidationError
from ....core.projections import AddressShort, ParkingShort, ParkingWithAddress
from ....core.value_objects import AddressId, CarId, ParkingId

ENTITY = "Parking"


def validate_price(price: Any) -> int:
    if isinstance(price, bool) or not isinstance(price, int):
        raise ValidationError(f"{ENTITY} price must be an integer", details={"field": "price"})
    if price < 0:
        raise ValidationError(f"{ENTITY} price must be >= 0", details={"field": "price", "value": price})
    return price


@dataclass
class Parking:
    """Parking lot occupying at most one address.

    ``address_id`` becomes None when the address is deleted.
    """

    id: ParkingId
    address_id: Optional[AddressId]
    price: int = 0

    @classmethod
    def create(cls, *, address_id: AddressId, price: Optional[int] = None) -> "Parking":
        return cls(
            id=ParkingId.generate(),
            address_id=address_id,
            price=validate_price(0 if price is None else price),
        )

    def with_changes(self, *, address_id: Optional[AddressId] = None, price: Optional[int] = None) -> "Parking":
        changes: Dict[str, Any] = {}
        if address_id is not None:
            changes["address_id"] = address_id
        if price is not None:
            changes["price"] = validate_price(price)
        return replace(self, **changes)

    def to_row(self) -> Dict[str, Any]:
        return {
            "id": self.id.value,
            "address_id": self.address_id.value if self.address_id else None,
            "price": self.price,
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Parking":
        return cls(
            id=ParkingId(row["id"]),
            address_id=AddressId(row["address_id"]) if row["address_id"] is not None else None,
            price=row["price"],
        )

    def to_short(self) -> ParkingShort:
        return ParkingShort(id=self.id.value, price=self.price)

    def with_address(self, address: Optional[AddressShort]) -> ParkingWithAddress:
        return ParkingWithAddress(id=self.id.value, price=self.price, address=address)


@dataclass(frozen=True)
class ParkingCarLink:
    """One (parking, car) pair of the many-to-many assignment."""
    parking_id: ParkingId
    car_id: CarId

    def to_row(self) -> Dict[str, Any]:
        return {"parking_id": self.parking_id.value, "car_id": self.car_id.value}
