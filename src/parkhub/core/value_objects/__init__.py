"""Value objects for parkhub."""

from .identifiers import EntityId, IdentityId, CarId, AddressId, ParkingId, coerce_id

__all__ = ["EntityId", "IdentityId", "CarId", "AddressId", "ParkingId", "coerce_id"]
