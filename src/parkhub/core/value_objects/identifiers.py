"""Value objects for identifiers in parkhub.

Every entity is identified by a 128-bit UUID generated at creation.
Each entity kind gets its own immutable identifier type so that a car id
can never be passed where a parking id is expected.
"""

from dataclasses import dataclass
from uuid import UUID

from ...utils.uuid import generate_uuid_v7


@dataclass(frozen=True)
class EntityId:
    """Base identifier value object wrapping a UUID."""
    value: UUID

    def __post_init__(self):
        if not isinstance(self.value, UUID):
            try:
                object.__setattr__(self, 'value', UUID(str(self.value)))
            except (ValueError, TypeError):
                raise ValueError(f"{self.__class__.__name__} must be a valid UUID, got: {self.value}")

    @classmethod
    def generate(cls):
        """Generate a new identifier using UUIDv7 for time-ordering."""
        return cls(generate_uuid_v7())

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(value={self.value!r})"


@dataclass(frozen=True, repr=False)
class IdentityId(EntityId):
    """Identity (account) identifier."""


@dataclass(frozen=True, repr=False)
class CarId(EntityId):
    """Car identifier."""


@dataclass(frozen=True, repr=False)
class AddressId(EntityId):
    """Address identifier."""


@dataclass(frozen=True, repr=False)
class ParkingId(EntityId):
    """Parking lot identifier."""


def coerce_id(id_type, value, field_name: str = "id"):
    """Convert a raw identifier into ``id_type``, raising ValidationError when invalid."""
    from ..exceptions import RequiredFieldError, ValidationError

    if isinstance(value, id_type):
        return value
    if isinstance(value, EntityId):
        value = value.value
    if value is None:
        raise RequiredFieldError(id_type.__name__.replace("Id", ""), field_name)
    try:
        return id_type(value)
    except ValueError as e:
        raise ValidationError(str(e), details={"field": field_name})
