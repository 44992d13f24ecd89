"""Identity domain entity."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional

from ....core.projections import IdentityShort
from ....core.shared import require
from ....core.value_objects import IdentityId

ENTITY = "Identity"


class Role(str, Enum):
    """Authority tiers."""
    ADMIN = "ADMIN"
    USER = "USER"


@dataclass
class Identity:
    """Account identity.

    ``password`` always holds a password hash, never the cleartext.
    """

    id: IdentityId
    authority: Role
    username: str
    password: str
    email: str
    enabled: bool
    firstname: str
    lastname: str
    patronymic: str

    @classmethod
    def create(
        cls,
        *,
        authority: Optional[Role],
        username: Optional[str],
        password_hash: str,
        email: Optional[str],
        firstname: Optional[str],
        lastname: Optional[str],
        patronymic: Optional[str],
        enabled: Optional[bool] = None,
    ) -> "Identity":
        """Validated constructor; raises RequiredFieldError for missing fields."""
        return cls(
            id=IdentityId.generate(),
            authority=Role(require(ENTITY, "authority", authority)),
            username=require(ENTITY, "username", username),
            password=require(ENTITY, "password", password_hash),
            email=require(ENTITY, "email", email),
            enabled=True if enabled is None else enabled,
            firstname=require(ENTITY, "firstname", firstname),
            lastname=require(ENTITY, "lastname", lastname),
            patronymic=require(ENTITY, "patronymic", patronymic),
        )

    @property
    def is_admin(self) -> bool:
        return self.authority is Role.ADMIN

    def with_changes(self, changes: Dict[str, Any]) -> "Identity":
        """Copy with supplied fields replaced; None values keep the current value."""
        supplied = {name: value for name, value in changes.items() if value is not None}
        for name in supplied:
            require(ENTITY, name, supplied[name])
        return replace(self, **supplied)

    def to_row(self) -> Dict[str, Any]:
        return {
            "id": self.id.value,
            "authority": self.authority.value,
            "username": self.username,
            "password": self.password,
            "email": self.email,
            "enabled": self.enabled,
            "firstname": self.firstname,
            "lastname": self.lastname,
            "patronymic": self.patronymic,
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Identity":
        return cls(
            id=IdentityId(row["id"]),
            authority=Role(row["authority"]),
            username=row["username"],
            password=row["password"],
            email=row["email"],
            enabled=row["enabled"],
            firstname=row["firstname"],
            lastname=row["lastname"],
            patronymic=row["patronymic"],
        )

    def to_short(self) -> IdentityShort:
        return IdentityShort(
            id=self.id.value,
            username=self.username,
            email=self.email,
            firstname=self.firstname,
            lastname=self.lastname,
            patronymic=self.patronymic,
        )
