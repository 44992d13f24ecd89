"""Caller credentials and the authenticated caller."""

from dataclasses import dataclass, field

from ....core.value_objects import IdentityId
from ...identities.entities.identity import Role


@dataclass(frozen=True)
class Credentials:
    """Email and cleartext password presented once per request."""
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class AuthenticatedCaller:
    """Enabled identity whose credentials were verified against the store."""
    identity_id: IdentityId
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
