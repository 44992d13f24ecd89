"""Identity request models.

Fields are optional at the model level; required-field checks happen in the
entity constructor so a missing field surfaces as RequiredFieldError.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..entities.identity import Role


class IdentityCreateRequest(BaseModel):
    """Self-registration payload."""
    model_config = ConfigDict(extra="forbid")

    authority: Role = Field(Role.USER, description="Role; ADMIN requires an admin caller")
    username: Optional[str] = None
    password: Optional[str] = Field(None, description="Cleartext password, hashed before storage")
    email: Optional[str] = None
    enabled: Optional[bool] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    patronymic: Optional[str] = None


class IdentityUpdateRequest(BaseModel):
    """Partial update; only supplied fields overwrite."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[UUID] = None
    username: Optional[str] = None
    email: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    patronymic: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: Optional[UUID] = None
    password: Optional[str] = None


class ChangeStatusRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: Optional[UUID] = None
    enabled: Optional[bool] = None
