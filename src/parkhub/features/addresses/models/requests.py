"""Address request models."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AddressCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    city: Optional[str] = None
    street: Optional[str] = None
    house: Optional[str] = None


class AddressUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: Optional[UUID] = None
    city: Optional[str] = None
    street: Optional[str] = None
    house: Optional[str] = None
