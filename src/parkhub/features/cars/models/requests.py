"""Car request models."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CarCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    brand: Optional[str] = None
    model: Optional[str] = None
    description: Optional[str] = None
    identity_id: Optional[UUID] = None


class CarUpdateRequest(BaseModel):
    """Partial update; ``identity_id`` moves the car to another existing identity."""
    model_config = ConfigDict(extra="forbid")

    id: Optional[UUID] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    description: Optional[str] = None
    identity_id: Optional[UUID] = None
