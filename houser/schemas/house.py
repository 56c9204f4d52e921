"""Request/response schemas for house endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from houser.schemas.common import Envelope

DESCRIPTION_MAX_LEN = 2000
ADDRESS_MAX_LEN = 255


class HouseInput(BaseModel):
    """House body as parsed from JSON. owner_id is accepted but never written by clients."""

    id: UUID | None = None
    description: str = ""
    address: str = ""
    owner_id: UUID | None = None


class HouseFields(BaseModel):
    """Constraints a full house must satisfy before it is written."""

    id: UUID
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LEN)
    address: str = Field(default="", max_length=ADDRESS_MAX_LEN)
    owner_id: UUID


class HouseIdFields(BaseModel):
    """Partial check used by delete: only the identifier is required."""

    id: UUID


class HouseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    description: str
    address: str
    owner_id: UUID
    created_at: datetime | None = None


class HouseEnvelope(Envelope):
    house: HouseOut


class HousesEnvelope(Envelope):
    count: int
    houses: list[HouseOut]
