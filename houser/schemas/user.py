"""Request/response schemas for user endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from houser.schemas.common import Envelope

NAME_MAX_LEN = 30
PASSWORD_MIN_LEN = 3
PASSWORD_MAX_LEN = 30


class UserInput(BaseModel):
    """User body as parsed from JSON; constraints are checked separately by UserFields."""

    id: UUID | None = None
    name: str = ""
    email: str = ""
    password: str = ""


class UserFields(BaseModel):
    """Constraints a full user must satisfy before it is written."""

    id: UUID
    name: str = Field(default="", max_length=NAME_MAX_LEN)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class UserIdFields(BaseModel):
    """Partial check used by delete: only the identifier is required."""

    id: UUID


class UserOut(BaseModel):
    """Public view of a user (never includes the password)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    created_at: datetime | None = None


class UserEnvelope(Envelope):
    user: UserOut


class UsersEnvelope(Envelope):
    count: int
    users: list[UserOut]
