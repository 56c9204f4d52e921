"""Pydantic request/response schemas."""

from houser.schemas.auth import SignInInput, TokenClaims, TokenEnvelope
from houser.schemas.common import Envelope
from houser.schemas.health import HealthResponse
from houser.schemas.house import (
    HouseEnvelope,
    HouseFields,
    HouseIdFields,
    HouseInput,
    HouseOut,
    HousesEnvelope,
)
from houser.schemas.user import (
    UserEnvelope,
    UserFields,
    UserIdFields,
    UserInput,
    UserOut,
    UsersEnvelope,
)

__all__ = [
    "Envelope",
    "HealthResponse",
    "HouseEnvelope",
    "HouseFields",
    "HouseIdFields",
    "HouseInput",
    "HouseOut",
    "HousesEnvelope",
    "SignInInput",
    "TokenClaims",
    "TokenEnvelope",
    "UserEnvelope",
    "UserFields",
    "UserIdFields",
    "UserInput",
    "UserOut",
    "UsersEnvelope",
]
