"""Request/response schemas for auth endpoints and token claims."""

import time
from uuid import UUID

from pydantic import BaseModel, Field, StrictInt

from houser.schemas.common import Envelope


class SignInInput(BaseModel):
    """Credentials for sign-in. Only parsed, never constraint-validated."""

    email: str = ""
    password: str = ""


class TokenClaims(BaseModel):
    """Decoded claims of an access token: subject user and absolute expiry (unix seconds)."""

    user_id: UUID
    # Strict: a string or bool exp is a malformed token, not a coerced timestamp.
    expires: StrictInt

    def is_expired(self, now: int | None = None) -> bool:
        """True once the current unix time is past the expiry."""
        if now is None:
            now = int(time.time())
        return now > self.expires


class TokenEnvelope(Envelope):
    """Response for POST /sign-in."""

    access_token: str = Field(..., description="JWT access token")
