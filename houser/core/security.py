"""Password hashing and JWT creation/verification for authentication."""

import hmac
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import bcrypt
import jwt
from pydantic import ValidationError

from houser.core.config import Settings
from houser.schemas.auth import TokenClaims

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

# Claims every access token must carry.
REQUIRED_CLAIMS = ["exp", "user_id"]


class TokenDecodeError(Exception):
    """Raised when a bearer token cannot be verified or its claims are malformed."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def hash_password(plain_password: str, settings: Settings) -> str:
    """Hash a plain-text password for storage; returns it unchanged in legacy mode."""
    if settings.LEGACY_PLAINTEXT_PASSWORDS:
        return plain_password
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, stored: str, settings: Settings) -> bool:
    """Verify a plain password against a stored hash (or stored plain text in legacy mode)."""
    if settings.LEGACY_PLAINTEXT_PASSWORDS:
        return hmac.compare_digest(plain_password.encode("utf-8"), stored.encode("utf-8"))
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, stored.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    user_id: UUID,
    settings: Settings,
    now: datetime | None = None,
) -> str:
    """Create a JWT access token carrying user_id and an absolute exp."""
    now = now or datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "user_id": str(user_id),
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def extract_bearer_token(authorization: str | None) -> str:
    """
    Return the token part of an ``Authorization: Bearer <token>`` header.

    Anything that does not split into exactly two parts yields "" and is left
    for signature verification to reject.
    """
    parts = (authorization or "").split(" ")
    if len(parts) == 2:
        return parts[1]
    return ""


def decode_access_token(token: str, settings: Settings) -> TokenClaims:
    """
    Verify the signature of a token and return its typed claims.

    Expiry is deliberately not checked here: an expired but well-signed token
    decodes normally and callers compare TokenClaims.expires themselves.
    Raises TokenDecodeError on a bad signature, malformed token or missing/mistyped claims.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_exp": False, "require": REQUIRED_CLAIMS},
        )
    except jwt.PyJWTError as e:
        raise TokenDecodeError(str(e) or "invalid token") from e
    try:
        return TokenClaims.model_validate(
            {"user_id": payload["user_id"], "expires": payload["exp"]}
        )
    except ValidationError as e:
        raise TokenDecodeError("token claims are malformed") from e
