"""Sign-in/sign-up routes and the bearer-token dependencies used by mutation routes."""

import logging
import time
from collections.abc import Callable
from typing import Annotated
from uuid import uuid4

import jwt
from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from houser.api.v1.deps import get_app_settings, parse_body, store_failure, validate_fields
from houser.core.config import Settings
from houser.core.database import get_db
from houser.core.errors import APIError
from houser.core.security import (
    TokenDecodeError,
    create_access_token,
    decode_access_token,
    extract_bearer_token,
)
from houser.schemas.auth import SignInInput, TokenClaims, TokenEnvelope
from houser.schemas.user import UserEnvelope, UserFields, UserInput, UserOut
from houser.services.auth import find_user_for_sign_in
from houser.services.users import create_user

logger = logging.getLogger(__name__)
router = APIRouter()

EXPIRED_TOKEN_MSG = "unauthorized, check expiration time of your token"


def token_claims(invalid_status: int) -> Callable[..., TokenClaims]:
    """
    Build a dependency that verifies the bearer token and returns its claims.

    A token that fails verification is answered with ``invalid_status``. Expiry
    is not checked; handlers call ensure_token_not_expired themselves.
    """

    def dependency(
        request: Request,
        settings: Annotated[Settings, Depends(get_app_settings)],
    ) -> TokenClaims:
        token = extract_bearer_token(request.headers.get("Authorization"))
        try:
            return decode_access_token(token, settings)
        except TokenDecodeError as e:
            logger.info(
                "Rejected bearer token",
                extra={"path": request.url.path, "reason": e.message},
            )
            raise APIError(invalid_status, e.message) from e

    return dependency


# Failure statuses differ per route group, matching what clients of the legacy API expect.
house_create_claims = token_claims(status.HTTP_400_BAD_REQUEST)
house_claims = token_claims(status.HTTP_403_FORBIDDEN)
user_claims = token_claims(status.HTTP_500_INTERNAL_SERVER_ERROR)


def ensure_token_not_expired(claims: TokenClaims) -> None:
    """Reject with 401 when the current time is past the token's expiry."""
    if claims.is_expired(int(time.time())):
        logger.info("Rejected expired token", extra={"user_id": str(claims.user_id)})
        raise APIError(status.HTTP_401_UNAUTHORIZED, EXPIRED_TOKEN_MSG)


@router.post("/sign-in", response_model=TokenEnvelope)
async def sign_in(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> TokenEnvelope:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    body = await parse_body(request, SignInInput)
    try:
        user = await run_in_threadpool(
            find_user_for_sign_in, db, body.email, body.password, settings
        )
    except SQLAlchemyError as e:
        raise store_failure(e, settings) from e
    if user is None:
        logger.info("Sign-in failed: no matching credentials")
        raise APIError(
            status.HTTP_404_NOT_FOUND,
            "user with the given email and password is not found",
            user=None,
        )
    try:
        token = create_access_token(user.id, settings)
    except (jwt.PyJWTError, NotImplementedError) as e:
        logger.exception("Token signing failed")
        raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e)) from e
    return TokenEnvelope(access_token=token)


@router.post("/sign-up", response_model=UserEnvelope)
async def sign_up(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UserEnvelope:
    """Register a new user. The id and creation time are assigned by the server."""
    body = await parse_body(request, UserInput)
    fields = validate_fields(UserFields, {**body.model_dump(), "id": uuid4()})
    try:
        user = await run_in_threadpool(create_user, db, fields, settings)
    except SQLAlchemyError:
        logger.warning("Sign-up insert failed", exc_info=True)
        raise APIError(
            status.HTTP_404_NOT_FOUND,
            "user could not be created",
            user=None,
        )
    return UserEnvelope(user=UserOut.model_validate(user))
