"""User routes: public reads, token-protected create/update/delete."""

import logging
from typing import Annotated
from uuid import UUID, uuid4

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from houser.api.v1.auth import ensure_token_not_expired, user_claims
from houser.api.v1.deps import get_app_settings, parse_body, store_failure, validate_fields
from houser.core.config import Settings
from houser.core.database import get_db
from houser.core.errors import APIError
from houser.models import User
from houser.schemas.auth import TokenClaims
from houser.schemas.user import (
    UserEnvelope,
    UserFields,
    UserIdFields,
    UserInput,
    UserOut,
    UsersEnvelope,
)
from houser.services import users as user_store

logger = logging.getLogger(__name__)
router = APIRouter()

USER_NOT_FOUND_MSG = "user with this ID not found"


def _ensure_may_modify(claims: TokenClaims, user: User, settings: Settings) -> None:
    """With ENFORCE_USER_OWNERSHIP off (legacy), any authenticated caller may modify any user."""
    if settings.ENFORCE_USER_OWNERSHIP and claims.user_id != user.id:
        logger.info(
            "User modification denied",
            extra={"user_id": str(claims.user_id), "target_id": str(user.id)},
        )
        raise APIError(status.HTTP_403_FORBIDDEN, "You don't have permission for update")


def _find_user(db: Session, user_id: UUID, settings: Settings) -> User:
    try:
        user = user_store.get_user_by_id(db, user_id)
    except SQLAlchemyError as e:
        raise store_failure(e, settings) from e
    if user is None:
        raise APIError(status.HTTP_404_NOT_FOUND, USER_NOT_FOUND_MSG)
    return user


@router.get("/users", response_model=UsersEnvelope)
def get_users(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UsersEnvelope:
    """List all users."""
    try:
        users = user_store.list_users(db)
    except SQLAlchemyError as e:
        raise store_failure(
            e, settings, status.HTTP_404_NOT_FOUND, count=0, users=None
        ) from e
    return UsersEnvelope(
        count=len(users),
        users=[UserOut.model_validate(u) for u in users],
    )


@router.get("/user/{user_id}", response_model=UserEnvelope)
def get_user(
    user_id: str,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UserEnvelope:
    """Get one user by id."""
    try:
        parsed_id = UUID(user_id)
    except ValueError as e:
        raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, f"invalid UUID: {user_id}") from e
    try:
        user = user_store.get_user_by_id(db, parsed_id)
    except SQLAlchemyError as e:
        raise store_failure(e, settings) from e
    if user is None:
        raise APIError(
            status.HTTP_404_NOT_FOUND,
            "user with the given ID is not found",
            user=None,
        )
    return UserEnvelope(user=UserOut.model_validate(user))


@router.post("/user", response_model=UserEnvelope)
async def post_user(
    request: Request,
    claims: Annotated[TokenClaims, Depends(user_claims)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UserEnvelope:
    """Create a user on behalf of an authenticated caller."""
    ensure_token_not_expired(claims)
    body = await parse_body(request, UserInput)
    fields = validate_fields(UserFields, {**body.model_dump(), "id": uuid4()})
    try:
        user = await run_in_threadpool(user_store.create_user, db, fields, settings)
    except SQLAlchemyError as e:
        raise store_failure(e, settings) from e
    return UserEnvelope(user=UserOut.model_validate(user))


@router.put("/user", status_code=status.HTTP_201_CREATED, response_class=Response)
async def put_user(
    request: Request,
    claims: Annotated[TokenClaims, Depends(user_claims)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Response:
    """Replace name, email and password of the user identified by the body's id."""
    ensure_token_not_expired(claims)
    body = await parse_body(request, UserInput)
    if body.id is None:
        raise APIError(status.HTTP_404_NOT_FOUND, USER_NOT_FOUND_MSG)
    user = _find_user(db, body.id, settings)
    _ensure_may_modify(claims, user, settings)
    fields = validate_fields(UserFields, body.model_dump())
    try:
        await run_in_threadpool(user_store.update_user, db, user.id, fields, settings)
    except SQLAlchemyError as e:
        raise store_failure(e, settings) from e
    return Response(status_code=status.HTTP_201_CREATED)


@router.delete("/user", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_user(
    request: Request,
    claims: Annotated[TokenClaims, Depends(user_claims)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Response:
    """Delete the user identified by the body's id."""
    ensure_token_not_expired(claims)
    body = await parse_body(request, UserInput)
    fields = validate_fields(UserIdFields, {"id": body.id})
    user = _find_user(db, fields.id, settings)
    _ensure_may_modify(claims, user, settings)
    try:
        user_store.delete_user(db, user.id)
    except SQLAlchemyError as e:
        raise store_failure(e, settings) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
