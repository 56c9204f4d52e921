"""House routes: public reads, owner-only update/delete."""

import logging
from typing import Annotated
from uuid import UUID, uuid4

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from houser.api.v1.auth import ensure_token_not_expired, house_claims, house_create_claims
from houser.api.v1.deps import get_app_settings, parse_body, store_failure, validate_fields
from houser.core.config import Settings
from houser.core.database import get_db
from houser.core.errors import APIError
from houser.models import House
from houser.schemas.auth import TokenClaims
from houser.schemas.house import (
    HouseEnvelope,
    HouseFields,
    HouseIdFields,
    HouseInput,
    HouseOut,
    HousesEnvelope,
)
from houser.services import houses as house_store

logger = logging.getLogger(__name__)
router = APIRouter()

HOUSE_NOT_FOUND_MSG = "house with this ID not found"


def _find_house(db: Session, house_id: UUID, settings: Settings) -> House:
    try:
        house = house_store.get_house_by_id(db, house_id)
    except SQLAlchemyError as e:
        raise store_failure(e, settings) from e
    if house is None:
        raise APIError(status.HTTP_404_NOT_FOUND, HOUSE_NOT_FOUND_MSG)
    return house


def _ensure_owner(claims: TokenClaims, house: House) -> None:
    if claims.user_id != house.owner_id:
        logger.info(
            "House modification denied",
            extra={"user_id": str(claims.user_id), "house_id": str(house.id)},
        )
        raise APIError(status.HTTP_403_FORBIDDEN, "You don't have permission for update")


@router.get("/houses", response_model=HousesEnvelope)
def get_houses(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HousesEnvelope:
    """List all houses."""
    try:
        houses = house_store.list_houses(db)
    except SQLAlchemyError as e:
        raise store_failure(
            e, settings, status.HTTP_404_NOT_FOUND, count=0, houses=None
        ) from e
    return HousesEnvelope(
        count=len(houses),
        houses=[HouseOut.model_validate(h) for h in houses],
    )


@router.get("/house/{house_id}", response_model=HouseEnvelope)
def get_house(
    house_id: str,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HouseEnvelope:
    """Get one house by id."""
    try:
        parsed_id = UUID(house_id)
    except ValueError as e:
        raise APIError(status.HTTP_500_INTERNAL_SERVER_ERROR, f"invalid UUID: {house_id}") from e
    try:
        house = house_store.get_house_by_id(db, parsed_id)
    except SQLAlchemyError as e:
        raise store_failure(e, settings) from e
    if house is None:
        raise APIError(
            status.HTTP_404_NOT_FOUND,
            "house with the given ID is not found",
            house=None,
        )
    return HouseEnvelope(house=HouseOut.model_validate(house))


@router.post("/house", response_model=HouseEnvelope)
async def post_house(
    request: Request,
    claims: Annotated[TokenClaims, Depends(house_create_claims)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HouseEnvelope:
    """
    Create a house owned by the caller.

    The id, owner and creation time are assigned by the server; any id or
    owner_id in the body is ignored.
    """
    ensure_token_not_expired(claims)
    body = await parse_body(request, HouseInput)
    fields = validate_fields(
        HouseFields,
        {**body.model_dump(), "id": uuid4(), "owner_id": claims.user_id},
    )
    try:
        house = house_store.create_house(db, fields)
    except SQLAlchemyError as e:
        raise store_failure(e, settings) from e
    return HouseEnvelope(house=HouseOut.model_validate(house))


@router.put("/house", status_code=status.HTTP_200_OK, response_class=Response)
async def put_house(
    request: Request,
    claims: Annotated[TokenClaims, Depends(house_claims)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Response:
    """Update description and address of a house the caller owns."""
    ensure_token_not_expired(claims)
    body = await parse_body(request, HouseInput)
    if body.id is None:
        raise APIError(status.HTTP_404_NOT_FOUND, HOUSE_NOT_FOUND_MSG)
    house = _find_house(db, body.id, settings)
    _ensure_owner(claims, house)
    fields = validate_fields(
        HouseFields,
        {**body.model_dump(), "owner_id": house.owner_id},
    )
    try:
        house_store.update_house(db, house.id, fields)
    except SQLAlchemyError as e:
        raise store_failure(e, settings) from e
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/house", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_house(
    request: Request,
    claims: Annotated[TokenClaims, Depends(house_claims)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Response:
    """Delete a house the caller owns."""
    ensure_token_not_expired(claims)
    body = await parse_body(request, HouseInput)
    fields = validate_fields(HouseIdFields, {"id": body.id})
    house = _find_house(db, fields.id, settings)
    _ensure_owner(claims, house)
    try:
        house_store.delete_house(db, house.id)
    except SQLAlchemyError as e:
        raise store_failure(e, settings) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
