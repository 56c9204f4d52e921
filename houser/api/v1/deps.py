"""Shared request helpers: settings lookup, two-phase body handling, store failures."""

import json
import logging
from typing import TypeVar

from fastapi import Request, status
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from houser.core.config import Settings
from houser.core.errors import APIError, field_errors

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_app_settings(request: Request) -> Settings:
    """Dependency: settings owned by the application instance."""
    return request.app.state.settings


async def parse_body(request: Request, model: type[ModelT]) -> ModelT:
    """
    Parse the JSON body into ``model`` (types only). Raises 400 on bad JSON or mistyped fields.

    Field constraints are not checked here; see validate_fields.
    """
    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise APIError(status.HTTP_400_BAD_REQUEST, f"Invalid JSON: {e!s}") from e
    if not isinstance(data, dict):
        raise APIError(status.HTTP_400_BAD_REQUEST, "JSON body must be an object.")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise APIError(status.HTTP_400_BAD_REQUEST, field_errors(e)) from e


def validate_fields(model: type[ModelT], data: dict) -> ModelT:
    """Check field constraints; raises 400 with a field -> message map."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise APIError(status.HTTP_400_BAD_REQUEST, field_errors(e)) from e


def store_failure(
    exc: SQLAlchemyError,
    settings: Settings,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    **payload: object,
) -> APIError:
    """Log a store error and build the APIError for it. Raw text is only exposed with DEBUG on."""
    logger.exception("Store operation failed: %s", type(exc).__name__)
    msg = str(exc) if settings.DEBUG else "database error"
    return APIError(status_code, msg, **payload)
