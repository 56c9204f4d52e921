"""API error type and the global handlers that render it as the JSON envelope.

Every failure leaves the service as ``{"error": true, "msg": ..., <payload>}``:
    - APIError -> its own status, message and extra payload keys
    - HTTPException from routing (unknown path, wrong method) -> its status and detail
    - RequestValidationError (path/query coercion) -> 400 with a field map
    - anything else -> 500 with a generic message; details only go to the log
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Handler failure with an HTTP status, a message and optional payload keys."""

    def __init__(self, status_code: int, msg: str | dict[str, str], **payload: Any) -> None:
        self.status_code = status_code
        self.msg = msg
        self.payload = payload
        super().__init__(msg if isinstance(msg, str) else "validation failed")

    def to_response(self) -> dict[str, Any]:
        return {"error": True, "msg": self.msg, **self.payload}


def field_errors(exc: ValidationError | RequestValidationError) -> dict[str, str]:
    """Map each failing field to its message, e.g. {"email": "value is not a valid email address"}."""
    errors: dict[str, str] = {}
    for e in exc.errors():
        loc = [str(part) for part in e["loc"] if part not in ("body", "path", "query")]
        errors[".".join(loc) or "body"] = e["msg"]
    return errors


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request failed: %s",
                exc,
                extra={"path": request.url.path, "status_code": exc.status_code},
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ) -> JSONResponse:
        # Unknown routes (404) and wrong methods (405) raised by the router itself.
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": True, "msg": str(exc.detail)},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ) -> JSONResponse:
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": True, "msg": field_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception on %s: %s",
            request.url.path,
            exc,
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": True, "msg": "internal server error"},
        )
