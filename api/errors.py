"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from api.middleware import request_id_of
from core.exceptions import (
    BookingError,
    ConflictError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins.
BOOKING_ERROR_STATUS = [
    (ValidationError, 400, ErrorCodes.VALIDATION_ERROR),
    (NotAuthorizedError, 403, ErrorCodes.AUTHORIZATION_DENIED),
    (NotFoundError, 404, ErrorCodes.NOT_FOUND),
    (InvalidTransitionError, 409, ErrorCodes.INVALID_STATUS_TRANSITION),
    (ConflictError, 409, ErrorCodes.CONFLICT),
]


def status_for(exc: BookingError) -> tuple[int, str]:
    """HTTP status and error code for a booking domain error."""
    for exc_type, status_code, code in BOOKING_ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status_code, code
    return 400, ErrorCodes.INVALID_REQUEST


def _respond(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message, request_id_of(request)).model_dump(mode="json"),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        status_code, code = status_for(exc)
        return _respond(request, status_code, code, str(exc))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        # pydantic model construction inside handlers lands here
        return _respond(request, 400, ErrorCodes.VALIDATION_ERROR, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _respond(request, 422, ErrorCodes.VALIDATION_ERROR, str(exc.errors()))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return _respond(request, 500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
