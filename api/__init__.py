"""HTTP transport for the booking engine: envelope, routers, error mapping."""

from api.base import (
    APIError,
    APIMeta,
    APIResponse,
    success_response,
    error_response,
    ErrorCodes,
)
from api.errors import register_error_handlers, status_for
from api.middleware import RequestIDMiddleware
