"""Request-scoped middleware for API requests."""

from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an id.

    A client-supplied X-Request-ID is kept so traces line up across hops;
    otherwise a fresh one is generated. The id is echoed in the response
    header and in the envelope's meta.request_id.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def request_id_of(request: Request) -> str | None:
    """The id RequestIDMiddleware assigned, if it ran."""
    return getattr(request.state, "request_id", None)
