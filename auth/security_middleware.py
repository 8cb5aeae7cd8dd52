"""Session middleware for FastAPI - validates the cookie and sets user context."""

import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from auth.exceptions import InvalidTokenError, SessionExpiredError
from auth.session import SessionManager
from utils.user_context import set_current_user_id, clear_current_user_id

logger = logging.getLogger(__name__)


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that validates session and sets user context.

    For protected routes:
    1. Reads the session token from the session cookie
    2. Validates it via SessionManager
    3. Puts the user id in request.state and the user context
    4. Clears the context once the response is produced

    Public paths bypass authentication entirely.
    """

    PUBLIC_PATHS = [
        "/health",
        "/docs",
        "/openapi.json",
        "/auth",
    ]

    def __init__(self, app, session_manager: SessionManager, cookie_name: str = "session_token"):
        super().__init__(app)
        self._session_manager = session_manager
        self._cookie_name = cookie_name

    def _is_public_path(self, path: str) -> bool:
        return any(path == public or path.startswith(public + "/") for public in self.PUBLIC_PATHS)

    def _unauthorized(self, code: str, message: str) -> JSONResponse:
        return JSONResponse(
            status_code=401,
            content=error_response(code, message).model_dump(mode="json"),
        )

    async def dispatch(self, request: Request, call_next):
        if self._is_public_path(request.url.path):
            return await call_next(request)

        token = request.cookies.get(self._cookie_name)
        if not token:
            return self._unauthorized(ErrorCodes.NOT_AUTHENTICATED, "Authentication required")

        try:
            session = self._session_manager.validate_session(token)
        except SessionExpiredError:
            return self._unauthorized(ErrorCodes.SESSION_EXPIRED, "Session has expired")
        except InvalidTokenError:
            logger.warning("Rejected unreadable session for %s", request.url.path)
            return self._unauthorized(ErrorCodes.INVALID_TOKEN, "Invalid session")

        set_current_user_id(session.user_id)
        request.state.user_id = session.user_id
        request.state.session = session

        try:
            return await call_next(request)
        finally:
            clear_current_user_id()
