"""HTTP routes for authentication."""

from dataclasses import asdict

from fastapi import APIRouter, Query, Request, Response
from fastapi.responses import JSONResponse

from api.base import success_response, error_response, ErrorCodes
from api.middleware import request_id_of
from auth.config import AuthConfig
from auth.exceptions import InvalidTokenError
from auth.service import AuthService
from auth.types import MagicLinkRequest
from core.models import UserCreate


def create_auth_router(auth_service: AuthService, config: AuthConfig) -> APIRouter:
    """Create auth router with injected service."""
    router = APIRouter(tags=["auth"])

    @router.post("/register")
    async def register(request: Request, body: UserCreate):
        """Create a profile and email a sign-in link.

        409 CONFLICT if the email is already registered.
        """
        user = auth_service.register(body)
        return success_response(
            {"user": user.model_dump(mode="json"), "sent": True},
            request_id_of(request),
        ).model_dump(mode="json")

    @router.post("/request-link")
    async def request_magic_link(request: Request, body: MagicLinkRequest):
        """Request magic link email.

        Returns:
            - sent=True, needs_signup=False: Email sent to existing user
            - sent=False, needs_signup=True: User doesn't exist, redirect to signup
        """
        result = auth_service.request_magic_link(body.email)
        return success_response(asdict(result), request_id_of(request)).model_dump(mode="json")

    @router.get("/verify")
    async def verify_magic_link(
        request: Request,
        response: Response,
        token: str | None = Query(None),
    ):
        """Verify magic link token and create session.

        Sets the session cookie on success.
        """
        if not token:
            return JSONResponse(
                status_code=400,
                content=error_response(
                    ErrorCodes.INVALID_REQUEST,
                    "Token parameter is required",
                    request_id_of(request),
                ).model_dump(mode="json"),
            )

        try:
            result = auth_service.verify_magic_link(token)
        except InvalidTokenError:
            return JSONResponse(
                status_code=401,
                content=error_response(
                    ErrorCodes.INVALID_TOKEN,
                    "Invalid or expired token",
                    request_id_of(request),
                ).model_dump(mode="json"),
            )

        session = result.session
        response.set_cookie(
            key=config.session_cookie_name,
            value=session.token,
            httponly=True,
            secure=config.session_cookie_secure,
            samesite="lax",
            max_age=int((session.expires_at - session.created_at).total_seconds()),
        )

        return success_response({
            "user": {
                "id": str(result.user.id),
                "email": result.user.email,
                "role": result.user.role.value,
            }
        }, request_id_of(request)).model_dump(mode="json")

    @router.post("/logout")
    async def logout(request: Request, response: Response):
        """Logout - revoke session and clear cookie."""
        session_token = request.cookies.get(config.session_cookie_name)
        if session_token:
            auth_service.logout(session_token)

        response.delete_cookie(key=config.session_cookie_name)
        return success_response({"message": "Logged out successfully"}, request_id_of(request)).model_dump(mode="json")

    return router
