"""Session authentication, magic link sign-in and role resolution."""

from auth.exceptions import (
    AuthError,
    InvalidTokenError,
    SessionExpiredError,
)
from auth.types import Session, MagicLinkRequest, AuthenticatedUser
from auth.config import AuthConfig, DEFAULT_ADMIN_EMAIL
from auth.session import SessionManager
from auth.service import AuthService, MagicLinkResult
from auth.access_gate import AccessGate
from auth.security_middleware import AuthMiddleware
