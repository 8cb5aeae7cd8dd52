"""Authentication service - registration and magic link sign-in."""

import logging
import secrets
from dataclasses import dataclass
from uuid import UUID, uuid4

from auth.config import AuthConfig
from auth.exceptions import InvalidTokenError
from auth.session import SessionManager
from auth.types import AuthenticatedUser
from clients.email_client import EmailGatewayClient
from clients.valkey_client import ValkeyClient
from core.models import User, UserCreate
from core.services.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass
class MagicLinkResult:
    """Result of magic link request."""

    sent: bool
    needs_signup: bool


class AuthService:
    """Orchestrates sign-up and magic link authentication.

    Handles:
    - Registration (profile creation plus a first sign-in link)
    - Magic link requests
    - Token verification and session creation
    - Logout

    Link tokens live in Valkey with a TTL and are consumed on first use.
    """

    TOKEN_KEY_PREFIX = "magic_link:"

    def __init__(
        self,
        config: AuthConfig,
        users: UserService,
        session_manager: SessionManager,
        valkey: ValkeyClient,
        email_client: EmailGatewayClient,
    ):
        self._config = config
        self._users = users
        self._session_manager = session_manager
        self._valkey = valkey
        self._email_client = email_client

    def _token_key(self, token: str) -> str:
        return f"{self.TOKEN_KEY_PREFIX}{token}"

    def register(self, data: UserCreate) -> User:
        """Create a profile and email its first sign-in link.

        Role comes from the email, as UserService decides it.

        Raises:
            ConflictError: If the email is already registered.
            EmailGatewayError: If the link email fails; the profile stays and
                the user can request another link.
        """
        user = self._users.register(uuid4(), data)
        self._send_link(user)
        return user

    def request_magic_link(self, email: str) -> MagicLinkResult:
        """Email a sign-in link to a registered user.

        Returns:
            MagicLinkResult with sent=True if email sent, needs_signup=True if user doesn't exist.

        Raises:
            EmailGatewayError: If email send fails.
        """
        user = self._users.get_by_email(email)
        if user is None:
            logger.info("Magic link requested for an unregistered email")
            return MagicLinkResult(sent=False, needs_signup=True)

        self._send_link(user)
        return MagicLinkResult(sent=True, needs_signup=False)

    def _send_link(self, user: User) -> None:
        token = secrets.token_urlsafe(32)
        minutes = self._config.magic_link_expiry_minutes
        self._valkey.set_json(
            self._token_key(token),
            {"user_id": str(user.id)},
            expire_seconds=minutes * 60,
        )

        link = f"{self._config.app_base_url}/auth/verify?token={token}"
        self._email_client.send_email(
            to=user.email,
            subject=f"Sign in to {self._config.app_name}",
            body=(
                f"Hi {user.name},\n\n"
                f"Use this link to sign in. It works once and expires in {minutes} minutes.\n\n"
                f"{link}\n"
            ),
            sender="system",
        )
        logger.info("Magic link sent to user %s", user.id)

    def verify_magic_link(self, token: str) -> AuthenticatedUser:
        """Consume a magic link token and open a session.

        Raises:
            InvalidTokenError: If token is unknown, expired, already used, or
                its user no longer exists.
        """
        key = self._token_key(token)
        data = self._valkey.get_json(key)
        if data is None:
            raise InvalidTokenError("Invalid or expired token")

        # Only the caller whose delete removed the key may use it
        if not self._valkey.delete(key):
            raise InvalidTokenError("Token has already been used")

        try:
            user_id = UUID(data["user_id"])
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError("Corrupt magic link record") from e

        user = self._users.get_by_id(user_id)
        if user is None:
            raise InvalidTokenError("User not found")

        session = self._session_manager.create_session(user.id)
        return AuthenticatedUser(user=user, session=session)

    def logout(self, session_token: str) -> None:
        """Revoke session (logout). Safe to call with invalid token."""
        self._session_manager.revoke_session(session_token)
