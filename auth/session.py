"""Session token lifecycle.

Sessions live in Valkey with a TTL equal to their remaining lifetime. Tokens
are opaque and cryptographically random. The identity provider calls
create_session after it has authenticated someone; every request afterwards
presents the token and gets back the user id.
"""

import logging
import secrets
from datetime import timedelta
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from auth.config import AuthConfig
from auth.exceptions import InvalidTokenError, SessionExpiredError
from auth.types import Session
from clients.valkey_client import ValkeyClient
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class SessionManager:
    """Create, validate, extend and revoke sessions."""

    KEY_PREFIX = "session:"

    def __init__(self, valkey: ValkeyClient, config: AuthConfig):
        self._valkey = valkey
        self._config = config

    def _key(self, token: str) -> str:
        return f"{self.KEY_PREFIX}{token}"

    def _store(self, session: Session) -> None:
        ttl = max(1, int((session.expires_at - now_utc()).total_seconds()))
        self._valkey.set_json(
            self._key(session.token),
            session.model_dump(mode="json", exclude={"token"}),
            expire_seconds=ttl,
        )

    def create_session(self, user_id: UUID) -> Session:
        """
        Open a session for an authenticated user.

        Args:
            user_id: Id issued by the identity provider

        Returns:
            New session; its token goes in the session cookie
        """
        now = now_utc()
        session = Session(
            token=secrets.token_urlsafe(32),
            user_id=user_id,
            created_at=now,
            expires_at=now + timedelta(hours=self._config.session_expiry_hours),
            last_activity_at=now,
        )
        self._store(session)
        logger.info("Session opened for user %s", user_id)
        return session

    def validate_session(self, token: str) -> Session:
        """
        Look up a session token.

        Extends the session when activity extension is on and less than the
        threshold remains.

        Raises:
            SessionExpiredError: If the token is unknown or past expiry
            InvalidTokenError: If the stored session is unreadable
        """
        data = self._valkey.get_json(self._key(token))
        if data is None:
            raise SessionExpiredError("Session not found or expired")

        try:
            session = Session(token=token, **data)
        except (TypeError, PydanticValidationError) as e:
            self._valkey.delete(self._key(token))
            raise InvalidTokenError(f"Corrupt session record: {e}")

        now = now_utc()
        if now > session.expires_at:
            self._valkey.delete(self._key(token))
            raise SessionExpiredError("Session expired")

        remaining = session.expires_at - now
        threshold = timedelta(hours=self._config.session_extend_threshold_hours)
        if self._config.session_extend_on_activity and remaining < threshold:
            session = session.model_copy(update={
                "expires_at": now + timedelta(hours=self._config.session_expiry_hours),
                "last_activity_at": now,
            })
            self._store(session)

        return session

    def revoke_session(self, token: str) -> None:
        """Revoke a session (logout). Unknown tokens are ignored."""
        self._valkey.delete(self._key(token))
