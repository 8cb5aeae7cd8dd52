"""Maps an authenticated user id to the actor booking commands run as."""

import logging
from uuid import UUID

from core.exceptions import NotAuthorizedError
from core.models import Actor
from core.services.user_service import UserService
from utils.user_context import get_current_user_id

logger = logging.getLogger(__name__)


class AccessGate:
    """
    Resolves identities to roles.

    The role comes from the stored user profile, never from the request, so
    a customer cannot claim to be an administrator.
    """

    def __init__(self, users: UserService):
        self._users = users

    def resolve(self, user_id: UUID) -> Actor:
        """
        Actor for a user id.

        Raises:
            NotAuthorizedError: If no profile exists for the id
        """
        user = self._users.get_by_id(user_id)
        if user is None:
            logger.warning("Authenticated id %s has no user profile", user_id)
            raise NotAuthorizedError(f"No profile registered for user {user_id}")
        return Actor(id=user.id, role=user.role)

    def current_actor(self) -> Actor:
        """
        Actor for the request being served.

        Raises:
            RuntimeError: If no user context is set
            NotAuthorizedError: If the user has no profile
        """
        return self.resolve(get_current_user_id())
