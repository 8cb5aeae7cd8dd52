"""
User profiles and role assignment.

Role is decided once, at registration: the designated administrator email
becomes an admin, everyone else a customer. Profile edits never touch it.
"""

import logging
from uuid import UUID

from core.audit import AuditLogger, AuditAction, compute_changes
from core.exceptions import ConflictError, NotFoundError
from core.models import Role, User, UserCreate, UserUpdate
from core.persistence import USERS, RecordStore
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class UserService:
    """Service for user profile operations."""

    def __init__(self, store: RecordStore, audit: AuditLogger, admin_email: str):
        self.store = store
        self.audit = audit
        self._admin_email = admin_email.strip().lower()

    def role_for_email(self, email: str) -> Role:
        """Role a user registering with `email` receives."""
        if email.strip().lower() == self._admin_email:
            return Role.ADMIN
        return Role.CUSTOMER

    def register(self, user_id: UUID, data: UserCreate) -> User:
        """
        Create the profile for an identity the identity provider already issued.

        Args:
            user_id: Id assigned by the identity provider
            data: Profile data

        Returns:
            Created user with derived role

        Raises:
            ConflictError: If the id or email is already registered
        """
        if self.get_by_email(data.email) is not None:
            raise ConflictError(f"Email {data.email} is already registered")

        now = now_utc()
        user = User(
            id=user_id,
            name=data.name,
            email=data.email,
            phone=data.phone,
            address=data.address,
            role=self.role_for_email(data.email),
            created_at=now,
            updated_at=now,
        )
        record = user.model_dump(mode="json")
        record["email_normalized"] = data.email.lower()
        self.store.insert(USERS, str(user.id), record)

        self.audit.log_change(
            entity_type="user",
            entity_id=user.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json", exclude_none=True)},
            actor_id=user.id,
        )

        logger.info("User %s registered with role %s", user.id, user.role.value)
        return user

    def get_by_id(self, user_id: UUID) -> User | None:
        """
        Get user by ID.

        Returns:
            User if found, None otherwise.
        """
        record = self.store.get(USERS, str(user_id))
        if record is None:
            return None
        return User.model_validate(record)

    def get_by_email(self, email: str) -> User | None:
        """Get user by email, case-insensitively."""
        records = self.store.query(USERS, {"email_normalized": email.strip().lower()}, limit=1)
        if not records:
            return None
        return User.model_validate(records[0])

    def update_profile(self, user_id: UUID, data: UserUpdate) -> User:
        """
        Update editable profile fields.

        Args:
            user_id: User UUID
            data: Fields to update

        Returns:
            Updated user

        Raises:
            NotFoundError: If user not found
        """
        record = self.store.get(USERS, str(user_id))
        if record is None:
            raise NotFoundError(f"User {user_id} not found")
        current = User.model_validate(record)

        updates = data.model_dump(exclude_none=True)
        if not updates:
            return current

        updated = current.model_copy(update={**updates, "updated_at": now_utc()})
        new_record = updated.model_dump(mode="json")
        new_record["email_normalized"] = record["email_normalized"]
        self.store.compare_and_swap(USERS, str(user_id), record["version"], new_record)

        changes = compute_changes(
            current.model_dump(mode="json"),
            updated.model_dump(mode="json")
        )
        if changes:
            self.audit.log_change(
                entity_type="user",
                entity_id=user_id,
                action=AuditAction.UPDATE,
                changes=changes,
                actor_id=user_id,
            )

        return updated
