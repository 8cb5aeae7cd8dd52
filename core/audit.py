"""
Audit trail for booking, worker and profile changes.

Every accepted mutation is recorded with the acting user and the old/new
values it touched. Entries are append-only: nothing in the codebase updates
or deletes them.
"""

from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from core.persistence import AUDIT_LOG, RecordStore
from utils.timezone import now_utc


class AuditAction(Enum):
    """Type of change made to an entity."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    TRANSITION = "transition"


def compute_changes(
    old: dict[str, Any],
    new: dict[str, Any],
    exclude_fields: set[str] | None = None
) -> dict[str, dict[str, Any]]:
    """
    Compute changes between two entity states.

    Args:
        old: Previous state of entity
        new: New state of entity
        exclude_fields: Fields to ignore (defaults to {"updated_at", "version"})

    Returns:
        Dict of {field: {"old": old_val, "new": new_val}} for changed fields.
        Empty dict if no changes.
    """
    exclude = exclude_fields or {"updated_at", "version"}
    changes = {}

    all_keys = set(old.keys()) | set(new.keys())
    for key in all_keys:
        if key in exclude:
            continue

        old_val = old.get(key)
        new_val = new.get(key)

        if old_val != new_val:
            changes[key] = {"old": old_val, "new": new_val}

    return changes


class AuditLogger:
    """
    Append-only audit trail.

    Always pass model_dump(mode="json") output so UUIDs, enums and datetimes
    are stored as strings.

    Usage:
        audit = AuditLogger(store)

        audit.log_change(
            entity_type="booking",
            entity_id=booking.id,
            action=AuditAction.TRANSITION,
            changes=compute_changes(old.model_dump(mode="json"), new.model_dump(mode="json")),
            actor_id=actor.id,
        )

        history = audit.get_entity_history("booking", booking.id)
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def log_change(
        self,
        entity_type: str,
        entity_id: UUID | str,
        action: AuditAction,
        changes: dict[str, Any],
        actor_id: UUID | None = None
    ) -> None:
        """
        Log an entity change.

        Changes format by action:
        - CREATE: {"created": {full entity data}}
        - UPDATE / TRANSITION: {"field": {"old": old_val, "new": new_val}, ...}
        - DELETE: {"deleted": {full entity data at deletion}}
        """
        entry_id = uuid4()
        self.store.insert(
            AUDIT_LOG,
            str(entry_id),
            {
                "id": str(entry_id),
                "actor_id": str(actor_id) if actor_id else None,
                "entity_type": entity_type,
                "entity_id": str(entity_id),
                "action": action.value,
                "changes": changes,
                "created_at": now_utc().isoformat(),
            }
        )

    def get_entity_history(
        self,
        entity_type: str,
        entity_id: UUID | str
    ) -> list[dict[str, Any]]:
        """Full audit history for an entity, newest first."""
        return self.store.query(
            AUDIT_LOG,
            {"entity_type": entity_type, "entity_id": str(entity_id)},
            order_by="created_at",
            descending=True,
        )
