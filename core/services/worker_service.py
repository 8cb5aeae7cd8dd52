"""
Worker registry.

Workers have no lifecycle: a profile exists or it doesn't. Only
administrators add or remove them. Removal never touches bookings that
reference the worker; readers must tolerate the dangling id.
"""

import logging
from uuid import UUID, uuid4

from core.audit import AuditLogger, AuditAction
from core.exceptions import NotAuthorizedError, NotFoundError
from core.models import Actor, Worker, WorkerCreate
from core.persistence import WORKERS, RecordStore
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class WorkerService:
    """Service for worker registry operations."""

    def __init__(self, store: RecordStore, audit: AuditLogger):
        self.store = store
        self.audit = audit

    def _require_admin(self, actor: Actor, action: str) -> None:
        if not actor.is_admin:
            logger.warning("Actor %s denied worker %s", actor.id, action)
            raise NotAuthorizedError(f"Only administrators may {action} workers")

    def create(self, data: WorkerCreate, actor: Actor) -> Worker:
        """
        Register a worker.

        Args:
            data: Worker profile
            actor: Acting user (must be an administrator)

        Returns:
            Created worker

        Raises:
            NotAuthorizedError: If actor is not an administrator
        """
        self._require_admin(actor, "add")

        worker = Worker(id=uuid4(), created_at=now_utc(), **data.model_dump())
        self.store.insert(WORKERS, str(worker.id), worker.model_dump(mode="json"))

        self.audit.log_change(
            entity_type="worker",
            entity_id=worker.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json", exclude_none=True)},
            actor_id=actor.id,
        )

        logger.info("Worker %s registered (%s)", worker.id, worker.name)
        return worker

    def get_by_id(self, worker_id: UUID) -> Worker | None:
        """
        Get worker by ID.

        Returns:
            Worker if registered, None otherwise.
        """
        record = self.store.get(WORKERS, str(worker_id))
        if record is None:
            return None
        return Worker.model_validate(record)

    def require(self, worker_id: UUID) -> Worker:
        """
        Get worker by ID or fail.

        Raises:
            NotFoundError: If no such worker is registered
        """
        worker = self.get_by_id(worker_id)
        if worker is None:
            raise NotFoundError(f"Worker {worker_id} not found")
        return worker

    def list_all(self) -> list[Worker]:
        """All registered workers ordered by name."""
        workers = [Worker.model_validate(r) for r in self.store.query(WORKERS)]
        return sorted(workers, key=lambda w: w.name.lower())

    def delete(self, worker_id: UUID, actor: Actor) -> bool:
        """
        Remove a worker from the registry.

        Bookings that reference the worker keep the dangling id.

        Returns:
            True if deleted, False if not found

        Raises:
            NotAuthorizedError: If actor is not an administrator
        """
        self._require_admin(actor, "delete")

        current = self.get_by_id(worker_id)
        if current is None:
            return False

        self.store.delete(WORKERS, str(worker_id))

        self.audit.log_change(
            entity_type="worker",
            entity_id=worker_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")},
            actor_id=actor.id,
        )

        logger.info("Worker %s removed", worker_id)
        return True
