"""
Booking lifecycle engine.

Owns every booking status change: create, accept, reject, assign a worker,
complete and cancel. Each command re-reads the persisted booking, checks the
actor, asks the shared transition table whether the move is legal, and
writes with compare-and-swap on the booking's version. A writer that lost
the race gets ConflictError; nothing is silently overwritten and nothing is
retried here.

Terminal bookings (Completed, Cancelled) are immutable.
"""

import logging
from typing import Callable, Iterable
from uuid import UUID, uuid4

from core.audit import AuditLogger, AuditAction, compute_changes
from core.config import BookingConfig
from core.event_bus import EventBus
from core.events import (
    BookingCancelled,
    BookingCompleted,
    BookingConfirmed,
    BookingCreated,
    WorkerAssigned,
)
from core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from core.models import (
    Actor,
    AdminFilter,
    Booking,
    BookingCategory,
    BookingCreate,
    BookingStatus,
    CancelledBy,
    Worker,
)
from core.persistence import BOOKINGS, RecordStore
from core.services.catalog_service import CatalogService
from core.services.user_service import UserService
from core.services.worker_service import WorkerService
from core.transitions import statuses_for_category, validate_transition
from utils.timezone import now_utc, parse_calendar_date, parse_time_of_day

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("service", "date", "time", "area", "address")

_ADMIN_FILTER_STATUSES = {
    AdminFilter.PENDING: (BookingStatus.PENDING,),
    AdminFilter.CONFIRMED: (BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS),
    AdminFilter.COMPLETED: (BookingStatus.COMPLETED,),
}

UNASSIGNED_LABEL = "Unassigned"
MISSING_WORKER_LABEL = "Worker no longer available"


class BookingService:
    """Service for booking lifecycle operations."""

    def __init__(
        self,
        store: RecordStore,
        audit: AuditLogger,
        catalog: CatalogService,
        workers: WorkerService,
        event_bus: EventBus,
        users: UserService | None = None,
        config: BookingConfig | None = None,
    ):
        self.store = store
        self.audit = audit
        self.catalog = catalog
        self.workers = workers
        self.event_bus = event_bus
        self.users = users
        self.config = config or BookingConfig()

    # =========================================================================
    # CREATE
    # =========================================================================

    def create(self, customer_id: UUID, data: BookingCreate) -> Booking:
        """
        Create a booking request.

        Args:
            customer_id: Owning customer
            data: Service reference, schedule and location

        Returns:
            Created booking in Pending status with no worker

        Raises:
            ValidationError: If a required field is empty or malformed, the
                area is outside the configured service areas, or the service
                is not in the catalog
        """
        fields = {name: (getattr(data, name) or "").strip() for name in _REQUIRED_FIELDS}

        missing = [name for name, value in fields.items() if not value]
        if missing:
            raise ValidationError(f"Missing required booking fields: {', '.join(missing)}")

        try:
            parse_calendar_date(fields["date"])
            parse_time_of_day(fields["time"])
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if not self.config.area_allowed(fields["area"]):
            raise ValidationError(f"Area '{fields['area']}' is not a service area")

        service = self.catalog.resolve(fields["service"])
        if service is None:
            raise ValidationError(f"Service '{fields['service']}' does not exist in the catalog")

        customer = self.users.get_by_id(customer_id) if self.users else None

        now = now_utc()
        booking = Booking(
            id=uuid4(),
            customer_id=customer_id,
            service_id=service.id,
            service_name=service.name,
            scheduled_date=fields["date"],
            scheduled_time=fields["time"],
            area=fields["area"],
            address=fields["address"],
            customer_name=customer.name if customer else None,
            customer_email=customer.email if customer else None,
            customer_phone=customer.phone if customer else None,
            status=BookingStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

        stored = self.store.insert(BOOKINGS, str(booking.id), booking.model_dump(mode="json"))
        booking = Booking.model_validate(stored)

        self._audit(
            booking.id,
            AuditAction.CREATE,
            {"created": booking.model_dump(mode="json", exclude_none=True)},
            customer_id,
        )

        logger.info("Booking %s created for customer %s (%s)", booking.id, customer_id, service.name)
        self.event_bus.publish(BookingCreated.create(booking, actor_id=customer_id))
        return booking

    # =========================================================================
    # READ
    # =========================================================================

    def get_by_id(self, booking_id: UUID) -> Booking | None:
        """
        Get booking by ID.

        Returns:
            Booking if found, None otherwise.
        """
        record = self.store.get(BOOKINGS, str(booking_id))
        if record is None:
            return None
        return Booking.model_validate(record)

    def require(self, booking_id: UUID) -> Booking:
        """
        Get booking by ID or fail.

        Raises:
            NotFoundError: If booking does not exist
        """
        booking = self.get_by_id(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking

    def get_for_actor(self, booking_id: UUID, actor: Actor) -> Booking:
        """
        Read a booking on behalf of an actor.

        Customers may only read their own bookings; administrators read all.

        Raises:
            NotFoundError: If booking does not exist
            NotAuthorizedError: If a customer asks for someone else's booking
        """
        booking = self.require(booking_id)
        if not actor.is_admin and booking.customer_id != actor.id:
            raise NotAuthorizedError(f"Booking {booking_id} belongs to another customer")
        return booking

    def _list(self, filters: dict, limit: int | None, offset: int = 0) -> list[Booking]:
        records = self.store.query(
            BOOKINGS,
            filters,
            order_by="created_at",
            descending=True,
            limit=self.config.clamp_limit(limit),
            offset=max(0, offset),
        )
        return [Booking.model_validate(r) for r in records]

    def list_for_customer(
        self,
        customer_id: UUID,
        category: BookingCategory | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Booking]:
        """
        List a customer's bookings.

        Args:
            customer_id: Customer UUID
            category: 'upcoming' or 'past'; None for both
            limit: Maximum results
            offset: Results to skip, for paging past the limit

        Returns:
            Bookings ordered by created_at DESC
        """
        filters: dict = {"customer_id": str(customer_id)}
        if category is not None:
            filters["status"] = [s.value for s in statuses_for_category(category)]
        return self._list(filters, limit, offset)

    def list_by_status(
        self,
        statuses: Iterable[BookingStatus],
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Booking]:
        """Bookings in any of the given statuses, newest first."""
        return self._list({"status": [BookingStatus(s).value for s in statuses]}, limit, offset)

    def list_by_category(
        self, category: BookingCategory, limit: int | None = None, offset: int = 0
    ) -> list[Booking]:
        """Every customer's upcoming or past bookings, newest first."""
        return self.list_by_status(statuses_for_category(category), limit, offset)

    def list_for_admin(
        self, filter: AdminFilter = AdminFilter.ALL, limit: int | None = None, offset: int = 0
    ) -> list[Booking]:
        """
        Administrator dashboard listing.

        'confirmed' covers both Confirmed and In Progress bookings.
        """
        filter = AdminFilter(filter)
        if filter == AdminFilter.ALL:
            return self.list_all(limit, offset)
        return self.list_by_status(_ADMIN_FILTER_STATUSES[filter], limit, offset)

    def list_all(self, limit: int | None = None, offset: int = 0) -> list[Booking]:
        """Every booking, newest first."""
        return self._list({}, limit, offset)

    def get_assigned_worker(self, booking: Booking) -> Worker | None:
        """
        The booking's worker, if one is assigned and still registered.

        A worker deleted after assignment yields None, never an error.
        """
        if booking.assigned_worker_id is None:
            return None
        return self.workers.get_by_id(booking.assigned_worker_id)

    def describe_worker(self, booking: Booking) -> str:
        """Display label for the booking's worker."""
        if booking.assigned_worker_id is None:
            return UNASSIGNED_LABEL
        worker = self.get_assigned_worker(booking)
        if worker is None:
            return MISSING_WORKER_LABEL
        return worker.name

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def _audit(self, booking_id: UUID, action: AuditAction, changes: dict, actor_id: UUID) -> None:
        """
        Record a committed booking write in the audit trail.

        Runs after the write has landed. Failures are logged, not raised; the
        caller still gets the committed booking and its event.
        """
        try:
            self.audit.log_change(
                entity_type="booking",
                entity_id=booking_id,
                action=action,
                changes=changes,
                actor_id=actor_id,
            )
        except Exception:
            logger.exception("Audit write failed for booking %s (%s)", booking_id, action.value)

    def _require_admin(self, actor: Actor, action: str, booking_id: UUID) -> None:
        if not actor.is_admin:
            logger.warning("Actor %s denied %s on booking %s", actor.id, action, booking_id)
            raise NotAuthorizedError(f"Only administrators may {action} bookings")

    def _transition(
        self,
        booking_id: UUID,
        actor: Actor,
        target: BookingStatus,
        authorize: Callable[[Booking], None],
        updates: dict | Callable[[Booking], dict] | None = None,
    ) -> Booking:
        """
        Read, authorize, validate and conditionally write one transition.

        `updates` may be a callable; it runs against the freshly read booking
        after the transition is known to be legal and may raise to veto it.

        Raises:
            NotFoundError: If the booking does not exist
            NotAuthorizedError: From `authorize`
            InvalidTransitionError: If `target` is not reachable from the
                persisted status
            ConflictError: If another writer changed the booking between the
                read and the write
        """
        record = self.store.get(BOOKINGS, str(booking_id))
        if record is None:
            raise NotFoundError(f"Booking {booking_id} not found")
        current = Booking.model_validate(record)

        authorize(current)

        if not validate_transition(current.status, target):
            logger.warning(
                "Rejected %s -> %s on booking %s",
                current.status.value, target.value, booking_id,
            )
            raise InvalidTransitionError(
                f"Booking {booking_id} cannot move from {current.status.value} to {target.value}",
                current_status=current.status.value,
            )

        if callable(updates):
            updates = updates(current)

        proposed = Booking.model_validate({
            **current.model_dump(),
            **(updates or {}),
            "status": target,
            "updated_at": now_utc(),
        })

        try:
            stored = self.store.compare_and_swap(
                BOOKINGS, str(booking_id), current.version, proposed.model_dump(mode="json")
            )
        except ConflictError as e:
            raise ConflictError(
                f"Booking {booking_id} was changed by someone else; reload and try again",
                expected_version=current.version,
            ) from e
        updated = Booking.model_validate(stored)

        self._audit(
            booking_id,
            AuditAction.TRANSITION,
            compute_changes(current.model_dump(mode="json"), updated.model_dump(mode="json")),
            actor.id,
        )

        logger.info(
            "Booking %s %s -> %s by %s",
            booking_id, current.status.value, updated.status.value, actor.id,
        )
        return updated

    def _with_notes(self, notes: str | None) -> dict:
        if notes is None or not notes.strip():
            return {}
        return {"notes": notes.strip()}

    def accept(self, booking_id: UUID, actor: Actor, notes: str | None = None) -> Booking:
        """
        Accept a Pending booking.

        Args:
            booking_id: Booking UUID
            actor: Acting administrator
            notes: Optional administrator annotation

        Returns:
            Booking in Confirmed status
        """
        updated = self._transition(
            booking_id,
            actor,
            BookingStatus.CONFIRMED,
            authorize=lambda b: self._require_admin(actor, "accept", booking_id),
            updates=self._with_notes(notes),
        )
        self.event_bus.publish(BookingConfirmed.create(updated, actor_id=actor.id))
        return updated

    def reject(self, booking_id: UUID, actor: Actor, notes: str | None = None) -> Booking:
        """
        Reject a Pending or Confirmed booking.

        Returns:
            Booking in Cancelled status, cancelled_by='admin'
        """
        updated = self._transition(
            booking_id,
            actor,
            BookingStatus.CANCELLED,
            authorize=lambda b: self._require_admin(actor, "reject", booking_id),
            updates={"cancelled_by": CancelledBy.ADMIN, **self._with_notes(notes)},
        )
        self.event_bus.publish(BookingCancelled.create(updated, actor_id=actor.id))
        return updated

    def assign_worker(
        self,
        booking_id: UUID,
        worker_id: UUID,
        actor: Actor,
        notes: str | None = None,
    ) -> Booking:
        """
        Assign a worker to a Confirmed booking and start the job.

        The worker is looked up immediately before the write, so a worker
        deleted concurrently surfaces as NotFoundError rather than a dangling
        assignment.

        Args:
            booking_id: Booking UUID
            worker_id: Worker to assign
            actor: Acting administrator
            notes: Optional administrator annotation

        Returns:
            Booking in In Progress status with assigned_worker_id set

        Raises:
            InvalidTransitionError: If booking is not Confirmed or already has a worker
            NotFoundError: If the worker is not registered
        """
        assigned: dict[str, Worker] = {}

        def assignment(current: Booking) -> dict:
            if current.assigned_worker_id is not None:
                raise InvalidTransitionError(
                    f"Booking {booking_id} already has worker {current.assigned_worker_id}",
                    current_status=current.status.value,
                )
            worker = self.workers.require(worker_id)
            assigned["worker"] = worker
            return {
                "assigned_worker_id": worker.id,
                "assigned_worker_name": worker.name,
                **self._with_notes(notes),
            }

        updated = self._transition(
            booking_id,
            actor,
            BookingStatus.IN_PROGRESS,
            authorize=lambda b: self._require_admin(actor, "assign workers to", booking_id),
            updates=assignment,
        )
        self.event_bus.publish(WorkerAssigned.create(updated, assigned["worker"], actor_id=actor.id))
        return updated

    def complete(self, booking_id: UUID, actor: Actor, notes: str | None = None) -> Booking:
        """
        Mark an In Progress booking as done.

        Returns:
            Booking in Completed status
        """
        updated = self._transition(
            booking_id,
            actor,
            BookingStatus.COMPLETED,
            authorize=lambda b: self._require_admin(actor, "complete", booking_id),
            updates=self._with_notes(notes),
        )
        self.event_bus.publish(BookingCompleted.create(updated, actor_id=actor.id))
        return updated

    def cancel(self, booking_id: UUID, actor: Actor) -> Booking:
        """
        Cancel a Pending or Confirmed booking on the customer's behalf.

        Args:
            booking_id: Booking UUID
            actor: The customer who owns the booking

        Returns:
            Booking in Cancelled status, cancelled_by='customer'

        Raises:
            NotAuthorizedError: If actor is not the owning customer
        """

        def authorize(current: Booking) -> None:
            if not actor.is_customer or current.customer_id != actor.id:
                logger.warning("Actor %s denied cancel on booking %s", actor.id, booking_id)
                raise NotAuthorizedError(f"Only the customer who owns booking {booking_id} may cancel it")

        updated = self._transition(
            booking_id,
            actor,
            BookingStatus.CANCELLED,
            authorize=authorize,
            updates={"cancelled_by": CancelledBy.CUSTOMER},
        )
        self.event_bus.publish(BookingCancelled.create(updated, actor_id=actor.id))
        return updated
