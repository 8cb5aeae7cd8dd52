"""
Booking lifecycle events.

Immutable event objects emitted once per accepted transition. The
notification layer subscribes to them; the lifecycle engine never learns who
is listening.

Event kinds:
- BookingCreated: customer submitted a request (Pending)
- BookingConfirmed: administrator accepted it
- WorkerAssigned: a worker was attached and work started
- BookingCompleted: administrator closed the job
- BookingCancelled: customer cancelled or administrator rejected

Events carry the full booking as persisted so handlers don't need to re-fetch
state.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from utils.timezone import now_utc


@dataclass(frozen=True, kw_only=True)
class BookingEvent:
    """Base class for all booking lifecycle events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)
    booking: Any = None  # Booking; Any avoids a circular import
    actor_id: UUID | None = None

    @property
    def kind(self) -> str:
        """Event kind used for subscription, e.g. 'BookingCreated'."""
        return self.__class__.__name__

    @property
    def booking_id(self) -> UUID:
        return self.booking.id

    def payload(self) -> dict[str, Any]:
        """JSON-compatible body for external sinks."""
        return {
            "event_id": self.event_id,
            "kind": self.kind,
            "booking_id": str(self.booking.id),
            "occurred_at": self.occurred_at.isoformat(),
            "booking": self.booking.model_dump(mode="json"),
        }


@dataclass(frozen=True)
class BookingCreated(BookingEvent):
    """A customer created a booking in Pending status."""

    @classmethod
    def create(cls, booking: Any, actor_id: UUID | None = None) -> "BookingCreated":
        return cls(booking=booking, actor_id=actor_id)


@dataclass(frozen=True)
class BookingConfirmed(BookingEvent):
    """An administrator accepted a Pending booking."""

    @classmethod
    def create(cls, booking: Any, actor_id: UUID | None = None) -> "BookingConfirmed":
        return cls(booking=booking, actor_id=actor_id)


@dataclass(frozen=True)
class WorkerAssigned(BookingEvent):
    """A worker was assigned and the booking moved to In Progress."""
    worker: Any = None  # Worker

    @classmethod
    def create(cls, booking: Any, worker: Any, actor_id: UUID | None = None) -> "WorkerAssigned":
        return cls(booking=booking, worker=worker, actor_id=actor_id)

    def payload(self) -> dict[str, Any]:
        body = super().payload()
        body["worker"] = self.worker.model_dump(mode="json") if self.worker else None
        return body


@dataclass(frozen=True)
class BookingCompleted(BookingEvent):
    """An administrator marked an In Progress booking as done."""

    @classmethod
    def create(cls, booking: Any, actor_id: UUID | None = None) -> "BookingCompleted":
        return cls(booking=booking, actor_id=actor_id)


@dataclass(frozen=True)
class BookingCancelled(BookingEvent):
    """The booking ended without service, by customer cancel or admin reject."""

    @classmethod
    def create(cls, booking: Any, actor_id: UUID | None = None) -> "BookingCancelled":
        return cls(booking=booking, actor_id=actor_id)

    @property
    def cancelled_by(self) -> str | None:
        """'customer' or 'admin'."""
        if self.booking.cancelled_by is None:
            return None
        return self.booking.cancelled_by.value


EVENT_KINDS = (
    "BookingCreated",
    "BookingConfirmed",
    "WorkerAssigned",
    "BookingCompleted",
    "BookingCancelled",
)
