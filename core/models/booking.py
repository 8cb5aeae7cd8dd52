"""Booking domain models."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class BookingStatus(str, Enum):
    """Booking lifecycle status."""

    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class BookingCategory(str, Enum):
    """Customer-facing grouping of statuses."""

    UPCOMING = "upcoming"
    PAST = "past"


class AdminFilter(str, Enum):
    """Administrator dashboard filter."""

    ALL = "all"
    PENDING = "pending"
    CONFIRMED = "confirmed"  # Confirmed and In Progress
    COMPLETED = "completed"


class CancelledBy(str, Enum):
    """Which side ended the booking."""

    CUSTOMER = "customer"
    ADMIN = "admin"


class BookingCreate(BaseModel):
    """
    Data a customer submits to request a booking.

    Emptiness of the required fields is checked by the lifecycle engine so it
    can report a single ValidationError naming every missing field.
    """

    service: str = Field("", max_length=255, description="Catalog service id or name")
    date: str = Field("", max_length=10, description="YYYY-MM-DD")
    time: str = Field("", max_length=5, description="24-hour HH:MM")
    area: str = Field("", max_length=255)
    address: str = Field("", max_length=500)


class Booking(BaseModel):
    """Full booking entity as stored."""

    id: UUID
    customer_id: UUID
    service_id: str
    service_name: str
    scheduled_date: str
    scheduled_time: str
    area: str
    address: str
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    status: BookingStatus
    assigned_worker_id: UUID | None = None
    assigned_worker_name: str | None = None
    notes: str | None = None
    cancelled_by: CancelledBy | None = None
    version: int = Field(1, ge=1)
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def worker_matches_status(self) -> "Booking":
        """A worker is attached exactly while the job is running or done."""
        has_worker = self.assigned_worker_id is not None
        needs_worker = self.status in (BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED)
        if has_worker and not needs_worker:
            raise ValueError(
                f"assigned_worker_id must be empty while status is {self.status.value}"
            )
        if needs_worker and not has_worker:
            raise ValueError(
                f"assigned_worker_id is required while status is {self.status.value}"
            )
        return self

    @property
    def is_terminal(self) -> bool:
        """Whether booking is Completed or Cancelled (no further transitions)."""
        return self.status in (BookingStatus.COMPLETED, BookingStatus.CANCELLED)

    @property
    def category(self) -> BookingCategory:
        """Upcoming while still active, past once terminal."""
        return BookingCategory.PAST if self.is_terminal else BookingCategory.UPCOMING
