"""Booking engine configuration."""

from pydantic import BaseModel, Field


class BookingConfig(BaseModel):
    """
    Tunables for the lifecycle engine and its collaborators.

    Service areas are open by default; set them to restrict where bookings
    may be placed.
    """

    service_areas: list[str] = Field(
        default_factory=list,
        description="Areas a booking may be placed in. Empty means any area.",
    )
    default_list_limit: int = Field(
        default=50,
        description="Result cap for booking listings when the caller gives none",
        ge=1,
        le=500,
    )
    max_list_limit: int = Field(
        default=500,
        description="Hard cap on booking listings",
        ge=1,
        le=5000,
    )
    notification_workers: int = Field(
        default=4,
        description="Thread pool size for outbound notification delivery",
        ge=1,
        le=32,
    )
    admin_notification_email: str | None = Field(
        default=None,
        description="Where new-booking alerts go. None disables admin alerts.",
    )

    def area_allowed(self, area: str) -> bool:
        """Whether a booking may be placed in `area`."""
        if not self.service_areas:
            return True
        wanted = area.strip().lower()
        return any(wanted == allowed.strip().lower() for allowed in self.service_areas)

    def clamp_limit(self, limit: int | None) -> int:
        """Resolve a caller-supplied limit against the configured bounds."""
        if limit is None:
            return self.default_list_limit
        return max(1, min(limit, self.max_list_limit))
