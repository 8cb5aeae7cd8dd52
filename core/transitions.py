"""
Legal booking status transitions.

The single source of truth for which status may follow which. Every
lifecycle operation asks validate_transition() before it writes; nothing
else in the codebase encodes the graph.

    Pending ──► Confirmed ──► In Progress ──► Completed
       │            │
       └────────────┴──► Cancelled

Completed and Cancelled are terminal.
"""

from core.models import BookingCategory, BookingStatus

_LEGAL_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED}),
    BookingStatus.IN_PROGRESS: frozenset({BookingStatus.COMPLETED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

UPCOMING_STATUSES = frozenset({
    BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS,
})
PAST_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})


def validate_transition(current: BookingStatus, requested: BookingStatus) -> bool:
    """
    Whether a booking in `current` status may move to `requested`.

    Args:
        current: Status as last persisted
        requested: Status the caller wants to apply

    Returns:
        True if the edge exists in the lifecycle graph. Self-transitions are
        never legal.
    """
    return BookingStatus(requested) in _LEGAL_TRANSITIONS[BookingStatus(current)]


def allowed_next(current: BookingStatus) -> frozenset[BookingStatus]:
    """Statuses reachable in one step from `current`."""
    return _LEGAL_TRANSITIONS[BookingStatus(current)]


def is_terminal(status: BookingStatus) -> bool:
    """Whether no transition leaves `status`."""
    return not _LEGAL_TRANSITIONS[BookingStatus(status)]


def statuses_for_category(category: BookingCategory) -> frozenset[BookingStatus]:
    """Statuses grouped under a customer-facing category."""
    if BookingCategory(category) == BookingCategory.UPCOMING:
        return UPCOMING_STATUSES
    return PAST_STATUSES
