"""Propagate the authenticated user's identity through the call stack.

The auth middleware sets the user id once per request; the access gate reads
it back to resolve the acting user's role. Nothing below the gate reads the
contextvar directly, so services stay callable from scripts and tests with an
explicit actor.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from uuid import UUID

_current_user_id: ContextVar[UUID | None] = ContextVar("current_user_id", default=None)


def get_current_user_id() -> UUID:
    """
    Get the authenticated user id from context.

    Raises RuntimeError if no user context is set. Reaching this without a
    context means an actor-scoped path was called outside a request.
    """
    user_id = _current_user_id.get()
    if user_id is None:
        raise RuntimeError(
            "No user context set. Booking commands need an authenticated actor."
        )
    return user_id


def peek_current_user_id() -> UUID | None:
    """Current user id, or None when the call is anonymous."""
    return _current_user_id.get()


def set_current_user_id(user_id: UUID) -> None:
    """Set current user id. Called by the auth middleware after session validation."""
    _current_user_id.set(user_id)


def clear_current_user_id() -> None:
    """Clear user context. Must run in a finally block so requests never leak identity."""
    _current_user_id.set(None)


@contextmanager
def user_context(user_id: UUID):
    """
    Temporarily act as the given user.

    Restores whatever identity was active before, so nested use is safe.

    Example:
        with user_context(admin_id):
            actor = access_gate.current_actor()
            booking_service.accept(booking_id, actor)
    """
    previous = _current_user_id.get()
    set_current_user_id(user_id)
    try:
        yield
    finally:
        if previous is None:
            clear_current_user_id()
        else:
            set_current_user_id(previous)
