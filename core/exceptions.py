"""Typed exceptions for booking lifecycle failures.

Every failure the engine can report maps to exactly one of these. They are
raised synchronously to the caller and never retried by the engine.
"""


class BookingError(Exception):
    """Base class for booking domain errors."""


class ValidationError(BookingError):
    """A required input field is missing or invalid."""


class InvalidTransitionError(BookingError):
    """Requested state change is not legal from the booking's current status."""

    def __init__(self, message: str, current_status: str | None = None):
        self.current_status = current_status
        super().__init__(message)


class NotAuthorizedError(BookingError):
    """Actor lacks the role or ownership required for the operation."""


class NotFoundError(BookingError):
    """Referenced booking, worker, service or user does not exist."""


class ConflictError(BookingError):
    """
    Concurrent modification detected at write time.

    The caller may re-fetch and re-attempt; the engine never retries.
    """

    def __init__(self, message: str, expected_version: int | None = None):
        self.expected_version = expected_version
        super().__init__(message)
