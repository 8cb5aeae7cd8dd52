"""Typed exceptions for authentication failures."""


class AuthError(Exception):
    """Base class for authentication errors."""


class InvalidTokenError(AuthError):
    """Session token is unknown, malformed, or has been revoked."""


class SessionExpiredError(AuthError):
    """Session has expired and user must re-authenticate."""
