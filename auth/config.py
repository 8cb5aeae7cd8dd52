"""Authentication configuration."""

from pydantic import BaseModel, Field

DEFAULT_ADMIN_EMAIL = "admin@saafkardo.com"


class AuthConfig(BaseModel):
    """
    Authentication configuration.

    Session durations are in hours. The administrator email decides which
    registration becomes the admin account.
    """

    # Session settings
    session_expiry_hours: int = Field(
        default=720,  # 30 days
        description="Session lifetime in hours",
        ge=1,
        le=2160,
    )
    session_extend_on_activity: bool = Field(
        default=True,
        description="Whether to extend session expiry on activity",
    )
    session_extend_threshold_hours: int = Field(
        default=24,
        description="Extend session if less than this many hours remaining",
        ge=1,
    )
    session_cookie_name: str = Field(
        default="session_token",
        description="Cookie carrying the session token",
    )
    session_cookie_secure: bool = Field(
        default=True,
        description="Send the session cookie over HTTPS only",
    )

    # Magic link settings
    magic_link_expiry_minutes: int = Field(
        default=10,
        description="Magic link token lifetime in minutes",
        ge=5,
        le=60,
    )

    # Roles
    admin_email: str = Field(
        default=DEFAULT_ADMIN_EMAIL,
        description="Registering with this email (case-insensitive) grants the admin role",
    )

    # Application
    app_name: str = Field(
        default="Saaf Kardo",
        description="Application name for emails",
    )
    app_base_url: str = Field(
        default="http://localhost:8000",
        description="Base URL sign-in links point at",
    )
