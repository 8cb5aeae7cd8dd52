"""Pydantic models for auth domain."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from core.models import User


class Session(BaseModel):
    """An active user session."""

    token: str = Field(..., description="Session token (opaque string)")
    user_id: UUID
    created_at: datetime
    expires_at: datetime
    last_activity_at: datetime


class MagicLinkRequest(BaseModel):
    """Request body for a sign-in link."""

    email: EmailStr


class AuthenticatedUser(BaseModel):
    """Result of a verified magic link: the user and their new session."""

    user: User
    session: Session
