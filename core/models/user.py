"""User (customer/administrator) domain models."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class Role(str, Enum):
    """What an authenticated user may do."""

    CUSTOMER = "customer"
    ADMIN = "admin"


class UserCreate(BaseModel):
    """Registration data. Role is derived, never supplied."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = Field(None, max_length=50)
    address: str | None = Field(None, max_length=500)


class UserUpdate(BaseModel):
    """Profile fields a user may edit. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = Field(None, max_length=50)
    address: str | None = Field(None, max_length=500)


class User(BaseModel):
    """Full user entity as stored."""

    id: UUID
    name: str
    email: EmailStr
    phone: str | None
    address: str | None
    role: Role
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class Actor(BaseModel):
    """The authenticated party invoking a booking command."""

    id: UUID
    role: Role

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_customer(self) -> bool:
        return self.role == Role.CUSTOMER
