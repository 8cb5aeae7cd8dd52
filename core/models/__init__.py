"""Core domain models."""

from core.models.booking import (
    Booking, BookingCreate, BookingStatus, BookingCategory, AdminFilter, CancelledBy,
)
from core.models.worker import Worker, WorkerCreate, DEFAULT_RATING
from core.models.service import Service, ServiceCreate, PricingType
from core.models.user import User, UserCreate, UserUpdate, Role, Actor

__all__ = [
    # Booking
    "Booking", "BookingCreate", "BookingStatus", "BookingCategory", "AdminFilter", "CancelledBy",
    # Worker
    "Worker", "WorkerCreate", "DEFAULT_RATING",
    # Service
    "Service", "ServiceCreate", "PricingType",
    # User
    "User", "UserCreate", "UserUpdate", "Role", "Actor",
]
