"""Service catalog domain models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class PricingType(str, Enum):
    """How a service is priced."""

    HOURLY = "hourly"    # Billed by time on site
    PROJECT = "project"  # Quoted per job


class ServiceCreate(BaseModel):
    """Catalog entry as seeded."""

    id: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9_\-]+$")
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    pricing_type: PricingType
    category: str | None = Field(None, max_length=100)
    icon_name: str | None = Field(None, max_length=100)
    display_order: int = 0


class Service(BaseModel):
    """Full catalog entry as stored."""

    id: str
    name: str
    description: str | None
    pricing_type: PricingType
    category: str | None
    icon_name: str | None
    display_order: int
    created_at: datetime

    model_config = {"from_attributes": True}

    @property
    def pricing_label(self) -> str:
        """Human-readable pricing model."""
        if self.pricing_type == PricingType.HOURLY:
            return "Hourly Service"
        return "Project Based"
