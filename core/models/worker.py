"""Worker (service provider) domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

DEFAULT_RATING = 5.0


def _split_list(value):
    """Accept either a list or a comma-separated string, dropping blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(part).strip() for part in value if str(part).strip()]


class WorkerCreate(BaseModel):
    """Data required to register a worker."""

    name: str = Field(..., min_length=1, max_length=255)
    specialty: str = Field("", max_length=255)
    rating: float = Field(DEFAULT_RATING, ge=0.0, le=5.0)
    skills: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    police_verified: bool = False
    resident_pass: bool = False
    phone: str | None = Field(None, max_length=50)
    cnic: str | None = Field(None, max_length=50)
    location: str | None = Field(None, max_length=255)
    address: str | None = Field(None, max_length=500)
    bio: str | None = Field(None, max_length=2000)
    age: int | None = Field(None, ge=0, le=120)
    photo_url: str | None = Field(None, max_length=1000)

    @field_validator("skills", "languages", mode="before")
    @classmethod
    def split_comma_separated(cls, value):
        return _split_list(value)

    @field_validator("rating", mode="before")
    @classmethod
    def default_missing_rating(cls, value):
        """Blank or missing ratings fall back to the default."""
        if value is None or value == "":
            return DEFAULT_RATING
        return value


class Worker(BaseModel):
    """Full worker entity as stored."""

    id: UUID
    name: str
    specialty: str
    rating: float
    skills: list[str]
    languages: list[str]
    police_verified: bool
    resident_pass: bool
    phone: str | None
    cnic: str | None
    location: str | None
    address: str | None
    bio: str | None
    age: int | None
    photo_url: str | None
    created_at: datetime

    model_config = {"from_attributes": True}

    @property
    def is_fully_verified(self) -> bool:
        """Whether both verification checks have passed."""
        return self.police_verified and self.resident_pass

    @property
    def display_label(self) -> str:
        """Name plus specialty, as shown in assignment pickers."""
        if self.specialty:
            return f"{self.name} - {self.specialty}"
        return self.name
