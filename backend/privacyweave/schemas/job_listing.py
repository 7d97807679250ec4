from datetime import datetime

from pydantic import Field

from privacyweave.schemas.common import CamelModel


class JobListingCreate(CamelModel):
    title: str
    description: str
    requirements: str
    employment_type: str = Field(alias="type")  # Full-time, Part-time, Contract, Internship
    location: str
    experience: str
    is_active: bool = True
    listing_category: str | None = "job"


class JobListingResponse(CamelModel):
    id: int
    title: str
    description: str
    requirements: str
    employment_type: str = Field(alias="type")
    location: str
    experience: str
    is_active: bool
    listing_category: str | None
    created_at: datetime
