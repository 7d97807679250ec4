from datetime import datetime
from typing import Literal
from urllib.parse import urlparse

from pydantic import EmailStr, Field, field_validator

from privacyweave.schemas.common import CamelModel, NotificationMeta

ApplicationType = Literal["job", "internship"]


class JobApplicationCreate(CamelModel):
    full_name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=1)
    position: str = Field(min_length=1)
    experience: str = Field(min_length=1)
    message: str | None = None
    # Careers-page forms send a public link; chat uploads are attached separately
    resume_path: str | None = None
    application_type: ApplicationType = "job"
    education: str | None = None
    university: str | None = None
    graduation_year: str | None = None
    availability_date: str | None = None

    @field_validator("application_type", mode="before")
    @classmethod
    def _default_type(cls, value):
        return value or "job"

    @field_validator("resume_path")
    @classmethod
    def _resume_is_url(cls, value: str | None) -> str | None:
        if not value:
            return None
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Invalid URL for resume path")
        return value


class JobApplicationResponse(CamelModel):
    id: int
    full_name: str
    email: str
    phone: str
    position: str
    experience: str
    message: str | None
    resume_path: str | None
    resume_kind: str | None
    application_type: str
    education: str | None
    university: str | None
    graduation_year: str | None
    availability_date: str | None
    created_at: datetime


class JobApplicationSubmitResponse(JobApplicationResponse):
    meta: NotificationMeta = Field(alias="_meta")
