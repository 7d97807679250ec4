from datetime import datetime

from pydantic import EmailStr, Field

from privacyweave.schemas.common import CamelModel, NotificationMeta


class InquiryCreate(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    company: str = Field(min_length=1)
    industry: str = Field(min_length=1)
    message: str = Field(min_length=1)


class InquiryResponse(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    company: str
    industry: str
    message: str
    created_at: datetime


class InquirySubmitResponse(InquiryResponse):
    meta: NotificationMeta = Field(alias="_meta")
