from datetime import datetime

from pydantic import EmailStr, Field

from privacyweave.schemas.common import CamelModel


class UserCreate(CamelModel):
    username: str = Field(min_length=3)
    email: EmailStr
    name: str = Field(min_length=1)
    password: str = Field(min_length=8)


class LoginRequest(CamelModel):
    username: str
    password: str


class UserRecord(CamelModel):
    """Stored user, including the password hash. Never returned by the API."""

    id: int
    username: str
    email: str
    name: str
    role: str
    password_hash: str
    created_at: datetime


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    name: str
    role: str
    created_at: datetime


class SessionResponse(CamelModel):
    user: UserResponse
    token: str
