"""
Back-office user schemas

Passwords only ever travel inbound; responses never carry the hash.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class LoginRequest(CamelModel):
    name: str
    password: str


class UserCreate(CamelModel):
    """Create a back-office user"""
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)
    role: Optional[str] = Field(None, pattern="^(admin|user)$")


class PasswordReset(CamelModel):
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    id: int
    name: str
    role: str
    created_at: datetime


class LoginResponse(CamelModel):
    user: UserResponse
