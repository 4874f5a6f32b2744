"""
User Schemas
Pydantic models for user-related data.
"""

import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from userdir.config import settings


def validate_login_pattern(login: str) -> str:
    """Raise ValueError unless login matches the configured login pattern."""
    if not re.match(settings.login_regex, login):
        raise ValueError(f"login must match pattern {settings.login_regex}")
    return login


class UserBase(BaseModel):
    login: str = Field(..., min_length=1, max_length=50)
    email: Optional[str] = Field(default=None, max_length=254)
    mobile: Optional[str] = Field(default=None, max_length=20)
    first_name: Optional[str] = Field(default=None, max_length=50)
    last_name: Optional[str] = Field(default=None, max_length=50)
    lang_key: Optional[str] = Field(default=None, max_length=10)

    @field_validator("login")
    @classmethod
    def validate_login(cls, v: str) -> str:
        return validate_login_pattern(v)


class UserCreate(UserBase):
    """
    Creation request. An empty email means "no real email": the service
    stores the login's placeholder address instead.
    """
    id: Optional[int] = None


class UserUpdate(UserBase):
    id: int


class UserResponse(BaseModel):
    id: int
    login: str
    email: str
    mobile: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    lang_key: Optional[str] = None
    activated: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserCreationResult(BaseModel):
    """
    Outcome of a create. The user is persisted even when the activation
    notification could not be dispatched.
    """
    user: UserResponse
    notified: bool
    notification_error: Optional[str] = None


class MobileExistence(BaseModel):
    """Result of a mobile existence check, detailed enough to drive OTP/registration flows."""
    exists: bool
    user_id: Optional[int] = None
    login: Optional[str] = None
    email: Optional[str] = None
    activated: Optional[bool] = None
