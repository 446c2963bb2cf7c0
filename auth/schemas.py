# src/auth/schemas.py
import re
from pydantic import BaseModel, EmailStr, field_validator
from datetime import datetime
from typing import Optional
from config import settings

ADMIN = "ADMIN"
USER = "USER"

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


class UserCreate(BaseModel):
    """Schema for user registration."""
    username: str
    email: EmailStr
    password: str

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Username is required")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_long_enough(cls, v: str) -> str:
        if len(v) < settings.MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters")
        return v


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Schema for a user profile read from the database."""
    id: str
    email: str
    username: Optional[str] = None
    role: str = USER
    age: Optional[int] = None
    bio: Optional[str] = None
    photo_url: Optional[str] = None
    created_at: Optional[datetime] = None
    disabled: bool = False
    needs_profile_setup: bool = False

    @field_validator("role", mode="before")
    @classmethod
    def known_role(cls, v):
        return ADMIN if v == ADMIN else USER

    @field_validator("disabled", "needs_profile_setup", mode="before")
    @classmethod
    def strict_flag(cls, v):
        # Only an explicit true counts.
        return v is True

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    """Schema for editing one's own profile."""
    username: Optional[str] = None
    age: Optional[int] = None
    bio: Optional[str] = None
    photo_url: Optional[str] = None

    @field_validator("age", mode="before")
    @classmethod
    def blank_age_is_none(cls, v):
        if v == "" or v is None:
            return None
        return int(v)


class Token(BaseModel):
    """Schema for token response."""
    access_token: str
    token_type: str
