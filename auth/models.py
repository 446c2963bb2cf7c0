# src/auth/models.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from database import Base
from datetime import datetime
from typing import Optional
from uuid import uuid4


def new_id() -> str:
    return uuid4().hex


class Account(Base):
    """Sign-in credentials held by the identity provider.

    Survives deletion of the matching ``User`` profile.
    """
    __tablename__ = "accounts"

    id: str = Column(String, primary_key=True, default=new_id)
    email: str = Column(String, unique=True, index=True, nullable=False)
    password_hash: str = Column(String, nullable=False)
    display_name: Optional[str] = Column(String, nullable=True)
    email_verified: bool = Column(Boolean, nullable=False, default=False)
    verification_token: Optional[str] = Column(String, nullable=True, index=True)
    created_at: datetime = Column(DateTime, default=datetime.utcnow)


class User(Base):
    """Represents a forum member profile, keyed by the account id."""
    __tablename__ = "users"

    id: str = Column(String, primary_key=True)
    email: str = Column(String, index=True, nullable=False)
    username: Optional[str] = Column(String, nullable=True)
    role: str = Column(String, nullable=False, default="USER")  # ADMIN, USER
    age: Optional[int] = Column(Integer, nullable=True)
    bio: Optional[str] = Column(Text, nullable=True)
    photo_url: Optional[str] = Column(String, nullable=True)
    created_at: datetime = Column(DateTime, default=datetime.utcnow)
    disabled: bool = Column(Boolean, nullable=False, default=False)
    needs_profile_setup: bool = Column(Boolean, nullable=False, default=True)
