# src/content/schemas.py
from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional
from config import settings


def s3_to_cdn(url: Optional[str]) -> Optional[str]:
    """Convert S3 URL to CDN URL"""
    if not url:
        return url
    return url.replace(f"https://{settings.GCORE_S3_DOMAIN}", settings.CDN_URL)


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class PostCreate(BaseModel):
    """Schema for creating or editing a post."""
    title: str
    content: Optional[str] = None
    image_url: Optional[str] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v.strip()

    @field_validator("content", "image_url", "file_url", "file_name", mode="before")
    @classmethod
    def empty_is_missing(cls, v):
        return _blank_to_none(v)


class PostResponse(BaseModel):
    """Schema for post response."""
    id: str
    title: str
    content: Optional[str] = None
    author_id: str
    author_name: str
    image_url: Optional[str] = None  # CDN URL
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("content", "image_url", "file_url", "file_name", mode="before")
    @classmethod
    def empty_is_missing(cls, v):
        return _blank_to_none(v)

    @field_validator("image_url", "file_url")
    @classmethod
    def through_cdn(cls, v):
        return s3_to_cdn(v)

    class Config:
        from_attributes = True


class CommentCreate(BaseModel):
    """Schema for creating a comment."""
    text: str

    @field_validator("text")
    @classmethod
    def text_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment text is required")
        return v.strip()


class CommentResponse(BaseModel):
    id: str
    post_id: str
    text: str
    author_id: str
    author_name: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class HotDiscussion(BaseModel):
    """A recent comment paired with the post it belongs to."""
    comment_id: str
    post_id: str
    post_title: str
    comment_text: str
    comment_time: datetime
