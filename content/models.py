# src/content/models.py
from sqlalchemy import Column, String, Text, DateTime
from database import Base
from auth.models import new_id
from datetime import datetime
from typing import Optional


class Post(Base):
    """Represents a forum post.

    ``author_name`` is copied from the author's profile when the post is
    created and is never refreshed afterwards.
    """
    __tablename__ = "posts"

    id: str = Column(String, primary_key=True, default=new_id)
    title: str = Column(String, nullable=False)
    content: Optional[str] = Column(Text, nullable=True)
    author_id: str = Column(String, index=True, nullable=False)
    author_name: str = Column(String, nullable=False)
    image_url: Optional[str] = Column(String, nullable=True)
    file_url: Optional[str] = Column(String, nullable=True)
    file_name: Optional[str] = Column(String, nullable=True)
    created_at: datetime = Column(DateTime, default=datetime.utcnow, index=True)


class Comment(Base):
    """Represents a comment on a post.

    ``post_id`` carries no foreign key: comments outlive a deleted post.
    """
    __tablename__ = "comments"

    id: str = Column(String, primary_key=True, default=new_id)
    post_id: str = Column(String, index=True, nullable=False)
    text: str = Column(Text, nullable=False)
    author_id: str = Column(String, index=True, nullable=False)
    author_name: str = Column(String, nullable=False)
    created_at: datetime = Column(DateTime, default=datetime.utcnow, index=True)
