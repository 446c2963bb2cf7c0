"""
Shared fixtures: an in-memory database per test, and no real email or
scheduler traffic.
"""

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import scheduler.tasks
from auth.identity import Identity
from auth.models import User, new_id
from content.models import Post, Comment
from content.streams import change_feed
from database import init_db
from notifications.services import EmailService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Capture outgoing mail instead of talking to SMTP."""
    sent = []

    def fake_send(recipients, subject, body, subtype="plain"):
        sent.append({"to": list(recipients), "subject": subject, "body": body, "subtype": subtype})

    monkeypatch.setattr(EmailService, "send_email", fake_send)
    return sent


@pytest.fixture(autouse=True)
def scheduled_notifications(monkeypatch):
    """Record new-post notification jobs instead of scheduling them."""
    jobs = []
    monkeypatch.setattr(scheduler.tasks, "schedule_new_post_notification", jobs.append)
    return jobs


@pytest.fixture(autouse=True)
def clean_change_feed():
    yield
    change_feed.clear()


@pytest.fixture
def make_user(db):
    """Insert a profile directly and return its identity."""
    def _make(username="alice", role="USER", disabled=False, email=None):
        user_id = new_id()
        email = email or f"{username}@example.com"
        db.add(User(
            id=user_id,
            email=email,
            username=username,
            role=role,
            disabled=disabled,
            needs_profile_setup=False,
        ))
        db.commit()
        return Identity(id=user_id, email=email, display_name=username)
    return _make


@pytest.fixture
def make_post(db):
    def _make(author, title="Hello", created_at=None, **fields):
        post = Post(
            title=title,
            author_id=author.id,
            author_name=author.display_name or "User",
            created_at=created_at or datetime.utcnow(),
            **fields,
        )
        db.add(post)
        db.commit()
        db.refresh(post)
        return post
    return _make


@pytest.fixture
def make_comment(db):
    def _make(author, post_id, text="Nice", created_at=None):
        comment = Comment(
            post_id=post_id,
            text=text,
            author_id=author.id,
            author_name=author.display_name or "User",
            created_at=created_at or datetime.utcnow(),
        )
        db.add(comment)
        db.commit()
        db.refresh(comment)
        return comment
    return _make
