# src/content/streams.py
"""Live queries over the posts and comments collections.

Writers publish the name of the collection they touched after commit.
Every live query on that collection re-runs and hands its owner the full
ordered result, replacing whatever the owner held before.
"""
import logging
from collections import defaultdict
from typing import Callable, Dict, Generic, List, TypeVar
from sqlalchemy.orm import Session
from content.models import Post, Comment
from content.schemas import PostResponse, CommentResponse
from database import SessionLocal

logger = logging.getLogger(__name__)

POSTS = "posts"
COMMENTS = "comments"

T = TypeVar("T")


class ChangeFeed:
    """Registry of live queries per collection."""

    def __init__(self):
        self._queries: Dict[str, List["LiveQuery"]] = defaultdict(list)

    def register(self, query: "LiveQuery") -> None:
        self._queries[query.collection].append(query)

    def unregister(self, query: "LiveQuery") -> None:
        queries = self._queries.get(query.collection, [])
        if query in queries:
            queries.remove(query)

    def publish(self, collection: str) -> None:
        for query in list(self._queries.get(collection, [])):
            query.refresh()

    def subscribers(self, collection: str) -> int:
        return len(self._queries.get(collection, []))

    def clear(self) -> None:
        self._queries.clear()


change_feed = ChangeFeed()


class LiveQuery(Generic[T]):
    """A standing query; ``cancel`` stops every later delivery."""

    def __init__(self, collection: str, fetch: Callable[[Session], List[T]],
                 on_snapshot: Callable[[List[T]], None], session_factory=SessionLocal,
                 feed: ChangeFeed = None):
        self.collection = collection
        self._fetch = fetch
        self._on_snapshot = on_snapshot
        self._session_factory = session_factory
        self._feed = feed or change_feed
        self.active = False

    def start(self) -> "LiveQuery[T]":
        self.active = True
        self._feed.register(self)
        self.refresh()
        return self

    def refresh(self) -> None:
        if not self.active:
            return
        db = self._session_factory()
        try:
            snapshot = self._fetch(db)
        except Exception as e:
            logger.error(f"Live query on {self.collection} failed: {str(e)}", exc_info=True)
            return
        finally:
            db.close()
        # Cancelled while the query ran.
        if not self.active:
            return
        try:
            self._on_snapshot(snapshot)
        except Exception as e:
            logger.error(f"Snapshot delivery on {self.collection} failed: {str(e)}", exc_info=True)

    def cancel(self) -> None:
        self.active = False
        self._feed.unregister(self)


def fetch_posts(db: Session) -> List[PostResponse]:
    posts = db.query(Post).order_by(Post.created_at.desc(), Post.id.desc()).all()
    return [PostResponse.model_validate(p) for p in posts]


def fetch_comments(db: Session) -> List[CommentResponse]:
    comments = db.query(Comment).order_by(Comment.created_at.desc(), Comment.id.desc()).all()
    return [CommentResponse.model_validate(c) for c in comments]


def watch_posts(on_snapshot, session_factory=SessionLocal, feed: ChangeFeed = None) -> LiveQuery:
    """All posts, newest first."""
    return LiveQuery(POSTS, fetch_posts, on_snapshot, session_factory, feed).start()


def watch_comments(on_snapshot, session_factory=SessionLocal, feed: ChangeFeed = None) -> LiveQuery:
    """All comments across posts, newest first."""
    return LiveQuery(COMMENTS, fetch_comments, on_snapshot, session_factory, feed).start()


def watch_post_comments(post_id: str, on_snapshot, session_factory=SessionLocal,
                        feed: ChangeFeed = None) -> LiveQuery:
    """Comments of one post, oldest first."""
    def fetch(db: Session) -> List[CommentResponse]:
        comments = (db.query(Comment)
                    .filter(Comment.post_id == post_id)
                    .order_by(Comment.created_at.asc(), Comment.id.asc())
                    .all())
        return [CommentResponse.model_validate(c) for c in comments]

    return LiveQuery(COMMENTS, fetch, on_snapshot, session_factory, feed).start()


def watch_author_posts(author_id: str, on_snapshot, session_factory=SessionLocal,
                       feed: ChangeFeed = None) -> LiveQuery:
    """Posts written by one user, newest first."""
    def fetch(db: Session) -> List[PostResponse]:
        posts = (db.query(Post)
                 .filter(Post.author_id == author_id)
                 .order_by(Post.created_at.desc(), Post.id.desc())
                 .all())
        return [PostResponse.model_validate(p) for p in posts]

    return LiveQuery(POSTS, fetch, on_snapshot, session_factory, feed).start()
