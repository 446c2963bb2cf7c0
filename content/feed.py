# src/content/feed.py
import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional
from fastapi import HTTPException
from auth.permissions import can_delete_comment, can_delete_post, can_edit_post
from content.hot import hot_discussions, hot_posts
from content.schemas import PostResponse, CommentResponse, CommentCreate, HotDiscussion
from content.services import PostService, CommentService
from content.streams import LiveQuery, watch_posts, watch_comments, watch_post_comments
from database import SessionLocal
from news.schemas import NewsArticle
from news.services import NewsService
from config import settings

logger = logging.getLogger(__name__)


class HomeFeed:
    """Posts, comments and a news preview for the home screen.

    The three feeds are independent; each delivery replaces that feed's
    list as a whole. Hot discussions are recomputed whenever posts or
    comments change.
    """

    def __init__(self, session_factory=SessionLocal,
                 news_loader: Callable[[], List[NewsArticle]] = NewsService.fetch_news,
                 clock: Callable[[], datetime] = datetime.utcnow,
                 on_change: Optional[Callable[["HomeFeed"], None]] = None):
        self._session_factory = session_factory
        self._news_loader = news_loader
        self._clock = clock
        self._on_change = on_change
        self._queries: List[LiveQuery] = []
        self._generation = 0
        self.mounted = False
        self.posts: List[PostResponse] = []
        self.comments: List[CommentResponse] = []
        self.news: List[NewsArticle] = []
        self.hot: List[HotDiscussion] = []

    def mount(self) -> None:
        if self.mounted:
            return
        self.mounted = True
        self._generation += 1
        self._queries = [
            watch_posts(self._set_posts, self._session_factory),
            watch_comments(self._set_comments, self._session_factory),
        ]

    def unmount(self) -> None:
        self.mounted = False
        for query in self._queries:
            query.cancel()
        self._queries = []

    async def load_news(self) -> None:
        """One request per mount; a late answer after unmount is dropped."""
        generation = self._generation
        try:
            articles = await asyncio.to_thread(self._news_loader)
        except Exception as e:
            logger.error(f"News fetch failed: {str(e)}")
            articles = []
        if not self.mounted or generation != self._generation:
            return
        self.news = articles[:settings.NEWS_PREVIEW_LIMIT]
        self._changed()

    @property
    def hot_section(self) -> Optional[List[HotDiscussion]]:
        """None when there is nothing hot; the section is then not shown."""
        return self.hot or None

    @property
    def trending(self) -> List[PostResponse]:
        """Posts created inside the hot window, newest first."""
        return hot_posts(self.posts, now=self._clock())

    def refresh_hot(self) -> None:
        self.hot = hot_discussions(self.comments, self.posts, now=self._clock())

    def _set_posts(self, posts: List[PostResponse]) -> None:
        self.posts = posts
        self.refresh_hot()
        self._changed()

    def _set_comments(self, comments: List[CommentResponse]) -> None:
        self.comments = comments
        self.refresh_hot()
        self._changed()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self)

    def post_actions(self, post: PostResponse, identity, role: str) -> dict:
        return {
            "edit": can_edit_post(post, identity),
            "delete": can_delete_post(post, identity, role),
        }

    def delete_post(self, post_id: str, identity, role: str) -> Optional[str]:
        """Returns an error message, or None on success."""
        db = self._session_factory()
        try:
            PostService.delete_post(post_id, identity, role, db)
        except HTTPException as e:
            return e.detail
        except Exception as e:
            logger.error(f"Delete post {post_id} failed: {str(e)}", exc_info=True)
            return "Could not delete the post"
        finally:
            db.close()
        return None


class PostDetailView:
    """One post with its comments, oldest first."""

    def __init__(self, post_id: str, session_factory=SessionLocal):
        self.post_id = post_id
        self._session_factory = session_factory
        self._query: Optional[LiveQuery] = None
        self.post: Optional[PostResponse] = None
        self.comments: List[CommentResponse] = []
        self.error: Optional[str] = None
        self.loading = True

    def mount(self) -> None:
        db = self._session_factory()
        try:
            self.post = PostService.get_post(self.post_id, db)
        except Exception as e:
            logger.error(f"Loading post {self.post_id} failed: {str(e)}")
        finally:
            db.close()
        self.loading = False
        self._query = watch_post_comments(self.post_id, self._set_comments, self._session_factory)

    def unmount(self) -> None:
        if self._query is not None:
            self._query.cancel()
            self._query = None

    def _set_comments(self, comments: List[CommentResponse]) -> None:
        self.comments = comments

    def can_delete(self, comment: CommentResponse, identity, role: str) -> bool:
        return can_delete_comment(comment, identity, role)

    def add_comment(self, text: str, identity) -> bool:
        """Empty text or no identity does nothing."""
        self.error = None
        if identity is None or not text.strip():
            return False
        db = self._session_factory()
        try:
            CommentService.create_comment(self.post_id, CommentCreate(text=text), identity, db)
        except HTTPException as e:
            self.error = e.detail
            return False
        except Exception as e:
            logger.error(f"Adding comment to {self.post_id} failed: {str(e)}", exc_info=True)
            self.error = "Could not add the comment"
            return False
        finally:
            db.close()
        return True

    def delete_comment(self, comment_id: str, identity, role: str) -> bool:
        self.error = None
        db = self._session_factory()
        try:
            return CommentService.delete_comment(comment_id, identity, role, db)
        except HTTPException as e:
            self.error = e.detail
            return False
        except Exception as e:
            logger.error(f"Deleting comment {comment_id} failed: {str(e)}", exc_info=True)
            self.error = "Could not delete the comment"
            return False
        finally:
            db.close()


class NewsView:
    """The news screen: articles from the recency window, newest first.

    Loaded once per mount. A failed request reads as an empty list, and an
    answer that arrives after unmount is dropped.
    """

    def __init__(self, news_loader: Callable[[], List[NewsArticle]] = NewsService.fetch_news,
                 clock: Callable[[], datetime] = datetime.utcnow):
        self._news_loader = news_loader
        self._clock = clock
        self._generation = 0
        self.mounted = False
        self.loading = False
        self.articles: List[NewsArticle] = []

    def mount(self) -> None:
        self.mounted = True
        self._generation += 1
        self.loading = True

    def unmount(self) -> None:
        self.mounted = False
        self.loading = False

    async def load(self) -> None:
        generation = self._generation
        try:
            articles = await asyncio.to_thread(self._news_loader)
        except Exception as e:
            logger.error(f"News fetch failed: {str(e)}")
            articles = []
        if not self.mounted or generation != self._generation:
            return
        self.articles = NewsService.recent(articles, now=self._clock())
        self.loading = False
