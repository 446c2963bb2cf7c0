# src/content/hot.py
"""Trending projections over the last day of activity.

Two windows share the same length but are evaluated separately: one over
recent comments, one over a post's own creation time.
"""
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence
from content.schemas import PostResponse, CommentResponse, HotDiscussion
from config import settings

HOT_WINDOW = timedelta(hours=settings.HOT_WINDOW_HOURS)


def hot_cutoff(now: Optional[datetime] = None) -> datetime:
    return (now or datetime.utcnow()) - HOT_WINDOW


def hot_discussions(comments: Sequence[CommentResponse], posts: Sequence[PostResponse],
                    now: Optional[datetime] = None,
                    limit: int = settings.HOT_DISCUSSIONS_LIMIT) -> List[HotDiscussion]:
    """Recent comments joined to their posts, in the comments' own order.

    Comments whose post is not in ``posts`` are dropped. An empty result
    means the section is not shown at all.
    """
    cutoff = hot_cutoff(now)
    posts_by_id = {p.id: p for p in posts}
    result: List[HotDiscussion] = []
    for comment in comments:
        if len(result) >= limit:
            break
        if comment.created_at is None or comment.created_at < cutoff:
            continue
        post = posts_by_id.get(comment.post_id)
        if post is None:
            continue
        result.append(HotDiscussion(
            comment_id=comment.id,
            post_id=post.id,
            post_title=post.title,
            comment_text=comment.text,
            comment_time=comment.created_at,
        ))
    return result


def is_post_hot(post: PostResponse, now: Optional[datetime] = None) -> bool:
    return post.created_at is not None and post.created_at >= hot_cutoff(now)


def hot_posts(posts: Iterable[PostResponse], now: Optional[datetime] = None) -> List[PostResponse]:
    """Posts created inside the window, for the trending shelf."""
    cutoff = hot_cutoff(now)
    return [p for p in posts if p.created_at is not None and p.created_at >= cutoff]
