# src/content/services.py
import logging
from fastapi import HTTPException
from sqlalchemy.orm import Session
from typing import Optional, List
from auth.models import User
from auth.permissions import can_edit_post, can_delete_post, can_delete_comment
from content.models import Post, Comment
from content.schemas import PostCreate, PostResponse, CommentCreate, CommentResponse
from content.streams import change_feed, fetch_posts, POSTS, COMMENTS
from config import settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _author_name(user_id: str, db: Session, fallback: Optional[str] = None) -> str:
    """Name copied onto new posts and comments; never refreshed later."""
    user = db.query(User).filter(User.id == user_id).first()
    if user and user.username:
        return user.username
    return fallback or settings.DEFAULT_AUTHOR_NAME


def _schedule_notification(post_id: str) -> None:
    from scheduler.tasks import schedule_new_post_notification

    try:
        schedule_new_post_notification(post_id)
    except Exception as e:
        logger.error(f"Could not schedule notification for post {post_id}: {str(e)}")


class PostService:
    @staticmethod
    def create_post(post_data: PostCreate, user_id: str, db: Session) -> PostResponse:
        """Create a new post owned by ``user_id``."""
        db_post = Post(
            title=post_data.title,
            content=post_data.content,
            author_id=user_id,
            author_name=_author_name(user_id, db),
            image_url=post_data.image_url,
            file_url=post_data.file_url,
            file_name=post_data.file_name if post_data.file_url else None,
        )
        db.add(db_post)
        db.commit()
        db.refresh(db_post)
        logger.info(f"Post {db_post.id} created by {user_id}")
        change_feed.publish(POSTS)
        _schedule_notification(db_post.id)
        return PostResponse.model_validate(db_post)

    @staticmethod
    def get_post(post_id: str, db: Session) -> Optional[PostResponse]:
        """Retrieve a post by ID."""
        post = db.query(Post).filter(Post.id == post_id).first()
        return PostResponse.model_validate(post) if post else None

    @staticmethod
    def get_posts(author_id: Optional[str], db: Session) -> List[PostResponse]:
        """Retrieve posts, newest first, optionally by one author."""
        if not author_id:
            return fetch_posts(db)
        posts = (db.query(Post)
                 .filter(Post.author_id == author_id)
                 .order_by(Post.created_at.desc(), Post.id.desc())
                 .all())
        return [PostResponse.model_validate(p) for p in posts]

    @staticmethod
    def update_post(post_id: str, post_data: PostCreate, identity, db: Session) -> Optional[PostResponse]:
        """Update title, content and attachments. Only the author may."""
        db_post = db.query(Post).filter(Post.id == post_id).first()
        if not db_post:
            return None
        if not can_edit_post(db_post, identity):
            raise HTTPException(status_code=403, detail="Only the author can edit this post")
        db_post.title = post_data.title
        db_post.content = post_data.content
        # Attachments are replaced only when a new one is supplied.
        if post_data.image_url:
            db_post.image_url = post_data.image_url
        if post_data.file_url:
            db_post.file_url = post_data.file_url
            db_post.file_name = post_data.file_name
        db.commit()
        db.refresh(db_post)
        change_feed.publish(POSTS)
        return PostResponse.model_validate(db_post)

    @staticmethod
    def delete_post(post_id: str, identity, role: str, db: Session) -> bool:
        """Delete a post. Its comments stay behind."""
        db_post = db.query(Post).filter(Post.id == post_id).first()
        if not db_post:
            return False
        if not can_delete_post(db_post, identity, role):
            raise HTTPException(status_code=403, detail="Not allowed to delete this post")
        db.delete(db_post)
        db.commit()
        logger.info(f"Post {post_id} deleted by {identity.id}")
        change_feed.publish(POSTS)
        return True


class CommentService:
    @staticmethod
    def create_comment(post_id: str, comment_data: CommentCreate, identity, db: Session) -> CommentResponse:
        """Create a comment on a post."""
        db_post = db.query(Post).filter(Post.id == post_id).first()
        if not db_post:
            raise HTTPException(status_code=404, detail="Post not found")
        db_comment = Comment(
            post_id=post_id,
            text=comment_data.text,
            author_id=identity.id,
            author_name=_author_name(identity.id, db, getattr(identity, "display_name", None)),
        )
        db.add(db_comment)
        db.commit()
        db.refresh(db_comment)
        change_feed.publish(COMMENTS)
        return CommentResponse.model_validate(db_comment)

    @staticmethod
    def get_comments(post_id: str, db: Session) -> List[CommentResponse]:
        """Retrieve comments for a post, oldest first."""
        comments = (db.query(Comment)
                    .filter(Comment.post_id == post_id)
                    .order_by(Comment.created_at.asc(), Comment.id.asc())
                    .all())
        return [CommentResponse.model_validate(c) for c in comments]

    @staticmethod
    def delete_comment(comment_id: str, identity, role: str, db: Session) -> bool:
        """Delete a comment."""
        db_comment = db.query(Comment).filter(Comment.id == comment_id).first()
        if not db_comment:
            return False
        if not can_delete_comment(db_comment, identity, role):
            raise HTTPException(status_code=403, detail="Not allowed to delete this comment")
        db.delete(db_comment)
        db.commit()
        change_feed.publish(COMMENTS)
        return True
