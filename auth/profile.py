# src/auth/profile.py
import logging
from typing import List, Optional
from fastapi import HTTPException
from pydantic import ValidationError
from auth.schemas import ProfileUpdate, UserResponse
from auth.services import AuthService, ProfileService
from content.schemas import PostResponse
from content.streams import LiveQuery, watch_author_posts
from database import SessionLocal
from storage.services import BlobStore

logger = logging.getLogger(__name__)


class ProfileView:
    """A member's profile and their posts. Only the owner can edit it."""

    def __init__(self, user_id: str, current_identity=None, session_factory=SessionLocal,
                 blob_store=BlobStore):
        self.user_id = user_id
        self.current_identity = current_identity
        self._session_factory = session_factory
        self._blob_store = blob_store
        self._query: Optional[LiveQuery] = None
        self.profile: Optional[UserResponse] = None
        self.posts: List[PostResponse] = []
        self.open_post_id: Optional[str] = None
        self.loading = True
        self.editing = False
        self.error: Optional[str] = None
        self.username = ""
        self.age = ""
        self.bio = ""
        self.photo_url: Optional[str] = None

    @property
    def is_me(self) -> bool:
        return self.current_identity is not None and self.current_identity.id == self.user_id

    def mount(self) -> None:
        db = self._session_factory()
        try:
            self.profile = AuthService.get_profile(self.user_id, db)
        except Exception as e:
            logger.error(f"Loading profile {self.user_id} failed: {str(e)}")
        finally:
            db.close()
        if self.profile:
            self.username = self.profile.username or ""
            self.age = str(self.profile.age) if self.profile.age is not None else ""
            self.bio = self.profile.bio or ""
            self.photo_url = self.profile.photo_url
        self.loading = False
        self._query = watch_author_posts(self.user_id, self._set_posts, self._session_factory)

    def unmount(self) -> None:
        if self._query is not None:
            self._query.cancel()
            self._query = None

    def _set_posts(self, posts: List[PostResponse]) -> None:
        self.posts = posts

    def open_post(self, post_id: str) -> None:
        self.open_post_id = post_id

    def close_post(self) -> None:
        self.open_post_id = None

    def start_editing(self) -> None:
        if self.is_me:
            self.editing = True

    async def change_photo(self, data: bytes, mime_type: str = "image/jpeg") -> None:
        if not self.is_me:
            return
        try:
            self.photo_url = await self._blob_store.upload_image(data, self.current_identity.id, mime_type)
        except Exception as e:
            logger.error(f"Photo upload failed: {str(e)}")
            self.error = "Could not upload the photo"

    def save(self) -> bool:
        self.error = None
        if not self.is_me:
            return False
        try:
            update = ProfileUpdate(username=self.username, age=self.age, bio=self.bio, photo_url=self.photo_url)
        except ValidationError:
            self.error = "Age must be a number"
            return False

        db = self._session_factory()
        try:
            self.profile = ProfileService.update_profile(self.user_id, update, db)
        except HTTPException as e:
            self.error = e.detail
            return False
        except Exception as e:
            logger.error(f"Saving profile {self.user_id} failed: {str(e)}", exc_info=True)
            self.error = "Could not save the profile"
            return False
        finally:
            db.close()
        self.editing = False
        return True
