# src/content/forms.py
import logging
from dataclasses import dataclass
from typing import Optional
from fastapi import HTTPException
from auth.exceptions import FormError
from content.schemas import PostCreate, PostResponse
from content.services import PostService
from database import SessionLocal
from storage.services import BlobStore

logger = logging.getLogger(__name__)

TITLE_REQUIRED = "A post needs a title"


@dataclass
class Attachment:
    data: bytes
    name: str
    mime_type: str = "application/octet-stream"


class PostForm:
    """Create a post, or edit one when ``post`` is given.

    The title is checked before anything is uploaded or written. Failures
    after that end up in ``error`` and nothing is rolled back.
    """

    def __init__(self, identity, post: Optional[PostResponse] = None,
                 session_factory=SessionLocal, blob_store=BlobStore):
        self.identity = identity
        self.post = post
        self._session_factory = session_factory
        self._blob_store = blob_store
        self.title = post.title if post else ""
        self.content = (post.content or "") if post else ""
        self.image: Optional[Attachment] = None
        self.file: Optional[Attachment] = None
        self.title_error: Optional[str] = None
        self.error: Optional[str] = None
        self.loading = False

    @property
    def editing(self) -> bool:
        return self.post is not None

    def set_title(self, title: str) -> None:
        self.title = title
        if title.strip():
            self.title_error = None

    def pick_image(self, data: bytes, name: str = "image", mime_type: str = "image/jpeg") -> None:
        self.image = Attachment(data, name, mime_type)

    def pick_file(self, data: bytes, name: str, mime_type: str = "application/octet-stream") -> None:
        self.file = Attachment(data, name, mime_type)

    def validate(self) -> None:
        if not self.title.strip():
            raise FormError("title", TITLE_REQUIRED)

    async def submit(self) -> Optional[PostResponse]:
        if self.loading or self.identity is None:
            return None
        self.error = None
        try:
            self.validate()
        except FormError as e:
            self.title_error = e.message
            return None
        self.title_error = None

        self.loading = True
        try:
            image_url = file_url = file_name = None
            if self.image:
                image_url = await self._blob_store.upload_image(self.image.data, self.identity.id,
                                                                self.image.mime_type)
            if self.file:
                file_url = await self._blob_store.upload_file(self.file.data, self.file.name,
                                                              self.identity.id, self.file.mime_type)
                file_name = self.file.name

            data = PostCreate(title=self.title, content=self.content, image_url=image_url,
                              file_url=file_url, file_name=file_name)
            db = self._session_factory()
            try:
                if self.editing:
                    updated = PostService.update_post(self.post.id, data, self.identity, db)
                    if updated is None:
                        self.error = "Post not found"
                    return updated
                return PostService.create_post(data, self.identity.id, db)
            finally:
                db.close()
        except HTTPException as e:
            self.error = e.detail
        except Exception as e:
            logger.error(f"Saving post failed: {str(e)}", exc_info=True)
            self.error = "Could not save the post"
        finally:
            self.loading = False
        return None
