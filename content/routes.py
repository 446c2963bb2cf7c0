# src/content/routes.py
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from sqlalchemy.orm import Session
from typing import List, Optional
from auth.routes import get_current_user, as_identity
from auth.schemas import UserResponse
from content.hot import hot_discussions
from content.services import PostService, CommentService
from content.schemas import PostCreate, PostResponse, CommentCreate, CommentResponse, HotDiscussion
from content.streams import fetch_posts, fetch_comments
from database import get_db
from storage.services import BlobStore

router = APIRouter(prefix="/content", tags=["content"])


@router.post("/posts", response_model=PostResponse)
async def create_post(
    title: str = Form(...),
    content: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: UserResponse = Depends(get_current_user)
) -> PostResponse:
    """Create a new post with optional image and file attachments."""
    if not title.strip():
        raise HTTPException(status_code=400, detail="Title is required")
    image_url = file_url = file_name = None
    if image is not None:
        image_url = await BlobStore.upload_image(await image.read(), current_user.id,
                                                 image.content_type or "image/jpeg")
    if file is not None:
        file_url = await BlobStore.upload_file(await file.read(), file.filename, current_user.id,
                                               file.content_type or "application/octet-stream")
        file_name = file.filename
    data = PostCreate(title=title, content=content, image_url=image_url, file_url=file_url, file_name=file_name)
    return PostService.create_post(data, current_user.id, db)


@router.get("/posts", response_model=List[PostResponse])
async def get_posts(author_id: Optional[str] = None, db: Session = Depends(get_db)) -> List[PostResponse]:
    """Retrieve posts, newest first."""
    return PostService.get_posts(author_id, db)


@router.get("/posts/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, db: Session = Depends(get_db)) -> PostResponse:
    """Retrieve a post by ID."""
    post = PostService.get_post(post_id, db)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.put("/posts/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    post_data: PostCreate,
    db: Session = Depends(get_db),
    current_user: UserResponse = Depends(get_current_user)
) -> PostResponse:
    """Update a post."""
    post = PostService.update_post(post_id, post_data, as_identity(current_user), db)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.delete("/posts/{post_id}")
async def delete_post(
    post_id: str,
    db: Session = Depends(get_db),
    current_user: UserResponse = Depends(get_current_user)
) -> dict:
    """Delete a post."""
    if not PostService.delete_post(post_id, as_identity(current_user), current_user.role, db):
        raise HTTPException(status_code=404, detail="Post not found")
    return {"message": "Post deleted"}


@router.post("/posts/{post_id}/comments", response_model=CommentResponse)
async def create_comment(
    post_id: str,
    comment_data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: UserResponse = Depends(get_current_user)
) -> CommentResponse:
    """Create a comment on a post."""
    return CommentService.create_comment(post_id, comment_data, as_identity(current_user), db)


@router.get("/posts/{post_id}/comments", response_model=List[CommentResponse])
async def get_comments(post_id: str, db: Session = Depends(get_db)) -> List[CommentResponse]:
    """Retrieve comments for a post."""
    return CommentService.get_comments(post_id, db)


@router.delete("/comments/{comment_id}")
async def delete_comment(
    comment_id: str,
    db: Session = Depends(get_db),
    current_user: UserResponse = Depends(get_current_user)
) -> dict:
    """Delete a comment."""
    if not CommentService.delete_comment(comment_id, as_identity(current_user), current_user.role, db):
        raise HTTPException(status_code=404, detail="Comment not found")
    return {"message": "Comment deleted"}


@router.get("/hot", response_model=List[HotDiscussion])
async def get_hot_discussions(db: Session = Depends(get_db)) -> List[HotDiscussion]:
    """Comments from the last day, joined to their posts."""
    return hot_discussions(fetch_comments(db), fetch_posts(db))
