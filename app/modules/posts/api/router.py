from typing import Any, List, Optional
import logging

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AppError
from app.core.storage import MediaStorage
from app.db.session import get_db
from app.deps import get_storage
from app.modules.posts.schemas.post import Message, Post as PostSchema, PostUpdate, SignalRequest
from app.modules.posts.services.post import (
    get_existing_post, get_posts, get_user_posts, create_post, update_post_content,
    delete_post, delete_post_media, signal_post, store_post_image, get_post_image
)

logger = logging.getLogger("app")

router = APIRouter()

@router.get("", response_model=List[PostSchema])
def read_posts(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
) -> Any:
    """
    Retrieve posts, newest first.
    """
    return get_posts(db, skip=skip, limit=limit)

@router.post("", response_model=PostSchema, status_code=status.HTTP_201_CREATED)
async def create_new_post(
    *,
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_storage),
    content: Optional[str] = Form(None),
    user_id: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
) -> Any:
    """
    Create new post with optional image.
    """
    media = []
    if image is not None and image.filename:
        data = await image.read()
        media.append(store_post_image(storage, data, image.filename, settings.MAX_UPLOAD_SIZE))
    try:
        return create_post(db, content, creator_id=user_id, media=media)
    except AppError:
        if media:
            logger.warning(f"Post creation failed, removing uploaded media {media}")
            delete_post_media(storage, media)
        raise

@router.get("/user/{user_id}", response_model=List[PostSchema])
def read_user_posts_by_id(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
) -> Any:
    """
    Get posts by creator ID.
    """
    return get_user_posts(db, user_id=user_id, skip=skip, limit=limit)

@router.get("/{post_id}", response_model=PostSchema)
def read_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
) -> Any:
    return get_existing_post(db, post_id)

@router.get("/{post_id}/image")
def read_post_image(
    *,
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_storage),
    post_id: str,
) -> Response:
    """
    Raw bytes of the post's first image, typed from its content.
    """
    data, content_type, filename = get_post_image(db, storage, post_id)
    return Response(
        content=data,
        media_type=content_type,
        headers={"Content-Disposition": f"inline; filename={filename}"},
    )

@router.put("/{post_id}", response_model=PostSchema)
def update_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    post_in: PostUpdate,
) -> Any:
    return update_post_content(db, post_id, post_in.content)

@router.delete("/{post_id}", response_model=Message)
def delete_post_by_id(
    *,
    db: Session = Depends(get_db),
    storage: MediaStorage = Depends(get_storage),
    post_id: str,
) -> Any:
    """
    Delete a post with its comments and reactions, then its media.
    """
    media = delete_post(db, post_id)
    delete_post_media(storage, media)
    return {"message": "Post deleted"}

@router.post("/{post_id}/signal", response_model=PostSchema, status_code=status.HTTP_201_CREATED)
def signal_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    signal_in: SignalRequest,
) -> Any:
    """
    Flag a post for moderation.
    """
    return signal_post(db, post_id, signal_in.user_id)
