from typing import List, Optional, Tuple
import uuid
import logging

from sqlalchemy.orm import Session

from app.core.exceptions import NotFound, ValidationError
from app.core.locks import post_locks
from app.core.storage import MediaStorage
from app.db.session import commit_session
from app.modules.posts.models.post import Post, empty_reactions
from app.utils.magic_bytes import detect_content_type, detect_image_type

logger = logging.getLogger("app")

ALLOWED_IMAGE_EXTENSIONS = [".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tiff", ".avif", ".heic"]

def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    return value

def get_post(db: Session, post_id: str) -> Optional[Post]:
    """Get post by ID"""
    logger.info(f"Getting post with ID: {post_id}")
    return db.query(Post).filter(Post.id == post_id).first()

def get_existing_post(db: Session, post_id: str) -> Post:
    post = get_post(db, post_id)
    if not post:
        raise NotFound("Post not found")
    return post

def get_post_for_update(db: Session, post_id: str) -> Post:
    """
    Load a post for read-modify-write.
    Callers hold post_locks for post_id; the row lock covers other processes.
    """
    post = (
        db.query(Post)
        .filter(Post.id == post_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if not post:
        raise NotFound("Post not found")
    return post

def get_posts(db: Session, skip: int = 0, limit: int = 100) -> List[Post]:
    """Get list of posts"""
    logger.info(f"Getting posts with skip={skip}, limit={limit}")
    return db.query(Post).order_by(Post.created_at.desc()).offset(skip).limit(limit).all()

def get_user_posts(db: Session, user_id: str, skip: int = 0, limit: int = 100) -> List[Post]:
    """Get posts by creator ID"""
    logger.info(f"Getting posts for user ID: {user_id} with skip={skip}, limit={limit}")
    return (
        db.query(Post)
        .filter(Post.creator_id == user_id)
        .order_by(Post.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

def create_post(db: Session, content: Optional[str], creator_id: Optional[str] = None, media: Optional[List[str]] = None) -> Post:
    """Create new post with zeroed reactions and no comments or signals"""
    _require_text(content, "Content")
    logger.info(f"Creating post for creator ID: {creator_id}")
    post = Post(
        id=str(uuid.uuid4()),
        creator_id=creator_id,
        content=content,
        media=list(media or []),
        reactions=empty_reactions(),
        comments=[],
        signaled=False,
        signaled_by=[],
        last_reaction_state=[],
    )
    db.add(post)
    commit_session(db)
    db.refresh(post)
    return post

def update_post_content(db: Session, post_id: str, content: Optional[str]) -> Post:
    """Update post content"""
    _require_text(content, "Content")
    logger.info(f"Updating post with ID: {post_id}")
    with post_locks.hold(post_id):
        post = get_post_for_update(db, post_id)
        post.content = content
        commit_session(db)
    db.refresh(post)
    return post

def delete_post(db: Session, post_id: str) -> List[str]:
    """
    Delete post; embedded comments and reactions go with the row.
    Returns the media references the post held.
    """
    logger.info(f"Deleting post with ID: {post_id}")
    with post_locks.hold(post_id):
        post = get_post_for_update(db, post_id)
        media = list(post.media or [])
        db.delete(post)
        commit_session(db)
    return media

def signal_post(db: Session, post_id: str, user_id: Optional[str]) -> Post:
    """Flag a post for moderation; the flag is never cleared"""
    _require_text(user_id, "User ID")
    with post_locks.hold(post_id):
        post = get_post_for_update(db, post_id)
        signaled_by = list(post.signaled_by or [])
        if user_id not in signaled_by:
            signaled_by.append(user_id)
        post.signaled_by = signaled_by
        post.signaled = True
        commit_session(db)
    db.refresh(post)
    logger.info(f"Post {post_id} signaled by user {user_id}")
    return post

def store_post_image(storage: MediaStorage, data: bytes, filename: str, max_size: int) -> str:
    """Validate an uploaded image and hand it to media storage"""
    extension = ("." + filename.rsplit(".", 1)[-1].lower()) if filename and "." in filename else ""
    if extension not in ALLOWED_IMAGE_EXTENSIONS:
        raise ValidationError(f"Unsupported file format. Please use one of: {', '.join(ALLOWED_IMAGE_EXTENSIONS)}")
    if len(data) > max_size:
        raise ValidationError(f"File too large. Maximum size is {max_size} bytes")
    signature = detect_image_type(data)
    if signature is None:
        raise ValidationError("File content is not a recognised image")
    return storage.upload(data, filename, content_type=signature.mime_type)

def get_post_image(db: Session, storage: MediaStorage, post_id: str) -> Tuple[bytes, str, str]:
    """Return (bytes, content type, filename) of the post's first media item"""
    post = get_existing_post(db, post_id)
    if not post.media:
        raise NotFound("Image not found")
    data = storage.read(post.media[0])
    content_type = detect_content_type(data)
    signature = detect_image_type(data)
    filename = f"{post.id}{signature.extension if signature else ''}"
    return data, content_type, filename

def delete_post_media(storage: MediaStorage, references: List[str]) -> None:
    """Best-effort cleanup after a post is gone"""
    for reference in references:
        if not storage.delete(reference):
            logger.warning(f"Could not delete media {reference}")
