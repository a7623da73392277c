from datetime import datetime, timezone
from typing import List, Optional
import copy
import logging
import uuid

from sqlalchemy.orm import Session

from app.core.exceptions import NotFound, ValidationError
from app.core.locks import post_locks
from app.db.session import commit_session
from app.modules.posts.services.post import get_existing_post, get_post_for_update

logger = logging.getLogger("app")

def _now() -> str:
    return datetime.now(timezone.utc).isoformat()

def find_comment_index(comments: List[dict], comment_id: str) -> Optional[int]:
    """Position of comment_id within a post's comments, or None"""
    return next((i for i, comment in enumerate(comments) if comment.get("id") == comment_id), None)

def get_comments(db: Session, post_id: str) -> List[dict]:
    """Get the comments of a post in the order they were added"""
    return list(get_existing_post(db, post_id).comments or [])

def add_comment(db: Session, post_id: str, author_id: str, author_name: str, body: str) -> dict:
    """Append a comment to a post and return it"""
    if not body or not body.strip():
        raise ValidationError("Comment is required")
    if not author_id:
        raise ValidationError("User ID is required")

    created_at = _now()
    comment = {
        "id": str(uuid.uuid4()),
        "body": body,
        "author_id": author_id,
        "author_name": author_name or "",
        "reactions": {},
        "created_at": created_at,
        "updated_at": created_at,
        "is_edited": False,
    }
    with post_locks.hold(post_id):
        post = get_post_for_update(db, post_id)
        post.comments = copy.deepcopy(post.comments or []) + [comment]
        commit_session(db)
    logger.info(f"Added comment {comment['id']} to post {post_id}")
    return comment

def edit_comment(db: Session, post_id: str, comment_id: str, body: str) -> dict:
    """Replace a comment's body"""
    if not body or not body.strip():
        raise ValidationError("Comment is required")
    with post_locks.hold(post_id):
        post = get_post_for_update(db, post_id)
        comments = copy.deepcopy(post.comments or [])
        index = find_comment_index(comments, comment_id)
        if index is None:
            raise NotFound("Comment not found")
        comments[index]["body"] = body
        comments[index]["updated_at"] = _now()
        comments[index]["is_edited"] = True
        post.comments = comments
        commit_session(db)
    return comments[index]

def delete_comment(db: Session, post_id: str, comment_id: str) -> dict:
    """Remove a comment together with its reactions"""
    with post_locks.hold(post_id):
        post = get_post_for_update(db, post_id)
        comments = copy.deepcopy(post.comments or [])
        index = find_comment_index(comments, comment_id)
        if index is None:
            raise NotFound("Comment not found")
        removed = comments.pop(index)
        post.comments = comments
        commit_session(db)
    logger.info(f"Deleted comment {comment_id} from post {post_id}")
    return removed
