from typing import Any, List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.modules.posts.schemas.post import Message
from app.modules.posts.comments.schemas.comment import Comment as CommentSchema, CommentCreate, CommentUpdate
from app.modules.posts.comments.services.comment import get_comments, add_comment, edit_comment, delete_comment

router = APIRouter()

@router.get("", response_model=List[CommentSchema])
def read_comments_by_post_id(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post to get comments for"),
) -> Any:
    """Get comments of a post with their author names"""
    return get_comments(db, post_id)

@router.post("", response_model=CommentSchema, status_code=status.HTTP_201_CREATED)
def create_new_comment(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post to comment on"),
    comment_in: CommentCreate,
) -> Any:
    """Create new comment on a post"""
    return add_comment(db, post_id, comment_in.user_id, comment_in.username, comment_in.comment)

@router.put("/{comment_id}", response_model=CommentSchema)
def update_comment_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post"),
    comment_id: str,
    comment_in: CommentUpdate,
) -> Any:
    """Update a comment"""
    return edit_comment(db, post_id, comment_id, comment_in.comment)

@router.delete("/{comment_id}", response_model=Message)
def delete_comment_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post"),
    comment_id: str,
) -> Any:
    """Delete a comment"""
    delete_comment(db, post_id, comment_id)
    return {"message": "Comment deleted"}
