from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Path
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.modules.posts.comments.schemas.comment import Comment as CommentSchema
from app.modules.posts.reactions.schemas.reaction import (
    CommentReactionCounts, CommentReactionCreate, ReactionCounts, ReactionDecrement, ReactionUpdate
)
from app.modules.posts.reactions.services.reaction import (
    get_reaction_counts, set_reaction, decrement_reaction,
    set_comment_reaction, get_comment_reaction_counts
)

router = APIRouter()

# Mounted at the API root: /{post_id}/comment/... and /{post_id}/comments/...
comment_reactions_router = APIRouter()

@router.get("", response_model=ReactionCounts)
def read_reaction_counts_by_post_id(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post to get reaction counts for"),
) -> Any:
    """Get reaction counts by kind for a post"""
    return get_reaction_counts(db, post_id)

@router.put("/{reaction}", response_model=ReactionCounts)
def set_post_reaction(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post to react to"),
    reaction: str = Path(..., description="heart, sad, like or laugh"),
    reaction_in: ReactionUpdate,
) -> Any:
    """Set or switch the user's reaction to a post"""
    return set_reaction(db, post_id, reaction_in.user_id, reaction)

@router.put("/{reaction}/decrement", response_model=ReactionCounts)
def decrement_post_reaction(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post"),
    reaction: str = Path(..., description="heart, sad, like or laugh"),
    reaction_in: Optional[ReactionDecrement] = Body(None),
) -> Any:
    """Remove one reaction of a kind from a post"""
    user_id = reaction_in.user_id if reaction_in else None
    return decrement_reaction(db, post_id, reaction, user_id=user_id)

@comment_reactions_router.post("/{post_id}/comment/{comment_id}/react", response_model=CommentSchema)
def react_to_comment(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    comment_id: str,
    reaction_in: CommentReactionCreate,
) -> Any:
    """Set the user's emoji on a comment"""
    return set_comment_reaction(db, post_id, comment_id, reaction_in.user_id, reaction_in.emoji)

@comment_reactions_router.get("/{post_id}/comments/react-count", response_model=CommentReactionCounts)
def read_comment_reaction_counts(
    *,
    db: Session = Depends(get_db),
    post_id: str,
) -> Any:
    """Emoji counts for every comment of a post"""
    return {"post_id": post_id, "comment_reactions": get_comment_reaction_counts(db, post_id)}
