"""
Reaction ledger for posts and comments.

Post reactions keep a stored tally per kind plus one last_reaction_state
entry per user with an active reaction; every write keeps

    reactions[kind] == number of state entries whose emoji is kind

Comment reactions store only the per-user emoji and are counted on read.
"""
from collections import Counter
from typing import Dict, List, Optional
import copy
import logging

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidReactionKind, NotFound, ValidationError
from app.core.locks import post_locks
from app.db.session import commit_session
from app.modules.posts.models.post import Post, REACTION_KINDS
from app.modules.posts.comments.services.comment import find_comment_index
from app.modules.posts.services.post import get_existing_post, get_post_for_update

logger = logging.getLogger("app")

def parse_reaction_kind(reaction: str) -> str:
    if reaction not in REACTION_KINDS:
        raise InvalidReactionKind(f"Invalid reaction emoji. Must be one of: {', '.join(REACTION_KINDS)}")
    return reaction

def reaction_counts(post: Post) -> Dict[str, int]:
    """The four-kind tally, unset kinds read as 0"""
    stored = post.reactions or {}
    return {kind: max(int(stored.get(kind) or 0), 0) for kind in REACTION_KINDS}

def _reaction_states(post: Post) -> List[dict]:
    return [dict(state) for state in post.last_reaction_state or []]

def apply_reaction(post: Post, user_id: str, kind: str) -> Dict[str, int]:
    """Give user_id the reaction kind on post, replacing any other reaction they hold"""
    counts = reaction_counts(post)
    states = _reaction_states(post)
    index = next((i for i, state in enumerate(states) if state["user_id"] == user_id), None)

    if index is not None:
        previous = states[index]["emoji"]
        if previous == kind:
            return counts
        if previous in counts:
            counts[previous] = max(counts[previous] - 1, 0)

    counts[kind] += 1
    state = {"user_id": user_id, "emoji": kind, "count": counts[kind]}
    if index is not None:
        states[index] = state
    else:
        states.append(state)

    post.reactions = counts
    post.last_reaction_state = states
    return dict(counts)

def remove_reaction(post: Post, kind: str, user_id: Optional[str] = None) -> Dict[str, int]:
    """
    Take one reaction of kind off the post.

    With user_id only that user's reaction is removed, and only if it is of
    this kind. Without it the most recent reaction of this kind goes.
    """
    counts = reaction_counts(post)
    states = _reaction_states(post)

    if user_id is not None:
        index = next(
            (i for i, state in enumerate(states) if state["user_id"] == user_id and state["emoji"] == kind),
            None,
        )
    else:
        index = next((i for i in reversed(range(len(states))) if states[i]["emoji"] == kind), None)

    if index is not None:
        del states[index]
        counts[kind] = max(counts[kind] - 1, 0)
    elif user_id is None and counts[kind] > 0:
        # tally without state entries, left by older writers
        counts[kind] -= 1
    else:
        return counts

    post.reactions = counts
    post.last_reaction_state = states
    return dict(counts)

def set_reaction(db: Session, post_id: str, user_id: Optional[str], reaction: str) -> Dict[str, int]:
    """Set or switch a user's reaction on a post"""
    kind = parse_reaction_kind(reaction)
    if not user_id:
        raise ValidationError("User ID is required")
    with post_locks.hold(post_id):
        post = get_post_for_update(db, post_id)
        counts = apply_reaction(post, user_id, kind)
        commit_session(db)
    logger.info(f"User {user_id} reacted '{kind}' on post {post_id}")
    return counts

def decrement_reaction(db: Session, post_id: str, reaction: str, user_id: Optional[str] = None) -> Dict[str, int]:
    """Remove one reaction of a kind from a post, never going below zero"""
    kind = parse_reaction_kind(reaction)
    if user_id is not None and not user_id.strip():
        raise ValidationError("User ID is required")
    with post_locks.hold(post_id):
        post = get_post_for_update(db, post_id)
        counts = remove_reaction(post, kind, user_id)
        commit_session(db)
    logger.info(f"Decremented '{kind}' on post {post_id}")
    return counts

def get_reaction_counts(db: Session, post_id: str) -> Dict[str, int]:
    return reaction_counts(get_existing_post(db, post_id))

def set_comment_reaction(db: Session, post_id: str, comment_id: str, user_id: Optional[str], emoji: Optional[str]) -> dict:
    """Insert or overwrite a user's emoji on a comment; returns the comment"""
    if not user_id:
        raise ValidationError("User ID is required")
    if not emoji:
        raise ValidationError("Emoji is required")
    with post_locks.hold(post_id):
        post = get_post_for_update(db, post_id)
        comments = copy.deepcopy(post.comments or [])
        index = find_comment_index(comments, comment_id)
        if index is None:
            raise NotFound("Comment not found")
        comment = comments[index]
        reactions = dict(comment.get("reactions") or {})
        reactions[user_id] = emoji
        comment["reactions"] = reactions
        post.comments = comments
        commit_session(db)
    logger.info(f"User {user_id} reacted '{emoji}' on comment {comment_id} of post {post_id}")
    return comment

def count_comment_reactions(comment: dict) -> Dict[str, int]:
    return dict(Counter((comment.get("reactions") or {}).values()))

def get_comment_reaction_counts(db: Session, post_id: str) -> List[dict]:
    """Emoji tallies per comment, computed from current per-user reactions"""
    post = get_existing_post(db, post_id)
    return [
        {"comment_id": comment["id"], "reaction_counts": count_comment_reactions(comment)}
        for comment in post.comments or []
    ]
