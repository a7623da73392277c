from typing import Dict, List, Optional
from pydantic import BaseModel

class ReactionCounts(BaseModel):
    """Count of reactions by kind"""
    heart: int = 0
    sad: int = 0
    like: int = 0
    laugh: int = 0

class LastReactionState(BaseModel):
    user_id: str
    emoji: str
    count: int

class ReactionUpdate(BaseModel):
    user_id: str

class ReactionDecrement(BaseModel):
    user_id: Optional[str] = None

class CommentReactionCreate(BaseModel):
    emoji: str
    user_id: str

class CommentReactionCount(BaseModel):
    comment_id: str
    reaction_counts: Dict[str, int]

class CommentReactionCounts(BaseModel):
    post_id: str
    comment_reactions: List[CommentReactionCount]
