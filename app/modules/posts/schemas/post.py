from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from app.modules.posts.comments.schemas.comment import Comment
from app.modules.posts.reactions.schemas.reaction import LastReactionState, ReactionCounts

class PostUpdate(BaseModel):
    content: str

class SignalRequest(BaseModel):
    user_id: str

class Post(BaseModel):
    """Post model returned to client"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    creator_id: Optional[str] = None
    content: str
    media: List[str] = Field(default_factory=list)
    reactions: ReactionCounts
    comments: List[Comment] = Field(default_factory=list)
    signaled: bool = False
    signaled_by: List[str] = Field(default_factory=list)
    last_reaction_state: List[LastReactionState] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class Message(BaseModel):
    message: str
