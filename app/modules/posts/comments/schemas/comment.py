from typing import Dict, Optional
from pydantic import BaseModel, Field

class CommentCreate(BaseModel):
    user_id: str
    username: str
    comment: str

class CommentUpdate(BaseModel):
    comment: str

class Comment(BaseModel):
    """Embedded comment returned to client"""
    id: str
    body: str
    author_id: str
    author_name: str
    reactions: Dict[str, str] = Field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    is_edited: bool = False
