from sqlalchemy import JSON, Boolean, Column, DateTime, String, Text
from sqlalchemy.sql import func

from app.db.session import Base

# Fixed key set of the post reaction tally
REACTION_KINDS = ("heart", "sad", "like", "laugh")

def empty_reactions() -> dict:
    return {kind: 0 for kind in REACTION_KINDS}

class Post(Base):
    """
    A post and everything embedded in it, stored as one row.

    comments: [{id, body, author_id, author_name, reactions: {user_id: emoji}, created_at, updated_at}]
    last_reaction_state: [{user_id, emoji, count}], one entry per user with an active reaction
    """
    __tablename__ = "posts"

    id = Column(String, primary_key=True, index=True)
    creator_id = Column(String, index=True, nullable=True)
    content = Column(Text, nullable=False)
    media = Column(JSON, nullable=False, default=list)
    reactions = Column(JSON, nullable=False, default=empty_reactions)
    comments = Column(JSON, nullable=False, default=list)
    signaled = Column(Boolean, nullable=False, default=False)
    signaled_by = Column(JSON, nullable=False, default=list)
    last_reaction_state = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
