from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

class UserCreate(BaseModel):
    username: str
    password: str

class User(BaseModel):
    """User model returned to client, never carries the password hash"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    created_at: Optional[datetime] = None

class UsernameRequest(BaseModel):
    user_id: str

class UsernameResponse(BaseModel):
    username: str
