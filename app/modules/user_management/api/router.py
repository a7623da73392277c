from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.modules.user_management.schemas.user import User as UserSchema, UserCreate, UsernameRequest, UsernameResponse
from app.modules.user_management.services.user import create_user, get_username

router = APIRouter()

@router.post("", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def register_user(
    *,
    db: Session = Depends(get_db),
    user_in: UserCreate,
) -> Any:
    """
    Create a new user account.
    """
    return create_user(db, user_in.username, user_in.password)

@router.post("/username", response_model=UsernameResponse)
def read_username(
    *,
    db: Session = Depends(get_db),
    lookup: UsernameRequest,
) -> Any:
    """
    Resolve a user ID to its username.
    """
    return {"username": get_username(db, lookup.user_id)}
