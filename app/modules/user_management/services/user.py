from typing import Optional
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateUsername, NotFound, ValidationError
from app.core.security import get_password_hash
from app.db.session import commit_session
from app.modules.user_management.models.user import User

logger = logging.getLogger("app")

def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get user by ID"""
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Get user by username"""
    return db.query(User).filter(User.username == username).first()

def get_username(db: Session, user_id: str) -> str:
    user = get_user(db, user_id)
    if not user:
        raise NotFound("User not found")
    return user.username

def create_user(db: Session, username: str, password: str) -> User:
    """Register a user; the password is only ever stored hashed"""
    if not username or not username.strip():
        raise ValidationError("Username is required")
    if not password:
        raise ValidationError("Password is required")
    if get_user_by_username(db, username):
        raise DuplicateUsername()

    user = User(
        id=str(uuid.uuid4()),
        username=username,
        hashed_password=get_password_hash(password),
    )
    db.add(user)
    try:
        db.flush()
    except IntegrityError as e:
        # lost a race with another registration for the same name
        db.rollback()
        raise DuplicateUsername() from e
    commit_session(db)
    db.refresh(user)
    logger.info(f"Registered user {user.id} ({username})")
    return user
