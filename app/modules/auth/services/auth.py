import logging

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidCredentials
from app.core.security import get_password_hash, password_needs_rehash, verify_password
from app.db.session import commit_session
from app.modules.user_management.models.user import User
from app.modules.user_management.services.user import get_user_by_username

logger = logging.getLogger("app")

# Unknown usernames still pay for one Argon2 verification
_UNKNOWN_USER_HASH = get_password_hash("unknown-user-placeholder")

def authenticate(db: Session, username: str, password: str) -> User:
    """Return the user for a matching username/password or raise InvalidCredentials"""
    user = get_user_by_username(db, username) if username else None
    if not user:
        verify_password(password or "", _UNKNOWN_USER_HASH)
        logger.warning(f"Failed login attempt for username: {username}")
        raise InvalidCredentials()
    if not verify_password(password or "", user.hashed_password):
        logger.warning(f"Failed login attempt for username: {username}")
        raise InvalidCredentials()

    if password_needs_rehash(user.hashed_password):
        user.hashed_password = get_password_hash(password)
        commit_session(db)
        logger.info(f"Rehashed password for user {user.id}")

    return user
