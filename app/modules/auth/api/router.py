"""Login by username and password"""
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.modules.auth.schemas.auth import LoginRequest, LoginResponse
from app.modules.auth.services.auth import authenticate

router = APIRouter()

@router.post("/login", response_model=LoginResponse)
def login(
    *,
    db: Session = Depends(get_db),
    credentials: LoginRequest,
) -> Any:
    """Check a username/password pair and return the user's identity"""
    user = authenticate(db, credentials.username, credentials.password)
    return {"user_id": user.id, "username": user.username}
