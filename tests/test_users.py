"""Tests for user registration, login and password hashing."""

from unittest.mock import patch

import pytest
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateUsername, InvalidCredentials, NotFound, ValidationError
from app.core.security import get_password_hash, verify_password
from app.modules.auth.services import auth as auth_service
from app.modules.auth.services.auth import authenticate
from app.modules.user_management.services.user import create_user, get_username


class TestPasswordHashing:
    def test_hash_is_salted(self) -> None:
        first = get_password_hash("s3cret")
        second = get_password_hash("s3cret")
        assert first != "s3cret"
        assert first != second
        assert first.startswith("$argon2id$")

    def test_verify(self) -> None:
        hashed = get_password_hash("s3cret")
        assert verify_password("s3cret", hashed) is True
        assert verify_password("wrong", hashed) is False
        assert verify_password("s3cret", "not-a-hash") is False
        assert verify_password("s3cret", "") is False


class TestUserService:
    def test_register_stores_hash_only(self, db: Session) -> None:
        user = create_user(db, "alice", "s3cret")
        assert user.id
        assert user.hashed_password != "s3cret"
        assert verify_password("s3cret", user.hashed_password)

    def test_duplicate_username(self, db: Session) -> None:
        create_user(db, "alice", "s3cret")
        with pytest.raises(DuplicateUsername):
            create_user(db, "alice", "other")

    def test_blank_input(self, db: Session) -> None:
        with pytest.raises(ValidationError):
            create_user(db, "", "s3cret")
        with pytest.raises(ValidationError):
            create_user(db, "bob", "")

    def test_login(self, db: Session) -> None:
        user = create_user(db, "alice", "s3cret")
        assert authenticate(db, "alice", "s3cret").id == user.id

    @pytest.mark.parametrize("username,password", [("alice", "wrong"), ("nobody", "s3cret"), ("", "")])
    def test_login_failures(self, db: Session, username: str, password: str) -> None:
        create_user(db, "alice", "s3cret")
        with pytest.raises(InvalidCredentials):
            authenticate(db, username, password)

    def test_unknown_user_still_verifies_a_hash(self, db: Session) -> None:
        with patch.object(auth_service, "verify_password", wraps=verify_password) as verify:
            with pytest.raises(InvalidCredentials):
                authenticate(db, "nobody", "s3cret")
        verify.assert_called_once_with("s3cret", auth_service._UNKNOWN_USER_HASH)

    def test_username_lookup(self, db: Session) -> None:
        user = create_user(db, "alice", "s3cret")
        assert get_username(db, user.id) == "alice"
        with pytest.raises(NotFound):
            get_username(db, "missing")


class TestUserRoutes:
    def test_register_login_lookup(self, client, api: str) -> None:
        response = client.post(f"{api}/users", json={"username": "alice", "password": "s3cret"})
        assert response.status_code == 201
        user = response.json()
        assert user["username"] == "alice"
        assert "password" not in user
        assert "hashed_password" not in user

        response = client.post(f"{api}/login", json={"username": "alice", "password": "s3cret"})
        assert response.status_code == 200
        assert response.json() == {"message": "Login successful", "user_id": user["id"], "username": "alice"}

        response = client.post(f"{api}/users/username", json={"user_id": user["id"]})
        assert response.json() == {"username": "alice"}

    def test_duplicate_is_400(self, client, api: str) -> None:
        client.post(f"{api}/users", json={"username": "alice", "password": "s3cret"})
        response = client.post(f"{api}/users", json={"username": "alice", "password": "x"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Username already exists"

    def test_bad_login_is_401(self, client, api: str) -> None:
        client.post(f"{api}/users", json={"username": "alice", "password": "s3cret"})
        response = client.post(f"{api}/login", json={"username": "alice", "password": "nope"})
        assert response.status_code == 401

    def test_unknown_user_lookup_is_404(self, client, api: str) -> None:
        assert client.post(f"{api}/users/username", json={"user_id": "missing"}).status_code == 404
