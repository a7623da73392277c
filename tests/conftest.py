"""Shared fixtures: in-memory SQLite database and a temporary media directory."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"
for _name in ("R2_ENDPOINT", "R2_ACCESS_KEY_ID", "R2_SECRET_ACCESS_KEY"):
    os.environ[_name] = ""

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.storage import LocalStorage
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.deps import get_storage
from app.main import app

API = settings.API_V1_STR

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture(autouse=True)
def tables():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(str(tmp_path / "uploads"))


@pytest.fixture
def client(storage: LocalStorage):
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def api() -> str:
    return API


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES
