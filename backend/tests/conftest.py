"""
Shared fixtures: an in-memory SQLite database rebuilt for every test, a TestClient
and helpers for signing users in.
"""

import base64
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before app.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["ENCRYPTION_KEY"] = base64.b64encode(b"k" * 32).decode("ascii")
os.environ["OPENAI_API_KEY"] = ""
os.environ["GITHUB_TOKEN"] = ""
os.environ["GITHUB_OWNER"] = ""
os.environ["GITHUB_REPO"] = ""

from fastapi.testclient import TestClient

from app.core.security import get_password_hash
from app.db.database import SessionLocal, engine
from app.db import models
from app.main import app, seed_roles
from app.services.resources import seed_user_defaults

PASSWORD = "Secret#123"


@pytest.fixture(autouse=True)
def database():
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_roles(db)
    finally:
        db.close()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def _sign_in(client: TestClient, email: str, password: str = PASSWORD) -> dict:
    # Drop the session cookie so each request authenticates explicitly
    response = client.post("/api/auth/sign-in", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def create_user(db, email: str, name: str = "Jane Doe", role_id: int = models.USER_ROLE_ID) -> models.User:
    user = models.User(
        name=name,
        email=email,
        password_hash=get_password_hash(PASSWORD),
        role_id=role_id,
    )
    db.add(user)
    db.flush()
    seed_user_defaults(db, user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db):
    return create_user(db, "jane@example.com")


@pytest.fixture
def admin(db):
    return create_user(db, "admin@example.com", name="Site Admin", role_id=models.ADMIN_ROLE_ID)


@pytest.fixture
def user_headers(client, user):
    return _sign_in(client, user.email)


@pytest.fixture
def admin_headers(client, admin):
    return _sign_in(client, admin.email)


@pytest.fixture
def sign_in(client):
    """Returns a callable ``sign_in(email, password=PASSWORD) -> headers``."""
    def _do(email: str, password: str = PASSWORD) -> dict:
        return _sign_in(client, email, password)
    return _do


@pytest.fixture
def password():
    return PASSWORD
