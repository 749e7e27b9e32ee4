import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")

import mongomock
import pytest
from fastapi.testclient import TestClient

from postboard.database import get_db
from postboard.main import app
from postboard.stores.posts import PostStore


@pytest.fixture()
def mongo_db():
    return mongomock.MongoClient()["postboard_test"]


@pytest.fixture()
def post_store(mongo_db):
    return PostStore(mongo_db.posts)


@pytest.fixture()
def client(mongo_db):
    app.dependency_overrides[get_db] = lambda: mongo_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_user(client):
    """Register a user and return ``(user_id, auth_headers)``."""

    def _make_user(name: str):
        resp = client.post(
            "/auth/register",
            json={
                "name": name,
                "email": f"{name.lower()}@example.com",
                "password": "s3cret-pass",
            },
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()
        return data["user"]["id"], {"Authorization": f"Bearer {data['access_token']}"}

    return _make_user


@pytest.fixture()
def alice(make_user):
    return make_user("Alice")


@pytest.fixture()
def bob(make_user):
    return make_user("Bob")


@pytest.fixture()
def carol(make_user):
    return make_user("Carol")
