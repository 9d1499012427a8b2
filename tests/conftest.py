# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

from types import SimpleNamespace
from uuid import uuid4

import pytest

from ledger_admin import create_app
from ledger_admin.database.memory_store import MemoryDocumentStore
from ledger_admin.database.models.user import User

PASSWORD = "secret-pass"


@pytest.fixture
def store():
    """A fresh in-memory document store per test."""
    store = MemoryDocumentStore()
    store.initialize()
    return store


@pytest.fixture
def app(store):
    """Create a test Flask application bound to the in-memory store."""
    return create_app(
        {
            "TESTING": True,
            "APP_ENV": "testing",
            "JWT_SECRET_KEY": "test-secret-key-with-enough-length-for-hs256",
        },
        store=store,
    )


@pytest.fixture
def client(app):
    """Create a test client for the Flask application."""
    return app.test_client()


@pytest.fixture
def make_user(store):
    """Factory persisting a user with the given role and scope."""
    def _make(role="viewer", email=None, **extra):
        data = {
            "email": email or f"{role}-{uuid4().hex[:8]}@example.com",
            "password": PASSWORD,
            "first_name": "Test",
            "last_name": role.title(),
            "role": role,
        }
        data.update(extra)
        return User.create(store, data)
    return _make


@pytest.fixture
def login(client):
    """Sign a user in and return the Authorization header."""
    def _login(user, password=PASSWORD):
        response = client.post("/users/login", json={"email": user.email, "password": password})
        assert response.status_code == 200, response.get_json()
        token = response.get_json()["data"]["results"]["access_token"]
        return {"Authorization": f"Bearer {token}"}
    return _login


@pytest.fixture
def principal():
    """Lightweight principal for unit tests that do not need a stored user."""
    def _principal(role="worker", centers=(), services=(), permissions=None, id="principal-1"):
        return SimpleNamespace(
            id=id,
            role=role,
            assigned_centers=list(centers),
            assigned_services=list(services),
            permissions=permissions or {},
        )
    return _principal


def results(response):
    """Unwrap the success envelope."""
    return response.get_json()["data"]["results"]
