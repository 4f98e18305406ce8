"""
Shared fixtures: an app wired to an in-memory store and a fixed secret.
"""

import pytest
from fastapi.testclient import TestClient

from emporium.api.app import create_app
from emporium.auth.passwords import PasswordHasher
from emporium.auth.tokens import TokenService
from emporium.config import Settings
from emporium.storage import InMemoryDocumentStore

TEST_SECRET = "test-secret-key"
PASSWORD = "password123"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        jwt_secret_key=TEST_SECRET,
        password_hash_iterations=1_000,
        storage_backend="memory",
        seed_on_startup=False,
        sentry_dsn="",
    )


@pytest.fixture
def hasher():
    return PasswordHasher(iterations=1_000)


@pytest.fixture
def token_service():
    return TokenService(TEST_SECRET)


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def client(settings):
    """Test client; the lifespan builds a fresh in-memory store."""
    with TestClient(create_app(settings)) as c:
        yield c


# =============================================================================
# Helpers
# =============================================================================


def signup(client, username, role="Client", password=PASSWORD, **overrides):
    """Create an account and return the user JSON."""
    payload = {
        "username": username,
        "fullname": f"{username.title()} Example",
        "email": f"{username}@example.com",
        "password": password,
        "role": role,
        "isActive": True,
        **overrides,
    }
    response = client.post("/api/v1/auth/signup", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["user"]


def login(client, username, password=PASSWORD):
    response = client.post("/api/v1/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(client):
    user = signup(client, "alice", role="Admin")
    return {"user": user, "headers": auth(login(client, "alice"))}


@pytest.fixture
def owner(client):
    user = signup(client, "oscar", role="Owner")
    return {"user": user, "headers": auth(login(client, "oscar"))}


@pytest.fixture
def other_owner(client):
    user = signup(client, "olga", role="Owner")
    return {"user": user, "headers": auth(login(client, "olga"))}


@pytest.fixture
def customer(client):
    user = signup(client, "carol", role="Client")
    return {"user": user, "headers": auth(login(client, "carol"))}
