"""Shared test helpers (plain functions, not fixtures)."""

import uuid
from types import SimpleNamespace

from taskflow.config import Settings

TEST_SECRET = "test-signing-secret-0123456789abcdef"


def make_settings(**overrides) -> Settings:
    values = {
        "jwt_secret": TEST_SECRET,
        "database_url": "sqlite+aiosqlite:///:memory:",
        "bcrypt_rounds": 4,
        "create_tables": False,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}@example.com"


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def fake_identity(email: str = "ghost@example.com", username=None) -> SimpleNamespace:
    """Anything with id/username/email can be issued a token."""
    return SimpleNamespace(id=uuid.uuid4(), email=email, username=username)


async def register(client, email=None, password="abc123", username=None) -> dict:
    """Register through the API and return the response body."""
    body = {"email": email or unique_email(), "password": password}
    if username:
        body["username"] = username
    r = await client.post("/api/auth/register", json=body)
    assert r.status_code == 201, r.text
    return r.json()
