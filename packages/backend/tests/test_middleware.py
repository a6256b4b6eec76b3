"""Tests for middleware, error rendering and logging.

Learn: Unknown routes, unhandled exceptions and auth events all go
through the same small JSON error shape, and none of them leak a
password or token into the logs.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from structlog.testing import capture_logs

from helpers import make_settings, register, unique_email
from taskflow.main import create_app


@pytest.fixture()
def settings():
    # INFO so auth events reach capture_logs
    return make_settings(log_level="INFO")


async def _client_for(app):
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


# ═══════════════════════════════════════════════════════════
# Request IDs
# ═══════════════════════════════════════════════════════════


async def test_request_id_generated(client):
    """Each request gets a unique X-Request-ID header."""
    r1 = await client.get("/api/health")
    r2 = await client.get("/api/health")
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


async def test_request_id_propagated(client):
    """Incoming X-Request-ID is propagated through the response."""
    r = await client.get("/api/health", headers={"X-Request-ID": "trace-12345"})
    assert r.headers["X-Request-ID"] == "trace-12345"


async def test_health(client):
    r = await client.get("/api/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "healthy"
    assert data["database"] == "ok"
    assert "version" in data


# ═══════════════════════════════════════════════════════════
# Error shapes
# ═══════════════════════════════════════════════════════════


async def test_unknown_route_is_json_404(client):
    r = await client.get("/api/nope")
    assert r.status_code == 404
    assert r.json() == {"error": "Route not found: GET /api/nope"}


async def test_malformed_json_is_400(client):
    r = await client.post(
        "/api/auth/login",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Validation failed."


@pytest.mark.parametrize("debug", [False, True])
async def test_unhandled_exception_is_500(debug):
    app = create_app(make_settings(debug=debug))

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    async with await _client_for(app) as ac:
        r = await ac.get("/boom")
    await app.state.engine.dispose()

    assert r.status_code == 500
    data = r.json()
    assert data["error"] == "Internal server error."
    if debug:
        assert data["detail"] == "kaboom"
        assert data["traceback"]
    else:
        assert set(data) == {"error"}


# ═══════════════════════════════════════════════════════════
# Logging
# ═══════════════════════════════════════════════════════════


async def test_auth_events_logged_without_secrets(client):
    email = unique_email("logs")
    with capture_logs() as logs:
        await register(client, email=email, password="s3cretpw")
        await client.post("/api/auth/login", json={"email": email, "password": "wrong99"})
        await client.get("/api/auth/me", headers={"Authorization": "Bearer junk"})

    events = [entry["event"] for entry in logs]
    assert "auth.registered" in events
    assert "auth.login_failed" in events
    assert "auth.token_rejected" in events
    assert "request.completed" in events

    rejected = next(e for e in logs if e["event"] == "auth.token_rejected")
    assert rejected["reason"] == "invalid_signature"

    flat = repr(logs)
    assert "s3cretpw" not in flat
    assert "wrong99" not in flat
    assert "junk" not in flat


async def test_missing_header_reason_logged(client):
    with capture_logs() as logs:
        await client.get("/api/tasks")
    rejected = next(e for e in logs if e["event"] == "auth.token_rejected")
    assert rejected["reason"] == "no_header"
