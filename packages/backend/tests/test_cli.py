"""CLI tests — click commands over a mocked API.

Learn: The CLI builds its client through _client(), so tests swap that
for a TaskflowClient on an httpx.MockTransport and never open a socket.
TASKFLOW_TOKEN_FILE points the token cache into tmp_path.
"""

from datetime import timedelta

import httpx
import pytest
from click.testing import CliRunner

from helpers import TEST_SECRET, fake_identity
from taskflow.auth.jwt import TokenIssuer
from taskflow.cli import main as cli
from taskflow.client import TaskflowClient, TokenCache
from taskflow.db.models import utcnow

TASK = {
    "id": 7,
    "owner_id": "00000000-0000-0000-0000-000000000001",
    "title": "Write report",
    "description": None,
    "status": "pending",
    "priority": "high",
    "due_date": None,
    "created_at": "2026-03-01T12:00:00",
    "updated_at": "2026-03-01T12:00:00",
}


@pytest.fixture
def token_file(tmp_path, monkeypatch):
    path = tmp_path / "token"
    monkeypatch.setenv("TASKFLOW_TOKEN_FILE", str(path))
    return path


@pytest.fixture
def runner():
    return CliRunner()


def _mock_api(monkeypatch, handler):
    def factory():
        return TaskflowClient(
            "http://t", cache=TokenCache(), transport=httpx.MockTransport(handler)
        )

    monkeypatch.setattr(cli, "_client", factory)


def _issue(email="cli@x.com", username="cli", issued=None):
    clock = (lambda: issued) if issued else utcnow
    return TokenIssuer(TEST_SECRET, timedelta(hours=1), clock=clock).issue(
        fake_identity(email=email, username=username)
    )


# ═══════════════════════════════════════════════════════════
# Auth commands
# ═══════════════════════════════════════════════════════════


def test_login_caches_token(runner, token_file, monkeypatch):
    token = _issue()

    def handler(request: httpx.Request):
        assert request.url.path == "/api/auth/login"
        return httpx.Response(
            200,
            json={
                "message": "Login successful.",
                "token": token,
                "user": {"id": "x", "email": "cli@x.com", "username": "cli"},
            },
        )

    _mock_api(monkeypatch, handler)
    result = runner.invoke(cli.main, ["login", "--email", "cli@x.com", "--password", "abc123"])
    assert result.exit_code == 0, result.output
    assert "Logged in as cli@x.com" in result.output
    assert token_file.read_text() == token


def test_login_failure_exits_1(runner, token_file, monkeypatch):
    def handler(request: httpx.Request):
        return httpx.Response(401, json={"error": "Invalid email or password."})

    _mock_api(monkeypatch, handler)
    result = runner.invoke(cli.main, ["login", "--email", "a@x.com", "--password", "nope"])
    assert result.exit_code == 1
    assert "Invalid email or password." in result.output
    assert not token_file.exists()


def test_whoami_reads_cached_token(runner, token_file):
    token_file.write_text(_issue())
    result = runner.invoke(cli.main, ["whoami"])
    assert result.exit_code == 0
    assert "cli@x.com (cli)" in result.output
    assert "[unverified]" in result.output


def test_whoami_marks_expired(runner, token_file):
    token_file.write_text(_issue(issued=utcnow() - timedelta(days=2)))
    result = runner.invoke(cli.main, ["whoami"])
    assert "(expired)" in result.output


def test_whoami_not_logged_in(runner, token_file):
    result = runner.invoke(cli.main, ["whoami"])
    assert result.exit_code == 1
    assert "Not logged in." in result.output


def test_logout_clears_token(runner, token_file):
    token_file.write_text(_issue())
    result = runner.invoke(cli.main, ["logout"])
    assert result.exit_code == 0
    assert not token_file.exists()


# ═══════════════════════════════════════════════════════════
# Task commands
# ═══════════════════════════════════════════════════════════


def test_tasks_list_table(runner, token_file, monkeypatch):
    token_file.write_text(_issue())
    seen = {}

    def handler(request: httpx.Request):
        seen["auth"] = request.headers.get("Authorization")
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"tasks": [TASK], "count": 1})

    _mock_api(monkeypatch, handler)
    result = runner.invoke(cli.main, ["tasks", "list", "--status", "pending"])
    assert result.exit_code == 0, result.output
    assert "Write report" in result.output
    assert seen["auth"].startswith("Bearer ")
    assert seen["params"] == {"status": "pending"}


def test_tasks_list_json(runner, token_file, monkeypatch):
    _mock_api(monkeypatch, lambda request: httpx.Response(200, json={"tasks": [TASK], "count": 1}))
    result = runner.invoke(cli.main, ["tasks", "list", "--json"])
    assert result.exit_code == 0
    assert '"title": "Write report"' in result.output


def test_tasks_show_not_found(runner, token_file, monkeypatch):
    _mock_api(monkeypatch, lambda request: httpx.Response(404, json={"error": "Task not found."}))
    result = runner.invoke(cli.main, ["tasks", "show", "99"])
    assert result.exit_code == 1
    assert "Error (404): Task not found." in result.output


def test_expired_session_asks_for_login(runner, token_file, monkeypatch):
    token_file.write_text(_issue())
    _mock_api(monkeypatch, lambda request: httpx.Response(401, json={"error": "Token expired."}))
    result = runner.invoke(cli.main, ["tasks", "list"])
    assert result.exit_code == 1
    assert "taskflow login" in result.output
    assert not token_file.exists()


def test_update_without_changes(runner, token_file):
    result = runner.invoke(cli.main, ["tasks", "update", "7"])
    assert result.exit_code == 1
    assert "Nothing to update." in result.output
