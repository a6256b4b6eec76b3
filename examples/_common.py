"""
Shared helpers for TaskFlow examples.

Handles the health check and account setup so each example can focus
on its specific flow.
"""

import sys
import uuid

import httpx

BASE = "http://localhost:3001/api"


def check_backend() -> None:
    """Verify the backend is reachable and healthy."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print(
            "Start it with:  TASKFLOW_JWT_SECRET=dev-secret "
            "uvicorn taskflow.main:create_app --factory --port 3001"
        )
        sys.exit(1)

    health = resp.json()
    print("Backend health:")
    print(f"  Database: {'✓' if health['database'] == 'ok' else '✗'}")

    if health["status"] != "healthy":
        print("\nERROR: Database is not connected.")
        sys.exit(1)


def new_account(label: str, password: str = "demo-password-123") -> dict:
    """Register a fresh user and return {"email", "password", "token", "user"}.

    Uses a unique email per run so examples are idempotent.
    """
    email = f"{label}-{uuid.uuid4().hex[:8]}@example.com"
    resp = httpx.post(
        f"{BASE}/auth/register",
        json={"email": email, "password": password},
        timeout=10,
    )
    if resp.status_code != 201:
        print(f"ERROR: Registration failed: {resp.status_code} {resp.text}")
        sys.exit(1)

    data = resp.json()
    return {"email": email, "password": password, "token": data["token"], "user": data["user"]}


def client_for(token: str) -> httpx.Client:
    """An httpx Client that sends the given bearer token."""
    return httpx.Client(
        base_url=BASE,
        timeout=10,
        headers={"Authorization": f"Bearer {token}"},
    )
