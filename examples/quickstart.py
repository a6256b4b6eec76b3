#!/usr/bin/env python3
"""
TaskFlow Quickstart — two users, one task, every auth outcome.

Registers alice and bob → alice creates a task → bob tries to read it
(404) → alice reads it (200) → no token (401) → forged token (401).
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:3001
"""

import httpx

from _common import BASE, check_backend, client_for, new_account


def main():
    check_backend()

    # ── Accounts ──────────────────────────────────────────────────
    print("\n1. Registering alice and bob...")
    alice = new_account("alice")
    bob = new_account("bob")
    print(f"   alice: {alice['user']['id'][:8]}...")
    print(f"   bob:   {bob['user']['id'][:8]}...")

    # Login returns a fresh token for the same identity
    resp = httpx.post(
        f"{BASE}/auth/login",
        json={"email": bob["email"], "password": bob["password"]},
        timeout=10,
    )
    assert resp.status_code == 200, f"Failed: {resp.text}"
    bob["token"] = resp.json()["token"]

    as_alice = client_for(alice["token"])
    as_bob = client_for(bob["token"])

    # ── Create ────────────────────────────────────────────────────
    print("\n2. alice creates a task...")
    resp = as_alice.post("/tasks", json={"title": "Ship v1", "priority": "high"})
    assert resp.status_code == 201, f"Failed: {resp.text}"
    task = resp.json()["task"]
    print(f"   Task #{task['id']}: {task['title']} (owner {task['owner_id'][:8]}...)")

    # ── Ownership ─────────────────────────────────────────────────
    print("\n3. bob asks for alice's task...")
    resp = as_bob.get(f"/tasks/{task['id']}")
    print(f"   {resp.status_code} {resp.json()}")

    resp = as_bob.get("/tasks/999999")
    print(f"   (a task that doesn't exist: {resp.status_code} {resp.json()})")

    print("\n4. alice asks for it...")
    resp = as_alice.get(f"/tasks/{task['id']}")
    print(f"   {resp.status_code} {resp.json()['task']['title']}")

    # ── Rejected tokens ───────────────────────────────────────────
    print("\n5. Requests without a valid token...")
    resp = httpx.get(f"{BASE}/tasks", timeout=10)
    print(f"   no header: {resp.status_code} {resp.json()}")

    header, payload, signature = alice["token"].split(".")
    forged = f"{header}.{payload}.{signature[:-4]}AAAA"
    resp = client_for(forged).get("/tasks")
    print(f"   forged:    {resp.status_code} {resp.json()}")

    # ── Profile ───────────────────────────────────────────────────
    resp = as_alice.get("/auth/me")
    me = resp.json()["user"]
    print(f"\n6. alice has {me['task_count']} task(s). Done.")


if __name__ == "__main__":
    main()
