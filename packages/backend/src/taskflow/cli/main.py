"""TaskFlow CLI — log in once, then manage your tasks.

Usage:
    taskflow register --email a@x.com              # prompts for password
    taskflow login --email a@x.com
    taskflow whoami                                # who the cached token says you are
    taskflow tasks list --status pending
    taskflow tasks add "Write report" --priority high
    taskflow tasks show 42
    taskflow tasks update 42 --status completed
    taskflow tasks rm 42
    taskflow logout

The token is cached in ~/.config/taskflow/token (or TASKFLOW_TOKEN_FILE).
When the server answers 401 the cache is cleared and you're asked to
log in again.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click

from taskflow.client import (
    ApiError,
    ReauthenticationRequired,
    TaskflowClient,
    TokenCache,
    peek_claims,
)

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:3001"


def _api_url() -> str:
    return os.environ.get("TASKFLOW_API_URL", DEFAULT_API_URL).rstrip("/")


def _client() -> TaskflowClient:
    """Build an API client pointed at the TaskFlow backend."""
    return TaskflowClient(_api_url(), cache=TokenCache())


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _call(coro):
    """Run an API coroutine and turn API errors into CLI exits."""
    try:
        return _run(coro)
    except ReauthenticationRequired as e:
        click.secho(f"{e.message} Please run `taskflow login` again.", fg="red", err=True)
        sys.exit(1)
    except ApiError as e:
        click.secho(f"Error ({e.status_code}): {e.message}", fg="red", err=True)
        for msg in e.errors:
            click.secho(f"  - {msg}", fg="red", err=True)
        sys.exit(1)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k) or "-")[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


def _status_color(status: str) -> str:
    """Map status strings to click colors."""
    colors = {
        "pending": "white",
        "in_progress": "yellow",
        "completed": "green",
    }
    return colors.get(status, "white")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="taskflow")
def main():
    """TaskFlow — track your tasks from the terminal."""


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


@main.command()
@click.option("--email", prompt=True)
@click.option("--username", default=None, help="Optional display name")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
def register(email: str, username: Optional[str], password: str):
    """Create an account and log in."""

    async def _impl():
        async with _client() as api:
            return await api.register(email, password, username=username)

    user = _call(_impl())
    click.secho(f"Registered and logged in as {user['email']}", fg="green")


@main.command()
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str):
    """Log in and cache the token."""

    async def _impl():
        async with _client() as api:
            return await api.login(email, password)

    user = _call(_impl())
    click.secho(f"Logged in as {user['email']}", fg="green")


@main.command()
def logout():
    """Forget the cached token."""
    TokenCache().clear()
    click.echo("Logged out.")


@main.command()
@click.option("--verify", is_flag=True, help="Ask the server instead of reading the token")
def whoami(verify: bool):
    """Show the logged-in user.

    Without --verify this only decodes the cached token locally; the
    signature is NOT checked.
    """
    if verify:

        async def _impl():
            async with _client() as api:
                return await api.me()

        user = _call(_impl())
        click.echo(f"{user['email']} ({user.get('username') or 'no username'}), "
                   f"{user['task_count']} task(s)")
        return

    preview = peek_claims(TokenCache().load())
    if preview is None:
        click.echo("Not logged in.")
        sys.exit(1)
    suffix = " (expired)" if preview.expired else ""
    click.echo(f"{preview.email} ({preview.username or 'no username'}){suffix} [unverified]")


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


@main.group()
def tasks():
    """List and edit your tasks."""


@tasks.command("list")
@click.option("--status", type=click.Choice(["pending", "in_progress", "completed"]))
@click.option("--priority", type=click.Choice(["low", "medium", "high"]))
@click.option("--json", "as_json", is_flag=True, help="Output raw JSON")
def list_tasks(status: Optional[str], priority: Optional[str], as_json: bool):
    """List your tasks."""

    async def _impl():
        async with _client() as api:
            return await api.list_tasks(status=status, priority=priority)

    rows = _call(_impl())
    if as_json:
        click.echo(_pretty_json(rows))
        return
    if not rows:
        click.echo("No tasks.")
        return
    _print_table(rows, [
        ("ID", "id", 6),
        ("STATUS", "status", 12),
        ("PRIORITY", "priority", 8),
        ("TITLE", "title", 50),
    ])


@tasks.command("add")
@click.argument("title")
@click.option("--description", "-d", default=None)
@click.option("--priority", type=click.Choice(["low", "medium", "high"]), default="medium")
@click.option("--due", "due_date", default=None, help="ISO date, e.g. 2026-01-31")
def add_task(title: str, description: Optional[str], priority: str, due_date: Optional[str]):
    """Create a task."""

    async def _impl():
        async with _client() as api:
            return await api.create_task(
                title, description=description, priority=priority, due_date=due_date
            )

    task = _call(_impl())
    click.secho(f"Task #{task['id']} created", fg="green")


@tasks.command("show")
@click.argument("task_id", type=int)
def show_task(task_id: int):
    """Show one task."""

    async def _impl():
        async with _client() as api:
            return await api.get_task(task_id)

    task = _call(_impl())
    click.secho(f"#{task['id']} {task['title']}", bold=True)
    click.echo(f"  Status:   {click.style(task['status'], fg=_status_color(task['status']))}")
    click.echo(f"  Priority: {task['priority']}")
    if task.get("due_date"):
        click.echo(f"  Due:      {task['due_date']}")
    if task.get("description"):
        click.echo(f"\n{task['description']}")


@tasks.command("update")
@click.argument("task_id", type=int)
@click.option("--title", default=None)
@click.option("--description", "-d", default=None)
@click.option("--status", type=click.Choice(["pending", "in_progress", "completed"]))
@click.option("--priority", type=click.Choice(["low", "medium", "high"]))
def update_task(task_id: int, title, description, status, priority):
    """Change fields of a task."""
    changes = {
        k: v
        for k, v in {
            "title": title,
            "description": description,
            "status": status,
            "priority": priority,
        }.items()
        if v is not None
    }
    if not changes:
        click.secho("Nothing to update.", fg="yellow", err=True)
        sys.exit(1)

    async def _impl():
        async with _client() as api:
            return await api.update_task(task_id, **changes)

    task = _call(_impl())
    click.secho(f"Task #{task['id']} updated", fg="green")


@tasks.command("rm")
@click.argument("task_id", type=int)
def delete_task(task_id: int):
    """Delete a task."""

    async def _impl():
        async with _client() as api:
            await api.delete_task(task_id)

    _call(_impl())
    click.echo(f"Task #{task_id} deleted")


if __name__ == "__main__":
    main()
