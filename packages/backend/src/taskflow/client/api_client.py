"""Async HTTP client for the TaskFlow API.

Learn: BearerAuth is an httpx.Auth, so the token handling lives in one
place instead of every call site:
    request  → add "Authorization: Bearer <cached token>" if there is one
    response → 401 means the token is dead; drop it from the cache

TaskflowClient turns a 401 on a protected call into
ReauthenticationRequired, so callers know to log in again rather
than retry. Nothing here renews tokens silently.
"""

from typing import Any, Optional

import httpx

from taskflow.client.preview import UnverifiedClaims, peek_claims
from taskflow.client.token_cache import TokenCache


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors or []


class ReauthenticationRequired(ApiError):
    """The server rejected the cached token. Log in again."""


class BearerAuth(httpx.Auth):
    """Attach the cached token; forget it on 401."""

    def __init__(self, cache: TokenCache):
        self.cache = cache

    def auth_flow(self, request: httpx.Request):
        token = self.cache.load()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        response = yield request
        if response.status_code == 401:
            self.cache.clear()


class TaskflowClient:
    """Thin async wrapper over the REST API.

    Usage:
        async with TaskflowClient("http://localhost:3001") as api:
            await api.login("a@x.com", "abc123")
            tasks = await api.list_tasks()
    """

    def __init__(
        self,
        base_url: str,
        cache: Optional[TokenCache] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cache = cache or TokenCache()
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            auth=BearerAuth(self.cache),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "TaskflowClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self, method: str, path: str, *, protected: bool = True, **kwargs: Any
    ) -> dict:
        response = await self._http.request(method, path, **kwargs)
        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("error") or response.reason_phrase
        if response.status_code == 401 and protected:
            raise ReauthenticationRequired(401, message)
        raise ApiError(response.status_code, message, body.get("errors"))

    # ─── Auth ────────────────────────────────────────────

    async def register(self, email: str, password: str, username: Optional[str] = None) -> dict:
        body = {"email": email, "password": password}
        if username:
            body["username"] = username
        data = await self._request("POST", "/api/auth/register", json=body, protected=False)
        self.cache.save(data["token"])
        return data["user"]

    async def login(self, email: str, password: str) -> dict:
        data = await self._request(
            "POST",
            "/api/auth/login",
            json={"email": email, "password": password},
            protected=False,
        )
        self.cache.save(data["token"])
        return data["user"]

    def logout(self) -> None:
        self.cache.clear()

    def cached_identity(self) -> Optional[UnverifiedClaims]:
        """Who the cached token claims to be. Display only, not verified."""
        return peek_claims(self.cache.load())

    async def me(self) -> dict:
        return (await self._request("GET", "/api/auth/me"))["user"]

    # ─── Tasks ───────────────────────────────────────────

    async def list_tasks(
        self, status: Optional[str] = None, priority: Optional[str] = None
    ) -> list[dict]:
        params = {k: v for k, v in {"status": status, "priority": priority}.items() if v}
        return (await self._request("GET", "/api/tasks", params=params))["tasks"]

    async def create_task(self, title: str, **fields: Any) -> dict:
        body = {"title": title, **fields}
        return (await self._request("POST", "/api/tasks", json=body))["task"]

    async def get_task(self, task_id: int) -> dict:
        return (await self._request("GET", f"/api/tasks/{task_id}"))["task"]

    async def update_task(self, task_id: int, **changes: Any) -> dict:
        return (await self._request("PATCH", f"/api/tasks/{task_id}", json=changes))["task"]

    async def delete_task(self, task_id: int) -> None:
        await self._request("DELETE", f"/api/tasks/{task_id}")
