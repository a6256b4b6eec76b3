"""Client side of TaskFlow auth: token cache, bearer auth, API client.

Nothing in this package is authoritative. The server verifies every
token on every request; the client only stores, attaches and forgets.
"""

from taskflow.client.api_client import (
    ApiError,
    BearerAuth,
    ReauthenticationRequired,
    TaskflowClient,
)
from taskflow.client.preview import UnverifiedClaims, peek_claims
from taskflow.client.token_cache import TokenCache

__all__ = [
    "ApiError",
    "BearerAuth",
    "ReauthenticationRequired",
    "TaskflowClient",
    "TokenCache",
    "UnverifiedClaims",
    "peek_claims",
]
