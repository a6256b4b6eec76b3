"""UNVERIFIED token preview — for display only.

Learn: peek_claims() reads the claim set out of a token WITHOUT checking
its signature. Anyone can forge a token that peeks as anybody. It exists
so a CLI or UI can show "logged in as alice" before its first round trip.

It returns UnverifiedClaims, a different type from the server's
ClaimSet, and lives in the client package, so it can't be dropped into
the server's auth path by accident. Authorization decisions come only
from taskflow.auth.jwt.TokenVerifier on the server.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import jwt


@dataclass(frozen=True)
class UnverifiedClaims:
    """Claims as the token says they are. Not proof of anything."""

    identity_id: str
    email: str
    username: Optional[str]
    expires_at: Optional[datetime]

    @property
    def expired(self) -> bool:
        return self.expires_at is not None and self.expires_at < datetime.now(timezone.utc)


def peek_claims(token: Optional[str]) -> Optional[UnverifiedClaims]:
    """Decode a token's payload without verification; None if unreadable."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None

    sub, email = payload.get("sub"), payload.get("email")
    if not isinstance(sub, str) or not isinstance(email, str):
        return None

    exp = payload.get("exp")
    expires_at = (
        datetime.fromtimestamp(exp, tz=timezone.utc) if isinstance(exp, int) else None
    )
    return UnverifiedClaims(
        identity_id=sub,
        email=email,
        username=payload.get("username"),
        expires_at=expires_at,
    )
