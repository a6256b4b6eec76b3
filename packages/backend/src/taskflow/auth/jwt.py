"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
One token per login, lifetime configurable (default 7 days). There is
no refresh token and no server-side token table: validity is recomputed
from the signature and the exp claim on every request.

The claim set is deliberately small:
    sub       identity id (users.id)
    username  for display, may be null
    email     normalized email
    iat / exp integer seconds since epoch

Secret, algorithm and lifetime are constructor arguments. Nothing in
this module reads global settings, so tests can run issuers and
verifiers with different secrets side by side.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

import jwt


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenError(Exception):
    """Raised when token verification fails."""


class InvalidTokenError(TokenError):
    """Bad structure, bad signature, wrong algorithm or missing claims."""


class TokenExpiredError(TokenError):
    """Signature checks out but the token is past its exp claim."""


@dataclass(frozen=True)
class ClaimSet:
    """Verified claims. Only TokenVerifier produces these."""

    identity_id: str
    username: Optional[str]
    email: str
    issued_at: datetime
    expires_at: datetime

    def to_payload(self) -> dict:
        return {
            "sub": self.identity_id,
            "username": self.username,
            "email": self.email,
            "iat": int(self.issued_at.timestamp()),
            "exp": int(self.expires_at.timestamp()),
        }


class TokenIssuer:
    """Signs claim sets for authenticated identities."""

    def __init__(
        self,
        secret: str,
        lifetime: timedelta,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utcnow,
    ):
        if not secret:
            raise ValueError("TokenIssuer requires a signing secret")
        self._secret = secret
        self.lifetime = lifetime
        self.algorithm = algorithm
        self._clock = clock

    def build_claims(self, identity: Any) -> ClaimSet:
        """Claim set for anything with id, username and email attributes."""
        issued_at = self._clock().replace(microsecond=0)
        return ClaimSet(
            identity_id=str(identity.id),
            username=identity.username,
            email=identity.email,
            issued_at=issued_at,
            expires_at=issued_at + self.lifetime,
        )

    def issue(self, identity: Any) -> str:
        """Create a signed access token for an identity."""
        claims = self.build_claims(identity)
        return jwt.encode(claims.to_payload(), self._secret, algorithm=self.algorithm)


class TokenVerifier:
    """Checks signature and expiry of bearer tokens.

    Learn: PyJWT's own exp check is turned off and done here against an
    injectable clock, so expiry boundaries can be tested exactly. The
    accepted algorithm list is pinned to one entry; a token claiming
    "none" or a different HMAC variant fails as InvalidTokenError.
    """

    _REQUIRED = ["sub", "email", "iat", "exp"]

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utcnow,
    ):
        if not secret:
            raise ValueError("TokenVerifier requires a signing secret")
        self._secret = secret
        self.algorithm = algorithm
        self._clock = clock

    def verify(self, token: str) -> ClaimSet:
        """Verify a token and return its claims.

        Raises InvalidTokenError or TokenExpiredError.
        """
        if not isinstance(token, str) or not token:
            raise InvalidTokenError("Token is empty")
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={
                    "require": self._REQUIRED,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}")

        exp, iat = payload["exp"], payload["iat"]
        if not isinstance(exp, int) or not isinstance(iat, int):
            raise InvalidTokenError("Invalid token: iat/exp must be integers")
        if not isinstance(payload["sub"], str) or not isinstance(payload["email"], str):
            raise InvalidTokenError("Invalid token: malformed identity claims")

        if self._clock().timestamp() > exp:
            raise TokenExpiredError("Token has expired")

        return ClaimSet(
            identity_id=payload["sub"],
            username=payload.get("username"),
            email=payload["email"],
            issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
