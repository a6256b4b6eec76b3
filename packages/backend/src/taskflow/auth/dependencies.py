"""FastAPI auth dependencies.

Learn: get_current_user is used as Depends() on every protected router.
It runs a small per-request state machine:

    NoHeader / MalformedHeader → 401 "Access denied."
    InvalidSignature           → 401 "Access denied."
    Expired                    → 401 "Token expired."
    Valid                      → CurrentIdentity for the handler

The first three share one body on purpose: a prober learns nothing
about why a token was refused. "Expired" is allowed to differ because it
says nothing about whether an account exists, and clients use it to
prompt a fresh login. The precise reason is still logged server-side.

Verification touches no database and keeps no state between requests.
"""

import enum
import uuid
from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from taskflow.auth.jwt import (
    ClaimSet,
    InvalidTokenError,
    TokenExpiredError,
    TokenVerifier,
)
from taskflow.errors import AuthenticationError

logger = structlog.get_logger()

ACCESS_DENIED = "Access denied."
TOKEN_EXPIRED = "Token expired."


class VerificationOutcome(enum.Enum):
    NO_HEADER = "no_header"
    MALFORMED_HEADER = "malformed_header"
    INVALID_SIGNATURE = "invalid_signature"
    EXPIRED = "expired"
    VALID = "valid"


class CurrentIdentity:
    """Represents the authenticated user making the request.

    Learn: Built only from verified claims. Downstream code uses user_id
    to scope every task query and ownership check.
    """

    def __init__(self, user_id: str, email: str, username: Optional[str] = None):
        self.user_id = user_id
        self.email = email
        self.username = username

    @classmethod
    def from_claims(cls, claims: ClaimSet) -> "CurrentIdentity":
        return cls(
            user_id=claims.identity_id,
            email=claims.email,
            username=claims.username,
        )


def extract_bearer_token(authorization: Optional[str]) -> tuple[VerificationOutcome, Optional[str]]:
    """Pull the token out of an Authorization header value."""
    if not authorization:
        return VerificationOutcome.NO_HEADER, None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return VerificationOutcome.MALFORMED_HEADER, None
    return VerificationOutcome.VALID, parts[1]


def evaluate(
    authorization: Optional[str], verifier: TokenVerifier
) -> tuple[VerificationOutcome, Optional[ClaimSet]]:
    """Run the full header → token → claims state machine. Pure."""
    outcome, token = extract_bearer_token(authorization)
    if outcome is not VerificationOutcome.VALID:
        return outcome, None
    try:
        return VerificationOutcome.VALID, verifier.verify(token)
    except TokenExpiredError:
        return VerificationOutcome.EXPIRED, None
    except InvalidTokenError:
        return VerificationOutcome.INVALID_SIGNATURE, None


def get_token_verifier(request: Request) -> TokenVerifier:
    """The verifier built by create_app() from settings."""
    return request.app.state.token_verifier


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> CurrentIdentity:
    """Extract current identity (required — 401 if missing or invalid)."""
    outcome, claims = evaluate(authorization, verifier)

    if outcome is VerificationOutcome.VALID:
        identity = CurrentIdentity.from_claims(claims)
        request.state.identity = identity
        structlog.contextvars.bind_contextvars(user_id=identity.user_id)
        return identity

    logger.info(
        "auth.token_rejected",
        reason=outcome.value,
        path=request.url.path,
    )
    if outcome is VerificationOutcome.EXPIRED:
        raise AuthenticationError(TOKEN_EXPIRED)
    raise AuthenticationError(ACCESS_DENIED)


async def get_current_user_id(
    identity: CurrentIdentity = Depends(get_current_user),
) -> uuid.UUID:
    """The caller's id as a UUID, for owner-scoped queries."""
    try:
        return uuid.UUID(identity.user_id)
    except ValueError:
        # Signed by us but not one of our ids
        raise AuthenticationError(ACCESS_DENIED)
