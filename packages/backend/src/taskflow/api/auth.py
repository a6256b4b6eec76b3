"""Auth API — registration, login, current user.

Learn: Routes for user authentication:
- POST /auth/register → create an account, returns a token right away
- POST /auth/login    → email/password → token
- GET  /auth/me       → current user profile (requires a token)

Register and login answer with the same envelope:
    {"message": ..., "token": ..., "user": {"id", "email", "username"}}
Errors come back as {"error": ...} via the handlers in taskflow.errors.
"""

import structlog
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.auth.dependencies import ACCESS_DENIED, CurrentIdentity, get_current_user
from taskflow.auth.jwt import TokenIssuer
from taskflow.db.engine import get_db
from taskflow.errors import AuthenticationError
from taskflow.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    ProfileRead,
    RegisterRequest,
    UserPublic,
)
from taskflow.services.auth_service import AuthService

router = APIRouter(prefix="/auth")

logger = structlog.get_logger()


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def _auth_svc(
    request: Request,
    db: AsyncSession = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(db, issuer, request.app.state.settings)


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, svc: AuthService = Depends(_auth_svc)):
    """Create a new user account and return a token for it."""
    result = await svc.register(
        email=body.email,
        password=body.password,
        username=body.username,
    )
    return AuthResponse(
        message="Registration successful.",
        token=result.token,
        user=UserPublic.model_validate(result.user),
    )


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, svc: AuthService = Depends(_auth_svc)):
    """Login with email and password → token."""
    result = await svc.login(email=body.email, password=body.password)
    return AuthResponse(
        message="Login successful.",
        token=result.token,
        user=UserPublic.model_validate(result.user),
    )


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=MeResponse)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: AuthService = Depends(_auth_svc),
):
    """Get the current authenticated user's profile."""
    user = await svc.get_user(identity.user_id)
    if not user:
        # Token is genuine but the account behind it is gone
        logger.info("auth.token_rejected", reason="unknown_identity")
        raise AuthenticationError(ACCESS_DENIED)

    return MeResponse(
        user=ProfileRead(
            id=user.id,
            email=user.email,
            username=user.username,
            created_at=user.created_at,
            task_count=await svc.count_tasks(user.id),
        )
    )
