"""Auth service — registration, login, and the current user's profile.

Learn: This is where the credential store, the password hasher and the
token issuer meet. Two rules matter more than anything else here:

1. Registration conflicts are decided by the database. The pre-check
   (SELECT by email OR username) gives a friendly 409 in the common
   case, but two concurrent registrations can both pass it. The UNIQUE
   constraints catch the loser at commit; its IntegrityError is turned
   into the very same 409.

2. Login failures are indistinguishable. Unknown email and wrong
   password raise the same AuthenticationError with the same message,
   and the unknown-email branch runs a dummy bcrypt check so the two
   take about as long.

bcrypt is CPU-bound, so it runs in Starlette's threadpool instead of
on the event loop.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from taskflow.auth.jwt import TokenIssuer
from taskflow.auth.password import (
    dummy_verify,
    hash_password,
    needs_upgrade,
    verify_password,
)
from taskflow.config import Settings
from taskflow.db.models import Task, User
from taskflow.errors import AuthenticationError, ConflictError, ValidationError
from taskflow.validators import (
    clean_username,
    normalize_email,
    validate_login,
    validate_registration,
)

logger = structlog.get_logger()

INVALID_CREDENTIALS = "Invalid email or password."


@dataclass
class AuthResult:
    """A freshly issued token and the user it was issued for."""
    token: str
    user: User


class AuthService:
    """Business logic for identities and token bootstrap."""

    def __init__(self, db: AsyncSession, issuer: TokenIssuer, settings: Settings):
        self.db = db
        self.issuer = issuer
        self.settings = settings

    # ─── Register ────────────────────────────────────────

    async def register(
        self,
        email: Optional[str],
        password: Optional[str],
        username: Optional[str] = None,
    ) -> AuthResult:
        """Create an identity and return a token for it.

        Raises ValidationError (400) or ConflictError (409).
        """
        errors = validate_registration(
            email,
            password,
            username,
            min_length=self.settings.password_min_length,
            require_strong=self.settings.require_strong_password,
        )
        if errors:
            raise ValidationError(errors=errors)

        email = normalize_email(email)
        username = clean_username(username)

        await self._precheck_unique(email, username)

        password_hash = await run_in_threadpool(
            hash_password, password, self.settings.bcrypt_rounds
        )
        user = User(email=email, username=username, password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            await self.db.rollback()
            conflict = await self._find_conflict(email, username)
            if conflict is None:
                conflict = ConflictError("User already exists.", field="email")
            logger.info("auth.register_conflict", field=conflict.field, stage="commit")
            raise conflict

        logger.info("auth.registered", user_id=str(user.id))
        return AuthResult(token=self.issuer.issue(user), user=user)

    async def _precheck_unique(self, email: str, username: Optional[str]) -> None:
        conflict = await self._find_conflict(email, username)
        if conflict is not None:
            logger.info("auth.register_conflict", field=conflict.field, stage="precheck")
            raise conflict

    async def _find_conflict(
        self, email: str, username: Optional[str]
    ) -> Optional[ConflictError]:
        """Which unique field collides. Email wins when both do."""
        condition = User.email == email
        if username is not None:
            condition = or_(condition, User.username == username)
        result = await self.db.execute(select(User.email, User.username).where(condition))
        rows = result.all()

        if any(row.email == email for row in rows):
            return ConflictError("Email already registered.", field="email")
        if username is not None and any(row.username == username for row in rows):
            return ConflictError("Username already taken.", field="username")
        return None

    # ─── Login ───────────────────────────────────────────

    async def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """Check credentials and return a token.

        Raises ValidationError (400) or AuthenticationError (401).
        """
        errors = validate_login(email, password)
        if errors:
            raise ValidationError(errors=errors)

        rounds = self.settings.bcrypt_rounds
        user = await self.get_by_email(normalize_email(email))

        if user is None:
            await run_in_threadpool(dummy_verify, password, rounds)
            logger.info("auth.login_failed", reason="unknown_email")
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not await run_in_threadpool(verify_password, password, user.password_hash):
            logger.info("auth.login_failed", reason="bad_password", user_id=str(user.id))
            raise AuthenticationError(INVALID_CREDENTIALS)

        # Auto-upgrade hashes made with a lower work factor
        if needs_upgrade(user.password_hash, rounds):
            user.password_hash = await run_in_threadpool(hash_password, password, rounds)
            await self.db.commit()
            logger.info("auth.hash_upgraded", user_id=str(user.id))

        return AuthResult(token=self.issuer.issue(user), user=user)

    # ─── Lookups ─────────────────────────────────────────

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def get_user(self, user_id: str) -> Optional[User]:
        try:
            uid = uuid.UUID(user_id)
        except (ValueError, TypeError):
            return None
        return await self.db.get(User, uid)

    async def count_tasks(self, user_id: uuid.UUID) -> int:
        result = await self.db.execute(
            select(func.count(Task.id)).where(Task.owner_id == user_id)
        )
        return result.scalar_one()
