"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Everything with state is built here from one Settings object
and stored on app.state:

    settings        the Settings instance
    engine          async SQLAlchemy engine
    session_factory per-request sessions (see db.engine.get_db)
    token_issuer    TokenIssuer(secret, lifetime)
    token_verifier  TokenVerifier(secret)

Pass a Settings instance to get an isolated app (tests do); omit it to
load from TASKFLOW_* env vars. A missing TASKFLOW_JWT_SECRET fails here,
at startup.

Run with:  uvicorn taskflow.main:create_app --factory --port 3001
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskflow import __version__
from taskflow.api import api_router
from taskflow.auth.jwt import TokenIssuer, TokenVerifier
from taskflow.config import Settings, get_settings
from taskflow.db.engine import build_engine, build_session_factory, create_tables
from taskflow.errors import register_exception_handlers
from taskflow.logging_config import configure_logging
from taskflow.middleware.error_handler import ErrorHandlerMiddleware
from taskflow.middleware.request_id import RequestIdMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(
        "taskflow.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        token_lifetime_hours=settings.token_expire_hours,
    )

    if settings.create_tables:
        await create_tables(app.state.engine)

    yield

    logger.info("taskflow.shutdown")
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="TaskFlow API",
        description="Task tracking with stateless bearer-token auth and per-user ownership",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings.database_url, echo=settings.debug)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.token_issuer = TokenIssuer(
        settings.jwt_secret,
        lifetime=settings.token_lifetime,
        algorithm=settings.jwt_algorithm,
    )
    app.state.token_verifier = TokenVerifier(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestId → ErrorHandler → handler
    app.add_middleware(ErrorHandlerMiddleware, debug=settings.debug)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    return app
