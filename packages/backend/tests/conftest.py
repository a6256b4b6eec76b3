"""Test fixtures — a fresh app and in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test builds its own app from an explicit Settings object
   (own signing secret, own engine), not env vars.
2. The engine points at sqlite+aiosqlite:///:memory: on a StaticPool,
   so all sessions share one connection and the data vanishes with it.
3. httpx.AsyncClient talks to the app in-process over ASGITransport.

bcrypt_rounds=4 keeps hashing fast; the code paths are the same.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from helpers import make_settings
from taskflow.db.engine import create_tables
from taskflow.main import create_app


@pytest.fixture()
def settings():
    return make_settings()


@pytest_asyncio.fixture()
async def app(settings):
    """App with its tables created (ASGITransport doesn't run lifespan)."""
    application = create_app(settings)
    await create_tables(application.state.engine)
    yield application
    await application.state.engine.dispose()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def db_session(app):
    async with app.state.session_factory() as session:
        yield session
