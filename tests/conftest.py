"""Shared test fixtures for x402 Exchange."""

import os
import pytest
from httpx import ASGITransport, AsyncClient


SECRET_KEY = "test-secret-key-for-unit-tests"
USER_EMAIL = "alice@example.com"
USER_PASSWORD = "correct-horse"


@pytest.fixture
def settings():
    os.environ["X402X_DB_URL"] = "sqlite+aiosqlite://"
    os.environ["X402X_SECRET_KEY"] = SECRET_KEY

    from x402_exchange.common.config import get_settings
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def app(settings):
    """Create a test app with in-memory DB."""
    # Clear singletons so new env vars take effect
    from x402_exchange.deps import reset_singletons
    reset_singletons()

    from x402_exchange.app import create_app
    return create_app()


@pytest.fixture
async def client(app):
    # Manually init DB since ASGITransport doesn't run lifespan
    from x402_exchange.deps import get_db
    db = get_db()
    await db.init()
    await db.create_all()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await db.close()


@pytest.fixture
async def db(settings):
    """Standalone database for service-level tests."""
    from x402_exchange.common.database import DatabaseManager
    manager = DatabaseManager(settings)
    await manager.init()
    await manager.create_all()
    yield manager
    await manager.close()


@pytest.fixture
async def session(db):
    async with db.get_session() as s:
        yield s


@pytest.fixture
async def user_id(session):
    from x402_exchange.accounts.service import AccountService
    profile = await AccountService().create_account(session, USER_EMAIL, USER_PASSWORD)
    return profile.id


@pytest.fixture
async def auth_headers(client):
    """Sign up the default user through the API and return bearer headers."""
    resp = await client.post("/auth/signup", json={
        "email": USER_EMAIL, "password": USER_PASSWORD,
    })
    assert resp.status_code == 201
    resp = await client.post("/auth/token", json={
        "email": USER_EMAIL, "password": USER_PASSWORD,
    })
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}
