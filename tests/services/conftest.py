"""Service test fixtures — in-memory platform, SQLite-backed platform, FastAPI test client.

Invariants:
    - Every test gets fresh stores and a fresh SessionManager
    - The SQL fixtures use an in-memory SQLite database (aiosqlite)
    - The client sets app.state.platform directly; the lifespan never runs
    - db_manager patched so the readiness probe sees the test database
"""

import pytest
from httpx import ASGITransport, AsyncClient

import subsflow.infrastructure.database as db_module
from subsflow.infrastructure.database import DatabaseSessionManager
from subsflow.main import app
from subsflow.services.platform import build_memory_platform, build_sql_platform


@pytest.fixture
async def platform(fast_settings):
    """In-memory platform with the demo accounts and plans."""
    p = build_memory_platform(fast_settings)
    await p.seed()
    return p


@pytest.fixture
async def test_db():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest.fixture
async def sql_platform(test_db, fast_settings):
    p = build_sql_platform(test_db, fast_settings)
    await p.seed()
    return p


@pytest.fixture
async def client(sql_platform, test_db):
    """FastAPI test client bound to the SQLite-backed platform."""
    original_manager = db_module.db_manager
    db_module.db_manager = test_db
    app.state.platform = sql_platform

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.state.platform = None
    db_module.db_manager = original_manager


async def _sign_in(client: AsyncClient, email: str, password: str) -> dict:
    res = await client.post(
        "/api/v1/auth/sign-in", json={"email": email, "password": password},
    )
    assert res.status_code == 200, res.text
    return res.json()


@pytest.fixture
async def admin_client(client):
    await _sign_in(client, "admin@example.com", "admin123")
    return client


@pytest.fixture
async def user_client(client):
    await _sign_in(client, "user@example.com", "user123")
    return client
