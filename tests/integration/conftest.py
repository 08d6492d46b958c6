"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool (created at import time) remains valid across
the entire test session. Tests are skipped when PostgreSQL is unreachable.

Requires migrations applied: ``alembic upgrade head``.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.br_common.database import engine
from src.main import app


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1 FROM orders LIMIT 1"))
    except Exception as exc:  # noqa: BLE001
        pytest.skip(f"PostgreSQL with migrated schema not reachable: {exc}")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session")
async def new_user_id(client: AsyncClient) -> int:
    """Insert a fresh user so each test starts from an empty ledger."""
    uid = uuid.uuid4().hex[:10]
    async with engine.begin() as conn:
        row = (
            await conn.execute(
                text(
                    "INSERT INTO users (email, account_number) "
                    "VALUES (:email, :acct) RETURNING id"
                ),
                {"email": f"it_{uid}@example.com", "acct": uid},
            )
        ).fetchone()
    return int(row.id)
