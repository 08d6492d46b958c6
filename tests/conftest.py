"""Shared test fixtures."""

import os

# Unit tests never talk to Redis; must be set before config.settings is imported
for _limit in (
    "GLOBAL_RATE_LIMIT_PER_MINUTE",
    "ORDER_RATE_LIMIT_PER_MINUTE",
    "SEARCH_RATE_LIMIT_PER_MINUTE",
):
    os.environ.setdefault(_limit, "0")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import app  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
