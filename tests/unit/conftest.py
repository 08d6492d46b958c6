"""Unit-test fixtures: a mock session factory usable with ``transaction()``."""

from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def db() -> MagicMock:
    """Mock AsyncSession: execute/commit/rollback are awaitable."""
    session = MagicMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def session_factory(db: MagicMock) -> MagicMock:
    """Callable returning an async context manager that yields ``db``."""
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=db)
    cm.__aexit__ = AsyncMock(return_value=False)
    factory = MagicMock(return_value=cm)
    return factory
