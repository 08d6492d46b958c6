"""Engine, session factory and the scoped-transaction primitive.

Every ledger write goes through ``transaction()``. Reads that are not part of
a validate-then-commit sequence open a plain session and never lock.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings
from src.br_common.errors import transient_failure

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models across modules."""

    pass


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_timeout=settings.DB_POOL_TIMEOUT_SECONDS,
    connect_args={
        "server_settings": {
            "statement_timeout": str(settings.DB_STATEMENT_TIMEOUT_MS),
            "lock_timeout": str(settings.DB_LOCK_TIMEOUT_MS),
        }
    },
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

_READ_COMMITTED_SQL = text("SET TRANSACTION ISOLATION LEVEL READ COMMITTED")

# query_canceled (statement_timeout), lock_not_available (lock_timeout),
# deadlock_detected, serialization_failure
_TRANSIENT_SQLSTATES = frozenset({"57014", "55P03", "40P01", "40001"})


def is_transient(exc: BaseException) -> bool:
    """True for pool exhaustion and lock/statement timeouts."""
    if isinstance(exc, PoolTimeoutError):
        return True
    if isinstance(exc, DBAPIError):
        orig = exc.orig
        sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        return sqlstate in _TRANSIENT_SQLSTATES
    return False


@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncIterator[AsyncSession]:
    """Run a unit of work in its own READ COMMITTED transaction.

    Usage::

        async with transaction(factory) as db:
            cash = await ledger.locked_available_cash(db, user_id, cash_id)
            await ledger.insert_order(db, new_order)

    A fresh session (and pooled connection) is opened per call, so units of
    work never nest implicitly. Commits on normal exit; on any exception the
    transaction is rolled back and the error re-raised, with driver timeouts
    translated to a TRANSIENT ``AppError``. The connection is returned to the
    pool on every exit path. No retry is attempted here.
    """
    factory = session_factory or async_session_factory
    async with factory() as session:
        try:
            await session.execute(_READ_COMMITTED_SQL)
            yield session
            await session.commit()
        except Exception as exc:
            await session.rollback()
            logger.warning("Transaction rolled back error=%s", type(exc).__name__)
            if is_transient(exc):
                raise transient_failure("database lock or statement timeout") from exc
            raise


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request."""
    async with async_session_factory() as session:
        yield session
