"""Unit tests for the scoped transaction primitive."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import DBAPIError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from src.br_common.database import is_transient, transaction
from src.br_common.errors import AppError, ErrorKind


class _DriverError(Exception):
    def __init__(self, sqlstate: str) -> None:
        super().__init__(sqlstate)
        self.sqlstate = sqlstate


def _db_error(sqlstate: str) -> DBAPIError:
    return DBAPIError("SELECT 1", {}, _DriverError(sqlstate))


class TestIsTransient:
    def test_pool_timeout(self) -> None:
        assert is_transient(PoolTimeoutError("pool exhausted")) is True

    @pytest.mark.parametrize("sqlstate", ["57014", "55P03", "40P01", "40001"])
    def test_timeout_sqlstates(self, sqlstate: str) -> None:
        assert is_transient(_db_error(sqlstate)) is True

    def test_unique_violation_is_not_transient(self) -> None:
        assert is_transient(_db_error("23505")) is False

    def test_plain_exception(self) -> None:
        assert is_transient(ValueError("x")) is False


class TestTransaction:
    async def test_commits_on_success(self, db: MagicMock, session_factory: MagicMock) -> None:
        async with transaction(session_factory) as session:
            assert session is db

        sql = str(db.execute.call_args_list[0].args[0])
        assert "READ COMMITTED" in sql
        db.commit.assert_awaited_once()
        db.rollback.assert_not_awaited()

    async def test_rolls_back_and_reraises(
        self, db: MagicMock, session_factory: MagicMock
    ) -> None:
        with pytest.raises(RuntimeError):
            async with transaction(session_factory):
                raise RuntimeError("boom")

        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    async def test_app_errors_propagate_unchanged(
        self, db: MagicMock, session_factory: MagicMock
    ) -> None:
        original = AppError(ErrorKind.NOT_FOUND, 1001, "User with ID 1 not found")
        with pytest.raises(AppError) as exc_info:
            async with transaction(session_factory):
                raise original
        assert exc_info.value is original
        db.rollback.assert_awaited_once()

    async def test_lock_timeout_becomes_transient(
        self, db: MagicMock, session_factory: MagicMock
    ) -> None:
        with pytest.raises(AppError) as exc_info:
            async with transaction(session_factory):
                raise _db_error("55P03")
        assert exc_info.value.kind == ErrorKind.TRANSIENT
        assert exc_info.value.http_status == 503
        db.rollback.assert_awaited_once()

    async def test_each_call_opens_a_fresh_session(self, session_factory: MagicMock) -> None:
        async with transaction(session_factory):
            pass
        async with transaction(session_factory):
            pass
        assert session_factory.call_count == 2
        assert session_factory.return_value.__aexit__.await_count == 2
