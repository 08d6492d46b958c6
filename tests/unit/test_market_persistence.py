"""Unit tests for ReferenceRepository and its helpers."""

from datetime import date
from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from src.br_market.infrastructure.persistence import (
    ReferenceRepository,
    daily_change,
    escape_like,
)


def _make_snapshot_row(instrument_id: int, close: str, prev: str) -> MagicMock:
    row = MagicMock()
    row.instrument_id = instrument_id
    row.date = date(2026, 10, 16)
    row.close = Decimal(close)
    row.previous_close = Decimal(prev)
    return row


def _make_quote_row(**kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.id = kwargs.get("id", 6)
    row.ticker = kwargs.get("ticker", "GGAL")
    row.name = kwargs.get("name", "Grupo Financiero Galicia")
    row.kind = "STOCK"
    row.last_price = kwargs.get("last_price", Decimal("3250.00"))
    row.previous_close = kwargs.get("previous_close", Decimal("3180.00"))
    return row


class TestHelpers:
    def test_escape_like(self) -> None:
        assert escape_like("100%_a\\b") == "100\\%\\_a\\\\b"

    def test_escape_like_plain(self) -> None:
        assert escape_like("GGAL") == "GGAL"

    def test_daily_change(self) -> None:
        assert daily_change(Decimal("110"), Decimal("100")) == Decimal("10.00")

    def test_daily_change_rounds_half_up(self) -> None:
        # (3250 - 3180) / 3180 * 100 = 2.2012...
        assert daily_change(Decimal("3250.00"), Decimal("3180.00")) == Decimal("2.20")

    def test_daily_change_missing_or_zero_base(self) -> None:
        assert daily_change(None, Decimal("1")) is None
        assert daily_change(Decimal("1"), None) is None
        assert daily_change(Decimal("1"), Decimal("0")) is None


class TestReferenceRepository:
    async def test_find_user(self, db: MagicMock) -> None:
        row = MagicMock(id=1, email="a@test.com", account_number="10001")
        result = MagicMock()
        result.fetchone.return_value = row
        db.execute = AsyncMock(return_value=result)

        user = await ReferenceRepository().find_user(db, 1)

        assert user is not None
        assert user.account_number == "10001"

    async def test_find_user_missing(self, db: MagicMock) -> None:
        result = MagicMock()
        result.fetchone.return_value = None
        db.execute = AsyncMock(return_value=result)

        assert await ReferenceRepository().find_user(db, 1) is None

    async def test_find_instruments_by_ids_empty_skips_query(self, db: MagicMock) -> None:
        assert await ReferenceRepository().find_instruments_by_ids(db, []) == []
        db.execute.assert_not_awaited()

    async def test_latest_snapshots_keyed_by_instrument(self, db: MagicMock) -> None:
        result = MagicMock()
        result.fetchall.return_value = [
            _make_snapshot_row(1, "258.00", "248.00"),
            _make_snapshot_row(6, "3250.00", "3180.00"),
        ]
        db.execute = AsyncMock(return_value=result)

        snapshots = await ReferenceRepository().latest_snapshots(db, [1, 6])

        assert set(snapshots) == {1, 6}
        assert snapshots[6].close == Decimal("3250.00")

    async def test_latest_snapshots_empty_skips_query(self, db: MagicMock) -> None:
        assert await ReferenceRepository().latest_snapshots(db, []) == {}
        db.execute.assert_not_awaited()

    async def test_search_stocks_escapes_and_uppercases(self, db: MagicMock) -> None:
        result = MagicMock()
        result.fetchall.return_value = [_make_quote_row()]
        db.execute = AsyncMock(return_value=result)

        quotes = await ReferenceRepository().search_stocks(db, "gal_", 50)

        params = db.execute.call_args.args[1]
        assert params["pattern"] == "%GAL\\_%"
        assert params["kind"] == "STOCK"
        assert params["limit"] == 50
        assert quotes[0].daily_change == Decimal("2.20")

    async def test_search_stocks_unpriced_instrument(self, db: MagicMock) -> None:
        result = MagicMock()
        result.fetchall.return_value = [_make_quote_row(last_price=None, previous_close=None)]
        db.execute = AsyncMock(return_value=result)

        quotes = await ReferenceRepository().search_stocks(db, "GGAL", 50)

        assert quotes[0].last_price is None
        assert quotes[0].daily_change is None
