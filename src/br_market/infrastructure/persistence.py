"""ReferenceRepository — read-only raw SQL over users, instruments and marketdata.

None of these queries lock. Price snapshots are read outside the order
transaction's locks on purpose: locking them would serialize every order.
"""

from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.br_common.enums import InstrumentKind
from src.br_common.money import percent_change, round_money, to_decimal
from src.br_market.domain.models import Instrument, InstrumentQuote, PriceSnapshot, User

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_USER_SQL = text("""
    SELECT id, email, account_number
    FROM users
    WHERE id = :user_id
""")

_GET_INSTRUMENT_SQL = text("""
    SELECT id, ticker, name, kind
    FROM instruments
    WHERE id = :instrument_id
""")

_GET_INSTRUMENTS_SQL = text("""
    SELECT id, ticker, name, kind
    FROM instruments
    WHERE id = ANY(:ids)
    ORDER BY ticker
""")

_LATEST_SNAPSHOT_SQL = text("""
    SELECT instrument_id, date, close, previous_close
    FROM marketdata
    WHERE instrument_id = :instrument_id
    ORDER BY date DESC
    LIMIT 1
""")

_LATEST_SNAPSHOTS_SQL = text("""
    SELECT DISTINCT ON (instrument_id)
           instrument_id, date, close, previous_close
    FROM marketdata
    WHERE instrument_id = ANY(:ids)
    ORDER BY instrument_id, date DESC
""")

_SEARCH_STOCKS_SQL = text("""
    SELECT i.id, i.ticker, i.name, i.kind,
           md.close AS last_price,
           md.previous_close
    FROM instruments i
    LEFT JOIN LATERAL (
        SELECT close, previous_close
        FROM marketdata
        WHERE instrument_id = i.id
        ORDER BY date DESC
        LIMIT 1
    ) md ON true
    WHERE i.kind = :kind
      AND (UPPER(i.ticker) LIKE :pattern ESCAPE '\\'
           OR UPPER(i.name) LIKE :pattern ESCAPE '\\')
    ORDER BY i.ticker
    LIMIT :limit
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_user(row: object) -> User:
    return User(
        id=row.id,  # type: ignore[attr-defined]
        email=row.email,  # type: ignore[attr-defined]
        account_number=row.account_number,  # type: ignore[attr-defined]
    )


def _row_to_instrument(row: object) -> Instrument:
    return Instrument(
        id=row.id,  # type: ignore[attr-defined]
        ticker=row.ticker,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        kind=row.kind,  # type: ignore[attr-defined]
    )


def _row_to_snapshot(row: object) -> PriceSnapshot:
    return PriceSnapshot(
        instrument_id=row.instrument_id,  # type: ignore[attr-defined]
        date=row.date,  # type: ignore[attr-defined]
        close=to_decimal(row.close),  # type: ignore[attr-defined]
        previous_close=to_decimal(row.previous_close),  # type: ignore[attr-defined]
    )


def escape_like(query: str) -> str:
    """Escape LIKE metacharacters so "100%" matches literally."""
    return query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def daily_change(last: Decimal | None, previous: Decimal | None) -> Decimal | None:
    if last is None or previous is None or previous <= 0:
        return None
    return round_money(percent_change(last, previous))


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ReferenceRepository:
    """Concrete repository — all operations are read-only SQL queries."""

    async def find_user(self, db: AsyncSession, user_id: int) -> User | None:
        row = (await db.execute(_GET_USER_SQL, {"user_id": user_id})).fetchone()
        return _row_to_user(row) if row else None

    async def find_instrument(
        self, db: AsyncSession, instrument_id: int
    ) -> Instrument | None:
        row = (
            await db.execute(_GET_INSTRUMENT_SQL, {"instrument_id": instrument_id})
        ).fetchone()
        return _row_to_instrument(row) if row else None

    async def find_instruments_by_ids(
        self, db: AsyncSession, instrument_ids: list[int]
    ) -> list[Instrument]:
        if not instrument_ids:
            return []
        rows = (await db.execute(_GET_INSTRUMENTS_SQL, {"ids": instrument_ids})).fetchall()
        return [_row_to_instrument(row) for row in rows]

    async def latest_snapshot(
        self, db: AsyncSession, instrument_id: int
    ) -> PriceSnapshot | None:
        row = (
            await db.execute(_LATEST_SNAPSHOT_SQL, {"instrument_id": instrument_id})
        ).fetchone()
        return _row_to_snapshot(row) if row else None

    async def latest_snapshots(
        self, db: AsyncSession, instrument_ids: list[int]
    ) -> dict[int, PriceSnapshot]:
        if not instrument_ids:
            return {}
        rows = (await db.execute(_LATEST_SNAPSHOTS_SQL, {"ids": instrument_ids})).fetchall()
        snapshots = [_row_to_snapshot(row) for row in rows]
        return {s.instrument_id: s for s in snapshots}

    async def search_stocks(
        self, db: AsyncSession, query: str, limit: int
    ) -> list[InstrumentQuote]:
        pattern = f"%{escape_like(query.upper())}%"
        rows = (
            await db.execute(
                _SEARCH_STOCKS_SQL,
                {"kind": InstrumentKind.STOCK.value, "pattern": pattern, "limit": limit},
            )
        ).fetchall()
        quotes: list[InstrumentQuote] = []
        for row in rows:
            last = to_decimal(row.last_price) if row.last_price is not None else None
            prev = to_decimal(row.previous_close) if row.previous_close is not None else None
            quotes.append(
                InstrumentQuote(
                    id=row.id,
                    ticker=row.ticker,
                    name=row.name,
                    kind=row.kind,
                    last_price=last,
                    previous_close=prev,
                    daily_change=daily_change(last, prev),
                )
            )
        return quotes
