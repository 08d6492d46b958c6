"""LedgerRepository — raw SQL over the orders table.

Transaction ownership: the CALLER opens the unit of work with
``src.br_common.database.transaction`` and passes the session in. Methods
here never commit.

Locking discipline for the validate-then-insert sequence:
  1. ``SELECT ... FROM users WHERE id = :user_id FOR UPDATE`` serializes
     order execution per user (and only per user).
  2. The aggregate then runs as a *new* statement, so under READ COMMITTED
     it sees every order committed by the transaction it waited on, and
     locks each contributing FILLED row until our own commit/rollback.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.br_common.enums import OrderStatus
from src.br_common.money import ZERO, to_decimal
from src.br_ledger.domain.models import NewOrder, Order, OrderPage, OrderWithInstrument

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_ORDER_COLUMNS = "id, user_id, instrument_id, side, kind, size, price, status, created_at"

_LOCK_USER_SQL = text("""
    SELECT id FROM users WHERE id = :user_id FOR UPDATE
""")

_CASH_EXPR = """
    COALESCE(SUM(
        CASE
            WHEN instrument_id = :cash_id AND side = 'CASH_IN'  THEN  size * price
            WHEN instrument_id = :cash_id AND side = 'CASH_OUT' THEN -size * price
            WHEN side = 'BUY'  THEN -size * price
            WHEN side = 'SELL' THEN  size * price
            ELSE 0
        END
    ), 0) AS cash
"""

_LOCKED_CASH_SQL = text(f"""
    SELECT {_CASH_EXPR}
    FROM (
        SELECT instrument_id, side, size, price
        FROM orders
        WHERE user_id = :user_id AND status = 'FILLED'
        FOR UPDATE
    ) filled
""")

_CASH_SQL = text(f"""
    SELECT {_CASH_EXPR}
    FROM orders
    WHERE user_id = :user_id AND status = 'FILLED'
""")

_LOCKED_POSITION_SQL = text("""
    SELECT COALESCE(SUM(
        CASE
            WHEN side = 'BUY'  THEN  size
            WHEN side = 'SELL' THEN -size
            ELSE 0
        END
    ), 0) AS position
    FROM (
        SELECT side, size
        FROM orders
        WHERE user_id = :user_id
          AND instrument_id = :instrument_id
          AND status = 'FILLED'
          AND side IN ('BUY', 'SELL')
        FOR UPDATE
    ) filled
""")

_INSERT_ORDER_SQL = text(f"""
    INSERT INTO orders (user_id, instrument_id, side, kind, size, price, status, created_at)
    VALUES (:user_id, :instrument_id, :side, :kind, :size, :price, :status, NOW())
    RETURNING {_ORDER_COLUMNS}
""")

_FIND_ORDER_SQL = text("""
    SELECT o.id, o.user_id, o.instrument_id, o.side, o.kind, o.size, o.price,
           o.status, o.created_at, i.ticker, i.name
    FROM orders o
    JOIN instruments i ON i.id = o.instrument_id
    WHERE o.id = :order_id
""")

_LOCK_ORDER_SQL = text(f"""
    SELECT {_ORDER_COLUMNS}
    FROM orders
    WHERE id = :order_id
    FOR UPDATE
""")

_FIND_ORDERS_FOR_USER_SQL = text(f"""
    SELECT {_ORDER_COLUMNS}
    FROM orders
    WHERE user_id = :user_id
      AND (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
    ORDER BY created_at ASC, id ASC
""")

_PAGE_ORDERS_SQL = text(f"""
    SELECT {_ORDER_COLUMNS}
    FROM orders
    WHERE user_id = :user_id
      AND (CAST(:cursor AS TIMESTAMPTZ) IS NULL OR created_at < CAST(:cursor AS TIMESTAMPTZ))
    ORDER BY created_at DESC
    LIMIT :limit
""")

_CANCEL_ORDER_SQL = text(f"""
    UPDATE orders
    SET status = :new_status
    WHERE id = :order_id AND status = 'NEW'
    RETURNING {_ORDER_COLUMNS}
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    """Convert a DB result row to an Order domain object."""
    return Order(
        id=row.id,
        user_id=row.user_id,
        instrument_id=row.instrument_id,
        side=row.side,
        kind=row.kind,
        size=row.size,
        price=to_decimal(row.price),
        status=row.status,
        created_at=row.created_at,
    )


def _row_to_order_with_instrument(row: Any) -> OrderWithInstrument:
    return OrderWithInstrument(
        id=row.id,
        user_id=row.user_id,
        instrument_id=row.instrument_id,
        side=row.side,
        kind=row.kind,
        size=row.size,
        price=to_decimal(row.price),
        status=row.status,
        created_at=row.created_at,
        ticker=row.ticker,
        name=row.name,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class LedgerRepository:
    """Concrete implementation of LedgerRepositoryProtocol using raw SQL."""

    async def locked_available_cash(
        self, db: AsyncSession, user_id: int, cash_instrument_id: int
    ) -> Decimal:
        await db.execute(_LOCK_USER_SQL, {"user_id": user_id})
        result = await db.execute(
            _LOCKED_CASH_SQL, {"user_id": user_id, "cash_id": cash_instrument_id}
        )
        return _scalar_decimal(result.scalar())

    async def available_cash(
        self, db: AsyncSession, user_id: int, cash_instrument_id: int
    ) -> Decimal:
        result = await db.execute(
            _CASH_SQL, {"user_id": user_id, "cash_id": cash_instrument_id}
        )
        return _scalar_decimal(result.scalar())

    async def locked_position(
        self, db: AsyncSession, user_id: int, instrument_id: int
    ) -> int:
        await db.execute(_LOCK_USER_SQL, {"user_id": user_id})
        result = await db.execute(
            _LOCKED_POSITION_SQL, {"user_id": user_id, "instrument_id": instrument_id}
        )
        return int(result.scalar() or 0)

    async def insert_order(self, db: AsyncSession, new_order: NewOrder) -> Order:
        result = await db.execute(
            _INSERT_ORDER_SQL,
            {
                "user_id": new_order.user_id,
                "instrument_id": new_order.instrument_id,
                "side": new_order.side,
                "kind": new_order.kind,
                "size": new_order.size,
                "price": new_order.price,
                "status": new_order.status,
            },
        )
        return _row_to_order(result.fetchone())

    async def find_order(
        self, db: AsyncSession, order_id: int
    ) -> OrderWithInstrument | None:
        row = (await db.execute(_FIND_ORDER_SQL, {"order_id": order_id})).fetchone()
        return _row_to_order_with_instrument(row) if row else None

    async def lock_order(self, db: AsyncSession, order_id: int) -> Order | None:
        row = (await db.execute(_LOCK_ORDER_SQL, {"order_id": order_id})).fetchone()
        return _row_to_order(row) if row else None

    async def find_orders_for_user(
        self, db: AsyncSession, user_id: int, status: str | None = None
    ) -> list[Order]:
        rows = (
            await db.execute(_FIND_ORDERS_FOR_USER_SQL, {"user_id": user_id, "status": status})
        ).fetchall()
        return [_row_to_order(row) for row in rows]

    async def page_orders(
        self, db: AsyncSession, user_id: int, limit: int, cursor: datetime | None
    ) -> OrderPage:
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        rows = (
            await db.execute(
                _PAGE_ORDERS_SQL,
                {"user_id": user_id, "cursor": cursor, "limit": limit + 1},
            )
        ).fetchall()
        orders = [_row_to_order(row) for row in rows]
        has_more = len(orders) > limit
        if has_more:
            orders = orders[:limit]
        next_cursor = orders[-1].created_at if has_more and orders else None
        return OrderPage(orders=orders, next_cursor=next_cursor, has_more=has_more)

    async def update_order_status(
        self, db: AsyncSession, order_id: int, new_status: str
    ) -> Order | None:
        if new_status != OrderStatus.CANCELLED:
            raise ValueError(f"Illegal ledger status transition to {new_status}")
        row = (
            await db.execute(
                _CANCEL_ORDER_SQL, {"order_id": order_id, "new_status": new_status}
            )
        ).fetchone()
        return _row_to_order(row) if row else None


def _scalar_decimal(value: Any) -> Decimal:
    if value is None:
        return ZERO
    return to_decimal(value)
