"""LedgerRepository Protocol — the only path by which engines touch order rows.

Locking is part of the contract: ``locked_*`` methods take exclusive row
locks on every contributing order for the lifetime of the caller's
transaction; every other read is unlocked.
"""

from datetime import datetime
from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.br_ledger.domain.models import NewOrder, Order, OrderPage, OrderWithInstrument


class LedgerRepositoryProtocol(Protocol):
    async def locked_available_cash(
        self, db: AsyncSession, user_id: int, cash_instrument_id: int
    ) -> Decimal: ...

    async def available_cash(
        self, db: AsyncSession, user_id: int, cash_instrument_id: int
    ) -> Decimal: ...

    async def locked_position(
        self, db: AsyncSession, user_id: int, instrument_id: int
    ) -> int: ...

    async def insert_order(self, db: AsyncSession, new_order: NewOrder) -> Order: ...

    async def find_order(
        self, db: AsyncSession, order_id: int
    ) -> OrderWithInstrument | None: ...

    async def lock_order(self, db: AsyncSession, order_id: int) -> Order | None: ...

    async def find_orders_for_user(
        self, db: AsyncSession, user_id: int, status: str | None = None
    ) -> list[Order]: ...

    async def page_orders(
        self, db: AsyncSession, user_id: int, limit: int, cursor: datetime | None
    ) -> OrderPage: ...

    async def update_order_status(
        self, db: AsyncSession, order_id: int, new_status: str
    ) -> Order | None: ...
