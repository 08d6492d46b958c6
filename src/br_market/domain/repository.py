"""Repository Protocol for reference data (users, instruments, price snapshots)."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.br_market.domain.models import Instrument, InstrumentQuote, PriceSnapshot, User


class ReferenceRepositoryProtocol(Protocol):
    async def find_user(self, db: AsyncSession, user_id: int) -> User | None: ...

    async def find_instrument(
        self, db: AsyncSession, instrument_id: int
    ) -> Instrument | None: ...

    async def find_instruments_by_ids(
        self, db: AsyncSession, instrument_ids: list[int]
    ) -> list[Instrument]: ...

    async def latest_snapshot(
        self, db: AsyncSession, instrument_id: int
    ) -> PriceSnapshot | None: ...

    async def latest_snapshots(
        self, db: AsyncSession, instrument_ids: list[int]
    ) -> dict[int, PriceSnapshot]: ...

    async def search_stocks(
        self, db: AsyncSession, query: str, limit: int
    ) -> list[InstrumentQuote]: ...
