"""PortfolioService — read-only valuation of a user's holdings.

Reads run on a plain session with no row locks, so valuation never blocks
order execution. A concurrently committing order may or may not be visible.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.settings import settings
from src.br_common.database import async_session_factory
from src.br_common.enums import OrderStatus
from src.br_common.errors import user_not_found
from src.br_ledger.domain.repository import LedgerRepositoryProtocol
from src.br_ledger.infrastructure.persistence import LedgerRepository
from src.br_market.domain.repository import ReferenceRepositoryProtocol
from src.br_market.infrastructure.persistence import ReferenceRepository
from src.br_portfolio.domain.valuation import (
    Portfolio,
    ValuedPosition,
    build_portfolio,
    replay_positions,
    value_position,
)

logger = logging.getLogger(__name__)


class PortfolioService:
    def __init__(
        self,
        ledger: LedgerRepositoryProtocol | None = None,
        reference: ReferenceRepositoryProtocol | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        cash_instrument_id: int = settings.CASH_INSTRUMENT_ID,
    ) -> None:
        self._ledger: LedgerRepositoryProtocol = ledger or LedgerRepository()
        self._reference: ReferenceRepositoryProtocol = reference or ReferenceRepository()
        self._session_factory = session_factory or async_session_factory
        self._cash_instrument_id = cash_instrument_id

    async def get_user_portfolio(self, user_id: int) -> Portfolio:
        async with self._session_factory() as db:
            if await self._reference.find_user(db, user_id) is None:
                raise user_not_found(user_id)

            filled = await self._ledger.find_orders_for_user(
                db, user_id, OrderStatus.FILLED.value
            )
            cash = await self._ledger.available_cash(db, user_id, self._cash_instrument_id)

            states = replay_positions(filled, self._cash_instrument_id)
            ids = list(states)
            snapshots = await self._reference.latest_snapshots(db, ids)
            instruments = {i.id: i for i in await self._reference.find_instruments_by_ids(db, ids)}

        valued: list[ValuedPosition] = []
        for instrument_id, state in states.items():
            snapshot = snapshots.get(instrument_id)
            instrument = instruments.get(instrument_id)
            if snapshot is None or instrument is None:
                logger.warning(
                    "Dropping position without price or instrument user_id=%s instrument_id=%s",
                    user_id, instrument_id,
                )
                continue
            valued.append(value_position(state, snapshot, instrument))

        return build_portfolio(user_id, cash, valued)
