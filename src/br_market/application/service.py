"""InstrumentService — stock search over reference data.

Read-only; no commit/rollback needed.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.br_common.database import async_session_factory
from src.br_market.application.schemas import InstrumentQuoteOut, InstrumentSearchResponse
from src.br_market.domain.repository import ReferenceRepositoryProtocol
from src.br_market.infrastructure.persistence import ReferenceRepository

logger = logging.getLogger(__name__)


class InstrumentService:
    def __init__(
        self,
        reference: ReferenceRepositoryProtocol | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        max_results: int = 50,
    ) -> None:
        self._reference: ReferenceRepositoryProtocol = reference or ReferenceRepository()
        self._session_factory = session_factory or async_session_factory
        self._max_results = max_results

    async def search(self, query: str) -> InstrumentSearchResponse:
        trimmed = query.strip()
        if not trimmed:
            return InstrumentSearchResponse(query=query, count=0, results=[])

        async with self._session_factory() as db:
            quotes = await self._reference.search_stocks(db, trimmed, self._max_results)

        logger.info("Stock search completed query=%s results=%d", trimmed, len(quotes))
        return InstrumentSearchResponse(
            query=query,
            count=len(quotes),
            results=[InstrumentQuoteOut.from_domain(q) for q in quotes],
        )
