"""Pydantic schemas for the instruments API."""

from decimal import Decimal

from pydantic import BaseModel

from src.br_market.domain.models import InstrumentQuote


class InstrumentQuoteOut(BaseModel):
    id: int
    ticker: str
    name: str
    kind: str
    last_price: Decimal | None
    previous_close: Decimal | None
    daily_change: Decimal | None

    @classmethod
    def from_domain(cls, quote: InstrumentQuote) -> "InstrumentQuoteOut":
        return cls(
            id=quote.id,
            ticker=quote.ticker,
            name=quote.name,
            kind=quote.kind,
            last_price=quote.last_price,
            previous_close=quote.previous_close,
            daily_change=quote.daily_change,
        )


class InstrumentSearchResponse(BaseModel):
    query: str
    count: int
    results: list[InstrumentQuoteOut]
