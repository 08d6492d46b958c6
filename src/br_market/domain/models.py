"""Reference data models — pure dataclasses, read-only to the core."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass
class User:
    id: int
    email: str
    account_number: str


@dataclass
class Instrument:
    id: int
    ticker: str
    name: str
    kind: str  # STOCK / CURRENCY


@dataclass
class PriceSnapshot:
    """One day of market data; the latest row per instrument prices MARKET orders."""

    instrument_id: int
    date: date
    close: Decimal
    previous_close: Decimal


@dataclass
class InstrumentQuote:
    """Search result: instrument plus its latest prices (None when never priced)."""

    id: int
    ticker: str
    name: str
    kind: str
    last_price: Decimal | None
    previous_close: Decimal | None
    daily_change: Decimal | None  # percent, 2dp
