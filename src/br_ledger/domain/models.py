"""Order ledger domain models — pure dataclasses, no SQLAlchemy dependency.

The orders table is the single source of truth: cash and positions are
always folded from FILLED rows, never stored separately.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.br_common.money import notional, round_money


@dataclass
class NewOrder:
    """Fields for a ledger insert; id and created_at are assigned by the DB."""

    user_id: int
    instrument_id: int
    side: str  # BUY / SELL / CASH_IN / CASH_OUT
    kind: str  # MARKET / LIMIT
    size: int
    price: Decimal
    status: str  # NEW / FILLED / REJECTED


@dataclass
class Order:
    id: int
    user_id: int
    instrument_id: int
    side: str
    kind: str
    size: int
    price: Decimal
    status: str
    created_at: datetime

    @property
    def total_amount(self) -> Decimal:
        """size x price, rounded to cents for output."""
        return round_money(notional(self.size, self.price))

    @property
    def is_cancellable(self) -> bool:
        return self.status == "NEW"


@dataclass
class OrderWithInstrument(Order):
    ticker: str = ""
    name: str = ""


@dataclass
class OrderPage:
    orders: list[Order]
    next_cursor: datetime | None
    has_more: bool
