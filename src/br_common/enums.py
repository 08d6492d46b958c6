"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class InstrumentKind(str, Enum):
    STOCK = "STOCK"
    CURRENCY = "CURRENCY"


class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    CASH_IN = "CASH_IN"
    CASH_OUT = "CASH_OUT"

    @property
    def is_cash(self) -> bool:
        return self in (OrderSide.CASH_IN, OrderSide.CASH_OUT)


class OrderKind(str, Enum):
    MARKET = "MARKET"
    LIMIT = "LIMIT"


class OrderStatus(str, Enum):
    NEW = "NEW"
    FILLED = "FILLED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
