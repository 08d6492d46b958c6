"""Order execution domain — command, tagged outcome, result.

Rejection is a normal outcome, not an exception: a rejected order is
persisted with status REJECTED and returned through the success path.
"""

from dataclasses import dataclass
from decimal import Decimal

from src.br_common.enums import OrderKind, OrderSide, OrderStatus
from src.br_ledger.domain.models import Order


@dataclass(frozen=True)
class CreateOrderCommand:
    user_id: int
    instrument_id: int
    side: OrderSide
    kind: OrderKind
    size: int | None = None
    amount: Decimal | None = None
    price: Decimal | None = None


@dataclass(frozen=True)
class Filled:
    """Executed immediately; has economic effect."""


@dataclass(frozen=True)
class Resting:
    """Accepted LIMIT order waiting for its price; no economic effect yet."""


@dataclass(frozen=True)
class Rejected:
    reason: str


ExecutionOutcome = Filled | Resting | Rejected


def outcome_status(outcome: ExecutionOutcome) -> OrderStatus:
    if isinstance(outcome, Filled):
        return OrderStatus.FILLED
    if isinstance(outcome, Resting):
        return OrderStatus.NEW
    return OrderStatus.REJECTED


@dataclass
class ExecutionResult:
    order: Order
    outcome: ExecutionOutcome

    @property
    def rejection_reason(self) -> str | None:
        return self.outcome.reason if isinstance(self.outcome, Rejected) else None
