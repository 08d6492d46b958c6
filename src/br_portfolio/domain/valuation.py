"""Portfolio valuation — pure functions, no I/O.

Positions are rebuilt by replaying FILLED BUY/SELL orders in creation order
with the moving weighted-average cost method. All arithmetic is exact
Decimal; money and percentages are rounded to 2 places only when a
``ValuedPosition`` / ``Portfolio`` is built.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from src.br_common.enums import OrderSide
from src.br_common.money import ZERO, notional, percent_change, round_money
from src.br_ledger.domain.models import Order
from src.br_market.domain.models import Instrument, PriceSnapshot

logger = logging.getLogger(__name__)


@dataclass
class PositionState:
    """Running (quantity, total cost) pair for one instrument during replay."""

    instrument_id: int
    quantity: int = 0
    total_cost: Decimal = ZERO

    @property
    def average_cost(self) -> Decimal:
        if self.quantity <= 0:
            return ZERO
        return self.total_cost / self.quantity


@dataclass
class ValuedPosition:
    instrument_id: int
    ticker: str
    name: str
    quantity: int
    average_buy_price: Decimal
    current_price: Decimal
    market_value: Decimal
    total_return: Decimal  # percent
    daily_return: Decimal  # percent
    # Unrounded market value, used for the portfolio total
    exact_market_value: Decimal = field(default=ZERO, repr=False, compare=False)


@dataclass
class Portfolio:
    user_id: int
    total_balance: Decimal
    available_cash: Decimal
    positions: list[ValuedPosition]


def replay_positions(
    orders: Iterable[Order], cash_instrument_id: int
) -> dict[int, PositionState]:
    """Fold FILLED stock orders into per-instrument positions.

    Cash-instrument orders are ignored. A SELL against an empty position is
    skipped with a warning. Positions that end at quantity 0 are dropped.
    """
    ordered = sorted(
        (o for o in orders if o.instrument_id != cash_instrument_id),
        key=lambda o: (o.created_at, o.id),
    )
    states: dict[int, PositionState] = {}
    for order in ordered:
        state = states.setdefault(order.instrument_id, PositionState(order.instrument_id))
        if order.side == OrderSide.BUY:
            state.quantity += order.size
            state.total_cost += notional(order.size, order.price)
        elif order.side == OrderSide.SELL:
            if state.quantity == 0:
                logger.warning(
                    "Skipping SELL with no open position order_id=%s instrument_id=%s",
                    order.id, order.instrument_id,
                )
                continue
            avg = state.total_cost / state.quantity
            state.quantity -= order.size
            state.total_cost -= notional(order.size, avg)

    return {iid: s for iid, s in states.items() if s.quantity > 0}


def value_position(
    state: PositionState, snapshot: PriceSnapshot, instrument: Instrument
) -> ValuedPosition:
    avg = state.average_cost
    current = snapshot.close
    market_value = notional(state.quantity, current)
    return ValuedPosition(
        instrument_id=state.instrument_id,
        ticker=instrument.ticker,
        name=instrument.name,
        quantity=state.quantity,
        average_buy_price=round_money(avg),
        current_price=round_money(current),
        market_value=round_money(market_value),
        total_return=round_money(percent_change(current, avg)),
        daily_return=round_money(percent_change(current, snapshot.previous_close)),
        exact_market_value=market_value,
    )


def build_portfolio(
    user_id: int, available_cash: Decimal, positions: list[ValuedPosition]
) -> Portfolio:
    ranked = sorted(positions, key=lambda p: p.exact_market_value, reverse=True)
    total = available_cash + sum((p.exact_market_value for p in ranked), ZERO)
    return Portfolio(
        user_id=user_id,
        total_balance=round_money(total),
        available_cash=round_money(available_cash),
        positions=ranked,
    )
