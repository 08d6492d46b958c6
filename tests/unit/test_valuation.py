"""Tests for br_portfolio.domain.valuation — pure replay and valuation."""

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

from src.br_ledger.domain.models import Order
from src.br_market.domain.models import Instrument, PriceSnapshot
from src.br_portfolio.domain.valuation import (
    PositionState,
    build_portfolio,
    replay_positions,
    value_position,
)

CASH_ID = 66
T0 = datetime(2026, 10, 1, 10, 0, tzinfo=UTC)


def _order(
    oid: int, side: str, size: int, price: str, instrument_id: int = 6, minutes: int | None = None
) -> Order:
    return Order(
        id=oid, user_id=1, instrument_id=instrument_id, side=side, kind="MARKET",
        size=size, price=Decimal(price), status="FILLED",
        created_at=T0 + timedelta(minutes=oid if minutes is None else minutes),
    )


def _snapshot(instrument_id: int = 6, close: str = "130", prev: str = "125") -> PriceSnapshot:
    return PriceSnapshot(instrument_id, date(2026, 10, 16), Decimal(close), Decimal(prev))


def _instrument(instrument_id: int = 6, ticker: str = "GGAL") -> Instrument:
    return Instrument(instrument_id, ticker, f"{ticker} S.A.", "STOCK")


class TestReplayPositions:
    def test_average_cost_preserved_on_partial_sell(self) -> None:
        states = replay_positions(
            [_order(1, "BUY", 10, "100"), _order(2, "SELL", 4, "120")], CASH_ID
        )
        state = states[6]
        assert state.quantity == 6
        assert state.average_cost == Decimal("100")

    def test_weighted_average_across_buys(self) -> None:
        states = replay_positions(
            [_order(1, "BUY", 10, "100"), _order(2, "BUY", 10, "200")], CASH_ID
        )
        assert states[6].average_cost == Decimal("150")

    def test_full_liquidation_removes_position(self) -> None:
        states = replay_positions(
            [_order(1, "BUY", 10, "100"), _order(2, "SELL", 10, "120")], CASH_ID
        )
        assert 6 not in states

    def test_sell_from_empty_position_is_skipped(self) -> None:
        states = replay_positions(
            [_order(1, "SELL", 5, "100"), _order(2, "BUY", 3, "100")], CASH_ID
        )
        assert states[6].quantity == 3

    def test_replays_in_creation_order_not_input_order(self) -> None:
        orders = [_order(2, "SELL", 10, "120"), _order(1, "BUY", 10, "100")]
        assert replay_positions(orders, CASH_ID) == {}

    def test_equal_timestamps_ordered_by_id(self) -> None:
        orders = [_order(2, "SELL", 10, "120", minutes=0), _order(1, "BUY", 10, "100", minutes=0)]
        assert replay_positions(orders, CASH_ID) == {}

    def test_cash_orders_ignored(self) -> None:
        orders = [_order(1, "CASH_IN", 1000, "1", instrument_id=CASH_ID)]
        assert replay_positions(orders, CASH_ID) == {}

    def test_separate_instruments(self) -> None:
        states = replay_positions(
            [_order(1, "BUY", 1, "10", instrument_id=1), _order(2, "BUY", 2, "20", instrument_id=2)],
            CASH_ID,
        )
        assert set(states) == {1, 2}


class TestValuePosition:
    def test_average_cost_example(self) -> None:
        state = PositionState(6, quantity=6, total_cost=Decimal("600"))
        p = value_position(state, _snapshot(close="130", prev="125"), _instrument())
        assert p.average_buy_price == Decimal("100.00")
        assert p.current_price == Decimal("130.00")
        assert p.market_value == Decimal("780.00")
        assert p.total_return == Decimal("30.00")
        assert p.daily_return == Decimal("4.00")

    def test_returns_zero_when_base_not_positive(self) -> None:
        state = PositionState(6, quantity=1, total_cost=Decimal("0"))
        p = value_position(state, _snapshot(prev="0"), _instrument())
        assert p.total_return == Decimal("0.00")
        assert p.daily_return == Decimal("0.00")

    def test_rounds_only_at_output(self) -> None:
        # avg = 100/3 = 33.333..., total return on 40 = 20.00%
        state = PositionState(6, quantity=3, total_cost=Decimal("100"))
        p = value_position(state, _snapshot(close="40", prev="40"), _instrument())
        assert p.average_buy_price == Decimal("33.33")
        assert p.total_return == Decimal("20.00")


class TestBuildPortfolio:
    def test_sorted_by_market_value_and_total(self) -> None:
        small = value_position(
            PositionState(1, 1, Decimal("10")), _snapshot(1, "10", "10"), _instrument(1, "AAA")
        )
        big = value_position(
            PositionState(2, 10, Decimal("100")), _snapshot(2, "20", "20"), _instrument(2, "BBB")
        )

        portfolio = build_portfolio(1, Decimal("50.005"), [small, big])

        assert [p.ticker for p in portfolio.positions] == ["BBB", "AAA"]
        assert portfolio.available_cash == Decimal("50.01")
        assert portfolio.total_balance == Decimal("260.01")

    def test_empty_portfolio(self) -> None:
        portfolio = build_portfolio(1, Decimal("0"), [])
        assert portfolio.positions == []
        assert portfolio.total_balance == Decimal("0.00")

    def test_idempotent(self) -> None:
        orders = [_order(1, "BUY", 10, "100"), _order(2, "SELL", 4, "120")]

        def run():
            states = replay_positions(orders, CASH_ID)
            valued = [value_position(s, _snapshot(), _instrument()) for s in states.values()]
            return build_portfolio(1, Decimal("1000"), valued)

        assert run() == run()
