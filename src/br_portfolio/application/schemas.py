"""Pydantic schemas for the portfolio API."""

from decimal import Decimal

from pydantic import BaseModel

from src.br_portfolio.domain.valuation import Portfolio, ValuedPosition


class PositionOut(BaseModel):
    instrument_id: int
    ticker: str
    name: str
    quantity: int
    average_buy_price: Decimal
    current_price: Decimal
    market_value: Decimal
    total_return: Decimal
    daily_return: Decimal

    @classmethod
    def from_domain(cls, p: ValuedPosition) -> "PositionOut":
        return cls(
            instrument_id=p.instrument_id,
            ticker=p.ticker,
            name=p.name,
            quantity=p.quantity,
            average_buy_price=p.average_buy_price,
            current_price=p.current_price,
            market_value=p.market_value,
            total_return=p.total_return,
            daily_return=p.daily_return,
        )


class PortfolioResponse(BaseModel):
    user_id: int
    total_balance: Decimal
    available_cash: Decimal
    positions: list[PositionOut]

    @classmethod
    def from_domain(cls, portfolio: Portfolio) -> "PortfolioResponse":
        return cls(
            user_id=portfolio.user_id,
            total_balance=portfolio.total_balance,
            available_cash=portfolio.available_cash,
            positions=[PositionOut.from_domain(p) for p in portfolio.positions],
        )
