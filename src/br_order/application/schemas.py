"""Pydantic schemas for the orders API.

Requests accept both snake_case and camelCase keys; responses are snake_case.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field, model_validator

from config.settings import settings
from src.br_common.enums import OrderKind, OrderSide
from src.br_ledger.domain.models import Order, OrderPage, OrderWithInstrument
from src.br_order.domain.models import CreateOrderCommand, ExecutionResult


class CreateOrderRequest(BaseModel):
    user_id: int = Field(gt=0, validation_alias=AliasChoices("user_id", "userId"))
    instrument_id: int = Field(
        gt=0, validation_alias=AliasChoices("instrument_id", "instrumentId")
    )
    side: OrderSide
    kind: OrderKind = Field(validation_alias=AliasChoices("kind", "type"))
    size: int | None = Field(None, gt=0, le=settings.MAX_ORDER_SIZE)
    amount: Decimal | None = Field(None, gt=0, le=settings.MAX_ORDER_AMOUNT, decimal_places=2)
    price: Decimal | None = Field(None, gt=0, le=settings.MAX_ORDER_PRICE, decimal_places=2)

    @model_validator(mode="after")
    def check_size_amount_price(self) -> "CreateOrderRequest":
        if (self.size is None) == (self.amount is None):
            raise ValueError('Must specify either "size" or "amount", but not both')
        if self.kind == OrderKind.LIMIT and self.price is None:
            raise ValueError('LIMIT orders must include "price"')
        if self.kind == OrderKind.MARKET and self.price is not None:
            raise ValueError('MARKET orders must not include "price"')
        return self

    def to_command(self) -> CreateOrderCommand:
        return CreateOrderCommand(
            user_id=self.user_id,
            instrument_id=self.instrument_id,
            side=self.side,
            kind=self.kind,
            size=self.size,
            amount=self.amount,
            price=self.price,
        )


class CancelOrderRequest(BaseModel):
    user_id: int = Field(gt=0, validation_alias=AliasChoices("user_id", "userId"))


class OrderOut(BaseModel):
    id: int
    user_id: int
    instrument_id: int
    side: str
    kind: str
    size: int
    price: Decimal
    status: str
    created_at: datetime
    total_amount: Decimal
    ticker: str | None = None
    name: str | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderOut":
        enriched = isinstance(order, OrderWithInstrument)
        return cls(
            id=order.id,
            user_id=order.user_id,
            instrument_id=order.instrument_id,
            side=order.side,
            kind=order.kind,
            size=order.size,
            price=order.price,
            status=order.status,
            created_at=order.created_at,
            total_amount=order.total_amount,
            ticker=order.ticker if enriched else None,
            name=order.name if enriched else None,
        )


class ExecuteOrderResponse(BaseModel):
    success: bool = True
    order: OrderOut
    rejection_reason: str | None = None

    @classmethod
    def from_result(cls, result: ExecutionResult) -> "ExecuteOrderResponse":
        return cls(
            order=OrderOut.from_domain(result.order),
            rejection_reason=result.rejection_reason,
        )


class CancelOrderResponse(BaseModel):
    success: bool = True
    message: str = "Order cancelled successfully"
    order: OrderOut


class OrderPageResponse(BaseModel):
    orders: list[OrderOut]
    next_cursor: str | None
    has_more: bool

    @classmethod
    def from_domain(cls, page: OrderPage) -> "OrderPageResponse":
        return cls(
            orders=[OrderOut.from_domain(o) for o in page.orders],
            next_cursor=page.next_cursor.isoformat() if page.next_cursor else None,
            has_more=page.has_more,
        )
