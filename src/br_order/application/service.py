"""OrderExecutionService — executes, cancels and reads orders.

Every execution runs inside a single ``transaction()``: the locked
cash/position read, the validation and the insert either all commit or all
roll back. Soft rejections (insufficient funds/shares, dust amounts) are
persisted as REJECTED orders and returned; only NotFound / BusinessRule /
Transient conditions raise ``AppError``.
"""

import logging
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.settings import settings
from src.br_common.database import async_session_factory, transaction
from src.br_common.enums import OrderKind, OrderSide, OrderStatus
from src.br_common.errors import (
    cash_instrument_not_tradable,
    cash_instrument_required,
    instrument_not_found,
    no_market_data,
    order_not_cancellable,
    order_not_found,
    order_not_owned,
    user_not_found,
)
from src.br_ledger.domain.models import NewOrder, OrderPage, OrderWithInstrument
from src.br_ledger.domain.repository import LedgerRepositoryProtocol
from src.br_ledger.infrastructure.persistence import LedgerRepository
from src.br_market.domain.models import Instrument
from src.br_market.domain.repository import ReferenceRepositoryProtocol
from src.br_market.infrastructure.persistence import ReferenceRepository
from src.br_order.domain.models import (
    CreateOrderCommand,
    ExecutionOutcome,
    ExecutionResult,
    Filled,
    Rejected,
    Resting,
    outcome_status,
)
from src.br_order.domain.sizing import CASH_UNIT_PRICE, resolve_size
from src.br_risk.rules.funds_check import (
    check_buy_funds,
    check_cash_out_funds,
    check_sell_holdings,
    dust_rejection,
)
from src.br_risk.rules.order_shape import check_order_shape, check_size_limit

logger = logging.getLogger(__name__)


class OrderExecutionService:
    def __init__(
        self,
        ledger: LedgerRepositoryProtocol | None = None,
        reference: ReferenceRepositoryProtocol | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        cash_instrument_id: int = settings.CASH_INSTRUMENT_ID,
        default_page_size: int = settings.DEFAULT_PAGE_SIZE,
        max_page_size: int = settings.MAX_PAGE_SIZE,
        max_order_size: int = settings.MAX_ORDER_SIZE,
        max_cash_amount: int = settings.MAX_ORDER_AMOUNT,
    ) -> None:
        self._ledger: LedgerRepositoryProtocol = ledger or LedgerRepository()
        self._reference: ReferenceRepositoryProtocol = reference or ReferenceRepository()
        self._session_factory = session_factory or async_session_factory
        self._cash_instrument_id = cash_instrument_id
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size
        self._max_order_size = max_order_size
        self._max_cash_amount = max_cash_amount

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute_order(self, cmd: CreateOrderCommand) -> ExecutionResult:
        check_order_shape(cmd)

        async with transaction(self._session_factory) as db:
            if await self._reference.find_user(db, cmd.user_id) is None:
                raise user_not_found(cmd.user_id)
            instrument = await self._reference.find_instrument(db, cmd.instrument_id)
            if instrument is None:
                raise instrument_not_found(cmd.instrument_id)

            if cmd.side.is_cash:
                return await self._execute_cash(db, cmd)
            if cmd.instrument_id == self._cash_instrument_id:
                raise cash_instrument_not_tradable(cmd.side.value)
            return await self._execute_trade(db, cmd, instrument)

    async def _execute_cash(self, db: AsyncSession, cmd: CreateOrderCommand) -> ExecutionResult:
        if cmd.instrument_id != self._cash_instrument_id:
            raise cash_instrument_required(cmd.side.value, self._cash_instrument_id)

        size = resolve_size(cmd.size, cmd.amount, CASH_UNIT_PRICE)
        check_size_limit(size, self._max_cash_amount)
        if size == 0:
            outcome: ExecutionOutcome = dust_rejection(cmd.amount or Decimal(0), CASH_UNIT_PRICE)
        elif cmd.side == OrderSide.CASH_OUT:
            available = await self._ledger.locked_available_cash(
                db, cmd.user_id, self._cash_instrument_id
            )
            outcome = check_cash_out_funds(size, available) or Filled()
        else:
            outcome = Filled()

        # A refused withdrawal is recorded as a MARKET order regardless of input
        kind = cmd.kind
        if isinstance(outcome, Rejected) and cmd.side == OrderSide.CASH_OUT:
            kind = OrderKind.MARKET
        return await self._persist(db, cmd, kind, size, CASH_UNIT_PRICE, outcome)

    async def _execute_trade(
        self, db: AsyncSession, cmd: CreateOrderCommand, instrument: Instrument
    ) -> ExecutionResult:
        if cmd.kind == OrderKind.MARKET:
            snapshot = await self._reference.latest_snapshot(db, cmd.instrument_id)
            if snapshot is None:
                raise no_market_data(instrument.ticker)
            price = snapshot.close
            logger.info(
                "Market order priced ticker=%s price=%s snapshot_date=%s",
                instrument.ticker, price, snapshot.date,
            )
        else:
            # check_order_shape guarantees a positive LIMIT price
            price = cmd.price  # type: ignore[assignment]

        size = resolve_size(cmd.size, cmd.amount, price)
        check_size_limit(size, self._max_order_size)
        if size == 0:
            outcome: ExecutionOutcome = dust_rejection(cmd.amount or Decimal(0), price)
        elif cmd.side == OrderSide.BUY:
            available = await self._ledger.locked_available_cash(
                db, cmd.user_id, self._cash_instrument_id
            )
            outcome = check_buy_funds(size, price, available) or self._accepted(cmd.kind)
        else:
            position = await self._ledger.locked_position(db, cmd.user_id, cmd.instrument_id)
            outcome = check_sell_holdings(size, position) or self._accepted(cmd.kind)

        return await self._persist(db, cmd, cmd.kind, size, price, outcome)

    @staticmethod
    def _accepted(kind: OrderKind) -> ExecutionOutcome:
        return Resting() if kind == OrderKind.LIMIT else Filled()

    async def _persist(
        self,
        db: AsyncSession,
        cmd: CreateOrderCommand,
        kind: OrderKind,
        size: int,
        price: Decimal,
        outcome: ExecutionOutcome,
    ) -> ExecutionResult:
        status = outcome_status(outcome)
        order = await self._ledger.insert_order(
            db,
            NewOrder(
                user_id=cmd.user_id,
                instrument_id=cmd.instrument_id,
                side=cmd.side.value,
                kind=kind.value,
                size=size,
                price=price,
                status=status.value,
            ),
        )
        if isinstance(outcome, Rejected):
            logger.info(
                "Order rejected order_id=%s user_id=%s side=%s reason=%s",
                order.id, cmd.user_id, cmd.side.value, outcome.reason,
            )
        else:
            logger.info(
                "Order executed order_id=%s user_id=%s side=%s size=%d price=%s status=%s",
                order.id, cmd.user_id, cmd.side.value, size, price, status.value,
            )
        return ExecutionResult(order=order, outcome=outcome)

    # ------------------------------------------------------------------
    # Cancel
    # ------------------------------------------------------------------

    async def cancel_order(self, order_id: int, user_id: int) -> OrderWithInstrument:
        async with transaction(self._session_factory) as db:
            order = await self._ledger.lock_order(db, order_id)
            if order is None:
                raise order_not_found(order_id)
            if order.user_id != user_id:
                raise order_not_owned()
            if not order.is_cancellable:
                raise order_not_cancellable(OrderStatus(order.status).value)

            updated = await self._ledger.update_order_status(
                db, order_id, OrderStatus.CANCELLED.value
            )
            if updated is None:
                # Row is locked, so this only happens if the lock contract is broken
                raise order_not_cancellable(OrderStatus(order.status).value)
            instrument = await self._reference.find_instrument(db, updated.instrument_id)

        logger.info("Order cancelled order_id=%s user_id=%s", order_id, user_id)
        return OrderWithInstrument(
            **asdict(updated),
            ticker=instrument.ticker if instrument else "",
            name=instrument.name if instrument else "",
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_order_by_id(self, order_id: int) -> OrderWithInstrument:
        async with self._session_factory() as db:
            order = await self._ledger.find_order(db, order_id)
        if order is None:
            raise order_not_found(order_id)
        return order

    async def get_user_orders(
        self, user_id: int, limit: int | None = None, cursor: datetime | None = None
    ) -> OrderPage:
        size = self._default_page_size if limit is None else limit
        size = max(1, min(size, self._max_page_size))
        async with self._session_factory() as db:
            if await self._reference.find_user(db, user_id) is None:
                raise user_not_found(user_id)
            return await self._ledger.page_orders(db, user_id, size, cursor)
