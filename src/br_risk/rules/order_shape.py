from decimal import Decimal

from config.settings import settings
from src.br_common.enums import OrderKind
from src.br_common.errors import invalid_order_request
from src.br_order.domain.models import CreateOrderCommand

_CENT = Decimal("0.01")


def check_order_shape(
    cmd: CreateOrderCommand, max_price: Decimal = settings.MAX_ORDER_PRICE
) -> None:
    """Raise AppError(4005) for a structurally valid but contradictory command.

    The HTTP layer already enforces these; the engine re-checks so a direct
    caller cannot bypass them.
    """
    if (cmd.size is None) == (cmd.amount is None):
        raise invalid_order_request('must specify either "size" or "amount", not both')
    if cmd.size is not None and cmd.size <= 0:
        raise invalid_order_request(f"size must be positive, got {cmd.size}")
    if cmd.amount is not None and cmd.amount <= 0:
        raise invalid_order_request(f"amount must be positive, got {cmd.amount}")
    if cmd.kind == OrderKind.LIMIT and (cmd.price is None or cmd.price <= 0):
        raise invalid_order_request('LIMIT orders must include a positive "price"')
    if cmd.kind == OrderKind.MARKET and cmd.price is not None:
        raise invalid_order_request('MARKET orders must not include "price"')
    if cmd.price is not None:
        # Stored as NUMERIC(12,2); the funds check must see the stored value
        if cmd.price != cmd.price.quantize(_CENT):
            raise invalid_order_request(f"price must have at most 2 decimal places, got {cmd.price}")
        if cmd.price > max_price:
            raise invalid_order_request(f"price must not exceed {max_price}, got {cmd.price}")


def check_size_limit(size: int, max_size: int) -> None:
    """Raise AppError(4005) when the resolved size is larger than an order may be."""
    if size > max_size:
        raise invalid_order_request(f"order size {size} exceeds the maximum of {max_size}")
