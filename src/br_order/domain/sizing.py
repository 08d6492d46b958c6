"""Price and size resolution for incoming orders."""

from decimal import Decimal

from src.br_common.money import floor_units

# The cash instrument is the unit of account: one unit is worth exactly 1.
CASH_UNIT_PRICE = Decimal("1")


def resolve_size(size: int | None, amount: Decimal | None, price: Decimal) -> int:
    """Explicit size wins; otherwise floor(amount / price).

    A result of 0 means the amount cannot buy a single unit; the caller
    records that as a REJECTED order rather than raising.
    """
    if size is not None:
        return size
    if amount is None:
        raise ValueError("Either size or amount is required")
    return floor_units(amount, price)
