"""Exact decimal arithmetic for prices, amounts and balances.

All money is ``decimal.Decimal``. No float. Intermediate values are never
rounded; ``round_money`` is applied only when a value leaves the core.
"""

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")
_CENT = Decimal("0.01")


def to_decimal(value: Decimal | int | str) -> Decimal:
    """Coerce a DB / request value to Decimal, refusing binary floats."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"Refusing to build a money value from {type(value).__name__}: {value!r}")
    return Decimal(value)


def round_money(value: Decimal) -> Decimal:
    """Round to 2 places, half away from zero: 1.005 -> 1.01."""
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def floor_units(amount: Decimal, price: Decimal) -> int:
    """Whole units an amount can buy at price: floor(1000 / 150) = 6."""
    if price <= ZERO:
        raise ValueError(f"Price must be positive, got {price}")
    return int((amount / price).to_integral_value(rounding=ROUND_FLOOR))


def notional(size: int, price: Decimal) -> Decimal:
    """size x price, exact."""
    return Decimal(size) * price


def percent_change(current: Decimal, base: Decimal) -> Decimal:
    """(current - base) / base x 100, or 0 when base <= 0. Unrounded."""
    if base <= ZERO:
        return ZERO
    return (current - base) / base * HUNDRED
