"""Funds / holdings checks — pure functions over values read under lock.

Each returns ``Rejected`` with a human-readable reason, or None when the
order may proceed.
"""

from decimal import Decimal

from src.br_common.money import notional
from src.br_order.domain.models import Rejected


def check_buy_funds(size: int, price: Decimal, available_cash: Decimal) -> Rejected | None:
    required = notional(size, price)
    if available_cash < required:
        return Rejected(
            f"Insufficient funds: available {available_cash}, required {required}"
        )
    return None


def check_sell_holdings(size: int, position: int) -> Rejected | None:
    if position < size:
        return Rejected(f"Insufficient shares: available {position}, trying to sell {size}")
    return None


def check_cash_out_funds(size: int, available_cash: Decimal) -> Rejected | None:
    if available_cash < Decimal(size):
        return Rejected(
            f"Insufficient funds: available {available_cash}, requested {size}"
        )
    return None


def dust_rejection(amount: Decimal, price: Decimal) -> Rejected:
    return Rejected(f"Amount {amount} too small to buy one unit at {price}")
