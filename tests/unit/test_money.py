"""Tests for br_common.money — exact decimal helpers."""

from decimal import Decimal

import pytest

from src.br_common.money import (
    ZERO,
    floor_units,
    notional,
    percent_change,
    round_money,
    to_decimal,
)


class TestToDecimal:
    def test_passes_decimal_through(self) -> None:
        d = Decimal("1.10")
        assert to_decimal(d) is d

    def test_accepts_str_and_int(self) -> None:
        assert to_decimal("150.00") == Decimal("150.00")
        assert to_decimal(3) == Decimal(3)

    def test_rejects_float(self) -> None:
        with pytest.raises(TypeError):
            to_decimal(0.1)  # type: ignore[arg-type]

    def test_rejects_bool(self) -> None:
        with pytest.raises(TypeError):
            to_decimal(True)  # type: ignore[arg-type]


class TestRoundMoney:
    def test_half_up(self) -> None:
        assert round_money(Decimal("1.005")) == Decimal("1.01")
        assert round_money(Decimal("2.345")) == Decimal("2.35")

    def test_negative_half_away_from_zero(self) -> None:
        assert round_money(Decimal("-1.005")) == Decimal("-1.01")

    def test_pads_to_two_places(self) -> None:
        assert str(round_money(Decimal("900"))) == "900.00"


class TestFloorUnits:
    def test_amount_rounding_example(self) -> None:
        assert floor_units(Decimal("1000"), Decimal("150.00")) == 6

    def test_dust_amount(self) -> None:
        assert floor_units(Decimal("50"), Decimal("150.00")) == 0

    def test_exact_division(self) -> None:
        assert floor_units(Decimal("300"), Decimal("150")) == 2

    def test_non_positive_price_raises(self) -> None:
        with pytest.raises(ValueError):
            floor_units(Decimal("100"), ZERO)


class TestNotionalAndPercent:
    def test_notional_is_exact(self) -> None:
        assert notional(3, Decimal("0.10")) == Decimal("0.30")

    def test_percent_change(self) -> None:
        assert percent_change(Decimal("120"), Decimal("100")) == Decimal("20")

    def test_percent_change_zero_base(self) -> None:
        assert percent_change(Decimal("120"), ZERO) == ZERO

    def test_percent_change_negative_base(self) -> None:
        assert percent_change(Decimal("120"), Decimal("-1")) == ZERO
