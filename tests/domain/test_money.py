"""Tests for Money — integer minor units, decimal parsing, ordering."""

from __future__ import annotations

from decimal import Decimal

import pytest

from payrails.domain.money import Money


class TestConstruction:
    def test_of_parses_decimal_string(self) -> None:
        assert Money.of("12.34") == Money(1234, "USD")

    def test_of_rounds_half_up(self) -> None:
        assert Money.of("0.005").amount == 1
        assert Money.of("0.004").amount == 0

    def test_of_accepts_decimal_and_int(self) -> None:
        assert Money.of(Decimal("1.50")).amount == 150
        assert Money.of(100).amount == 10_000

    def test_of_rejects_garbage(self) -> None:
        with pytest.raises(ValueError, match="Invalid amount"):
            Money.of("twelve")

    def test_currency_uppercased(self) -> None:
        assert Money(100, "eur").currency == "EUR"

    def test_invalid_currency(self) -> None:
        with pytest.raises(ValueError, match="Invalid currency code"):
            Money(100, "EURO")

    def test_float_amount_rejected(self) -> None:
        with pytest.raises(TypeError):
            Money(12.5)  # type: ignore[arg-type]

    def test_zero(self) -> None:
        assert Money.zero("GBP").is_zero
        assert Money.zero("GBP").currency == "GBP"


class TestArithmetic:
    def test_add_same_currency(self) -> None:
        assert Money(100) + Money(250) == Money(350)

    def test_add_mixed_currency_raises(self) -> None:
        with pytest.raises(ValueError, match="Cannot add EUR to USD"):
            Money(100, "USD") + Money(100, "EUR")


class TestOrderingAndDisplay:
    def test_ordering_ignores_currency(self) -> None:
        assert Money(100, "EUR") > Money(50, "USD")
        assert Money(50, "GBP") <= Money(50, "USD")
        assert not Money(100, "EUR").same_currency(Money(50, "USD"))

    def test_str(self) -> None:
        assert str(Money(1234)) == "12.34 USD"
        assert str(Money(-5, "EUR")) == "-0.05 EUR"
