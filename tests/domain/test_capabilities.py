"""Tests for RailCapabilities predicates and stock profiles."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from payrails.domain.capabilities import MAX_ACH_AMOUNT, RailCapabilities
from payrails.domain.money import Money
from payrails.domain.types import RailType
from tests.conftest import NOW


class TestLimits:
    def test_currency_case_insensitive(self) -> None:
        caps = RailCapabilities.for_virtual_card()
        assert caps.supports_currency("eur")
        assert not caps.supports_currency("JPY")

    def test_amount_within_limits(self) -> None:
        caps = RailCapabilities.for_ach()
        assert caps.is_amount_within_limits(Money(1))
        assert caps.is_amount_within_limits(Money(MAX_ACH_AMOUNT))
        assert not caps.is_amount_within_limits(Money(0))
        assert not caps.is_amount_within_limits(Money(MAX_ACH_AMOUNT + 1))

    def test_unsupported_currency_is_out_of_limits(self) -> None:
        assert not RailCapabilities.for_ach().is_amount_within_limits(Money(100, "EUR"))

    def test_limits_compare_magnitude_only(self) -> None:
        caps = RailCapabilities.for_international_wire()
        assert caps.minimum_amount == Money(10_000, "USD")
        assert caps.is_amount_within_limits(Money(10_000, "EUR"))
        assert not caps.is_amount_within_limits(Money(9_999, "EUR"))

    def test_headroom_ratio(self) -> None:
        caps = RailCapabilities.for_check()
        assert caps.headroom_ratio(499_999_999) == pytest.approx(0.5, rel=1e-6)
        assert RailCapabilities.for_rtgs().headroom_ratio(10**12) == 0.0


class TestCutoff:
    def test_before_cutoff(self) -> None:
        # 10:00 in New York against a 17:00 cutoff.
        assert RailCapabilities.for_ach().is_before_cutoff(NOW)

    def test_after_cutoff(self) -> None:
        evening = datetime(2026, 10, 19, 22, 0, tzinfo=UTC)
        assert not RailCapabilities.for_ach().is_before_cutoff(evening)

    def test_naive_datetime_is_utc(self) -> None:
        assert RailCapabilities.for_ach().is_before_cutoff(datetime(2026, 10, 19, 14, 0))

    def test_cutoff_formatted(self) -> None:
        assert RailCapabilities.for_ach().cutoff_formatted() == "17:00 America/New_York"
        assert RailCapabilities.for_check().cutoff_formatted() == "23:59 America/New_York"

    def test_invalid_cutoff(self) -> None:
        with pytest.raises(ValueError, match="Invalid cutoff"):
            RailCapabilities(rail_type=RailType.ACH, supported_currencies=("USD",), cutoff_hour=24)

    def test_negative_settlement_days(self) -> None:
        with pytest.raises(ValueError, match="Settlement days"):
            RailCapabilities(
                rail_type=RailType.ACH, supported_currencies=("USD",), typical_settlement_days=-1
            )


class TestProfiles:
    def test_real_time(self) -> None:
        assert RailCapabilities.for_domestic_wire().is_real_time()
        assert RailCapabilities.for_rtgs().is_real_time()
        assert not RailCapabilities.for_ach().is_real_time()
        assert not RailCapabilities.for_international_wire().is_real_time()

    def test_additional_capabilities(self) -> None:
        caps = RailCapabilities.for_ach()
        assert caps.has_capability("supports_same_day")
        assert not caps.has_capability("supports_iban")
        assert caps.get_capability("missing", 7) == 7

    def test_rtgs_custom_minimum(self) -> None:
        caps = RailCapabilities.for_rtgs(Money(1_000_000, "GBP"))
        assert caps.minimum_amount == Money(1_000_000, "GBP")
        assert caps.maximum_amount is None

    def test_currencies_normalized(self) -> None:
        caps = RailCapabilities(rail_type=RailType.CHECK, supported_currencies=("usd",))
        assert caps.supported_currencies == ("USD",)

    def test_additional_capabilities_read_only(self) -> None:
        source = {"supports_same_day": True}
        caps = RailCapabilities(rail_type=RailType.ACH, additional_capabilities=source)
        with pytest.raises(TypeError):
            caps.additional_capabilities["cost_rank"] = 1  # type: ignore[index]
        source["supports_iban"] = True
        assert not caps.has_capability("supports_iban")
        assert dict(caps.additional_capabilities) == {"supports_same_day": True}
