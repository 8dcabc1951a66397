"""Tests for the configuration section models."""

import pytest
from pydantic import ValidationError

from payrails.config.models import (
    AchConfig,
    CutoffsConfig,
    PayrailsConfig,
    SelectorConfig,
    parse_hhmm,
)
from payrails.domain.types import RailType


class TestParseHhmm:
    def test_valid(self) -> None:
        assert parse_hhmm("16:30") == (16, 30)
        assert parse_hhmm("00:00") == (0, 0)

    @pytest.mark.parametrize("value", ["24:00", "9:30", "12:60", "noon"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ValueError, match="Expected HH:MM"):
            parse_hhmm(value)


class TestAchConfig:
    def test_defaults_are_valid_routing_numbers(self) -> None:
        config = AchConfig()
        assert config.immediate_origin == "021000021"
        assert config.same_day_cutoff == "14:45"

    def test_bad_routing_number_rejected(self) -> None:
        with pytest.raises(ValidationError, match="not a valid routing number"):
            AchConfig(immediate_origin="123456789")

    def test_bad_cutoff_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AchConfig(same_day_cutoff="25:00")


class TestCutoffsConfig:
    def test_for_rail(self) -> None:
        config = CutoffsConfig(wire="17:00")
        assert config.for_rail(RailType.WIRE) == (17, 0)
        assert config.for_rail(RailType.ACH) is None

    def test_unenforced_by_default(self) -> None:
        assert CutoffsConfig().enforce is False


class TestSelectorConfig:
    def test_thresholds(self) -> None:
        config = SelectorConfig()
        assert config.high_value_threshold == 10_000_000
        assert config.medium_value_threshold == 1_000_000
        assert config.low_value_threshold == 100_000
        assert config.rtgs_floor == 1_000_000

    def test_negative_headroom_weight_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SelectorConfig(headroom_weight=-1.0)


class TestPayrailsConfig:
    def test_empty_document_is_a_working_setup(self) -> None:
        config = PayrailsConfig.model_validate({})
        assert all(
            [
                config.rails.ach,
                config.rails.wire,
                config.rails.international_wire,
                config.rails.check,
                config.rails.rtgs,
                config.rails.virtual_card,
            ]
        )
        assert config.plugins.enabled is True

    def test_frozen(self) -> None:
        config = PayrailsConfig()
        with pytest.raises(ValidationError):
            config.ach = AchConfig()  # type: ignore[misc]
