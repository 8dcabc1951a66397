"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, payrails.toml only contains
overrides.  An empty file (or no file at all) yields a working setup with
every rail enabled and cutoffs unenforced.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

from payrails.domain.capabilities import DEFAULT_CUTOFF_TIMEZONE
from payrails.domain.identifiers import RoutingNumber
from payrails.domain.types import RailType, RtgsSystem

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_hhmm(value: str) -> tuple[int, int]:
    """``"16:30"`` -> ``(16, 30)``."""
    match = _HHMM.match(value)
    if not match:
        raise ValueError(f"Expected HH:MM, got {value!r}")
    return int(match.group(1)), int(match.group(2))


# --- payrails.toml sections ---


class AchConfig(BaseModel):
    """[ach] section — originator identity for generated NACHA files."""

    model_config = {"frozen": True}

    immediate_destination: str = "011000015"
    immediate_destination_name: str = "FEDERAL RESERVE BANK"
    immediate_origin: str = "021000021"
    immediate_origin_name: str = "PAYRAILS ORIGINATOR"
    company_name: str = "PAYRAILS"
    company_id: str = "1234567890"
    file_id_modifier: str = "A"
    same_day_enabled: bool = True
    same_day_cutoff: str = "14:45"

    @field_validator("immediate_destination", "immediate_origin")
    @classmethod
    def _check_routing(cls, value: str) -> str:
        if RoutingNumber.try_parse(value) is None:
            raise ValueError(f"{value!r} is not a valid routing number")
        return value

    @field_validator("same_day_cutoff")
    @classmethod
    def _check_cutoff(cls, value: str) -> str:
        parse_hhmm(value)
        return value


class RailsConfig(BaseModel):
    """[rails] section — which rails are registered and how."""

    model_config = {"frozen": True}

    ach: bool = True
    wire: bool = True
    international_wire: bool = True
    check: bool = True
    rtgs: bool = True
    virtual_card: bool = True
    rtgs_system: RtgsSystem = RtgsSystem.FEDWIRE


class CutoffsConfig(BaseModel):
    """[cutoffs] section — per-rail daily cutoff overrides (``HH:MM``).

    Cutoffs only affect availability when ``enforce`` is true.
    """

    model_config = {"frozen": True}

    enforce: bool = False
    timezone: str = DEFAULT_CUTOFF_TIMEZONE
    ach: str | None = None
    wire: str | None = None
    check: str | None = None
    rtgs: str | None = None
    virtual_card: str | None = None

    @field_validator("ach", "wire", "check", "rtgs", "virtual_card")
    @classmethod
    def _check_hhmm(cls, value: str | None) -> str | None:
        if value is not None:
            parse_hhmm(value)
        return value

    def for_rail(self, rail_type: RailType) -> tuple[int, int] | None:
        value = getattr(self, rail_type.value)
        return parse_hhmm(value) if value else None


class SelectorConfig(BaseModel):
    """[selector] section — scoring weights and amount thresholds (minor units)."""

    model_config = {"frozen": True}

    base_score: float = 50.0
    component_cap: float = 25.0
    high_value_threshold: int = 10_000_000
    medium_value_threshold: int = 1_000_000
    low_value_threshold: int = 100_000
    rtgs_floor: int = 1_000_000
    low_cost_step: float = 6.0
    cost_step: float = 3.0
    fit_base: float = 10.0
    recurring_bonus: float = 5.0
    refund_bonus: float = 3.0
    headroom_weight: float = 5.0
    preferred_rail_bonus: float = 15.0
    high_value_bonus: float = 10.0
    low_value_bonus: float = 5.0
    emit_events: bool = True

    @field_validator("headroom_weight")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("headroom_weight must be >= 0")
        return value


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    disabled: list[str] = Field(default_factory=list)


class PayrailsConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    ach: AchConfig = Field(default_factory=AchConfig)
    rails: RailsConfig = Field(default_factory=RailsConfig)
    cutoffs: CutoffsConfig = Field(default_factory=CutoffsConfig)
    selector: SelectorConfig = Field(default_factory=SelectorConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
