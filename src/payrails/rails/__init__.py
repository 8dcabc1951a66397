"""Payment rails and the registry that builds them from configuration."""

from __future__ import annotations

from dataclasses import replace

from payrails.config.models import PayrailsConfig
from payrails.domain.capabilities import RailCapabilities
from payrails.rails.ach import AchRail
from payrails.rails.base import Availability, Clock, PaymentRail, system_clock
from payrails.rails.check import CheckRail
from payrails.rails.rtgs import RtgsRail, rtgs_capabilities
from payrails.rails.virtual_card import VirtualCardRail
from payrails.rails.wire import WireRail

__all__ = [
    "AchRail",
    "CheckRail",
    "PaymentRail",
    "RtgsRail",
    "VirtualCardRail",
    "WireRail",
    "build_rails",
]


def _with_cutoff(
    capabilities: RailCapabilities, config: PayrailsConfig
) -> RailCapabilities:
    override = config.cutoffs.for_rail(capabilities.rail_type)
    if override is None:
        return capabilities
    hour, minute = override
    return replace(
        capabilities,
        cutoff_hour=hour,
        cutoff_minute=minute,
        cutoff_timezone=config.cutoffs.timezone,
    )


def build_rails(config: PayrailsConfig, clock: Clock = system_clock) -> list[PaymentRail]:
    """Every enabled rail, in a stable registration order.

    Registration order is the selector's tie-breaker: ACH, domestic wire,
    international wire, check, RTGS, virtual card.
    """
    enforce = config.cutoffs.enforce
    open_ = Availability(enforce_cutoff=enforce)

    rails_cfg = config.rails
    rails: list[PaymentRail] = []
    if rails_cfg.ach:
        rails.append(
            AchRail(
                config.ach,
                capabilities=_with_cutoff(RailCapabilities.for_ach(), config),
                availability=open_,
                clock=clock,
            )
        )
    if rails_cfg.wire:
        rails.append(
            WireRail(
                capabilities=_with_cutoff(RailCapabilities.for_domestic_wire(), config),
                availability=open_,
                clock=clock,
            )
        )
    if rails_cfg.international_wire:
        rails.append(
            WireRail(
                international=True,
                capabilities=_with_cutoff(RailCapabilities.for_international_wire(), config),
                availability=open_,
                clock=clock,
            )
        )
    if rails_cfg.check:
        rails.append(
            CheckRail(
                capabilities=_with_cutoff(RailCapabilities.for_check(), config),
                availability=open_,
                clock=clock,
            )
        )
    if rails_cfg.rtgs:
        rails.append(
            RtgsRail(
                rails_cfg.rtgs_system,
                capabilities=_with_cutoff(rtgs_capabilities(rails_cfg.rtgs_system), config),
                availability=open_,
                clock=clock,
                enforce_operating_hours=enforce,
            )
        )
    if rails_cfg.virtual_card:
        rails.append(
            VirtualCardRail(
                capabilities=_with_cutoff(RailCapabilities.for_virtual_card(), config),
                availability=open_,
                clock=clock,
            )
        )
    return rails
