"""VirtualCardRail — single-use cards issued to vendors."""

from __future__ import annotations

from datetime import date, timedelta

from payrails.domain.capabilities import RailCapabilities
from payrails.domain.types import RailType
from payrails.rails.base import Availability, Clock, system_clock

DEFAULT_VALIDITY_DAYS = 30
MAXIMUM_VALIDITY_DAYS = 365


class VirtualCardRail:
    def __init__(
        self,
        *,
        capabilities: RailCapabilities | None = None,
        availability: Availability | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self._capabilities = capabilities or RailCapabilities.for_virtual_card()
        self._availability = availability or Availability()
        self._clock = clock

    @property
    def rail_type(self) -> RailType:
        return RailType.VIRTUAL_CARD

    @property
    def capabilities(self) -> RailCapabilities:
        return self._capabilities

    def is_available(self) -> bool:
        return self._availability.check(self._capabilities, self._clock()) is None

    def is_real_time(self) -> bool:
        return self._capabilities.is_real_time()

    def expiration_date(self, validity_days: int | None = None) -> date:
        """Issue date plus *validity_days*, capped at one year."""
        days = min(validity_days or DEFAULT_VALIDITY_DAYS, MAXIMUM_VALIDITY_DAYS)
        return self._clock().date() + timedelta(days=days)
