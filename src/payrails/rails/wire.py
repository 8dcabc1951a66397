"""WireRail — Fedwire-style domestic wires and SWIFT international wires."""

from __future__ import annotations

from datetime import date
from zoneinfo import ZoneInfo

from payrails.domain.capabilities import RailCapabilities
from payrails.domain.identifiers import Iban, SwiftCode
from payrails.domain.money import Money
from payrails.domain.types import RailType
from payrails.rails.base import Availability, Clock, next_business_day, system_clock

DOMESTIC_FEE = 2_500
INTERNATIONAL_FEE = 4_500


class WireRail:
    """Credit-only high-value transfers.

    One instance serves either domestic or international traffic; register
    two rails to offer both.
    """

    def __init__(
        self,
        *,
        international: bool = False,
        capabilities: RailCapabilities | None = None,
        availability: Availability | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self.international = international
        default = (
            RailCapabilities.for_international_wire()
            if international
            else RailCapabilities.for_domestic_wire()
        )
        self._capabilities = capabilities or default
        self._availability = availability or Availability()
        self._clock = clock

    def __repr__(self) -> str:
        scope = "international" if self.international else "domestic"
        return f"WireRail({scope})"

    @property
    def rail_type(self) -> RailType:
        return RailType.WIRE

    @property
    def capabilities(self) -> RailCapabilities:
        return self._capabilities

    def is_available(self) -> bool:
        return self._availability.check(self._capabilities, self._clock()) is None

    def is_real_time(self) -> bool:
        return self._capabilities.is_real_time()

    def can_process_same_day(self) -> bool:
        """Weekday and before the wire cutoff."""
        now = self._clock()
        local = now.astimezone(ZoneInfo(self._capabilities.cutoff_timezone))
        return local.weekday() < 5 and self._capabilities.is_before_cutoff(now)

    def estimated_fee(self, amount: Money, *, urgent: bool = False) -> Money:
        """Flat fee in the transfer currency; urgent wires cost double."""
        fee = INTERNATIONAL_FEE if self.international else DOMESTIC_FEE
        return Money(fee * 2 if urgent else fee, amount.currency)

    def estimated_settlement(self) -> date:
        today = self._clock().astimezone(ZoneInfo(self._capabilities.cutoff_timezone)).date()
        if self.can_process_same_day() and not self.international:
            return today
        return next_business_day(today)

    def validate_swift_code(self, value: str) -> bool:
        return SwiftCode.try_parse(value) is not None

    def validate_iban(self, value: str) -> bool:
        return Iban.try_parse(value) is not None
