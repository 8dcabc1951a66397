"""CheckRail — printed checks with standard clearing."""

from __future__ import annotations

import re
from datetime import date, timedelta

from payrails.domain.capabilities import RailCapabilities
from payrails.domain.types import RailType
from payrails.rails.base import Availability, Clock, system_clock

STALE_AFTER_DAYS = 180
MEMO_MAX_LENGTH = 40

_CHECK_NUMBER = re.compile(r"^\d{1,10}$")


class CheckRail:
    def __init__(
        self,
        *,
        capabilities: RailCapabilities | None = None,
        availability: Availability | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self._capabilities = capabilities or RailCapabilities.for_check()
        self._availability = availability or Availability()
        self._clock = clock

    @property
    def rail_type(self) -> RailType:
        return RailType.CHECK

    @property
    def capabilities(self) -> RailCapabilities:
        return self._capabilities

    def is_available(self) -> bool:
        return self._availability.check(self._capabilities, self._clock()) is None

    def is_real_time(self) -> bool:
        return self._capabilities.is_real_time()

    def validate_check_number(self, value: str) -> bool:
        """1-10 digits, not all zeros."""
        return bool(_CHECK_NUMBER.match(value)) and int(value) > 0

    def stale_date(self, issue_date: date) -> date:
        return issue_date + timedelta(days=STALE_AFTER_DAYS)

    def days_until_stale(self, issue_date: date) -> int:
        """Negative once the check has gone stale."""
        return (self.stale_date(issue_date) - self._clock().date()).days
