"""RtgsRail — real-time gross settlement through a national system.

Each system has its own currency, minimum, timezone, and operating
window.  Fedwire's window opens the previous evening, so its open time is
later than its close time.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from payrails.domain.capabilities import RailCapabilities
from payrails.domain.errors import RailUnavailableError
from payrails.domain.money import Money
from payrails.domain.types import RailType, RtgsSystem
from payrails.rails.base import Availability, Clock, system_clock


@dataclass(frozen=True)
class RtgsProfile:
    currency: str
    minimum: int
    timezone: str
    opens: time
    closes: time

    @property
    def overnight(self) -> bool:
        return self.opens > self.closes


SYSTEM_PROFILES: dict[RtgsSystem, RtgsProfile] = {
    RtgsSystem.FEDWIRE: RtgsProfile("USD", 100_000, "America/New_York", time(21, 0), time(18, 30)),
    RtgsSystem.CHAPS: RtgsProfile("GBP", 1_000_000, "Europe/London", time(6, 0), time(18, 0)),
    RtgsSystem.TARGET2: RtgsProfile("EUR", 100_000, "Europe/Berlin", time(7, 0), time(18, 0)),
    RtgsSystem.RTGS_INDIA: RtgsProfile(
        "INR", 20_000_000, "Asia/Kolkata", time(9, 0), time(16, 30)
    ),
}


def rtgs_capabilities(system: RtgsSystem) -> RailCapabilities:
    """Stock RTGS capabilities narrowed to *system*'s currency, minimum, and close."""
    profile = SYSTEM_PROFILES[system]
    return replace(
        RailCapabilities.for_rtgs(Money(profile.minimum, profile.currency)),
        supported_currencies=(profile.currency,),
        cutoff_hour=profile.closes.hour,
        cutoff_minute=profile.closes.minute,
        cutoff_timezone=profile.timezone,
    )


class RtgsRail:
    """High-value, irrevocable, real-time settlement."""

    def __init__(
        self,
        system: RtgsSystem = RtgsSystem.FEDWIRE,
        *,
        capabilities: RailCapabilities | None = None,
        availability: Availability | None = None,
        clock: Clock = system_clock,
        enforce_operating_hours: bool = False,
    ) -> None:
        self.system = system
        self.profile = SYSTEM_PROFILES[system]
        self._capabilities = capabilities or rtgs_capabilities(system)
        self._availability = availability or Availability()
        self._clock = clock
        self.enforce_operating_hours = enforce_operating_hours

    def __repr__(self) -> str:
        return f"RtgsRail({self.system.value})"

    @property
    def rail_type(self) -> RailType:
        return RailType.RTGS

    @property
    def capabilities(self) -> RailCapabilities:
        return self._capabilities

    @property
    def minimum_amount(self) -> int:
        return self.profile.minimum

    def is_available(self) -> bool:
        now = self._clock()
        if self._availability.check(self._capabilities, now) is not None:
            return False
        return not self.enforce_operating_hours or self.is_within_operating_hours(now)

    def is_real_time(self) -> bool:
        return self._capabilities.is_real_time()

    def ensure_available(self) -> None:
        now = self._clock()
        self._availability.ensure(self._capabilities, now)
        if self.enforce_operating_hours and not self.is_within_operating_hours(now):
            raise RailUnavailableError(
                self.rail_type,
                f"Outside {self.system.value} operating hours",
                expected_availability=self.next_available_window(now),
            )

    def is_within_operating_hours(self, now: datetime | None = None) -> bool:
        """Weekday and inside the system's open/close window."""
        local = (now or self._clock()).astimezone(ZoneInfo(self.profile.timezone))
        if local.weekday() >= 5:
            return False
        current = local.time()
        if self.profile.overnight:
            return current >= self.profile.opens or current <= self.profile.closes
        return self.profile.opens <= current <= self.profile.closes

    def next_available_window(self, now: datetime | None = None) -> datetime:
        """*now* if open, else the next weekday opening in the system's timezone."""
        now = now or self._clock()
        if self.is_within_operating_hours(now):
            return now
        tz = ZoneInfo(self.profile.timezone)
        local = now.astimezone(tz)
        opening = datetime.combine(local.date(), self.profile.opens, tzinfo=tz)
        if opening <= local:
            opening += timedelta(days=1)
        while opening.weekday() >= 5:
            opening += timedelta(days=1)
        return opening
