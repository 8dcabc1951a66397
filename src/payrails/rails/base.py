"""PaymentRail protocol and the pieces every rail composes.

Rails do not share a base class.  Each one holds a
:class:`~payrails.domain.capabilities.RailCapabilities`, a clock, and an
:class:`Availability` policy, and satisfies :class:`PaymentRail`
structurally.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol, runtime_checkable
from zoneinfo import ZoneInfo

from payrails.domain.capabilities import RailCapabilities
from payrails.domain.errors import RailUnavailableError
from payrails.domain.types import RailType

type Clock = Callable[[], datetime]


def system_clock() -> datetime:
    return datetime.now(UTC)


def fixed_clock(moment: datetime) -> Clock:
    """A clock frozen at *moment* (naive values are taken as UTC)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return lambda: moment


def generate_reference(prefix: str) -> str:
    """``PREFIX-`` followed by 12 uppercase hex characters."""
    return f"{prefix}-{uuid.uuid4().hex[:12].upper()}"


def next_business_day(day: date) -> date:
    """The first weekday strictly after *day*."""
    day += timedelta(days=1)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


@runtime_checkable
class PaymentRail(Protocol):
    """The contract RailSelector and RailValidator rely on."""

    @property
    def rail_type(self) -> RailType: ...

    @property
    def capabilities(self) -> RailCapabilities: ...

    def is_available(self) -> bool: ...

    def is_real_time(self) -> bool: ...


@dataclass(frozen=True)
class Availability:
    """Whether a rail accepts work right now.

    A disabled rail is never available.  When ``enforce_cutoff`` is set
    the rail also closes at its daily cutoff.
    """

    enabled: bool = True
    enforce_cutoff: bool = False

    def check(self, capabilities: RailCapabilities, now: datetime) -> str | None:
        """Reason the rail is closed at *now*, or None when it is open."""
        if not self.enabled:
            return "Disabled by configuration"
        if self.enforce_cutoff and not capabilities.is_before_cutoff(now):
            return "Cutoff time has passed for today"
        return None

    def ensure(self, capabilities: RailCapabilities, now: datetime) -> None:
        """Raise :class:`RailUnavailableError` when the rail is closed."""
        reason = self.check(capabilities, now)
        if reason is None:
            return
        if not self.enabled:
            raise RailUnavailableError.disabled(capabilities.rail_type)
        raise RailUnavailableError.cutoff_passed(
            capabilities.rail_type, next_opening(capabilities, now)
        )


def next_opening(capabilities: RailCapabilities, now: datetime) -> datetime:
    """Start of the next business day in the rail's cutoff timezone."""
    tz = ZoneInfo(capabilities.cutoff_timezone)
    local = now.astimezone(tz)
    return datetime.combine(next_business_day(local.date()), time(0, 0), tzinfo=tz)
