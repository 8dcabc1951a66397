"""RailCapabilities — declarative description of what a rail supports.

Capability flags are explicit fields.  ``additional_capabilities`` is a
read-only mapping kept for genuinely dynamic extras; the only keys read by
selection logic are:

- ``supports_same_day``: ACH same-day window is offered.
- ``cost_rank``: relative cost (1 = cheapest) overriding the per-rail default.

Amount limits compare magnitudes only.  A limit denominated in USD is
applied unchanged to a EUR amount: no currency conversion happens here.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any
from zoneinfo import ZoneInfo

from payrails.domain.money import Money
from payrails.domain.types import RailType

DEFAULT_CUTOFF_TIMEZONE = "America/New_York"
MAX_ACH_AMOUNT = 99_999_999_999


@dataclass(frozen=True)
class RailCapabilities:
    """What a rail can do, its amount limits, and its timing characteristics."""

    rail_type: RailType
    supported_currencies: tuple[str, ...]
    minimum_amount: Money | None = None
    maximum_amount: Money | None = None
    supports_credit: bool = True
    supports_debit: bool = True
    supports_scheduled_payments: bool = True
    supports_recurring: bool = True
    supports_batch_processing: bool = True
    supports_refunds: bool = False
    supports_partial_refunds: bool = False
    real_time: bool = False
    requires_prenotification: bool = False
    requires_beneficiary_address: bool = False
    typical_settlement_days: int = 1
    cutoff_hour: int = 17
    cutoff_minute: int = 0
    cutoff_timezone: str = DEFAULT_CUTOFF_TIMEZONE
    required_fields: tuple[str, ...] = ()
    additional_capabilities: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "supported_currencies",
            tuple(c.upper() for c in self.supported_currencies),
        )
        object.__setattr__(self, "required_fields", tuple(self.required_fields))
        object.__setattr__(
            self, "additional_capabilities", MappingProxyType(dict(self.additional_capabilities))
        )
        if not 0 <= self.cutoff_hour <= 23 or not 0 <= self.cutoff_minute <= 59:
            raise ValueError(f"Invalid cutoff {self.cutoff_hour}:{self.cutoff_minute}")
        if self.typical_settlement_days < 0:
            raise ValueError("Settlement days cannot be negative")

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def supports_currency(self, currency: str) -> bool:
        return currency.upper() in self.supported_currencies

    def is_amount_within_limits(self, amount: Money) -> bool:
        """Whether *amount* is in a supported currency and inside the bounds.

        Bounds are compared by magnitude only, even when the bound's
        currency differs from *amount*'s.
        """
        if not self.supports_currency(amount.currency):
            return False
        if self.minimum_amount is not None and amount.amount < self.minimum_amount.amount:
            return False
        if self.maximum_amount is not None and amount.amount > self.maximum_amount.amount:
            return False
        return True

    def is_before_cutoff(self, now: datetime | None = None) -> bool:
        """Whether *now* (default: current time) is before today's local cutoff.

        Naive datetimes are interpreted as UTC.
        """
        now = now or datetime.now(UTC)
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        local = now.astimezone(ZoneInfo(self.cutoff_timezone))
        cutoff = local.replace(
            hour=self.cutoff_hour,
            minute=self.cutoff_minute,
            second=0,
            microsecond=0,
        )
        return local < cutoff

    def cutoff_formatted(self) -> str:
        return f"{self.cutoff_hour:02d}:{self.cutoff_minute:02d} {self.cutoff_timezone}"

    def has_capability(self, key: str) -> bool:
        return self.additional_capabilities.get(key) is True

    def get_capability(self, key: str, default: Any = None) -> Any:
        return self.additional_capabilities.get(key, default)

    def is_real_time(self) -> bool:
        return self.typical_settlement_days == 0 or self.real_time

    def headroom_ratio(self, amount: int) -> float:
        """Fraction of the maximum consumed by *amount* (0.0 when unbounded)."""
        if self.maximum_amount is None or self.maximum_amount.amount <= 0:
            return 0.0
        return amount / self.maximum_amount.amount

    # ------------------------------------------------------------------
    # Stock profiles
    # ------------------------------------------------------------------

    @classmethod
    def for_ach(cls) -> RailCapabilities:
        return cls(
            rail_type=RailType.ACH,
            supported_currencies=("USD",),
            minimum_amount=Money(1, "USD"),
            maximum_amount=Money(MAX_ACH_AMOUNT, "USD"),
            supports_refunds=True,
            supports_partial_refunds=True,
            typical_settlement_days=2,
            required_fields=("routing_number", "account_number", "account_type"),
            additional_capabilities={
                "supports_addenda": True,
                "supports_same_day": True,
                "same_day_cutoff_hour": 14,
            },
        )

    @classmethod
    def for_domestic_wire(cls) -> RailCapabilities:
        return cls(
            rail_type=RailType.WIRE,
            supported_currencies=("USD",),
            minimum_amount=Money(100, "USD"),
            maximum_amount=Money(99_999_999_999, "USD"),
            supports_debit=False,
            supports_recurring=False,
            supports_batch_processing=False,
            real_time=True,
            requires_beneficiary_address=True,
            typical_settlement_days=0,
            required_fields=("routing_number", "account_number", "beneficiary_name"),
            additional_capabilities={"supports_intermediary_bank": True},
        )

    @classmethod
    def for_international_wire(cls) -> RailCapabilities:
        return cls(
            rail_type=RailType.WIRE,
            supported_currencies=(
                "USD",
                "EUR",
                "GBP",
                "MYR",
                "SGD",
                "CAD",
                "AUD",
                "JPY",
                "CHF",
            ),
            minimum_amount=Money(10_000, "USD"),
            maximum_amount=Money(99_999_999_999, "USD"),
            supports_debit=False,
            supports_recurring=False,
            supports_batch_processing=False,
            requires_beneficiary_address=True,
            typical_settlement_days=2,
            cutoff_hour=15,
            required_fields=(
                "swift_code",
                "beneficiary_name",
                "beneficiary_bank_name",
                "beneficiary_address",
            ),
            additional_capabilities={
                "supports_iban": True,
                "requires_purpose_of_payment": True,
            },
        )

    @classmethod
    def for_check(cls) -> RailCapabilities:
        return cls(
            rail_type=RailType.CHECK,
            supported_currencies=("USD",),
            minimum_amount=Money(1, "USD"),
            maximum_amount=Money(999_999_999, "USD"),
            supports_debit=False,
            requires_beneficiary_address=True,
            typical_settlement_days=5,
            cutoff_hour=23,
            cutoff_minute=59,
            required_fields=("payee_name", "payee_address"),
            additional_capabilities={"supports_positive_pay": True},
        )

    @classmethod
    def for_rtgs(cls, minimum: Money | None = None) -> RailCapabilities:
        return cls(
            rail_type=RailType.RTGS,
            supported_currencies=("USD",),
            minimum_amount=minimum or Money(100_000, "USD"),
            maximum_amount=None,
            supports_debit=False,
            supports_scheduled_payments=False,
            supports_recurring=False,
            supports_batch_processing=False,
            real_time=True,
            requires_beneficiary_address=True,
            typical_settlement_days=0,
            cutoff_hour=18,
            required_fields=("routing_number", "account_number", "beneficiary_name"),
            additional_capabilities={"is_irrevocable": True},
        )

    @classmethod
    def for_virtual_card(cls) -> RailCapabilities:
        return cls(
            rail_type=RailType.VIRTUAL_CARD,
            supported_currencies=("USD", "EUR", "GBP", "CAD"),
            minimum_amount=Money(100, "USD"),
            maximum_amount=Money(99_999_999, "USD"),
            supports_debit=False,
            supports_refunds=True,
            supports_partial_refunds=True,
            typical_settlement_days=2,
            cutoff_hour=23,
            cutoff_minute=59,
            required_fields=("vendor_email", "vendor_name"),
            additional_capabilities={
                "supports_single_use": True,
                "supports_merchant_lock": True,
            },
        )

