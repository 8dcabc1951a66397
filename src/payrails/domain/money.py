"""Money in integer minor units.

Amounts never pass through ``float``: decimal strings are parsed with
:class:`decimal.Decimal` and stored as ``int`` cents (or the currency's
minor unit, assumed to be two decimal places).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from payrails.domain.errors import format_minor_units

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


@dataclass(frozen=True)
class Money:
    """An amount of *currency* expressed in minor units.

    Ordering compares magnitudes only and ignores currency; callers that
    need currency-aware comparison must check :meth:`same_currency` first.
    """

    amount: int
    currency: str = "USD"

    def __post_init__(self) -> None:
        code = self.currency.upper()
        if not _CURRENCY_RE.match(code):
            raise ValueError(f"Invalid currency code: {self.currency!r}")
        object.__setattr__(self, "currency", code)
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError("Money amount must be an int in minor units")

    @classmethod
    def of(cls, value: str | int | Decimal, currency: str = "USD") -> Money:
        """Build from a major-unit decimal value, e.g. ``Money.of("12.34")``."""
        try:
            dec = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValueError(f"Invalid amount: {value!r}") from exc
        minor = (dec * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return cls(int(minor), currency)

    @classmethod
    def zero(cls, currency: str = "USD") -> Money:
        return cls(0, currency)

    def same_currency(self, other: Money) -> bool:
        return self.currency == other.currency

    def __add__(self, other: Money) -> Money:
        if not self.same_currency(other):
            raise ValueError(f"Cannot add {other.currency} to {self.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __lt__(self, other: Money) -> bool:
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{format_minor_units(self.amount)} {self.currency}"

    @property
    def is_zero(self) -> bool:
        return self.amount == 0
