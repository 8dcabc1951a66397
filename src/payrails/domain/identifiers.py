"""Banking identifiers: ABA routing numbers, SWIFT/BIC codes, IBANs.

All three validate at construction and raise
:class:`~payrails.domain.errors.IdentifierError` on failure. There is no
way to hold an unchecked identifier.

INVARIANT: A RoutingNumber's weighted digit sum (3, 7, 1 cycled) is
divisible by 10.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Self

from payrails.domain.errors import IdentifierError, mask_digits

# ---------------------------------------------------------------------------
# ABA routing number
# ---------------------------------------------------------------------------

ROUTING_WEIGHTS: tuple[int, int, int] = (3, 7, 1)

# ABA prefix ranges -> offset subtracted to obtain the Federal Reserve
# district.  00 (U.S. Government) and 80 (traveler's cheques) map to 0.
_PRIMARY = range(1, 13)
_THRIFT = range(21, 33)
_ELECTRONIC = range(61, 73)
_GOVERNMENT = 0
_TRAVELERS_CHEQUE = 80


def routing_checksum(digits: str) -> int:
    """Weighted digit sum of *digits* using the 3-7-1 pattern."""
    return sum(int(d) * ROUTING_WEIGHTS[i % 3] for i, d in enumerate(digits))


def compute_check_digit(prefix: str) -> str:
    """Return the ninth digit that makes *prefix* (8 digits) a valid routing number."""
    if len(prefix) != 8 or not prefix.isdigit():
        raise IdentifierError.routing_length(prefix)
    # The ninth position carries weight 1, so it must cancel the remainder.
    return str((10 - routing_checksum(prefix) % 10) % 10)


@dataclass(frozen=True)
class RoutingNumber:
    """Nine-digit ABA routing transit number."""

    value: str

    def __post_init__(self) -> None:
        digits = re.sub(r"\D", "", str(self.value))
        if len(digits) != 9:
            raise IdentifierError.routing_length(digits or str(self.value))
        if routing_checksum(digits) % 10 != 0:
            raise IdentifierError.routing_checksum(digits)
        object.__setattr__(self, "value", digits)

    @classmethod
    def from_prefix(cls, prefix: str) -> Self:
        """Build from the 8-digit institution identifier plus a computed check digit."""
        return cls(prefix + compute_check_digit(prefix))

    @classmethod
    def try_parse(cls, raw: str) -> Self | None:
        try:
            return cls(raw)
        except IdentifierError:
            return None

    def __str__(self) -> str:
        return self.value

    @property
    def institution_id(self) -> str:
        """First eight digits (the DFI identification used in NACHA fields)."""
        return self.value[:8]

    @property
    def check_digit(self) -> str:
        return self.value[8]

    @property
    def prefix(self) -> int:
        return int(self.value[:2])

    def masked(self) -> str:
        return mask_digits(self.value)

    def get_federal_reserve_district(self) -> int:
        """Federal Reserve district (1-12), or 0 for government/unrecognized prefixes."""
        p = self.prefix
        if p in _PRIMARY:
            return p
        if p in _THRIFT:
            return p - 20
        if p in _ELECTRONIC:
            return p - 60
        return 0

    def is_thrift_institution(self) -> bool:
        return self.prefix in _THRIFT

    def is_government(self) -> bool:
        return self.prefix == _GOVERNMENT

    def is_electronic(self) -> bool:
        return self.prefix in _ELECTRONIC

    def is_valid_for_ach(self) -> bool:
        """Whether the prefix belongs to a range the ACH network routes."""
        p = self.prefix
        return (
            p == _GOVERNMENT
            or p in _PRIMARY
            or p in _THRIFT
            or p in _ELECTRONIC
            or p == _TRAVELERS_CHEQUE
        )


# ---------------------------------------------------------------------------
# SWIFT / BIC
# ---------------------------------------------------------------------------

_LETTERS = re.compile(r"^[A-Z]+$")
_ALNUM = re.compile(r"^[A-Z0-9]+$")
PRIMARY_OFFICE_BRANCH = "XXX"


@dataclass(frozen=True)
class SwiftCode:
    """ISO 9362 business identifier code (8 or 11 characters).

    Layout: bank code (4 letters) + country code (2 letters) +
    location code (2 alphanumerics) + optional branch code (3 alphanumerics).
    """

    value: str

    def __post_init__(self) -> None:
        code = str(self.value).strip().upper()
        if len(code) not in (8, 11):
            raise IdentifierError.swift(code, f"Must be 8 or 11 characters, got {len(code)}")
        bank, country, location, branch = code[:4], code[4:6], code[6:8], code[8:]
        if not _LETTERS.match(bank):
            raise IdentifierError.swift(code, f"Invalid bank code '{bank}' (must be 4 letters)")
        if not _LETTERS.match(country):
            raise IdentifierError.swift(code, f"Invalid ISO 3166-1 country code '{country}'")
        if not _ALNUM.match(location):
            raise IdentifierError.swift(
                code, f"Invalid location code '{location}' (must be alphanumeric)"
            )
        if branch and not _ALNUM.match(branch):
            raise IdentifierError.swift(
                code, f"Invalid branch code '{branch}' (must be alphanumeric)"
            )
        object.__setattr__(self, "value", code)

    @classmethod
    def try_parse(cls, raw: str) -> Self | None:
        try:
            return cls(raw)
        except IdentifierError:
            return None

    def __str__(self) -> str:
        return self.value

    @property
    def bank_code(self) -> str:
        return self.value[:4]

    @property
    def country_code(self) -> str:
        return self.value[4:6]

    @property
    def location_code(self) -> str:
        return self.value[6:8]

    @property
    def branch_code(self) -> str | None:
        return self.value[8:] or None

    def is_primary_office(self) -> bool:
        return self.branch_code in (None, PRIMARY_OFFICE_BRANCH)

    def to_primary_office(self) -> SwiftCode:
        """The 8-character code of the institution's primary office."""
        return SwiftCode(self.value[:8])

    def to_full_format(self) -> SwiftCode:
        """The 11-character form, appending ``XXX`` when no branch is present."""
        if self.branch_code is not None:
            return self
        return SwiftCode(self.value + PRIMARY_OFFICE_BRANCH)

    def is_test_code(self) -> bool:
        return self.location_code[1] == "0"

    def is_passive_participant(self) -> bool:
        return self.location_code[1] == "1"

    def is_same_bank(self, other: SwiftCode) -> bool:
        return self.bank_code == other.bank_code and self.country_code == other.country_code


# ---------------------------------------------------------------------------
# IBAN
# ---------------------------------------------------------------------------

_IBAN_PREFIX = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]+$")


def iban_remainder(iban: str) -> int:
    """ISO 13616 mod-97 remainder of *iban* (already normalized)."""
    rearranged = iban[4:] + iban[:4]
    numeric = "".join(str(int(ch, 36)) for ch in rearranged)
    return int(numeric) % 97


@dataclass(frozen=True)
class Iban:
    """International bank account number."""

    value: str

    def __post_init__(self) -> None:
        code = re.sub(r"\s+", "", str(self.value)).upper()
        if not 15 <= len(code) <= 34:
            raise IdentifierError.iban(code, f"Must be 15 to 34 characters, got {len(code)}")
        if not _IBAN_PREFIX.match(code):
            raise IdentifierError.iban(code, "Must start with a country code and check digits")
        if iban_remainder(code) != 1:
            raise IdentifierError.iban(code, "Failed checksum validation (mod-97)")
        object.__setattr__(self, "value", code)

    @classmethod
    def try_parse(cls, raw: str) -> Self | None:
        try:
            return cls(raw)
        except IdentifierError:
            return None

    def __str__(self) -> str:
        return self.value

    @property
    def country_code(self) -> str:
        return self.value[:2]

    @property
    def check_digits(self) -> str:
        return self.value[2:4]

    @property
    def bban(self) -> str:
        return self.value[4:]

    def formatted(self) -> str:
        """Print format: groups of four separated by spaces."""
        return " ".join(self.value[i : i + 4] for i in range(0, len(self.value), 4))
