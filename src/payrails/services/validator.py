"""RailValidator — check a payment request against one rail's rules.

Generic checks run first (beneficiary, currency, limits, identifiers,
sanctions, availability), then the checks specific to the rail type.
Every problem is collected; nothing short-circuits.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from payrails.domain.errors import IdentifierError, RailValidationError, format_minor_units
from payrails.domain.identifiers import Iban, RoutingNumber, SwiftCode
from payrails.domain.selection import RailTransactionRequest
from payrails.domain.types import RailType

if TYPE_CHECKING:
    from payrails.rails.base import PaymentRail

logger = logging.getLogger(__name__)

BENEFICIARY_NAME_MAX = 35
CHECK_MEMO_MAX = 40
ACCOUNT_NUMBER_MIN = 4
ACCOUNT_NUMBER_MAX = 17
INTERNATIONAL_WIRE_MINIMUM = 10_000
RTGS_FLOOR = 100_000
SANCTIONED_COUNTRIES = frozenset({"KP", "IR", "SY", "CU", "VE"})


class RailValidator:
    """Collects validation messages for a :class:`RailTransactionRequest`."""

    def get_validation_errors(
        self, request: RailTransactionRequest, rail: PaymentRail
    ) -> list[str]:
        """Ordered list of problems; empty means valid."""
        errors: list[str] = []
        errors += self._beneficiary(request)
        errors += self._amount(request, rail)
        if request.routing_number is not None:
            errors += self.validate_routing_number(request.routing_number)
            if rail.rail_type is RailType.ACH:
                errors += self._ach_routable(request.routing_number)
        if request.account_number is not None:
            errors += self.validate_bank_account(request.account_number)
        if request.swift_code is not None:
            errors += _identifier_errors(SwiftCode, request.swift_code)
        if request.iban is not None:
            errors += _identifier_errors(Iban, request.iban)
        errors += self.screen_sanctions(request.beneficiary_country)
        if not rail.is_available():
            errors.append(f"{rail.rail_type.label} rail is currently unavailable")
        errors += self._rail_specific(request, rail)
        if errors:
            logger.debug(
                "%s request failed validation with %d error(s)",
                rail.rail_type.value,
                len(errors),
            )
        return errors

    def validate(self, request: RailTransactionRequest, rail: PaymentRail) -> None:
        """Raise :class:`RailValidationError` carrying every problem found."""
        errors = self.get_validation_errors(request, rail)
        if errors:
            raise RailValidationError.for_rail(rail.rail_type, errors)

    def is_valid(self, request: RailTransactionRequest, rail: PaymentRail) -> bool:
        return not self.get_validation_errors(request, rail)

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------

    def validate_routing_number(self, value: str) -> list[str]:
        if not value.isdigit():
            return ["Routing number must contain only digits"]
        return _identifier_errors(RoutingNumber, value)

    def validate_bank_account(self, account_number: str) -> list[str]:
        errors: list[str] = []
        if len(account_number) < ACCOUNT_NUMBER_MIN:
            errors.append("Account number is too short")
        if len(account_number) > ACCOUNT_NUMBER_MAX:
            errors.append(
                f"Account number exceeds maximum length ({ACCOUNT_NUMBER_MAX} characters)"
            )
        return errors

    def screen_sanctions(self, country: str | None) -> list[str]:
        """Block payments to embargoed beneficiary countries."""
        if country is None or country.upper() not in SANCTIONED_COUNTRIES:
            return []
        return [f"Transactions to {country.upper()} are not permitted due to sanctions"]

    # ------------------------------------------------------------------
    # Generic checks
    # ------------------------------------------------------------------

    @staticmethod
    def _beneficiary(request: RailTransactionRequest) -> list[str]:
        name = request.beneficiary_name.strip()
        if not name:
            return ["Beneficiary name is required"]
        if len(name) > BENEFICIARY_NAME_MAX:
            return [
                f"Beneficiary name exceeds maximum length ({BENEFICIARY_NAME_MAX} characters)"
            ]
        return []

    @staticmethod
    def _amount(request: RailTransactionRequest, rail: PaymentRail) -> list[str]:
        caps = rail.capabilities
        amount = request.amount
        label = rail.rail_type.label
        errors: list[str] = []
        if not caps.supports_currency(amount.currency):
            errors.append(f"Currency {amount.currency} is not supported by the {label} rail")
        if amount.amount <= 0:
            errors.append("Amount must be positive")
        if caps.minimum_amount is not None and amount < caps.minimum_amount:
            errors.append(f"Amount is below the {label} minimum of {caps.minimum_amount}")
        if caps.maximum_amount is not None and amount > caps.maximum_amount:
            errors.append(f"Amount exceeds the {label} maximum of {caps.maximum_amount}")
        return errors

    @staticmethod
    def _ach_routable(value: str) -> list[str]:
        routing = RoutingNumber.try_parse(value)
        if routing is None or routing.is_valid_for_ach():
            return []
        return [f"Routing number {routing.masked()} is not in an ACH-routable range"]

    # ------------------------------------------------------------------
    # Rail-specific checks
    # ------------------------------------------------------------------

    def _rail_specific(self, request: RailTransactionRequest, rail: PaymentRail) -> list[str]:
        match rail.rail_type:
            case RailType.ACH:
                return self._ach(request)
            case RailType.WIRE:
                return self._wire(request)
            case RailType.CHECK:
                return self._check(request)
            case RailType.RTGS:
                return self._rtgs(request)
            case RailType.VIRTUAL_CARD:
                return self._virtual_card(request)
        return []

    @staticmethod
    def _ach(request: RailTransactionRequest) -> list[str]:
        errors: list[str] = []
        if request.amount.currency != "USD":
            errors.append("ACH transactions must be in USD")
        if not request.metadata.get("sec_code"):
            errors.append("SEC code is required for ACH transactions")
        return errors

    @staticmethod
    def _wire(request: RailTransactionRequest) -> list[str]:
        if not request.is_international:
            return []
        errors: list[str] = []
        if not request.purpose_of_payment:
            errors.append("Purpose of payment is required for international wires")
        if not request.beneficiary_address:
            errors.append("Beneficiary address is required for international wires")
        # Same magnitude in whatever currency the request is denominated in.
        if request.amount.amount < INTERNATIONAL_WIRE_MINIMUM:
            minimum = format_minor_units(INTERNATIONAL_WIRE_MINIMUM)
            errors.append(
                f"International wires require at least {minimum} {request.amount.currency}"
            )
        return errors

    @staticmethod
    def _check(request: RailTransactionRequest) -> list[str]:
        errors: list[str] = []
        if not request.beneficiary_address:
            errors.append("Payee address is required for check issuance")
        if request.memo is not None and len(request.memo) > CHECK_MEMO_MAX:
            errors.append(f"Check memo exceeds maximum length ({CHECK_MEMO_MAX} characters)")
        return errors

    @staticmethod
    def _rtgs(request: RailTransactionRequest) -> list[str]:
        if request.amount.amount < RTGS_FLOOR:
            return [
                "RTGS is for high-value transactions only "
                f"(minimum {format_minor_units(RTGS_FLOOR)} {request.amount.currency})"
            ]
        return []

    @staticmethod
    def _virtual_card(request: RailTransactionRequest) -> list[str]:
        if not request.metadata.get("vendor_id"):
            return ["Vendor ID is required for virtual card issuance"]
        return []


def _identifier_errors(kind: type[RoutingNumber | SwiftCode | Iban], value: str) -> list[str]:
    try:
        kind(value)
    except IdentifierError as exc:
        return [exc.message]
    return []
