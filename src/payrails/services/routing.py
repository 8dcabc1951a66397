"""RoutingService — identifier checks for routing numbers, SWIFT codes, IBANs."""

from __future__ import annotations

from payrails.domain.errors import IdentifierError
from payrails.domain.identifiers import Iban, RoutingNumber, SwiftCode
from payrails.services.base import BaseService
from payrails.services.contracts import (
    IbanCheckData,
    RoutingCheckData,
    SwiftCheckData,
    dump_validated,
)
from payrails.services.result import ServiceResult
from payrails.services.telemetry import traced


class RoutingService(BaseService):
    """Validates banking identifiers and reports what they encode."""

    @traced
    def check_routing(self, value: str) -> ServiceResult:
        op = "check_routing"
        try:
            routing = RoutingNumber(value)
        except IdentifierError as exc:
            return ServiceResult.failure(op, exc)
        data = {
            "routing_number": routing.value,
            "masked": routing.masked(),
            "federal_reserve_district": routing.get_federal_reserve_district(),
            "thrift": routing.is_thrift_institution(),
            "government": routing.is_government(),
            "electronic": routing.is_electronic(),
            "ach_eligible": routing.is_valid_for_ach(),
        }
        return ServiceResult(ok=True, op=op, data=dump_validated(RoutingCheckData, data))

    @traced
    def check_swift(self, value: str) -> ServiceResult:
        op = "check_swift"
        try:
            swift = SwiftCode(value)
        except IdentifierError as exc:
            return ServiceResult.failure(op, exc)
        data = {
            "swift_code": swift.value,
            "bank_code": swift.bank_code,
            "country_code": swift.country_code,
            "location_code": swift.location_code,
            "branch_code": swift.branch_code,
            "primary_office": swift.is_primary_office(),
            "test_code": swift.is_test_code(),
        }
        warnings = ["SWIFT code is a test code"] if swift.is_test_code() else []
        return ServiceResult(
            ok=True, op=op, data=dump_validated(SwiftCheckData, data), warnings=warnings
        )

    @traced
    def check_iban(self, value: str) -> ServiceResult:
        op = "check_iban"
        try:
            iban = Iban(value)
        except IdentifierError as exc:
            return ServiceResult.failure(op, exc)
        data = {
            "iban": iban.value,
            "formatted": iban.formatted(),
            "country_code": iban.country_code,
            "check_digits": iban.check_digits,
            "bban": iban.bban,
        }
        return ServiceResult(ok=True, op=op, data=dump_validated(IbanCheckData, data))
