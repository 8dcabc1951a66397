"""Tests for RoutingNumber, SwiftCode, and Iban."""

from __future__ import annotations

import random

import pytest

from payrails.domain.errors import IdentifierError
from payrails.domain.identifiers import (
    Iban,
    RoutingNumber,
    SwiftCode,
    compute_check_digit,
    routing_checksum,
)

# ---------------------------------------------------------------------------
# RoutingNumber
# ---------------------------------------------------------------------------

_PREFIXES = [f"{random.Random(seed).randrange(10**8):08d}" for seed in range(64)]


class TestRoutingNumber:
    def test_valid(self) -> None:
        routing = RoutingNumber("021000021")
        assert routing.value == "021000021"
        assert routing_checksum(routing.value) % 10 == 0

    def test_checksum_failure(self) -> None:
        with pytest.raises(IdentifierError) as exc_info:
            RoutingNumber("021000022")
        assert exc_info.value.reason == "Failed checksum validation (mod-10)"

    def test_error_masks_all_but_last_four(self) -> None:
        with pytest.raises(IdentifierError) as exc_info:
            RoutingNumber("021000022")
        assert "021000022" not in exc_info.value.message
        assert "*****0022" in exc_info.value.message

    def test_wrong_length(self) -> None:
        with pytest.raises(IdentifierError, match="Must be exactly 9 digits"):
            RoutingNumber("12345")

    def test_separators_stripped(self) -> None:
        assert RoutingNumber("0210-0002-1").value == "021000021"

    def test_from_prefix_computes_check_digit(self) -> None:
        assert compute_check_digit("02100002") == "1"
        assert RoutingNumber.from_prefix("02100002").value == "021000021"

    def test_compute_check_digit_rejects_bad_prefix(self) -> None:
        with pytest.raises(IdentifierError):
            compute_check_digit("0210")

    @pytest.mark.parametrize("prefix", _PREFIXES)
    def test_adjacent_check_digits_fail(self, prefix: str) -> None:
        routing = RoutingNumber.from_prefix(prefix)
        assert routing_checksum(routing.value) % 10 == 0
        last = int(routing.value[-1])
        for step in (1, -1):
            assert RoutingNumber.try_parse(prefix + str((last + step) % 10)) is None

    def test_try_parse(self) -> None:
        assert RoutingNumber.try_parse("021000022") is None
        assert RoutingNumber.try_parse("011000015") == RoutingNumber("011000015")

    def test_parts(self) -> None:
        routing = RoutingNumber("021000021")
        assert routing.institution_id == "02100002"
        assert routing.check_digit == "1"
        assert routing.masked() == "*****0021"


class TestRoutingClassification:
    def test_primary_district(self) -> None:
        routing = RoutingNumber("021000021")
        assert routing.get_federal_reserve_district() == 2
        assert not routing.is_thrift_institution()
        assert routing.is_valid_for_ach()

    def test_thrift(self) -> None:
        routing = RoutingNumber.from_prefix("22100000")
        assert routing.is_thrift_institution()
        assert routing.get_federal_reserve_district() == 2

    def test_electronic(self) -> None:
        routing = RoutingNumber.from_prefix("61100000")
        assert routing.is_electronic()
        assert routing.get_federal_reserve_district() == 1

    def test_government(self) -> None:
        routing = RoutingNumber.from_prefix("00000000")
        assert routing.is_government()
        assert routing.get_federal_reserve_district() == 0
        assert routing.is_valid_for_ach()

    def test_unrouted_prefix(self) -> None:
        routing = RoutingNumber.from_prefix("50000000")
        assert routing.get_federal_reserve_district() == 0
        assert not routing.is_valid_for_ach()


# ---------------------------------------------------------------------------
# SwiftCode
# ---------------------------------------------------------------------------


class TestSwiftCode:
    def test_eleven_characters(self) -> None:
        swift = SwiftCode("DEUTDEFF500")
        assert swift.bank_code == "DEUT"
        assert swift.country_code == "DE"
        assert swift.location_code == "FF"
        assert swift.branch_code == "500"
        assert not swift.is_primary_office()
        assert swift.to_primary_office() == SwiftCode("DEUTDEFF")

    def test_eight_characters_normalized(self) -> None:
        swift = SwiftCode(" deutdeff ")
        assert swift.value == "DEUTDEFF"
        assert swift.branch_code is None
        assert swift.is_primary_office()
        assert swift.to_full_format().value == "DEUTDEFFXXX"

    def test_xxx_branch_is_primary_office(self) -> None:
        assert SwiftCode("DEUTDEFFXXX").is_primary_office()

    def test_test_and_passive_codes(self) -> None:
        assert SwiftCode("DEUTDEF0").is_test_code()
        assert SwiftCode("DEUTDEF1").is_passive_participant()
        assert not SwiftCode("DEUTDEFF").is_test_code()

    def test_same_bank(self) -> None:
        assert SwiftCode("DEUTDEFF").is_same_bank(SwiftCode("DEUTDEFF500"))
        assert not SwiftCode("DEUTDEFF").is_same_bank(SwiftCode("DEUTGB2L"))

    @pytest.mark.parametrize(
        ("raw", "reason"),
        [
            ("DEUT", "Must be 8 or 11 characters, got 4"),
            ("DEU1DEFF", "Invalid bank code 'DEU1' (must be 4 letters)"),
            ("DEUT1EFF", "Invalid ISO 3166-1 country code '1E'"),
            ("DEUTDEF!", "Invalid location code 'F!' (must be alphanumeric)"),
            ("DEUTDEFF5_0", "Invalid branch code '5_0' (must be alphanumeric)"),
        ],
    )
    def test_invalid(self, raw: str, reason: str) -> None:
        with pytest.raises(IdentifierError) as exc_info:
            SwiftCode(raw)
        assert exc_info.value.reason == reason


# ---------------------------------------------------------------------------
# Iban
# ---------------------------------------------------------------------------


class TestIban:
    def test_valid_with_spaces(self) -> None:
        iban = Iban("GB82 WEST 1234 5698 7654 32")
        assert iban.value == "GB82WEST12345698765432"
        assert iban.country_code == "GB"
        assert iban.check_digits == "82"
        assert iban.bban == "WEST12345698765432"

    def test_formatted(self) -> None:
        assert Iban("DE89370400440532013000").formatted() == "DE89 3704 0044 0532 0130 00"

    def test_lowercase_accepted(self) -> None:
        assert Iban("gb82west12345698765432").value == "GB82WEST12345698765432"

    def test_checksum_failure(self) -> None:
        with pytest.raises(IdentifierError, match=r"mod-97"):
            Iban("GB83WEST12345698765432")

    def test_too_short(self) -> None:
        with pytest.raises(IdentifierError) as exc_info:
            Iban("GB82WEST")
        assert exc_info.value.reason == "Must be 15 to 34 characters, got 8"

    def test_bad_prefix(self) -> None:
        with pytest.raises(IdentifierError, match="country code and check digits"):
            Iban("1282WEST12345698765432")

    def test_try_parse(self) -> None:
        assert Iban.try_parse("GB83WEST12345698765432") is None
