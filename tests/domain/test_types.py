"""Tests for rail and ACH classification enums."""

from __future__ import annotations

import pytest

from payrails.domain.types import (
    AccountType,
    AchReturnCode,
    RailType,
    SecCode,
    TransactionCode,
)


class TestRailType:
    def test_labels(self) -> None:
        assert RailType.ACH.label == "ACH"
        assert RailType.VIRTUAL_CARD.label == "Virtual Card"

    def test_values(self) -> None:
        assert [r.value for r in RailType] == ["ach", "wire", "check", "rtgs", "virtual_card"]


class TestTransactionCode:
    @pytest.mark.parametrize(
        ("code", "credit", "prenote", "zero"),
        [
            ("22", True, False, False),
            ("23", True, True, False),
            ("24", True, False, True),
            ("27", False, False, False),
            ("28", False, True, False),
            ("39", False, False, True),
        ],
    )
    def test_flags(self, code: str, credit: bool, prenote: bool, zero: bool) -> None:
        tc = TransactionCode(code)
        assert tc.is_credit is credit
        assert tc.is_debit is not credit
        assert tc.is_prenote is prenote
        assert tc.is_zero_dollar is zero

    def test_account_type(self) -> None:
        assert TransactionCode.SAVINGS_CREDIT.account_type is AccountType.SAVINGS
        assert TransactionCode.CHECKING_DEBIT.account_type is AccountType.CHECKING

    def test_for_entry(self) -> None:
        assert TransactionCode.for_entry(AccountType.SAVINGS, debit=True) == "37"
        assert TransactionCode.for_entry(AccountType.CHECKING, debit=True, prenote=True) == "28"
        assert TransactionCode.for_entry(AccountType.CHECKING, debit=False) == "22"


class TestSecCode:
    def test_consumer_and_corporate(self) -> None:
        assert SecCode.PPD.is_consumer
        assert SecCode.CCD.is_corporate
        assert not SecCode.IAT.is_consumer
        assert not SecCode.IAT.is_corporate

    def test_unknown_code(self) -> None:
        with pytest.raises(ValueError):
            SecCode("XYZ")


class TestAchReturnCode:
    def test_catalog(self) -> None:
        assert len(AchReturnCode) == 59
        assert AchReturnCode("R17").description == "File Record Edit Criteria"
        assert all(code.description for code in AchReturnCode)

    def test_insufficient_funds_is_retriable(self) -> None:
        for code in (AchReturnCode.R01, AchReturnCode.R09):
            assert code.is_insufficient_funds
            assert code.is_retriable
        assert not AchReturnCode.R02.is_retriable

    @pytest.mark.parametrize(
        ("code", "administrative", "authorization", "account_update"),
        [
            ("R01", True, False, False),
            ("R03", True, False, True),
            ("R08", False, True, False),
            ("R12", False, False, True),
            ("R29", False, True, False),
            ("R31", False, False, False),
        ],
    )
    def test_flags(
        self, code: str, administrative: bool, authorization: bool, account_update: bool
    ) -> None:
        rc = AchReturnCode(code)
        assert rc.is_administrative is administrative
        assert rc.is_authorization_issue is authorization
        assert rc.requires_account_update is account_update

    def test_suggested_action(self) -> None:
        assert AchReturnCode.R04.suggested_action == "Verify and correct account/routing number"
        assert AchReturnCode.R28.suggested_action == AchReturnCode.R04.suggested_action
        assert AchReturnCode.R16.suggested_action == "Account is frozen; contact customer"
        assert AchReturnCode.R31.suggested_action == (
            "Review and resolve based on specific circumstances"
        )

    def test_unknown_code(self) -> None:
        with pytest.raises(ValueError):
            AchReturnCode("R18")
