"""Tests for AchEntry, AchBatch, and AchFile value objects."""

from __future__ import annotations

from dataclasses import replace

import pytest

from payrails.domain.ach import AchEntry, AchFile, build_trace_number
from payrails.domain.errors import AchValidationError
from payrails.domain.types import AccountType, FileStatus, TransactionCode
from tests.conftest import ODFI, RECEIVER, make_batch, make_file


class TestAchEntry:
    def test_credit_factory(self) -> None:
        entry = AchEntry.credit("E1", RECEIVER, "123456789", 1234, "JANE DOE")
        assert entry.transaction_code is TransactionCode.CHECKING_CREDIT
        assert entry.is_credit
        assert entry.account_type is AccountType.CHECKING

    def test_savings_debit_factory(self) -> None:
        entry = AchEntry.debit(
            "E1", RECEIVER, "987654321", 500, "ACME", account_type=AccountType.SAVINGS
        )
        assert entry.transaction_code is TransactionCode.SAVINGS_DEBIT
        assert entry.is_debit

    def test_prenote_forces_zero_amount(self) -> None:
        entry = AchEntry.prenote("E1", RECEIVER, "123456789", "JANE DOE")
        assert entry.transaction_code is TransactionCode.CHECKING_CREDIT_PRENOTE
        assert entry.amount == 0
        assert entry.is_prenote

    def test_zero_dollar_code_overrides_amount(self) -> None:
        entry = AchEntry(
            "E1", TransactionCode.CHECKING_CREDIT_ZERO, RECEIVER, "123456789", 999, "JANE"
        )
        assert entry.amount == 0

    def test_collects_every_problem(self) -> None:
        with pytest.raises(AchValidationError) as exc_info:
            AchEntry.credit("E1", RECEIVER, "  ", -1, "")
        assert exc_info.value.errors == [
            "Account number is required.",
            "Amount cannot be negative.",
            "Individual name is required.",
        ]

    def test_amount_overflow(self) -> None:
        with pytest.raises(AchValidationError) as exc_info:
            AchEntry.credit("E1", RECEIVER, "123456789", 10_000_000_000, "JANE")
        assert exc_info.value.errors == ["Amount exceeds the 10-digit entry amount field."]

    def test_bad_trace_number(self) -> None:
        with pytest.raises(AchValidationError):
            AchEntry.credit("E1", RECEIVER, "123456789", 1, "JANE", trace_number="12")

    def test_formatted_fields_keep_full_values(self) -> None:
        entry = AchEntry.credit(
            "E1", RECEIVER, "123456789", 1, "A VERY LONG RECEIVER NAME INDEED"
        )
        assert entry.individual_name == "A VERY LONG RECEIVER NAME INDEED"
        assert entry.formatted_individual_name == "A VERY LONG RECEIVER N"
        assert entry.formatted_account_number == "123456789        "

    def test_addenda_indicator(self) -> None:
        entry = AchEntry.credit("E1", RECEIVER, "123456789", 1, "JANE", addenda="INV 42")
        assert entry.has_addenda()
        assert entry.addenda_indicator == 1
        assert entry.with_addenda(None).addenda_indicator == 0

    def test_blank_addenda_means_none(self) -> None:
        entry = AchEntry.credit("E1", RECEIVER, "123456789", 1, "JANE", addenda="   ")
        assert entry.addenda is None
        assert not entry.has_addenda()
        assert entry.addenda_indicator == 0

    def test_non_ascii_name_rejected(self) -> None:
        with pytest.raises(AchValidationError) as exc_info:
            AchEntry.credit("E1", RECEIVER, "123456789", 1, "JOS\u00c9 NU\u00d1EZ")
        assert exc_info.value.errors == ["Individual name must contain printable ASCII only."]

    def test_line_feed_in_name_rejected(self) -> None:
        with pytest.raises(AchValidationError, match="ACH entry E1"):
            AchEntry.credit("E1", RECEIVER, "123456789", 1, "JANE\nDOE")

    def test_non_ascii_addenda_rejected(self) -> None:
        with pytest.raises(AchValidationError) as exc_info:
            AchEntry.credit("E1", RECEIVER, "123456789", 1, "JANE", addenda="CAF\u00c9 42")
        assert exc_info.value.errors == ["Addenda must contain printable ASCII only."]


class TestAchBatch:
    def test_service_class_credits_only(self) -> None:
        batch = make_batch([AchEntry.credit("E1", RECEIVER, "1234", 100, "A")])
        assert batch.service_class_code == 220

    def test_service_class_debits_only(self) -> None:
        batch = make_batch([AchEntry.debit("E1", RECEIVER, "1234", 100, "A")])
        assert batch.service_class_code == 225

    def test_service_class_mixed_and_empty(self) -> None:
        mixed = make_batch(
            [
                AchEntry.credit("E1", RECEIVER, "1234", 100, "A"),
                AchEntry.debit("E2", RECEIVER, "1234", 100, "B"),
            ]
        )
        assert mixed.service_class_code == 200
        assert make_batch([]).service_class_code == 200

    def test_entry_hash_sums_rdfi_ids(self) -> None:
        batch = make_batch(
            [
                AchEntry.credit("E1", RECEIVER, "1234", 100, "A"),
                AchEntry.credit("E2", ODFI, "1234", 100, "B"),
            ]
        )
        assert batch.entry_hash == 1100001 + 2100002

    def test_totals(self) -> None:
        batch = make_batch(
            [
                AchEntry.credit("E1", RECEIVER, "1234", 700, "A"),
                AchEntry.debit("E2", RECEIVER, "1234", 300, "B", addenda="NOTE"),
            ]
        )
        assert batch.total_credits == 700
        assert batch.total_debits == 300
        assert batch.addenda_count == 1
        assert batch.record_count == 5

    def test_unbalanced(self) -> None:
        batch = make_batch(
            [
                AchEntry.debit("E1", RECEIVER, "1234", 1000, "A"),
                AchEntry.credit("E2", RECEIVER, "1234", 500, "B"),
            ]
        )
        assert not batch.is_balanced()
        with pytest.raises(AchValidationError) as exc_info:
            batch.ensure_balanced()
        assert exc_info.value.errors == ["Debits: 10.00", "Credits: 5.00"]

    def test_with_entry_returns_new_batch(self) -> None:
        batch = make_batch([])
        grown = batch.with_entry(AchEntry.credit("E1", RECEIVER, "1234", 1, "A"))
        assert batch.entry_count == 0
        assert grown.entry_count == 1

    def test_assign_trace_numbers_keeps_existing(self) -> None:
        preset = "011000010000042"
        batch = make_batch(
            [
                AchEntry.credit("E1", RECEIVER, "1234", 1, "A", trace_number=preset),
                AchEntry.credit("E2", RECEIVER, "1234", 1, "B"),
            ]
        ).assign_trace_numbers(start=5)
        assert batch.entries[0].trace_number == preset
        assert batch.entries[1].trace_number == build_trace_number(ODFI, 6)

    def test_non_ascii_company_name_rejected(self) -> None:
        with pytest.raises(AchValidationError) as exc_info:
            replace(make_batch([]), company_name="CAF\u00c9 ROYAL")
        assert exc_info.value.message == "ACH batch B1 failed with 1 error(s)"
        assert exc_info.value.errors == ["Company name must contain printable ASCII only."]


class TestAchFile:
    def test_add_batch_numbers_batches_and_continues_traces(self) -> None:
        first = make_batch(
            [
                AchEntry.credit("E1", RECEIVER, "1234", 1, "A"),
                AchEntry.credit("E2", RECEIVER, "1234", 1, "B"),
            ],
            batch_id="B1",
        )
        second = make_batch([AchEntry.credit("E3", RECEIVER, "1234", 1, "C")], batch_id="B2")
        ach_file = make_file(first, second)

        assert [b.batch_number for b in ach_file.batches] == [1, 2]
        traces = [e.trace_number for b in ach_file.batches for e in b.entries]
        assert traces == ["021000020000001", "021000020000002", "021000020000003"]

    def test_add_batch_is_non_mutating(self) -> None:
        empty = make_file()
        grown = empty.add_batch(make_batch([AchEntry.credit("E1", RECEIVER, "1234", 1, "A")]))
        assert empty.batch_count == 0
        assert grown.batch_count == 1

    def test_duplicate_trace_numbers_rejected(self) -> None:
        trace = "021000020000001"
        batch = make_batch(
            [
                AchEntry.credit("E1", RECEIVER, "1234", 1, "A", trace_number=trace),
                AchEntry.credit("E2", RECEIVER, "1234", 1, "B", trace_number=trace),
            ]
        )
        with pytest.raises(AchValidationError, match="already used"):
            AchFile(
                id="F1",
                immediate_destination=RECEIVER,
                immediate_origin=ODFI,
                immediate_destination_name="DEST",
                immediate_origin_name="ORIGIN",
                file_creation_datetime=make_file().file_creation_datetime,
                batches=(batch,),
            )

    def test_counts_and_blocks(self, single_credit_file: AchFile) -> None:
        assert single_credit_file.record_count == 5
        assert single_credit_file.block_count == 1
        assert single_credit_file.entry_hash == 1100001
        assert single_credit_file.total_credits == 1234

    def test_file_id_modifier_normalized(self) -> None:
        assert make_file().file_id_modifier == "A"
        with pytest.raises(AchValidationError, match="File ID modifier"):
            AchFile(
                id="F1",
                immediate_destination=RECEIVER,
                immediate_origin=ODFI,
                immediate_destination_name="DEST",
                immediate_origin_name="ORIGIN",
                file_creation_datetime=make_file().file_creation_datetime,
                file_id_modifier="!",
            )

    def test_formatted_header_fields(self) -> None:
        ach_file = make_file()
        assert ach_file.formatted_immediate_destination == " 011000015"
        assert ach_file.file_creation_date == "261019"
        assert ach_file.file_creation_time == "0930"

    def test_with_status(self) -> None:
        assert make_file().with_status(FileStatus.SUBMITTED).status is FileStatus.SUBMITTED

    def test_non_ascii_origin_name_rejected(self) -> None:
        with pytest.raises(AchValidationError) as exc_info:
            replace(make_file(), immediate_origin_name="BANCO NUÑEZ")
        assert exc_info.value.errors == [
            "Immediate origin name must contain printable ASCII only."
        ]

    def test_control_character_in_reference_code_rejected(self) -> None:
        with pytest.raises(AchValidationError, match="ACH file F1"):
            replace(make_file(), reference_code="REF\r1")
