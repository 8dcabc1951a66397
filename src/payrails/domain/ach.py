"""ACH value objects — entries, batches, and files.

Objects keep full, untruncated values.  The ``formatted_*`` accessors
produce the fixed-width renditions used by the NACHA codec; the two
representations are never mixed.

Control totals (counts, entry hash, debit/credit sums) are derived here
and nowhere else.  The codec reads them from these accessors so emitted
control records always agree with in-memory state.

INVARIANT: Every mutator returns a new instance.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Self

from payrails.domain.errors import AchValidationError
from payrails.domain.identifiers import RoutingNumber
from payrails.domain.types import AccountType, FileStatus, SecCode, TransactionCode

# Fixed NACHA field widths referenced by the formatted accessors.
COMPANY_NAME_WIDTH = 16
COMPANY_ID_WIDTH = 10
ENTRY_DESCRIPTION_WIDTH = 10
ACCOUNT_NUMBER_WIDTH = 17
INDIVIDUAL_ID_WIDTH = 15
INDIVIDUAL_NAME_WIDTH = 22
ADDENDA_INFO_WIDTH = 80
DESTINATION_NAME_WIDTH = 23

MAX_ENTRY_AMOUNT = 9_999_999_999  # 10-digit amount field, minor units
ENTRY_HASH_MODULUS = 10_000_000_000  # 10-digit entry hash field
TRACE_SEQUENCE_WIDTH = 7
BLOCKING_FACTOR = 10

SERVICE_CLASS_MIXED = 200
SERVICE_CLASS_CREDITS_ONLY = 220
SERVICE_CLASS_DEBITS_ONLY = 225

_TRACE_RE = re.compile(r"^\d{15}$")
_FILE_ID_MODIFIER_RE = re.compile(r"^[A-Z0-9]$")
_PRINTABLE_ASCII = re.compile(r"[\x20-\x7e]*")


def fit(value: str, width: int) -> str:
    """Truncate or right-pad *value* with spaces to exactly *width* characters."""
    return value[:width].ljust(width)


def is_printable_ascii(value: str) -> bool:
    """True when every character is printable ASCII (space through ``~``)."""
    return _PRINTABLE_ASCII.fullmatch(value) is not None


def non_printable_fields(**fields: str | None) -> list[str]:
    """One error per named text field that NACHA records cannot carry."""
    return [
        f"{name.replace('_', ' ').capitalize()} must contain printable ASCII only."
        for name, value in fields.items()
        if value is not None and not is_printable_ascii(value)
    ]


def build_trace_number(originating_dfi: RoutingNumber, sequence: int) -> str:
    """ODFI identification (8 digits) + zero-padded 7-digit sequence."""
    return f"{originating_dfi.institution_id}{sequence:0{TRACE_SEQUENCE_WIDTH}d}"


# ---------------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AchEntry:
    """One payment instruction within a batch.

    ``amount`` is in minor units.  Prenote and zero-dollar transaction codes
    force the amount to zero.
    """

    id: str
    transaction_code: TransactionCode
    routing_number: RoutingNumber
    account_number: str
    amount: int
    individual_name: str
    individual_id: str = ""
    discretionary_data: str = ""
    addenda: str | None = None
    trace_number: str | None = None

    def __post_init__(self) -> None:
        if self.transaction_code.requires_zero_amount:
            object.__setattr__(self, "amount", 0)
        if self.addenda is not None and not self.addenda.strip():
            object.__setattr__(self, "addenda", None)

        errors: list[str] = non_printable_fields(
            account_number=self.account_number,
            individual_name=self.individual_name,
            individual_id=self.individual_id,
            discretionary_data=self.discretionary_data,
            addenda=self.addenda,
        )
        account = self.account_number.strip()
        if not account:
            errors.append("Account number is required.")
        elif len(account) > ACCOUNT_NUMBER_WIDTH:
            errors.append(f"Account number exceeds {ACCOUNT_NUMBER_WIDTH} characters.")
        if not isinstance(self.amount, int) or isinstance(self.amount, bool):
            errors.append("Amount must be an integer number of minor units.")
        elif self.amount < 0:
            errors.append("Amount cannot be negative.")
        elif self.amount > MAX_ENTRY_AMOUNT:
            errors.append("Amount exceeds the 10-digit entry amount field.")
        if not self.individual_name.strip():
            errors.append("Individual name is required.")
        if self.addenda is not None and len(self.addenda) > ADDENDA_INFO_WIDTH:
            errors.append(f"Addenda exceeds {ADDENDA_INFO_WIDTH} characters.")
        if self.trace_number is not None and not _TRACE_RE.match(self.trace_number):
            errors.append("Trace number must be exactly 15 digits.")
        if errors:
            raise AchValidationError.multiple(errors, subject=f"ACH entry {self.id}")

    # -- factories ---------------------------------------------------------

    @classmethod
    def credit(
        cls,
        id: str,
        routing_number: RoutingNumber,
        account_number: str,
        amount: int,
        individual_name: str,
        *,
        account_type: AccountType = AccountType.CHECKING,
        **kwargs: str | None,
    ) -> Self:
        code = TransactionCode.for_entry(account_type, debit=False)
        return cls(
            id, code, routing_number, account_number, amount, individual_name, **kwargs
        )

    @classmethod
    def debit(
        cls,
        id: str,
        routing_number: RoutingNumber,
        account_number: str,
        amount: int,
        individual_name: str,
        *,
        account_type: AccountType = AccountType.CHECKING,
        **kwargs: str | None,
    ) -> Self:
        code = TransactionCode.for_entry(account_type, debit=True)
        return cls(
            id, code, routing_number, account_number, amount, individual_name, **kwargs
        )

    @classmethod
    def prenote(
        cls,
        id: str,
        routing_number: RoutingNumber,
        account_number: str,
        individual_name: str,
        *,
        account_type: AccountType = AccountType.CHECKING,
        debit: bool = False,
        **kwargs: str | None,
    ) -> Self:
        code = TransactionCode.for_entry(account_type, debit=debit, prenote=True)
        return cls(id, code, routing_number, account_number, 0, individual_name, **kwargs)

    # -- derived -----------------------------------------------------------

    @property
    def account_type(self) -> AccountType:
        return self.transaction_code.account_type

    @property
    def is_credit(self) -> bool:
        return self.transaction_code.is_credit

    @property
    def is_debit(self) -> bool:
        return self.transaction_code.is_debit

    @property
    def is_prenote(self) -> bool:
        return self.transaction_code.is_prenote

    def has_addenda(self) -> bool:
        return bool(self.addenda)

    @property
    def addenda_indicator(self) -> int:
        return 1 if self.has_addenda() else 0

    @property
    def formatted_account_number(self) -> str:
        return fit(self.account_number.strip(), ACCOUNT_NUMBER_WIDTH)

    @property
    def formatted_individual_name(self) -> str:
        return fit(self.individual_name, INDIVIDUAL_NAME_WIDTH)

    @property
    def formatted_individual_id(self) -> str:
        return fit(self.individual_id, INDIVIDUAL_ID_WIDTH)

    # -- updates -----------------------------------------------------------

    def with_trace_number(self, trace_number: str) -> AchEntry:
        return replace(self, trace_number=trace_number)

    def with_addenda(self, addenda: str | None) -> AchEntry:
        return replace(self, addenda=addenda)


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AchBatch:
    """Ordered entries sharing company, SEC code, and effective date."""

    id: str
    sec_code: SecCode
    company_name: str
    company_id: str
    company_entry_description: str
    originating_dfi: RoutingNumber
    effective_entry_date: date
    entries: tuple[AchEntry, ...] = ()
    batch_number: int = 0
    company_discretionary_data: str = ""
    company_descriptive_date: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))
        errors = non_printable_fields(
            company_name=self.company_name,
            company_id=self.company_id,
            company_entry_description=self.company_entry_description,
            company_discretionary_data=self.company_discretionary_data,
            company_descriptive_date=self.company_descriptive_date,
        )
        if errors:
            raise AchValidationError.multiple(errors, subject=f"ACH batch {self.id}")

    # -- derived totals ----------------------------------------------------

    @property
    def entry_count(self) -> int:
        return len(self.entries)

    @property
    def addenda_count(self) -> int:
        return sum(1 for e in self.entries if e.has_addenda())

    @property
    def total_debits(self) -> int:
        return sum(e.amount for e in self.entries if e.is_debit)

    @property
    def total_credits(self) -> int:
        return sum(e.amount for e in self.entries if e.is_credit)

    @property
    def service_class_code(self) -> int:
        """220 credits only, 225 debits only, 200 mixed (or empty)."""
        if not self.entries:
            return SERVICE_CLASS_MIXED
        if all(e.is_credit for e in self.entries):
            return SERVICE_CLASS_CREDITS_ONLY
        if all(e.is_debit for e in self.entries):
            return SERVICE_CLASS_DEBITS_ONLY
        return SERVICE_CLASS_MIXED

    @property
    def entry_hash(self) -> int:
        """Sum of each entry's 8-digit RDFI identification, mod 10^10."""
        total = sum(int(e.routing_number.institution_id) for e in self.entries)
        return total % ENTRY_HASH_MODULUS

    def is_balanced(self) -> bool:
        return self.total_debits == self.total_credits

    @property
    def record_count(self) -> int:
        """Header + entries + addenda + control."""
        return 2 + self.entry_count + self.addenda_count

    # -- formatted accessors -----------------------------------------------

    @property
    def formatted_company_name(self) -> str:
        return fit(self.company_name, COMPANY_NAME_WIDTH)

    @property
    def formatted_company_id(self) -> str:
        return fit(self.company_id, COMPANY_ID_WIDTH)

    @property
    def formatted_entry_description(self) -> str:
        return fit(self.company_entry_description, ENTRY_DESCRIPTION_WIDTH)

    # -- updates -----------------------------------------------------------

    def with_entry(self, entry: AchEntry) -> AchBatch:
        return replace(self, entries=(*self.entries, entry))

    def with_entries(self, entries: list[AchEntry] | tuple[AchEntry, ...]) -> AchBatch:
        return replace(self, entries=(*self.entries, *entries))

    def with_batch_number(self, batch_number: int) -> AchBatch:
        return replace(self, batch_number=batch_number)

    def assign_trace_numbers(self, start: int = 1) -> AchBatch:
        """Fill missing trace numbers with ODFI + sequence, counting from *start*.

        Entries that already carry a trace number keep it; the sequence
        still advances past them so positions stay stable.
        """
        entries = tuple(
            e
            if e.trace_number
            else e.with_trace_number(build_trace_number(self.originating_dfi, start + i))
            for i, e in enumerate(self.entries)
        )
        return replace(self, entries=entries)

    def ensure_balanced(self) -> None:
        if not self.is_balanced():
            raise AchValidationError.unbalanced_batch(self.total_debits, self.total_credits)


# ---------------------------------------------------------------------------
# File
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AchFile:
    """One NACHA submission: ordered batches plus routing headers."""

    id: str
    immediate_destination: RoutingNumber
    immediate_origin: RoutingNumber
    immediate_destination_name: str
    immediate_origin_name: str
    file_creation_datetime: datetime
    batches: tuple[AchBatch, ...] = ()
    file_id_modifier: str = "A"
    status: FileStatus = FileStatus.DRAFT
    reference_code: str = ""
    trace_numbers: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        modifier = self.file_id_modifier.upper()
        if not _FILE_ID_MODIFIER_RE.match(modifier):
            raise AchValidationError(
                f"File ID modifier must be A-Z or 0-9, got {self.file_id_modifier!r}"
            )
        errors = non_printable_fields(
            immediate_destination_name=self.immediate_destination_name,
            immediate_origin_name=self.immediate_origin_name,
            reference_code=self.reference_code,
        )
        if errors:
            raise AchValidationError.multiple(errors, subject=f"ACH file {self.id}")
        object.__setattr__(self, "file_id_modifier", modifier)
        object.__setattr__(self, "batches", tuple(self.batches))
        traces: set[str] = set()
        for batch in self.batches:
            for entry in batch.entries:
                if entry.trace_number is None:
                    continue
                if entry.trace_number in traces:
                    raise AchValidationError.duplicate_trace_number(entry.trace_number)
                traces.add(entry.trace_number)
        object.__setattr__(self, "trace_numbers", frozenset(traces))

    # -- derived totals ----------------------------------------------------

    @property
    def batch_count(self) -> int:
        return len(self.batches)

    @property
    def entry_count(self) -> int:
        return sum(b.entry_count for b in self.batches)

    @property
    def addenda_count(self) -> int:
        return sum(b.addenda_count for b in self.batches)

    @property
    def entry_hash(self) -> int:
        return sum(b.entry_hash for b in self.batches) % ENTRY_HASH_MODULUS

    @property
    def total_debits(self) -> int:
        return sum(b.total_debits for b in self.batches)

    @property
    def total_credits(self) -> int:
        return sum(b.total_credits for b in self.batches)

    @property
    def record_count(self) -> int:
        """File header + every batch's records + file control (no filler)."""
        return 2 + sum(b.record_count for b in self.batches)

    @property
    def block_count(self) -> int:
        return -(-self.record_count // BLOCKING_FACTOR)

    # -- formatted accessors -----------------------------------------------

    @property
    def formatted_immediate_destination(self) -> str:
        return f" {self.immediate_destination.value}"

    @property
    def formatted_immediate_origin(self) -> str:
        return f" {self.immediate_origin.value}"

    @property
    def formatted_destination_name(self) -> str:
        return fit(self.immediate_destination_name, DESTINATION_NAME_WIDTH)

    @property
    def formatted_origin_name(self) -> str:
        return fit(self.immediate_origin_name, DESTINATION_NAME_WIDTH)

    @property
    def file_creation_date(self) -> str:
        return self.file_creation_datetime.strftime("%y%m%d")

    @property
    def file_creation_time(self) -> str:
        return self.file_creation_datetime.strftime("%H%M")

    # -- assembly ----------------------------------------------------------

    def add_batch(self, batch: AchBatch) -> AchFile:
        """Append *batch*, numbering it and continuing the trace sequence.

        Raises:
            AchValidationError: if a trace number would repeat within the file.
        """
        if batch.batch_number <= 0:
            batch = batch.with_batch_number(self.batch_count + 1)
        batch = batch.assign_trace_numbers(start=self.entry_count + 1)
        return replace(self, batches=(*self.batches, batch))

    def with_status(self, status: FileStatus) -> AchFile:
        return replace(self, status=status)
