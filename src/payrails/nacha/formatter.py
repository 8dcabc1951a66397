"""NachaFormatter — fixed-width NACHA text codec.

Record grammar::

    1 (file header)
      5 (batch header)
        6 (entry detail) [7 (addenda)]
        ...
      8 (batch control)
      ...
    9 (file control)
    9999...9 (filler, pads to a multiple of 10 records)

Records are 94 characters joined by LF.  Generated text has no trailing
newline; the parser tolerates exactly one.

INVARIANT: Control totals are read from the AchBatch/AchFile accessors,
never re-summed here.
INVARIANT: parse() either returns a complete AchFile or raises FormatError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from payrails.domain.ach import (
    BLOCKING_FACTOR,
    AchBatch,
    AchEntry,
    AchFile,
    is_printable_ascii,
)
from payrails.domain.errors import AchValidationError, FormatError, IdentifierError
from payrails.domain.identifiers import RoutingNumber
from payrails.domain.types import FileStatus, SecCode, TransactionCode
from payrails.nacha.fields import (
    FILLER_RECORD,
    RECORD_LENGTH,
    alpha,
    blank,
    cut,
    cut_alpha,
    cut_int,
    numeric,
)

logger = logging.getLogger(__name__)

PRIORITY_CODE = "01"
RECORD_SIZE = "094"
BLOCKING_FACTOR_FIELD = "10"
FORMAT_CODE = "1"
ORIGINATOR_STATUS_CODE = "1"
ADDENDA_TYPE_CODE = "05"
ADDENDA_SEQUENCE = 1

RECORD_TYPES = frozenset("156789")


# ---------------------------------------------------------------------------
# Parse state
# ---------------------------------------------------------------------------


@dataclass
class _OpenBatch:
    """Header fields of the batch being read, plus entries collected so far."""

    line: int
    header: dict
    service_class_code: int
    entries: list[AchEntry] = field(default_factory=list)
    awaiting_addenda: bool = False


@dataclass
class _ParseState:
    header: dict | None = None
    header_line: int = 0
    batches: list[AchBatch] = field(default_factory=list)
    batch: _OpenBatch | None = None
    control_line: int | None = None
    control: dict | None = None


class NachaFormatter:
    """Serialize :class:`AchFile` graphs to NACHA text and back."""

    # ------------------------------------------------------------------
    # Generate
    # ------------------------------------------------------------------

    def generate(self, ach_file: AchFile) -> str:
        """Render *ach_file* as NACHA text, padded to full 10-record blocks.

        Raises:
            AchValidationError: if an entry has no trace number, or a count or
                total does not fit its control-record field.
        """
        lines = [self.file_header(ach_file)]
        for batch in ach_file.batches:
            lines.append(self.batch_header(batch))
            for entry in batch.entries:
                lines.append(self.entry_detail(entry))
                if entry.has_addenda():
                    lines.append(self.addenda(entry))
            lines.append(self.batch_control(batch))
        lines.append(self.file_control(ach_file))

        remainder = len(lines) % BLOCKING_FACTOR
        if remainder:
            lines.extend([FILLER_RECORD] * (BLOCKING_FACTOR - remainder))

        logger.debug(
            "Generated NACHA file %s: %d batch(es), %d entries, %d line(s)",
            ach_file.id,
            ach_file.batch_count,
            ach_file.entry_count,
            len(lines),
        )
        return "\n".join(lines)

    def file_header(self, ach_file: AchFile) -> str:
        return _record(
            "1",
            PRIORITY_CODE,
            ach_file.formatted_immediate_destination,
            ach_file.formatted_immediate_origin,
            ach_file.file_creation_date,
            ach_file.file_creation_time,
            ach_file.file_id_modifier,
            RECORD_SIZE,
            BLOCKING_FACTOR_FIELD,
            FORMAT_CODE,
            ach_file.formatted_destination_name,
            ach_file.formatted_origin_name,
            alpha(ach_file.reference_code, 8),
        )

    def batch_header(self, batch: AchBatch) -> str:
        return _record(
            "5",
            numeric(batch.service_class_code, 3),
            batch.formatted_company_name,
            alpha(batch.company_discretionary_data, 20),
            batch.formatted_company_id,
            batch.sec_code.value,
            batch.formatted_entry_description,
            alpha(batch.company_descriptive_date, 6),
            batch.effective_entry_date.strftime("%y%m%d"),
            blank(3),
            ORIGINATOR_STATUS_CODE,
            batch.originating_dfi.institution_id,
            numeric(batch.batch_number, 7, name="Batch number"),
        )

    def entry_detail(self, entry: AchEntry) -> str:
        if entry.trace_number is None:
            raise AchValidationError(
                f"Entry {entry.id} has no trace number; add its batch through AchFile.add_batch"
            )
        return _record(
            "6",
            entry.transaction_code.value,
            entry.routing_number.institution_id,
            entry.routing_number.check_digit,
            entry.formatted_account_number,
            numeric(entry.amount, 10),
            entry.formatted_individual_id,
            entry.formatted_individual_name,
            alpha(entry.discretionary_data, 2),
            str(entry.addenda_indicator),
            entry.trace_number,
        )

    def addenda(self, entry: AchEntry) -> str:
        trace = entry.trace_number or ""
        return _record(
            "7",
            ADDENDA_TYPE_CODE,
            alpha(entry.addenda, 80),
            numeric(ADDENDA_SEQUENCE, 4),
            numeric(trace[-7:], 7),
        )

    def batch_control(self, batch: AchBatch) -> str:
        return _record(
            "8",
            numeric(batch.service_class_code, 3),
            numeric(batch.entry_count + batch.addenda_count, 6, name="Batch entry/addenda count"),
            numeric(batch.entry_hash, 10),
            numeric(batch.total_debits, 12, name="Batch total debits"),
            numeric(batch.total_credits, 12, name="Batch total credits"),
            batch.formatted_company_id,
            blank(19),
            blank(6),
            batch.originating_dfi.institution_id,
            numeric(batch.batch_number, 7, name="Batch number"),
        )

    def file_control(self, ach_file: AchFile) -> str:
        return _record(
            "9",
            numeric(ach_file.batch_count, 6, name="File batch count"),
            numeric(ach_file.block_count, 6, name="File block count"),
            numeric(
                ach_file.entry_count + ach_file.addenda_count, 8, name="File entry/addenda count"
            ),
            numeric(ach_file.entry_hash, 10),
            numeric(ach_file.total_debits, 12, name="File total debits"),
            numeric(ach_file.total_credits, 12, name="File total credits"),
            blank(39),
        )

    # ------------------------------------------------------------------
    # Parse
    # ------------------------------------------------------------------

    def parse(self, text: str) -> AchFile:
        """Rebuild an :class:`AchFile` from NACHA *text*.

        Raises:
            FormatError: on any structural, numeric, identifier, or
                control-total problem.  No partial result is returned.
        """
        lines = _split_lines(text)
        state = _ParseState()

        for line_no, line in enumerate(lines, start=1):
            if len(line) != RECORD_LENGTH:
                raise FormatError(
                    f"Record must be {RECORD_LENGTH} characters, got {len(line)}",
                    line=line_no,
                )
            if not is_printable_ascii(line):
                raise FormatError(
                    "Record contains characters outside printable ASCII", line=line_no
                )
            if state.control is not None:
                if line != FILLER_RECORD:
                    raise FormatError(
                        "Only filler records may follow the file control", line=line_no
                    )
                continue

            record_type = line[0]
            if record_type not in RECORD_TYPES:
                raise FormatError(f"Unknown record type {record_type!r}", line=line_no)
            if record_type != "1" and state.header is None:
                raise FormatError("Record appears before the file header", line=line_no)

            match record_type:
                case "1":
                    self._read_file_header(state, line, line_no)
                case "5":
                    self._read_batch_header(state, line, line_no)
                case "6":
                    self._read_entry(state, line, line_no)
                case "7":
                    self._read_addenda(state, line, line_no)
                case "8":
                    self._read_batch_control(state, line, line_no)
                case "9":
                    self._read_file_control(state, line, line_no)

        if state.control is None:
            if state.batch is not None:
                raise FormatError(f"Batch opened on line {state.batch.line} is never closed")
            raise FormatError("Missing file control record")

        ach_file = self._build_file(state)
        logger.debug(
            "Parsed NACHA file %s: %d batch(es), %d entries",
            ach_file.id,
            ach_file.batch_count,
            ach_file.entry_count,
        )
        return ach_file

    def _read_file_header(self, state: _ParseState, line: str, line_no: int) -> None:
        if state.header is not None:
            raise FormatError(
                f"Duplicate file header (first on line {state.header_line})", line=line_no
            )
        for label, start, end, expected in (
            ("Priority code", 2, 3, PRIORITY_CODE),
            ("Record size", 35, 37, RECORD_SIZE),
            ("Blocking factor", 38, 39, BLOCKING_FACTOR_FIELD),
            ("Format code", 40, 40, FORMAT_CODE),
        ):
            if cut(line, start, end) != expected:
                raise FormatError(
                    f"{label} must be {expected}, got {cut(line, start, end)!r}", line=line_no
                )
        created = cut(line, 24, 33)
        try:
            creation = datetime.strptime(created, "%y%m%d%H%M")
        except ValueError:
            msg = f"Invalid file creation date/time {created!r}"
            raise FormatError(msg, line=line_no) from None
        state.header = {
            "immediate_destination": _routing(
                cut(line, 4, 13).strip(), "immediate destination", line_no
            ),
            "immediate_origin": _routing(cut(line, 14, 23).strip(), "immediate origin", line_no),
            "file_creation_datetime": creation,
            "file_id_modifier": cut(line, 34, 34),
            "immediate_destination_name": cut_alpha(line, 41, 63),
            "immediate_origin_name": cut_alpha(line, 64, 86),
            "reference_code": cut_alpha(line, 87, 94),
        }
        state.header_line = line_no

    def _read_batch_header(self, state: _ParseState, line: str, line_no: int) -> None:
        if state.batch is not None:
            raise FormatError(
                f"Batch header while batch from line {state.batch.line} is still open",
                line=line_no,
            )
        sec_raw = cut(line, 51, 53)
        try:
            sec_code = SecCode(sec_raw)
        except ValueError:
            raise FormatError(f"Unknown SEC code {sec_raw!r}", line=line_no) from None
        effective = cut(line, 70, 75)
        try:
            effective_date = datetime.strptime(effective, "%y%m%d").date()
        except ValueError:
            raise FormatError(f"Invalid effective entry date {effective!r}", line=line_no) from None
        state.batch = _OpenBatch(
            line=line_no,
            service_class_code=cut_int(line, 2, 4, name="Service class code", line_no=line_no),
            header={
                "sec_code": sec_code,
                "company_name": cut_alpha(line, 5, 20),
                "company_discretionary_data": cut_alpha(line, 21, 40),
                "company_id": cut_alpha(line, 41, 50),
                "company_entry_description": cut_alpha(line, 54, 63),
                "company_descriptive_date": cut_alpha(line, 64, 69),
                "effective_entry_date": effective_date,
                "originating_dfi": _dfi(cut(line, 80, 87), line_no),
                "batch_number": cut_int(line, 88, 94, name="Batch number", line_no=line_no),
            },
        )

    def _read_entry(self, state: _ParseState, line: str, line_no: int) -> None:
        batch = _require_batch(state, "Entry detail", line_no)
        _check_pending_addenda(batch, line_no)

        code_raw = cut(line, 2, 3)
        try:
            code = TransactionCode(code_raw)
        except ValueError:
            raise FormatError(f"Unknown transaction code {code_raw!r}", line=line_no) from None
        amount = cut_int(line, 30, 39, name="Amount", line_no=line_no)
        if code.requires_zero_amount and amount != 0:
            raise FormatError(f"Transaction code {code.value} requires a zero amount", line=line_no)
        indicator = cut(line, 79, 79)
        if indicator not in ("0", "1"):
            raise FormatError(f"Addenda indicator must be 0 or 1, got {indicator!r}", line=line_no)
        trace = cut(line, 80, 94)
        if not trace.isdigit():
            raise FormatError(f"Trace number must be numeric, got {trace!r}", line=line_no)

        routing = _routing(cut(line, 4, 12), "receiving DFI", line_no)
        try:
            entry = AchEntry(
                id=f"{batch.header['batch_number']}-{len(batch.entries) + 1}",
                transaction_code=code,
                routing_number=routing,
                account_number=cut_alpha(line, 13, 29),
                amount=amount,
                individual_name=cut_alpha(line, 55, 76),
                individual_id=cut_alpha(line, 40, 54),
                discretionary_data=cut_alpha(line, 77, 78),
                trace_number=trace,
            )
        except AchValidationError as exc:
            raise FormatError("; ".join(exc.errors), line=line_no) from exc
        batch.entries.append(entry)
        batch.awaiting_addenda = indicator == "1"

    def _read_addenda(self, state: _ParseState, line: str, line_no: int) -> None:
        batch = _require_batch(state, "Addenda", line_no)
        if not batch.awaiting_addenda:
            raise FormatError(
                "Addenda record without a preceding entry expecting one", line=line_no
            )
        if cut(line, 2, 3) != ADDENDA_TYPE_CODE:
            raise FormatError(f"Unsupported addenda type code {cut(line, 2, 3)!r}", line=line_no)
        info = cut_alpha(line, 4, 83)
        if not info:
            raise FormatError("Addenda payment information is blank", line=line_no)
        cut_int(line, 84, 87, name="Addenda sequence number", line_no=line_no)
        entry = batch.entries[-1]
        sequence = cut(line, 88, 94)
        if sequence != (entry.trace_number or "")[-7:]:
            raise FormatError(
                f"Addenda entry sequence {sequence} does not match "
                f"trace number {entry.trace_number}",
                line=line_no,
            )
        batch.entries[-1] = entry.with_addenda(info)
        batch.awaiting_addenda = False

    def _read_batch_control(self, state: _ParseState, line: str, line_no: int) -> None:
        open_batch = _require_batch(state, "Batch control", line_no)
        _check_pending_addenda(open_batch, line_no)

        try:
            batch = AchBatch(
                id=f"batch-{open_batch.header['batch_number']}",
                entries=tuple(open_batch.entries),
                **open_batch.header,
            )
        except AchValidationError as exc:
            raise FormatError("; ".join(exc.errors), line=open_batch.line) from exc

        def number(start: int, end: int, name: str) -> int:
            return cut_int(line, start, end, name=name, line_no=line_no)

        checks = [
            ("Batch header service class code", open_batch.service_class_code,
             batch.service_class_code),
            ("Batch control service class code", number(2, 4, "Service class code"),
             batch.service_class_code),
            ("Batch entry/addenda count", number(5, 10, "Entry/addenda count"),
             batch.entry_count + batch.addenda_count),
            ("Batch entry hash", number(11, 20, "Entry hash"), batch.entry_hash),
            ("Batch total debits", number(21, 32, "Total debits"), batch.total_debits),
            ("Batch total credits", number(33, 44, "Total credits"), batch.total_credits),
            ("Batch control company ID", cut_alpha(line, 45, 54),
             batch.formatted_company_id.rstrip()),
            ("Batch control ODFI", cut(line, 80, 87), batch.originating_dfi.institution_id),
            ("Batch control batch number", number(88, 94, "Batch number"), batch.batch_number),
        ]
        for label, found, expected in checks:
            _expect(line_no, label, found, expected)

        state.batches.append(batch)
        state.batch = None

    def _read_file_control(self, state: _ParseState, line: str, line_no: int) -> None:
        if state.batch is not None:
            raise FormatError(
                f"File control while batch from line {state.batch.line} is still open",
                line=line_no,
            )
        state.control_line = line_no
        state.control = {
            "batch_count": cut_int(line, 2, 7, name="Batch count", line_no=line_no),
            "block_count": cut_int(line, 8, 13, name="Block count", line_no=line_no),
            "entry_addenda_count": cut_int(
                line, 14, 21, name="Entry/addenda count", line_no=line_no
            ),
            "entry_hash": cut_int(line, 22, 31, name="Entry hash", line_no=line_no),
            "total_debits": cut_int(line, 32, 43, name="Total debits", line_no=line_no),
            "total_credits": cut_int(line, 44, 55, name="Total credits", line_no=line_no),
        }

    def _build_file(self, state: _ParseState) -> AchFile:
        header = state.header or {}
        modifier = header["file_id_modifier"]
        stamp = header["file_creation_datetime"].strftime("%y%m%d%H%M")
        try:
            ach_file = AchFile(
                id=f"{header['immediate_origin'].value}-{stamp}{modifier}",
                batches=tuple(state.batches),
                status=FileStatus.GENERATED,
                **header,
            )
        except AchValidationError as exc:
            raise FormatError("; ".join(exc.errors), line=state.header_line) from exc

        control = state.control or {}
        line_no = state.control_line
        _expect(line_no, "File batch count", control["batch_count"], ach_file.batch_count)
        _expect(line_no, "File block count", control["block_count"], ach_file.block_count)
        _expect(
            line_no,
            "File entry/addenda count",
            control["entry_addenda_count"],
            ach_file.entry_count + ach_file.addenda_count,
        )
        _expect(line_no, "File entry hash", control["entry_hash"], ach_file.entry_hash)
        _expect(line_no, "File total debits", control["total_debits"], ach_file.total_debits)
        _expect(line_no, "File total credits", control["total_credits"], ach_file.total_credits)
        return ach_file

    # ------------------------------------------------------------------
    # Structural check
    # ------------------------------------------------------------------

    def validate_format(self, text: str) -> list[str]:
        """Return every structural problem in *text* without raising.

        Covers line length, record types, header/control presence, and
        blocking.  Field contents and control totals are left to
        :meth:`parse`.
        """
        if not text or not text.strip("\n"):
            return ["File is empty"]
        lines = text[:-1].split("\n") if text.endswith("\n") else text.split("\n")
        problems: list[str] = []
        for line_no, line in enumerate(lines, start=1):
            if len(line) != RECORD_LENGTH:
                problems.append(
                    f"Line {line_no}: Record must be {RECORD_LENGTH} characters, got {len(line)}"
                )
            if line and line[0] not in RECORD_TYPES:
                problems.append(f"Line {line_no}: Unknown record type {line[0]!r}")
            if not is_printable_ascii(line):
                problems.append(
                    f"Line {line_no}: Record contains characters outside printable ASCII"
                )
        if not lines[0].startswith("1"):
            problems.append("File must start with a file header record")
        if not any(line.startswith("9") and line != FILLER_RECORD for line in lines):
            problems.append("Missing file control record")
        if len(lines) % BLOCKING_FACTOR:
            problems.append(
                f"Line count {len(lines)} is not a multiple of "
                f"the blocking factor {BLOCKING_FACTOR}"
            )
        return problems


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _record(*fields: str) -> str:
    line = "".join(fields)
    if len(line) != RECORD_LENGTH:
        raise AssertionError(f"Record assembled to {len(line)} characters: {line!r}")
    return line


def _split_lines(text: str) -> list[str]:
    if not text:
        raise FormatError("Input is empty")
    if text.endswith("\n"):
        text = text[:-1]
    if not text:
        raise FormatError("Input is empty")
    return text.split("\n")


def _routing(raw: str, what: str, line_no: int) -> RoutingNumber:
    try:
        return RoutingNumber(raw)
    except IdentifierError as exc:
        raise FormatError(f"Bad {what}: {exc.message}", line=line_no) from exc


def _dfi(raw: str, line_no: int) -> RoutingNumber:
    if not raw.isdigit():
        raise FormatError(f"Originating DFI must be 8 digits, got {raw!r}", line=line_no)
    return RoutingNumber.from_prefix(raw)


def _require_batch(state: _ParseState, what: str, line_no: int) -> _OpenBatch:
    if state.batch is None:
        raise FormatError(f"{what} record outside of a batch", line=line_no)
    return state.batch


def _check_pending_addenda(batch: _OpenBatch, line_no: int) -> None:
    if batch.awaiting_addenda:
        raise FormatError("Entry flagged an addenda record that never follows", line=line_no)


def _expect(line_no: int | None, label: str, found: object, expected: object) -> None:
    if found != expected:
        raise FormatError(
            f"{label} mismatch: record has {found}, content gives {expected}", line=line_no
        )
