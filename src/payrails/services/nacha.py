"""NachaService — ServiceResult facade over the NACHA codec.

Operations: generate, validate, inspect, roundtrip.  Generation goes
through :class:`~payrails.rails.ach.AchRail` so availability rules and the
configured originator identity apply.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from payrails.domain.ach import AchBatch, AchEntry, AchFile
from payrails.domain.errors import FormatError, PaymentRailError, format_minor_units
from payrails.domain.identifiers import RoutingNumber
from payrails.domain.money import Money
from payrails.services.base import BaseService
from payrails.services.contracts import (
    BatchRequest,
    EntryRequest,
    FileSummary,
    dump_validated,
)
from payrails.services.result import ServiceError, ServiceResult
from payrails.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from payrails.plugins.event_bus import EventBus
    from payrails.rails.ach import AchRail

logger = logging.getLogger(__name__)


def summarize_batch(batch: AchBatch) -> dict[str, Any]:
    return {
        "batch_number": batch.batch_number,
        "sec_code": batch.sec_code.value,
        "company_name": batch.company_name,
        "company_id": batch.company_id,
        "entry_description": batch.company_entry_description,
        "effective_entry_date": batch.effective_entry_date.isoformat(),
        "service_class_code": batch.service_class_code,
        "entry_count": batch.entry_count,
        "addenda_count": batch.addenda_count,
        "entry_hash": batch.entry_hash,
        "total_debits": format_minor_units(batch.total_debits),
        "total_credits": format_minor_units(batch.total_credits),
    }


def summarize_file(ach_file: AchFile) -> dict[str, Any]:
    data = {
        "file_id": ach_file.id,
        "status": ach_file.status.value,
        "immediate_destination": ach_file.immediate_destination.value,
        "immediate_origin": ach_file.immediate_origin.value,
        "destination_name": ach_file.immediate_destination_name,
        "origin_name": ach_file.immediate_origin_name,
        "created": ach_file.file_creation_datetime.isoformat(),
        "file_id_modifier": ach_file.file_id_modifier,
        "batch_count": ach_file.batch_count,
        "entry_count": ach_file.entry_count,
        "addenda_count": ach_file.addenda_count,
        "record_count": ach_file.record_count,
        "block_count": ach_file.block_count,
        "entry_hash": ach_file.entry_hash,
        "total_debits": format_minor_units(ach_file.total_debits),
        "total_credits": format_minor_units(ach_file.total_credits),
        "batches": [summarize_batch(b) for b in ach_file.batches],
    }
    return dump_validated(FileSummary, data)


def first_difference(left: str, right: str) -> int | None:
    """1-based line number where *left* and *right* first differ."""
    a, b = left.split("\n"), right.split("\n")
    for number, (x, y) in enumerate(zip(a, b, strict=False), start=1):
        if x != y:
            return number
    if len(a) != len(b):
        return min(len(a), len(b)) + 1
    return None


class NachaService(BaseService):
    """Generates, validates, and inspects NACHA files."""

    def __init__(self, rail: AchRail, *, event_bus: EventBus | None = None) -> None:
        super().__init__(event_bus=event_bus)
        self._rail = rail

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    @traced
    def generate(self, request: BatchRequest) -> ServiceResult:
        """Build a one-batch file from *request* and render it.

        ``data["text"]`` holds the NACHA text; the rest is the file summary.
        """
        op = "nacha_generate"
        warnings: list[str] = []
        try:
            entries = [self._entry(i, item) for i, item in enumerate(request.entries, start=1)]
            batch = self._rail.create_batch(
                entries,
                sec_code=request.sec_code,
                entry_description=request.entry_description,
                effective_entry_date=request.effective_entry_date,
                same_day=request.same_day,
            )
            ach_file, text = self._rail.generate_nacha_file(self._rail.build_file([batch]))
        except PaymentRailError as exc:
            return ServiceResult.failure(op, exc)

        self._dispatch_event(
            "post_nacha_generated",
            {
                "file_id": ach_file.id,
                "batch_count": ach_file.batch_count,
                "entry_count": ach_file.entry_count,
                "total_debits": ach_file.total_debits,
                "total_credits": ach_file.total_credits,
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={**summarize_file(ach_file), "text": text},
            warnings=warnings,
        )

    @staticmethod
    def _entry(number: int, item: EntryRequest) -> AchEntry:
        routing = RoutingNumber(item.routing_number)
        extra = {"individual_id": item.individual_id, "addenda": item.addenda}
        entry_id = f"ENTRY-{number}"
        if item.prenote:
            return AchEntry.prenote(
                entry_id,
                routing,
                item.account_number,
                item.name,
                account_type=item.account_type,
                debit=item.direction == "debit",
                **extra,
            )
        factory = AchEntry.debit if item.direction == "debit" else AchEntry.credit
        return factory(
            entry_id,
            routing,
            item.account_number,
            Money.of(item.amount).amount,
            item.name,
            account_type=item.account_type,
            **extra,
        )

    # ------------------------------------------------------------------
    # Inbound text
    # ------------------------------------------------------------------

    @traced
    def validate(self, text: str) -> ServiceResult:
        """Structural scan, then a full parse when the structure is sound."""
        op = "nacha_validate"
        problems = self._rail.formatter.validate_format(text)
        if not problems:
            try:
                self._rail.parse_nacha_file(text)
            except FormatError as exc:
                problems = [exc.message]

        if problems:
            return ServiceResult(
                ok=False,
                op=op,
                data={"valid": False, "problems": problems},
                error=ServiceError(
                    code=FormatError.code,
                    message=f"NACHA file is invalid ({len(problems)} problem(s))",
                    detail={"problems": problems},
                ),
            )
        return ServiceResult(ok=True, op=op, data={"valid": True, "problems": []})

    @traced
    def inspect(self, text: str) -> ServiceResult:
        op = "nacha_inspect"
        warnings: list[str] = []
        try:
            ach_file = self._rail.parse_nacha_file(text)
        except PaymentRailError as exc:
            return ServiceResult.failure(op, exc)

        self._dispatch_event(
            "post_nacha_parsed",
            {
                "file_id": ach_file.id,
                "batch_count": ach_file.batch_count,
                "entry_count": ach_file.entry_count,
            },
            warnings,
        )
        return ServiceResult(ok=True, op=op, data=summarize_file(ach_file), warnings=warnings)

    @traced
    def roundtrip(self, text: str) -> ServiceResult:
        """Parse then regenerate; report whether the output is byte-identical."""
        op = "nacha_roundtrip"
        try:
            with trace_span("parse"):
                ach_file = self._rail.parse_nacha_file(text)
            with trace_span("generate"):
                regenerated = self._rail.formatter.generate(ach_file)
        except PaymentRailError as exc:
            return ServiceResult.failure(op, exc)

        original = text[:-1] if text.endswith("\n") else text
        difference = first_difference(original, regenerated)
        identical = difference is None
        if not identical:
            logger.info("Round trip of %s differs at line %d", ach_file.id, difference)
        data = {
            "file_id": ach_file.id,
            "identical": identical,
            "lines": len(regenerated.split("\n")),
            "first_difference": difference,
        }
        if identical:
            return ServiceResult(ok=True, op=op, data=data)
        return ServiceResult(
            ok=False,
            op=op,
            data=data,
            error=ServiceError(
                code="ROUNDTRIP_MISMATCH",
                message=f"Regenerated file differs from input at line {difference}",
                detail={"line": difference},
            ),
        )
