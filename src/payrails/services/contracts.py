"""Typed payload contracts for service and adapter boundaries.

Request models validate what the CLI reads from disk or flags before it
reaches the domain.  Result models pin the shape of ``ServiceResult.data``
so key regressions fail fast in tests.

Amounts in result payloads are decimal strings (``"12.34"``), never floats.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from payrails.domain.money import Money
from payrails.domain.types import AccountType, SecCode


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="json")


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class EntryRequest(BaseModel):
    """One entry in a batch description file."""

    model_config = ConfigDict(extra="forbid")

    name: str
    routing_number: str
    account_number: str
    amount: str = "0"
    direction: Literal["credit", "debit"] = "credit"
    account_type: AccountType = AccountType.CHECKING
    prenote: bool = False
    individual_id: str = ""
    addenda: str | None = None

    @field_validator("amount")
    @classmethod
    def _decimal_amount(cls, value: str) -> str:
        if Money.of(value).amount < 0:
            raise ValueError("amount cannot be negative")
        return value


class BatchRequest(BaseModel):
    """A batch description, as read by ``payrails nacha generate``."""

    model_config = ConfigDict(extra="forbid")

    sec_code: SecCode = SecCode.PPD
    entry_description: str = "PAYMENT"
    effective_entry_date: date | None = None
    same_day: bool = False
    entries: list[EntryRequest] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class BatchSummary(BaseModel):
    batch_number: int
    sec_code: str
    company_name: str
    company_id: str
    entry_description: str
    effective_entry_date: str
    service_class_code: int
    entry_count: int
    addenda_count: int
    entry_hash: int
    total_debits: str
    total_credits: str


class FileSummary(BaseModel):
    """Payload contract for ``NachaService.inspect`` and ``generate``."""

    file_id: str
    status: str
    immediate_destination: str
    immediate_origin: str
    destination_name: str
    origin_name: str
    created: str
    file_id_modifier: str
    batch_count: int
    entry_count: int
    addenda_count: int
    record_count: int
    block_count: int
    entry_hash: int
    total_debits: str
    total_credits: str
    batches: list[BatchSummary]


class RoutingCheckData(BaseModel):
    """Payload contract for ``RoutingService.check_routing``."""

    routing_number: str
    masked: str
    federal_reserve_district: int
    thrift: bool
    government: bool
    electronic: bool
    ach_eligible: bool


class SwiftCheckData(BaseModel):
    swift_code: str
    bank_code: str
    country_code: str
    location_code: str
    branch_code: str | None
    primary_office: bool
    test_code: bool


class IbanCheckData(BaseModel):
    iban: str
    formatted: str
    country_code: str
    check_digits: str
    bban: str


class RankedRail(BaseModel):
    rail: str
    rail_type: str
    score: float
    settlement_days: int
    real_time: bool


class SelectionData(BaseModel):
    """Payload contract for ``SelectionService.select``."""

    rail: str
    rail_type: str
    score: float
    criteria: dict[str, Any]
    ranking: list[RankedRail]
