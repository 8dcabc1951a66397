"""Selection inputs and outputs: criteria, events, and transaction requests.

These are frozen Pydantic models so they validate on construction and
serialize cleanly into event payloads and CLI output.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from payrails.domain.money import Money
from payrails.domain.types import BeneficiaryType, RailType, Urgency


class RailSelectionCriteria(BaseModel):
    """What the payer needs from a rail.

    ``amount`` is in minor units of ``currency``.
    """

    model_config = {"frozen": True}

    amount: int = Field(ge=0)
    currency: str = "USD"
    destination_country: str = "US"
    urgency: Urgency = Urgency.STANDARD
    prefer_low_cost: bool = False
    is_international: bool = False
    requires_recurring: bool = False
    beneficiary_type: BeneficiaryType = BeneficiaryType.BUSINESS
    preferred_rail: RailType | None = None

    @field_validator("currency", "destination_country")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def money(self) -> Money:
        return Money(self.amount, self.currency)

    def with_changes(self, **changes: Any) -> RailSelectionCriteria:
        """Copy with *changes* applied and re-validated."""
        return RailSelectionCriteria.model_validate({**self.model_dump(), **changes})


class RailSelected(BaseModel):
    """Emitted after RailSelector picks a rail."""

    model_config = {"frozen": True}

    rail_type: RailType
    criteria: RailSelectionCriteria
    score: float
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_payload(self) -> dict[str, Any]:
        """Hook keyword arguments for ``post_rail_selected``."""
        return {
            "rail_type": self.rail_type.value,
            "score": self.score,
            "criteria": self.criteria.model_dump(mode="json"),
            "timestamp": self.timestamp.isoformat(),
        }


class RailTransactionRequest(BaseModel):
    """A payment request to validate against a specific rail."""

    model_config = {"frozen": True}

    amount: Money
    beneficiary_name: str = ""
    beneficiary_address: str | None = None
    beneficiary_country: str | None = None
    routing_number: str | None = None
    account_number: str | None = None
    swift_code: str | None = None
    iban: str | None = None
    is_international: bool = False
    purpose_of_payment: str | None = None
    memo: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
