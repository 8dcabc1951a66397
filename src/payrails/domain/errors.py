"""Error taxonomy for the payrails core.

Every error carries a kind tag (``code``), a human message, the full list
of individual problems (``errors``), and a named-field payload
(``detail``).  The service layer turns any of them into a
:class:`~payrails.services.result.ServiceError` without inspecting the
concrete class.

INVARIANT: Identifier errors never echo more than the last four digits of
a routing number.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from payrails.domain.selection import RailSelectionCriteria
    from payrails.domain.types import RailType


def mask_digits(value: str, visible: int = 4) -> str:
    """Replace all but the last *visible* characters with ``*``."""
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


def format_minor_units(amount: int) -> str:
    """Render integer minor units as a two-decimal string without floats."""
    sign = "-" if amount < 0 else ""
    whole, cents = divmod(abs(amount), 100)
    return f"{sign}{whole}.{cents:02d}"


class PaymentRailError(Exception):
    """Base class for all payrails errors."""

    code = "PAYMENT_RAIL"

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.errors: list[str] = list(errors) if errors is not None else [message]
        self.detail: dict[str, Any] = dict(detail or {})


# ---------------------------------------------------------------------------
# Wire format
# ---------------------------------------------------------------------------


class FormatError(PaymentRailError):
    """Malformed or truncated NACHA input. Unrecoverable."""

    code = "NACHA_FORMAT"

    def __init__(self, message: str, *, line: int | None = None) -> None:
        detail = {"line": line} if line is not None else {}
        text = f"Line {line}: {message}" if line is not None else message
        super().__init__(text, detail=detail)
        self.line = line


# ---------------------------------------------------------------------------
# Business-rule validation
# ---------------------------------------------------------------------------


class ValidationError(PaymentRailError):
    """One or more business-rule violations, collected."""

    code = "VALIDATION"

    @classmethod
    def multiple(cls, errors: list[str], *, subject: str = "Validation") -> ValidationError:
        return cls(
            f"{subject} failed with {len(errors)} error(s)",
            errors=errors,
        )


class AchValidationError(ValidationError):
    """ACH entry/batch/file assembly rejected."""

    code = "ACH_VALIDATION"

    @classmethod
    def unbalanced_batch(cls, debits: int, credits: int) -> AchValidationError:
        d, c = format_minor_units(debits), format_minor_units(credits)
        return cls(
            f"Batch is unbalanced: debits ({d}) do not equal credits ({c})",
            errors=[f"Debits: {d}", f"Credits: {c}"],
        )

    @classmethod
    def duplicate_trace_number(cls, trace_number: str) -> AchValidationError:
        return cls(
            f"Trace number {trace_number} is already used in this file",
            detail={"trace_number": trace_number},
        )


class RailValidationError(ValidationError):
    """A payment request does not satisfy a rail's rules."""

    code = "RAIL_VALIDATION"

    @classmethod
    def for_rail(cls, rail_type: RailType, errors: list[str]) -> RailValidationError:
        return cls(
            f"{rail_type.label} validation failed with {len(errors)} error(s)",
            errors=errors,
            detail={"rail_type": rail_type.value},
        )


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


class IdentifierError(PaymentRailError):
    """Checksum or structure failure on a banking identifier."""

    code = "INVALID_IDENTIFIER"

    def __init__(self, kind: str, shown: str, reason: str) -> None:
        super().__init__(
            f"Invalid {kind} '{shown}': {reason}",
            detail={"kind": kind, "value": shown, "reason": reason},
        )
        self.kind = kind
        self.reason = reason

    @classmethod
    def routing_length(cls, raw: str) -> IdentifierError:
        return cls("routing number", mask_digits(raw), "Must be exactly 9 digits")

    @classmethod
    def routing_checksum(cls, digits: str) -> IdentifierError:
        return cls("routing number", mask_digits(digits), "Failed checksum validation (mod-10)")

    @classmethod
    def swift(cls, raw: str, reason: str) -> IdentifierError:
        return cls("SWIFT/BIC code", raw, reason)

    @classmethod
    def iban(cls, raw: str, reason: str) -> IdentifierError:
        return cls("IBAN", mask_digits(raw), reason)


# ---------------------------------------------------------------------------
# Selection and availability
# ---------------------------------------------------------------------------


class NoEligibleRailError(PaymentRailError):
    """Selection found zero candidate rails."""

    code = "NO_ELIGIBLE_RAIL"

    def __init__(self, criteria: RailSelectionCriteria) -> None:
        super().__init__(
            (
                f"No eligible payment rail for {format_minor_units(criteria.amount)} "
                f"{criteria.currency} ({criteria.urgency.value})"
            ),
            detail={"criteria": criteria.model_dump(mode="json")},
        )
        self.criteria = criteria


class RailUnavailableError(PaymentRailError):
    """A specific rail is closed for operating-hours or business reasons."""

    code = "RAIL_UNAVAILABLE"

    def __init__(
        self,
        rail_type: RailType,
        reason: str,
        *,
        expected_availability: datetime | None = None,
    ) -> None:
        detail: dict[str, Any] = {"rail_type": rail_type.value, "reason": reason}
        if expected_availability is not None:
            detail["expected_availability"] = expected_availability.isoformat()
        super().__init__(
            f"Payment rail '{rail_type.label}' is unavailable: {reason}",
            detail=detail,
        )
        self.rail_type = rail_type
        self.reason = reason
        self.expected_availability = expected_availability

    @classmethod
    def disabled(cls, rail_type: RailType) -> RailUnavailableError:
        return cls(rail_type, "Disabled by configuration")

    @classmethod
    def cutoff_passed(
        cls, rail_type: RailType, next_window: datetime | None = None
    ) -> RailUnavailableError:
        return cls(
            rail_type,
            "Cutoff time has passed for today",
            expected_availability=next_window,
        )
