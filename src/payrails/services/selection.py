"""SelectionService — ServiceResult facade over RailSelector and RailValidator."""

from __future__ import annotations

from typing import TYPE_CHECKING

from payrails.domain.errors import PaymentRailError
from payrails.domain.selection import RailSelectionCriteria, RailTransactionRequest
from payrails.services.base import BaseService
from payrails.services.contracts import RankedRail, SelectionData, dump_validated
from payrails.services.result import ServiceResult
from payrails.services.selector import RailSelector
from payrails.services.telemetry import traced
from payrails.services.validator import RailValidator

if TYPE_CHECKING:
    from payrails.rails.base import PaymentRail


def describe_rail(rail: PaymentRail) -> str:
    """Display name; wires say whether they are the domestic or international rail."""
    scope = getattr(rail, "international", None)
    if scope is None:
        return rail.rail_type.label
    return f"{rail.rail_type.label} ({'international' if scope else 'domestic'})"


class SelectionService(BaseService):
    """Picks a rail for a payment and validates requests against rails."""

    def __init__(self, selector: RailSelector, validator: RailValidator | None = None) -> None:
        super().__init__()
        self._selector = selector
        self._validator = validator or RailValidator()

    @traced
    def select(self, criteria: RailSelectionCriteria) -> ServiceResult:
        """Best rail plus the full ranking of eligible alternatives."""
        op = "select_rail"
        try:
            rail, score = self._selector.select_scored(criteria)
        except PaymentRailError as exc:
            return ServiceResult.failure(op, exc)

        ranking = [
            RankedRail(
                rail=describe_rail(candidate),
                rail_type=candidate.rail_type.value,
                score=candidate_score,
                settlement_days=candidate.capabilities.typical_settlement_days,
                real_time=candidate.is_real_time(),
            )
            for candidate, candidate_score in self._selector.rank(criteria)
        ]
        data = {
            "rail": describe_rail(rail),
            "rail_type": rail.rail_type.value,
            "score": score,
            "criteria": criteria.model_dump(mode="json"),
            "ranking": ranking,
        }
        return ServiceResult(ok=True, op=op, data=dump_validated(SelectionData, data))

    @traced
    def validate_request(
        self, request: RailTransactionRequest, rail: PaymentRail
    ) -> ServiceResult:
        op = "validate_request"
        try:
            self._validator.validate(request, rail)
        except PaymentRailError as exc:
            return ServiceResult.failure(op, exc)
        return ServiceResult(ok=True, op=op, data={"rail": describe_rail(rail), "valid": True})
