"""RailSelector — filter the registered rails, score the survivors, pick one.

Score = base + speed + cost + capability fit + preference, each component
capped at ``component_cap`` and the total clamped to [0, 100].  Weights and
amount thresholds come from :class:`~payrails.config.models.SelectorConfig`.

INVARIANT: Ties go to the rail registered first.
INVARIANT: An event sink failure never changes or aborts a selection.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from payrails.config.models import SelectorConfig
from payrails.domain.capabilities import RailCapabilities
from payrails.domain.errors import NoEligibleRailError
from payrails.domain.money import Money
from payrails.domain.selection import RailSelected, RailSelectionCriteria
from payrails.domain.types import BeneficiaryType, RailType, Urgency
from payrails.services.telemetry import trace_span

if TYPE_CHECKING:
    from payrails.plugins.event_bus import EventBus
    from payrails.rails.base import PaymentRail

logger = logging.getLogger(__name__)

# 1 = cheapest.  A ``cost_rank`` additional capability overrides these.
DEFAULT_COST_RANKS: dict[RailType, int] = {
    RailType.ACH: 1,
    RailType.CHECK: 2,
    RailType.VIRTUAL_CARD: 3,
    RailType.WIRE: 4,
    RailType.RTGS: 5,
}

CURRENCY_COUNTRIES: dict[str, str] = {
    "USD": "US",
    "EUR": "DE",
    "GBP": "GB",
    "CAD": "CA",
    "AUD": "AU",
    "MYR": "MY",
    "SGD": "SG",
    "INR": "IN",
}

MAX_SCORE = 100.0


def country_for_currency(currency: str) -> str:
    """Home country of *currency*; unknown currencies map to ``US``."""
    return CURRENCY_COUNTRIES.get(currency.upper(), "US")


def cost_rank(capabilities: RailCapabilities) -> int:
    override = capabilities.get_capability("cost_rank")
    if isinstance(override, int) and not isinstance(override, bool):
        return override
    return DEFAULT_COST_RANKS[capabilities.rail_type]


class RailSelector:
    """Chooses the best rail for a :class:`RailSelectionCriteria`.

    Parameters:
        rails: Candidate rails in registration order.
        event_bus: Optional sink for ``post_rail_selected`` events.
        config: Scoring weights and thresholds.
    """

    def __init__(
        self,
        rails: Iterable[PaymentRail],
        *,
        event_bus: EventBus | None = None,
        config: SelectorConfig | None = None,
    ) -> None:
        self._rails: tuple[PaymentRail, ...] = tuple(rails)
        self._event_bus = event_bus
        self.config = config or SelectorConfig()

    @property
    def rails(self) -> tuple[PaymentRail, ...]:
        return self._rails

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def get_eligible_rails(self, criteria: RailSelectionCriteria) -> list[PaymentRail]:
        """Rails that can carry *criteria*, in registration order."""
        return [rail for rail in self._rails if self._is_eligible(rail, criteria)]

    def _is_eligible(self, rail: PaymentRail, criteria: RailSelectionCriteria) -> bool:
        if not rail.is_available():
            return False
        caps = rail.capabilities
        if not caps.supports_currency(criteria.currency):
            return False
        if not caps.is_amount_within_limits(criteria.money):
            return False
        if criteria.urgency is Urgency.REAL_TIME and not rail.is_real_time():
            return False
        if criteria.urgency is Urgency.URGENT and caps.typical_settlement_days > 1:
            return False
        if criteria.requires_recurring and not caps.supports_recurring:
            return False
        return self._rail_specific(rail, criteria)

    def _rail_specific(self, rail: PaymentRail, criteria: RailSelectionCriteria) -> bool:
        cfg = self.config
        urgency = criteria.urgency
        match rail.rail_type:
            case RailType.ACH:
                return criteria.currency == "USD" and not criteria.is_international
            case RailType.WIRE:
                scope = getattr(rail, "international", None)
                if scope is not None and scope != criteria.is_international:
                    return False
                return (
                    criteria.is_international
                    or criteria.amount >= cfg.medium_value_threshold
                    or urgency is Urgency.REAL_TIME
                )
            case RailType.CHECK:
                return (
                    urgency is Urgency.STANDARD
                    and not criteria.is_international
                    and criteria.amount <= cfg.high_value_threshold
                )
            case RailType.RTGS:
                return criteria.amount >= cfg.rtgs_floor and not criteria.is_international
            case RailType.VIRTUAL_CARD:
                return (
                    criteria.beneficiary_type is BeneficiaryType.VENDOR
                    and urgency is not Urgency.REAL_TIME
                )
        return False

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def calculate_fit_score(
        self, capabilities: RailCapabilities, criteria: RailSelectionCriteria
    ) -> float:
        """Total score in [0, 100] for a rail with *capabilities*."""
        total = (
            self.config.base_score
            + self.speed_score(capabilities, criteria)
            + self.cost_score(capabilities, criteria)
            + self.capability_fit_score(capabilities, criteria)
            + self.preference_score(capabilities, criteria)
        )
        return min(MAX_SCORE, max(0.0, total))

    def speed_score(self, capabilities: RailCapabilities, criteria: RailSelectionCriteria) -> float:
        cap = self.config.component_cap
        real_time = capabilities.is_real_time()
        days = capabilities.typical_settlement_days
        match criteria.urgency:
            case Urgency.REAL_TIME:
                return cap if real_time else 0.0
            case Urgency.URGENT:
                if real_time:
                    return cap
                return 15.0 if days == 1 else 5.0
        if real_time:
            return 20.0
        if days <= 1:
            return 15.0
        if days <= 2:
            return 12.0
        return 10.0

    def cost_score(self, capabilities: RailCapabilities, criteria: RailSelectionCriteria) -> float:
        step = self.config.low_cost_step if criteria.prefer_low_cost else self.config.cost_step
        score = self.config.component_cap - (cost_rank(capabilities) - 1) * step
        return max(0.0, min(self.config.component_cap, score))

    def capability_fit_score(
        self, capabilities: RailCapabilities, criteria: RailSelectionCriteria
    ) -> float:
        """Feature matches minus a penalty proportional to limit utilization."""
        cfg = self.config
        score = cfg.fit_base
        if criteria.requires_recurring and capabilities.supports_recurring:
            score += cfg.recurring_bonus
        if capabilities.supports_refunds or capabilities.get_capability("supports_refunds", False):
            score += cfg.refund_bonus
        score -= cfg.headroom_weight * capabilities.headroom_ratio(criteria.amount)
        return max(0.0, min(cfg.component_cap, score))

    def preference_score(
        self, capabilities: RailCapabilities, criteria: RailSelectionCriteria
    ) -> float:
        cfg = self.config
        rail_type = capabilities.rail_type
        score = 0.0
        if criteria.preferred_rail is rail_type:
            score += cfg.preferred_rail_bonus
        if criteria.amount >= cfg.high_value_threshold:
            if rail_type in (RailType.RTGS, RailType.WIRE):
                score += cfg.high_value_bonus
        elif criteria.amount <= cfg.low_value_threshold:
            if rail_type in (RailType.ACH, RailType.CHECK):
                score += cfg.low_value_bonus
        return min(cfg.component_cap, score)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def rank(self, criteria: RailSelectionCriteria) -> list[tuple[PaymentRail, float]]:
        """Eligible rails with their scores, best first (stable on ties)."""
        with trace_span("rank") as span:
            scored = [
                (rail, self.calculate_fit_score(rail.capabilities, criteria))
                for rail in self.get_eligible_rails(criteria)
            ]
            if span:
                span.annotate("eligible", len(scored))
        return sorted(scored, key=lambda pair: pair[1], reverse=True)

    def select_scored(self, criteria: RailSelectionCriteria) -> tuple[PaymentRail, float]:
        """Best rail and its score; dispatches ``post_rail_selected``.

        Raises:
            NoEligibleRailError: no registered rail can carry *criteria*.
        """
        ranked = self.rank(criteria)
        if not ranked:
            logger.info(
                "No eligible rail for %d %s (%s)",
                criteria.amount,
                criteria.currency,
                criteria.urgency.value,
            )
            raise NoEligibleRailError(criteria)

        rail, score = ranked[0]
        logger.info(
            "Payment rail selected: %s score=%.2f amount=%d %s",
            rail.rail_type.value,
            score,
            criteria.amount,
            criteria.currency,
        )
        self._emit(RailSelected(rail_type=rail.rail_type, criteria=criteria, score=score))
        return rail, score

    def select(self, criteria: RailSelectionCriteria) -> PaymentRail:
        """The highest-scoring eligible rail."""
        return self.select_scored(criteria)[0]

    def get_fastest_rail(self, criteria: RailSelectionCriteria) -> PaymentRail:
        """Eligible rail with the fewest settlement days; score breaks ties."""
        ranked = self.rank(criteria)
        if not ranked:
            raise NoEligibleRailError(criteria)
        return min(ranked, key=lambda p: p[0].capabilities.typical_settlement_days)[0]

    def get_cheapest_rail(self, criteria: RailSelectionCriteria) -> PaymentRail:
        """Eligible rail with the lowest cost rank; score breaks ties."""
        ranked = self.rank(criteria)
        if not ranked:
            raise NoEligibleRailError(criteria)
        return min(ranked, key=lambda p: cost_rank(p[0].capabilities))[0]

    def get_optimal_domestic_rail(
        self, amount: Money, currency: str | None = None
    ) -> PaymentRail:
        """Standard-urgency, cost-sensitive selection inside *currency*'s home country."""
        currency = currency or amount.currency
        criteria = RailSelectionCriteria(
            amount=amount.amount,
            currency=currency,
            destination_country=country_for_currency(currency),
            urgency=Urgency.STANDARD,
            prefer_low_cost=True,
        )
        return self.select(criteria)

    def get_optimal_international_rail(
        self, amount: Money, source_currency: str, destination_country: str
    ) -> PaymentRail:
        """Cross-border selection that favours speed over cost."""
        criteria = RailSelectionCriteria(
            amount=amount.amount,
            currency=source_currency,
            destination_country=destination_country,
            urgency=Urgency.STANDARD,
            is_international=True,
            prefer_low_cost=False,
        )
        return self.select(criteria)

    def _emit(self, event: RailSelected) -> None:
        if self._event_bus is None or not self.config.emit_events:
            return
        try:
            self._event_bus.dispatch("post_rail_selected", event.to_payload())
        except Exception:
            logger.warning("Event dispatch failed for post_rail_selected", exc_info=True)
