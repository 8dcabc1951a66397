"""select command: pick the best payment rail for a payment."""

from __future__ import annotations

from datetime import datetime

import click

from payrails.commands._base import AMOUNT, PayrailsCommand
from payrails.commands._context import AppContext
from payrails.domain.money import Money
from payrails.domain.selection import RailSelectionCriteria
from payrails.domain.types import BeneficiaryType, RailType, Urgency
from payrails.rails.base import fixed_clock
from payrails.services.selection import SelectionService
from payrails.services.selector import country_for_currency


@click.command(
    cls=PayrailsCommand,
    examples="""\
  payrails select --amount 12.34
  payrails select --amount 100000 --urgency real-time
  payrails select --amount 2500 --currency EUR --international --country DE
  payrails select --amount 750 --beneficiary-type vendor --prefer-low-cost
  payrails select --amount 50000 --at 2026-10-19T22:30:00Z""",
)
@click.option("--amount", type=AMOUNT, required=True, help="Decimal amount, e.g. 12.34.")
@click.option("--currency", default="USD", show_default=True, help="ISO 4217 currency code.")
@click.option(
    "--urgency",
    type=click.Choice([u.value for u in Urgency]),
    default=Urgency.STANDARD.value,
    show_default=True,
)
@click.option("--international", is_flag=True, help="Cross-border payment.")
@click.option("--prefer-low-cost", is_flag=True, help="Weight cost more heavily.")
@click.option("--recurring", is_flag=True, help="Rail must support recurring payments.")
@click.option(
    "--beneficiary-type",
    type=click.Choice([b.value for b in BeneficiaryType]),
    default=BeneficiaryType.BUSINESS.value,
    show_default=True,
)
@click.option(
    "--preferred-rail",
    type=click.Choice([r.value for r in RailType]),
    default=None,
    help="Give this rail a preference bonus.",
)
@click.option("--country", default=None, help="Destination country (default: currency's home).")
@click.option(
    "--at",
    "at",
    type=click.DateTime(formats=["%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%SZ", "%Y-%m-%dT%H:%M"]),
    default=None,
    help="Evaluate availability at this moment instead of now (naive = UTC).",
)
@click.pass_obj
def select(
    app: AppContext,
    amount: str,
    currency: str,
    urgency: str,
    international: bool,
    prefer_low_cost: bool,
    recurring: bool,
    beneficiary_type: str,
    preferred_rail: str | None,
    country: str | None,
    at: datetime | None,
) -> None:
    """Pick the best payment rail and show how every eligible rail scored."""
    try:
        money = Money.of(amount, currency)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--currency") from exc

    criteria = RailSelectionCriteria(
        amount=money.amount,
        currency=money.currency,
        destination_country=country or country_for_currency(money.currency),
        urgency=Urgency(urgency),
        prefer_low_cost=prefer_low_cost,
        is_international=international,
        requires_recurring=recurring,
        beneficiary_type=BeneficiaryType(beneficiary_type),
        preferred_rail=RailType(preferred_rail) if preferred_rail else None,
    )
    selector = app.selector(fixed_clock(at) if at is not None else None)
    app.emit(SelectionService(selector).select(criteria))
