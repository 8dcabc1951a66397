"""routing / swift / iban groups: banking identifier checks."""

from __future__ import annotations

import click

from payrails.commands._base import PayrailsGroup
from payrails.commands._context import AppContext
from payrails.services.routing import RoutingService


@click.group(cls=PayrailsGroup)
def routing() -> None:
    """ABA routing transit numbers."""


@routing.command(
    "check",
    examples="  payrails routing check 021000021\n  payrails --json routing check 011000015",
)
@click.argument("number")
@click.pass_obj
def routing_check(app: AppContext, number: str) -> None:
    """Validate a routing number and show its Federal Reserve district."""
    app.emit(RoutingService().check_routing(number))


@click.group(cls=PayrailsGroup)
def swift() -> None:
    """SWIFT/BIC codes."""


@swift.command("check", examples="  payrails swift check DEUTDEFF500")
@click.argument("code")
@click.pass_obj
def swift_check(app: AppContext, code: str) -> None:
    """Validate a SWIFT/BIC code and break it into its parts."""
    app.emit(RoutingService().check_swift(code))


@click.group(cls=PayrailsGroup)
def iban() -> None:
    """International bank account numbers."""


@iban.command("check", examples='  payrails iban check "GB82 WEST 1234 5698 7654 32"')
@click.argument("value")
@click.pass_obj
def iban_check(app: AppContext, value: str) -> None:
    """Validate an IBAN's structure and mod-97 check digits."""
    app.emit(RoutingService().check_iban(value))
