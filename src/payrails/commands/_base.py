"""Click building blocks shared by the payrails commands.

``PayrailsCommand`` / ``PayrailsGroup`` take an ``examples=`` string and
expose it through an eager ``--examples`` flag so ``--help`` stays short.
``AMOUNT`` is the parameter type for decimal money amounts.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

import click


class _ExamplesMixin:
    """Adds ``--examples`` to any Click command class when examples are given."""

    params: list[click.Parameter]

    def _install_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return

        def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
            if value:
                click.echo(f"Examples for '{ctx.command_path}':\n\n{examples}")
                ctx.exit(0)

        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=show,
                help="Show usage examples.",
            )
        )


class PayrailsCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._install_examples(examples)


class PayrailsGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands are PayrailsCommands by default."""

    command_class = PayrailsCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._install_examples(examples)


class AmountType(click.ParamType):
    """A non-negative decimal amount such as ``12.34``; passed on as text."""

    name = "amount"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> str:
        text = str(value).strip()
        try:
            amount = Decimal(text)
        except InvalidOperation:
            self.fail(f"{value!r} is not a decimal amount", param, ctx)
        if not amount.is_finite():
            self.fail(f"{value!r} is not a decimal amount", param, ctx)
        if amount < 0:
            self.fail("amount cannot be negative", param, ctx)
        return text


AMOUNT = AmountType()
