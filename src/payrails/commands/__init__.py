"""Subcommand modules for payrails.

Provides register_commands() which uses deferred imports to keep
``payrails --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from payrails.commands.identifiers import iban, routing, swift
    from payrails.commands.nacha import nacha

    cli.add_command(nacha)
    cli.add_command(routing)
    cli.add_command(swift)
    cli.add_command(iban)

    # --- Standalone commands ---
    from payrails.commands.select_cmd import select

    cli.add_command(select)
