"""Pluggy hook specifications for payrails lifecycle events.

Events are dispatched by :class:`~payrails.plugins.event_bus.EventBus`,
synchronously or on a ThreadPoolExecutor.  Payloads are plain JSON-able
keyword arguments so a hook never holds a reference into the core.
"""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("payrails")
hookimpl = pluggy.HookimplMarker("payrails")


class PayrailsHookSpec:
    """Hook specifications for the payrails plugin system."""

    @hookspec
    def post_rail_selected(
        self,
        rail_type: str,
        score: float,
        criteria: dict[str, Any],
        timestamp: str,
    ) -> None:
        """Called after RailSelector picks a rail."""

    @hookspec
    def post_nacha_generated(
        self,
        file_id: str,
        batch_count: int,
        entry_count: int,
        total_debits: int,
        total_credits: int,
    ) -> None:
        """Called after a NACHA file is rendered."""

    @hookspec
    def post_nacha_parsed(
        self,
        file_id: str,
        batch_count: int,
        entry_count: int,
    ) -> None:
        """Called after inbound NACHA text is parsed successfully."""
