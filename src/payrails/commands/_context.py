"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy rail/plugin initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click

from payrails.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from payrails.config.models import PayrailsConfig
    from payrails.config.settings import PayrailsSettings
    from payrails.plugins.event_bus import EventBus
    from payrails.rails.ach import AchRail
    from payrails.rails.base import Clock, PaymentRail
    from payrails.services.nacha import NachaService
    from payrails.services.result import ServiceResult
    from payrails.services.selector import RailSelector

logger = logging.getLogger(__name__)


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Rails, plugins, and the event bus are built on first use so
    ``--help`` and ``--version`` never load plugins.
    """

    def __init__(self, settings: PayrailsSettings) -> None:
        self.settings = settings
        self.config: PayrailsConfig = settings.to_config()
        self._event_bus: EventBus | None = None
        self._rails: list[PaymentRail] | None = None

        # Configure structured logging
        from payrails.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        # Enable telemetry context var when verbose
        if settings.verbose:
            from payrails.services.telemetry import enable_telemetry

            enable_telemetry()

    # ------------------------------------------------------------------
    # Lazy collaborators
    # ------------------------------------------------------------------

    @property
    def event_bus(self) -> EventBus | None:
        """Event bus over the loaded plugins, or None when plugins are disabled."""
        if self._event_bus is None and self.config.plugins.enabled:
            from payrails.plugins import EventBus, PluginManager

            manager = PluginManager()
            names = manager.discover_and_load(disabled=self.config.plugins.disabled)
            logger.debug("Loaded plugins: %s", names)
            self._event_bus = EventBus(manager, sync=self.settings.sync)
        return self._event_bus

    def build_rails(self, clock: Clock | None = None) -> list[PaymentRail]:
        from payrails.rails import build_rails
        from payrails.rails.base import system_clock

        return build_rails(self.config, clock or system_clock)

    @property
    def rails(self) -> list[PaymentRail]:
        if self._rails is None:
            self._rails = self.build_rails()
        return self._rails

    @property
    def ach_rail(self) -> AchRail:
        """The registered ACH rail, or a standalone one when ACH is switched off."""
        from payrails.rails.ach import AchRail

        for rail in self.rails:
            if isinstance(rail, AchRail):
                return rail
        return AchRail(self.config.ach)

    def selector(self, clock: Clock | None = None) -> RailSelector:
        from payrails.services.selector import RailSelector

        rails = self.rails if clock is None else self.build_rails(clock)
        return RailSelector(rails, event_bus=self.event_bus, config=self.config.selector)

    @property
    def nacha_service(self) -> NachaService:
        from payrails.services.nacha import NachaService

        return NachaService(self.ach_rail, event_bus=self.event_bus)

    def close(self) -> None:
        """Drain the event bus; plugin failures surface as warnings only."""
        if self._event_bus is None:
            return
        for outcome in self._event_bus.shutdown():
            if not outcome.ok:
                click.echo(f"WARNING: plugin hook {outcome.hook_name} failed", err=True)
        self._event_bus = None

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
