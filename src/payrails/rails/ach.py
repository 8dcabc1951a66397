"""AchRail — batch ACH origination through NACHA files."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from payrails.config.models import AchConfig, parse_hhmm
from payrails.domain.ach import AchBatch, AchEntry, AchFile
from payrails.domain.capabilities import RailCapabilities
from payrails.domain.identifiers import RoutingNumber
from payrails.domain.types import FileStatus, RailType, SecCode
from payrails.nacha.formatter import NachaFormatter
from payrails.rails.base import (
    Availability,
    Clock,
    generate_reference,
    next_business_day,
    system_clock,
)

logger = logging.getLogger(__name__)


class AchRail:
    """Domestic USD batch payments.

    Builds :class:`AchBatch`/:class:`AchFile` graphs from the originator
    identity in :class:`AchConfig` and hands them to the NACHA codec.
    """

    def __init__(
        self,
        config: AchConfig | None = None,
        *,
        capabilities: RailCapabilities | None = None,
        availability: Availability | None = None,
        formatter: NachaFormatter | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self.config = config or AchConfig()
        self._capabilities = capabilities or RailCapabilities.for_ach()
        self._availability = availability or Availability()
        self._formatter = formatter or NachaFormatter()
        self._clock = clock

    # --- PaymentRail ---

    @property
    def rail_type(self) -> RailType:
        return RailType.ACH

    @property
    def capabilities(self) -> RailCapabilities:
        return self._capabilities

    def is_available(self) -> bool:
        return self._availability.check(self._capabilities, self._clock()) is None

    def is_real_time(self) -> bool:
        return self._capabilities.is_real_time()

    # --- Scheduling ---

    def is_same_day_available(self) -> bool:
        """Whether a same-day batch submitted now would make the window."""
        if not self.config.same_day_enabled:
            return False
        if not self._capabilities.has_capability("supports_same_day"):
            return False
        hour, minute = parse_hhmm(self.config.same_day_cutoff)
        local = self._local_now()
        return local.weekday() < 5 and local.time() <= time(hour, minute)

    def next_effective_date(self, *, same_day: bool = False) -> date:
        """Today for a same-day batch inside the window, else the next business day."""
        today = self._local_now().date()
        if same_day and self.is_same_day_available():
            return today
        return next_business_day(today)

    def _local_now(self) -> datetime:
        return self._clock().astimezone(ZoneInfo(self._capabilities.cutoff_timezone))

    # --- Assembly ---

    def create_batch(
        self,
        entries: Iterable[AchEntry],
        *,
        sec_code: SecCode = SecCode.PPD,
        entry_description: str = "PAYMENT",
        effective_entry_date: date | None = None,
        same_day: bool = False,
        batch_id: str | None = None,
        discretionary_data: str = "",
    ) -> AchBatch:
        """A batch originated by this rail's company and ODFI.

        Raises:
            RailUnavailableError: if the rail is disabled or past cutoff.
        """
        self._availability.ensure(self._capabilities, self._clock())
        batch = AchBatch(
            id=batch_id or generate_reference("BATCH"),
            sec_code=sec_code,
            company_name=self.config.company_name,
            company_id=self.config.company_id,
            company_entry_description=entry_description,
            originating_dfi=RoutingNumber(self.config.immediate_origin),
            effective_entry_date=(
                effective_entry_date or self.next_effective_date(same_day=same_day)
            ),
            entries=tuple(entries),
            company_discretionary_data=discretionary_data,
        )
        logger.debug(
            "Created ACH batch %s (%s, %d entries)", batch.id, sec_code.value, batch.entry_count
        )
        return batch

    def build_file(self, batches: Iterable[AchBatch], *, file_id: str | None = None) -> AchFile:
        """Wrap *batches* in a file addressed per :class:`AchConfig`.

        Batch numbers and trace numbers are assigned in order.
        """
        ach_file = AchFile(
            id=file_id or generate_reference("FILE"),
            immediate_destination=RoutingNumber(self.config.immediate_destination),
            immediate_origin=RoutingNumber(self.config.immediate_origin),
            immediate_destination_name=self.config.immediate_destination_name,
            immediate_origin_name=self.config.immediate_origin_name,
            file_creation_datetime=self._local_now().replace(second=0, microsecond=0, tzinfo=None),
            file_id_modifier=self.config.file_id_modifier,
        )
        for batch in batches:
            ach_file = ach_file.add_batch(batch)
        return ach_file

    # --- Codec ---

    def generate_nacha_file(self, ach_file: AchFile) -> tuple[AchFile, str]:
        """Render *ach_file*; returns the file marked generated plus its text."""
        self._availability.ensure(self._capabilities, self._clock())
        text = self._formatter.generate(ach_file)
        logger.info(
            "Generated NACHA file %s (%d batches, %d entries)",
            ach_file.id,
            ach_file.batch_count,
            ach_file.entry_count,
        )
        return ach_file.with_status(FileStatus.GENERATED), text

    @property
    def formatter(self) -> NachaFormatter:
        return self._formatter

    def parse_nacha_file(self, text: str) -> AchFile:
        return self._formatter.parse(text)

    def validate_routing_number(self, value: str) -> bool:
        return RoutingNumber.try_parse(value) is not None
