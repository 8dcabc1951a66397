"""Shared pytest fixtures and test helpers for payrails tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from datetime import UTC, date, datetime
from pathlib import Path

import pytest
from click.testing import CliRunner

from payrails.domain.ach import AchBatch, AchEntry, AchFile
from payrails.domain.identifiers import RoutingNumber
from payrails.domain.types import SecCode
from payrails.rails.ach import AchRail
from payrails.rails.base import fixed_clock
from payrails.services.telemetry import _current_span, disable_telemetry

# Monday, 10:00 in New York.
NOW = datetime(2026, 10, 19, 14, 0, tzinfo=UTC)
EFFECTIVE = date(2026, 10, 20)
RECEIVER = RoutingNumber("011000015")
ODFI = RoutingNumber("021000021")


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test from an empty directory with no PAYRAILS_* overrides."""
    for key in list(os.environ):
        if key.startswith("PAYRAILS_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    yield
    disable_telemetry()
    _current_span.set(None)


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Generator[None]:
    """CLI runs reconfigure logging against a captured stderr; undo that."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    payrails_level = logging.getLogger("payrails").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("payrails").setLevel(payrails_level)


@pytest.fixture
def ach_rail() -> AchRail:
    """ACH rail with the default originator, frozen at NOW."""
    return AchRail(clock=fixed_clock(NOW))


@pytest.fixture
def single_credit_file(ach_rail: AchRail) -> AchFile:
    """One $12.34 PPD credit to account 123456789 at 011000015."""
    entry = AchEntry.credit("E1", RECEIVER, "123456789", 1234, "JANE DOE")
    batch = ach_rail.create_batch(
        [entry], sec_code=SecCode.PPD, entry_description="PAYROLL", effective_entry_date=EFFECTIVE
    )
    return ach_rail.build_file([batch], file_id="FILE-1")


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_batch(entries: list[AchEntry], *, batch_id: str = "B1") -> AchBatch:
    """Unnumbered batch originated by ODFI, effective EFFECTIVE."""
    return AchBatch(
        id=batch_id,
        sec_code=SecCode.CCD,
        company_name="ACME CORP",
        company_id="1234567890",
        company_entry_description="VENDORPAY",
        originating_dfi=ODFI,
        effective_entry_date=EFFECTIVE,
        entries=tuple(entries),
    )


def make_file(*batches: AchBatch) -> AchFile:
    """File from ODFI to RECEIVER with batches added in order."""
    ach_file = AchFile(
        id="F1",
        immediate_destination=RECEIVER,
        immediate_origin=ODFI,
        immediate_destination_name="FEDERAL RESERVE BANK",
        immediate_origin_name="ACME BANK",
        file_creation_datetime=datetime(2026, 10, 19, 9, 30),
    )
    for batch in batches:
        ach_file = ach_file.add_batch(batch)
    return ach_file
