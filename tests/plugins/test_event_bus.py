"""Tests for EventBus — sync and pooled hook dispatch."""

from __future__ import annotations

import threading
from concurrent.futures import wait
from typing import Any

import pytest

from payrails.plugins.event_bus import DispatchOutcome, EventBus
from payrails.plugins.hookspecs import hookimpl
from payrails.plugins.manager import PluginManager

PARSED = {"file_id": "F1", "batch_count": 1, "entry_count": 3}


class RecordingPlugin:
    """Plugin that records every post_nacha_parsed call."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    @hookimpl
    def post_nacha_parsed(self, file_id: str, batch_count: int, entry_count: int) -> None:
        self.calls.append(
            {"file_id": file_id, "batch_count": batch_count, "entry_count": entry_count}
        )


class FailingPlugin:
    @hookimpl
    def post_nacha_parsed(self, file_id: str, batch_count: int, entry_count: int) -> None:
        msg = "Plugin exploded!"
        raise RuntimeError(msg)


@pytest.fixture
def pm_with_recorder() -> tuple[PluginManager, RecordingPlugin]:
    pm = PluginManager()
    recorder = RecordingPlugin()
    pm.register_plugin(recorder, name="recorder")
    return pm, recorder


@pytest.fixture
def pm_with_failer() -> PluginManager:
    pm = PluginManager()
    pm.register_plugin(FailingPlugin(), name="failer")
    return pm


class TestSyncDispatch:
    def test_runs_inline(self, pm_with_recorder: tuple[PluginManager, RecordingPlugin]) -> None:
        pm, recorder = pm_with_recorder
        bus = EventBus(pm, sync=True)
        bus.dispatch("post_nacha_parsed", PARSED)
        assert bus.is_sync
        assert recorder.calls == [PARSED]

    def test_flush_reports_outcomes(
        self, pm_with_recorder: tuple[PluginManager, RecordingPlugin]
    ) -> None:
        pm, _ = pm_with_recorder
        bus = EventBus(pm, sync=True)
        bus.dispatch("post_nacha_parsed", PARSED)
        assert bus.flush() == [DispatchOutcome("post_nacha_parsed", ok=True)]
        assert bus.flush() == []

    def test_unknown_hook_is_ok(self) -> None:
        bus = EventBus(PluginManager(), sync=True)
        bus.dispatch("post_nothing", {})
        assert bus.flush() == [DispatchOutcome("post_nothing", ok=True)]

    def test_plugin_failure_is_recorded_not_raised(self, pm_with_failer: PluginManager) -> None:
        bus = EventBus(pm_with_failer, sync=True)
        bus.dispatch("post_nacha_parsed", PARSED)
        [outcome] = bus.flush()
        assert not outcome.ok
        assert outcome.error == "Plugin exploded!"


class TestPooledDispatch:
    def test_flush_waits_for_workers(
        self, pm_with_recorder: tuple[PluginManager, RecordingPlugin]
    ) -> None:
        pm, recorder = pm_with_recorder
        bus = EventBus(pm, max_workers=2)
        try:
            assert not bus.is_sync
            for _ in range(3):
                bus.dispatch("post_nacha_parsed", PARSED)
            outcomes = bus.flush()
        finally:
            bus.shutdown()
        assert len(outcomes) == 3
        assert all(o.ok for o in outcomes)
        assert len(recorder.calls) == 3

    def test_failure_in_worker_is_recorded(self, pm_with_failer: PluginManager) -> None:
        bus = EventBus(pm_with_failer)
        bus.dispatch("post_nacha_parsed", PARSED)
        outcomes = bus.shutdown()
        assert [o.ok for o in outcomes] == [False]

    def test_shutdown_falls_back_to_inline(
        self, pm_with_recorder: tuple[PluginManager, RecordingPlugin]
    ) -> None:
        pm, recorder = pm_with_recorder
        bus = EventBus(pm)
        bus.shutdown()
        bus.dispatch("post_nacha_parsed", PARSED)
        assert recorder.calls == [PARSED]

    def test_finished_events_are_collected_on_dispatch(
        self, pm_with_recorder: tuple[PluginManager, RecordingPlugin]
    ) -> None:
        pm, _ = pm_with_recorder
        bus = EventBus(pm)
        bus.dispatch("post_nacha_parsed", PARSED)
        wait(list(bus._futures))
        bus.dispatch("post_nacha_parsed", PARSED)
        assert bus.pending == 1
        assert len(bus.shutdown()) == 2

    def test_dispatch_from_many_threads(
        self, pm_with_recorder: tuple[PluginManager, RecordingPlugin]
    ) -> None:
        pm, recorder = pm_with_recorder
        bus = EventBus(pm, max_workers=4)

        def send() -> None:
            for _ in range(25):
                bus.dispatch("post_nacha_parsed", PARSED)

        threads = [threading.Thread(target=send) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        outcomes = bus.shutdown()
        assert len(outcomes) == 100
        assert all(o.ok for o in outcomes)
        assert len(recorder.calls) == 100
