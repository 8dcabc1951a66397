"""Event dispatch via pluggy + ThreadPoolExecutor.

``dispatch()`` runs a hook inline when ``sync`` is set, otherwise on a
small worker pool; ``flush()`` is the barrier that waits for in-flight
events and reports their outcome.

Outcomes are kept until ``flush()`` or ``shutdown()`` collects them, so
long-lived callers should flush periodically.  Finished futures are
folded into outcomes on every dispatch.

INVARIANT: Plugin failures are warnings, never errors.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from payrails.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchOutcome:
    """What happened to one dispatched event."""

    hook_name: str
    ok: bool
    error: str | None = None


class EventBus:
    """Hook dispatch that never lets a plugin fail the caller.

    Safe to share between threads.

    Parameters:
        plugin_manager: Loaded PluginManager for hook dispatch.
        sync: Run hooks inline (the CLI default; ``--async-events`` clears it).
        max_workers: ThreadPoolExecutor worker count.
    """

    def __init__(
        self,
        plugin_manager: PluginManager,
        *,
        sync: bool = False,
        max_workers: int = 2,
    ) -> None:
        self._pm = plugin_manager
        self._sync = sync
        self._executor: ThreadPoolExecutor | None = (
            None if sync else ThreadPoolExecutor(max_workers=max_workers)
        )
        self._lock = threading.Lock()
        self._futures: list[Future[DispatchOutcome]] = []
        self._outcomes: list[DispatchOutcome] = []

    @property
    def is_sync(self) -> bool:
        return self._sync

    @property
    def pending(self) -> int:
        """Futures dispatched but not yet folded into outcomes."""
        with self._lock:
            return len(self._futures)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> None:
        """Run *hook_name* with *payload* inline (sync) or on the pool."""
        if self._sync or self._executor is None:
            outcome = self._execute_hook(hook_name, payload)
            with self._lock:
                self._outcomes.append(outcome)
            return
        future = self._executor.submit(self._execute_hook, hook_name, payload)
        with self._lock:
            self._collect_finished()
            self._futures.append(future)

    def flush(self) -> list[DispatchOutcome]:
        """Wait for in-flight events and return every outcome since the last flush."""
        with self._lock:
            futures, self._futures = self._futures, []
        finished = [future.result(timeout=30) for future in futures]
        with self._lock:
            outcomes, self._outcomes = [*self._outcomes, *finished], []
        return outcomes

    def shutdown(self) -> list[DispatchOutcome]:
        """Flush, then shut the worker pool down."""
        outcomes = self.flush()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        return outcomes

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _collect_finished(self) -> None:
        """Move completed futures' outcomes out of ``_futures``; caller holds the lock."""
        still_running: list[Future[DispatchOutcome]] = []
        for future in self._futures:
            if future.done():
                self._outcomes.append(future.result())
            else:
                still_running.append(future)
        self._futures = still_running

    def _execute_hook(self, hook_name: str, payload: dict[str, Any]) -> DispatchOutcome:
        hook_fn = getattr(self._pm.hook, hook_name, None)
        if hook_fn is None:
            return DispatchOutcome(hook_name, ok=True)
        try:
            hook_fn(**payload)
        except Exception as exc:
            logger.warning("Hook %s failed: %s", hook_name, exc, exc_info=True)
            return DispatchOutcome(hook_name, ok=False, error=str(exc))
        return DispatchOutcome(hook_name, ok=True)
