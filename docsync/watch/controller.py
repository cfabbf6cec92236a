"""Watch-and-regenerate controller.

The controller owns a debounce timer and a pending-rerun flag. At most one
pipeline run is in flight: change events that arrive during a run collapse
into a single follow-up run, started as soon as the current one succeeds.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, Optional

from ..config import DEFAULT_DEBOUNCE_SECONDS, SOURCE_EXTENSION
from ..logging import get_logger
from .runner import PipelineRunner
from .scheduler import Scheduler, TimerHandle, TimerScheduler


class WatchState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PENDING_RERUN = "pending-rerun"


class WatchController:
    """Debounces source changes and re-runs the pipeline one run at a time."""

    def __init__(
        self,
        runner: PipelineRunner,
        *,
        notify_reload: Callable[[], None],
        scheduler: Scheduler | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        extension: str = SOURCE_EXTENSION,
    ) -> None:
        self._runner = runner
        self._notify_reload = notify_reload
        self._scheduler = scheduler or TimerScheduler()
        self.debounce_seconds = debounce_seconds
        self.extension = extension

        self._lock = threading.Lock()
        self._state = WatchState.IDLE
        self._timer: Optional[TimerHandle] = None
        self._stopped = False
        self.runs_started = 0
        self.logger = get_logger("watch")

    @property
    def state(self) -> WatchState:
        with self._lock:
            return self._state

    def start(self) -> None:
        """Trigger the initial run regardless of file activity."""
        with self._lock:
            self._stopped = False
            if self._state is not WatchState.IDLE:
                return
            self._state = WatchState.RUNNING
        self.logger.info("Running initial reference sync")
        self._launch()

    def stop(self) -> None:
        """Cancel any armed timer and ignore further events.

        A run already in flight is left to finish; it will not be followed by
        a rerun or a reload.
        """
        with self._lock:
            self._stopped = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def handle_change(self, path: str) -> bool:
        """Record a filesystem change; returns False when the path is ignored."""
        if not path.endswith(self.extension):
            return False
        with self._lock:
            if self._stopped:
                return False
            if self._state is WatchState.IDLE:
                if self._timer is not None:
                    self._timer.cancel()
                self._timer = self._scheduler.call_later(self.debounce_seconds, self._on_debounce_expired)
            else:
                if self._state is WatchState.RUNNING:
                    self.logger.debug("Change during run; queueing rerun (%s)", path)
                self._state = WatchState.PENDING_RERUN
        return True

    def request_run(self) -> bool:
        """Ask for a run outside of file activity.

        Starts one immediately when idle and returns True. While a run is in
        flight the request is folded into the pending rerun and False is
        returned.
        """
        with self._lock:
            if self._stopped:
                return False
            if self._state is not WatchState.IDLE:
                self._state = WatchState.PENDING_RERUN
                return False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._state = WatchState.RUNNING
        self.logger.info("Running requested reference sync")
        self._launch()
        return True

    def _on_debounce_expired(self) -> None:
        with self._lock:
            self._timer = None
            if self._stopped:
                return
            if self._state is not WatchState.IDLE:
                self._state = WatchState.PENDING_RERUN
                return
            self._state = WatchState.RUNNING
        self._launch()

    def _launch(self) -> None:
        with self._lock:
            self.runs_started += 1
        try:
            self._runner.launch(self._on_run_finished)
        except OSError as exc:
            self.logger.error("Failed to launch pipeline: %s", exc)
            self._on_run_finished(-1)

    def _on_run_finished(self, returncode: int) -> None:
        rerun = False
        reload = False
        with self._lock:
            if returncode != 0:
                self.logger.warning("Reference sync exited with status %s; skipping reload", returncode)
                self._state = WatchState.IDLE
            elif self._state is WatchState.PENDING_RERUN and not self._stopped:
                self._state = WatchState.RUNNING
                rerun = True
            else:
                self._state = WatchState.IDLE
                reload = not self._stopped

        if rerun:
            self.logger.info("Sources changed during sync; running again")
            self._launch()
        elif reload:
            try:
                self._notify_reload()
            except Exception as exc:  # pragma: no cover - notifier boundary
                self.logger.error("Reload notification failed: %s", exc)


__all__ = ["WatchController", "WatchState"]
