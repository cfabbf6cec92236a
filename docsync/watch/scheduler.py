"""Timer scheduling used for debouncing change events."""

from __future__ import annotations

import threading
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs a callback once after a delay; the returned handle can cancel it."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class TimerScheduler:
    """Scheduler backed by daemon ``threading.Timer`` threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


__all__ = ["Scheduler", "TimerHandle", "TimerScheduler"]
