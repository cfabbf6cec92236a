"""Watch-and-regenerate support for interactive development."""

from __future__ import annotations

from .controller import WatchController, WatchState
from .runner import InProcessPipelineRunner, PipelineRunner, SubprocessPipelineRunner
from .scheduler import Scheduler, TimerScheduler

__all__ = [
    "InProcessPipelineRunner",
    "PipelineRunner",
    "Scheduler",
    "SubprocessPipelineRunner",
    "TimerScheduler",
    "WatchController",
    "WatchState",
]
