"""Tests for the watch controller state machine."""

from __future__ import annotations

from typing import List

from docsync.watch.controller import WatchController, WatchState
from tests._fixtures.watch_fakes import (
    FailingLaunchRunner,
    FakeScheduler,
    ImmediateRunner,
    RecordingRunner,
)


class _Reloads:
    def __init__(self) -> None:
        self.events: List[str] = []

    def __call__(self) -> None:
        self.events.append("full-reload")


def _controller(runner, scheduler: FakeScheduler, reloads: _Reloads) -> WatchController:  # type: ignore[no-untyped-def]
    return WatchController(
        runner,
        notify_reload=reloads,
        scheduler=scheduler,
        debounce_seconds=0.15,
    )


def test_start_runs_pipeline_without_any_change() -> None:
    runner, scheduler, reloads = RecordingRunner(), FakeScheduler(), _Reloads()
    controller = _controller(runner, scheduler, reloads)

    controller.start()

    assert runner.launches == 1
    assert controller.state is WatchState.RUNNING
    runner.finish(0)
    assert controller.state is WatchState.IDLE
    assert reloads.events == ["full-reload"]


def test_non_source_changes_are_ignored() -> None:
    runner, scheduler, reloads = ImmediateRunner(), FakeScheduler(), _Reloads()
    controller = _controller(runner, scheduler, reloads)

    assert controller.handle_change("/src/notes.md") is False
    scheduler.advance(1.0)

    assert runner.launches == 0
    assert scheduler.armed == 0


def test_burst_within_debounce_window_runs_once() -> None:
    runner, scheduler, reloads = ImmediateRunner(), FakeScheduler(), _Reloads()
    controller = _controller(runner, scheduler, reloads)

    assert controller.handle_change("/src/a/Calc.java") is True
    scheduler.advance(0.05)
    controller.handle_change("/src/a/Calc.java")
    scheduler.advance(0.1)
    assert runner.launches == 0

    scheduler.advance(0.1)

    assert runner.launches == 1
    assert reloads.events == ["full-reload"]
    assert controller.state is WatchState.IDLE


def test_changes_during_run_trigger_exactly_one_rerun() -> None:
    runner, scheduler, reloads = RecordingRunner(), FakeScheduler(), _Reloads()
    controller = _controller(runner, scheduler, reloads)
    controller.start()

    for name in ("A.java", "B.java", "C.java"):
        controller.handle_change(f"/src/{name}")
    assert controller.state is WatchState.PENDING_RERUN
    assert scheduler.armed == 0

    runner.finish(0)
    assert runner.launches == 2
    assert controller.state is WatchState.RUNNING
    assert reloads.events == []

    runner.finish(0)
    assert runner.launches == 2
    assert controller.state is WatchState.IDLE
    assert reloads.events == ["full-reload"]


def test_failed_run_returns_to_idle_without_reload() -> None:
    runner, scheduler, reloads = RecordingRunner(), FakeScheduler(), _Reloads()
    controller = _controller(runner, scheduler, reloads)
    controller.start()

    runner.finish(1)

    assert controller.state is WatchState.IDLE
    assert reloads.events == []

    controller.handle_change("/src/Calc.java")
    scheduler.advance(0.2)
    assert runner.launches == 2


def test_failed_run_drops_pending_rerun() -> None:
    runner, scheduler, reloads = RecordingRunner(), FakeScheduler(), _Reloads()
    controller = _controller(runner, scheduler, reloads)
    controller.start()
    controller.handle_change("/src/Calc.java")

    runner.finish(2)

    assert controller.state is WatchState.IDLE
    assert runner.launches == 1


def test_launch_failure_is_reported_as_failed_run() -> None:
    runner, scheduler, reloads = FailingLaunchRunner(), FakeScheduler(), _Reloads()
    controller = _controller(runner, scheduler, reloads)

    controller.start()

    assert runner.launches == 1
    assert controller.state is WatchState.IDLE
    assert reloads.events == []


def test_stop_cancels_armed_timer_and_ignores_events() -> None:
    runner, scheduler, reloads = ImmediateRunner(), FakeScheduler(), _Reloads()
    controller = _controller(runner, scheduler, reloads)

    controller.handle_change("/src/Calc.java")
    controller.stop()
    scheduler.advance(1.0)

    assert runner.launches == 0
    assert controller.handle_change("/src/Calc.java") is False


def test_run_finishing_after_stop_does_not_rerun_or_reload() -> None:
    runner, scheduler, reloads = RecordingRunner(), FakeScheduler(), _Reloads()
    controller = _controller(runner, scheduler, reloads)
    controller.start()
    controller.handle_change("/src/Calc.java")
    controller.stop()

    runner.finish(0)

    assert runner.launches == 1
    assert reloads.events == []
    assert controller.state is WatchState.IDLE


def test_runs_started_counts_launches() -> None:
    runner, scheduler, reloads = ImmediateRunner(), FakeScheduler(), _Reloads()
    controller = _controller(runner, scheduler, reloads)

    controller.start()
    controller.handle_change("/src/Calc.java")
    scheduler.advance(0.2)

    assert controller.runs_started == 2
    assert reloads.events == ["full-reload", "full-reload"]


def test_request_run_starts_immediately_when_idle_and_cancels_timer() -> None:
    runner, scheduler, reloads = RecordingRunner(), FakeScheduler(), _Reloads()
    controller = _controller(runner, scheduler, reloads)
    controller.handle_change("/src/a/A.java")
    assert scheduler.armed == 1

    assert controller.request_run() is True

    assert runner.launches == 1
    assert scheduler.armed == 0
    assert controller.state is WatchState.RUNNING
    runner.finish(0)
    scheduler.advance(1.0)
    assert runner.launches == 1
    assert reloads.events == ["full-reload"]


def test_request_run_during_run_queues_single_rerun() -> None:
    runner, scheduler, reloads = RecordingRunner(), FakeScheduler(), _Reloads()
    controller = _controller(runner, scheduler, reloads)
    controller.start()

    assert controller.request_run() is False
    assert controller.request_run() is False

    assert runner.launches == 1
    assert controller.state is WatchState.PENDING_RERUN
    runner.finish(0)
    assert runner.launches == 2
    assert reloads.events == []
    runner.finish(0)
    assert controller.state is WatchState.IDLE
    assert reloads.events == ["full-reload"]


def test_request_run_after_stop_is_refused() -> None:
    runner, scheduler, reloads = ImmediateRunner(), FakeScheduler(), _Reloads()
    controller = _controller(runner, scheduler, reloads)
    controller.stop()

    assert controller.request_run() is False
    assert runner.launches == 0
