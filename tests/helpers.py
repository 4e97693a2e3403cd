r"""Shared test helpers for retry executor tests.

This module contains common test infrastructure used across multiple
test files: units of work failing a given number of times, and
schedulers used to exercise the scheduling modes. The package itself
never creates threads or timers, so the tests provide their own
runners.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from retrycatch.timeunit import TimeUnit


class FlakyWork:
    """Unit of work raising on its first calls and then succeeding.

    Thread-safe, so one instance can be shared by concurrent invocations.

    Args:
        failures: Number of calls raising before the first success, or
            None to raise on every call.
        value: The value returned once the work succeeds.
        error: Factory creating the exception raised by the n-th call
            (1-indexed).
    """

    def __init__(
        self,
        failures: int | None = None,
        value: Any = None,
        error: Callable[[int], Exception] = lambda n: RuntimeError(f"failure {n}"),
    ) -> None:
        self.failures = failures
        self.value = value
        self.error = error
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self) -> Any:
        with self._lock:
            self.calls += 1
            calls = self.calls
        if self.failures is None or calls <= self.failures:
            raise self.error(calls)
        return self.value


@dataclass
class ScheduledCall:
    """A call recorded by ``RecordingScheduler``."""

    method: str
    fn: Callable[[], Any]
    args: tuple[Any, ...]


@dataclass
class RecordingScheduler:
    """Scheduler recording the scheduled tasks without running them.

    Every method returns a sentinel handle, so tests can check that the
    handle of the scheduler is passed through.
    """

    calls: list[ScheduledCall] = field(default_factory=list)
    handle: object = field(default_factory=object)

    def schedule(self, fn: Callable[[], Any], delay: float, unit: TimeUnit) -> object:
        self.calls.append(ScheduledCall("schedule", fn, (delay, unit)))
        return self.handle

    def schedule_at_fixed_rate(
        self, fn: Callable[[], Any], initial_delay: float, period: float, unit: TimeUnit
    ) -> object:
        self.calls.append(ScheduledCall("schedule_at_fixed_rate", fn, (initial_delay, period, unit)))
        return self.handle

    def schedule_with_fixed_delay(
        self, fn: Callable[[], Any], initial_delay: float, delay: float, unit: TimeUnit
    ) -> object:
        self.calls.append(
            ScheduledCall("schedule_with_fixed_delay", fn, (initial_delay, delay, unit))
        )
        return self.handle


class ScheduledTask:
    """Handle on a task run by ``ThreadScheduler``."""

    def __init__(
        self,
        fn: Callable[[], Any],
        initial_delay: float,
        period: float | None = None,
        *,
        fixed_rate: bool = True,
    ) -> None:
        self.fn = fn
        self.initial_delay = initial_delay
        self.period = period
        self.fixed_rate = fixed_rate
        self.runs = 0
        self.done = threading.Event()
        self._cancelled = threading.Event()
        self._thread = threading.Thread(target=self._loop, daemon=True)

    def start(self) -> ScheduledTask:
        self._thread.start()
        return self

    def cancel(self) -> None:
        self._cancelled.set()

    def join(self, timeout: float | None = None) -> None:
        self._thread.join(timeout)

    def _loop(self) -> None:
        next_start = time.monotonic() + self.initial_delay
        while not self._cancelled.wait(max(0.0, next_start - time.monotonic())):
            self.fn()
            self.runs += 1
            if self.period is None:
                break
            if self.fixed_rate:
                next_start += self.period
            else:
                next_start = time.monotonic() + self.period
        self.done.set()


class ThreadScheduler:
    """Scheduler running each scheduled task on its own daemon thread.

    Fixed-rate periods are measured from start to start, fixed delays
    from the end of a run to the start of the next. Runs of one task
    never overlap.
    """

    def __init__(self) -> None:
        self.tasks: list[ScheduledTask] = []

    def schedule(self, fn: Callable[[], Any], delay: float, unit: TimeUnit) -> ScheduledTask:
        return self._start(ScheduledTask(fn, unit.to_seconds(delay)))

    def schedule_at_fixed_rate(
        self, fn: Callable[[], Any], initial_delay: float, period: float, unit: TimeUnit
    ) -> ScheduledTask:
        return self._start(
            ScheduledTask(fn, unit.to_seconds(initial_delay), unit.to_seconds(period))
        )

    def schedule_with_fixed_delay(
        self, fn: Callable[[], Any], initial_delay: float, delay: float, unit: TimeUnit
    ) -> ScheduledTask:
        return self._start(
            ScheduledTask(
                fn, unit.to_seconds(initial_delay), unit.to_seconds(delay), fixed_rate=False
            )
        )

    def shutdown(self) -> None:
        for task in self.tasks:
            task.cancel()
        for task in self.tasks:
            task.join(timeout=5.0)

    def _start(self, task: ScheduledTask) -> ScheduledTask:
        self.tasks.append(task)
        return task.start()


class SchedulingThreadPool(ThreadScheduler):
    """Runner supporting both submitted and scheduled tasks."""

    def __init__(self, pool: Any) -> None:
        super().__init__()
        self.pool = pool

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
        return self.pool.submit(fn, *args, **kwargs)
