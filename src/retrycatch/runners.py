r"""Capabilities of the task runners a retry executor can delegate to.

The retry executor never creates threads or timers itself. Asynchronous
invocations are handed to a task runner owned by the caller:

- ``TaskRunner``: a general-purpose worker accepting tasks through
  ``submit``. Every ``concurrent.futures.Executor`` (e.g.,
  ``ThreadPoolExecutor(max_workers=1)`` for a single worker thread)
  satisfies it.
- ``Scheduler``: a runner able to run a task once after a delay, or
  periodically at a fixed rate or with a fixed delay.

A runner implementing ``Scheduler`` but not ``TaskRunner`` is
scheduler-only, and can only be used by the scheduling modes.
"""

from __future__ import annotations

__all__ = ["Scheduler", "TaskRunner", "is_scheduler", "is_scheduler_only", "is_task_runner"]

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable
    from concurrent.futures import Future

    from retrycatch.timeunit import TimeUnit

_SCHEDULER_METHODS = ("schedule", "schedule_at_fixed_rate", "schedule_with_fixed_delay")


@runtime_checkable
class TaskRunner(Protocol):
    """General-purpose worker running submitted tasks in the
    background."""

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        """Submit ``fn`` for execution and return a handle on its
        result."""


@runtime_checkable
class Scheduler(Protocol):
    """Runner supporting delayed and periodic execution.

    Delays and periods are expressed as a duration paired with a
    ``TimeUnit``. Fixed-rate periods are measured from the start of one
    run to the start of the next; fixed delays are measured from the end
    of one run to the start of the next.
    """

    def schedule(self, fn: Callable[[], Any], delay: float, unit: TimeUnit) -> Any:
        """Run ``fn`` once after ``delay``."""

    def schedule_at_fixed_rate(
        self, fn: Callable[[], Any], initial_delay: float, period: float, unit: TimeUnit
    ) -> Any:
        """Run ``fn`` after ``initial_delay`` and then every ``period``."""

    def schedule_with_fixed_delay(
        self, fn: Callable[[], Any], initial_delay: float, delay: float, unit: TimeUnit
    ) -> Any:
        """Run ``fn`` after ``initial_delay`` and then ``delay`` after the
        end of each run."""


def is_task_runner(runner: Any) -> bool:
    """Indicate if ``runner`` accepts submitted tasks.

    Example:
        ```pycon
        >>> from concurrent.futures import ThreadPoolExecutor
        >>> from retrycatch.runners import is_task_runner
        >>> with ThreadPoolExecutor(max_workers=1) as pool:
        ...     is_task_runner(pool)
        ...
        True
        >>> is_task_runner(None)
        False

        ```
    """
    return callable(getattr(runner, "submit", None))


def is_scheduler(runner: Any) -> bool:
    """Indicate if ``runner`` supports delayed and periodic
    execution."""
    return all(callable(getattr(runner, name, None)) for name in _SCHEDULER_METHODS)


def is_scheduler_only(runner: Any) -> bool:
    """Indicate if ``runner`` supports scheduling but not submitted
    tasks."""
    return is_scheduler(runner) and not is_task_runner(runner)
