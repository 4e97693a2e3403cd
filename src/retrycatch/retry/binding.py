r"""Dispatch of retry-wrapped tasks to an external task runner.

This module provides the TaskDispatcher class that hands an already
retry-wrapped task to the task runner according to the requested
invocation mode. The dispatcher only decides *when and where* the task
runs; the retry logic lives entirely in the wrapped task.
"""

from __future__ import annotations

__all__ = ["TaskDispatcher"]

import logging
from typing import TYPE_CHECKING, Any

from retrycatch.runners import is_scheduler, is_scheduler_only, is_task_runner
from retrycatch.utils.exceptions import report_configuration_error
from retrycatch.utils.validation import validate_delay, validate_period

if TYPE_CHECKING:
    from collections.abc import Callable
    from concurrent.futures import Future

    from retrycatch.runners import Scheduler, TaskRunner
    from retrycatch.timeunit import TimeUnit

logger: logging.Logger = logging.getLogger(__name__)


class TaskDispatcher:
    """Hands retry-wrapped tasks to a borrowed task runner.

    The runner is never created nor shut down by the dispatcher. Every
    mismatch between the requested mode and the runner capabilities is
    reported as a configuration error and the task is not dispatched.

    Args:
        runner: Optional task runner, a ``TaskRunner`` (e.g., a
            ``concurrent.futures.ThreadPoolExecutor``), a ``Scheduler``,
            or an object implementing both.
        strict: If True, configuration errors raise
            ``RetryConfigurationError`` instead of being logged.
    """

    def __init__(self, runner: TaskRunner | Scheduler | None = None, *, strict: bool = False) -> None:
        self.runner = runner
        self.strict = strict

    def execute(self, task: Callable[[], None]) -> None:
        """Run ``task`` in the background without keeping a handle on
        it."""
        if self._check_task_runner("execute"):
            self._dispatching("execute")
            self.runner.submit(task)

    def submit(self, task: Callable[[], None]) -> Future | None:
        """Run ``task`` in the background.

        Returns:
            The future returned by the runner, or None if the task was
            not dispatched.
        """
        if not self._check_task_runner("submit"):
            return None
        self._dispatching("submit")
        return self.runner.submit(task)

    def schedule(self, task: Callable[[], None], delay: float, unit: TimeUnit) -> Any:
        """Run ``task`` once after ``delay``.

        Returns:
            The handle returned by the scheduler, or None if the task was
            not dispatched.
        """
        if not self._check_scheduler("schedule") or not self._check_params(
            "schedule", validate_delay(delay, unit)
        ):
            return None
        self._dispatching("schedule")
        return self.runner.schedule(task, delay, unit)

    def schedule_at_fixed_rate(
        self, task: Callable[[], None], initial_delay: float, period: float, unit: TimeUnit
    ) -> Any:
        """Run ``task`` after ``initial_delay`` and then every ``period``,
        measured from start to start."""
        mode = "schedule_at_fixed_rate"
        if not self._check_scheduler(mode) or not self._check_params(
            mode,
            validate_delay(initial_delay, unit, name="initial_delay"),
            validate_period(period, unit),
        ):
            return None
        self._dispatching(mode)
        return self.runner.schedule_at_fixed_rate(task, initial_delay, period, unit)

    def schedule_with_fixed_delay(
        self, task: Callable[[], None], initial_delay: float, delay: float, unit: TimeUnit
    ) -> Any:
        """Run ``task`` after ``initial_delay`` and then ``delay`` after
        the end of each run."""
        mode = "schedule_with_fixed_delay"
        if not self._check_scheduler(mode) or not self._check_params(
            mode,
            validate_delay(initial_delay, unit, name="initial_delay"),
            validate_period(delay, unit, name="delay"),
        ):
            return None
        self._dispatching(mode)
        return self.runner.schedule_with_fixed_delay(task, initial_delay, delay, unit)

    def _check_task_runner(self, mode: str) -> bool:
        if self.runner is None:
            report_configuration_error(
                f"a task runner is required in order to use {mode}()", mode=mode, strict=self.strict
            )
            return False
        if is_scheduler_only(self.runner):
            report_configuration_error(
                f"{mode}() requires a general-purpose task runner, "
                f"got the scheduler-only runner {type(self.runner).__name__}",
                mode=mode,
                strict=self.strict,
            )
            return False
        if not is_task_runner(self.runner):
            report_configuration_error(
                f"{type(self.runner).__name__} does not support {mode}()",
                mode=mode,
                strict=self.strict,
            )
            return False
        return True

    def _check_scheduler(self, mode: str) -> bool:
        if self.runner is None:
            report_configuration_error(
                f"a scheduler is required in order to use {mode}()", mode=mode, strict=self.strict
            )
            return False
        if not is_scheduler(self.runner):
            report_configuration_error(
                f"{mode}() requires a scheduler, got {type(self.runner).__name__}",
                mode=mode,
                strict=self.strict,
            )
            return False
        return True

    def _check_params(self, mode: str, *errors: str | None) -> bool:
        for error in errors:
            if error is not None:
                report_configuration_error(error, mode=mode, strict=self.strict)
                return False
        return True

    def _dispatching(self, mode: str) -> None:
        logger.debug(f"Dispatching retry-wrapped task with {mode}() to {type(self.runner).__name__}")
