r"""Retry executor running units of work with automatic retry logic.

This module provides the RetryExecutor class that implements the retry
loop for actions and computations, and binds it to the invocation modes
of an optional task runner.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from retrycatch.retry.binding import TaskDispatcher
from retrycatch.retry.config import CallbackConfig, RetryConfig
from retrycatch.retry.decider import RetryDecider
from retrycatch.retry.manager import CallbackManager
from retrycatch.timeunit import TimeUnit
from retrycatch.utils.structured_logging import bind_invocation_id, log_structured

if TYPE_CHECKING:
    from collections.abc import Callable
    from concurrent.futures import Future

    from retrycatch.runners import Scheduler, TaskRunner

logger: logging.Logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExecutor:
    """Executes units of work with automatic retry logic.

    A unit of work is either an action, a function without argument whose
    return value is ignored, or a computation, a function without argument
    producing a value. Each invocation runs the work until it succeeds,
    raises a non-retryable exception, or exhausts the retry budget, and
    reports the outcome through the configured callbacks. Exceptions
    raised by the work never escape the executor.

    The executor orchestrates the following components:
    - RetryDecider: Determines whether to retry based on the exception
      and the retry budget
    - CallbackManager: Invokes user-defined callbacks at lifecycle events
    - TaskDispatcher: Hands the retry-wrapped work to the task runner for
      the asynchronous modes

    The executor holds no per-invocation state, so one instance can serve
    any number of invocations, including concurrent ones dispatched to a
    multi-worker runner. Callbacks shared by concurrent invocations must
    be thread-safe.

    Args:
        retry_config: Configuration for retry behavior. Defaults to an
            unlimited budget retrying on any ``Exception``.
        callback_config: Configuration for lifecycle callbacks.
        runner: Optional task runner borrowed for the asynchronous modes.

    Example:
        ```pycon
        >>> from retrycatch.callbacks import WithValue
        >>> from retrycatch.retry import CallbackConfig, RetryConfig, RetryExecutor
        >>> attempts = iter([ZeroDivisionError("division by zero"), 42])
        >>> def compute():
        ...     outcome = next(attempts)
        ...     if isinstance(outcome, Exception):
        ...         raise outcome
        ...     return outcome
        ...
        >>> executor = RetryExecutor(
        ...     RetryConfig(max_retries=3),
        ...     CallbackConfig(
        ...         on_success=WithValue(lambda value: print(f"result: {value}")),
        ...         on_retry=lambda attempt, exc: print(f"retry {attempt}: {exc}"),
        ...     ),
        ... )
        >>> executor.call(compute)
        retry 0: division by zero
        result: 42

        ```
    """

    def __init__(
        self,
        retry_config: RetryConfig | None = None,
        callback_config: CallbackConfig | None = None,
        runner: TaskRunner | Scheduler | None = None,
    ) -> None:
        self.config = retry_config if retry_config is not None else RetryConfig()
        self.decider: RetryDecider = RetryDecider(
            self.config.retry_predicate, self.config.max_retries
        )
        self.callbacks: CallbackManager = CallbackManager(
            callback_config if callback_config is not None else CallbackConfig(),
            strict=self.config.strict,
        )
        self.dispatcher: TaskDispatcher = TaskDispatcher(runner, strict=self.config.strict)

    @property
    def runner(self) -> TaskRunner | Scheduler | None:
        return self.dispatcher.runner

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(max_retries={self.config.max_retries}, "
            f"retry_predicate={self.config.retry_predicate!r}, runner={self.runner!r})"
        )

    ################################
    #     Immediate execution      #
    ################################

    def call(self, computation: Callable[[], T]) -> None:
        """Run a computation on the calling thread until it terminates.

        The produced value is delivered to the ``WithValue`` success
        callback.

        Args:
            computation: The function producing a value.
        """
        self._retry_loop(computation, self.callbacks.on_computation_success)

    def run(self, action: Callable[[], Any]) -> None:
        """Run an action on the calling thread until it terminates.

        Args:
            action: The function to run. Its return value is ignored.
        """
        self._retry_loop(action, lambda _: self.callbacks.on_action_success())

    def wrap_call(self, computation: Callable[[], T]) -> Callable[[], None]:
        """Wrap a computation into a task running the full retry loop."""

        def retry_wrapped_call() -> None:
            self.call(computation)

        return retry_wrapped_call

    def wrap_run(self, action: Callable[[], Any]) -> Callable[[], None]:
        """Wrap an action into a task running the full retry loop."""

        def retry_wrapped_run() -> None:
            self.run(action)

        return retry_wrapped_run

    ################################
    #    Deferred execution        #
    ################################

    def execute(self, action: Callable[[], Any]) -> None:
        """Run an action in the background on the task runner.

        Args:
            action: The function to run.
        """
        self.dispatcher.execute(self.wrap_run(action))

    def submit(self, computation: Callable[[], T]) -> Future | None:
        """Run a computation in the background on the task runner.

        The produced value is delivered to the ``WithValue`` success
        callback, the returned future only signals termination and its
        result is None.

        Args:
            computation: The function producing a value.

        Returns:
            The future of the retry-wrapped task, or None if the task was
            not dispatched.
        """
        return self.dispatcher.submit(self.wrap_call(computation))

    def schedule_call(
        self, computation: Callable[[], T], delay: float, unit: TimeUnit = TimeUnit.SECONDS
    ) -> Any:
        """Run a computation once after ``delay`` on the scheduler.

        Args:
            computation: The function producing a value.
            delay: The time from now to delay the first attempt.
            unit: The time unit of ``delay``.

        Returns:
            The handle returned by the scheduler, or None if the task was
            not dispatched.
        """
        return self.dispatcher.schedule(self.wrap_call(computation), delay, unit)

    def schedule_run(
        self, action: Callable[[], Any], delay: float, unit: TimeUnit = TimeUnit.SECONDS
    ) -> Any:
        """Run an action once after ``delay`` on the scheduler.

        Args:
            action: The function to run.
            delay: The time from now to delay the first attempt.
            unit: The time unit of ``delay``.

        Returns:
            The handle returned by the scheduler, or None if the task was
            not dispatched.
        """
        return self.dispatcher.schedule(self.wrap_run(action), delay, unit)

    def schedule_at_fixed_rate(
        self,
        action: Callable[[], Any],
        initial_delay: float,
        period: float,
        unit: TimeUnit = TimeUnit.SECONDS,
    ) -> Any:
        """Run an action periodically at a fixed rate on the scheduler.

        Each run is a complete retry invocation. Runs start after
        ``initial_delay``, then ``initial_delay + period``,
        ``initial_delay + 2 * period``, and so on.

        Args:
            action: The function to run.
            initial_delay: The time to delay the first run.
            period: The period between the starts of successive runs.
            unit: The time unit of ``initial_delay`` and ``period``.

        Returns:
            The handle returned by the scheduler, or None if the task was
            not dispatched.
        """
        return self.dispatcher.schedule_at_fixed_rate(
            self.wrap_run(action), initial_delay, period, unit
        )

    def schedule_with_fixed_delay(
        self,
        action: Callable[[], Any],
        initial_delay: float,
        delay: float,
        unit: TimeUnit = TimeUnit.SECONDS,
    ) -> Any:
        """Run an action periodically with a fixed delay on the scheduler.

        Each run is a complete retry invocation. The next run starts
        ``delay`` after the end of the previous one.

        Args:
            action: The function to run.
            initial_delay: The time to delay the first run.
            delay: The delay between the end of a run and the start of
                the next one.
            unit: The time unit of ``initial_delay`` and ``delay``.

        Returns:
            The handle returned by the scheduler, or None if the task was
            not dispatched.
        """
        return self.dispatcher.schedule_with_fixed_delay(
            self.wrap_run(action), initial_delay, delay, unit
        )

    def _retry_loop(self, work: Callable[[], Any], on_success: Callable[[Any], None]) -> None:
        """Run ``work`` until it succeeds, raises a non-retryable
        exception, or exhausts the retry budget.

        Only ``Exception`` subclasses are handled, so ``KeyboardInterrupt``
        and ``SystemExit`` still propagate. Exceptions raised by callbacks
        propagate as well.

        Args:
            work: The unit of work.
            on_success: Function receiving the value produced by ``work``.
        """
        attempt = 0
        with bind_invocation_id():
            while True:
                try:
                    result = work()
                except Exception as exc:  # noqa: BLE001
                    should_retry, reason = self.decider.should_retry(exc, attempt)
                    if not should_retry:
                        log_structured(
                            logger,
                            logging.DEBUG,
                            f"Unit of work failed after {attempt + 1} attempt(s) ({reason}): {exc}",
                            attempt=attempt,
                            reason=reason,
                        )
                        self.callbacks.on_failure(exc)
                        return
                    log_structured(
                        logger,
                        logging.DEBUG,
                        f"Attempt {attempt + 1} raised {reason}, retrying: {exc}",
                        attempt=attempt,
                        reason=reason,
                    )
                    self.callbacks.on_retry(attempt, exc)
                    attempt += 1
                    continue

                log_structured(
                    logger,
                    logging.DEBUG,
                    f"Unit of work succeeded on attempt {attempt + 1}",
                    attempt=attempt,
                )
                on_success(result)
                return
