r"""Fluent builder for configuring and invoking a retry executor.

``RetryCatch`` is the chained-setter surface of the package: each setter
returns the builder, setters can be called in any order, and the
invocation methods (``run``, ``call``, ``execute``, ``submit``, and the
scheduling modes) run the unit of work with the current settings.

Every invocation runs on an immutable snapshot of the settings (see
``build``), so changing the builder after dispatching an asynchronous
invocation does not affect that invocation.

Example:
    ```pycon
    >>> from retrycatch import RetryCatch
    >>> counter = {"calls": 0}
    >>> def flaky():
    ...     counter["calls"] += 1
    ...     if counter["calls"] < 3:
    ...         raise ConnectionError(f"attempt {counter['calls']} failed")
    ...
    >>> (
    ...     RetryCatch()
    ...     .retry_count(3)
    ...     .retry_on(ConnectionError)
    ...     .on_success(lambda: print("done"))
    ...     .on_retry(lambda attempt, exc: print(f"retry {attempt}: {exc}"))
    ...     .on_failure(lambda exc: print(f"failure: {exc}"))
    ...     .run(flaky)
    ... )
    retry 0: attempt 1 failed
    retry 1: attempt 2 failed
    done

    ```
"""

from __future__ import annotations

__all__ = ["RetryCatch"]

from typing import TYPE_CHECKING, Any, TypeVar

from retrycatch.callbacks import NoValue, WithValue
from retrycatch.predicates import RetryPredicate
from retrycatch.retry.config import DEFAULT_MAX_RETRIES, CallbackConfig, RetryConfig
from retrycatch.retry.executor import RetryExecutor
from retrycatch.timeunit import TimeUnit
from retrycatch.utils.exceptions import report_configuration_error

if TYPE_CHECKING:
    from collections.abc import Callable
    from concurrent.futures import Future

    from retrycatch.callbacks import OnFailure, OnRetry
    from retrycatch.runners import Scheduler, TaskRunner

T = TypeVar("T")


class RetryCatch:
    """Fluent builder of retry executors.

    By default the unit of work is retried an unlimited number of times
    on any ``Exception``.
    """

    def __init__(self) -> None:
        self._max_retries: int | None = DEFAULT_MAX_RETRIES
        self._retry_predicate: Callable[[BaseException | None], bool] = RetryPredicate()
        self._on_success: NoValue | None = None
        self._on_success_with_value: WithValue | None = None
        self._on_retry: OnRetry | None = None
        self._on_failure: OnFailure | None = None
        self._runner: TaskRunner | Scheduler | None = None
        self._strict = False

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(max_retries={self._max_retries}, "
            f"retry_predicate={self._retry_predicate!r}, runner={self._runner!r})"
        )

    ################################
    #        Configuration         #
    ################################

    def retry_count(self, count: int | None) -> RetryCatch:
        """Set the maximum number of retries after the initial attempt.

        Args:
            count: The retry budget. Negative values are normalized to
                their absolute value. ``UNLIMITED`` (None) removes the
                bound.

        Returns:
            The builder.

        Raises:
            TypeError: If ``count`` is neither an int nor ``UNLIMITED``.
        """
        self._max_retries = RetryConfig(max_retries=count).max_retries
        return self

    def retry_on(self, *exception_types: type[BaseException]) -> RetryCatch:
        """Set the exception types that trigger a retry.

        Exceptions of other types stop the invocation immediately and are
        reported to ``on_failure``.

        Args:
            *exception_types: The retryable exception types, subclasses
                included. No type restores the default, any
                ``Exception``.

        Returns:
            The builder.
        """
        self._retry_predicate = RetryPredicate(*exception_types)
        return self

    def retry_if(self, predicate: Callable[[BaseException], bool]) -> RetryCatch:
        """Set a custom function deciding whether an exception triggers a
        retry.

        Args:
            predicate: Function returning True for retryable exceptions.

        Returns:
            The builder.
        """
        self._retry_predicate = RetryPredicate.from_callable(predicate)
        return self

    def on_success(self, callback: Callable[[], Any]) -> RetryCatch:
        """Set the success callback of actions, called without argument.

        Args:
            callback: The function to call on success.

        Returns:
            The builder.
        """
        self._on_success = NoValue(callback)
        return self

    def on_success_with_value(self, callback: Callable[[Any], Any]) -> RetryCatch:
        """Set the success callback of computations, called with the
        produced value.

        Args:
            callback: The function receiving the value on success.

        Returns:
            The builder.
        """
        self._on_success_with_value = WithValue(callback)
        return self

    def on_retry(self, callback: OnRetry) -> RetryCatch:
        """Set the callback called before each retry with the attempt
        index (0-indexed) and the exception.

        Returns:
            The builder.
        """
        self._on_retry = callback
        return self

    def on_failure(self, callback: OnFailure) -> RetryCatch:
        """Set the callback called with the final exception.

        Returns:
            The builder.
        """
        self._on_failure = callback
        return self

    def with_executor(self, runner: TaskRunner | Scheduler | None) -> RetryCatch:
        """Set the task runner used by the asynchronous modes.

        The runner is borrowed: its lifecycle stays with the caller.

        Args:
            runner: A ``TaskRunner`` (e.g., a
                ``concurrent.futures.ThreadPoolExecutor``), a
                ``Scheduler``, or None.

        Returns:
            The builder.
        """
        self._runner = runner
        return self

    def strict(self, enabled: bool = True) -> RetryCatch:
        """Raise ``RetryConfigurationError`` on configuration errors
        instead of logging them.

        Returns:
            The builder.
        """
        self._strict = enabled
        return self

    def build(self) -> RetryExecutor:
        """Snapshot the current settings into a retry executor.

        Setting both success callback shapes is ambiguous: it is reported
        as a configuration error and neither callback is kept.

        Returns:
            The retry executor.
        """
        on_success = self._on_success or self._on_success_with_value
        if self._on_success is not None and self._on_success_with_value is not None:
            report_configuration_error(
                "must be a single on_success callback", mode="on_success", strict=self._strict
            )
            on_success = None
        return RetryExecutor(
            RetryConfig(
                max_retries=self._max_retries,
                retry_predicate=self._retry_predicate,
                strict=self._strict,
            ),
            CallbackConfig(
                on_success=on_success,
                on_retry=self._on_retry,
                on_failure=self._on_failure,
            ),
            runner=self._runner,
        )

    ################################
    #          Invocation          #
    ################################

    def call(self, computation: Callable[[], T]) -> None:
        """Run a computation on the calling thread.

        See ``RetryExecutor.call``.
        """
        self.build().call(computation)

    def run(self, action: Callable[[], Any]) -> None:
        """Run an action on the calling thread.

        See ``RetryExecutor.run``.
        """
        self.build().run(action)

    def execute(self, action: Callable[[], Any]) -> None:
        """Run an action in the background on the task runner.

        See ``RetryExecutor.execute``.
        """
        self.build().execute(action)

    def submit(self, computation: Callable[[], T]) -> Future | None:
        """Run a computation in the background on the task runner.

        See ``RetryExecutor.submit``.
        """
        return self.build().submit(computation)

    def schedule_call(
        self, computation: Callable[[], T], delay: float, unit: TimeUnit = TimeUnit.SECONDS
    ) -> Any:
        """Run a computation once after ``delay`` on the scheduler."""
        return self.build().schedule_call(computation, delay, unit)

    def schedule_run(
        self, action: Callable[[], Any], delay: float, unit: TimeUnit = TimeUnit.SECONDS
    ) -> Any:
        """Run an action once after ``delay`` on the scheduler."""
        return self.build().schedule_run(action, delay, unit)

    def schedule_at_fixed_rate(
        self,
        action: Callable[[], Any],
        initial_delay: float,
        period: float,
        unit: TimeUnit = TimeUnit.SECONDS,
    ) -> Any:
        """Run an action periodically at a fixed rate on the
        scheduler."""
        return self.build().schedule_at_fixed_rate(action, initial_delay, period, unit)

    def schedule_with_fixed_delay(
        self,
        action: Callable[[], Any],
        initial_delay: float,
        delay: float,
        unit: TimeUnit = TimeUnit.SECONDS,
    ) -> Any:
        """Run an action periodically with a fixed delay on the
        scheduler."""
        return self.build().schedule_with_fixed_delay(action, initial_delay, delay, unit)
