r"""Unit tests for dispatching retry-wrapped tasks to task runners."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import TYPE_CHECKING
from unittest.mock import Mock

import pytest

from retrycatch.callbacks import NoValue, WithValue
from retrycatch.exceptions import RetryConfigurationError
from retrycatch.retry import CallbackConfig, RetryConfig, RetryExecutor, TaskDispatcher
from retrycatch.timeunit import TimeUnit
from tests.helpers import FlakyWork, RecordingScheduler, SchedulingThreadPool

if TYPE_CHECKING:
    from concurrent.futures import ThreadPoolExecutor


class ImmediateRunner:
    """Task runner running submitted tasks on the calling thread."""

    def __init__(self) -> None:
        self.submitted = []

    def submit(self, fn, /, *args, **kwargs) -> Future:
        self.submitted.append(fn)
        future = Future()
        future.set_result(fn(*args, **kwargs))
        return future


###################################
#     Tests for TaskDispatcher    #
###################################


def test_task_dispatcher_creation() -> None:
    runner = ImmediateRunner()
    dispatcher = TaskDispatcher(runner, strict=True)

    assert dispatcher.runner is runner
    assert dispatcher.strict


def test_task_dispatcher_execute() -> None:
    runner = ImmediateRunner()
    task = Mock(return_value=None)

    assert TaskDispatcher(runner).execute(task) is None

    task.assert_called_once_with()
    assert runner.submitted == [task]


def test_task_dispatcher_submit_returns_future() -> None:
    future = TaskDispatcher(ImmediateRunner()).submit(Mock(return_value=None))

    assert isinstance(future, Future)
    assert future.result() is None


@pytest.mark.parametrize("mode", ["execute", "submit"])
def test_task_dispatcher_without_runner(mode: str, caplog: pytest.LogCaptureFixture) -> None:
    task = Mock()

    with caplog.at_level(logging.ERROR):
        assert getattr(TaskDispatcher(None), mode)(task) is None

    task.assert_not_called()
    assert f"a task runner is required in order to use {mode}()" in caplog.text


@pytest.mark.parametrize("mode", ["execute", "submit"])
def test_task_dispatcher_scheduler_only(
    mode: str, recording_scheduler: RecordingScheduler, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.ERROR):
        assert getattr(TaskDispatcher(recording_scheduler), mode)(Mock()) is None

    assert recording_scheduler.calls == []
    assert "scheduler-only runner RecordingScheduler" in caplog.text


@pytest.mark.parametrize("mode", ["execute", "submit"])
def test_task_dispatcher_unsupported_runner(mode: str, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        assert getattr(TaskDispatcher(object()), mode)(Mock()) is None

    assert f"object does not support {mode}()" in caplog.text


def test_task_dispatcher_strict_without_runner() -> None:
    with pytest.raises(RetryConfigurationError) as exc_info:
        TaskDispatcher(None, strict=True).submit(Mock())

    assert exc_info.value.mode == "submit"


def test_task_dispatcher_schedule(recording_scheduler: RecordingScheduler) -> None:
    task = Mock()

    handle = TaskDispatcher(recording_scheduler).schedule(task, 5, TimeUnit.SECONDS)

    assert handle is recording_scheduler.handle
    assert len(recording_scheduler.calls) == 1
    scheduled = recording_scheduler.calls[0]
    assert scheduled.method == "schedule"
    assert scheduled.fn is task
    assert scheduled.args == (5, TimeUnit.SECONDS)


def test_task_dispatcher_schedule_at_fixed_rate(recording_scheduler: RecordingScheduler) -> None:
    handle = TaskDispatcher(recording_scheduler).schedule_at_fixed_rate(
        Mock(), 1, 10, TimeUnit.MILLISECONDS
    )

    assert handle is recording_scheduler.handle
    assert recording_scheduler.calls[0].method == "schedule_at_fixed_rate"
    assert recording_scheduler.calls[0].args == (1, 10, TimeUnit.MILLISECONDS)


def test_task_dispatcher_schedule_with_fixed_delay(
    recording_scheduler: RecordingScheduler,
) -> None:
    handle = TaskDispatcher(recording_scheduler).schedule_with_fixed_delay(
        Mock(), 0, 2, TimeUnit.MINUTES
    )

    assert handle is recording_scheduler.handle
    assert recording_scheduler.calls[0].method == "schedule_with_fixed_delay"
    assert recording_scheduler.calls[0].args == (0, 2, TimeUnit.MINUTES)


@pytest.mark.parametrize(
    ("mode", "args"),
    [
        ("schedule", (1, TimeUnit.SECONDS)),
        ("schedule_at_fixed_rate", (0, 1, TimeUnit.SECONDS)),
        ("schedule_with_fixed_delay", (0, 1, TimeUnit.SECONDS)),
    ],
)
def test_task_dispatcher_schedule_requires_scheduler(
    mode: str, args: tuple, thread_pool: ThreadPoolExecutor, caplog: pytest.LogCaptureFixture
) -> None:
    task = Mock()

    with caplog.at_level(logging.ERROR):
        assert getattr(TaskDispatcher(thread_pool), mode)(task, *args) is None

    task.assert_not_called()
    assert f"{mode}() requires a scheduler, got ThreadPoolExecutor" in caplog.text


def test_task_dispatcher_schedule_without_runner(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        assert TaskDispatcher().schedule(Mock(), 1, TimeUnit.SECONDS) is None

    assert "a scheduler is required in order to use schedule()" in caplog.text


@pytest.mark.parametrize(
    ("mode", "args", "message"),
    [
        ("schedule", (-1, TimeUnit.SECONDS), "delay must be >= 0, got -1 SECONDS"),
        (
            "schedule_at_fixed_rate",
            (-5, 1, TimeUnit.SECONDS),
            "initial_delay must be >= 0, got -5 SECONDS",
        ),
        ("schedule_at_fixed_rate", (0, 0, TimeUnit.SECONDS), "period must be > 0, got 0 SECONDS"),
        (
            "schedule_with_fixed_delay",
            (0, -2, TimeUnit.MILLISECONDS),
            "delay must be > 0, got -2 MILLISECONDS",
        ),
    ],
)
def test_task_dispatcher_invalid_schedule_params(
    mode: str,
    args: tuple,
    message: str,
    recording_scheduler: RecordingScheduler,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.ERROR):
        assert getattr(TaskDispatcher(recording_scheduler), mode)(Mock(), *args) is None

    assert recording_scheduler.calls == []
    assert message in caplog.text


def test_task_dispatcher_invalid_schedule_params_strict(
    recording_scheduler: RecordingScheduler,
) -> None:
    dispatcher = TaskDispatcher(recording_scheduler, strict=True)

    with pytest.raises(RetryConfigurationError, match="period must be > 0"):
        dispatcher.schedule_at_fixed_rate(Mock(), 0, 0, TimeUnit.SECONDS)


def test_task_dispatcher_logs_each_dispatch_once(
    recording_scheduler: RecordingScheduler, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.DEBUG, logger="retrycatch.retry.binding"):
        TaskDispatcher(ImmediateRunner()).submit(Mock(return_value=None))
        TaskDispatcher(recording_scheduler).schedule_with_fixed_delay(
            Mock(), 0, 1, TimeUnit.SECONDS
        )

    messages = [record.getMessage() for record in caplog.records]
    assert messages == [
        "Dispatching retry-wrapped task with submit() to ImmediateRunner",
        "Dispatching retry-wrapped task with schedule_with_fixed_delay() to RecordingScheduler",
    ]


def test_task_dispatcher_no_dispatch_log_when_rejected(
    recording_scheduler: RecordingScheduler, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.DEBUG, logger="retrycatch.retry.binding"):
        TaskDispatcher(recording_scheduler).schedule(Mock(), -1, TimeUnit.SECONDS)

    assert "Dispatching" not in caplog.text


##########################################
#     Tests for RetryExecutor binding    #
##########################################


def test_execute_runs_retry_wrapped_action() -> None:
    runner = ImmediateRunner()
    work = FlakyWork(failures=2)
    on_success, on_retry = Mock(), Mock()
    executor = RetryExecutor(
        RetryConfig(max_retries=3),
        CallbackConfig(on_success=NoValue(on_success), on_retry=on_retry),
        runner=runner,
    )

    assert executor.execute(work) is None

    assert len(runner.submitted) == 1
    assert work.calls == 3
    assert on_retry.call_count == 2
    on_success.assert_called_once_with()


def test_submit_delivers_value_through_callback() -> None:
    work = FlakyWork(failures=1, value=42)
    on_success = Mock()
    executor = RetryExecutor(
        callback_config=CallbackConfig(on_success=WithValue(on_success)),
        runner=ImmediateRunner(),
    )

    future = executor.submit(work)

    assert future.result() is None
    on_success.assert_called_once_with(42)


def test_submit_without_runner_does_not_run(caplog: pytest.LogCaptureFixture) -> None:
    work = FlakyWork(failures=0)

    with caplog.at_level(logging.ERROR):
        assert RetryExecutor().submit(work) is None

    assert work.calls == 0


def test_submit_scheduler_only_does_not_run(recording_scheduler: RecordingScheduler) -> None:
    work = FlakyWork(failures=0)

    assert RetryExecutor(runner=recording_scheduler).submit(work) is None
    assert RetryExecutor(runner=recording_scheduler).execute(work) is None

    assert work.calls == 0
    assert recording_scheduler.calls == []


def test_schedule_call_hands_retry_wrapped_task(recording_scheduler: RecordingScheduler) -> None:
    work = FlakyWork(failures=3, value="late")
    on_success = Mock()
    executor = RetryExecutor(
        callback_config=CallbackConfig(on_success=WithValue(on_success)),
        runner=recording_scheduler,
    )

    handle = executor.schedule_call(work, 100, TimeUnit.MILLISECONDS)

    assert handle is recording_scheduler.handle
    assert work.calls == 0
    scheduled = recording_scheduler.calls[0]
    assert scheduled.args == (100, TimeUnit.MILLISECONDS)
    scheduled.fn()
    assert work.calls == 4
    on_success.assert_called_once_with("late")


def test_schedule_run_default_unit(recording_scheduler: RecordingScheduler) -> None:
    work = FlakyWork(failures=0)
    on_success = Mock()
    executor = RetryExecutor(
        callback_config=CallbackConfig(on_success=NoValue(on_success)),
        runner=recording_scheduler,
    )

    executor.schedule_run(work, 2)

    scheduled = recording_scheduler.calls[0]
    assert scheduled.method == "schedule"
    assert scheduled.args == (2, TimeUnit.SECONDS)
    scheduled.fn()
    on_success.assert_called_once_with()


@pytest.mark.parametrize("mode", ["schedule_at_fixed_rate", "schedule_with_fixed_delay"])
def test_periodic_modes_run_fresh_invocation_each_time(
    mode: str, recording_scheduler: RecordingScheduler
) -> None:
    """Test that each periodic run is a complete invocation with its own
    attempt counter."""
    work = FlakyWork()
    on_retry, on_failure = Mock(), Mock()
    executor = RetryExecutor(
        RetryConfig(max_retries=1),
        CallbackConfig(on_retry=on_retry, on_failure=on_failure),
        runner=recording_scheduler,
    )

    getattr(executor, mode)(work, 0, 1)
    task = recording_scheduler.calls[0].fn
    task()
    task()

    assert recording_scheduler.calls[0].method == mode
    assert work.calls == 4
    assert [c.args[0] for c in on_retry.call_args_list] == [0, 0]
    assert on_failure.call_count == 2


def test_runner_with_both_capabilities(thread_pool: ThreadPoolExecutor) -> None:
    runner = SchedulingThreadPool(thread_pool)
    on_success = Mock()
    executor = RetryExecutor(
        callback_config=CallbackConfig(on_success=WithValue(on_success)), runner=runner
    )

    executor.submit(FlakyWork(failures=1, value=1)).result(timeout=5)

    on_success.assert_called_once_with(1)
