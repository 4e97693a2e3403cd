r"""Callback manager for orchestrating retry lifecycle events.

This module provides the CallbackManager class that handles invocation
of user-defined callbacks at the transitions of the retry loop, and
checks that the success callback matches the shape of the unit of work.
"""

from __future__ import annotations

__all__ = ["CallbackManager"]

from typing import TYPE_CHECKING, Any

from retrycatch.callbacks import NoValue, WithValue
from retrycatch.utils.exceptions import report_configuration_error

if TYPE_CHECKING:
    from retrycatch.retry.config import CallbackConfig


class CallbackManager:
    """Manages callback invocations during the retry lifecycle.

    Attributes:
        callbacks: Configuration containing callback functions for
            lifecycle events.
        strict: If True, a success callback of the wrong shape raises
            ``RetryConfigurationError`` instead of being logged.
    """

    def __init__(self, callbacks: CallbackConfig, *, strict: bool = False) -> None:
        self.callbacks = callbacks
        self.strict = strict

    def on_retry(self, attempt: int, error: Exception) -> None:
        """Invoke on_retry callback.

        Args:
            attempt: Index of the failed attempt (0-indexed). The first
                retry reports 0.
            error: Exception that triggered the retry.
        """
        if self.callbacks.on_retry is not None:
            self.callbacks.on_retry(attempt, error)

    def on_failure(self, error: Exception) -> None:
        """Invoke on_failure callback.

        Args:
            error: The final exception, either non-retryable or the last
                one raised before the retry budget was exhausted.
        """
        if self.callbacks.on_failure is not None:
            self.callbacks.on_failure(error)

    def on_action_success(self) -> None:
        """Invoke the success callback of an action.

        A ``WithValue`` callback is reported and not invoked, since an
        action has no value to deliver.
        """
        on_success = self.callbacks.on_success
        if isinstance(on_success, NoValue):
            on_success.deliver()
        elif isinstance(on_success, WithValue):
            report_configuration_error(
                "on_success callback of an action cannot receive a value",
                mode="on_success",
                strict=self.strict,
            )

    def on_computation_success(self, value: Any) -> None:
        """Invoke the success callback of a computation.

        A ``NoValue`` callback is reported and not invoked, since it would
        silently drop the computed value.

        Args:
            value: The value produced by the computation.
        """
        on_success = self.callbacks.on_success
        if isinstance(on_success, WithValue):
            on_success.deliver(value)
        elif isinstance(on_success, NoValue):
            report_configuration_error(
                "on_success callback of a computation must receive the result",
                mode="on_success",
                strict=self.strict,
            )
