r"""Callback types for observing the retry lifecycle.

The retry loop reports its transitions through three hooks:
- on_success: Called once when the unit of work succeeds
- on_retry: Called before each retry with the attempt index (0-indexed)
  and the exception that triggered it
- on_failure: Called once with the final exception when the work fails
  with a non-retryable exception or the retry budget is exhausted

The success hook comes in two shapes. ``NoValue`` wraps a callback
without argument, used for actions that return nothing. ``WithValue``
wraps a callback receiving the value produced by a computation. A shape
that does not match the unit of work is never invoked.

Example:
    ```pycon
    >>> from retrycatch.callbacks import NoValue, WithValue
    >>> results = []
    >>> success = WithValue(results.append)
    >>> success.accepts_value
    True
    >>> success.deliver(42)
    >>> results
    [42]
    >>> NoValue(lambda: results.append("done")).deliver()
    >>> results
    [42, 'done']

    ```
"""

from __future__ import annotations

__all__ = ["NoValue", "OnFailure", "OnRetry", "SuccessCallback", "WithValue"]

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

# Receives the attempt index (0-indexed) and the exception to retry on
OnRetry = Callable[[int, Exception], Any]

# Receives the final exception
OnFailure = Callable[[Exception], Any]


@dataclass(frozen=True)
class NoValue:
    """Success callback for actions that do not produce a value.

    Attributes:
        callback: Function called without argument on success.
    """

    callback: Callable[[], Any]

    @property
    def accepts_value(self) -> bool:
        return False

    def deliver(self) -> None:
        self.callback()


@dataclass(frozen=True)
class WithValue:
    """Success callback for computations producing a value.

    Attributes:
        callback: Function called with the produced value on success.
    """

    callback: Callable[[Any], Any]

    @property
    def accepts_value(self) -> bool:
        return True

    def deliver(self, value: Any) -> None:
        self.callback(value)


SuccessCallback = Union[NoValue, WithValue]
