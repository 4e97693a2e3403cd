r"""Configuration dataclasses for retry behavior.

This module provides the immutable configuration objects for the retry
loop and its callbacks. Both are frozen, so an asynchronous invocation
always runs with the configuration it was dispatched with.
"""

from __future__ import annotations

__all__ = ["DEFAULT_MAX_RETRIES", "UNLIMITED", "CallbackConfig", "RetryConfig"]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from retrycatch.callbacks import NoValue, WithValue
from retrycatch.predicates import RetryPredicate

if TYPE_CHECKING:
    from collections.abc import Callable

    from retrycatch.callbacks import OnFailure, OnRetry, SuccessCallback

# Retry budget sentinel: retry until the unit of work succeeds or raises a
# non-retryable exception
UNLIMITED = None

DEFAULT_MAX_RETRIES = UNLIMITED


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    Args:
        max_retries: Maximum number of retries after the initial attempt,
            or ``UNLIMITED``. Negative values are normalized to their
            absolute value, so ``-3`` behaves like ``3``.
        retry_predicate: Predicate deciding whether an exception is
            retryable. Defaults to retrying on any ``Exception``.
        strict: If True, configuration errors raise
            ``RetryConfigurationError`` instead of being logged.

    Example:
        ```pycon
        >>> from retrycatch.retry import RetryConfig
        >>> RetryConfig(max_retries=-3).max_retries
        3
        >>> config = RetryConfig()
        >>> config.is_unlimited
        True
        >>> config.merge(max_retries=5).max_retries
        5

        ```
    """

    max_retries: int | None = DEFAULT_MAX_RETRIES
    retry_predicate: Callable[[BaseException | None], bool] = field(
        default_factory=RetryPredicate
    )
    strict: bool = False

    def __post_init__(self) -> None:
        if self.max_retries is not None:
            if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
                msg = f"max_retries must be an int or UNLIMITED, got {self.max_retries!r}"
                raise TypeError(msg)
            object.__setattr__(self, "max_retries", abs(self.max_retries))
        if self.retry_predicate is None:
            object.__setattr__(self, "retry_predicate", RetryPredicate())

    @property
    def is_unlimited(self) -> bool:
        return self.max_retries is UNLIMITED

    def merge(self, **overrides: Any) -> RetryConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied, so ``UNLIMITED`` cannot
        be set through this method; create a new config instead.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new RetryConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)


@dataclass(frozen=True)
class CallbackConfig:
    """Configuration for callbacks.

    Attributes:
        on_success: Optional success callback, either ``NoValue`` for
            actions or ``WithValue`` for computations.
        on_retry: Optional callback invoked before each retry with the
            attempt index (0-indexed) and the exception.
        on_failure: Optional callback invoked with the final exception.

    Raises:
        TypeError: If ``on_success`` is neither ``NoValue`` nor
            ``WithValue``.
    """

    on_success: SuccessCallback | None = None
    on_retry: OnRetry | None = None
    on_failure: OnFailure | None = None

    def __post_init__(self) -> None:
        if self.on_success is not None and not isinstance(self.on_success, (NoValue, WithValue)):
            msg = (
                "on_success must be wrapped in NoValue (actions) or WithValue "
                f"(computations), got {self.on_success!r}"
            )
            raise TypeError(msg)

    def merge(self, **overrides: Any) -> CallbackConfig:
        """Create a new config with the non-None callbacks overridden."""
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
