r"""Exceptions raised by the retrycatch package."""

from __future__ import annotations

__all__ = ["RetryConfigurationError"]


class RetryConfigurationError(ValueError):
    """Exception raised when a retry executor is misused.

    Configuration errors are only logged by default. This exception is
    raised instead when the executor is configured with ``strict=True``.

    Args:
        message: A descriptive error message.
        mode: The invocation mode or callback that was misconfigured
            (e.g., "execute", "schedule_at_fixed_rate", "on_success").

    Attributes:
        message: The error message.
        mode: The misconfigured invocation mode or callback (if any).

    Example:
        ```pycon
        >>> from retrycatch.exceptions import RetryConfigurationError
        >>> error = RetryConfigurationError("no task runner configured", mode="submit")
        >>> error.mode
        'submit'
        >>> str(error)
        'no task runner configured'

        ```
    """

    def __init__(self, message: str, *, mode: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.mode = mode
