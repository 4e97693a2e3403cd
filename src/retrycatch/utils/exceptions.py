r"""Reporting of configuration errors.

Misusing a retry executor (e.g., requesting an asynchronous mode without
a task runner, or a success callback of the wrong shape) is reported as
an error log record and the offending step is skipped. Executors
configured with ``strict=True`` raise ``RetryConfigurationError``
instead.
"""

from __future__ import annotations

__all__ = ["report_configuration_error"]

import logging

from retrycatch.exceptions import RetryConfigurationError
from retrycatch.utils.structured_logging import log_structured

logger: logging.Logger = logging.getLogger(__name__)


def report_configuration_error(message: str, *, mode: str, strict: bool = False) -> None:
    """Report a configuration error.

    Args:
        message: A descriptive error message.
        mode: The misconfigured invocation mode or callback.
        strict: If True, raise instead of logging.

    Raises:
        RetryConfigurationError: If ``strict`` is True.

    Example:
        ```pycon
        >>> from retrycatch.utils.exceptions import report_configuration_error
        >>> report_configuration_error("no task runner configured", mode="execute")
        >>> report_configuration_error(
        ...     "no task runner configured", mode="execute", strict=True
        ... )  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        retrycatch.exceptions.RetryConfigurationError: no task runner configured

        ```
    """
    if strict:
        raise RetryConfigurationError(message, mode=mode)
    log_structured(logger, logging.ERROR, f"Error: {message}", mode=mode)
