r"""Retry decision logic for determining whether to retry a unit of work.

This module provides the RetryDecider class that encapsulates the logic
for deciding whether a failed attempt should be retried based on the
retry predicate and the retry budget.
"""

from __future__ import annotations

__all__ = ["RetryDecider"]

import logging
from typing import TYPE_CHECKING

from retrycatch.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class RetryDecider:
    """Decides whether a failed attempt should be retried.

    Args:
        retry_predicate: Predicate deciding whether an exception is
            retryable.
        max_retries: Maximum number of retries, or None for an unlimited
            budget.

    Example:
        ```pycon
        >>> from retrycatch.predicates import RetryPredicate
        >>> from retrycatch.retry import RetryDecider
        >>> decider = RetryDecider(RetryPredicate(KeyError), max_retries=1)
        >>> decider.should_retry(KeyError("a"), attempt=0)
        (True, 'KeyError')
        >>> decider.should_retry(KeyError("a"), attempt=1)
        (False, 'max retries exhausted')
        >>> decider.should_retry(ValueError("b"), attempt=0)
        (False, 'non-retryable ValueError')

        ```
    """

    def __init__(
        self,
        retry_predicate: Callable[[BaseException | None], bool],
        max_retries: int | None,
    ) -> None:
        self.retry_predicate = retry_predicate
        self.max_retries = max_retries

    def should_retry(self, exception: Exception, attempt: int) -> tuple[bool, str]:
        """Determine if an exception should trigger a retry.

        The budget is checked against the attempt index before it is
        incremented, so a budget of N allows exactly N retries.

        Args:
            exception: The exception raised by the unit of work.
            attempt: Current attempt index (0-indexed).

        Returns:
            Tuple of (should_retry, reason).
        """
        error_type = type(exception).__name__
        if not self.retry_predicate(exception):
            log_structured(
                logger,
                logging.DEBUG,
                f"{error_type} is not retryable, stopping after attempt {attempt + 1}",
                attempt=attempt,
                error_type=error_type,
            )
            return (False, f"non-retryable {error_type}")

        if self.max_retries is None or attempt < self.max_retries:
            return (True, error_type)

        log_structured(
            logger,
            logging.DEBUG,
            f"Retry budget exhausted after {attempt + 1} attempts ({self.max_retries} retries)",
            attempt=attempt,
            error_type=error_type,
        )
        return (False, "max retries exhausted")
