r"""Parameter validation utilities for scheduled retry invocations.

This module provides validation functions for the delays and periods
handed to a scheduler, so that invalid values are reported before the
retry-wrapped task reaches the scheduler.
"""

from __future__ import annotations

__all__ = ["validate_delay", "validate_period"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from retrycatch.timeunit import TimeUnit


def validate_delay(delay: float, unit: TimeUnit, *, name: str = "delay") -> str | None:
    """Validate a delay before handing it to a scheduler.

    Args:
        delay: The delay, expressed in ``unit``. Must be >= 0.
        unit: The time unit of the delay.
        name: The parameter name used in the error message.

    Returns:
        An error message if the delay is invalid, otherwise None.

    Example:
        ```pycon
        >>> from retrycatch.timeunit import TimeUnit
        >>> from retrycatch.utils import validate_delay
        >>> validate_delay(5, TimeUnit.SECONDS)
        >>> validate_delay(-1, TimeUnit.SECONDS)
        'delay must be >= 0, got -1 SECONDS'

        ```
    """
    if delay < 0:
        return f"{name} must be >= 0, got {delay} {unit.name}"
    return None


def validate_period(period: float, unit: TimeUnit, *, name: str = "period") -> str | None:
    """Validate the period of a periodic schedule.

    Args:
        period: The period, expressed in ``unit``. Must be > 0.
        unit: The time unit of the period.
        name: The parameter name used in the error message.

    Returns:
        An error message if the period is invalid, otherwise None.

    Example:
        ```pycon
        >>> from retrycatch.timeunit import TimeUnit
        >>> from retrycatch.utils import validate_period
        >>> validate_period(100, TimeUnit.MILLISECONDS)
        >>> validate_period(0, TimeUnit.MILLISECONDS)
        'period must be > 0, got 0 MILLISECONDS'

        ```
    """
    if period <= 0:
        return f"{name} must be > 0, got {period} {unit.name}"
    return None
