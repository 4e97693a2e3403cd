r"""Time units used to express delays and periods of scheduled tasks."""

from __future__ import annotations

__all__ = ["TimeUnit"]

from enum import Enum


class TimeUnit(Enum):
    """Unit of a delay or period, valued by its length in seconds.

    Example:
        ```pycon
        >>> from retrycatch.timeunit import TimeUnit
        >>> TimeUnit.MILLISECONDS.to_seconds(250)
        0.25
        >>> TimeUnit.MINUTES.to_seconds(2)
        120.0

        ```
    """

    NANOSECONDS = 1e-9
    MICROSECONDS = 1e-6
    MILLISECONDS = 1e-3
    SECONDS = 1.0
    MINUTES = 60.0
    HOURS = 3600.0
    DAYS = 86400.0

    def to_seconds(self, duration: float) -> float:
        """Convert a duration expressed in this unit to seconds.

        Args:
            duration: The duration in this unit.

        Returns:
            The duration in seconds.
        """
        return duration * self.value
