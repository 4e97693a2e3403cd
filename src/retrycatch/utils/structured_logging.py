r"""Structured logging utilities for machine-readable log output.

This module provides an opt-in JSON formatter and helpers to attach
structured fields to log records. Each retry invocation binds an
invocation ID to the current context while its loop runs, so the records
emitted by concurrent invocations sharing one executor can be told
apart.

Example:
    Enable structured logging for retrycatch:

    ```python
    import logging
    from retrycatch.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("retrycatch")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "bind_invocation_id",
    "clear_invocation_id",
    "get_invocation_id",
    "log_structured",
    "new_invocation_id",
    "set_invocation_id",
]

import contextvars
import json
import logging
import time
import uuid
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_invocation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "invocation_id", default=None
)

# Attributes every LogRecord carries; anything else came from ``extra``
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


def new_invocation_id() -> str:
    """Return a new short random invocation ID.

    Example:
        ```pycon
        >>> from retrycatch.utils.structured_logging import new_invocation_id
        >>> len(new_invocation_id())
        12

        ```
    """
    return uuid.uuid4().hex[:12]


def get_invocation_id() -> str | None:
    """Get the invocation ID bound to the current context.

    Returns:
        The current invocation ID, or None if not set.
    """
    return _invocation_id.get()


def set_invocation_id(invocation_id: str) -> None:
    """Set the invocation ID for the current context.

    Args:
        invocation_id: The invocation ID to set.

    Example:
        ```pycon
        >>> from retrycatch.utils.structured_logging import (
        ...     clear_invocation_id,
        ...     get_invocation_id,
        ...     set_invocation_id,
        ... )
        >>> set_invocation_id("inv-123")
        >>> get_invocation_id()
        'inv-123'
        >>> clear_invocation_id()
        >>> get_invocation_id()

        ```
    """
    _invocation_id.set(invocation_id)


def clear_invocation_id() -> None:
    """Clear the invocation ID for the current context."""
    _invocation_id.set(None)


@contextmanager
def bind_invocation_id(invocation_id: str | None = None) -> Iterator[str]:
    """Bind an invocation ID to the current context for the duration of
    the block.

    The previous value is restored on exit, so nested invocations (e.g.,
    a retried unit of work that itself uses a retry executor) keep their
    own IDs.

    Args:
        invocation_id: The ID to bind. A new one is generated if None.

    Yields:
        The bound invocation ID.
    """
    invocation_id = invocation_id or new_invocation_id()
    token = _invocation_id.set(invocation_id)
    try:
        yield invocation_id
    finally:
        _invocation_id.reset(token)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Standard fields in the JSON output:
        - timestamp: ISO 8601 timestamp
        - level: Log level name
        - logger: Logger name
        - message: Log message
        - invocation_id: ID of the retry invocation (if any)
        - thread: Thread name

    Fields passed through ``extra`` (e.g., ``attempt`` or ``error_type``)
    are included as well.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from io import StringIO
        >>> from retrycatch.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("doctest_structured_formatter")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.INFO)
        >>> logger.info("Retrying", extra={"attempt": 1})
        >>> json.loads(stream.getvalue())["attempt"]
        1

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "thread": record.threadName,
        }

        invocation_id = getattr(record, "invocation_id", None) or get_invocation_id()
        if invocation_id is not None:
            log_data["invocation_id"] = invocation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=repr)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002
        """Format timestamp as ISO 8601 with millisecond precision."""
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(
    logger: logging.Logger,
    level: int,
    message: str,
    **extra: Any,
) -> None:
    """Log a message with structured data.

    The current invocation ID is attached to the record when one is
    bound.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.DEBUG).
        message: Log message.
        **extra: Additional structured fields to include in the log.
    """
    if not logger.isEnabledFor(level):
        return
    invocation_id = get_invocation_id()
    if invocation_id is not None:
        extra.setdefault("invocation_id", invocation_id)
    logger.log(level, message, extra=extra)
