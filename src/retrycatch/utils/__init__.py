r"""Utility functions for retry invocations.

This package provides structured logging helpers, reporting of
configuration errors and validation of scheduling parameters.
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "bind_invocation_id",
    "clear_invocation_id",
    "get_invocation_id",
    "log_structured",
    "new_invocation_id",
    "report_configuration_error",
    "set_invocation_id",
    "validate_delay",
    "validate_period",
]

from retrycatch.utils.exceptions import report_configuration_error
from retrycatch.utils.structured_logging import (
    StructuredFormatter,
    bind_invocation_id,
    clear_invocation_id,
    get_invocation_id,
    log_structured,
    new_invocation_id,
    set_invocation_id,
)
from retrycatch.utils.validation import validate_delay, validate_period
