r"""Retry package implementing class-based composition pattern.

This package provides a modular retry execution system using composition
for improved maintainability and testability.

Public API:
    - RetryConfig: Configuration for retry behavior
    - CallbackConfig: Configuration for callbacks
    - RetryDecider: Logic for deciding whether to retry
    - CallbackManager: Manager for callback invocations
    - TaskDispatcher: Dispatch of retry-wrapped tasks to a task runner
    - RetryExecutor: Retry executor for actions and computations
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_RETRIES",
    "UNLIMITED",
    "CallbackConfig",
    "CallbackManager",
    "RetryConfig",
    "RetryDecider",
    "RetryExecutor",
    "TaskDispatcher",
]

from retrycatch.retry.binding import TaskDispatcher
from retrycatch.retry.config import DEFAULT_MAX_RETRIES, UNLIMITED, CallbackConfig, RetryConfig
from retrycatch.retry.decider import RetryDecider
from retrycatch.retry.executor import RetryExecutor
from retrycatch.retry.manager import CallbackManager
