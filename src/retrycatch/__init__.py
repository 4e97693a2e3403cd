r"""retrycatch - Generic retry-catch execution of actions and computations.

This package runs a unit of work (an action or a computation) and, when
it raises, decides from a retry predicate and a retry budget whether to
run it again, reporting each transition to user callbacks. The work runs
either on the calling thread or through a task runner owned by the
caller: a ``concurrent.futures`` executor, or a scheduler supporting
delayed and periodic execution.

Key Features:
    - Retry on selected exception types (subclasses included) or on a
      custom predicate
    - Bounded or unlimited retry budget
    - on_success, on_retry and on_failure callbacks, with success
      callbacks matching the shape of the unit of work
    - Immediate, background, submitted and scheduled (one-shot,
      fixed-rate, fixed-delay) invocation modes
    - Immutable configuration, safe to share across concurrent
      invocations

Example:
    ```pycon
    >>> from concurrent.futures import ThreadPoolExecutor
    >>> from retrycatch import RetryCatch
    >>> results = []
    >>> with ThreadPoolExecutor(max_workers=2) as pool:
    ...     future = (
    ...         RetryCatch()
    ...         .retry_count(3)
    ...         .retry_on(ArithmeticError)
    ...         .on_success_with_value(results.append)
    ...         .with_executor(pool)
    ...         .submit(lambda: 10 // 2)
    ...     )
    ...     future.result()
    ...
    >>> results
    [5]

    ```
"""

from __future__ import annotations

__all__ = [
    "UNLIMITED",
    "CallbackConfig",
    "NoValue",
    "RetryCatch",
    "RetryConfig",
    "RetryConfigurationError",
    "RetryExecutor",
    "RetryPredicate",
    "Scheduler",
    "TaskRunner",
    "TimeUnit",
    "WithValue",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from retrycatch.callbacks import NoValue, WithValue
from retrycatch.exceptions import RetryConfigurationError
from retrycatch.predicates import RetryPredicate
from retrycatch.retry import UNLIMITED, CallbackConfig, RetryConfig, RetryExecutor
from retrycatch.retry_catch import RetryCatch
from retrycatch.runners import Scheduler, TaskRunner
from retrycatch.timeunit import TimeUnit

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
