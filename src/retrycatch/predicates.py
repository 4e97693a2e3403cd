r"""Predicates deciding whether a raised exception should be retried.

A predicate receives the exception raised by a unit of work and returns
``True`` if the retry loop should try the work again. ``None`` is never
retryable.
"""

from __future__ import annotations

__all__ = ["DEFAULT_RETRY_ON", "RetryPredicate"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

# Retry on every ``Exception`` when no exception type is configured
DEFAULT_RETRY_ON: tuple[type[BaseException], ...] = (Exception,)


class RetryPredicate:
    r"""Predicate matching exceptions against a set of exception types.

    An exception matches if it is an instance of one of the configured
    types, subclasses included.

    Args:
        *exception_types: The exception types to retry on. If no type is
            given, every ``Exception`` is retryable.
        func: Optional function deciding whether an exception is
            retryable. It replaces the type check and cannot be combined
            with exception types.

    Raises:
        TypeError: If one of the values is not an exception type.
        ValueError: If both exception types and ``func`` are given.

    Example:
        ```pycon
        >>> from retrycatch.predicates import RetryPredicate
        >>> predicate = RetryPredicate(ArithmeticError, KeyError)
        >>> predicate(ZeroDivisionError("division by zero"))
        True
        >>> predicate(ValueError("bad value"))
        False
        >>> predicate(None)
        False
        >>> RetryPredicate()(RuntimeError("boom"))
        True

        ```
    """

    def __init__(
        self,
        *exception_types: type[BaseException],
        func: Callable[[BaseException], bool] | None = None,
    ) -> None:
        for exc_type in exception_types:
            if not (isinstance(exc_type, type) and issubclass(exc_type, BaseException)):
                msg = f"retry_on expects exception types, got {exc_type!r}"
                raise TypeError(msg)
        if func is not None and exception_types:
            msg = "RetryPredicate accepts exception types or a function, not both"
            raise ValueError(msg)
        self._func = func
        self._exception_types: tuple[type[BaseException], ...] = (
            () if func is not None else tuple(exception_types) or DEFAULT_RETRY_ON
        )

    @classmethod
    def from_callable(cls, func: Callable[[BaseException], bool]) -> RetryPredicate:
        r"""Create a predicate delegating the decision to a function.

        The function is only called with actual exceptions, ``None`` is
        rejected before reaching it.

        Args:
            func: Function returning ``True`` if the exception is retryable.

        Returns:
            The predicate wrapping ``func``.

        Example:
            ```pycon
            >>> from retrycatch.predicates import RetryPredicate
            >>> predicate = RetryPredicate.from_callable(lambda exc: "again" in str(exc))
            >>> predicate(RuntimeError("try again"))
            True
            >>> predicate(None)
            False

            ```
        """
        return cls(func=func)

    @property
    def exception_types(self) -> tuple[type[BaseException], ...]:
        """The exception types matched by this predicate.

        Empty for a predicate delegating to a function.
        """
        return self._exception_types

    def test(self, error: BaseException | None) -> bool:
        """Indicate if ``error`` should be retried.

        Args:
            error: The exception raised by the unit of work.

        Returns:
            ``True`` if the exception is retryable, otherwise ``False``.
        """
        if error is None:
            return False
        if self._func is not None:
            return bool(self._func(error))
        return isinstance(error, self._exception_types)

    def __call__(self, error: BaseException | None) -> bool:
        return self.test(error)

    def __repr__(self) -> str:
        if self._func is not None:
            return f"{self.__class__.__qualname__}(func={self._func!r})"
        names = ", ".join(exc_type.__qualname__ for exc_type in self._exception_types)
        return f"{self.__class__.__qualname__}({names})"
