"""
Error Handling Utility Module

Reusable error handling patterns for the places where upstream failures are
expected and must not break a dashboard request:

1. log_and_continue() - Log error and continue execution
2. log_and_return_default() - Log error and return a default value
3. log_and_raise() - Log error with context and re-raise
4. settle_results() - Replace failed results of a gather() with defaults

All functions use structured logging with contextual information.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

T = TypeVar("T")


def log_and_continue(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    error_type: str = "Operation",
) -> None:
    """
    Log an error with structured context and continue execution gracefully.

    Use this for expected errors on individual items in a batch
    (e.g., one campaign whose messages cannot be fetched).

    Example:
        try:
            stats = statistics_of(message)
        except TypeError as e:
            log_and_continue(logger, e, {"campaign_id": campaign_id}, "Campaign statistics")
            continue
    """
    logger.warning(
        f"{error_type} failed: {error}",
        extra={
            "error_type": error_type,
            "exception_class": error.__class__.__name__,
            "context": context,
        },
    )


def log_and_return_default(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    default_value: Any = None,
    error_type: str = "Operation",
) -> Any:
    """
    Log an error and return a default value.

    Example:
        try:
            return response.json()
        except ValueError as e:
            return log_and_return_default(
                logger, e, context={"endpoint": endpoint}, default_value={"data": []}, error_type="Decode"
            )
    """
    logger.warning(
        f"{error_type} failed, returning default value: {error}",
        extra={
            "error_type": error_type,
            "exception_class": error.__class__.__name__,
            "context": context,
            "default_value": str(default_value),
        },
    )
    return default_value


def log_and_raise(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    error_type: str = "Operation",
) -> None:
    """
    Log an error with context and re-raise it (for unexpected errors).

    Raises:
        The original exception after logging
    """
    logger.error(
        f"{error_type} failed critically: {error}",
        exc_info=True,
        extra={
            "error_type": error_type,
            "exception_class": error.__class__.__name__,
            "context": context,
        },
    )
    raise error


def settle_results(
    logger: logging.Logger,
    results: Sequence[Any],
    defaults: Sequence[Callable[[], T]],
    labels: Sequence[str],
    error_type: str = "Concurrent task",
) -> list[Any]:
    """
    Resolve the output of ``asyncio.gather(..., return_exceptions=True)``.

    Each result that is an exception is logged and replaced by calling the
    matching default factory; successful results pass through unchanged.

    Args:
        logger: Logger instance
        results: Values/exceptions in task order
        defaults: Zero-argument factories producing the fallback for each task
        labels: Task names used in log context
        error_type: Human-readable description

    Returns:
        List of results with every failure replaced by its default

    Example:
        results = await asyncio.gather(fetch_a(), fetch_b(), return_exceptions=True)
        a, b = settle_results(logger, results, [A.zeroed, B.zeroed], ["a", "b"])
    """
    if not len(results) == len(defaults) == len(labels):
        raise ValueError("results, defaults and labels must have the same length")

    settled: list[Any] = []
    for result, default, label in zip(results, defaults, labels):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            settled.append(log_and_return_default(logger, result, {"task": label}, default(), error_type))
        else:
            settled.append(result)
    return settled
