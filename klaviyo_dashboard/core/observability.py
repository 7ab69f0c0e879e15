"""
Observability Module - Error Tracking and Performance Tracking

Provides:
- Sentry error tracking (enabled when SENTRY_DSN is configured)
- Performance tracking for slow upstream aggregation

Usage:
    from klaviyo_dashboard.core.observability import setup_observability, track_performance

    setup_observability(environment="production")

    with track_performance("campaign_metrics") as ctx:
        ctx["client_id"] = 7
        await collector.collect_campaign_metrics()
"""

import time
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from klaviyo_dashboard.core.logging_config import get_logger

logger = get_logger(__name__)


class ObservabilityConfig:
    """
    Configuration for observability features.

    Attributes:
        sentry_dsn: Sentry Data Source Name for error tracking
        environment: Environment name (development, staging, production)
        enable_sentry: Whether Sentry error tracking is active
    """

    def __init__(self, sentry_dsn: str | None = None, environment: str = "development", enable_sentry: bool = False):
        self.sentry_dsn = sentry_dsn
        self.environment = environment
        self.enable_sentry = bool(enable_sentry and sentry_dsn)


_observability_config: ObservabilityConfig | None = None


def setup_observability(
    sentry_dsn: str | None = None,
    environment: str = "development",
    enable_sentry: bool = True,
) -> ObservabilityConfig:
    """
    Initialize observability features.

    Args:
        sentry_dsn: Sentry DSN (or set SENTRY_DSN env var)
        environment: Environment name
        enable_sentry: Enable Sentry error tracking when a DSN is available

    Returns:
        The active ObservabilityConfig
    """
    global _observability_config

    from klaviyo_dashboard.secure_config import get_config

    sentry_dsn = sentry_dsn or get_config().get_optional_env("SENTRY_DSN")

    _observability_config = ObservabilityConfig(
        sentry_dsn=sentry_dsn, environment=environment, enable_sentry=enable_sentry
    )

    if _observability_config.enable_sentry:
        sentry_logging = LoggingIntegration(level=None, event_level="ERROR")

        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            integrations=[sentry_logging],
            traces_sample_rate=0.1,
        )

        logger.info("Sentry error tracking initialized", extra={"environment": environment})
    else:
        logger.info("Sentry error tracking disabled", extra={"environment": environment})

    return _observability_config


def capture_exception(exception: Exception, context: dict[str, Any] | None = None) -> None:
    """
    Capture an exception for error tracking.

    Always logs the exception; also reports it to Sentry when enabled.

    Args:
        exception: The exception to capture
        context: Additional context, attached as Sentry tags
    """
    if _observability_config and _observability_config.enable_sentry:
        with sentry_sdk.new_scope() as scope:
            for key, value in (context or {}).items():
                scope.set_tag(key, value)
            sentry_sdk.capture_exception(exception)

    logger.error(
        f"Exception captured: {exception}",
        exc_info=exception,
        extra={"exception_type": type(exception).__name__, "context": context or {}},
    )


@contextmanager
def track_performance(operation_name: str, alert_threshold_ms: float = 5000.0) -> Generator[dict[str, Any], None, None]:
    """
    Context manager to track operation performance.

    Args:
        operation_name: Name of the operation being tracked
        alert_threshold_ms: Warn if operation takes longer than this (milliseconds)

    Yields:
        Dictionary to store additional context
    """
    context: dict[str, Any] = {}
    start_time = time.perf_counter()

    try:
        yield context
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            f"Performance: {operation_name}",
            extra={"operation": operation_name, "duration_ms": round(duration_ms, 2), **context},
        )

        if duration_ms > alert_threshold_ms:
            logger.warning(
                f"Slow operation detected: {operation_name}",
                extra={
                    "operation": operation_name,
                    "duration_ms": round(duration_ms, 2),
                    "threshold_ms": alert_threshold_ms,
                    "exceeded_by_ms": round(duration_ms - alert_threshold_ms, 2),
                    **context,
                },
            )
