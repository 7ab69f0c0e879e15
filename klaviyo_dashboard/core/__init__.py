"""
Core Infrastructure - Configuration, Logging, Observability

Usage:
    from klaviyo_dashboard.core import get_config, get_logger

    logger = get_logger(__name__)
    klaviyo_config = get_config().get_klaviyo_config()
"""

from klaviyo_dashboard.core.logging_config import get_logger, log_with_context, setup_logging
from klaviyo_dashboard.core.observability import capture_exception, setup_observability, track_performance
from klaviyo_dashboard.secure_config import (
    AuthConfig,
    ConfigurationError,
    DatabaseConfig,
    KlaviyoConfig,
    SecureConfig,
    ServerConfig,
    get_config,
    validate_config_on_startup,
)

__all__ = [
    # Configuration
    "get_config",
    "validate_config_on_startup",
    "ConfigurationError",
    "SecureConfig",
    "AuthConfig",
    "DatabaseConfig",
    "KlaviyoConfig",
    "ServerConfig",
    # Logging
    "get_logger",
    "setup_logging",
    "log_with_context",
    # Observability
    "setup_observability",
    "capture_exception",
    "track_performance",
]
