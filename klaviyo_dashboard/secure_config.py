"""
Secure Configuration Management

Provides centralized, validated configuration for the dashboard service.
All values come from environment variables (a local .env file is loaded
first) and are validated when requested.

Usage:
    from klaviyo_dashboard.secure_config import get_config

    config = get_config()
    auth_config = config.get_auth_config()
    print(auth_config.token_ttl_hours)

Security Features:
    - Fail-fast on missing/invalid secrets
    - Placeholder detection (e.g., "change_me")
    - HTTPS enforcement for the upstream API URL

Raises:
    ConfigurationError: If configuration is missing or invalid
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DATABASE_PATH = "data/klaviyo_metrics.db"
DEFAULT_KLAVIYO_BASE_URL = "https://a.klaviyo.com/api"
DEFAULT_KLAVIYO_REVISION = "2024-02-15"

PLACEHOLDERS = ["your_secret", "change_me", "changeme", "example", "placeholder", "replace_me", "fallback-secret"]


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got: {raw!r}")


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class AuthConfig:
    """
    Validated token signing configuration.
    """

    jwt_secret: str
    token_ttl_hours: int = 168
    algorithm: str = "HS256"

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """
        Validate token configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.jwt_secret:
            raise ConfigurationError("JWT_SECRET is required")

        if len(self.jwt_secret) < 16:
            raise ConfigurationError(
                f"JWT_SECRET appears invalid (too short: {len(self.jwt_secret)} chars, expected >=16)"
            )

        if any(placeholder in self.jwt_secret.lower() for placeholder in PLACEHOLDERS):
            raise ConfigurationError("JWT_SECRET contains a placeholder value - please set a real secret")

        if self.token_ttl_hours <= 0:
            raise ConfigurationError(f"TOKEN_TTL_HOURS must be positive, got: {self.token_ttl_hours}")


@dataclass
class DatabaseConfig:
    """
    SQLite database location.
    """

    path: Path

    def __post_init__(self):
        self.path = Path(self.path)
        if not str(self.path).strip():
            raise ConfigurationError("DATABASE_PATH is required")


@dataclass
class KlaviyoConfig:
    """
    Validated upstream API configuration.
    """

    base_url: str = DEFAULT_KLAVIYO_BASE_URL
    revision: str = DEFAULT_KLAVIYO_REVISION
    page_size: int = 100
    max_pages: int = 5
    timeout: int = 30

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """
        Validate Klaviyo configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.base_url:
            raise ConfigurationError("KLAVIYO_BASE_URL is required")

        if not self.base_url.startswith("https://"):
            raise ConfigurationError(f"KLAVIYO_BASE_URL must use HTTPS: {self.base_url}")

        if not 1 <= self.page_size <= 100:
            raise ConfigurationError(f"KLAVIYO_PAGE_SIZE must be between 1 and 100, got: {self.page_size}")

        if self.max_pages < 1:
            raise ConfigurationError(f"KLAVIYO_MAX_PAGES must be at least 1, got: {self.max_pages}")

        if self.timeout <= 0:
            raise ConfigurationError(f"KLAVIYO_TIMEOUT must be positive, got: {self.timeout}")


@dataclass
class ServerConfig:
    """
    HTTP server and logging settings.
    """

    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    json_logs: bool = False
    environment: str = "development"

    def __post_init__(self):
        if not 0 < self.port < 65536:
            raise ConfigurationError(f"PORT must be between 1 and 65535, got: {self.port}")


class SecureConfig:
    """
    Centralized secure configuration manager.

    Loads and validates all application configuration from environment variables.
    Provides fail-fast behavior to catch configuration issues early.
    """

    def __init__(self):
        """Initialize configuration (loads .env file)."""
        load_dotenv()

    def get_auth_config(self) -> AuthConfig:
        """
        Get validated token signing configuration.

        Returns:
            AuthConfig: Validated configuration

        Raises:
            ConfigurationError: If configuration is missing or invalid
        """
        return AuthConfig(
            jwt_secret=os.getenv("JWT_SECRET", ""),
            token_ttl_hours=_env_int("TOKEN_TTL_HOURS", 168),
        )

    def get_database_config(self) -> DatabaseConfig:
        """Get the SQLite database location."""
        return DatabaseConfig(path=Path(os.getenv("DATABASE_PATH") or DEFAULT_DATABASE_PATH))

    def get_klaviyo_config(self) -> KlaviyoConfig:
        """
        Get validated Klaviyo API configuration.

        Returns:
            KlaviyoConfig: Validated configuration

        Raises:
            ConfigurationError: If configuration is missing or invalid
        """
        return KlaviyoConfig(
            base_url=(os.getenv("KLAVIYO_BASE_URL") or DEFAULT_KLAVIYO_BASE_URL).rstrip("/"),
            revision=os.getenv("KLAVIYO_REVISION") or DEFAULT_KLAVIYO_REVISION,
            page_size=_env_int("KLAVIYO_PAGE_SIZE", 100),
            max_pages=_env_int("KLAVIYO_MAX_PAGES", 5),
            timeout=_env_int("KLAVIYO_TIMEOUT", 30),
        )

    def get_server_config(self) -> ServerConfig:
        """Get HTTP server, CORS and logging settings."""
        origins = os.getenv("CORS_ORIGINS", "*")
        return ServerConfig(
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", 3001),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            json_logs=_env_bool("JSON_LOGS"),
            environment=os.getenv("ENVIRONMENT", "development"),
        )

    def get_optional_env(self, name: str) -> str | None:
        """Get an optional environment variable (None when unset or blank)."""
        value = os.getenv(name)
        return value if value and value.strip() else None


_config_instance: SecureConfig | None = None


def get_config() -> SecureConfig:
    """
    Get the global configuration instance (singleton pattern).

    Returns:
        SecureConfig: The configuration manager
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = SecureConfig()
    return _config_instance


def validate_config_on_startup(required_sections: list[str]) -> None:
    """
    Validate required configuration at application startup.

    Args:
        required_sections: Sections to validate (e.g., ['auth', 'database', 'klaviyo'])

    Raises:
        ConfigurationError: If any required configuration is missing or invalid
        ValueError: If an unknown section is requested
    """
    config = get_config()
    loaders = {
        "auth": config.get_auth_config,
        "database": config.get_database_config,
        "klaviyo": config.get_klaviyo_config,
        "server": config.get_server_config,
    }

    for section in required_sections:
        if section not in loaders:
            raise ValueError(f"Unknown configuration section: {section}")
        loaders[section]()
