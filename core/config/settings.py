# ============================================================================
# CONFIGURATION SETTINGS
# ============================================================================
# STATUS: Core - Environment-driven configuration
# PURPOSE: Centralized settings for database, probing, deployment, API
# CREATED: 14 OCT 2026
# ============================================================================
"""
Configuration Settings

Every setting has a sensible default and an environment variable override.

Design:
- Immutable dataclasses per concern
- from_env() classmethods
- One global AppConfig instance via get_config()
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class DatabaseSettings:
    """PostgreSQL connection settings."""
    database_url: Optional[str] = None
    host: str = "localhost"
    port: str = "5432"
    name: str = "postgres"
    user: str = "postgres"
    password: str = ""
    sslmode: str = "prefer"

    # Pool sizing
    min_size: int = 1
    max_size: int = 10

    # Create schema and tables at startup
    auto_bootstrap: bool = True

    def get_connection_string(self) -> str:
        """
        Get database connection string.

        Priority:
        1. DATABASE_URL
        2. Individual POSTGRES_* components
        """
        if self.database_url:
            return self.database_url

        return (
            f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/"
            f"{self.name}?sslmode={self.sslmode}"
        )

    @classmethod
    def from_env(cls) -> "DatabaseSettings":
        """Create from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL"),
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=os.getenv("POSTGRES_PORT", "5432"),
            name=os.getenv("POSTGRES_DB", "postgres"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", ""),
            sslmode=os.getenv("POSTGRES_SSLMODE", "prefer"),
            min_size=int(os.getenv("DB_POOL_MIN_SIZE", 1)),
            max_size=int(os.getenv("DB_POOL_MAX_SIZE", 10)),
            auto_bootstrap=_env_bool("AUTO_BOOTSTRAP_SCHEMA", "true"),
        )


@dataclass(frozen=True)
class ProbeDefaults:
    """
    Defaults for target probing.

    The per-target timeout also bounds a whole cycle, since targets are
    probed concurrently.
    """
    timeout_seconds: float = 3.0

    # Treat any HTTP response (including 4xx/5xx) as Up
    accept_any_status: bool = False

    # Periodic background cycle; 0 disables the loop
    monitor_interval_seconds: float = 0.0

    user_agent: str = "FleetWatch/0.3 (health-probe)"

    @classmethod
    def from_env(cls) -> "ProbeDefaults":
        """Create from environment variables."""
        return cls(
            timeout_seconds=float(os.getenv("PROBE_TIMEOUT_SECONDS", 3.0)),
            accept_any_status=_env_bool("PROBE_ACCEPT_ANY_STATUS"),
            monitor_interval_seconds=float(os.getenv("MONITOR_INTERVAL_SECONDS", 0)),
        )


@dataclass(frozen=True)
class DeploymentDefaults:
    """Defaults for the simulated deployment pipeline."""
    simulation_seconds: float = 2.0

    @classmethod
    def from_env(cls) -> "DeploymentDefaults":
        """Create from environment variables."""
        return cls(
            simulation_seconds=float(os.getenv("DEPLOY_SIMULATION_SECONDS", 2.0)),
        )


@dataclass(frozen=True)
class NotificationDefaults:
    """Defaults for webhook notifications."""
    webhook_url: Optional[str] = None
    timeout_seconds: float = 5.0

    @property
    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    @classmethod
    def from_env(cls) -> "NotificationDefaults":
        """Create from environment variables."""
        return cls(
            webhook_url=os.getenv("SLACK_WEBHOOK_URL") or None,
            timeout_seconds=float(os.getenv("NOTIFY_TIMEOUT_SECONDS", 5.0)),
        )


@dataclass(frozen=True)
class ApiDefaults:
    """
    Defaults for the HTTP surface.

    Rate limit: each client IP gets rate_limit_max_requests per
    rate_limit_window_seconds (100 per 15 minutes).
    """
    host: str = "0.0.0.0"
    port: int = 3000
    api_key: Optional[str] = None

    rate_limit_max_requests: int = 100
    rate_limit_window_seconds: float = 15 * 60

    @classmethod
    def from_env(cls) -> "ApiDefaults":
        """Create from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 3000)),
            api_key=os.getenv("API_KEY") or None,
            rate_limit_max_requests=int(os.getenv("RATE_LIMIT_MAX_REQUESTS", 100)),
            rate_limit_window_seconds=float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", 15 * 60)),
        )


# ============================================================================
# GLOBAL CONFIG INSTANCE
# ============================================================================

@dataclass
class AppConfig:
    """Container for all configuration."""
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    probe: ProbeDefaults = field(default_factory=ProbeDefaults)
    deployment: DeploymentDefaults = field(default_factory=DeploymentDefaults)
    notification: NotificationDefaults = field(default_factory=NotificationDefaults)
    api: ApiDefaults = field(default_factory=ApiDefaults)

    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create all settings from environment variables."""
        return cls(
            database=DatabaseSettings.from_env(),
            probe=ProbeDefaults.from_env(),
            deployment=DeploymentDefaults.from_env(),
            notification=NotificationDefaults.from_env(),
            api=ApiDefaults.from_env(),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "text"),
        )


_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration singleton."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset configuration (for testing)."""
    global _config
    _config = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DatabaseSettings",
    "ProbeDefaults",
    "DeploymentDefaults",
    "NotificationDefaults",
    "ApiDefaults",
    "AppConfig",
    "get_config",
    "reset_config",
]
