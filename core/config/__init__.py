# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 14 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized, environment-driven configuration for FleetWatch.
"""

from core.config.settings import (
    DatabaseSettings,
    ProbeDefaults,
    DeploymentDefaults,
    NotificationDefaults,
    ApiDefaults,
    AppConfig,
    get_config,
    reset_config,
)

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
