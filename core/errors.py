# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# STATUS: Foundation - Domain exceptions
# PURPOSE: Classified errors mapped to HTTP status codes by the API layer
# CREATED: 14 OCT 2026
# ============================================================================
"""
FleetWatch Errors

Propagation policy:
- ValidationError, DuplicateError, NotFoundError reach the caller with a
  specific classification (400 / 409 / 404).
- PersistenceFailure on a critical read path reaches the caller as a
  server error (500).
- TransientProbeFailure and NotificationFailure never leave the
  component that raised them; they become a Down outcome or a log line.
"""

from typing import Optional


class FleetWatchError(Exception):
    """Base exception for all FleetWatch errors."""
    pass


class ValidationError(FleetWatchError):
    """Raised when caller input is missing or invalid."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class DuplicateError(FleetWatchError):
    """Raised when a target name is already registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Server with this name already exists: {name}")


class NotFoundError(FleetWatchError):
    """Raised when a named entity does not exist."""

    def __init__(self, name: str, entity: str = "Server"):
        self.name = name
        self.entity = entity
        super().__init__(f"{entity} not found: {name}")


class TransientProbeFailure(FleetWatchError):
    """Timeout or connection error while probing a target."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Probe of {url} failed: {reason}")


class PersistenceFailure(FleetWatchError):
    """Raised when the backing store is unavailable on a critical path."""

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        super().__init__(message)


class NotificationFailure(FleetWatchError):
    """Raised when webhook delivery fails."""
    pass


__all__ = [
    "FleetWatchError",
    "ValidationError",
    "DuplicateError",
    "NotFoundError",
    "TransientProbeFailure",
    "PersistenceFailure",
    "NotificationFailure",
]
