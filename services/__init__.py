# ============================================================================
# SERVICES MODULE
# ============================================================================
# STATUS: Core - Business logic layer
# PURPOSE: Registry, deployment and notification services
# CREATED: 16 OCT 2026
# ============================================================================
"""
Services Module

Business logic for FleetWatch.
Services sit between the API routes and the repositories.

Usage:
    from services import RegistryService, DeploymentTracker

    tracker = DeploymentTracker(DeploymentRepository(pool))
    deployment = await tracker.start("1.2.3")
"""

from .registry_service import RegistryService
from .deployment_service import DeploymentTracker, PipelineState
from .notification_service import Notifier, format_status_message

__all__ = [
    "RegistryService",
    "DeploymentTracker",
    "PipelineState",
    "Notifier",
    "format_status_message",
]
