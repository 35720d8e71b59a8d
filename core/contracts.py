# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums shared across the service
# PURPOSE: Status values for targets, deployments and the pipeline
# CREATED: 14 OCT 2026
# ============================================================================
"""
Base contracts for FleetWatch.

These values cross every boundary:
- SQL (PostgreSQL text columns)
- HTTP (JSON responses, dashboard)
- Python (internal processing)
"""

from enum import Enum


# ============================================================================
# STATUS ENUMS
# ============================================================================

class TargetStatus(str, Enum):
    """
    Last known state of a monitored target.

    Only the health check orchestrator moves a target out of UNKNOWN.
    """
    UNKNOWN = "Unknown"          # Registered, never probed
    UP = "Up"                    # Last probe succeeded
    DOWN = "Down"                # Last probe failed


class DeploymentStatus(str, Enum):
    """
    Deployment lifecycle states.

    State transitions:
        IN_PROGRESS -> SUCCESS   (exactly once, after the simulation delay)
    """
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"


class PipelineStatus(str, Enum):
    """Process-wide CI/CD pipeline state reported by status and notify."""
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"


__all__ = [
    "TargetStatus",
    "DeploymentStatus",
    "PipelineStatus",
]
