# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export core contracts, models, and errors
# CREATED: 14 OCT 2026
# ============================================================================

from core.contracts import TargetStatus, DeploymentStatus, PipelineStatus
from core.models import Target, ProbeOutcome, Snapshot, Deployment
from core.errors import (
    FleetWatchError,
    ValidationError,
    DuplicateError,
    NotFoundError,
    PersistenceFailure,
)

__all__ = [
    # Enums
    "TargetStatus",
    "DeploymentStatus",
    "PipelineStatus",
    # Models
    "Target",
    "ProbeOutcome",
    "Snapshot",
    "Deployment",
    # Errors
    "FleetWatchError",
    "ValidationError",
    "DuplicateError",
    "NotFoundError",
    "PersistenceFailure",
]
