# ============================================================================
# DEPLOYMENT MODEL
# ============================================================================
# STATUS: Core model - Simulated deployment attempt
# PURPOSE: Track one deployment from in_progress to success
# CREATED: 15 OCT 2026
# ============================================================================
"""
Deployment Model

Maps to: fleetwatch.deployments table

Lifecycle:
    1. Created with status=in_progress when a deployment is started
    2. Transitions to success once, after the simulation delay
    3. Never deleted
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from core.contracts import DeploymentStatus

MAX_VERSION_LENGTH = 128


class Deployment(BaseModel):
    """A single deployment attempt."""

    deployment_id: Optional[int] = Field(default=None, description="Assigned on insert")
    version: str = Field(..., min_length=1, max_length=MAX_VERSION_LENGTH, description="Caller-supplied version")
    status: DeploymentStatus = Field(default=DeploymentStatus.IN_PROGRESS)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = Field(
        default=None,
        description="When the transition to success was persisted"
    )
