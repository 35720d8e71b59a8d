# ============================================================================
# TARGET MODEL
# ============================================================================
# STATUS: Core model - Monitored endpoint
# PURPOSE: One registered URL probed by every health check cycle
# CREATED: 14 OCT 2026
# ============================================================================
"""
Target Model

A Target is a named HTTP endpoint in the monitoring registry.

Maps to: fleetwatch.targets table

Lifecycle:
    1. Created with status=Unknown on explicit registration
    2. Status rewritten in place after every health check cycle
    3. Destroyed by explicit removal (by name)
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from core.contracts import TargetStatus

MAX_NAME_LENGTH = 128
MAX_URL_LENGTH = 2048


class Target(BaseModel):
    """A monitored endpoint. ``name`` is the unique, immutable key."""

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH, description="Unique target name")
    url: str = Field(..., min_length=1, max_length=MAX_URL_LENGTH, description="Endpoint to probe")
    status: TargetStatus = Field(default=TargetStatus.UNKNOWN)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_checked_at: Optional[datetime] = Field(
        default=None,
        description="When the orchestrator last wrote a status for this target"
    )
