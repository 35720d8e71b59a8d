# ============================================================================
# SNAPSHOT MODEL
# ============================================================================
# STATUS: Core model - Result of one health check cycle
# PURPOSE: Immutable per-cycle record appended to the history log
# CREATED: 14 OCT 2026
# ============================================================================
"""
Snapshot Model

A Snapshot captures every target's probe outcome for a single cycle.

Maps to: fleetwatch.health_snapshots table

Snapshots are frozen: once built by the orchestrator they are appended
to the history log and never updated or deleted by the service.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from core.contracts import TargetStatus


class ProbeOutcome(BaseModel):
    """Classified result of probing one target."""

    status: TargetStatus
    reason: Optional[str] = Field(
        default=None,
        description="Short human-readable cause, only set when status is Down"
    )

    model_config = {"frozen": True}

    @classmethod
    def up(cls) -> "ProbeOutcome":
        return cls(status=TargetStatus.UP)

    @classmethod
    def down(cls, reason: Optional[str]) -> "ProbeOutcome":
        return cls(status=TargetStatus.DOWN, reason=reason or "Unknown Error")

    @property
    def is_up(self) -> bool:
        return self.status == TargetStatus.UP

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status.value, "reason": self.reason}


class Snapshot(BaseModel):
    """One health check cycle, keyed by target name."""

    snapshot_id: Optional[int] = Field(default=None, description="Assigned on append")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    statuses: Dict[str, ProbeOutcome] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def up_count(self) -> int:
        return sum(1 for outcome in self.statuses.values() if outcome.is_up)

    @property
    def down_count(self) -> int:
        return len(self.statuses) - self.up_count

    def statuses_dict(self) -> Dict[str, Dict[str, Any]]:
        """Name -> {status, reason} mapping as stored and served."""
        return {name: outcome.to_dict() for name, outcome in self.statuses.items()}
