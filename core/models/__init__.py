# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# CREATED: 14 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

All Pydantic models for FleetWatch. Each model maps to one table in the
fleetwatch schema (see infrastructure/database_initializer.py).
"""

from core.models.target import MAX_NAME_LENGTH, MAX_URL_LENGTH, Target
from core.models.snapshot import ProbeOutcome, Snapshot
from core.models.deployment import MAX_VERSION_LENGTH, Deployment

__all__ = [
    "Target",
    "ProbeOutcome",
    "Snapshot",
    "Deployment",
    "MAX_NAME_LENGTH",
    "MAX_URL_LENGTH",
    "MAX_VERSION_LENGTH",
]
