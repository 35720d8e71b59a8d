# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# STATUS: Core - Database access layer
# PURPOSE: Persistence for targets, snapshots and deployments
# CREATED: 14 OCT 2026
# ============================================================================
"""
Repositories Module

Provides database access for FleetWatch entities.
Uses psycopg3 async with connection pooling.

Usage:
    from repositories import get_pool, TargetRepository

    pool = await get_pool()
    target_repo = TargetRepository(pool)
    targets = await target_repo.list_all()
"""

from .database import get_pool, init_pool, close_pool
from .target_repo import TargetRepository
from .snapshot_repo import SnapshotRepository
from .deployment_repo import DeploymentRepository

__all__ = [
    "get_pool",
    "init_pool",
    "close_pool",
    "TargetRepository",
    "SnapshotRepository",
    "DeploymentRepository",
]
