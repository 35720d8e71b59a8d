# ============================================================================
# DEPLOYMENT REPOSITORY
# ============================================================================
# STATUS: Core - Deployment CRUD operations
# PURPOSE: Database access for the deployments table
# CREATED: 15 OCT 2026
# ============================================================================
"""
Deployment Repository

CRUD operations for simulated deployments.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from core.contracts import DeploymentStatus
from core.models import Deployment
from .database import TABLE_DEPLOYMENTS

logger = logging.getLogger(__name__)


class DeploymentRepository:
    """Repository for Deployment entities."""

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    async def create(self, deployment: Deployment) -> Deployment:
        """
        Persist a new deployment.

        Returns:
            Created deployment with deployment_id populated
        """
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("""
                INSERT INTO {} (version, status, created_at)
                VALUES (%(version)s, %(status)s, %(created_at)s)
                RETURNING deployment_id
                """).format(TABLE_DEPLOYMENTS),
                {
                    "version": deployment.version,
                    "status": deployment.status.value,
                    "created_at": deployment.timestamp,
                },
            )
            row = await result.fetchone()

        deployment.deployment_id = row["deployment_id"]
        logger.info(f"Created deployment {deployment.deployment_id} for version {deployment.version}")
        return deployment

    async def get(self, deployment_id: int) -> Optional[Deployment]:
        """Get a deployment by ID."""
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("SELECT * FROM {} WHERE deployment_id = %s").format(TABLE_DEPLOYMENTS),
                (deployment_id,),
            )
            row = await result.fetchone()

        if row is None:
            return None
        return self._row_to_deployment(row)

    async def mark_success(self, deployment_id: int) -> bool:
        """
        Transition a deployment from in_progress to success.

        The WHERE clause keeps the transition monotonic: a deployment that
        already succeeded is never touched again.

        Returns:
            True if the row transitioned, False if it was not in_progress
        """
        async with self.pool.connection() as conn:
            result = await conn.execute(
                sql.SQL("""
                UPDATE {} SET
                    status = %(success)s,
                    completed_at = %(completed_at)s
                WHERE deployment_id = %(deployment_id)s
                  AND status = %(in_progress)s
                """).format(TABLE_DEPLOYMENTS),
                {
                    "deployment_id": deployment_id,
                    "success": DeploymentStatus.SUCCESS.value,
                    "in_progress": DeploymentStatus.IN_PROGRESS.value,
                    "completed_at": datetime.now(timezone.utc),
                },
            )

        if result.rowcount == 0:
            logger.warning(f"Deployment {deployment_id} was not in_progress, left unchanged")
            return False

        return True

    async def list_all(self) -> List[Deployment]:
        """
        List every deployment.

        Returns:
            Deployments in creation order (oldest first)
        """
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("SELECT * FROM {} ORDER BY deployment_id ASC").format(TABLE_DEPLOYMENTS),
            )
            rows = await result.fetchall()

        return [self._row_to_deployment(row) for row in rows]

    def _row_to_deployment(self, row: dict) -> Deployment:
        """Convert database row to Deployment model."""
        return Deployment(
            deployment_id=row["deployment_id"],
            version=row["version"],
            status=DeploymentStatus(row["status"]),
            timestamp=row["created_at"],
            completed_at=row.get("completed_at"),
        )
