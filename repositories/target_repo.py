# ============================================================================
# TARGET REPOSITORY
# ============================================================================
# STATUS: Core - Target registry CRUD operations
# PURPOSE: Database access for the targets table
# CREATED: 14 OCT 2026
# ============================================================================
"""
Target Repository

The registry store of monitored targets.

Every method is a single SQL statement, so each call is atomic on its own:
- add inserts with ON CONFLICT on the primary key, so two concurrent adds of the
  same name cannot both succeed
- update_status matches by name, so an update racing a remove simply
  touches zero rows
"""

import logging
from datetime import datetime, timezone
from typing import List

from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from core.contracts import TargetStatus
from core.errors import DuplicateError, NotFoundError
from core.models import Target
from .database import TABLE_TARGETS

logger = logging.getLogger(__name__)


class TargetRepository:
    """Repository for Target entities."""

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    async def add(self, name: str, url: str) -> Target:
        """
        Register a new target with status Unknown.

        Args:
            name: Unique target name
            url: Endpoint to probe

        Returns:
            Created Target

        Raises:
            DuplicateError: If a target with this name already exists
        """
        target = Target(name=name, url=url)

        async with self.pool.connection() as conn:
            conn.row_factory = dict_row

            # Insert, skip on conflict
            result = await conn.execute(
                sql.SQL("""
                INSERT INTO {} (name, url, status, created_at)
                VALUES (%(name)s, %(url)s, %(status)s, %(created_at)s)
                ON CONFLICT (name) DO NOTHING
                RETURNING *
                """).format(TABLE_TARGETS),
                {
                    "name": target.name,
                    "url": target.url,
                    "status": target.status.value,
                    "created_at": target.created_at,
                },
            )
            row = await result.fetchone()

        if row is None:
            raise DuplicateError(name)

        logger.info(f"Registered target {name} -> {url}")
        return self._row_to_target(row)

    async def remove(self, name: str) -> Target:
        """
        Remove a target by name.

        Returns:
            The removed Target

        Raises:
            NotFoundError: If no target has this name
        """
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("DELETE FROM {} WHERE name = %s RETURNING *").format(TABLE_TARGETS),
                (name,),
            )
            row = await result.fetchone()

        if row is None:
            raise NotFoundError(name)

        logger.info(f"Removed target {name}")
        return self._row_to_target(row)

    async def list_all(self) -> List[Target]:
        """
        List every registered target.

        A single SELECT, so the result is one consistent point-in-time view.
        """
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("SELECT * FROM {} ORDER BY name ASC").format(TABLE_TARGETS),
            )
            rows = await result.fetchall()

        return [self._row_to_target(row) for row in rows]

    async def update_status(self, name: str, status: TargetStatus) -> bool:
        """
        Write the latest probe status for a target.

        Idempotent. If the target was removed meanwhile this is a no-op.

        Returns:
            True if a row was updated, False if the target no longer exists
        """
        async with self.pool.connection() as conn:
            result = await conn.execute(
                sql.SQL("""
                UPDATE {} SET
                    status = %(status)s,
                    last_checked_at = %(checked_at)s
                WHERE name = %(name)s
                """).format(TABLE_TARGETS),
                {
                    "name": name,
                    "status": status.value,
                    "checked_at": datetime.now(timezone.utc),
                },
            )

        if result.rowcount == 0:
            logger.debug(f"Status update for {name} skipped: target no longer registered")
            return False

        return True

    def _row_to_target(self, row: dict) -> Target:
        """Convert database row to Target model."""
        return Target(
            name=row["name"],
            url=row["url"],
            status=TargetStatus(row["status"]),
            created_at=row["created_at"],
            last_checked_at=row.get("last_checked_at"),
        )
