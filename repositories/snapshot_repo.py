# ============================================================================
# SNAPSHOT REPOSITORY
# ============================================================================
# STATUS: Core - Health history log
# PURPOSE: Append-only database access for health_snapshots
# CREATED: 15 OCT 2026
# ============================================================================
"""
Snapshot Repository

The history log of health check cycles. Append-only: there is no update
or delete. snapshot_id is a BIGSERIAL, so ordering by it returns
snapshots in the order they were appended.
"""

import logging
from typing import List

from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Json
from psycopg_pool import AsyncConnectionPool

from core.models import ProbeOutcome, Snapshot
from .database import TABLE_SNAPSHOTS

logger = logging.getLogger(__name__)


class SnapshotRepository:
    """Repository for Snapshot entities."""

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    async def append(self, snapshot: Snapshot) -> Snapshot:
        """
        Append a snapshot to the history log.

        Args:
            snapshot: Snapshot produced by a health check cycle

        Returns:
            Stored snapshot with snapshot_id populated
        """
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("""
                INSERT INTO {} (timestamp, statuses)
                VALUES (%(timestamp)s, %(statuses)s)
                RETURNING snapshot_id
                """).format(TABLE_SNAPSHOTS),
                {
                    "timestamp": snapshot.timestamp,
                    "statuses": Json(snapshot.statuses_dict()),
                },
            )
            row = await result.fetchone()

        logger.debug(f"Appended snapshot {row['snapshot_id']} ({len(snapshot.statuses)} targets)")
        return snapshot.model_copy(update={"snapshot_id": row["snapshot_id"]})

    async def list_all(self) -> List[Snapshot]:
        """
        Get the full history log.

        Returns:
            Snapshots in append order (oldest first)
        """
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("SELECT * FROM {} ORDER BY snapshot_id ASC").format(TABLE_SNAPSHOTS),
            )
            rows = await result.fetchall()

        return [self._row_to_snapshot(row) for row in rows]

    async def list_recent(self, limit: int = 20) -> List[Snapshot]:
        """
        Get the most recent snapshots.

        Returns:
            Up to ``limit`` snapshots, newest first
        """
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("""
                SELECT * FROM {}
                ORDER BY snapshot_id DESC
                LIMIT %s
                """).format(TABLE_SNAPSHOTS),
                (limit,),
            )
            rows = await result.fetchall()

        return [self._row_to_snapshot(row) for row in rows]

    def _row_to_snapshot(self, row: dict) -> Snapshot:
        """Convert database row to Snapshot model."""
        statuses = row.get("statuses") or {}
        return Snapshot(
            snapshot_id=row["snapshot_id"],
            timestamp=row["timestamp"],
            statuses={
                name: ProbeOutcome(**outcome)
                for name, outcome in statuses.items()
            },
        )
