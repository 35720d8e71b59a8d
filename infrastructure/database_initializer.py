# ============================================================================
# DATABASE INITIALIZER
# ============================================================================
# STATUS: Infrastructure - Schema bootstrap
# PURPOSE: Create the fleetwatch schema and tables idempotently
# CREATED: 15 OCT 2026
# ============================================================================
"""
DatabaseInitializer - schema bootstrap for FleetWatch.

Steps:
1. Connection test
2. Schema + table creation (CREATE ... IF NOT EXISTS, safe to repeat)
3. Table verification

Usage:
    from infrastructure import DatabaseInitializer

    initializer = DatabaseInitializer(pool)
    result = await initializer.initialize_all()

    # Show SQL without executing
    result = await initializer.initialize_all(dry_run=True)
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from repositories.database import (
    SCHEMA,
    TABLE_DEPLOYMENTS,
    TABLE_SNAPSHOTS,
    TABLE_TARGETS,
)

logger = logging.getLogger(__name__)


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class StepResult:
    """Result of a single initialization step."""
    name: str
    status: str  # 'success', 'failed', 'skipped'
    message: str = ""
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class InitializationResult:
    """Complete result of database initialization."""
    timestamp: str
    success: bool
    steps: List[StepResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


# ============================================================================
# DDL
# ============================================================================

def generate_ddl_statements() -> List[sql.Composed]:
    """Build the idempotent DDL for every FleetWatch table."""
    return [
        sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(sql.Identifier(SCHEMA)),
        sql.SQL("""
        CREATE TABLE IF NOT EXISTS {} (
            name VARCHAR(128) PRIMARY KEY,
            url VARCHAR(2048) NOT NULL,
            status VARCHAR(16) NOT NULL DEFAULT 'Unknown',
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            last_checked_at TIMESTAMPTZ
        )
        """).format(TABLE_TARGETS),
        sql.SQL("""
        CREATE TABLE IF NOT EXISTS {} (
            snapshot_id BIGSERIAL PRIMARY KEY,
            timestamp TIMESTAMPTZ NOT NULL DEFAULT now(),
            statuses JSONB NOT NULL
        )
        """).format(TABLE_SNAPSHOTS),
        sql.SQL("""
        CREATE TABLE IF NOT EXISTS {} (
            deployment_id BIGSERIAL PRIMARY KEY,
            version VARCHAR(128) NOT NULL,
            status VARCHAR(16) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            completed_at TIMESTAMPTZ
        )
        """).format(TABLE_DEPLOYMENTS),
    ]


# ============================================================================
# DATABASE INITIALIZER
# ============================================================================

class DatabaseInitializer:
    """
    Database initialization for the fleetwatch schema.

    All operations are idempotent (safe to run on every startup).
    """

    EXPECTED_TABLES = ["targets", "health_snapshots", "deployments"]

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    async def initialize_all(self, dry_run: bool = False) -> InitializationResult:
        """
        Initialize the fleetwatch schema.

        Args:
            dry_run: If True, report the DDL without executing it

        Returns:
            InitializationResult with per-step results
        """
        result = InitializationResult(
            timestamp=datetime.now(timezone.utc).isoformat(),
            success=False,
        )

        logger.info(f"Initializing schema {SCHEMA} ({'DRY RUN' if dry_run else 'EXECUTE'})")

        step = await self._test_connection()
        result.steps.append(step)
        if step.status == "failed":
            result.errors.append(f"Connection failed: {step.error}")
            return result

        step = await self._deploy_schema(dry_run=dry_run)
        result.steps.append(step)
        if step.status == "failed":
            result.errors.append(f"Schema deployment failed: {step.error}")
            return result

        if not dry_run:
            step = await self._verify_tables()
            result.steps.append(step)
            if step.status == "failed":
                result.errors.append(f"Verification failed: {step.error}")

        result.success = not result.errors
        logger.info(
            f"Schema initialization {'complete' if result.success else 'FAILED'} "
            f"({len(result.steps)} steps)"
        )
        return result

    async def _test_connection(self) -> StepResult:
        """Check that the database answers."""
        step = StepResult(name="test_connection", status="pending")

        try:
            async with self.pool.connection() as conn:
                conn.row_factory = dict_row
                result = await conn.execute("SELECT current_database() AS db")
                row = await result.fetchone()
            step.status = "success"
            step.message = f"Connected to {row['db']}"
        except Exception as e:
            step.status = "failed"
            step.error = str(e)
            step.message = f"Connection failed: {e}"
            logger.error(f"Connection test failed: {e}")

        return step

    async def _deploy_schema(self, dry_run: bool = False) -> StepResult:
        """Execute the DDL statements in one transaction."""
        step = StepResult(name="deploy_schema", status="pending")
        statements = generate_ddl_statements()

        if dry_run:
            step.status = "success"
            step.message = f"[DRY RUN] Would execute {len(statements)} statements"
            step.details = {"statements_count": len(statements)}
            return step

        try:
            async with self.pool.connection() as conn:
                async with conn.transaction():
                    for statement in statements:
                        await conn.execute(statement)
            step.status = "success"
            step.message = f"Executed {len(statements)} statements"
        except Exception as e:
            step.status = "failed"
            step.error = str(e)
            step.message = f"Schema deployment failed: {e}"
            logger.exception(f"Schema deployment failed: {e}")

        return step

    async def _verify_tables(self) -> StepResult:
        """Check that every expected table exists."""
        step = StepResult(name="verify_tables", status="pending")

        try:
            async with self.pool.connection() as conn:
                conn.row_factory = dict_row
                result = await conn.execute(
                    """
                    SELECT table_name FROM information_schema.tables
                    WHERE table_schema = %s
                    """,
                    (SCHEMA,),
                )
                rows = await result.fetchall()

            found = {row["table_name"] for row in rows}
            missing = [t for t in self.EXPECTED_TABLES if t not in found]
            step.details = {"found": sorted(found), "missing": missing}

            if missing:
                step.status = "failed"
                step.error = f"Missing tables: {', '.join(missing)}"
            else:
                step.status = "success"
                step.message = f"All {len(self.EXPECTED_TABLES)} tables present"
        except Exception as e:
            step.status = "failed"
            step.error = str(e)

        return step


__all__ = [
    "StepResult",
    "InitializationResult",
    "DatabaseInitializer",
    "generate_ddl_statements",
]
