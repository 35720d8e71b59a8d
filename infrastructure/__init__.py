# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Database schema deployment
# PURPOSE: Bootstrap the fleetwatch schema
# CREATED: 15 OCT 2026
# ============================================================================
"""
Infrastructure module for FleetWatch.

Provides:
- DatabaseInitializer: Create the fleetwatch schema and tables

Usage:
    from infrastructure import DatabaseInitializer

    initializer = DatabaseInitializer(pool)
    result = await initializer.initialize_all()
"""

from infrastructure.database_initializer import (
    DatabaseInitializer,
    InitializationResult,
    StepResult,
    generate_ddl_statements,
)

__all__ = [
    "DatabaseInitializer",
    "InitializationResult",
    "StepResult",
    "generate_ddl_statements",
]
