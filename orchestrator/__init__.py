# ============================================================================
# ORCHESTRATOR MODULE
# ============================================================================
# STATUS: Core - Health check orchestration engine
# PURPOSE: Probe the target registry and record snapshots
# CREATED: 15 OCT 2026
# ============================================================================
"""
Orchestrator Module

The health check orchestration engine.

Usage:
    from orchestrator import HealthCheckOrchestrator, ProbeExecutor

    orchestrator = HealthCheckOrchestrator(target_repo, snapshot_repo, ProbeExecutor())
    snapshot = await orchestrator.run_cycle()
"""

from .probe import ProbeExecutor
from .cycle import HealthCheckOrchestrator
from .loop import MonitorLoop

__all__ = ["ProbeExecutor", "HealthCheckOrchestrator", "MonitorLoop"]
