# ============================================================================
# HEALTH CHECK ROUTER
# ============================================================================
# STATUS: Infrastructure - FastAPI self health endpoints
# PURPOSE: Liveness, readiness and runtime statistics for FleetWatch itself
# CREATED: 17 OCT 2026
# ============================================================================
"""
Health Check Router

Self health of the FleetWatch process (not of the monitored targets).

Endpoints:
    GET /livez   - Liveness probe (is the process alive?)
                   Always 200 while the event loop is responsive.

    GET /readyz  - Readiness probe (can we serve requests?)
                   200 if the database answers SELECT 1 within
                   READINESS_TIMEOUT_SECONDS, else 503.

    GET /health  - Runtime statistics: orchestrator, deployment
                   tracker and monitor loop counters.
"""

import asyncio
import logging

from fastapi.responses import JSONResponse
from fastapi import APIRouter

from __version__ import __version__, BUILD_DATE

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["Health"])

READINESS_TIMEOUT_SECONDS = 5.0

# ============================================================================
# SERVICE REFERENCES (set by main.py)
# ============================================================================

_pool = None
_orchestrator = None
_deployment_tracker = None
_monitor_loop = None


def set_health_services(pool, orchestrator=None, deployment_tracker=None, monitor_loop=None):
    """Set the pool and components reported by the health endpoints."""
    global _pool, _orchestrator, _deployment_tracker, _monitor_loop
    _pool = pool
    _orchestrator = orchestrator
    _deployment_tracker = deployment_tracker
    _monitor_loop = monitor_loop


async def _ping_database() -> None:
    async with _pool.connection() as conn:
        await conn.execute("SELECT 1")


# ============================================================================
# LIVENESS PROBE
# ============================================================================

@health_router.get("/livez")
async def liveness_probe():
    """
    Liveness probe.

    No external checks - just confirms the process is responsive.
    """
    return {"status": "alive", "version": __version__, "build_date": BUILD_DATE}


# ============================================================================
# READINESS PROBE
# ============================================================================

@health_router.get("/readyz")
async def readiness_probe():
    """
    Readiness probe.

    The service is ready when the backing database is reachable; every
    route except /livez depends on it.
    """
    if _pool is None:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "Database pool not initialized"},
        )

    try:
        await asyncio.wait_for(_ping_database(), timeout=READINESS_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.warning(f"Readiness check timed out after {READINESS_TIMEOUT_SECONDS}s")
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "Database check timed out"},
        )
    except Exception as e:
        logger.warning(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": f"Database unavailable: {e}"},
        )

    return {"status": "ready"}


# ============================================================================
# RUNTIME STATISTICS
# ============================================================================

@health_router.get("/health")
async def runtime_health():
    """Counters from the running components."""
    return {
        "status": "alive",
        "version": __version__,
        "build_date": BUILD_DATE,
        "orchestrator": _orchestrator.stats if _orchestrator else None,
        "deployments": _deployment_tracker.stats if _deployment_tracker else None,
        "monitor_loop": _monitor_loop.stats if _monitor_loop else None,
    }


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "health_router",
    "set_health_services",
    "READINESS_TIMEOUT_SECONDS",
]
