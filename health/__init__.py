# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# STATUS: Infrastructure - Self health endpoints
# PURPOSE: Liveness and readiness probes for FleetWatch itself
# CREATED: 17 OCT 2026
# ============================================================================
"""
Health Check Module

- /livez: Process alive (instant)
- /readyz: Database reachable
- /health: Runtime statistics

Usage:
    from health import health_router, set_health_services

    set_health_services(pool, orchestrator, tracker)
    app.include_router(health_router)
"""

from health.router import health_router, set_health_services

__all__ = [
    "health_router",
    "set_health_services",
]
