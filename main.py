# ============================================================================
# FLEETWATCH - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Main application with health checks and deployment tracking
# CREATED: 17 OCT 2026
# ============================================================================
"""
FleetWatch Main Application

FastAPI application that:
1. Provides an HTTP API for the target registry, health status and deployments
2. Renders the dashboard
3. Optionally runs health check cycles in the background

Usage:
    uvicorn main:app --host 0.0.0.0 --port 3000
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from __version__ import __version__, BUILD_DATE, CODENAME
from core.config import get_config
from repositories.database import init_pool, close_pool
from repositories import TargetRepository, SnapshotRepository, DeploymentRepository
from orchestrator import ProbeExecutor, HealthCheckOrchestrator, MonitorLoop
from services import RegistryService, DeploymentTracker, Notifier
from api.routes import router, public_router, set_services
from api.ui_routes import router as ui_router, set_ui_services
from health import health_router, set_health_services

# Configure logging using our structured logging system
from core.logging import configure_logging

configure_logging(
    level=get_config().log_level,
    json_output=get_config().log_format.lower() == "json",
)
logger = logging.getLogger(__name__)

# Global instances
_deployment_tracker: DeploymentTracker = None
_monitor_loop: MonitorLoop = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Initializes services on startup, cleans up on shutdown.
    """
    global _deployment_tracker, _monitor_loop

    config = get_config()
    logger.info(f"Starting {CODENAME} v{__version__} (Build {BUILD_DATE})")

    # Initialize database pool
    pool = await init_pool()
    logger.info("Database pool initialized")

    # Bootstrap schema on startup (idempotent)
    if config.database.auto_bootstrap:
        logger.info("Auto-bootstrap enabled, deploying schema...")
        try:
            from infrastructure import DatabaseInitializer
            initializer = DatabaseInitializer(pool)
            result = await initializer.initialize_all(dry_run=False)
            if result.success:
                logger.info("Schema bootstrap completed successfully")
            else:
                logger.warning(f"Schema bootstrap had issues: {result.errors}")
        except Exception as e:
            logger.warning(f"Schema bootstrap failed (may already exist): {e}")

    # Repositories
    target_repo = TargetRepository(pool)
    snapshot_repo = SnapshotRepository(pool)
    deployment_repo = DeploymentRepository(pool)

    # Health check orchestration
    probe_executor = ProbeExecutor(
        timeout_seconds=config.probe.timeout_seconds,
        accept_any_status=config.probe.accept_any_status,
        user_agent=config.probe.user_agent,
    )
    orchestrator = HealthCheckOrchestrator(
        target_repo,
        snapshot_repo,
        probe_executor,
        timeout_seconds=config.probe.timeout_seconds,
    )

    # Services
    registry_service = RegistryService(target_repo)
    _deployment_tracker = DeploymentTracker(
        deployment_repo,
        simulation_seconds=config.deployment.simulation_seconds,
    )
    notifier = Notifier(
        webhook_url=config.notification.webhook_url,
        timeout_seconds=config.notification.timeout_seconds,
    )
    if not notifier.is_configured:
        logger.warning("SLACK_WEBHOOK_URL not set, notifications will be skipped")
    if not config.api.api_key:
        logger.warning("API_KEY not set, authenticated routes will refuse every request")

    # Set services for API routes
    set_services(
        registry_service=registry_service,
        orchestrator=orchestrator,
        deployment_tracker=_deployment_tracker,
        notifier=notifier,
        snapshot_repo=snapshot_repo,
    )

    # Set services for UI routes
    set_ui_services(
        orchestrator=orchestrator,
        deployment_tracker=_deployment_tracker,
        snapshot_repo=snapshot_repo,
    )

    # Periodic monitoring (disabled when the interval is 0)
    interval = config.probe.monitor_interval_seconds
    if interval > 0:
        _monitor_loop = MonitorLoop(orchestrator, interval)
        await _monitor_loop.start()
    else:
        logger.info("Periodic monitoring disabled (MONITOR_INTERVAL_SECONDS=0)")

    set_health_services(pool, orchestrator, _deployment_tracker, _monitor_loop)

    yield

    # Shutdown
    logger.info(f"Shutting down {CODENAME}...")

    if _monitor_loop:
        await _monitor_loop.stop()
    await _deployment_tracker.aclose()
    await close_pool()

    logger.info(f"{CODENAME} stopped")


# Create FastAPI app
app = FastAPI(
    title=CODENAME,
    description="Fleet health monitoring and deployment tracking",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include health check routes (no prefix - /livez, /readyz, /health)
app.include_router(health_router)

# Include API routes
app.include_router(public_router, prefix="/api/v1")
app.include_router(router, prefix="/api/v1")

# Include UI routes
app.include_router(ui_router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": CODENAME,
        "version": __version__,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
        "dashboard": "/dashboard",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    api = get_config().api

    uvicorn.run(
        "main:app",
        host=api.host,
        port=api.port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
