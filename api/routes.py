# ============================================================================
# API ROUTES
# ============================================================================
# STATUS: Core - FastAPI route definitions
# PURPOSE: HTTP endpoints for monitoring, registry and deployments
# CREATED: 17 OCT 2026
# ============================================================================
"""
API Routes

FastAPI routes for FleetWatch, mounted under /api/v1.

public_router: GET /status (no authentication)
router:        everything else (X-API-Key required)

Both are rate limited.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from core.errors import (
    DuplicateError,
    NotFoundError,
    PersistenceFailure,
    ValidationError,
)
from core.models import Deployment, Snapshot, Target
from services import format_status_message
from .dependencies import rate_limit, require_api_key
from .schemas import (
    DeployRequest,
    DeployResponse,
    DeploymentResponse,
    ErrorResponse,
    MessageResponse,
    SnapshotResponse,
    StatusResponse,
    TargetCreate,
    TargetListResponse,
    TargetMutationResponse,
    TargetResponse,
)

logger = logging.getLogger(__name__)

public_router = APIRouter(dependencies=[Depends(rate_limit)])
router = APIRouter(dependencies=[Depends(rate_limit), Depends(require_api_key)])


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================
# These will be set by the main app at startup

_registry_service = None
_orchestrator = None
_deployment_tracker = None
_notifier = None
_snapshot_repo = None


def set_services(registry_service, orchestrator, deployment_tracker, notifier, snapshot_repo):
    """Set service instances for dependency injection."""
    global _registry_service, _orchestrator, _deployment_tracker, _notifier, _snapshot_repo
    _registry_service = registry_service
    _orchestrator = orchestrator
    _deployment_tracker = deployment_tracker
    _notifier = notifier
    _snapshot_repo = snapshot_repo


def get_registry_service():
    if _registry_service is None:
        raise HTTPException(500, "Services not initialized")
    return _registry_service


def get_orchestrator():
    if _orchestrator is None:
        raise HTTPException(500, "Orchestrator not initialized")
    return _orchestrator


def get_deployment_tracker():
    if _deployment_tracker is None:
        raise HTTPException(500, "Services not initialized")
    return _deployment_tracker


def get_notifier():
    if _notifier is None:
        raise HTTPException(500, "Notifier not initialized")
    return _notifier


def get_snapshot_repo():
    if _snapshot_repo is None:
        raise HTTPException(500, "Services not initialized")
    return _snapshot_repo


# ============================================================================
# HELPERS
# ============================================================================

def _server_error(e: Exception) -> HTTPException:
    return HTTPException(500, f"Internal Server Error: {e}")


def _target_response(target: Target) -> TargetResponse:
    return TargetResponse(
        name=target.name,
        url=target.url,
        status=target.status,
        created_at=target.created_at,
        last_checked_at=target.last_checked_at,
    )


def _snapshot_response(snapshot: Snapshot) -> SnapshotResponse:
    return SnapshotResponse(
        snapshot_id=snapshot.snapshot_id,
        timestamp=snapshot.timestamp,
        statuses=snapshot.statuses_dict(),
    )


def _deployment_response(deployment: Deployment) -> DeploymentResponse:
    return DeploymentResponse(
        deployment_id=deployment.deployment_id,
        version=deployment.version,
        status=deployment.status,
        timestamp=deployment.timestamp,
        completed_at=deployment.completed_at,
    )


async def _run_cycle() -> Snapshot:
    orchestrator = get_orchestrator()
    try:
        return await orchestrator.run_cycle()
    except PersistenceFailure as e:
        raise _server_error(e)
    except Exception as e:
        logger.exception(f"Health check failed: {e}")
        raise _server_error(e)


# ============================================================================
# STATUS
# ============================================================================

@public_router.get("/status", response_model=StatusResponse, tags=["Monitoring"])
async def get_status():
    """
    Get the pipeline status and a fresh health check of every target.

    Runs one health check cycle synchronously; the snapshot is also
    appended to the history log.
    """
    tracker = get_deployment_tracker()
    snapshot = await _run_cycle()

    return StatusResponse(
        pipeline_status=tracker.pipeline_status,
        server_health=snapshot.statuses_dict(),
        checked_at=snapshot.timestamp,
    )


# ============================================================================
# SERVERS
# ============================================================================

@router.get("/servers", response_model=TargetListResponse, tags=["Servers"])
async def list_servers():
    """List registered targets with their last known status."""
    service = get_registry_service()

    try:
        targets = await service.list_all()
    except Exception as e:
        logger.exception(f"Error listing servers: {e}")
        raise _server_error(e)

    return TargetListResponse(
        servers=[_target_response(t) for t in targets],
        total=len(targets),
    )


@router.post(
    "/servers",
    response_model=TargetMutationResponse,
    status_code=201,
    tags=["Servers"],
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def add_server(request: Optional[TargetCreate] = None):
    """
    Register a target.

    The target starts with status Unknown until the next health check.
    """
    service = get_registry_service()
    request = request or TargetCreate()

    try:
        target = await service.add(request.name, request.url)
    except ValidationError as e:
        raise HTTPException(400, str(e))
    except DuplicateError as e:
        raise HTTPException(409, str(e))
    except Exception as e:
        logger.exception(f"Error adding server: {e}")
        raise _server_error(e)

    return TargetMutationResponse(message="Server added", server=_target_response(target))


@router.delete(
    "/servers/{name}",
    response_model=TargetMutationResponse,
    tags=["Servers"],
    responses={404: {"model": ErrorResponse}},
)
async def remove_server(name: str):
    """Remove a target by name."""
    service = get_registry_service()

    try:
        target = await service.remove(name)
    except NotFoundError as e:
        raise HTTPException(404, str(e))
    except Exception as e:
        logger.exception(f"Error removing server {name}: {e}")
        raise _server_error(e)

    return TargetMutationResponse(message="Server removed", server=_target_response(target))


# ============================================================================
# DEPLOYMENTS
# ============================================================================

@router.post(
    "/deploy",
    response_model=DeployResponse,
    tags=["Deployments"],
    responses={400: {"model": ErrorResponse}},
)
async def trigger_deployment(request: Optional[DeployRequest] = None):
    """
    Start a simulated deployment.

    Returns immediately with status in_progress. The deployment
    transitions to success after the simulation delay.
    """
    tracker = get_deployment_tracker()
    request = request or DeployRequest()

    try:
        deployment = await tracker.start(request.version)
    except ValidationError as e:
        raise HTTPException(400, str(e))
    except PersistenceFailure as e:
        raise _server_error(e)
    except Exception as e:
        logger.exception(f"Error starting deployment: {e}")
        raise _server_error(e)

    return DeployResponse(
        message="Deployment triggered",
        status=deployment.status,
        version=deployment.version,
        deployment_id=deployment.deployment_id,
    )


@router.get("/deployments", response_model=List[DeploymentResponse], tags=["Deployments"])
async def list_deployments():
    """All deployments in creation order."""
    tracker = get_deployment_tracker()

    try:
        deployments = await tracker.history()
    except Exception as e:
        logger.exception(f"Error listing deployments: {e}")
        raise _server_error(e)

    return [_deployment_response(d) for d in deployments]


# ============================================================================
# HISTORY
# ============================================================================

@router.get("/logs", response_model=List[SnapshotResponse], tags=["Monitoring"])
async def list_logs():
    """All health snapshots in the order they were recorded."""
    repo = get_snapshot_repo()

    try:
        snapshots = await repo.list_all()
    except Exception as e:
        logger.exception(f"Error reading health log: {e}")
        raise _server_error(e)

    return [_snapshot_response(s) for s in snapshots]


# ============================================================================
# NOTIFICATIONS
# ============================================================================

@router.post("/notify", response_model=MessageResponse, tags=["Monitoring"])
async def send_notification():
    """
    Run a health check and send the status report to the webhook.

    Delivery is best-effort: a webhook failure is logged and the request
    still succeeds.
    """
    tracker = get_deployment_tracker()
    notifier = get_notifier()

    snapshot = await _run_cycle()
    await notifier.notify(format_status_message(tracker.pipeline_status, snapshot))

    return MessageResponse(message="Notification sent")
