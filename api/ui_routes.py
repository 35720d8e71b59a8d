"""
UI Routes - Jinja2 template rendering for the dashboard.
"""
import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from __version__ import __version__
from core.errors import PersistenceFailure
from .dependencies import rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ui"], dependencies=[Depends(rate_limit)])

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

# Snapshots shown in the dashboard history table
DASHBOARD_LOG_LIMIT = 50

# ============================================================================
# SERVICE REFERENCES (set by main.py)
# ============================================================================

_orchestrator = None
_deployment_tracker = None
_snapshot_repo = None


def set_ui_services(orchestrator, deployment_tracker, snapshot_repo):
    """Set service instances for UI routes."""
    global _orchestrator, _deployment_tracker, _snapshot_repo
    _orchestrator = orchestrator
    _deployment_tracker = deployment_tracker
    _snapshot_repo = snapshot_repo


# ============================================================================
# ROUTES
# ============================================================================

@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    url: Optional[str] = Query(None, description="Ad-hoc URL to check"),
):
    """Render the dashboard: ad-hoc URL check, pipeline status, health, history."""
    if _orchestrator is None or _deployment_tracker is None or _snapshot_repo is None:
        raise HTTPException(500, "Services not initialized")

    url_status = "Unknown"
    if url:
        url_status = await _orchestrator.probe_executor.check_url(url)

    try:
        snapshot = await _orchestrator.run_cycle()
        logs = await _snapshot_repo.list_recent(DASHBOARD_LOG_LIMIT)
        deployments = await _deployment_tracker.history()
    except PersistenceFailure as e:
        raise HTTPException(500, f"Internal Server Error: {e}")
    except Exception as e:
        logger.exception(f"Error rendering dashboard: {e}")
        raise HTTPException(500, f"Internal Server Error: {e}")

    context = {
        "version": __version__,
        "url": url,
        "url_status": url_status,
        "pipeline_status": _deployment_tracker.pipeline_status.value,
        "snapshot": snapshot,
        "logs": logs,
        "deployments": deployments,
    }
    return templates.TemplateResponse(request, "dashboard.html", context)
