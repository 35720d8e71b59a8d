# ============================================================================
# API MODULE
# ============================================================================
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP API for monitoring, registry and deployments
# CREATED: 17 OCT 2026
# ============================================================================
"""
API Module

FastAPI routes for FleetWatch.
"""

from .routes import router, public_router, set_services
from .ui_routes import router as ui_router, set_ui_services
from .schemas import (
    TargetCreate,
    DeployRequest,
    StatusResponse,
    TargetResponse,
)

__all__ = [
    "router",
    "public_router",
    "ui_router",
    "set_services",
    "set_ui_services",
    "TargetCreate",
    "DeployRequest",
    "StatusResponse",
    "TargetResponse",
]
