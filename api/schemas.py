# ============================================================================
# API SCHEMAS
# ============================================================================
# STATUS: Core - Request/Response schemas
# PURPOSE: Pydantic models for API validation
# CREATED: 17 OCT 2026
# ============================================================================
"""
API Schemas

Request and response models for the API.

Request fields are optional at the schema level so that a missing or over-long
field is reported by the service layer as a 400 with a readable message rather
than a framework 422.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from core.contracts import DeploymentStatus, PipelineStatus, TargetStatus


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class TargetCreate(BaseModel):
    """Request to register a target."""
    name: Optional[str] = Field(None, description="Unique target name, at most 128 characters")
    url: Optional[str] = Field(None, description="Endpoint to probe, at most 2048 characters")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"name": "api-eu-1", "url": "https://api-eu-1.example.com/health"}
            ]
        }
    }


class DeployRequest(BaseModel):
    """Request to start a deployment."""
    version: Optional[str] = Field(None, description="Version label, at most 128 characters")

    model_config = {
        "json_schema_extra": {
            "examples": [{"version": "1.2.3"}]
        }
    }


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class TargetResponse(BaseModel):
    """Target registry entry."""
    name: str
    url: str
    status: TargetStatus
    created_at: datetime
    last_checked_at: Optional[datetime] = None


class TargetMutationResponse(BaseModel):
    """Response to adding or removing a target."""
    message: str
    server: TargetResponse


class TargetListResponse(BaseModel):
    """List of registered targets."""
    servers: List[TargetResponse]
    total: int


class ProbeOutcomeResponse(BaseModel):
    status: TargetStatus
    reason: Optional[str] = None


class StatusResponse(BaseModel):
    """Pipeline status plus a fresh health check."""
    pipeline_status: PipelineStatus
    server_health: Dict[str, ProbeOutcomeResponse]
    checked_at: datetime


class SnapshotResponse(BaseModel):
    snapshot_id: Optional[int] = None
    timestamp: datetime
    statuses: Dict[str, ProbeOutcomeResponse]


class DeploymentResponse(BaseModel):
    deployment_id: Optional[int] = None
    version: str
    status: DeploymentStatus
    timestamp: datetime
    completed_at: Optional[datetime] = None


class DeployResponse(BaseModel):
    """Response to starting a deployment."""
    message: str
    status: DeploymentStatus
    version: str
    deployment_id: Optional[int] = None


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str
