# ============================================================================
# DEPLOYMENT TRACKER
# ============================================================================
# STATUS: Core - Simulated deployment lifecycle
# PURPOSE: Record deployments and drive the pipeline status
# CREATED: 16 OCT 2026
# ============================================================================
"""
Deployment Tracker

start(version):
    1. Pipeline status -> in_progress
    2. Persist a Deployment (status=in_progress)
    3. Schedule a completion task that, after the simulation delay,
       persists status=success and sets the pipeline status to success.
       A failed write is logged and the pipeline still reports success.
    4. Return the in_progress Deployment immediately

Each deployment owns its completion task; overlapping deployments run
independently. The pipeline status is a single cell and the last write
wins, so an earlier deployment finishing can report success while a
later one is still in progress.
"""

import asyncio
import logging
from typing import Dict, List, Optional

from core.contracts import DeploymentStatus, PipelineStatus
from core.errors import PersistenceFailure, ValidationError
from core.logging import log_checkpoint, log_context
from core.models import MAX_VERSION_LENGTH, Deployment
from repositories import DeploymentRepository

logger = logging.getLogger(__name__)

DEFAULT_SIMULATION_SECONDS = 2.0


class PipelineState:
    """Holds the current pipeline status. Starts as success."""

    def __init__(self, initial: PipelineStatus = PipelineStatus.SUCCESS):
        self._status = initial

    def get(self) -> PipelineStatus:
        return self._status

    def set(self, status: PipelineStatus) -> None:
        if status != self._status:
            logger.debug(f"Pipeline status {self._status.value} -> {status.value}")
        self._status = status


class DeploymentTracker:
    """Service for starting deployments and tracking their completion."""

    def __init__(
        self,
        deployment_repo: DeploymentRepository,
        simulation_seconds: float = DEFAULT_SIMULATION_SECONDS,
        pipeline: Optional[PipelineState] = None,
    ):
        """
        Initialize deployment tracker.

        Args:
            deployment_repo: Deployment store
            simulation_seconds: Delay before a deployment completes
            pipeline: Pipeline status cell (a fresh one by default)
        """
        self.deployment_repo = deployment_repo
        self.simulation_seconds = simulation_seconds
        self.pipeline = pipeline or PipelineState()

        # Completion tasks by deployment_id
        self._pending: Dict[int, asyncio.Task] = {}

    @property
    def pipeline_status(self) -> PipelineStatus:
        return self.pipeline.get()

    @property
    def pending(self) -> int:
        """Number of deployments awaiting completion."""
        return len(self._pending)

    async def start(self, version: Optional[str]) -> Deployment:
        """
        Start a simulated deployment.

        Args:
            version: Caller-supplied version label

        Returns:
            The persisted in_progress Deployment

        Raises:
            ValidationError: If version is missing, blank or too long
            PersistenceFailure: If the deployment cannot be recorded
        """
        version = (version or "").strip()
        if not version:
            raise ValidationError("Version is required", field="version")
        if len(version) > MAX_VERSION_LENGTH:
            raise ValidationError(
                f"Version must be at most {MAX_VERSION_LENGTH} characters",
                field="version",
            )

        pending = Deployment(version=version)
        previous = self.pipeline.get()
        self.pipeline.set(PipelineStatus.IN_PROGRESS)

        try:
            deployment = await self.deployment_repo.create(pending)
        except Exception as e:
            self.pipeline.set(previous)
            logger.error(f"Failed to record deployment of {version}: {e}")
            raise PersistenceFailure(
                f"Failed to record deployment: {e}",
                operation="create_deployment",
            ) from e

        deployment_id = deployment.deployment_id
        with log_context(deployment_id=deployment_id, component="deployment"):
            log_checkpoint("deployment_started", {"version": version}, logger=logger)

            task = asyncio.create_task(
                self._complete_after_delay(deployment_id),
                name=f"deployment-{deployment_id}",
            )
        self._pending[deployment_id] = task
        task.add_done_callback(lambda _t: self._pending.pop(deployment_id, None))

        return deployment.model_copy()

    async def _complete_after_delay(self, deployment_id: int) -> None:
        await asyncio.sleep(self.simulation_seconds)

        updated = False
        try:
            updated = await self.deployment_repo.mark_success(deployment_id)
        except Exception as e:
            logger.error(f"Failed to record completion of deployment {deployment_id}: {e}")

        # The pipeline finishes even if the record stays in_progress
        self.pipeline.set(PipelineStatus.SUCCESS)
        log_checkpoint(
            "deployment_completed",
            {"status": DeploymentStatus.SUCCESS.value, "updated": updated},
            logger=logger,
        )

    async def get(self, deployment_id: int) -> Optional[Deployment]:
        return await self.deployment_repo.get(deployment_id)

    async def history(self) -> List[Deployment]:
        """All deployments in creation order."""
        return await self.deployment_repo.list_all()

    async def aclose(self) -> None:
        """Wait for outstanding completion tasks."""
        tasks = list(self._pending.values())
        if not tasks:
            return

        logger.info(f"Waiting for {len(tasks)} pending deployment(s) to complete")
        await asyncio.gather(*tasks, return_exceptions=True)

    @property
    def stats(self) -> Dict[str, object]:
        return {
            "pipeline_status": self.pipeline.get().value,
            "pending": len(self._pending),
            "simulation_seconds": self.simulation_seconds,
        }


__all__ = ["PipelineState", "DeploymentTracker", "DEFAULT_SIMULATION_SECONDS"]
