# ============================================================================
# HEALTH CHECK ORCHESTRATOR
# ============================================================================
# STATUS: Core - One health check cycle across the whole registry
# PURPOSE: Fan out probes, aggregate a snapshot, persist results
# CREATED: 15 OCT 2026
# ============================================================================
"""
Health Check Orchestrator

One cycle:
1. Read the full target list (a single point-in-time query)
2. Probe every target concurrently, each bounded by the probe timeout
3. Collect outcomes into a Snapshot keyed by target name
4. Write each status back to the registry (best-effort, per target)
5. Append the Snapshot to the history log
6. Return the Snapshot

Failure semantics:
- Registry read failure aborts the cycle with PersistenceFailure;
  nothing is appended to the history log.
- A probe failure becomes that target's Down outcome.
- A status write failure is logged and skipped.
- A history append failure is logged; the Snapshot is still returned.

Because probes run concurrently, a cycle takes roughly as long as the
slowest single probe, never the sum of all probes.
"""

import asyncio
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.errors import PersistenceFailure
from core.logging import log_checkpoint, log_context
from core.models import ProbeOutcome, Snapshot, Target
from orchestrator.probe import ProbeExecutor, DEFAULT_TIMEOUT_SECONDS
from repositories import SnapshotRepository, TargetRepository

logger = logging.getLogger(__name__)


class HealthCheckOrchestrator:
    """
    Runs health check cycles over the target registry.

    Safe to call run_cycle() concurrently: cycles share no mutable state
    beyond the statistics counters and the latest-snapshot pointer.
    """

    # Extra time allowed on top of the probe timeout before a probe is cut off
    PROBE_GRACE_SECONDS = 0.5

    def __init__(
        self,
        target_repo: TargetRepository,
        snapshot_repo: SnapshotRepository,
        probe_executor: Optional[ProbeExecutor] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """
        Initialize orchestrator.

        Args:
            target_repo: Registry store
            snapshot_repo: History log
            probe_executor: Probe implementation (defaults to ProbeExecutor)
            timeout_seconds: Per-target probe timeout
        """
        self.target_repo = target_repo
        self.snapshot_repo = snapshot_repo
        self.probe_executor = probe_executor or ProbeExecutor(timeout_seconds=timeout_seconds)
        self.timeout_seconds = timeout_seconds

        # Metrics
        self._cycles = 0
        self._failed_cycles = 0
        self._status_write_errors = 0
        self._last_cycle_at: Optional[datetime] = None
        self._last_duration_ms: Optional[float] = None
        self._latest: Optional[Snapshot] = None

    @property
    def latest(self) -> Optional[Snapshot]:
        """Most recent snapshot produced by this process, if any."""
        return self._latest

    async def run_cycle(self) -> Snapshot:
        """
        Run one health check cycle.

        Returns:
            Snapshot covering every target registered at cycle start

        Raises:
            PersistenceFailure: If the registry cannot be read
        """
        cycle_id = uuid.uuid4().hex[:8]

        with log_context(cycle_id=cycle_id, component="monitor"):
            start_time = time.monotonic()

            try:
                targets = await self.target_repo.list_all()
            except Exception as e:
                self._failed_cycles += 1
                logger.error(f"Health check aborted, registry read failed: {e}")
                raise PersistenceFailure(
                    f"Failed to read target registry: {e}",
                    operation="list_targets",
                ) from e

            logger.debug(f"Probing {len(targets)} targets (timeout={self.timeout_seconds}s)")

            outcomes = await asyncio.gather(
                *(self._probe_target(target) for target in targets)
            )
            statuses: Dict[str, ProbeOutcome] = {
                target.name: outcome
                for target, outcome in zip(targets, outcomes)
            }

            snapshot = Snapshot(
                timestamp=datetime.now(timezone.utc),
                statuses=statuses,
            )

            await self._write_statuses(statuses)
            snapshot = await self._append(snapshot)

            duration_ms = (time.monotonic() - start_time) * 1000
            self._cycles += 1
            self._last_cycle_at = snapshot.timestamp
            self._last_duration_ms = duration_ms
            self._latest = snapshot

            log_checkpoint(
                "cycle_completed",
                {
                    "targets": len(statuses),
                    "up": snapshot.up_count,
                    "down": snapshot.down_count,
                    "duration_ms": round(duration_ms, 1),
                },
                logger=logger,
            )

            return snapshot

    async def _probe_target(self, target: Target) -> ProbeOutcome:
        """Probe one target; always returns an outcome."""
        with log_context(target=target.name):
            try:
                return await asyncio.wait_for(
                    self.probe_executor.probe(target.url, self.timeout_seconds),
                    timeout=self.timeout_seconds + self.PROBE_GRACE_SECONDS,
                )
            except asyncio.TimeoutError:
                logger.warning(f"Timed out after {self.timeout_seconds}s")
                return ProbeOutcome.down(f"Timeout after {self.timeout_seconds}s")
            except Exception as e:
                logger.error(f"Check failed unexpectedly: {e}")
                return ProbeOutcome.down(str(e))

    async def _write_statuses(self, statuses: Dict[str, ProbeOutcome]) -> None:
        """Persist each target's status; failures are logged, not raised."""
        names: List[str] = list(statuses)
        results = await asyncio.gather(
            *(self.target_repo.update_status(name, statuses[name].status) for name in names),
            return_exceptions=True,
        )

        for name, result in zip(names, results):
            if isinstance(result, Exception):
                self._status_write_errors += 1
                logger.warning(f"Failed to persist status for {name}: {result}")

    async def _append(self, snapshot: Snapshot) -> Snapshot:
        """Append to the history log; on failure keep the unsaved snapshot."""
        try:
            return await self.snapshot_repo.append(snapshot)
        except Exception as e:
            logger.error(f"Failed to append snapshot to history log: {e}")
            return snapshot

    @property
    def stats(self) -> Dict[str, Any]:
        """Get orchestrator statistics."""
        return {
            "cycles": self._cycles,
            "failed_cycles": self._failed_cycles,
            "status_write_errors": self._status_write_errors,
            "last_cycle_at": self._last_cycle_at.isoformat() if self._last_cycle_at else None,
            "last_duration_ms": round(self._last_duration_ms, 1) if self._last_duration_ms is not None else None,
            "probe_timeout_seconds": self.timeout_seconds,
        }


__all__ = ["HealthCheckOrchestrator"]
