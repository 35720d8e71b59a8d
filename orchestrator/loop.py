# ============================================================================
# MONITOR LOOP
# ============================================================================
# STATUS: Core - Periodic background health checks
# PURPOSE: Run a health check cycle on a fixed interval
# CREATED: 16 OCT 2026
# ============================================================================
"""
Monitor Loop

Runs HealthCheckOrchestrator.run_cycle() every ``interval`` seconds as a
background task of the FastAPI application. Enabled when
MONITOR_INTERVAL_SECONDS > 0.

A failed cycle is logged and counted; the loop keeps going. On-demand
cycles (GET /api/v1/status, POST /api/v1/notify) run independently of
this loop.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from orchestrator.cycle import HealthCheckOrchestrator

logger = logging.getLogger(__name__)


class MonitorLoop:
    """Background task driving periodic health check cycles."""

    def __init__(
        self,
        orchestrator: HealthCheckOrchestrator,
        interval: float,
    ):
        """
        Initialize monitor loop.

        Args:
            orchestrator: Health check orchestrator to drive
            interval: Seconds between cycle starts
        """
        self.orchestrator = orchestrator
        self.interval = interval

        # State
        self._running = False
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

        # Metrics
        self._started_at: Optional[datetime] = None
        self._cycles = 0
        self._errors = 0

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the background loop."""
        if self._running:
            logger.warning("Monitor loop already running")
            return

        self._running = True
        self._started_at = datetime.now(timezone.utc)
        self._stop_event.clear()

        self._task = asyncio.create_task(self._main_loop(), name="monitor-loop")
        logger.info(f"Monitor loop started (interval={self.interval}s)")

    async def stop(self) -> None:
        """Stop the loop and wait for the current cycle to wind down."""
        if not self._running:
            return

        self._running = False
        self._stop_event.set()

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info(f"Monitor loop stopped (cycles={self._cycles}, errors={self._errors})")

    async def _main_loop(self) -> None:
        while self._running and not self._stop_event.is_set():
            try:
                await self.orchestrator.run_cycle()
                self._cycles += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._errors += 1
                logger.error(f"Scheduled health check failed: {e}")

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

    @property
    def stats(self) -> Dict[str, Any]:
        """Get loop statistics."""
        uptime_seconds = None
        if self._started_at:
            uptime_seconds = (datetime.now(timezone.utc) - self._started_at).total_seconds()

        return {
            "running": self._running,
            "interval_seconds": self.interval,
            "started_at": self._started_at.isoformat() if self._started_at else None,
            "uptime_seconds": uptime_seconds,
            "cycles": self._cycles,
            "errors": self._errors,
        }


__all__ = ["MonitorLoop"]
