# ============================================================================
# PROBE EXECUTOR
# ============================================================================
# STATUS: Core - Single-target network check
# PURPOSE: Bounded-timeout HTTP probe classified as Up or Down
# CREATED: 15 OCT 2026
# ============================================================================
"""
Probe Executor

Performs one GET against a target URL and classifies the result.

Classification:
    2xx response (after redirects)     -> Up, reason None
    other response                     -> Down, reason = HTTP reason phrase
    timeout / connection / URL error   -> Down, reason = error message
    nothing usable                     -> Down, reason = "Unknown Error"

probe() never raises: transport failures are raised internally as
TransientProbeFailure and converted to a Down outcome at the boundary.
There are no retries; the health check orchestrator owns cycling.
"""

import asyncio
import logging
from typing import Optional

import httpx

from core.errors import TransientProbeFailure
from core.models import ProbeOutcome

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 3.0
UNKNOWN_ERROR = "Unknown Error"


class ProbeExecutor:
    """
    Probes target URLs with a bounded timeout.

    A fresh httpx.AsyncClient is opened per probe, so probes share no
    state and can run concurrently.
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        accept_any_status: bool = False,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize probe executor.

        Args:
            timeout_seconds: Default per-probe timeout
            accept_any_status: Classify every received response as Up
            user_agent: Optional User-Agent header for probe requests
        """
        self.timeout_seconds = timeout_seconds
        self.accept_any_status = accept_any_status
        self._headers = {"User-Agent": user_agent} if user_agent else {}

    async def probe(self, url: str, timeout: Optional[float] = None) -> ProbeOutcome:
        """
        Probe a single URL.

        Args:
            url: Endpoint to GET
            timeout: Override for the default timeout (seconds)

        Returns:
            ProbeOutcome (never raises)
        """
        timeout = timeout or self.timeout_seconds

        try:
            response = await self._fetch(url, timeout)
        except TransientProbeFailure as e:
            logger.debug(f"Probe of {url} failed: {e.reason}")
            return ProbeOutcome.down(e.reason)
        except Exception as e:
            logger.warning(f"Unexpected error probing {url}: {e}")
            return ProbeOutcome.down(str(e) or UNKNOWN_ERROR)

        return self.classify(response)

    async def check_url(self, url: str) -> str:
        """Ad-hoc check returning just the status value ("Up" / "Down")."""
        outcome = await self.probe(url)
        return outcome.status.value

    def classify(self, response: httpx.Response) -> ProbeOutcome:
        """Classify a received response."""
        if self.accept_any_status or response.is_success:
            return ProbeOutcome.up()

        reason = response.reason_phrase or f"HTTP {response.status_code}"
        return ProbeOutcome.down(reason)

    async def _fetch(self, url: str, timeout: float) -> httpx.Response:
        """
        GET the URL, bounding the whole exchange by ``timeout``.

        httpx timeouts apply per phase (connect, read, ...), so the request
        is also wrapped in asyncio.wait_for to cap total duration.

        Raises:
            TransientProbeFailure: On timeout, connection or URL errors
        """
        try:
            async with httpx.AsyncClient(
                timeout=timeout,
                follow_redirects=True,
                headers=self._headers,
            ) as client:
                return await asyncio.wait_for(client.get(url), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise TransientProbeFailure(url, f"Timeout after {timeout}s") from e
        except httpx.TimeoutException as e:
            raise TransientProbeFailure(url, str(e) or f"Timeout after {timeout}s") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransientProbeFailure(url, str(e) or type(e).__name__) from e


__all__ = [
    "ProbeExecutor",
    "DEFAULT_TIMEOUT_SECONDS",
    "UNKNOWN_ERROR",
]
