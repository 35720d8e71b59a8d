# ============================================================================
# NOTIFIER
# ============================================================================
# STATUS: Core - Outbound status notifications
# PURPOSE: Best-effort webhook delivery of status reports
# CREATED: 16 OCT 2026
# ============================================================================
"""
Notifier

Posts ``{"text": message}`` to a chat webhook (Slack incoming-webhook
format). Delivery is fire-and-forget: failures are logged, never raised.
With no webhook configured, notify() logs and returns.
"""

import json
import logging
from typing import Optional

import httpx

from core.contracts import PipelineStatus
from core.errors import NotificationFailure
from core.models import Snapshot

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


def format_status_message(pipeline_status: PipelineStatus, snapshot: Snapshot) -> str:
    """Build the status report text sent by POST /notify."""
    return (
        f"CI/CD Status: {pipeline_status.value}\n"
        f"Server Health: {json.dumps(snapshot.statuses_dict())}"
    )


class Notifier:
    """Sends status messages to the configured webhook."""

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.webhook_url = webhook_url
        self.timeout_seconds = timeout_seconds

    @property
    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    async def notify(self, message: str) -> None:
        """
        Send a message. Fire-and-forget - logs errors but doesn't raise.

        Args:
            message: Text to deliver
        """
        if not self.is_configured:
            logger.info("No webhook configured, notification skipped")
            return

        try:
            await self._deliver(message)
            logger.info("Notification delivered")
        except NotificationFailure as e:
            logger.warning(f"Notification failed: {e}")
        except Exception as e:
            logger.warning(f"Unexpected error sending notification: {e}")

    async def _deliver(self, message: str) -> None:
        """
        POST the message to the webhook.

        Raises:
            NotificationFailure: On connection errors or a non-2xx reply
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(self.webhook_url, json={"text": message})
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotificationFailure(
                f"Webhook returned {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NotificationFailure(str(e) or type(e).__name__) from e


__all__ = ["Notifier", "format_status_message"]
