# ============================================================================
# PROBE EXECUTOR TESTS
# ============================================================================
# STATUS: Tests - Single-target probe classification
# PURPOSE: Verify Up/Down classification and that probe() never raises
# CREATED: 17 OCT 2026
# ============================================================================
"""
Probe Executor Tests

Uses unittest.mock to patch httpx.AsyncClient; no real HTTP traffic.

Run with:
    pytest tests/test_probe.py -v
"""

import asyncio
import time

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from core.contracts import TargetStatus
from orchestrator.probe import ProbeExecutor, UNKNOWN_ERROR


# ============================================================================
# HELPERS
# ============================================================================

def _install_client(mock_client_cls, get):
    """Make httpx.AsyncClient(...) yield a client whose get() is ``get``."""
    client = MagicMock()
    client.get = get
    mock_client_cls.return_value.__aenter__ = AsyncMock(return_value=client)
    mock_client_cls.return_value.__aexit__ = AsyncMock(return_value=False)
    return client


# ============================================================================
# CLASSIFICATION
# ============================================================================

class TestClassify:
    """Tests for ProbeExecutor.classify on received responses."""

    def test_2xx_is_up(self):
        outcome = ProbeExecutor().classify(httpx.Response(200))
        assert outcome.status == TargetStatus.UP
        assert outcome.reason is None

    def test_204_is_up(self):
        assert ProbeExecutor().classify(httpx.Response(204)).is_up

    def test_5xx_is_down_with_reason_phrase(self):
        outcome = ProbeExecutor().classify(httpx.Response(503))
        assert outcome.status == TargetStatus.DOWN
        assert outcome.reason == "Service Unavailable"

    def test_404_is_down(self):
        outcome = ProbeExecutor().classify(httpx.Response(404))
        assert outcome.status == TargetStatus.DOWN
        assert outcome.reason == "Not Found"

    def test_unknown_code_falls_back_to_number(self):
        outcome = ProbeExecutor().classify(httpx.Response(599))
        assert outcome.status == TargetStatus.DOWN
        assert outcome.reason  # never empty

    def test_accept_any_status(self):
        outcome = ProbeExecutor(accept_any_status=True).classify(httpx.Response(500))
        assert outcome.status == TargetStatus.UP


# ============================================================================
# PROBE
# ============================================================================

class TestProbe:
    """Tests for ProbeExecutor.probe end to end with a mocked client."""

    @patch("orchestrator.probe.httpx.AsyncClient")
    def test_successful_probe_is_up(self, mock_client_cls):
        client = _install_client(mock_client_cls, AsyncMock(return_value=httpx.Response(200)))

        outcome = asyncio.run(ProbeExecutor().probe("http://svc/health"))

        assert outcome.status == TargetStatus.UP
        assert outcome.reason is None
        client.get.assert_called_once_with("http://svc/health")

    @patch("orchestrator.probe.httpx.AsyncClient")
    def test_redirects_are_followed(self, mock_client_cls):
        _install_client(mock_client_cls, AsyncMock(return_value=httpx.Response(200)))

        asyncio.run(ProbeExecutor(timeout_seconds=2.0).probe("http://svc/"))

        kwargs = mock_client_cls.call_args.kwargs
        assert kwargs["follow_redirects"] is True
        assert kwargs["timeout"] == 2.0

    @patch("orchestrator.probe.httpx.AsyncClient")
    def test_connection_error_is_down_with_message(self, mock_client_cls):
        _install_client(
            mock_client_cls,
            AsyncMock(side_effect=httpx.ConnectError("Connection refused")),
        )

        outcome = asyncio.run(ProbeExecutor().probe("http://dead:1/"))

        assert outcome.status == TargetStatus.DOWN
        assert outcome.reason == "Connection refused"

    @patch("orchestrator.probe.httpx.AsyncClient")
    def test_httpx_timeout_is_down(self, mock_client_cls):
        _install_client(mock_client_cls, AsyncMock(side_effect=httpx.ReadTimeout("")))

        outcome = asyncio.run(ProbeExecutor(timeout_seconds=3.0).probe("http://slow/"))

        assert outcome.status == TargetStatus.DOWN
        assert outcome.reason == "Timeout after 3.0s"

    @patch("orchestrator.probe.httpx.AsyncClient")
    def test_hanging_request_is_cut_off(self, mock_client_cls):
        async def hang(url):
            await asyncio.sleep(10)

        _install_client(mock_client_cls, hang)

        start = time.monotonic()
        outcome = asyncio.run(ProbeExecutor().probe("http://hang/", timeout=0.1))
        elapsed = time.monotonic() - start

        assert outcome.status == TargetStatus.DOWN
        assert outcome.reason == "Timeout after 0.1s"
        assert elapsed < 2.0

    @patch("orchestrator.probe.httpx.AsyncClient")
    def test_unexpected_error_never_raises(self, mock_client_cls):
        _install_client(mock_client_cls, AsyncMock(side_effect=RuntimeError()))

        outcome = asyncio.run(ProbeExecutor().probe("http://svc/"))

        assert outcome.status == TargetStatus.DOWN
        assert outcome.reason == UNKNOWN_ERROR

    @patch("orchestrator.probe.httpx.AsyncClient")
    def test_server_error_reason(self, mock_client_cls):
        _install_client(mock_client_cls, AsyncMock(return_value=httpx.Response(500)))

        outcome = asyncio.run(ProbeExecutor().probe("http://svc/"))

        assert outcome.status == TargetStatus.DOWN
        assert outcome.reason == "Internal Server Error"

    @patch("orchestrator.probe.httpx.AsyncClient")
    def test_check_url_returns_status_value(self, mock_client_cls):
        _install_client(mock_client_cls, AsyncMock(return_value=httpx.Response(200)))

        assert asyncio.run(ProbeExecutor().check_url("http://svc/")) == "Up"

    def test_invalid_url_is_down(self):
        outcome = asyncio.run(ProbeExecutor(timeout_seconds=0.5).probe("not a url"))

        assert outcome.status == TargetStatus.DOWN
        assert outcome.reason
