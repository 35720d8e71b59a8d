# ============================================================================
# API ROUTE TESTS
# ============================================================================
# STATUS: Tests - HTTP surface
# PURPOSE: Verify status codes, auth, rate limiting and the dashboard
# CREATED: 17 OCT 2026
# ============================================================================
"""
API Route Tests

Uses FastAPI TestClient against a test app that mounts the routers with
mocked services. No database or network.

Run with:
    pytest tests/test_routes.py -v
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.config import reset_config
from core.contracts import DeploymentStatus, PipelineStatus
from core.errors import (
    DuplicateError,
    NotFoundError,
    PersistenceFailure,
    ValidationError,
)
from core.models import Deployment, ProbeOutcome, Snapshot, Target
from api.dependencies import TokenBucketLimiter, reset_rate_limiter
from api.routes import public_router, router, set_services
from api.ui_routes import router as ui_router, set_ui_services
from services.deployment_service import DeploymentTracker
from services.registry_service import RegistryService


API_KEY = "test-key"
AUTH = {"X-API-Key": API_KEY}


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def _env(monkeypatch):
    """Fresh config and rate limiter per test."""
    monkeypatch.setenv("API_KEY", API_KEY)
    monkeypatch.delenv("RATE_LIMIT_MAX_REQUESTS", raising=False)
    reset_config()
    reset_rate_limiter()
    yield
    reset_config()
    reset_rate_limiter()


def _make_snapshot():
    return Snapshot(
        snapshot_id=1,
        statuses={
            "web": ProbeOutcome.up(),
            "db": ProbeOutcome.down("Connection refused"),
        },
    )


def _make_services():
    """Mocked services keyed by set_services argument name."""
    registry = AsyncMock()

    orchestrator = MagicMock()
    orchestrator.run_cycle = AsyncMock(return_value=_make_snapshot())
    orchestrator.probe_executor.check_url = AsyncMock(return_value="Up")

    tracker = MagicMock()
    tracker.pipeline_status = PipelineStatus.SUCCESS
    tracker.start = AsyncMock()
    tracker.history = AsyncMock(return_value=[])

    notifier = MagicMock()
    notifier.notify = AsyncMock(return_value=None)

    snapshot_repo = MagicMock()
    snapshot_repo.list_all = AsyncMock(return_value=[_make_snapshot()])
    snapshot_repo.list_recent = AsyncMock(return_value=[_make_snapshot()])

    return {
        "registry_service": registry,
        "orchestrator": orchestrator,
        "deployment_tracker": tracker,
        "notifier": notifier,
        "snapshot_repo": snapshot_repo,
    }


def _make_test_app(services):
    """Create a test FastAPI app with all routers and mocked services."""
    app = FastAPI()
    app.include_router(public_router, prefix="/api/v1")
    app.include_router(router, prefix="/api/v1")
    app.include_router(ui_router)
    set_services(**services)
    set_ui_services(
        orchestrator=services["orchestrator"],
        deployment_tracker=services["deployment_tracker"],
        snapshot_repo=services["snapshot_repo"],
    )
    return app


def _client(services=None):
    services = services or _make_services()
    return TestClient(_make_test_app(services)), services


# ============================================================================
# STATUS
# ============================================================================

class TestStatus:
    """Tests for GET /api/v1/status."""

    def test_status_is_public(self):
        client, _ = _client()

        resp = client.get("/api/v1/status")

        assert resp.status_code == 200
        data = resp.json()
        assert data["pipeline_status"] == "success"
        assert data["server_health"]["web"] == {"status": "Up", "reason": None}
        assert data["server_health"]["db"]["reason"] == "Connection refused"

    def test_status_persistence_failure_is_500(self):
        services = _make_services()
        services["orchestrator"].run_cycle = AsyncMock(side_effect=PersistenceFailure("db down"))
        client, _ = _client(services)

        resp = client.get("/api/v1/status")

        assert resp.status_code == 500
        assert "db down" in resp.json()["detail"]


# ============================================================================
# AUTHENTICATION
# ============================================================================

class TestAuth:

    def test_missing_key_is_403(self):
        client, _ = _client()

        resp = client.get("/api/v1/servers")

        assert resp.status_code == 403
        assert resp.json()["detail"] == "Forbidden: Invalid API Key"

    def test_wrong_key_is_403(self):
        client, _ = _client()
        assert client.get("/api/v1/logs", headers={"X-API-Key": "nope"}).status_code == 403

    def test_unset_api_key_fails_closed(self, monkeypatch):
        monkeypatch.delenv("API_KEY")
        reset_config()
        client, _ = _client()

        assert client.get("/api/v1/servers", headers=AUTH).status_code == 403


# ============================================================================
# SERVERS
# ============================================================================

class TestServers:
    """Tests for /api/v1/servers."""

    def test_add_server_201(self):
        services = _make_services()
        services["registry_service"].add = AsyncMock(
            return_value=Target(name="web", url="http://web/")
        )
        client, _ = _client(services)

        resp = client.post("/api/v1/servers", json={"name": "web", "url": "http://web/"}, headers=AUTH)

        assert resp.status_code == 201
        data = resp.json()
        assert data["message"] == "Server added"
        assert data["server"]["name"] == "web"
        assert data["server"]["status"] == "Unknown"
        services["registry_service"].add.assert_awaited_once_with("web", "http://web/")

    def test_add_duplicate_409(self):
        services = _make_services()
        services["registry_service"].add = AsyncMock(side_effect=DuplicateError("web"))
        client, _ = _client(services)

        resp = client.post("/api/v1/servers", json={"name": "web", "url": "http://x/"}, headers=AUTH)

        assert resp.status_code == 409

    def test_add_missing_fields_400(self):
        services = _make_services()
        services["registry_service"].add = AsyncMock(
            side_effect=ValidationError("Name and URL are required")
        )
        client, _ = _client(services)

        resp = client.post("/api/v1/servers", json={"name": "web"}, headers=AUTH)

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Name and URL are required"
        services["registry_service"].add.assert_awaited_once_with("web", None)

    @pytest.mark.parametrize("body", [
        {"name": "n" * 129, "url": "http://web/"},
        {"name": "web", "url": "http://web/" + "a" * 2048},
        {"name": "eu/web", "url": "http://web/"},
    ])
    def test_add_invalid_name_or_url_400(self, body):
        services = _make_services()
        repo = AsyncMock()
        services["registry_service"] = RegistryService(repo)
        client, _ = _client(services)

        resp = client.post("/api/v1/servers", json=body, headers=AUTH)

        assert resp.status_code == 400
        repo.add.assert_not_awaited()

    def test_remove_server_200(self):
        services = _make_services()
        services["registry_service"].remove = AsyncMock(
            return_value=Target(name="web", url="http://web/")
        )
        client, _ = _client(services)

        resp = client.delete("/api/v1/servers/web", headers=AUTH)

        assert resp.status_code == 200
        assert resp.json()["message"] == "Server removed"

    def test_remove_unknown_404(self):
        services = _make_services()
        services["registry_service"].remove = AsyncMock(side_effect=NotFoundError("ghost"))
        client, _ = _client(services)

        assert client.delete("/api/v1/servers/ghost", headers=AUTH).status_code == 404

    def test_list_servers(self):
        services = _make_services()
        services["registry_service"].list_all = AsyncMock(
            return_value=[Target(name="a", url="http://a/"), Target(name="b", url="http://b/")]
        )
        client, _ = _client(services)

        resp = client.get("/api/v1/servers", headers=AUTH)

        assert resp.status_code == 200
        assert resp.json()["total"] == 2


# ============================================================================
# DEPLOYMENTS
# ============================================================================

class TestDeploy:
    """Tests for /api/v1/deploy and /api/v1/deployments."""

    def test_deploy_returns_in_progress(self):
        services = _make_services()
        services["deployment_tracker"].start = AsyncMock(
            return_value=Deployment(deployment_id=4, version="1.2.3")
        )
        client, _ = _client(services)

        resp = client.post("/api/v1/deploy", json={"version": "1.2.3"}, headers=AUTH)

        assert resp.status_code == 200
        assert resp.json() == {
            "message": "Deployment triggered",
            "status": "in_progress",
            "version": "1.2.3",
            "deployment_id": 4,
        }

    def test_deploy_without_version_400(self):
        services = _make_services()
        services["deployment_tracker"].start = AsyncMock(
            side_effect=ValidationError("Version is required")
        )
        client, _ = _client(services)

        resp = client.post("/api/v1/deploy", json={}, headers=AUTH)

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Version is required"

    def test_deploy_overlong_version_400(self):
        services = _make_services()
        repo = AsyncMock()
        services["deployment_tracker"] = DeploymentTracker(repo, simulation_seconds=0.01)
        client, _ = _client(services)

        resp = client.post("/api/v1/deploy", json={"version": "v" * 129}, headers=AUTH)

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Version must be at most 128 characters"
        repo.create.assert_not_awaited()

    def test_list_deployments(self):
        services = _make_services()
        services["deployment_tracker"].history = AsyncMock(return_value=[
            Deployment(deployment_id=1, version="1.0.0", status=DeploymentStatus.SUCCESS),
        ])
        client, _ = _client(services)

        resp = client.get("/api/v1/deployments", headers=AUTH)

        assert resp.status_code == 200
        assert resp.json()[0]["status"] == "success"


# ============================================================================
# LOGS AND NOTIFY
# ============================================================================

class TestLogsAndNotify:

    def test_logs_returns_snapshots(self):
        client, _ = _client()

        resp = client.get("/api/v1/logs", headers=AUTH)

        assert resp.status_code == 200
        assert resp.json()[0]["statuses"]["web"]["status"] == "Up"

    def test_notify_sends_status_report(self):
        client, services = _client()

        resp = client.post("/api/v1/notify", headers=AUTH)

        assert resp.status_code == 200
        assert resp.json() == {"message": "Notification sent"}
        message = services["notifier"].notify.await_args.args[0]
        assert message.startswith("CI/CD Status: success\nServer Health: ")


# ============================================================================
# RATE LIMITING
# ============================================================================

def test_rate_limit_429(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "2")
    reset_config()
    reset_rate_limiter()
    client, _ = _client()

    assert client.get("/api/v1/status").status_code == 200
    assert client.get("/api/v1/status").status_code == 200
    assert client.get("/api/v1/status").status_code == 429


class _FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestTokenBucketLimiter:

    def test_bucket_refills_over_window(self):
        clock = _FakeClock()
        limiter = TokenBucketLimiter(2, 10, clock=clock)

        assert limiter.allow("1.2.3.4")
        assert limiter.allow("1.2.3.4")
        assert not limiter.allow("1.2.3.4")

        clock.now = 5.0
        assert limiter.allow("1.2.3.4")

    def test_refilled_buckets_are_dropped(self):
        clock = _FakeClock()
        limiter = TokenBucketLimiter(100, 900, clock=clock)

        for i in range(50):
            limiter.allow(f"10.0.0.{i}")
        assert limiter.tracked == 50

        clock.now = 900.0
        limiter.allow("10.0.1.1")

        assert limiter.tracked == 1

    def test_partially_spent_buckets_survive_sweep(self):
        clock = _FakeClock()
        limiter = TokenBucketLimiter(2, 10, clock=clock)

        limiter.allow("idle")
        clock.now = 6.0
        limiter.allow("busy")
        limiter.allow("busy")

        # idle is full again, busy has refilled less than one token
        clock.now = 10.0
        limiter.allow("new")

        assert limiter.tracked == 2
        assert not limiter.allow("busy")


# ============================================================================
# DASHBOARD
# ============================================================================

class TestDashboard:

    def test_dashboard_renders(self):
        client, _ = _client()

        resp = client.get("/dashboard")

        assert resp.status_code == 200
        assert "text/html" in resp.headers["content-type"]
        assert "Dashboard" in resp.text
        assert "Connection refused" in resp.text
        assert "CI/CD Status:</strong> success" in resp.text

    def test_dashboard_ad_hoc_check(self):
        client, services = _client()

        resp = client.get("/dashboard", params={"url": "http://example.com"})

        assert resp.status_code == 200
        services["orchestrator"].probe_executor.check_url.assert_awaited_once_with("http://example.com")
        assert "http://example.com" in resp.text
